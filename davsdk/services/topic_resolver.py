"""Topic resolution: use a caller-supplied topic or mint and provision one.

A topic request is a tagged variant – either an :class:`ExplicitTopic` that
is used verbatim, or a :class:`GeneratedTopic` that must be created on the log
before anything is published to or read from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from typing import Union

from davsdk.config import Config
from davsdk.core.interfaces import LogClient
from davsdk.exceptions import TopicProvisioningError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExplicitTopic:
    """A topic the caller already owns; never re-provisioned."""

    topic_id: str


@dataclass(frozen=True)
class GeneratedTopic:
    """A topic to mint from *type_tag* and create before first use."""

    type_tag: str


TopicRequest = Union[ExplicitTopic, GeneratedTopic]


def topic_request(type_tag: str, explicit_topic_id: Optional[str] = None) -> TopicRequest:
    """Build the request for *type_tag*, honouring an explicit override."""
    if explicit_topic_id is not None:
        return ExplicitTopic(explicit_topic_id)
    return GeneratedTopic(type_tag)


class TopicResolver:
    """Turns topic requests into ready-to-use topic ids."""

    def __init__(self, log_client: LogClient, config: Config):
        self._log = log_client
        self._config = config

    async def resolve(self, type_tag: str, explicit_topic_id: Optional[str] = None) -> str:
        """Return a provisioned topic id for *type_tag*.

        Args:
            type_tag: Record category used when a topic has to be minted.
            explicit_topic_id: Existing topic to use as-is. No log calls are
                made when given.

        Raises:
            TopicProvisioningError: The log failed to create the minted topic.
        """
        return await self.resolve_request(topic_request(type_tag, explicit_topic_id))

    async def resolve_request(self, request: TopicRequest) -> str:
        if isinstance(request, ExplicitTopic):
            logger.debug(f"Using explicit topic {request.topic_id}")
            return request.topic_id

        topic_id = self._log.generate_topic_id(request.type_tag)
        try:
            await self._log.create_topic(topic_id, self._config)
        except Exception as exc:
            logger.warning(f"Provisioning topic {topic_id} failed: {exc}")
            raise TopicProvisioningError(topic_id, exc) from exc

        logger.info(f"Provisioned {request.type_tag} topic {topic_id}")
        return topic_id
