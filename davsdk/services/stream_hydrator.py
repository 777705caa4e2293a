"""Hydration of log subscriptions into record streams."""

from __future__ import annotations

import logging
from typing import AsyncIterator
from typing import Callable
from typing import TypeVar

from davsdk.config import Config
from davsdk.core.interfaces import LogClient
from davsdk.models.params import BaseParams
from davsdk.streams import RecordStream

logger = logging.getLogger(__name__)

R = TypeVar("R")

HydrateFn = Callable[[str, BaseParams, Config], R]


class StreamHydrator:
    def __init__(self, log_client: LogClient, config: Config):
        self._log = log_client
        self._config = config

    def hydrate(self, topic_id: str, hydrate_fn: HydrateFn) -> RecordStream[R]:
        """Return a stream of ``hydrate_fn(topic_id, params, config)`` records.

        The log subscription is opened per subscriber, not here.  Failures of
        the subscription reach subscribers unchanged.
        """

        async def open_params() -> AsyncIterator[BaseParams]:
            logger.debug(f"Opening params stream on {topic_id}")
            return await self._log.params_stream(topic_id, self._config)

        def to_record(params: BaseParams) -> R:
            return hydrate_fn(topic_id, params, self._config)

        return RecordStream(open_params, to_record, name=topic_id)
