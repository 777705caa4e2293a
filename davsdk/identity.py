"""Identity – the public entry point for publishing and receiving records.

Every network operation follows the same sequence, awaited step by step:

1. resolve a topic (use the caller's, or mint + provision one);
2. either register the record with the registrar (one-shot operations) or
   hand back a hydrated stream over the topic (streaming operations).

A provisioning failure always ends the operation before step 2, so nothing is
posted and no subscription is opened for a topic that does not exist.

The local constructors (:meth:`Identity.need`, :meth:`Identity.bid`,
:meth:`Identity.mission`) never touch the network.
"""

from __future__ import annotations

import logging
from typing import Optional

from davsdk.config import Config
from davsdk.constants import MESSAGES_TOPIC
from davsdk.constants import MISSIONS_TOPIC
from davsdk.constants import NEED_TOPIC
from davsdk.constants import NEEDS_FOR_TYPE
from davsdk.constants import NEEDS_TOPIC
from davsdk.constants import PUBLISH_NEED
from davsdk.core.interfaces import LogClient
from davsdk.core.interfaces import Registrar
from davsdk.models.params import BidParams
from davsdk.models.params import MissionParams
from davsdk.models.params import NeedFilterParams
from davsdk.models.params import NeedParams
from davsdk.models.records import Bid
from davsdk.models.records import Message
from davsdk.models.records import Mission
from davsdk.models.records import Need
from davsdk.services.publisher import Publisher
from davsdk.services.publisher import Registration
from davsdk.services.stream_hydrator import StreamHydrator
from davsdk.services.topic_resolver import GeneratedTopic
from davsdk.services.topic_resolver import TopicResolver
from davsdk.services.topic_resolver import topic_request
from davsdk.streams import RecordStream

logger = logging.getLogger(__name__)


class Identity:
    """A DAV participant able to publish needs and follow its topics.

    Args:
        id: Local identifier of this identity.
        dav_id: The identity's address on the DAV network.
        config: Shared read-only configuration.
        log_client: Message-log transport.
        registrar: Registrar transport.
    """

    def __init__(self, id: str, dav_id: str, config: Config, log_client: LogClient, registrar: Registrar):
        self.id = id
        self.dav_id = dav_id
        self.config = config

        self._topics = TopicResolver(log_client, config)
        self._hydrator = StreamHydrator(log_client, config)
        self._need_publisher: Publisher[Need] = Publisher(
            registrar, config, PUBLISH_NEED, label="Need", record_factory=Need
        )
        self._needs_registration = Registration(registrar, config, NEEDS_FOR_TYPE, label="Needs")

    # ------------------------------------------------------------------
    # One-shot registration
    # ------------------------------------------------------------------

    async def publish_need(self, params: NeedParams) -> Need:
        """Publish *params* on a freshly provisioned topic.

        Raises:
            TopicProvisioningError: The topic could not be created; nothing
                was posted.
            RegistrationError: The registrar rejected the need.
        """
        topic_id = await self._topics.resolve(NEED_TOPIC)
        need = await self._need_publisher.publish(topic_id, params)
        logger.info(f"Identity {self.dav_id} published need {params.id} on {topic_id}")
        return need

    # ------------------------------------------------------------------
    # Streaming registration
    # ------------------------------------------------------------------

    async def needs_for_type(
        self,
        filter_params: NeedFilterParams,
        topic_id: Optional[str] = None,
    ) -> RecordStream[Need]:
        """Stream needs matching *filter_params*.

        On a freshly minted topic the filter is registered with the registrar
        so matching needs get routed there.  An explicit *topic_id* is assumed
        to be registered already: no provisioning, no registration.
        """
        request = topic_request(NEEDS_TOPIC, topic_id)
        resolved = await self._topics.resolve_request(request)
        if isinstance(request, GeneratedTopic):
            await self._needs_registration.register(resolved, filter_params)
        return self._hydrator.hydrate(resolved, Need)

    async def missions(self, topic_id: Optional[str] = None) -> RecordStream[Mission]:
        """Stream missions addressed to this identity."""
        resolved = await self._topics.resolve(MISSIONS_TOPIC, topic_id)
        return self._hydrator.hydrate(resolved, Mission)

    async def messages(self, topic_id: Optional[str] = None) -> RecordStream[Message]:
        """Stream messages addressed to this identity."""
        resolved = await self._topics.resolve(MESSAGES_TOPIC, topic_id)
        return self._hydrator.hydrate(resolved, Message)

    # ------------------------------------------------------------------
    # Local construction
    # ------------------------------------------------------------------

    def need(self, params: NeedParams) -> Need:
        return Need(params.id, params, self.config)

    def bid(self, bid_id: str, params: BidParams) -> Bid:
        return Bid(bid_id, params, self.config)

    def mission(self, mission_id: str, params: MissionParams) -> Mission:
        return Mission(mission_id, params, self.config)

    def __repr__(self) -> str:
        return f"Identity(id={self.id!r}, dav_id={self.dav_id!r})"
