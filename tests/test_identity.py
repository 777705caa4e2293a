"""Tests for the Identity coordinator."""

from unittest.mock import MagicMock

import pytest

from davsdk.exceptions import RegistrationError
from davsdk.exceptions import TopicProvisioningError
from davsdk.models.params import BidParams
from davsdk.models.params import MessageParams
from davsdk.models.params import MissionParams
from davsdk.models.params import NeedFilterParams
from davsdk.models.params import NeedParams
from davsdk.models.records import Bid
from davsdk.models.records import Message
from davsdk.models.records import Mission
from davsdk.models.records import Need
from davsdk.streams import RecordStream
from tests.helpers import SEED_URL
from tests.helpers import TOPIC_ID
from tests.helpers.streams import params_source

ANOTHER_TOPIC = "anotherTopic"
KAFKA_ERROR = RuntimeError("Kafka error")
DAV_NODE_ERROR = ConnectionError("Dav node error")


def _filter():
    return NeedFilterParams(area={"lat": 0, "long": 0, "radius": 0})


def _mission_params(mission_id):
    return MissionParams(id=mission_id, needer_dav_id="DAV_ID", vehicle_id="DAV_ID", price="100")


async def _collect(stream):
    """Subscribe with callbacks and wait for the stream to finish."""
    on_next = MagicMock()
    on_error = MagicMock()
    sub = stream.subscribe(on_next, on_error)
    await sub.wait_closed()
    return [call.args[0] for call in on_next.call_args_list], on_error


@pytest.mark.asyncio
class TestPublishNeed:
    async def test_publishes_on_provisioned_topic(self, identity, log_client, registrar, config):
        params = NeedParams()

        need = await identity.publish_need(params)

        assert need == Need(TOPIC_ID, params, config)
        log_client.generate_topic_id.assert_called_once_with("need")
        log_client.create_topic.assert_awaited_once_with(TOPIC_ID, config)
        registrar.post.assert_awaited_once_with(f"{SEED_URL}/publishNeed/:{TOPIC_ID}", params)

    async def test_registrar_failure(self, identity, registrar):
        registrar.post.side_effect = DAV_NODE_ERROR

        with pytest.raises(RegistrationError) as excinfo:
            await identity.publish_need(NeedParams())

        assert excinfo.value.cause is DAV_NODE_ERROR
        assert str(excinfo.value) == "Need registration failed: Dav node error"

    async def test_topic_failure_skips_registration(self, identity, log_client, registrar):
        log_client.create_topic.side_effect = KAFKA_ERROR

        with pytest.raises(TopicProvisioningError, match="Topic registration failed: Kafka error"):
            await identity.publish_need(NeedParams())

        registrar.post.assert_not_called()


@pytest.mark.asyncio
class TestNeedsForType:
    async def test_receives_needs(self, identity, log_client, registrar, config):
        needs = [NeedParams(), NeedParams(), NeedParams()]
        log_client.params_stream.side_effect = lambda *_: params_source(needs)

        stream = await identity.needs_for_type(_filter())
        received, on_error = await _collect(stream)

        assert received == [Need(TOPIC_ID, params, config) for params in needs]
        on_error.assert_not_called()
        log_client.generate_topic_id.assert_called_once_with("needs")
        log_client.create_topic.assert_awaited_once_with(TOPIC_ID, config)
        registrar.post.assert_awaited_once_with(f"{SEED_URL}/needsForType/:{TOPIC_ID}", _filter())

    async def test_explicit_topic_skips_provisioning_and_registration(self, identity, log_client, registrar, config):
        needs = [NeedParams(), NeedParams(), NeedParams()]
        log_client.params_stream.side_effect = lambda *_: params_source(needs)

        stream = await identity.needs_for_type(_filter(), ANOTHER_TOPIC)
        received, _ = await _collect(stream)

        assert received == [Need(ANOTHER_TOPIC, params, config) for params in needs]
        log_client.generate_topic_id.assert_not_called()
        log_client.create_topic.assert_not_called()
        registrar.post.assert_not_called()

    async def test_kafka_error_arrives_on_stream(self, identity, log_client, registrar):
        log_client.params_stream.side_effect = KAFKA_ERROR

        stream = await identity.needs_for_type(_filter())
        received, on_error = await _collect(stream)

        assert received == []
        on_error.assert_called_once()
        assert on_error.call_args.args[0] is KAFKA_ERROR
        registrar.post.assert_awaited_once()

    async def test_registration_failure_rejects(self, identity, log_client, registrar, config):
        registrar.post.side_effect = DAV_NODE_ERROR

        with pytest.raises(RegistrationError, match="Needs registration failed: Dav node error"):
            await identity.needs_for_type(_filter())

        log_client.create_topic.assert_awaited_once_with(TOPIC_ID, config)
        log_client.params_stream.assert_not_called()

    async def test_topic_failure_rejects_before_registration(self, identity, log_client, registrar):
        log_client.create_topic.side_effect = KAFKA_ERROR

        with pytest.raises(TopicProvisioningError, match="Topic registration failed: Kafka error"):
            await identity.needs_for_type(_filter())

        registrar.post.assert_not_called()
        log_client.params_stream.assert_not_called()


@pytest.mark.asyncio
class TestMissions:
    async def test_receives_missions(self, identity, log_client, registrar, config):
        missions = [_mission_params("MISSION_ID_1"), _mission_params("MISSION_ID_2"), _mission_params("MISSION_ID_3")]
        log_client.params_stream.side_effect = lambda *_: params_source(missions)

        stream = await identity.missions()
        received, _ = await _collect(stream)

        assert isinstance(stream, RecordStream)
        assert received == [Mission(TOPIC_ID, params, config) for params in missions]
        log_client.create_topic.assert_awaited_once_with(TOPIC_ID, config)
        registrar.post.assert_not_called()

    async def test_explicit_topic(self, identity, log_client, config):
        missions = [_mission_params("MISSION_ID_1")]
        log_client.params_stream.side_effect = lambda *_: params_source(missions)

        received, _ = await _collect(await identity.missions(ANOTHER_TOPIC))

        assert received == [Mission(ANOTHER_TOPIC, missions[0], config)]
        log_client.generate_topic_id.assert_not_called()
        log_client.create_topic.assert_not_called()

    async def test_topic_failure_never_subscribes(self, identity, log_client):
        log_client.create_topic.side_effect = KAFKA_ERROR

        with pytest.raises(TopicProvisioningError, match="Topic registration failed: Kafka error"):
            await identity.missions()

        log_client.params_stream.assert_not_called()


@pytest.mark.asyncio
class TestMessages:
    async def test_receives_messages(self, identity, log_client, config):
        messages = [MessageParams(sender_id=f"SOURCE_ID_{n}") for n in (1, 2, 3)]
        log_client.params_stream.side_effect = lambda *_: params_source(messages)

        received, _ = await _collect(await identity.messages())

        assert received == [Message(TOPIC_ID, params, config) for params in messages]

    async def test_explicit_topic(self, identity, log_client, config):
        messages = [MessageParams(sender_id=f"SOURCE_ID_{n}") for n in (1, 2, 3)]
        log_client.params_stream.side_effect = lambda *_: params_source(messages)

        received, _ = await _collect(await identity.messages(ANOTHER_TOPIC))

        assert received == [Message(ANOTHER_TOPIC, params, config) for params in messages]
        log_client.generate_topic_id.assert_not_called()
        log_client.create_topic.assert_not_called()

    async def test_error_event(self, identity, log_client):
        log_client.params_stream.side_effect = KAFKA_ERROR

        received, on_error = await _collect(await identity.messages())

        assert received == []
        assert on_error.call_args.args[0] is KAFKA_ERROR


class TestLocalConstruction:
    def test_need(self, identity, log_client, registrar, config):
        params = NeedParams()

        assert identity.need(params) == Need(params.id, params, config)
        log_client.generate_topic_id.assert_not_called()
        registrar.post.assert_not_called()

    def test_bid(self, identity, config):
        params = BidParams(vehicle_id="DAV_ID", price="100")

        assert identity.bid("bidId", params) == Bid("bidId", params, config)

    def test_mission(self, identity, log_client, config):
        params = _mission_params("MISSION_ID")

        assert identity.mission("missionId", params) == Mission("missionId", params, config)
        log_client.params_stream.assert_not_called()
