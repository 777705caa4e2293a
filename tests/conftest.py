from unittest.mock import AsyncMock
from unittest.mock import MagicMock

import pytest

from davsdk.config import Config
from davsdk.identity import Identity
from tests.helpers import SEED_URL
from tests.helpers import TOPIC_ID


@pytest.fixture
def config():
    return Config(api_seed_urls=(SEED_URL,))


@pytest.fixture
def log_client():
    """Log client double: fixed topic id, succeeding topic creation."""
    client = MagicMock()
    client.generate_topic_id = MagicMock(return_value=TOPIC_ID)
    client.create_topic = AsyncMock(return_value=None)
    client.params_stream = AsyncMock()
    return client


@pytest.fixture
def registrar():
    client = MagicMock()
    client.post = AsyncMock(return_value=None)
    return client


@pytest.fixture
def identity(config, log_client, registrar):
    return Identity("selfId", "davId", config, log_client, registrar)
