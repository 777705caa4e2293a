"""Tests for configuration defaults and environment loading."""

import dataclasses
import logging

import pytest

from davsdk.config import BlockchainType
from davsdk.config import Config
from davsdk.config import get_config
from davsdk.utils.log import configure_logging

_ENV_VARS = (
    "DAV_ETH_NODE_URL",
    "DAV_API_SEED_URLS",
    "DAV_KAFKA_SEED_URLS",
    "DAV_IDENTITY_TTL",
    "DAV_NEED_TYPE_TTL",
    "DAV_NEED_TTL",
    "DAV_MISSION_CONSUMER_TTL",
    "DAV_MISSION_PROVIDER_TTL",
    "DAV_KAFKA_POLLING_INTERVAL",
    "DAV_BLOCKCHAIN_TYPE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv records the original state, so values loaded from .env files are
    # removed again on teardown
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults():
    config = Config()

    assert config.api_seed_urls == ("",)
    assert config.need_ttl == 10000
    assert config.kafka_polling_interval == 1000
    assert config.blockchain_type is BlockchainType.TEST


def test_config_is_read_only():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Config().need_ttl = 1


def test_with_overrides():
    config = Config().with_overrides(need_ttl=1, api_seed_urls=("http://a",))

    assert config.need_ttl == 1
    assert config.api_seed_url == "http://a"
    with pytest.raises(AttributeError):
        Config().with_overrides(no_such_field=1)


def test_empty_seed_list_is_an_error():
    with pytest.raises(ValueError):
        Config(api_seed_urls=()).api_seed_url


def test_get_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DAV_API_SEED_URLS", "http://a.test, http://b.test")
    monkeypatch.setenv("DAV_NEED_TTL", "2500")
    monkeypatch.setenv("DAV_BLOCKCHAIN_TYPE", "MAIN")

    config = get_config(env_file=tmp_path / "missing.env")

    assert config.api_seed_urls == ("http://a.test", "http://b.test")
    assert config.need_ttl == 2500
    assert config.blockchain_type is BlockchainType.MAIN
    assert config.identity_ttl == 10000


def test_get_config_loads_env_file(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DAV_MISSION_PROVIDER_TTL=42\nDAV_NEED_TTL=7\n")
    monkeypatch.setenv("DAV_NEED_TTL", "9")

    config = get_config(env_file=env_file)

    assert config.mission_provider_ttl == 42
    # Process environment wins over the file
    assert config.need_ttl == 9


def test_get_config_rejects_bad_integer(monkeypatch, tmp_path):
    monkeypatch.setenv("DAV_IDENTITY_TTL", "soon")

    with pytest.raises(ValueError, match="DAV_IDENTITY_TTL must be an integer"):
        get_config(env_file=tmp_path / "missing.env")


def test_configure_logging_quiets_http_client():
    configure_logging("debug")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
