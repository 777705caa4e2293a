"""Process-wide SDK configuration.

A :class:`Config` instance is created once by the caller and passed
explicitly to :class:`~davsdk.identity.Identity` and every component it
builds.  Instances are frozen – records and network calls only ever *read*
configuration.

:func:`get_config` populates a :class:`Config` from ``DAV_*`` environment
variables (after loading a ``.env`` file through *python-dotenv*).  Any field
that is not set keeps the default below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any
from typing import Tuple

from dotenv import load_dotenv


class BlockchainType(str, Enum):
    """Which chain identity contracts live on."""

    LOCAL = "local"
    TEST = "test"
    MAIN = "main"


@dataclass(frozen=True)
class Config:
    """Read-only settings shared by records and network calls."""

    # Endpoints ---------------------------------------------------------
    eth_node_url: str = "https://ropsten.infura.io/wUiZtmeZ1KwjFrcC8zRO"
    api_seed_urls: Tuple[str, ...] = ("",)
    kafka_seed_urls: Tuple[str, ...] = ("",)

    # Record TTLs (milliseconds) ---------------------------------------
    identity_ttl: int = 10000
    need_type_ttl: int = 10000
    need_ttl: int = 10000
    mission_consumer_ttl: int = 10000
    mission_provider_ttl: int = 10000

    # Log polling -------------------------------------------------------
    kafka_polling_interval: int = 1000

    blockchain_type: BlockchainType = BlockchainType.TEST

    @property
    def api_seed_url(self) -> str:
        """First registrar seed – the one every POST goes to."""
        if not self.api_seed_urls:
            raise ValueError("Config.api_seed_urls is empty")
        return self.api_seed_urls[0]

    def with_overrides(self, **kwargs: Any) -> Config:
        """Return a copy with *kwargs* applied on top of this config."""
        known = {f.name for f in fields(self)}
        for key in kwargs:
            if key not in known:
                raise AttributeError(f"Config has no attribute '{key}'")
        return replace(self, **kwargs)


# ---------------------------------------------------------------------------
# Environment loading
# ---------------------------------------------------------------------------

_INT_FIELDS = (
    "identity_ttl",
    "need_type_ttl",
    "need_ttl",
    "mission_consumer_ttl",
    "mission_provider_ttl",
    "kafka_polling_interval",
)


def _csv(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _load_env_file(env_file: str | Path | None) -> None:
    path = Path(env_file) if env_file else Path.cwd() / ".env"
    if path.exists():
        # Explicit process environment wins over the file
        load_dotenv(path, override=False)


def get_config(env_file: str | Path | None = None) -> Config:
    """Return a :class:`Config` populated from ``DAV_*`` environment variables."""

    _load_env_file(env_file)

    overrides: dict[str, Any] = {}

    eth_node_url = os.getenv("DAV_ETH_NODE_URL")
    if eth_node_url:
        overrides["eth_node_url"] = eth_node_url

    api_seeds = os.getenv("DAV_API_SEED_URLS")
    if api_seeds:
        overrides["api_seed_urls"] = _csv(api_seeds)

    kafka_seeds = os.getenv("DAV_KAFKA_SEED_URLS")
    if kafka_seeds:
        overrides["kafka_seed_urls"] = _csv(kafka_seeds)

    for name in _INT_FIELDS:
        raw = os.getenv(f"DAV_{name.upper()}")
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = int(raw)
        except ValueError as exc:
            raise ValueError(f"DAV_{name.upper()} must be an integer, got {raw!r}") from exc

    chain = os.getenv("DAV_BLOCKCHAIN_TYPE")
    if chain:
        overrides["blockchain_type"] = BlockchainType(chain.strip().lower())

    return Config(**overrides)


__all__ = [
    "BlockchainType",
    "Config",
    "get_config",
]
