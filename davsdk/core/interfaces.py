"""Abstract interfaces for the message log and the network registrar."""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import AsyncIterator

from davsdk.config import Config
from davsdk.models.params import BaseParams


class LogClient(ABC):
    """Abstract interface for the distributed message log."""

    @abstractmethod
    def generate_topic_id(self, type_tag: str) -> str:
        """Mint a fresh topic id for records of *type_tag*. Must not do I/O."""
        pass

    @abstractmethod
    async def create_topic(self, topic_id: str, config: Config) -> None:
        """Create *topic_id* on the log. Safe to retry."""
        pass

    @abstractmethod
    async def params_stream(self, topic_id: str, config: Config) -> AsyncIterator[BaseParams]:
        """Open a subscription on *topic_id* and return its params iterator.

        The returned iterator may itself raise later; closing it (``aclose``)
        must release the subscription.
        """
        pass


class Registrar(ABC):
    """Abstract interface for the HTTP registrar on the DAV network."""

    @abstractmethod
    async def post(self, url: str, body: Any) -> Any:
        """POST *body* to *url*; raise on transport failure or non-2xx."""
        pass
