"""Registration of records with the network registrar."""

from __future__ import annotations

import logging
from typing import Any
from typing import Callable
from typing import Generic
from typing import TypeVar

from davsdk.config import Config
from davsdk.core.interfaces import Registrar
from davsdk.exceptions import RegistrationError
from davsdk.models.params import BaseParams

logger = logging.getLogger(__name__)

R = TypeVar("R")

RecordFactory = Callable[[str, BaseParams, Config], R]


class Registration:
    """Sends payloads to ``<seed>/<operation>/:<topic_id>``.

    One instance serves one registrar operation.  ``label`` names the thing
    being registered in error messages (``"Need registration failed: ..."``).
    """

    def __init__(self, registrar: Registrar, config: Config, operation: str, label: str):
        self._registrar = registrar
        self._config = config
        self.operation = operation
        self.label = label

    def endpoint(self, topic_id: str) -> str:
        return f"{self._config.api_seed_url}/{self.operation}/:{topic_id}"

    async def register(self, topic_id: str, body: Any) -> Any:
        """POST *body* for *topic_id* and return the registrar response.

        Raises:
            RegistrationError: wrapping the registrar's own exception as
                ``cause``.
        """
        url = self.endpoint(topic_id)
        try:
            response = await self._registrar.post(url, body)
        except Exception as exc:
            logger.warning(f"{self.operation} for topic {topic_id} failed: {exc}")
            raise RegistrationError(self.label, url, exc) from exc

        logger.debug(f"{self.operation} registered topic {topic_id}")
        return response


class Publisher(Registration, Generic[R]):
    """A registration that also builds the record it registered."""

    def __init__(
        self,
        registrar: Registrar,
        config: Config,
        operation: str,
        label: str,
        record_factory: RecordFactory,
    ):
        super().__init__(registrar, config, operation, label)
        self._record_factory = record_factory

    async def publish(self, topic_id: str, params: BaseParams) -> R:
        """Register *params* on *topic_id* and return the resulting record."""
        await self.register(topic_id, params)
        return self._record_factory(topic_id, params, self._config)
