"""Production implementations of core interfaces."""

from __future__ import annotations

import logging
from typing import Any
from typing import Optional

import httpx

from davsdk.core.interfaces import Registrar

logger = logging.getLogger(__name__)


class HttpRegistrar(Registrar):
    """Registrar client over ``httpx.AsyncClient``.

    Bodies exposing ``serialize()`` (params models) are sent as their wire
    dict; anything else is sent as JSON unchanged.  Transport errors and
    non-2xx responses propagate as the ``httpx`` exception – retry policy is
    left to the caller.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def post(self, url: str, body: Any) -> httpx.Response:
        payload = body.serialize() if hasattr(body, "serialize") else body
        headers = {"Content-Type": "application/json"}

        response = await self.client.post(url, headers=headers, json=payload)
        response.raise_for_status()
        logger.debug(f"POST {url} -> {response.status_code}")
        return response

    async def aclose(self) -> None:
        """Close the underlying client if this registrar created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpRegistrar":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
