"""HTTP transport contract and the default httpx implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx

from odoo_jsonrpc.errors import TransportError

logger = logging.getLogger("odoo_jsonrpc.connection.transport")

DEFAULT_TIMEOUT = 30


class Transport(ABC):
    """Posts a serialized envelope and returns the raw response body.

    Implementations raise ``TransportError`` for anything that goes wrong
    below the JSON-RPC layer.
    """

    @abstractmethod
    async def post(self, url: str, body: bytes) -> bytes:
        ...

    async def close(self) -> None:
        """Release transport resources."""


class HttpxTransport(Transport):
    """Transport backed by ``httpx.AsyncClient``.

    The client keeps cookies, so the ``session_id`` Odoo sets on login is
    sent with every later request. A caller-supplied client is used as-is
    and is not closed by ``close()``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=timeout, verify=verify_ssl)
        self._client = client

    async def post(self, url: str, body: bytes) -> bytes:
        try:
            response = await self._client.post(
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {url}", payload=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Connection failed: {e}", payload=url) from e

        if response.is_error:
            logger.debug("HTTP %d from %s", response.status_code, url)
            raise TransportError(
                f"HTTP {response.status_code} from {url}",
                payload={
                    "url": url,
                    "status_code": response.status_code,
                    "body": response.text,
                },
            )
        return response.content

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()
