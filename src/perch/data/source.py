"""JSON data source over HTTP.

Model hooks load data through a ``DataSource``. ``HttpDataSource`` is the
httpx-backed implementation; tests substitute ``perch.testing.StaticDataSource``.

Error mapping:
    - ``httpx.TransportError`` (connect, read, timeout) -> ``NetworkError``
    - non-2xx status                                    -> ``HttpStatusError``

No retries: a failed fetch fails the transition that issued it. Retry
policy belongs to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from perch._internal.types import JsonValue
from perch.errors import HttpStatusError, NetworkError

logger = logging.getLogger("perch.data")


@runtime_checkable
class DataSource(Protocol):
    """Fetch-like capability consumed by model hooks and auth loaders."""

    async def fetch_json(self, url: str, **options: Any) -> JsonValue: ...


class HttpDataSource:
    """``DataSource`` backed by a shared ``httpx.AsyncClient``.

    Usage::

        async with HttpDataSource("https://chat.example.com") as api:
            team = await api.fetch_json("/api/teams/gh")
            await api.fetch_json("/api/messages", method="POST", json={"body": "hi"})

    Pass *client* to reuse an existing client (or an ``httpx.MockTransport``
    in tests); a client passed in is not closed by ``aclose()``.
    """

    __slots__ = ("_client", "_owns_client")

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None:
            self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

    async def fetch_json(self, url: str, **options: Any) -> JsonValue:
        """Request *url* and decode the JSON body.

        *options* are passed to ``httpx.AsyncClient.request``; ``method``
        defaults to ``GET``. An empty body (e.g. 204) decodes to ``None``.

        Raises ``NetworkError`` on transport failure and ``HttpStatusError``
        on a non-2xx response.
        """
        method = options.pop("method", "GET")
        try:
            response = await self._client.request(method, url, **options)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning("%s %s returned %d", method, url, response.status_code)
            raise HttpStatusError(url, response.status_code, response.text)

        if not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpDataSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
