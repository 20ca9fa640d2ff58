"""Asynchronous service client -- mirrors :class:`~restbase.client.sync_client.ServiceClient`.

:class:`AsyncServiceClient` wraps :class:`httpx.AsyncClient` and applies
exactly the same cache, connectivity and error policy as the blocking
client (both inherit it from
:class:`~restbase.client.base.BaseServiceClient`). Network calls are
awaited. The connectivity probe and the cache reads and writes block (TCP
connect, sqlite), so they run in worker threads via
:func:`asyncio.to_thread`.

Concurrent ``fetch`` calls for the same resource are not coalesced: each
may miss the cache and hit the network, and the last cache write wins.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Optional, TypeVar, overload

import httpx

from restbase.cache.keys import normalize_resource_key
from restbase.client.base import JSON_MEDIA_TYPE, BaseServiceClient
from restbase.client.codec import decode_body, encode_payload
from restbase.connectivity import ConnectivityProbe
from restbase.exceptions import NoConnectivityError, TransportError
from restbase.models import ServiceProfile
from restbase.output import get_output

if TYPE_CHECKING:
    from restbase.cache import CacheStore

T = TypeVar("T")


class AsyncServiceClient(BaseServiceClient):
    """Asynchronous client for a JSON API described by a profile.

    Must be used as an async context manager.

    Args:
        profile: Base URL, static headers, and transport settings.
        cache: Optional cache store.
        connectivity: Reachability probe; defaults to one built from
            ``profile.connectivity``.
        transport: Optional async httpx transport, e.g.
            :class:`httpx.MockTransport`.

    Example::

        async with AsyncServiceClient(profile, cache=cache) as client:
            item = await client.fetch("items/1", Item)
    """

    def __init__(
        self,
        profile: ServiceProfile,
        cache: Optional[CacheStore] = None,
        connectivity: Optional[ConnectivityProbe] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(profile, cache=cache, connectivity=connectivity)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncServiceClient:
        self._client = httpx.AsyncClient(transport=self._transport, **self._client_options())
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    @overload
    async def fetch(self, resource: str, model: None = None, cache_duration: Optional[int] = None) -> Any: ...

    @overload
    async def fetch(self, resource: str, model: type[T], cache_duration: Optional[int] = None) -> T: ...

    async def fetch(
        self,
        resource: str,
        model: Optional[Any] = None,
        cache_duration: Optional[int] = None,
    ) -> Any:
        """GET *resource*, from cache when possible, and decode it.

        Behaves identically to
        :meth:`~restbase.client.sync_client.ServiceClient.fetch`.
        """
        duration = self._resolve_duration(cache_duration)
        key = normalize_resource_key(resource)

        online: Optional[bool] = None
        if self._cache is not None:
            cached, usable = await asyncio.to_thread(self._lookup, key, duration)
            if usable:
                assert cached is not None
                return decode_body(cached, model)
            online = await self._has_internet()
            if not online:
                return decode_body(self._offline(key, cached), model)

        if online is None:
            online = await self._has_internet()
        if not online:
            raise NoConnectivityError()

        get_output().debug(f"Fetching {resource} from network")
        response = await self._send("GET", resource)
        self._raise_for_status(response)

        body = response.text
        await asyncio.to_thread(self._store, key, body, duration)
        return decode_body(body, model)

    async def create(self, resource: str, payload: Any) -> httpx.Response:
        """POST *payload* as JSON to *resource* and return the raw response."""
        return await self._write("POST", resource, payload)

    async def replace(self, resource: str, payload: Any) -> httpx.Response:
        """PUT *payload* as JSON to *resource* and return the raw response."""
        return await self._write("PUT", resource, payload)

    async def remove(self, resource: str) -> httpx.Response:
        """DELETE *resource* and return the raw response."""
        response = await self._send("DELETE", resource)
        self._raise_for_status(response)
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _has_internet(self) -> bool:
        return await asyncio.to_thread(self._connectivity.has_internet)

    async def _write(self, method: str, resource: str, payload: Any) -> httpx.Response:
        response = await self._send(
            method,
            resource,
            content=encode_payload(payload),
            headers={"Content-Type": JSON_MEDIA_TYPE},
        )
        self._raise_for_status(response)
        return response

    async def _send(
        self,
        method: str,
        resource: str,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as async context manager"
        self._check_resource(resource)
        try:
            return await self._client.request(method, resource, content=content, headers=headers)
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {resource} failed: {exc}") from exc
