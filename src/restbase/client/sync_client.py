"""Blocking service client with read-through cache and offline fallback.

:class:`ServiceClient` wraps :class:`httpx.Client` and resolves every
``fetch`` in a fixed order:

1. **Fresh cache** -- a cached body that has not expired is returned
   without touching the network (only when ``cache_duration > 0``).
2. **Connectivity gate** -- the probe is asked once. When offline, any
   cached body, fresh or expired, is served; with nothing cached the call
   fails with :class:`~restbase.exceptions.NoConnectivityError`.
3. **Network** -- a single GET. Non-2xx raises
   :class:`~restbase.exceptions.HttpFailureError`; success is written to
   the cache (best effort) and decoded.

``create``, ``replace`` and ``remove`` never read or write the cache.
Nothing is retried.

See Also:
    :class:`~restbase.client.async_client.AsyncServiceClient` for the
    non-blocking equivalent.
"""

from __future__ import annotations

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


class ServiceClient(BaseServiceClient):
    """Synchronous client for a JSON API described by a profile.

    Must be used as a context manager so the underlying connection pool is
    opened and closed. Intended both for direct use and as a base class
    for typed service wrappers.

    Args:
        profile: Base URL, static headers, and transport settings.
        cache: Optional cache store (usually a
            :class:`~restbase.cache.ResponseCache`).
        connectivity: Reachability probe; defaults to one built from
            ``profile.connectivity``.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        class ItemService(ServiceClient):
            def item(self, item_id: int) -> Item:
                return self.fetch(f"items/{item_id}", Item)

        with ItemService(profile, cache=cache) as service:
            item = service.item(1)
    """

    def __init__(
        self,
        profile: ServiceProfile,
        cache: Optional[CacheStore] = None,
        connectivity: Optional[ConnectivityProbe] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(profile, cache=cache, connectivity=connectivity)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ServiceClient:
        self._client = httpx.Client(transport=self._transport, **self._client_options())
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    @overload
    def fetch(self, resource: str, model: None = None, cache_duration: Optional[int] = None) -> Any: ...

    @overload
    def fetch(self, resource: str, model: type[T], cache_duration: Optional[int] = None) -> T: ...

    def fetch(
        self,
        resource: str,
        model: Optional[Any] = None,
        cache_duration: Optional[int] = None,
    ) -> Any:
        """GET *resource*, from cache when possible, and decode it.

        Args:
            resource: Path relative to the profile's ``base_url``.
            model: Type to decode into; ``None`` returns plain JSON.
            cache_duration: Freshness window in hours. ``None`` uses
                ``profile.cache.default_hours`` (24 unless configured).
                ``<= 0`` skips the fresh-cache read and the cache write,
                but an existing entry is still served when offline.

        Raises:
            NoConnectivityError: Offline and nothing cached.
            HttpFailureError: The server answered with a non-2xx status.
            TransportError: The request failed below HTTP.
            DecodeError: The body does not decode into *model*.
        """
        duration = self._resolve_duration(cache_duration)
        key = normalize_resource_key(resource)

        online: Optional[bool] = None
        if self._cache is not None:
            cached, usable = self._lookup(key, duration)
            if usable:
                assert cached is not None
                return decode_body(cached, model)
            online = self._connectivity.has_internet()
            if not online:
                return decode_body(self._offline(key, cached), model)

        if online is None:
            online = self._connectivity.has_internet()
        if not online:
            raise NoConnectivityError()

        get_output().debug(f"Fetching {resource} from network")
        response = self._send("GET", resource)
        self._raise_for_status(response)

        body = response.text
        self._store(key, body, duration)
        return decode_body(body, model)

    def create(self, resource: str, payload: Any) -> httpx.Response:
        """POST *payload* as JSON to *resource* and return the raw response.

        Raises:
            HttpFailureError: The server answered with a non-2xx status.
            TransportError: The request failed below HTTP.
        """
        return self._write("POST", resource, payload)

    def replace(self, resource: str, payload: Any) -> httpx.Response:
        """PUT *payload* as JSON to *resource* and return the raw response."""
        return self._write("PUT", resource, payload)

    def remove(self, resource: str) -> httpx.Response:
        """DELETE *resource* and return the raw response."""
        response = self._send("DELETE", resource)
        self._raise_for_status(response)
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _write(self, method: str, resource: str, payload: Any) -> httpx.Response:
        response = self._send(
            method,
            resource,
            content=encode_payload(payload),
            headers={"Content-Type": JSON_MEDIA_TYPE},
        )
        self._raise_for_status(response)
        return response

    def _send(
        self,
        method: str,
        resource: str,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as context manager"
        self._check_resource(resource)
        try:
            return self._client.request(method, resource, content=content, headers=headers)
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {resource} failed: {exc}") from exc
