"""Policy shared by the blocking and non-blocking clients.

:class:`BaseServiceClient` holds everything in a request that does not
touch the network: resource-key normalisation, the cache freshness and
offline-fallback decisions, the best-effort cache write, default headers,
and mapping of non-success statuses to exceptions. The subclasses in
:mod:`~restbase.client.sync_client` and :mod:`~restbase.client.async_client`
only add the I/O.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

import httpx

from restbase.connectivity import ConnectivityProbe, probe_from_config
from restbase.exceptions import (
    AuthError,
    HttpFailureError,
    InvalidUsageError,
    NoConnectivityError,
    NotFoundError,
    ServerError,
)
from restbase.models import ServiceProfile
from restbase.output import get_output

if TYPE_CHECKING:
    from restbase.cache import CacheStore

JSON_MEDIA_TYPE = "application/json"


class BaseServiceClient:
    """State and cache policy common to :class:`~restbase.client.ServiceClient`
    and :class:`~restbase.client.AsyncServiceClient`.

    Args:
        profile: Base URL, static headers and transport settings.
        cache: Optional cache store. When ``None`` every fetch goes to the
            network and nothing is written locally.
        connectivity: Reachability probe. Defaults to the probe described
            by ``profile.connectivity``.
    """

    def __init__(
        self,
        profile: ServiceProfile,
        cache: Optional[CacheStore] = None,
        connectivity: Optional[ConnectivityProbe] = None,
    ) -> None:
        self._profile = profile
        self._cache = cache
        self._connectivity = connectivity or probe_from_config(profile.connectivity)

    @property
    def profile(self) -> ServiceProfile:
        return self._profile

    @property
    def cache(self) -> Optional[CacheStore]:
        return self._cache

    # ------------------------------------------------------------------ #
    # Request setup
    # ------------------------------------------------------------------ #

    def _default_headers(self) -> dict[str, str]:
        """Profile headers plus ``Accept: application/json``, which always wins."""
        headers = {
            name: value
            for name, value in self._profile.headers.items()
            if name.lower() != "accept"
        }
        headers["Accept"] = JSON_MEDIA_TYPE
        return headers

    def _client_options(self) -> dict[str, object]:
        config = self._profile.request
        return {
            "base_url": self._profile.base_url,
            "headers": self._default_headers(),
            "timeout": config.timeout,
            "verify": config.verify_ssl,
            "follow_redirects": config.follow_redirects,
        }

    def _resolve_duration(self, cache_duration: Optional[int]) -> int:
        if cache_duration is None:
            return self._profile.cache.default_hours
        return cache_duration

    # ------------------------------------------------------------------ #
    # Cache policy
    # ------------------------------------------------------------------ #

    def _lookup(self, key: str, cache_duration: int) -> tuple[Optional[str], bool]:
        """Read the cached body for *key*.

        Returns:
            ``(body, usable)`` where ``usable`` is true only when caching is
            enabled for this call and the entry exists and has not expired.
            ``body`` is returned even when not usable, for the offline
            fallback.
        """
        assert self._cache is not None
        cached = self._cache.get(key)
        usable = cache_duration > 0 and cached is not None and not self._cache.is_expired(key)
        if usable:
            get_output().debug(f"Cache hit: {key}")
        return cached, usable

    def _offline(self, key: str, cached: Optional[str]) -> str:
        """Return *cached* as the stale fallback, or raise when there is none."""
        if cached is None:
            get_output().debug(f"Offline with no cached copy of {key}")
            raise NoConnectivityError()
        get_output().debug(f"Offline, serving cached copy of {key}")
        return cached

    def _store(self, key: str, body: str, cache_duration: int) -> None:
        """Write *body* to the cache. Failures are reported and dropped."""
        if self._cache is None or cache_duration <= 0:
            return
        try:
            self._cache.put(key, body, timedelta(hours=cache_duration))
        except Exception as exc:
            get_output().debug(f"Cache write for '{key}' dropped: {exc}")

    # ------------------------------------------------------------------ #
    # Status mapping
    # ------------------------------------------------------------------ #

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise the most specific :class:`HttpFailureError` for a non-2xx response."""
        if response.is_success:
            return

        status = response.status_code
        text = response.text
        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = text[:200]

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        exc_type: type[HttpFailureError] = HttpFailureError
        if status in (401, 403):
            exc_type = AuthError
        elif status == 404:
            exc_type = NotFoundError
        elif status >= 500:
            exc_type = ServerError
        raise exc_type(status, full_msg, body=text)

    @staticmethod
    def _check_resource(resource: str) -> None:
        if not resource.strip():
            raise InvalidUsageError("Resource path must not be empty")
