"""Disk-backed store for fetched resource bodies.

Uses :mod:`diskcache` to persist response text on the filesystem. Unlike a
plain TTL cache, expired entries are **not** evicted on read: an expired
body is still the best answer available when the network is down, so the
store only *reports* expiry through :meth:`ResponseCache.is_expired` and
leaves the decision to the client. Entries disappear only through
:meth:`~ResponseCache.empty`, :meth:`~ResponseCache.empty_all`, or
:meth:`~ResponseCache.empty_expired`.

Each entry is stored as a small dict::

    {"body": "<response text>", "stored_at": 1700000000.0, "expires_at": 1700086400.0}

See Also:
    :func:`~restbase.cache.keys.normalize_resource_key` -- how keys are built.
    :class:`~restbase.models.CacheConfig` -- the ``enabled`` switch.
"""

from __future__ import annotations

import sqlite3
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import diskcache

from restbase.models import CacheConfig
from restbase.output import get_output

_STORE_ERRORS = (OSError, sqlite3.Error, diskcache.Timeout)


class ResponseCache:
    """Keyed store of response bodies with an expiry timestamp per entry.

    Args:
        cache_dir: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.
        config: Cache configuration. When ``enabled`` is false no store is
            opened and every lookup misses.
        clock: Source of "now" as a POSIX timestamp. Tests pass a fake.

    Example::

        from datetime import timedelta
        from restbase.cache import ResponseCache
        from restbase.models import CacheConfig

        cache = ResponseCache("/tmp/api-cache", CacheConfig())
        cache.put("items/1", '{"id": 1}', timedelta(hours=24))
        cache.get("items/1")          # '{"id": 1}'
        cache.is_expired("items/1")   # False
    """

    def __init__(
        self,
        cache_dir: str | Path,
        config: CacheConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._clock = clock
        self._cache_dir = Path(cache_dir)
        self._cache: Optional[diskcache.Cache] = None
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "responses"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, key: str) -> Optional[str]:
        """Return the stored body for *key*, fresh or expired, or ``None``."""
        entry = self._entry(key)
        if entry is None:
            return None
        return entry["body"]

    def is_expired(self, key: str) -> bool:
        """Return ``True`` if *key* has no entry or its expiry time has passed."""
        entry = self._entry(key)
        if entry is None:
            return True
        return entry["expires_at"] <= self._clock()

    def get_expiration(self, key: str) -> Optional[datetime]:
        """Return the UTC expiry time for *key*, or ``None`` if absent."""
        entry = self._entry(key)
        if entry is None:
            return None
        return datetime.fromtimestamp(entry["expires_at"], tz=timezone.utc)

    def put(self, key: str, body: str, ttl: timedelta) -> None:
        """Store *body* under *key*, expiring *ttl* from now.

        Best effort: storage failures are reported at debug level and
        dropped, never raised. Overwrites any existing entry.
        """
        if self._cache is None:
            return
        now = self._clock()
        entry = {
            "body": body,
            "stored_at": now,
            "expires_at": now + ttl.total_seconds(),
        }
        try:
            self._cache.set(key, entry)
        except _STORE_ERRORS as exc:
            get_output().debug(f"Cache write for '{key}' dropped: {exc}")

    def empty(self, key: str) -> None:
        """Remove the entry for *key*; missing keys are ignored."""
        if self._cache is not None:
            self._cache.delete(key)

    def empty_all(self) -> None:
        """Remove every entry from the store."""
        if self._cache is not None:
            self._cache.clear()

    def empty_expired(self) -> int:
        """Remove all expired entries and return how many were removed."""
        if self._cache is None:
            return 0
        now = self._clock()
        removed = 0
        for key in list(self._cache.iterkeys()):
            entry = self._cache.get(key)
            if entry is not None and entry["expires_at"] <= now:
                self._cache.delete(key)
                removed += 1
        return removed

    def keys(self) -> list[str]:
        """Return all stored keys, sorted."""
        if self._cache is None:
            return []
        return sorted(self._cache.iterkeys())

    def stats(self) -> dict[str, Any]:
        """Return a summary: ``enabled`` plus, when enabled, ``size``,
        ``expired`` and ``directory``."""
        if self._cache is None:
            return {"enabled": False}
        now = self._clock()
        expired = 0
        for key in self._cache.iterkeys():
            entry = self._cache.get(key)
            if entry is not None and entry["expires_at"] <= now:
                expired += 1
        return {
            "enabled": True,
            "size": len(self._cache),
            "expired": expired,
            "directory": str(self._cache_dir / "responses"),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        if self._cache is not None:
            self._cache.close()

    def _entry(self, key: str) -> Optional[dict[str, Any]]:
        if self._cache is None:
            return None
        return self._cache.get(key)
