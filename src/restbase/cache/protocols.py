"""Structural interface the clients expect from a cache store."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Protocol


class CacheStore(Protocol):
    """What :class:`~restbase.client.ServiceClient` needs from a cache.

    ``put`` is best effort and returns nothing: implementations should
    swallow their own storage failures. The clients additionally guard the
    call so that a misbehaving store can never fail a successful fetch.
    """

    def get(self, key: str) -> Optional[str]: ...

    def is_expired(self, key: str) -> bool: ...

    def put(self, key: str, body: str, ttl: timedelta) -> None: ...
