"""Service clients for restbase.

Both clients wrap :mod:`httpx` and share one policy for GETs: fresh cache
first, then a connectivity check that falls back to any cached copy when
offline, then the network with a best-effort cache write. Writes
(``create`` / ``replace`` / ``remove``) bypass the cache.

Classes:
    :class:`ServiceClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncServiceClient` -- non-blocking client backed by
    :class:`httpx.AsyncClient`.

Example::

    from restbase.cache import ResponseCache
    from restbase.client import ServiceClient

    with ServiceClient(profile, cache=ResponseCache(cache_dir, profile.cache)) as client:
        item = client.fetch("items/1", Item)
"""

from restbase.client.async_client import AsyncServiceClient
from restbase.client.codec import decode_body, encode_payload
from restbase.client.sync_client import ServiceClient

__all__ = ["AsyncServiceClient", "ServiceClient", "decode_body", "encode_payload"]
