"""Local response cache for restbase.

:class:`ResponseCache` keeps fetched resource bodies on disk via
:mod:`diskcache`, each with its own expiry time. Expired bodies are kept
so that the client can serve them when the network is unreachable.
:func:`normalize_resource_key` turns resource paths into cache keys.

The cache is consumed by :class:`~restbase.client.ServiceClient` and
:class:`~restbase.client.AsyncServiceClient`; any object with the same
``get`` / ``is_expired`` / ``put`` methods (see :class:`CacheStore`) can
stand in for it.
"""

from restbase.cache.cache import ResponseCache
from restbase.cache.keys import normalize_resource_key
from restbase.cache.protocols import CacheStore

__all__ = ["CacheStore", "ResponseCache", "normalize_resource_key"]
