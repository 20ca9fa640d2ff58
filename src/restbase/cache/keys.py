"""Resource-path normalisation for cache keys.

A resource path like ``/items//1/?b=2&a=1`` and ``items/1?a=1&b=2`` ask
the server for the same thing, so they must land on the same cache entry.
:func:`normalize_resource_key` applies these rules, in order:

1. Surrounding whitespace is stripped; an empty path is rejected.
2. A ``#fragment`` is dropped (it never reaches the server).
3. Runs of ``/`` collapse to one and leading/trailing ``/`` are removed.
   Case is preserved because servers treat paths case-sensitively.
4. Query parameters are stably sorted by name (repeated names keep their
   relative order), decoded, and re-encoded in one canonical form, so
   ``q=a/b`` and ``q=a%2Fb`` (or ``q=a b``, ``q=a%20b`` and ``q=a+b``)
   share a key. Blank values are kept and a bare name gains ``=``:
   ``?flag`` and ``?flag=`` share a key.

The key is ``path`` or ``path?query``.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode

from restbase.exceptions import InvalidUsageError

_SLASH_RUN = re.compile(r"/{2,}")


def normalize_resource_key(resource: str) -> str:
    """Return the canonical cache key for *resource*.

    Raises:
        InvalidUsageError: If *resource* is empty or only whitespace.

    Example::

        >>> normalize_resource_key("/items//1/?b=2&a=1")
        'items/1?a=1&b=2'
    """
    text = resource.strip()
    if not text:
        raise InvalidUsageError("Resource path must not be empty")

    text = text.split("#", 1)[0]
    path, _, query = text.partition("?")
    path = _SLASH_RUN.sub("/", path).strip("/")

    if not query:
        return path

    pairs = parse_qsl(query, keep_blank_values=True)
    pairs.sort(key=lambda pair: pair[0])
    canonical_query = urlencode(pairs)
    return f"{path}?{canonical_query}" if canonical_query else path
