"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~restbase.exceptions.RestbaseError` subclass.
Shell wrappers can inspect the exit code to tell an offline failure from
an HTTP error without parsing stderr.

Example::

    $ restbase get items/1
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- no network and nothing cached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the request with HTTP 401 or 403."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_HTTP_FAILURE = 5
"""The API answered with any other non-success status."""

EXIT_CONNECTION_ERROR = 6
"""No network path was available, or the transport failed (timeout, DNS, TLS)."""

EXIT_DECODE_ERROR = 8
"""The response body could not be decoded into the requested shape."""
