"""Exception hierarchy for restbase.

All exceptions inherit from :class:`RestbaseError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restbase.exit_codes`.
The CLI entry point in :func:`restbase.app.main` catches ``RestbaseError``
and exits with the matching code; library callers catch the specific
subclasses.

Subclass hierarchy::

    RestbaseError              (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigError            (exit 1)
    +-- NoConnectivityError    (exit 6)
    +-- TransportError         (exit 6)
    +-- DecodeError            (exit 8)
    +-- HttpFailureError       (exit 5)
        +-- AuthError          (exit 3)
        +-- NotFoundError      (exit 4)
        +-- ServerError        (exit 5)
"""

from __future__ import annotations

from restbase.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class RestbaseError(Exception):
    """Base exception for all restbase errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`restbase.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RestbaseError):
    """Raised for invalid arguments, such as an empty resource path."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(RestbaseError):
    """Raised for configuration problems (missing profiles, invalid JSON, no base URL)."""

    exit_code = EXIT_GENERIC_FAILURE


class NoConnectivityError(RestbaseError):
    """Raised when the network is unreachable and no cached copy can be served."""

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str = "No internet connection available") -> None:
        super().__init__(message)


class TransportError(RestbaseError):
    """Raised on transport-level failures (timeout, DNS resolution, TLS, connection reset).

    The originating :class:`httpx.TransportError` is chained as ``__cause__``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(RestbaseError):
    """Raised when a response body cannot be parsed into the requested type."""

    exit_code = EXIT_DECODE_ERROR


class HttpFailureError(RestbaseError):
    """Raised when the API answers with a non-success (non-2xx) status.

    Args:
        status_code: The HTTP status code returned by the server.
        message: Human-readable description, usually ``HTTP <status>: <detail>``.
        body: The raw response text, when available.
    """

    exit_code = EXIT_HTTP_FAILURE

    def __init__(self, status_code: int, message: str | None = None, body: str = "") -> None:
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class AuthError(HttpFailureError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(HttpFailureError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(HttpFailureError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_HTTP_FAILURE
