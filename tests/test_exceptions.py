"""Tests for the exception hierarchy and exit codes."""

from __future__ import annotations

import pytest

from restbase.exceptions import (
    AuthError,
    ConfigError,
    DecodeError,
    HttpFailureError,
    InvalidUsageError,
    NoConnectivityError,
    NotFoundError,
    RestbaseError,
    ServerError,
    TransportError,
)
from restbase.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (RestbaseError("x"), EXIT_GENERIC_FAILURE),
        (ConfigError("x"), EXIT_GENERIC_FAILURE),
        (InvalidUsageError("x"), EXIT_INVALID_USAGE),
        (NoConnectivityError(), EXIT_CONNECTION_ERROR),
        (TransportError("x"), EXIT_CONNECTION_ERROR),
        (DecodeError("x"), EXIT_DECODE_ERROR),
        (HttpFailureError(418), EXIT_HTTP_FAILURE),
        (AuthError(401), EXIT_AUTH_FAILURE),
        (NotFoundError(404), EXIT_NOT_FOUND),
        (ServerError(502), EXIT_HTTP_FAILURE),
    ],
)
def test_exit_codes(exc: RestbaseError, code: int) -> None:
    assert exc.exit_code == code
    assert isinstance(exc, RestbaseError)


def test_exit_code_override() -> None:
    assert RestbaseError("x", exit_code=42).exit_code == 42
    assert RestbaseError("y").exit_code == EXIT_GENERIC_FAILURE


def test_no_connectivity_message() -> None:
    assert str(NoConnectivityError()) == "No internet connection available"


def test_http_failure_carries_status_and_body() -> None:
    exc = NotFoundError(404, "HTTP 404: missing", body='{"message": "missing"}')
    assert exc.status_code == 404
    assert exc.body == '{"message": "missing"}'
    assert str(exc) == "HTTP 404: missing"
    assert isinstance(exc, HttpFailureError)


def test_http_failure_default_message() -> None:
    assert str(HttpFailureError(409)) == "HTTP 409"
