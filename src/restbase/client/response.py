"""Bridge from client results to the output layer.

:func:`format_api_response` prints the status line of a raw
:class:`httpx.Response` (from ``create`` / ``replace`` / ``remove``) to
stderr and its body to stdout; :func:`extract_response_data` is the body
extraction it uses.
"""

from __future__ import annotations

from typing import Any

import httpx

from restbase.output import get_output


def format_api_response(response: httpx.Response) -> None:
    """Print ``HTTP <status> <reason>`` to stderr and the body to stdout."""
    output = get_output()
    output.info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())

    data = extract_response_data(response)
    if data is not None:
        output.format_response(data)


def extract_response_data(response: httpx.Response) -> Any:
    """Return the JSON-decoded body, the raw text if it is not JSON, or
    ``None`` for an empty body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
