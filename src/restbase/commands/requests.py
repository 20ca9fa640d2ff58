"""Request commands -- ``get``, ``post``, ``put`` and ``delete``.

Each command resolves the active profile, opens that profile's response
cache and a :class:`~restbase.client.ServiceClient`, and prints the result:
decoded JSON for ``get``; status line plus body for the write commands.

Example::

    restbase get items/1
    restbase get items/1 --cache-hours 0        # force a network fetch
    restbase --offline get items/1              # cache only
    restbase post items --body '{"name": "a"}'
    restbase put items/1 --body @item.json
    restbase delete items/1
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from restbase.client import ServiceClient
from restbase.client.response import format_api_response
from restbase.commands._common import active_profile, connectivity_for, open_cache
from restbase.exceptions import InvalidUsageError
from restbase.output import format_response


def get_command(
    ctx: typer.Context,
    resource: str = typer.Argument(help="Resource path relative to the base URL."),
    cache_hours: Optional[int] = typer.Option(
        None,
        "--cache-hours",
        help="Freshness window in hours (0 or less bypasses the cache unless offline). "
        "Defaults to the profile's cache.default_hours.",
    ),
) -> None:
    """Fetch a JSON resource, using the local cache when possible."""
    profile = active_profile(ctx)
    cache = open_cache(profile)
    try:
        with ServiceClient(
            profile,
            cache=cache,
            connectivity=connectivity_for(ctx, profile),
        ) as client:
            data = client.fetch(resource, cache_duration=cache_hours)
    finally:
        cache.close()
    format_response(data)


def post_command(
    ctx: typer.Context,
    resource: str = typer.Argument(help="Resource path relative to the base URL."),
    body: str = typer.Option(
        ..., "--body", "-b", help="JSON body, '@path' to read a file, or '-' for stdin."
    ),
) -> None:
    """Create a resource (POST). Never touches the cache."""
    payload = _load_body(body)
    profile = active_profile(ctx)
    with ServiceClient(profile, connectivity=connectivity_for(ctx, profile)) as client:
        response = client.create(resource, payload)
    format_api_response(response)


def put_command(
    ctx: typer.Context,
    resource: str = typer.Argument(help="Resource path relative to the base URL."),
    body: str = typer.Option(
        ..., "--body", "-b", help="JSON body, '@path' to read a file, or '-' for stdin."
    ),
) -> None:
    """Replace a resource (PUT). Never touches the cache."""
    payload = _load_body(body)
    profile = active_profile(ctx)
    with ServiceClient(profile, connectivity=connectivity_for(ctx, profile)) as client:
        response = client.replace(resource, payload)
    format_api_response(response)


def delete_command(
    ctx: typer.Context,
    resource: str = typer.Argument(help="Resource path relative to the base URL."),
) -> None:
    """Delete a resource (DELETE). Never touches the cache."""
    profile = active_profile(ctx)
    with ServiceClient(profile, connectivity=connectivity_for(ctx, profile)) as client:
        response = client.remove(resource)
    format_api_response(response)


def _load_body(body: str) -> Any:
    """Parse a ``--body`` value into a JSON-compatible object.

    Raises:
        InvalidUsageError: If the file cannot be read or the text is not JSON.
    """
    if body == "-":
        text = sys.stdin.read()
    elif body.startswith("@"):
        path = Path(body[1:]).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidUsageError(f"Cannot read body file {path}: {exc}") from exc
    else:
        text = body

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"--body is not valid JSON: {exc}") from exc
