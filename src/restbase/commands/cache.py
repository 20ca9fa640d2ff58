"""Cache commands -- inspect and empty the active profile's response cache.

Example::

    restbase cache stats
    restbase cache show items/1
    restbase cache prune          # drop expired entries only
    restbase cache clear --yes
"""

from __future__ import annotations

import json

import typer

from restbase.cache import normalize_resource_key
from restbase.commands._common import active_profile, open_cache
from restbase.output import format_response, info, success, warning

cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show entry counts and the cache directory."""
    profile = active_profile(ctx)
    cache = open_cache(profile)
    try:
        format_response({"profile": profile.name, **cache.stats()})
    finally:
        cache.close()


@cache_app.command("show")
def cache_show(
    ctx: typer.Context,
    resource: str = typer.Argument(help="Resource path as passed to 'get'."),
) -> None:
    """Print the cached body of a resource and when it expires."""
    profile = active_profile(ctx)
    key = normalize_resource_key(resource)
    cache = open_cache(profile)
    try:
        body = cache.get(key)
        if body is None:
            warning(f"Nothing cached for '{key}'")
            raise typer.Exit(code=4)
        expires = cache.get_expiration(key)
        state = "expired" if cache.is_expired(key) else "fresh"
        info(f"{key}: {state}, expires {expires.isoformat() if expires else 'never'}")
        try:
            data = json.loads(body)
        except ValueError:
            data = body
        format_response(data)
    finally:
        cache.close()


@cache_app.command("prune")
def cache_prune(ctx: typer.Context) -> None:
    """Remove expired entries. Fresh entries are kept."""
    profile = active_profile(ctx)
    cache = open_cache(profile)
    try:
        removed = cache.empty_expired()
    finally:
        cache.close()
    success(f"Removed {removed} expired entr{'y' if removed == 1 else 'ies'}.")


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Remove every cached entry, losing the offline fallback."""
    profile = active_profile(ctx)
    if not yes and not typer.confirm(f"Clear all cached responses for '{profile.name}'?"):
        info("Cancelled.")
        raise typer.Exit()
    cache = open_cache(profile)
    try:
        cache.empty_all()
    finally:
        cache.close()
    success("Cache cleared.")
