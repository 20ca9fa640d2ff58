"""Helpers shared by the CLI sub-commands: profile, cache and probe lookup."""

from __future__ import annotations

import typer

from restbase.cache import ResponseCache
from restbase.config import get_profile_cache_dir, resolve_config
from restbase.connectivity import ConnectivityProbe, StaticProbe, probe_from_config
from restbase.exceptions import ConfigError
from restbase.models import ServiceProfile


def _options(ctx: typer.Context) -> dict:
    return ctx.obj if isinstance(ctx.obj, dict) else {}


def active_profile(ctx: typer.Context) -> ServiceProfile:
    """Resolve the profile selected by ``--profile`` / ``--base-url`` and config.

    Raises:
        ConfigError: If nothing selects a profile.
    """
    opts = _options(ctx)
    _, profile = resolve_config(
        cli_profile=opts.get("profile"),
        cli_base_url=opts.get("base_url"),
    )
    if profile is None:
        raise ConfigError(
            "No profile selected. Create one with 'restbase profile add NAME --base-url URL' "
            "or pass --base-url."
        )
    return profile


def open_cache(profile: ServiceProfile) -> ResponseCache:
    """Open the response cache for *profile* at its effective base URL."""
    return ResponseCache(get_profile_cache_dir(profile), profile.cache)


def connectivity_for(ctx: typer.Context, profile: ServiceProfile) -> ConnectivityProbe:
    """``--offline`` forces a probe that always reports no network."""
    if _options(ctx).get("offline"):
        return StaticProbe(False)
    return probe_from_config(profile.connectivity)
