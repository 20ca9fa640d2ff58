"""Profile commands -- manage the API targets restbase talks to.

A profile is a base URL plus static headers (and transport, cache and
connectivity settings), stored as ``profiles/<name>.json`` in the config
directory.

Example::

    restbase profile add shop --base-url https://api.example.com/ -H "X-Api-Version: 2"
    restbase profile list
    restbase profile use shop
    restbase profile show shop
    restbase profile remove shop
"""

from __future__ import annotations

from typing import Optional

import typer

from restbase.output import error, format_response, info, print_table, success, suggest

profile_app = typer.Typer(no_args_is_help=True)


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            error(f"Invalid header '{raw}', expected 'Name: value'")
            raise typer.Exit(code=2)
        headers[name.strip()] = value.strip()
    return headers


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    base_url: str = typer.Option(..., "--base-url", "-u", help="Absolute base URL of the API."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Static header 'Name: value' (repeatable)."
    ),
    cache_hours: int = typer.Option(24, "--cache-hours", help="Default cache duration in hours."),
    timeout: float = typer.Option(30, "--timeout", help="Request timeout in seconds."),
    assume_online: bool = typer.Option(
        False, "--assume-online", help="Skip the connectivity probe for this profile."
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing profile."),
) -> None:
    """Create a profile."""
    from restbase.config import profile_exists, save_profile
    from restbase.models import CacheConfig, ConnectivityConfig, RequestConfig, ServiceProfile

    if profile_exists(name) and not overwrite:
        error(f"Profile '{name}' already exists")
        suggest("Pass --overwrite to replace it.")
        raise typer.Exit(code=2)

    try:
        profile = ServiceProfile(
            name=name,
            base_url=base_url,
            headers=_parse_headers(header or []),
            request=RequestConfig(timeout=timeout),
            cache=CacheConfig(default_hours=cache_hours),
            connectivity=ConnectivityConfig(assume_online=assume_online),
        )
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    save_profile(profile)
    success(f"Profile '{name}' saved.")


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles."""
    from restbase.config import list_profiles, load_global_config, load_profile

    names = list_profiles()
    if not names:
        info("No profiles found.")
        suggest("Create one with 'restbase profile add NAME --base-url URL'.")
        return

    default = load_global_config().default_profile
    rows = []
    for name in names:
        profile = load_profile(name)
        rows.append([name, profile.base_url, "*" if name == default else ""])
    print_table(["name", "base_url", "default"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show a profile's full configuration."""
    from restbase.config import load_profile

    format_response(load_profile(name).model_dump(mode="json"))


@profile_app.command("use")
def profile_use(name: str = typer.Argument(help="Profile name.")) -> None:
    """Make a profile the default."""
    from restbase.config import load_global_config, load_profile, save_global_config

    load_profile(name)
    config = load_global_config()
    config.default_profile = name
    save_global_config(config)
    success(f"Default profile set to '{name}'.")


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a profile. Its cached responses are left on disk."""
    from restbase.config import delete_profile, load_global_config, save_global_config

    delete_profile(name)
    config = load_global_config()
    if config.default_profile == name:
        config.default_profile = None
        save_global_config(config)
    success(f"Profile '{name}' removed.")
