"""Config commands -- view and modify global configuration.

Provides ``restbase config show`` and ``restbase config set`` for the
user's :class:`~restbase.models.GlobalConfig` (default profile, profile
auto-selection, output format). Per-API settings live in profiles; see
:mod:`restbase.commands.profile`.
"""

from __future__ import annotations

import typer

from restbase.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the config directory and current global configuration.

    Example::

        restbase config show --json
    """
    from restbase.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    format_response(load_global_config().model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the current field (bool or str)
    and the result is validated before saving.

    Example::

        restbase config set default_profile shop
        restbase config set output.format json
        restbase config set auto_select_single_profile false
    """
    from restbase.config import load_global_config, save_global_config
    from restbase.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced: object = value
    if isinstance(target[final_key], bool):
        coerced = value.lower() in ("true", "1", "yes")
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")
