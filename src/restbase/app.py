"""Typer application and CLI entry point for restbase.

Registers the request commands (``get``, ``post``, ``put``, ``delete``)
on the root app and the ``profile``, ``cache`` and ``config`` groups as
sub-apps. The root callback builds the global
:class:`~restbase.output.OutputManager` and stores the shared options in
``ctx.obj`` for the sub-commands.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. :class:`~restbase.exceptions.RestbaseError` exits with
its ``exit_code``; anything else writes a crash log under the data
directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from restbase import __version__
from restbase.commands.cache import cache_app
from restbase.commands.config import config_app
from restbase.commands.profile import profile_app
from restbase.commands.requests import (
    delete_command,
    get_command,
    post_command,
    put_command,
)
from restbase.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="restbase",
    help="Fetch JSON APIs through a local cache that keeps working offline.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("get")(get_command)
app.command("post")(post_command)
app.command("put")(put_command)
app.command("delete")(delete_command)
app.add_typer(profile_app, name="profile", help="Manage API profiles.")
app.add_typer(cache_app, name="cache", help="Inspect and empty the response cache.")
app.add_typer(config_app, name="config", help="Global configuration.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"restbase {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the profile's base URL."
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Treat the network as unreachable; serve from cache only."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show cache and connectivity decisions."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write response data to a file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global output manager and stores ``profile``,
    ``base_url`` and ``offline`` in ``ctx.obj``.
    """
    from restbase.config import load_global_config
    from restbase.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except ValueError:
            fmt = OutputFormat.AUTO

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["base_url"] = base_url
    ctx.obj["offline"] = offline


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data_dir>/logs`` and return its path."""
    from restbase.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``restbase`` console script.

    Unhandled :class:`~restbase.exceptions.RestbaseError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from restbase.exceptions import RestbaseError
        from restbase.output import error

        if isinstance(exc, RestbaseError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
