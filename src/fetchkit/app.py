"""Typer application and CLI entry point for fetchkit.

The ``fetchkit`` command generates a client from an endpoint schema and
drives it from the shell:

* ``fetchkit call ENDPOINT METHOD`` -- perform one call and print the reply;
* ``fetchkit inspect`` -- list the endpoints and methods of a schema;
* ``fetchkit profile ...`` -- manage saved profiles.

:func:`main` is the console-script entry point. Unhandled
:class:`~fetchkit.exceptions.FetchkitError` instances exit with their
``exit_code``; anything else writes a crash log under the data directory.
"""

from __future__ import annotations

import sys
import traceback
from datetime import datetime
from typing import Optional

import typer

from fetchkit import __version__
from fetchkit.commands.call import call_command
from fetchkit.commands.inspect import inspect_command
from fetchkit.commands.profile import profile_app
from fetchkit.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="fetchkit",
    help="Call HTTP APIs through clients generated from endpoint schemas.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("call")(call_command)
app.command("inspect")(inspect_command)
app.add_typer(profile_app, name="profile", help="Manage saved profiles.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fetchkit {__version__}")
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
    schema: Optional[str] = typer.Option(
        None, "--schema", "-s", help="Schema file, URL, or '-' for stdin."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-u", help="Base URL every endpoint is resolved against."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Set up output and logging, and share connection options with sub-commands."""
    from fetchkit.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["schema"] = schema
    ctx.obj["base_url"] = base_url


def _write_crash_log() -> str:
    """Write the current traceback under the data directory and return its path."""
    from fetchkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        from fetchkit.exceptions import FetchkitError
        from fetchkit.output import error

        if isinstance(exc, FetchkitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
