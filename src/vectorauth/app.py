"""The ``vector-auth`` command line application.

Commands live in :mod:`vectorauth.commands.robot`; this module owns the
Typer app, the global output flags and the process entry point
:func:`main`, which turns library errors into exit codes and anything
unexpected into a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

import typer

from vectorauth import __version__
from vectorauth.commands import (
    certificate_command,
    find_command,
    login_command,
    refresh_command,
    validate_command,
)
from vectorauth.exit_codes import EXIT_GENERIC_FAILURE

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="vector-auth",
    help="Log in to Anki Vector robots and print their connection configurations.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("login")(login_command)
app.command("refresh")(refresh_command)
app.command("find")(find_command)
app.command("certificate")(certificate_command)
app.command("validate")(validate_command)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"vector-auth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(
        False, "--plain", help="Print results as field<TAB>value lines."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results and problems."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace each login step."),
) -> None:
    """Install the output manager every command reports through."""
    from vectorauth.output import OutputFormat, OutputManager, set_output

    if json_output and plain_output:
        raise typer.BadParameter("--json and --plain cannot be combined.")
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


def _interrupted(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log() -> Path:
    """Save the current traceback under ``<data dir>/logs`` and return its path."""
    from vectorauth.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    path.write_text(f"vector-auth {__version__}\n{traceback.format_exc()}", encoding="utf-8")
    return path


def main() -> None:
    """Console-script entry point.

    A :class:`~vectorauth.exceptions.VectorError` that escapes a command
    exits with its ``exit_code``; any other exception is written to a
    crash log and exits with ``EXIT_GENERIC_FAILURE``.
    """
    from vectorauth.exceptions import VectorError
    from vectorauth.output import error

    signal.signal(signal.SIGINT, _interrupted)
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _interrupted(signal.SIGINT, None)
    except VectorError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Debug log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
