"""Typer application and CLI entry point for swagfluence.

This module wires together the top-level Typer application and registers the
built-in commands (``convert``, ``endpoints``, ``example``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`swagfluence.config`: Confluence settings and the data directory.
    :mod:`swagfluence.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
import traceback
from datetime import datetime
from typing import Any

import typer

from swagfluence import __version__
from swagfluence.commands.convert import convert_command
from swagfluence.commands.inspect import endpoints_command, example_command
from swagfluence.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="swagfluence",
    help="Publish Swagger 2.0 / OpenAPI 3.x specs as Confluence pages.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("convert")(convert_command)
app.command("endpoints")(endpoints_command)
app.command("example")(example_command)

cancel_event = threading.Event()
"""Set by the signal handlers; the converter stops before the next endpoint."""


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swagfluence {__version__}")
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
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~swagfluence.output.OutputManager` from
    CLI flags. With ``--verbose``, library debug records (truncated
    references, degraded examples) are shown on stderr as well.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from swagfluence.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[debug] %(name)s: %(message)s",
            stream=sys.stderr,
        )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install SIGINT/SIGTERM handlers.

    The first signal asks the running conversion to stop before its next
    page; a second one exits immediately.
    """

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        if cancel_event.is_set():
            sys.stderr.write("\nCancelled.\n")
            sys.exit(EXIT_CANCELLED)
        sys.stderr.write("\nCancelling after the current page...\n")
        cancel_event.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from swagfluence.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``swagfluence`` console script.

    Unhandled :class:`~swagfluence.exceptions.SwagfluenceError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

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
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        from swagfluence.exceptions import SwagfluenceError
        from swagfluence.output import error

        if isinstance(exc, SwagfluenceError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
