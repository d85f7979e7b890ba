"""The ``tix`` command line.

``tix create`` and ``tix search`` are plain commands; ``tix config`` and
``tix context`` are sub-apps. Global flags are handled once in
:func:`main_callback`, which installs the process-wide
:class:`~ticketron.output.OutputManager`.

:func:`main` is the console script. Known failures
(:class:`~ticketron.exceptions.TicketronError`) are reported as
``Error: ...`` plus a next-step hint and exit with the error's code.
Anything unexpected leaves a crash report in ``<config dir>/logs``.
"""

from __future__ import annotations

import platform
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from ticketron import __version__
from ticketron.commands.config import config_app
from ticketron.commands.context import context_app
from ticketron.commands.create import create_command
from ticketron.commands.search import search_command
from ticketron.exceptions import (
    APIKeyNotFoundError,
    ConfigError,
    ConnectionError_,
    LLMResponseError,
    ProjectMappingError,
    TicketronError,
)
from ticketron.exit_codes import EXIT_GENERIC_FAILURE

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="tix",
    help="Ticketron: create and search Jira issues from natural language.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.command("create")(create_command)
app.command("search")(search_command)
app.add_typer(config_app, name="config", help="Inspect and initialise configuration files.")
app.add_typer(context_app, name="context", help="Manage the persistent LLM context file.")

# First matching class wins, so subclasses come before their bases.
_HINTS: tuple[tuple[type[TicketronError], str], ...] = (
    (APIKeyNotFoundError, "Run 'tix config set-key' or set TICKETRON_LLM_API_KEY."),
    (ConnectionError_, "Check that the MCP server is running and mcp_server_url is correct ('tix config show')."),
    (ProjectMappingError, "Add the project to links.yaml ('tix config locate' shows where it is)."),
    (LLMResponseError, "Re-run with --verbose to see the raw model output."),
    (ConfigError, "Run 'tix config init' to create default config files."),
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"tix {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the tix version and exit.",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Plain, uncoloured diagnostics."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data, warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show HTTP traffic and parsing details."),
    output_file: Optional[str] = typer.Option(
        None, "--output-file", help="Append command output to this file instead of stdout."
    ),
) -> None:
    """Create and search Jira issues from the command line."""
    from ticketron.output import OutputManager, set_output

    manager = OutputManager(
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(manager)
    ctx.obj = {"output": manager}


def hint_for(exc: Exception) -> Optional[str]:
    """Next-step suggestion for *exc*, or ``None`` when there is nothing to add."""
    for exc_type, hint in _HINTS:
        if isinstance(exc, exc_type):
            return hint
    return None


def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _setup_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> Path:
    """Save the active traceback with version and argv; return the file path."""
    from ticketron.config import get_config_dir

    logs_dir = get_config_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    header = (
        f"tix {__version__} on Python {platform.python_version()} ({sys.platform})\n"
        f"argv: {sys.argv!r}\n\n"
    )
    log_path.write_text(header + traceback.format_exc(), encoding="utf-8")
    return log_path


def _report(exc: TicketronError) -> None:
    from ticketron.output import error, suggest

    error(str(exc))
    hint = hint_for(exc)
    if hint:
        suggest(hint)


def main() -> None:
    """Console-script entry point; always ends in :class:`SystemExit`."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except TicketronError as exc:
        _report(exc)
        sys.exit(exc.exit_code)
    except Exception:
        from ticketron.output import error

        log_path = _write_crash_log()
        error(f"Unexpected error. Crash report written to {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
