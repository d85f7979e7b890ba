"""Context commands -- manage the persistent ``context.md`` sent with every prompt."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys

import typer

from ticketron.output import debug, info, print_data, success


context_app = typer.Typer(no_args_is_help=True)


def _default_editor() -> str:
    if sys.platform.startswith("win"):
        return "notepad"
    return "vi"


@context_app.command("show")
def context_show() -> None:
    """Print the contents of the context file."""
    from ticketron.config import context_path, load_context

    if not context_path().is_file():
        info("Context file does not exist yet.")
        return
    print_data(load_context())


@context_app.command("edit")
def context_edit() -> None:
    """Open the context file in ``$EDITOR``.

    Falls back to ``vi`` (``notepad`` on Windows) when ``$EDITOR`` is unset.
    """
    from ticketron.config import context_path
    from ticketron.exceptions import TicketronError

    path = context_path()
    editor = os.environ.get("EDITOR") or _default_editor()
    command = [*shlex.split(editor), str(path)]
    debug(f"Launching editor: {command}")
    try:
        result = subprocess.run(command, check=False)
    except FileNotFoundError as exc:
        raise TicketronError(f"Editor '{editor}' not found") from exc
    if result.returncode != 0:
        raise TicketronError(f"Editor '{editor}' exited with status {result.returncode}")
    info("Editor finished.")


@context_app.command("add")
def context_add(
    entry: str = typer.Argument(..., help="Line to append to the context file."),
) -> None:
    """Append a line to the context file, creating it if needed.

    Example::

        tix context add "Sprint goal: finish SSO backend"
    """
    from ticketron.config import context_path
    from ticketron.exceptions import ConfigError

    path = context_path()
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{entry}\n")
    except OSError as exc:
        raise ConfigError(f"Cannot write to context file {path}: {exc}") from exc
    success("Entry added to context file.")
