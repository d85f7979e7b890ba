"""Where ``tix`` writes things.

Rendered data (search results, created issue keys, JSON/YAML/TSV) goes to
stdout, or to the ``--output-file`` path, so it can be piped. Everything
else is a diagnostic and goes to stderr through a Rich console.

Diagnostics travel on named channels. Each channel has a prefix, a colour,
and rules for ``--quiet`` and ``--verbose``:

=========  ============  ===========  ==================
channel    prefix        quiet        verbose
=========  ============  ===========  ==================
info       --            hidden       --
success    --            hidden       --
suggest    ``→``         hidden       --
warning    ``Warning:``  shown        --
error      ``Error:``    shown        --
debug      ``[debug]``   shown        required
=========  ============  ===========  ==================

Colour is off with ``--no-color``, ``NO_COLOR`` (any value), or
``TERM=dumb``; messages are then printed verbatim with their prefix.

:func:`~ticketron.app.main_callback` installs the process-wide
:class:`OutputManager` with :func:`set_output`; library code reaches it
with :func:`get_output` or the module-level shortcuts.
"""

from __future__ import annotations

import os
import sys
from typing import NamedTuple, Optional

from rich.console import Console
from rich.markup import escape


class _Channel(NamedTuple):
    prefix: str
    style: str
    style_whole_line: bool
    hidden_when_quiet: bool
    needs_verbose: bool = False


_CHANNELS: dict[str, _Channel] = {
    "info": _Channel("", "", False, True),
    "success": _Channel("", "green", True, True),
    "suggest": _Channel("→ ", "dim", True, True),
    "warning": _Channel("Warning: ", "yellow", False, False),
    "error": _Channel("Error: ", "bold red", False, False),
    "debug": _Channel("[debug] ", "dim", True, False, needs_verbose=True),
}


class OutputManager:
    """Routes data to stdout (or a file) and diagnostics to stderr.

    Args:
        no_color: Disable Rich styling even when the environment allows it.
        quiet: Hide the info, success and suggest channels.
        verbose: Show the debug channel.
        output_file: Append data to this path instead of printing it.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _env_disables_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._console = Console(
            file=sys.stderr,
            stderr=True,
            no_color=self._no_color,
            highlight=False,
        )

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    def print_data(self, text: str) -> None:
        """Write *text* as primary output, newline-terminated."""
        if not text.endswith("\n"):
            text += "\n"
        if self._output_file:
            with open(self._output_file, "a", encoding="utf-8") as f:
                f.write(text)
            return
        sys.stdout.write(text)
        sys.stdout.flush()

    def emit(self, channel_name: str, message: str) -> None:
        """Write *message* on a diagnostic channel, honouring quiet and verbose.

        Raises:
            KeyError: If *channel_name* is not one of the known channels.
        """
        channel = _CHANNELS[channel_name]
        if channel.needs_verbose and not self._verbose:
            return
        if channel.hidden_when_quiet and self._quiet:
            return

        if self._no_color or not channel.style:
            print(f"{channel.prefix}{message}", file=sys.stderr, flush=True)
            return

        style = channel.style
        if channel.style_whole_line:
            self._console.print(f"[{style}]{escape(channel.prefix + message)}[/{style}]")
        else:
            label = escape(channel.prefix.rstrip())
            self._console.print(f"[{style}]{label}[/{style}] {escape(message)}")

    def info(self, message: str) -> None:
        self.emit("info", message)

    def success(self, message: str) -> None:
        self.emit("success", message)

    def warning(self, message: str) -> None:
        self.emit("warning", message)

    def error(self, message: str) -> None:
        self.emit("error", message)

    def suggest(self, message: str) -> None:
        self.emit("suggest", message)

    def debug(self, message: str) -> None:
        self.emit("debug", message)


def _env_disables_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager; tests call this between runs."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
