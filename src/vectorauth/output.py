"""Terminal output for vectorauth.

Results and diagnostics never share a stream:

* **stdout** carries only the result of a command (a robot configuration,
  a certificate, an address), so ``vector-auth login ... > vector.json``
  captures exactly the configuration.
* **stderr** carries everything else: progress, warnings, errors and the
  ``--verbose`` trace of each login step.

Results are rendered as JSON, as plain ``field<TAB>value`` lines, or as a
Rich table when stdout is an interactive terminal. Colour is dropped for
``NO_COLOR``, ``TERM=dumb`` and ``--no-color``.

Messages are rendered as :class:`rich.text.Text`, never as console markup,
because they routinely contain brackets (``[fe80::1]:443``).

Library modules report through the module-level functions (:func:`debug`,
:func:`warning`, ...), which use the manager installed by
:func:`vectorauth.app.main_callback` or a default one.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How results are written to stdout.

    ``AUTO`` becomes ``RICH`` on a colour-capable TTY and ``PLAIN``
    everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes command results to stdout and diagnostics to stderr.

    Args:
        format: Result format; ``AUTO`` is resolved once, here.
        no_color: Print diagnostics and results without styling.
        quiet: Drop info, success and suggestion messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # --- results (stdout) ---

    def format_response(self, data: Any) -> None:
        """Write a command result to stdout.

        Args:
            data: A dumped :class:`~vectorauth.models.RobotConfiguration`
                (or any flat dict), or a scalar such as a certificate or
                an address.
        """
        if self._format == OutputFormat.JSON:
            indent = 2 if isinstance(data, (dict, list)) else None
            self.print_data(json.dumps(data, indent=indent, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, dict):
            self._stdout.print(_field_table(data))
        else:
            self._stdout.print(Text(str(data)))

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # --- diagnostics (stderr) ---

    def info(self, message: str) -> None:
        """Progress or summary line. Dropped by ``--quiet``."""
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        """Green completion line. Dropped by ``--quiet``."""
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Always shown."""
        self._emit(message, label="Warning: ", label_style="yellow")

    def error(self, message: str) -> None:
        """Always shown."""
        self._emit(message, label="Error: ", label_style="bold red")

    def suggest(self, message: str) -> None:
        """Dimmed next step for the user. Dropped by ``--quiet``."""
        if not self._quiet:
            self._emit(f"→ {message}", style="dim")

    def debug(self, message: str) -> None:
        """Trace line, shown only with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", style="dim")

    def _emit(
        self,
        message: str,
        style: str = "",
        label: str = "",
        label_style: str = "",
    ) -> None:
        if self._no_color:
            print(f"{label}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(Text.assemble((label, label_style), (message, style)))


def _plain_lines(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return [str(data)]
    lines = []
    for key, value in data.items():
        if value is None:
            lines.append(f"{key}\t")
        elif isinstance(value, str) and "\n" in value:
            # PEM text keeps its own lines, under a bare key line.
            lines.append(f"{key}\n{value.rstrip()}")
        else:
            lines.append(f"{key}\t{value}")
    return lines


def _field_table(data: dict) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
    table.add_column("field", style="bold cyan", no_wrap=True)
    table.add_column("value", overflow="fold")
    for key, value in data.items():
        table.add_row(Text(str(key)), Text("-", style="dim") if value is None else Text(str(value)))
    return table


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- process-wide manager ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


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
