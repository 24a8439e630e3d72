"""Terminal output for the apicaller CLI and dispatcher traces.

Decoded response bodies, rendered URLs and tables go to **stdout**; status
lines, cache hit/miss traces and errors go to **stderr**, so that
``apicaller --json get one | jq`` only ever sees data.

The dispatcher reports through :func:`debug`, which delegates to the
process-wide :class:`OutputManager`. The CLI installs a configured manager
before running a command; library users get a default one (debug traces
hidden) until they call :func:`set_output`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data is written to stdout. ``AUTO`` means ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes response data to stdout and diagnostics to stderr.

    Args:
        format: Data format for stdout. ``AUTO`` is resolved once, here.
        no_color: Strip colour and Rich markup from everything.
        quiet: Hide ``info`` and ``success`` lines.
        verbose: Show ``debug`` lines (cache hits, misses and stores).
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

        if format == OutputFormat.AUTO:
            use_rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if use_rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- stdout ---

    def format_response(self, data: Any) -> None:
        """Render a decoded response body (JSON value or Pydantic model)."""
        data = _to_jsonable(data)
        if self._format == OutputFormat.PLAIN:
            self._print_plain(data)
            return

        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON array of objects, or TSV with a header line."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(title=title, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # --- stderr ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, style="green")

    def error(self, message: str) -> None:
        """Never suppressed, not even by ``quiet``."""
        self._emit(message, style="bold red", label="Error:")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", style="dim")

    def _emit(self, message: str, style: Optional[str] = None, label: str = "") -> None:
        if self._no_color or style is None:
            line = f"{label} {message}" if label else message
            print(line, file=sys.stderr, flush=True)
        elif label:
            self._stderr.print(f"[{style}]{label}[/{style}] {message}", highlight=False)
        else:
            self._stderr.print(message, style=style, markup=False, highlight=False)

    def _print_plain(self, data: Any) -> None:
        # dict -> key<TAB>value lines; list -> one line per item.
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(str(v) for v in item.values()))
                else:
                    self.print_data(str(item))
        else:
            self.print_data(str(data))


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_to_jsonable(item) for item in data]
    return data


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- Process-wide manager ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
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


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
