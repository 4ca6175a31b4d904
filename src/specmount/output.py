"""Rendering of base-path and validation-error reports for the CLI.

Reports go to stdout; status lines and errors go to stderr so that
``specmount --json paths openapi.yaml | jq`` only ever sees data.

A report is rendered in one of three ways:

* ``RICH`` -- a :class:`~rich.table.Table`, used on a colour terminal;
* ``PLAIN`` -- tab-separated rows under a header line, used when piped;
* ``JSON`` -- a list of objects keyed by column name.

:func:`~specmount.app.main_callback` installs one :class:`OutputManager`
per invocation with :func:`set_output`; commands call the module-level
helpers.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Sequence
from enum import Enum
from typing import Optional

from rich.console import Console
from rich.table import Table

from specmount.base_path import BasePath
from specmount.models import SchemaError


class OutputFormat(str, Enum):
    """Report format. ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _display(path: str) -> str:
    # The root mounts at "", which reads better as "/".
    return path or "/"


def _color_disabled() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


class OutputManager:
    """Writes specmount reports to stdout and diagnostics to stderr.

    Args:
        format: Report format; ``AUTO`` is resolved once, here.
        no_color: Strip colour from both streams.
        quiet: Drop success messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            interactive = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
            format = OutputFormat.RICH if interactive and not self._no_color else OutputFormat.PLAIN
        self._format = format

        self._console = Console(file=sys.stdout, no_color=self._no_color, force_terminal=True)
        self._err_console = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # -- reports (stdout) -------------------------------------------------

    def print_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write *rows* under *headers*; *title* only shows in ``RICH``."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            print(json.dumps(records, indent=2, ensure_ascii=False), flush=True)
            return
        if self._format == OutputFormat.PLAIN:
            for line in (headers, *rows):
                print("\t".join(line), flush=True)
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._console.print(table)

    def print_base_paths(
        self,
        base_paths: Sequence[BasePath],
        api_title: str = "API",
        expand: bool = False,
    ) -> None:
        """Report the mountable base paths of a document.

        By default there is one row per :class:`BasePath`, with its concrete
        paths comma-joined. With *expand* there is one row per concrete
        path instead.
        """
        if expand:
            headers = ["Express Path", "Path"]
            rows = [
                [_display(bp.express_path), _display(path)]
                for bp in base_paths
                for path in bp.all()
            ]
        else:
            headers = ["Template", "Express Path", "Paths"]
            rows = [
                [
                    _display(bp.template),
                    _display(bp.express_path),
                    ", ".join(_display(path) for path in bp.all()),
                ]
                for bp in base_paths
            ]
        self.print_table(headers, rows, title=f"{api_title} -- Base paths ({len(base_paths)})")

    def print_schema_errors(self, errors: Sequence[SchemaError]) -> None:
        """Report meta-schema errors, one row per error, keyed by JSON pointer."""
        rows = [[_display(err.path), err.message] for err in errors]
        self.print_table(["Path", "Message"], rows, title=f"Validation errors ({len(rows)})")

    # -- diagnostics (stderr) ---------------------------------------------

    def _status(self, plain: str, styled: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._err_console.print(styled)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._status(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Always shown, even with ``--quiet``."""
        self._status(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._status(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, installing a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def print_base_paths(
    base_paths: Sequence[BasePath], api_title: str = "API", expand: bool = False
) -> None:
    get_output().print_base_paths(base_paths, api_title, expand)


def print_schema_errors(errors: Sequence[SchemaError]) -> None:
    get_output().print_schema_errors(errors)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
