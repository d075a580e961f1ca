"""Shared CLI utilities for gomaker commands.

Provides the common project-directory argument, config-loading helper, and
standardised output / error helpers so that every command reports errors,
warnings and JSON the same way.

Usage in a command::

    import typer
    from gomaker.cli import ProjectDirArgument, error_exit, json_print

    app = typer.Typer()

    @app.command()
    def main(directory: str = ProjectDirArgument) -> None:
        ...

All human-facing progress goes to stderr so that ``gomaker generate -o -``
can stream the Makefile on stdout.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

# Re-usable Typer argument for the Go project directory
ProjectDirArgument: str = typer.Argument(
    ".",
    help="Go project directory ('.' for the current directory).",
    show_default=True,
)


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def warn(msg: str) -> None:
    """Print a yellow warning to stderr."""
    _err_console.print(f"[yellow]WARNING:[/yellow] {escape(msg)}", highlight=False)


def info(msg: str) -> None:
    """Print a progress message to stderr."""
    _err_console.print(escape(msg), highlight=False)


def json_print(data: dict[str, Any] | list[Any], *, err: bool = False) -> None:
    """Print *data* as pretty-printed JSON to stdout, or stderr when *err*."""
    print(json.dumps(data, indent=2), file=sys.stderr if err else sys.stdout)


# ---------------------------------------------------------------------------
# Debug trace
# ---------------------------------------------------------------------------


class DebugLog:
    """Optional run trace written to a file with a Rich console.

    Disabled instances swallow every call, so commands can log
    unconditionally::

        with DebugLog(enabled=debug) as dbg:
            dbg.log("options", tokens)
    """

    def __init__(self, enabled: bool = False, path: Path | None = None) -> None:
        self.enabled = enabled
        self.path = path if path is not None else Path.cwd() / "debug.log"
        self._fh = None
        self._console: Console | None = None

    def __enter__(self) -> DebugLog:
        if self.enabled:
            self._fh = open(self.path, "a", encoding="utf-8")
            self._console = Console(file=self._fh, width=120, no_color=True)
        return self

    def __exit__(self, *exc: object) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
            self._console = None

    def log(self, *objects: Any) -> None:
        """Append a timestamped entry when enabled."""
        if self._console is not None:
            self._console.log(*objects, markup=False)
