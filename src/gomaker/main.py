"""main.py – Umbrella CLI entry point for gomaker.

Each subcommand module is imported on its own.  A module that fails to
import (``cfg`` and ``init`` without tomlkit) is replaced by a command that
reports the import error, so ``generate`` keeps working.

``generate``, ``options``, ``doctor`` and ``init`` are flat commands; ``cfg``
is a group with its own subcommands.
"""

import importlib
from collections.abc import Callable

import typer

from gomaker import __version__

app = typer.Typer(
    help="Makefile generator for Go projects.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  gomaker doctor               Check the project and Go toolchain
  gomaker init                 Pin options in gomaker.toml (optional)
  gomaker generate .           Write ./Makefile
  make && make install         Build and install the binary

[dim]Run 'gomaker options' for the option list, or 'gomaker <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

# (command, module, help); the module exposes `app` and its callback `main`.
_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("generate", "gomaker.generate", "Generate a Makefile for a Go main package."),
    ("options", "gomaker.options", "List the available build options."),
    ("doctor", "gomaker.doctor", "Check the project directory and Go toolchain."),
    ("init", "gomaker.init", "Create a gomaker.toml with the default settings."),
]

# Groups mounted whole with add_typer().
_MULTI_COMMANDS: list[tuple[str, str, str]] = [
    ("cfg", "gomaker.cfg", "Read and edit gomaker.toml programmatically."),
]


def _unavailable(command: str, module: str, err: ImportError) -> Callable[[], None]:
    """Return a command body explaining why ``gomaker <command>`` cannot run."""

    def _report() -> None:
        typer.echo(
            f"gomaker {command}: unavailable, importing {module} failed ({err}).\n"
            "Reinstall gomaker with its dependencies: pip install --force-reinstall gomaker",
            err=True,
        )
        raise typer.Exit(code=1)

    return _report


for _name, _module, _help in _SINGLE_COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        _epilog = getattr(_mod.app.info, "epilog", None)
        if not isinstance(_epilog, str):
            _epilog = None
        app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)
    except ImportError as _exc:
        app.command(name=_name, help=f"[unavailable] {_help}")(_unavailable(_name, _module, _exc))

for _name, _module, _help in _MULTI_COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        app.add_typer(_mod.app, name=_name, help=_help)
    except ImportError as _exc:
        _group = typer.Typer()
        _group.callback(invoke_without_command=True)(_unavailable(_name, _module, _exc))
        app.add_typer(_group, name=_name, help=f"[unavailable] {_help}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gomaker {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    show_version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the gomaker version and exit.",
    ),
) -> None:
    """Makefile generator for Go projects."""


def main() -> None:
    app()


if __name__ == "__main__":
    main()
