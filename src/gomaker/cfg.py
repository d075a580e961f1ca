"""gomaker cfg: Programmatic editor for gomaker.toml.

Uses tomlkit for format-preserving round-trip editing (comments,
ordering, and whitespace are retained).

Usage::

    gomaker cfg path
    gomaker cfg show [KEY]
    gomaker cfg set options "static,lite"
    gomaker cfg set tags "netgo,osusergo"
    gomaker cfg set-var main.buildmode release
    gomaker cfg unset-var main.buildmode
"""

from pathlib import Path

import tomlkit
import typer
from tomlkit.items import Table

from gomaker.config import CONFIG_NAME
from gomaker.makefile import SubstitutionError, check_substitution
from gomaker.project import ProjectError, resolve_project_dir

# Keys of the [makefile] table and the value type each one takes.
_KEYS: dict[str, type] = {
    "output": str,
    "options": str,
    "version": str,
    "tags": list,
    "ldflags": str,
    "prefix": str,
    "backup": bool,
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config_path(directory: str) -> Path:
    """Return the gomaker.toml path for *directory*, exiting if missing."""
    try:
        root = resolve_project_dir(directory)
    except ProjectError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    toml_path = root / CONFIG_NAME
    if not toml_path.exists():
        typer.secho(
            f"Error: {toml_path} not found.\nRun 'gomaker init' first.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    return toml_path


def _load_toml(directory: str) -> tuple[tomlkit.TOMLDocument, Path]:
    """Load gomaker.toml as a tomlkit document, preserving formatting."""
    toml_path = _config_path(directory)
    doc = tomlkit.parse(toml_path.read_text(encoding="utf-8"))
    return doc, toml_path


def _save_toml(doc: tomlkit.TOMLDocument, path: Path) -> None:
    """Write tomlkit document back, preserving formatting."""
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def _makefile_table(doc: tomlkit.TOMLDocument) -> Table:
    if "makefile" not in doc:
        doc["makefile"] = tomlkit.table()
    return doc["makefile"]


def coerce_value(key: str, value: str) -> str | bool | list[str]:
    """Convert a command-line string to the type *key* holds."""
    kind = _KEYS.get(key)
    if kind is None:
        raise KeyError(key)
    if kind is bool:
        if value.lower() not in ("true", "false"):
            raise ValueError(f"{key} must be true or false, got {value!r}")
        return value.lower() == "true"
    if kind is list:
        return value.replace(",", " ").split()
    return value


# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

DirOption: str = typer.Option(".", "--dir", "-C", help="Go project directory.")

app = typer.Typer(
    help="Read and edit gomaker.toml programmatically.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]
  gomaker cfg show options                 Read a config value
  gomaker cfg set options static,lite      Set a config value
  gomaker cfg set backup true              Booleans are true/false
  gomaker cfg set-var main.mode release    Add an -X substitution
  gomaker cfg path                         Print path to gomaker.toml

[dim]Keys are relative to the [makefile] table.[/dim]""",
)


@app.command("path")
def path(directory: str = DirOption) -> None:
    """Print the path to gomaker.toml."""
    typer.echo(str(_config_path(directory)))


@app.command("show")
def show(
    key: str | None = typer.Argument(None, help="Key to show, e.g. 'options' or 'vars'."),
    directory: str = DirOption,
) -> None:
    """Show the current config, or a specific key."""
    doc, _ = _load_toml(directory)

    if key is None:
        typer.echo(tomlkit.dumps(doc))
        return

    table = doc.get("makefile", {})
    if key not in table:
        typer.secho(f"Key '{key}' not found.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    current = table[key]
    if isinstance(current, dict):
        typer.echo(tomlkit.dumps(current))
    elif isinstance(current, list):
        typer.echo(",".join(str(v) for v in current))
    elif isinstance(current, bool):
        typer.echo(str(current).lower())
    else:
        typer.echo(str(current))


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help=f"One of: {', '.join(_KEYS)}."),
    value: str = typer.Argument(..., help="Value to set."),
    directory: str = DirOption,
) -> None:
    """Set a [makefile] key."""
    doc, toml_path = _load_toml(directory)
    try:
        parsed = coerce_value(key, value)
    except KeyError:
        typer.secho(
            f"Error: unknown key '{key}'. Known keys: {', '.join(_KEYS)}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1) from None
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    _makefile_table(doc)[key] = parsed
    _save_toml(doc, toml_path)
    typer.secho(f"Set makefile.{key} = {parsed!r}", fg=typer.colors.GREEN, err=True)


@app.command("set-var")
def set_var(
    name: str = typer.Argument(..., help="Qualified variable, e.g. 'main.buildmode'."),
    value: str = typer.Argument(..., help="String value."),
    directory: str = DirOption,
) -> None:
    """Add or replace an -X link-time substitution."""
    try:
        check_substitution(name, value)
    except SubstitutionError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    doc, toml_path = _load_toml(directory)
    table = _makefile_table(doc)
    if "vars" not in table:
        table["vars"] = tomlkit.table()
    table["vars"][name] = value
    _save_toml(doc, toml_path)
    typer.secho(f'Set makefile.vars."{name}" = {value!r}', fg=typer.colors.GREEN, err=True)


@app.command("unset-var")
def unset_var(
    name: str = typer.Argument(..., help="Variable to remove."),
    directory: str = DirOption,
) -> None:
    """Remove an -X link-time substitution."""
    doc, toml_path = _load_toml(directory)
    variables = doc.get("makefile", {}).get("vars", {})
    if name not in variables:
        typer.secho(f"Variable '{name}' not set.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    del variables[name]
    _save_toml(doc, toml_path)
    typer.secho(f'Removed makefile.vars."{name}"', fg=typer.colors.GREEN, err=True)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main_entry() -> None:
    app()


if __name__ == "__main__":
    main_entry()
