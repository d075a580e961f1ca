"""Write a default gomaker.toml into a Go project directory.

Usage:
    gomaker init [DIR] [--options LIST] [--version V] [--force]
"""

from pathlib import Path

import tomlkit
import typer

from gomaker.cli import ProjectDirArgument, error_exit
from gomaker.config import CONFIG_NAME
from gomaker.makefile import DEFAULT_PREFIX
from gomaker.options import DEFAULT_OPTIONS, OPTIONS
from gomaker.output import atomic_write_text
from gomaker.project import ProjectError, resolve_project_dir

app = typer.Typer(
    help="Create a gomaker.toml with the default settings.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

gomaker init                                   Defaults in the current directory

gomaker init ./cmd/tool --options static,lite  Pin a different option set

gomaker init --force                           Overwrite an existing file

[dim]Every key in the file can be overridden by the matching 'gomaker generate' flag.[/dim]""",
)

DEFAULT_GOMAKER_TOML = """# gomaker configuration for {project_name}
# Flags passed to 'gomaker generate' override these values.

[makefile]
output = "Makefile"                  # '-' writes to stdout
options = {options}               # {known}
version = {version}                           # prefixed to the commit hash (v1.2.3)
tags = []                            # go build -tags
ldflags = ""                         # extra linker flags
prefix = {prefix}
backup = false                       # copy an existing Makefile to a temp path first

# Link-time string variables, passed as -X key=value.
[makefile.vars]
# "main.buildmode" = "release"
"""


def render_template(project_name: str, options: str = DEFAULT_OPTIONS, version: str = "") -> str:
    """Return the gomaker.toml text for a project.

    String values are written as TOML basic strings so quotes and
    backslashes in *options* or *version* survive a reload.
    """
    return DEFAULT_GOMAKER_TOML.format(
        project_name=project_name.replace("\n", " "),
        options=tomlkit.string(options).as_string(),
        version=tomlkit.string(version).as_string(),
        prefix=tomlkit.string(DEFAULT_PREFIX).as_string(),
        known=" | ".join(OPTIONS),
    )


@app.callback(invoke_without_command=True)
def main(
    directory: str = ProjectDirArgument,
    options: str = typer.Option(DEFAULT_OPTIONS, "--options", help="Initial option list."),
    version: str = typer.Option("", "--version", help="Initial version string."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """
    Initialize gomaker.toml in DIRECTORY.

    The file pins the options, version, tags and link flags used by
    'gomaker generate' for this project.
    """
    try:
        root = resolve_project_dir(directory)
    except ProjectError as e:
        error_exit(str(e))

    toml_path: Path = root / CONFIG_NAME
    if toml_path.exists() and not force:
        error_exit(f"A {CONFIG_NAME} already exists in {root} (use --force to overwrite)")

    atomic_write_text(toml_path, render_template(root.name, options, version))
    typer.secho(f"Created {toml_path}", fg=typer.colors.GREEN, err=True)
    typer.echo("Next: run 'gomaker generate' in this directory.", err=True)


init = main


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
