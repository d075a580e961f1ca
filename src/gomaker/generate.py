"""generate.py – Write a Makefile for a Go main package.

Inspects the project directory, interprets the option list, and streams the
rendered Makefile through the producer/consumer pipeline into the output
file (or stdout with ``-o -``).

Usage::

    gomaker generate .
    gomaker generate -o Makefile --options "static,lite,commit" ./cmd/tool
    gomaker generate --options none -o - .
"""

from pathlib import Path
from typing import Any

import typer

from gomaker.cli import DebugLog, ProjectDirArgument, error_exit, info, json_print
from gomaker.config import ConfigError, load_config
from gomaker.makefile import (
    MakefileSpec,
    SubstitutionError,
    check_substitution,
    parse_substitution,
    parse_tags,
    render,
)
from gomaker.options import interpret, parse_options
from gomaker.output import STDOUT, backup_file, open_output
from gomaker.pipeline import pump
from gomaker.project import ProjectError, inspect_project, resolve_project_dir

_EPILOG = """\
[bold]Examples:[/bold]

gomaker generate .                                   Defaults: static,verbose,lite,commit

gomaker generate -o Makefile --options "static,lite,commit" .

gomaker generate --options none .                    Literal 'go build'

gomaker generate --version v1.2.0 -X main.mode=prod .

gomaker generate -o - .                              Print to stdout

[bold]Options:[/bold]

none     normal go build

verbose  verbose build (go build -x)

lite     no debug symbols (--ldflags '-s')

static   try making a static linked binary (CGO_ENABLED=0)

commit   add version and git commit to main.version

[dim]Values from gomaker.toml in the project directory are used for any flag
not given on the command line.[/dim]"""

app = typer.Typer(
    help="Generate a Makefile for a Go main package.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


def build_spec(
    project_name: str,
    options: str,
    version: str,
    prefix: str,
    tags: list[str],
    ldflags: str,
    substitutions: list[str],
    variables: dict[str, str] | None = None,
) -> MakefileSpec:
    """Assemble a :class:`MakefileSpec`, validating substitutions.

    *variables* are pairs from gomaker.toml; they come before the
    ``pkg.name=value`` strings given on the command line.
    """
    pairs = [check_substitution(k, v) for k, v in (variables or {}).items()]
    pairs.extend(parse_substitution(s) for s in substitutions)
    return MakefileSpec(
        name=project_name,
        tokens=parse_options(options),
        version=version,
        prefix=prefix,
        tags=parse_tags(tags),
        ldflags=ldflags,
        substitutions=pairs,
    )


def generate(
    directory: str,
    output: str | None = None,
    options: str | None = None,
    version: str | None = None,
    tags: str | None = None,
    ldflags: str | None = None,
    substitutions: list[str] | None = None,
    prefix: str | None = None,
    backup: bool | None = None,
    debug: DebugLog | None = None,
) -> dict[str, Any]:
    """Generate the Makefile and return a summary dict.

    ``None`` arguments fall back to ``gomaker.toml`` and then the defaults.

    Raises:
        ProjectError, ConfigError, SubstitutionError, OSError
    """
    dbg = debug or DebugLog()
    root = resolve_project_dir(directory)
    dbg.log("project dir", str(root))
    project = inspect_project(root)
    dbg.log("go files", [p.name for p in project.go_files])

    cfg = load_config(root)
    dbg.log("config", cfg.to_dict())

    spec = build_spec(
        project_name=project.name,
        options=options if options is not None else cfg.options,
        version=version if version is not None else cfg.version,
        prefix=prefix if prefix is not None else cfg.prefix,
        tags=[tags] if tags is not None else cfg.tags,
        ldflags=ldflags if ldflags is not None else cfg.ldflags,
        substitutions=substitutions or [],
        variables=cfg.variables,
    )
    flags = interpret(spec.tokens)
    dbg.log("options", spec.tokens, "skipped", flags.skipped)

    out = output if output is not None else cfg.output
    if out != STDOUT and not Path(out).is_absolute():
        out_path = root / out
    else:
        out_path = Path(out)

    backup_path = None
    if out != STDOUT and (backup if backup is not None else cfg.backup):
        backup_path = backup_file(out_path)
        dbg.log("backup", str(backup_path))

    with open_output(out if out == STDOUT else out_path) as sink:
        count = pump(render(spec, flags), sink)
    dbg.log("lines written", count)

    return {
        "project": project.name,
        "output": out if out == STDOUT else str(out_path),
        "options": flags.tokens,
        "skipped": flags.skipped,
        "lines": count,
        "backup": str(backup_path) if backup_path else None,
    }


@app.callback(invoke_without_command=True)
def main(
    directory: str = ProjectDirArgument,
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output file, '-' for stdout. [default: Makefile]"
    ),
    options: str | None = typer.Option(
        None,
        "--options",
        help='Comma separated options, e.g. --options "static,lite". [default: static,verbose,lite,commit]',
    ),
    version: str | None = typer.Option(
        None, "--version", help="Version (v4.3.2), prefixed to the commit option."
    ),
    tags: str | None = typer.Option(None, "--tags", help="Build tags, comma or space separated."),
    ldflags: str | None = typer.Option(None, "--ldflags", help="Extra linker flags."),
    substitutions: list[str] | None = typer.Option(
        None, "--set", "-X", help="Link-time variable, pkg.name=value (repeatable)."
    ),
    prefix: str | None = typer.Option(None, "--prefix", help="Install prefix."),
    backup: bool = typer.Option(
        False, "--backup", help="Copy an existing output file to a temp path first."
    ),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging to debug.log"),
    json_output: bool = typer.Option(False, "--json", help="Print a JSON summary"),
) -> None:
    """Generate a Makefile for the Go main package in DIRECTORY."""
    with DebugLog(enabled=debug) as dbg:
        try:
            summary = generate(
                directory,
                output=output,
                options=options,
                version=version,
                tags=tags,
                ldflags=ldflags,
                substitutions=substitutions,
                prefix=prefix,
                backup=backup or None,
                debug=dbg,
            )
        except (ProjectError, ConfigError, SubstitutionError, OSError) as e:
            dbg.log("fatal", repr(e))
            error_exit(str(e), json_mode=json_output)

    if json_output:
        # Keep stdout to the Makefile alone when streaming it there.
        json_print(summary, err=summary["output"] == STDOUT)
        return
    if summary["backup"]:
        info(f"[Gomaker] Backup: {summary['backup']}")
    info(f"[Project] {summary['project']}")
    info(f"[Options] {','.join(summary['options'])}")
    if summary["output"] != STDOUT:
        info(f"[Gomaker] Makefile generated: {summary['output']}")


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
