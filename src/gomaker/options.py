"""Build options and their Makefile fragments.

Each option token maps to a fixed set of fragments: lines for the Makefile
prelude (environment exports and variables), ``go build`` flags, and
``-ldflags`` entries.  :func:`interpret` walks the tokens in the order the
user listed them and accumulates the fragments into a :class:`BuildFlags`.

Usage::

    gomaker options
    gomaker options --json
"""

from dataclasses import dataclass, field

import typer
from rich.console import Console
from rich.table import Table

from gomaker.cli import json_print, warn

DEFAULT_OPTIONS = "static,verbose,lite,commit"


@dataclass(frozen=True)
class Option:
    """A single option token and the fragments it contributes."""

    name: str
    help: str
    shell: str
    prelude: tuple[str, ...] = ()
    buildflags: tuple[str, ...] = ()
    ldflags: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dict for JSON output."""
        return {
            "name": self.name,
            "help": self.help,
            "shell": self.shell,
            "prelude": list(self.prelude),
            "buildflags": list(self.buildflags),
            "ldflags": list(self.ldflags),
        }


OPTIONS: dict[str, Option] = {
    "none": Option(
        name="none",
        help="normal go build",
        shell="go build",
    ),
    "verbose": Option(
        name="verbose",
        help="verbose build",
        shell="go build -x",
        buildflags=("-x",),
    ),
    "lite": Option(
        name="lite",
        help="no debug symbols",
        shell="--ldflags '-s'",
        ldflags=("-s",),
    ),
    "static": Option(
        name="static",
        help="try making a static linked binary (no deps)",
        shell="CGO_ENABLED=0 go build",
        prelude=("export CGO_ENABLED=0",),
    ),
    "commit": Option(
        name="commit",
        help="stamp version and git commit into main.version",
        shell="--ldflags '-X main.version=${RELEASE}'",
        prelude=(
            "COMMIT=$(shell git rev-parse --verify --short HEAD)",
            "RELEASE=${VERSION}${COMMIT}",
        ),
        ldflags=("-X main.version=${RELEASE}",),
    ),
}


@dataclass
class BuildFlags:
    """Fragments accumulated from a list of option tokens."""

    tokens: list[str] = field(default_factory=list)
    prelude: list[str] = field(default_factory=list)
    buildflags: list[str] = field(default_factory=list)
    ldflags: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def has_commit(self) -> bool:
        """True if the commit option defined ``RELEASE``."""
        return "commit" in self.tokens


def parse_options(raw: str | None) -> list[str]:
    """Split a comma-separated option string into tokens.

    Empty input, or any ``none`` token, collapses the list to ``["none"]``.
    Duplicates keep their first position.
    """
    tokens: list[str] = []
    for part in (raw or "").split(","):
        token = part.strip()
        if token and token not in tokens:
            tokens.append(token)
    if not tokens or "none" in tokens:
        return ["none"]
    return tokens


def interpret(tokens: list[str]) -> BuildFlags:
    """Accumulate the fragments for *tokens* in order.

    Unknown tokens are reported with :func:`gomaker.cli.warn` and skipped.
    """
    flags = BuildFlags()
    for token in tokens:
        option = OPTIONS.get(token)
        if option is None:
            warn(f"{token} is not a real option. Skipping.")
            flags.skipped.append(token)
            continue
        flags.tokens.append(token)
        flags.prelude.extend(option.prelude)
        flags.buildflags.extend(option.buildflags)
        flags.ldflags.extend(option.ldflags)
    return flags


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="List the available build options.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

gomaker generate --options "static,lite,commit" .

gomaker generate --options none .       Literal 'go build'

[dim]Options are comma separated and applied in the order listed.[/dim]""",
)


@app.callback(invoke_without_command=True)
def main(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show every option token with the shell equivalent it produces."""
    if json_output:
        json_print([opt.to_dict() for opt in OPTIONS.values()])
        return

    tbl = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    tbl.add_column("Option")
    tbl.add_column("Effect")
    tbl.add_column("Shell")
    for opt in OPTIONS.values():
        tbl.add_row(opt.name, opt.help, opt.shell)
    console = Console()
    console.print(tbl)
    console.print(f"\n[dim]Default: {DEFAULT_OPTIONS}[/dim]", highlight=False)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
