"""Go project directory inspection.

Finds the Go sources in a directory and reads the package clause so that
only ``main`` packages (which produce a binary) get a Makefile.  The binary
name follows ``go build``: the base name of the directory.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path


class ProjectError(Exception):
    """The directory is not a buildable Go main package."""


_PACKAGE_RE = re.compile(r"^package\s+([A-Za-z_][A-Za-z0-9_]*)")


@dataclass
class GoProject:
    """A Go main package directory."""

    root: Path
    name: str
    package: str
    go_files: list[Path] = field(default_factory=list)


def resolve_project_dir(arg: str | None) -> Path:
    """Resolve the CLI directory argument, ``.`` meaning the working directory."""
    if not arg or arg == ".":
        path = Path.cwd()
    else:
        path = Path(arg).expanduser()
    path = path.resolve()
    if not path.is_dir():
        raise ProjectError(f"Not a directory: {path}")
    return path


def go_files(directory: Path) -> list[Path]:
    """Return the non-hidden ``*.go`` files directly in *directory*, sorted."""
    return sorted(
        p for p in directory.glob("*.go") if not p.name.startswith(".") and p.is_file()
    )


def package_name(go_file: Path) -> str:
    """Return the package name declared in *go_file*, or ``""`` if none."""
    with go_file.open(encoding="utf-8", errors="replace") as f:
        for line in f:
            m = _PACKAGE_RE.match(line)
            if m:
                return m.group(1)
    return ""


def inspect_project(directory: Path) -> GoProject:
    """Inspect *directory* and return the :class:`GoProject` it holds.

    Raises:
        ProjectError: no Go files, or the package is not ``main``.
    """
    files = go_files(directory)
    if not files:
        raise ProjectError(f"Not a Go project directory (no .go files): {directory}")

    sources = [p for p in files if not p.name.endswith("_test.go")] or files
    probe = sources[0]
    pkg = package_name(probe)
    if pkg != "main":
        raise ProjectError(f"Not a main package: {pkg or '(none)'} in {probe}")

    return GoProject(root=directory, name=directory.name, package=pkg, go_files=files)
