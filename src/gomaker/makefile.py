"""Makefile rendering for Go main packages.

:func:`render` is the producer side of the generator: it yields the
Makefile one line at a time, in file order, and the pipeline writes them
out.  Variable placeholders (``NAME``, ``VERSION``, ``PREFIX``) are
expanded by make, not here.

Layout of the generated file::

    # <name>
    # Makefile generated by Gomaker <version>

    NAME=<name>
    VERSION=<version>.
    PREFIX ?= /usr/local/bin
    <option prelude>

    .PHONY: all build install run clean
    all:    build
    build: / install: / run: / clean:
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from gomaker import __version__
from gomaker.options import BuildFlags, interpret

DEFAULT_PREFIX = "/usr/local/bin"

RULES = ("all", "build", "install", "run", "clean")


class SubstitutionError(ValueError):
    """A ``-X`` variable substitution is not of the form ``pkg.name=value``."""


@dataclass
class MakefileSpec:
    """Everything needed to render one Makefile."""

    name: str
    tokens: list[str] = field(default_factory=lambda: ["none"])
    version: str = ""
    prefix: str = DEFAULT_PREFIX
    tags: list[str] = field(default_factory=list)
    ldflags: str = ""
    substitutions: list[tuple[str, str]] = field(default_factory=list)


def check_substitution(key: str, value: str) -> tuple[str, str]:
    """Validate one ``-X`` pair and return it.

    Keys must be non-empty with no whitespace, ``=`` or quotes.  Go's ldflags
    splitter has no escapes inside quotes, so a value may hold single or
    double quotes but not both.
    """
    if not key or any(ch.isspace() or ch in "='\"" for ch in key):
        raise SubstitutionError(f"Invalid variable name {key!r} (want pkg.name)")
    if "'" in value and '"' in value:
        raise SubstitutionError(
            f"Value for {key} mixes single and double quotes, which -ldflags cannot express"
        )
    return key, value


def parse_substitution(text: str) -> tuple[str, str]:
    """Parse ``pkg.name=value`` into ``(key, value)``.

    The value may be empty; the key may not, and may not contain whitespace.
    """
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise SubstitutionError(f"Invalid variable substitution {text!r} (want pkg.name=value)")
    return check_substitution(key, value)


def parse_tags(raw: str | list[str] | None) -> list[str]:
    """Split build tags given as ``"a,b"``, ``"a b"`` or a list."""
    if not raw:
        return []
    parts = raw if isinstance(raw, list) else [raw]
    tags: list[str] = []
    for part in parts:
        for tag in part.replace(",", " ").split():
            if tag not in tags:
                tags.append(tag)
    return tags


def go_quote(s: str) -> str:
    """Double-quote *s* the way Go's ``strconv.Quote`` does for ASCII text."""
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _sq(s: str) -> str:
    """Single-quote *s* for the shell."""
    return "'" + s.replace("'", "'\\''") + "'"


def echoes(text: str) -> list[str]:
    """Return ``@echo`` recipe lines for each non-empty line of *text*."""
    return [f"\t@echo {_sq(line)}" for line in text.split("\n") if line]


def _x_flag(key: str, value: str) -> str:
    field_ = f"{key}={value}"
    if not any(ch.isspace() or ch in "'\"" for ch in value):
        return f"-X {field_}"
    # Quoted for Go's ldflags splitter; go_quote then escapes for the shell.
    if "'" not in value:
        return f"-X '{field_}'"
    return f'-X "{field_}"'


def build_command(flags: BuildFlags, spec: MakefileSpec) -> str:
    """Return the ``go build`` recipe line (without the leading tab)."""
    parts = ["go build -o ${NAME}"]
    parts.extend(flags.buildflags)
    if spec.tags:
        parts.append("-tags " + go_quote(",".join(spec.tags)))

    ldflags = list(flags.ldflags)
    ldflags.extend(_x_flag(k, v) for k, v in spec.substitutions)
    if spec.ldflags.strip():
        ldflags.append(spec.ldflags.strip())
    if ldflags:
        parts.append("--ldflags " + go_quote(" ".join(ldflags)))
    return " ".join(parts)


def render(spec: MakefileSpec, flags: BuildFlags | None = None) -> Iterator[str]:
    """Yield the lines of the Makefile for *spec*.

    *flags* defaults to interpreting ``spec.tokens``; pass it when the caller
    already interpreted them (e.g. to report skipped tokens).
    """
    if flags is None:
        flags = interpret(spec.tokens)

    yield f"# {spec.name}"
    yield f"# Makefile generated by Gomaker {__version__}"
    yield ""
    yield f"NAME={spec.name}"
    yield f"VERSION={spec.version}." if spec.version else "VERSION="
    yield f"PREFIX ?= {spec.prefix}"
    yield from flags.prelude

    release = "${RELEASE}" if flags.has_commit else "${VERSION}"
    yield ""
    yield ".PHONY: " + " ".join(RULES)
    yield "all:\tbuild"
    yield ""
    yield "build:"
    yield from echoes(f"Building ${{NAME}} version {release}")
    yield "\t" + build_command(flags, spec)
    yield from echoes("Successfully built ${NAME}")
    yield ""
    yield "install:"
    yield from echoes("PREFIX=${PREFIX}")
    yield "\t@mkdir -p ${PREFIX}"
    yield "\t@mv ${NAME} ${PREFIX}/${NAME}"
    yield from echoes("Successfully installed ${NAME} to ${PREFIX}")
    yield ""
    yield "run:\tbuild"
    yield "\t./${NAME}"
    yield ""
    yield "clean:"
    yield "\t@rm -f ${NAME}"
    yield from echoes("Cleaned ${NAME}")
