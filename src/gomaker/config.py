"""Project configuration loader for gomaker.

Reads an optional ``gomaker.toml`` from the Go project directory so that a
project can pin its Makefile options instead of repeating them on every
run.  Command-line flags override the file; the file overrides the
built-in defaults.

Example ``gomaker.toml``::

    [makefile]
    output = "Makefile"
    options = "static,lite,commit"
    version = "v1.2.0"
    tags = ["netgo"]
    ldflags = "-w"
    prefix = "/usr/local/bin"
    backup = false

    [makefile.vars]
    "main.buildmode" = "release"

Usage::

    from gomaker.config import load_config
    cfg = load_config(project_dir)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gomaker.makefile import DEFAULT_PREFIX, SubstitutionError, check_substitution
from gomaker.options import DEFAULT_OPTIONS

CONFIG_NAME = "gomaker.toml"


class ConfigError(ValueError):
    """``gomaker.toml`` is unreadable or holds a value of the wrong type."""


@dataclass
class GomakerConfig:
    """Parsed ``[makefile]`` settings."""

    # Directory holding gomaker.toml (the Go project directory)
    root: Path

    output: str = "Makefile"
    options: str = DEFAULT_OPTIONS
    version: str = ""
    tags: List[str] = field(default_factory=list)
    ldflags: str = ""
    prefix: str = DEFAULT_PREFIX
    backup: bool = False
    variables: Dict[str, str] = field(default_factory=dict)

    # Path of the file the values came from, if any
    source: Optional[Path] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            "root": str(self.root),
            "source": str(self.source) if self.source else None,
            "output": self.output,
            "options": self.options,
            "version": self.version,
            "tags": list(self.tags),
            "ldflags": self.ldflags,
            "prefix": self.prefix,
            "backup": self.backup,
            "vars": dict(self.variables),
        }


def _expect(table: dict, key: str, kind: type, default: Any) -> Any:
    value = table.get(key, default)
    if not isinstance(value, kind):
        raise ConfigError(
            f"{CONFIG_NAME}: makefile.{key} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _tags(value: Any) -> List[str]:
    if isinstance(value, str):
        return value.replace(",", " ").split()
    if isinstance(value, list) and all(isinstance(t, str) for t in value):
        return list(value)
    raise ConfigError(f"{CONFIG_NAME}: makefile.tags must be a string or list of strings")


def load_config(root: Path) -> GomakerConfig:
    """Load ``gomaker.toml`` from *root*, falling back to defaults.

    Raises:
        ConfigError: the file is not valid TOML or has mistyped values.
    """
    toml_path = root / CONFIG_NAME
    if not toml_path.exists():
        return GomakerConfig(root=root)

    try:
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{toml_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"{toml_path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e

    section = raw.get("makefile", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{CONFIG_NAME}: [makefile] must be a table")

    variables = section.get("vars", {})
    if not isinstance(variables, dict) or not all(
        isinstance(v, str) for v in variables.values()
    ):
        raise ConfigError(f"{CONFIG_NAME}: [makefile.vars] values must be strings")
    for key, value in variables.items():
        try:
            check_substitution(key, value)
        except SubstitutionError as e:
            raise ConfigError(f"{CONFIG_NAME}: [makefile.vars] {e}") from e

    return GomakerConfig(
        root=root,
        output=_expect(section, "output", str, "Makefile"),
        options=_expect(section, "options", str, DEFAULT_OPTIONS),
        version=_expect(section, "version", str, ""),
        tags=_tags(section.get("tags", [])),
        ldflags=_expect(section, "ldflags", str, ""),
        prefix=_expect(section, "prefix", str, DEFAULT_PREFIX),
        backup=_expect(section, "backup", bool, False),
        variables=dict(variables),
        source=toml_path,
    )
