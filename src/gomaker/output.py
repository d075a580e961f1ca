"""Output destinations for generated files."""

import contextlib
import os
import shutil
import sys
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

STDOUT = "-"


def backup_file(filepath: Path) -> Path | None:
    """Copy *filepath* to a fresh temporary path and return it.

    Returns ``None`` if there is nothing to back up.
    """
    if not filepath.is_file():
        return None
    fd, tmp = tempfile.mkstemp(prefix=f"{filepath.name}.", suffix=".bak")
    os.close(fd)
    shutil.copy2(filepath, tmp)
    return Path(tmp)


@contextlib.contextmanager
def atomic_writer(filepath: Path, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Open a temporary sibling of *filepath*; replace *filepath* on success."""
    tmp_path = filepath.with_suffix(filepath.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding=encoding, newline="\n") as f:
            yield f
        os.replace(tmp_path, filepath)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise


@contextlib.contextmanager
def open_output(target: str | Path) -> Iterator[TextIO]:
    """Yield a text sink for *target*; ``-`` is standard output."""
    if str(target) == STDOUT:
        yield sys.stdout
        sys.stdout.flush()
        return
    with atomic_writer(Path(target)) as f:
        yield f


def atomic_write_text(filepath: Path, text: str, encoding: str = "utf-8") -> None:
    """Write text to a file atomically to prevent corruption on crash."""
    with atomic_writer(filepath, encoding=encoding) as f:
        f.write(text)
