"""s101.io.fs

Atomic, stable filesystem writers.

Why this module exists
----------------------
The runner writes a handful of small generated files: the run receipt, the
license properties file and the default project files. If a process is killed
mid-write, a half-written receipt would make the next up-to-date check lie, and
a half-written ``project.java.hsp`` would be staged and promoted as-is.

This module centralizes atomic writes for JSON / text so other modules can
import a single implementation.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional


def _atomic_write_text(
    path: Path,
    write_fn,
    *,
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline=newline) as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, p)
    finally:
        # If os.replace fails, best-effort cleanup of the temp file.
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write UTF-8 text atomically with ``\\n`` line endings on every platform."""

    def _write(f) -> None:
        f.write(text)

    _atomic_write_text(Path(path), _write, encoding=encoding, newline="\n")


def write_json_atomic(
    path: Path,
    data: Any,
    *,
    indent: int = 2,
    sort_keys: bool = True,
    ensure_ascii: bool = False,
    encoding: str = "utf-8",
) -> None:
    """Write JSON atomically with stable formatting."""

    def _write(f) -> None:
        json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=ensure_ascii, default=str)
        f.write("\n")

    _atomic_write_text(Path(path), _write, encoding=encoding, newline="\n")


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    """Read JSON from disk."""

    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)


def remove_tree(path: Path) -> None:
    """Delete a directory tree (or a single file) if it exists."""

    p = Path(path)
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    elif p.exists() or p.is_symlink():
        p.unlink()
