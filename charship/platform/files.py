"""Filesystem helpers.

Release re-runs must converge: every copy into a fixed artifact path clears
the target first. Secret material only ever lives inside ``secret_dir``.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

__all__ = [
    "atomic_write_text",
    "remove_path",
    "replace_tree",
    "reset_dir",
    "secret_dir",
    "write_secret",
]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def remove_path(path: Path) -> None:
    """Remove a file or directory tree; missing paths are fine."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def replace_tree(src: Path, dst: Path) -> None:
    """Copy a directory tree to dst, replacing whatever was there."""
    remove_path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(src, dst, symlinks=True)


def reset_dir(path: Path) -> None:
    """Make path an empty directory."""
    remove_path(path)
    path.mkdir(parents=True)


def write_secret(path: Path, content: str) -> None:
    """Write content readable by the owner only."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(content)


@contextmanager
def secret_dir(prefix: str) -> Iterator[Path]:
    """Create a uniquely named private temp directory, removed on exit.

    Removal runs on every exit path, including exceptions raised inside the
    ``with`` block.
    """
    path = Path(tempfile.mkdtemp(prefix=f"{prefix}-"))
    try:
        yield path
    finally:
        if path.exists():
            shutil.rmtree(path)
