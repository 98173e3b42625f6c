"""
blueprint-compliance — filesystem utilities

File: src/blueprint_compliance/utils/fs.py

Purpose
- Persist blueprint documents atomically and read candidate sources leniently.

Functional requirements
- A crashed or failed write never leaves a truncated blueprint at the target path.
- Reading source text never raises on undecodable bytes.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

PathLike = str | os.PathLike[str]

__all__ = [
    "atomic_write",
    "is_within",
    "read_text_lenient",
]


def atomic_write(
    path: PathLike,
    data: str,
    *,
    encoding: str = "utf-8",
    create_parents: bool = True,
) -> Path:
    """
    Write ``data`` to ``path`` via a sibling temp file and ``os.replace``.

    Parent directories are created on demand unless ``create_parents`` is false.
    Returns the final path.
    """

    target = Path(path)
    if create_parents:
        target.parent.mkdir(parents=True, exist_ok=True)
    parent = target.parent.resolve(strict=True)
    if not parent.is_dir():
        raise NotADirectoryError(f"{parent!s} is not a directory")

    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(parent))
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, target)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise
    return target


def read_text_lenient(path: PathLike, *, encoding: str = "utf-8") -> str:
    """Decode file contents, replacing undecodable bytes. ``OSError`` propagates."""

    return Path(path).read_bytes().decode(encoding, errors="replace")


def is_within(child: PathLike, parent: PathLike) -> bool:
    """Return ``True`` if resolved ``child`` lies under resolved ``parent``."""

    try:
        resolved_parent = Path(parent).resolve(strict=True)
        resolved_child = Path(child).resolve(strict=True)
    except (FileNotFoundError, RuntimeError):
        return False
    return resolved_child == resolved_parent or resolved_parent in resolved_child.parents
