"""File helpers for the collection and history stores."""

from __future__ import annotations

import os
from pathlib import Path

from ..errors import StorageError


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def read_text(path: Path) -> str | None:
    """Return the file's text, or ``None`` when it does not exist yet."""

    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise StorageError(f"Failed to read {path}: {exc}") from exc


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomic save:
    - write to temp file in same directory
    - flush + fsync
    - os.replace to target
    A crash mid-write leaves the previous file untouched.
    """
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        _ensure_parent(path)
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as exc:
        raise StorageError(f"Failed to write {path}: {exc}") from exc


def append_line(path: Path, line: str) -> None:
    """Append one line and fsync so a finished session survives a crash."""

    path = Path(path)
    try:
        _ensure_parent(path)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line.rstrip("\n") + "\n")
            f.flush()
            os.fsync(f.fileno())
    except OSError as exc:
        raise StorageError(f"Failed to append to {path}: {exc}") from exc


__all__ = ["append_line", "atomic_write_text", "read_text"]
