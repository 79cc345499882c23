"""UTF-8 text file reading."""

from __future__ import annotations

from pathlib import Path

PathLike = Path | str


def read_text(path: PathLike, errors: str = "strict") -> str:
    """Read *path* as UTF-8 text."""
    p = path if isinstance(path, Path) else Path(path)
    return p.read_text(encoding="utf-8", errors=errors)

