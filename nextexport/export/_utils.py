"""
Shared filesystem helpers for static export.
"""

from __future__ import annotations

import shutil
from pathlib import Path


def _copy_file(src: Path, dest: Path) -> Path:
    """Copy a file, creating parent directories if needed."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dest)
    return dest


def _copy_tree(src: Path, dest: Path) -> int:
    """Copy the contents of ``src`` into ``dest``; returns the file count."""
    if not src.is_dir():
        return 0
    shutil.copytree(src, dest, dirs_exist_ok=True)
    return sum(1 for path in src.rglob("*") if path.is_file())


def _reset_dir(path: Path) -> None:
    """Remove ``path`` if present and recreate it empty."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def _is_within(path: Path, parent: Path) -> bool:
    return path == parent or parent in path.parents
