"""
Project root resolution for export commands.
"""

from __future__ import annotations

import os
from pathlib import Path

from nextexport.exceptions import ProjectDirectoryNotFoundError
from nextexport.logging_config import get_logger

logger = get_logger(__name__)


def get_project_dir(directory: str | None = None, *, cwd: Path | None = None) -> Path:
    """Return the absolute, normalized project root.

    Relative paths resolve against ``cwd`` (the process working directory by
    default); an omitted directory means ``cwd`` itself.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    return Path(os.path.normpath(os.path.join(os.path.abspath(base), directory or ".")))


def ensure_project_dir(path: Path) -> Path:
    """Raise ``ProjectDirectoryNotFoundError`` unless ``path`` exists."""
    if not path.exists():
        raise ProjectDirectoryNotFoundError(str(path))
    if not path.is_dir():
        logger.warning("Project root %s is not a directory", path)
    return path
