"""Installation detection and file backups."""

from __future__ import annotations

import shutil
from pathlib import Path

REQUIRES: tuple[str, ...] = ()

GP_DIR = ".gp"
GITPOD_FILE = ".gitpod.yml"


def detect_existing_installation(project_root: Path) -> bool:
    """True if gitpod-laravel-starter is already installed in ``project_root``."""
    return (project_root / GP_DIR).is_dir() and (project_root / GITPOD_FILE).is_file()


def backup_file(path: Path, project_root: Path, backup_dir: Path) -> Path:
    """Copy ``path`` into ``backup_dir``, keeping its location relative to the root.

    Returns the backup copy's path.
    """
    rel = path.relative_to(project_root)
    dest = backup_dir / rel
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(path, dest, follow_symlinks=False)
    return dest
