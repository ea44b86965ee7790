"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
import stat
from collections.abc import Callable
from pathlib import Path

__all__ = ["is_empty_dir", "is_subpath", "remove_tree"]


def is_subpath(parent: Path, child: Path) -> bool:
    """True if ``child`` is a strict descendant of ``parent``.

    Both paths are resolved first, so ``..`` segments and symlinks cannot
    smuggle a directory outside of ``parent``. A path is not a descendant of
    itself.
    """
    try:
        parent_resolved = parent.resolve()
        child_resolved = child.resolve()
    except OSError:
        return False
    if child_resolved == parent_resolved:
        return False
    return child_resolved.is_relative_to(parent_resolved)


def is_empty_dir(path: Path) -> bool:
    try:
        return path.is_dir() and next(path.iterdir(), None) is None
    except OSError:
        return False


def _remove_readonly(_func: Callable[[str], object], path: str, exc: BaseException) -> None:
    if isinstance(exc, PermissionError):
        os.chmod(path, stat.S_IWRITE)
        os.unlink(path)
    else:
        raise exc


def remove_tree(path: Path) -> None:
    """Recursively delete ``path``, clearing read-only bits on the way."""
    shutil.rmtree(path, onexc=_remove_readonly)
