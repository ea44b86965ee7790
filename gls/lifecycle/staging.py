"""Working and backup directories of a run.

Layout under the project root:

    <root>/tmp_gls_<kind>/                  ephemeral, removed on exit
    <root>/tmp_gls_<kind>/latest_release.json
    <root>/tmp_gls_<kind>/<version>/        extracted release
    <root>/GLS_BACKUPS_<label>/             kept only when non-empty
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from gls.core.result import Err, Ok, Result
from gls.platform.files import is_empty_dir, is_subpath, remove_tree

__all__ = [
    "BACKUP_DIR_PREFIX",
    "StagingArea",
    "StagingError",
    "sweep_empty_backup_dirs",
]

BACKUP_DIR_PREFIX = "GLS_BACKUPS_"


@dataclass(frozen=True, slots=True)
class StagingError:
    kind: Literal["create_failed", "backup_failed", "unsafe_release", "release_failed"]
    message: str
    hint: str | None = None


def _is_plain_name(name: str) -> bool:
    return bool(name) and name not in {".", ".."} and Path(name).name == name and "\\" not in name


def sweep_empty_backup_dirs(project_root: Path) -> list[Path]:
    """Remove every empty ``GLS_BACKUPS_*`` directory directly under the root."""
    removed: list[Path] = []
    for path in sorted(project_root.glob(f"{BACKUP_DIR_PREFIX}*")):
        if path.is_symlink() or not is_empty_dir(path):
            continue
        path.rmdir()
        removed.append(path)
    return removed


class StagingArea:
    """Owns work_dir and backup_dir for the duration of a run."""

    def __init__(self, project_root: Path, work_dir: Path) -> None:
        self._project_root = project_root
        self._work_dir = work_dir
        self._backup_dir = project_root

    @classmethod
    def allocate(cls, project_root: Path, work_name: str) -> Result[StagingArea, StagingError]:
        """Create a fresh, empty work dir under ``project_root``."""
        if not _is_plain_name(work_name):
            return Err(StagingError("create_failed", f"Invalid working directory name: {work_name!r}"))

        work_dir = project_root / work_name
        try:
            if work_dir.exists() or work_dir.is_symlink():
                if work_dir.is_symlink() or not work_dir.is_dir():
                    work_dir.unlink()
                else:
                    remove_tree(work_dir)
            work_dir.mkdir()
        except OSError as e:
            return Err(
                StagingError(
                    "create_failed",
                    f"Unable to create required directory {work_dir}: {e}",
                )
            )
        return Ok(cls(project_root, work_dir))

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def work_dir(self) -> Path:
        return self._work_dir

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    def ensure_target_dir(self, target_dir: Path) -> Result[Path, StagingError]:
        """Create ``target_dir`` inside the work dir, or reuse it if present."""
        if not is_subpath(self._work_dir, target_dir):
            return Err(StagingError("create_failed", f"{target_dir} is not inside {self._work_dir}"))
        try:
            target_dir.mkdir(exist_ok=True)
        except OSError as e:
            return Err(StagingError("create_failed", f"Unable to create {target_dir}: {e}"))
        return Ok(target_dir)

    def relocate_backup_dir(self, label: str) -> Result[Path, StagingError]:
        """Move backup_dir off the project root to ``GLS_BACKUPS_<label>``.

        Happens once; later calls return the relocated directory. A directory
        of the same name left by an earlier run is replaced, not merged.
        """
        if self._backup_dir != self._project_root:
            return Ok(self._backup_dir)
        if not _is_plain_name(label):
            return Err(StagingError("backup_failed", f"Invalid backup label: {label!r}"))

        backup_dir = self._project_root / f"{BACKUP_DIR_PREFIX}{label}"
        try:
            if backup_dir.is_symlink() or backup_dir.is_file():
                backup_dir.unlink()
            elif backup_dir.exists():
                remove_tree(backup_dir)
            backup_dir.mkdir()
        except OSError as e:
            return Err(StagingError("backup_failed", f"Unable to create backup directory {backup_dir}: {e}"))

        self._backup_dir = backup_dir
        return Ok(backup_dir)

    def release(self) -> Result[None, StagingError]:
        """Delete the work dir and sweep empty backup dirs.

        The work dir is only deleted when it lies strictly inside the project
        root; otherwise nothing is deleted and an ``unsafe_release`` error is
        returned for the caller to report as a warning.
        """
        refused: StagingError | None = None
        try:
            if not is_subpath(self._project_root, self._work_dir):
                refused = StagingError(
                    "unsafe_release",
                    f"cleanup() failed:\n\t{self._work_dir}\n\tis not a sub directory of:\n\t{self._project_root}",
                    hint="The working directory was left in place",
                )
            elif self._work_dir.is_dir():
                remove_tree(self._work_dir)
            sweep_empty_backup_dirs(self._project_root)
        except OSError as e:
            return Err(StagingError("release_failed", f"Failed to remove temporary files: {e}"))

        if refused is not None:
            return Err(refused)
        return Ok(None)
