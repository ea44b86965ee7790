from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from gls.lifecycle.arguments import STRICT_OPTION
from gls.release.base_version import BaseVersion
from gls.release.resolver import METADATA_FILE_NAME
from gls.release.semver import Version

RunKind = Literal["install", "update"]


def work_dir_name(kind: RunKind) -> str:
    return f"tmp_gls_{kind}"


@dataclass(frozen=True, slots=True)
class LifecycleContext:
    """State of one run.

    Created by ``LifecycleController.init()``. Only the controller derives
    updated copies (backup dir relocation, resolved versions); project_root
    and work_dir never change after init.
    """

    kind: RunKind
    project_root: Path
    work_dir: Path
    # Equal to project_root until a backup directory is actually needed.
    backup_dir: Path
    options: tuple[str, ...]
    target_version: Version | None = None
    base_version: BaseVersion | None = None

    @property
    def release_json(self) -> Path:
        return self.work_dir / METADATA_FILE_NAME

    @property
    def strict(self) -> bool:
        return STRICT_OPTION in self.options
