"""Static interfaces for the capability modules.

The lifecycle never touches a loaded module directly. It talks to a
``Capabilities`` registry whose fields are typed by the protocols below, so
it does not matter whether a module came from the network or from disk.
"""

from __future__ import annotations

import types
from collections.abc import Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, cast

from gls.core.result import Err, Ok, Result
from gls.deps.loader import DependencySet, LoadFailure

if TYPE_CHECKING:
    from gls.net.http import HttpClient
    from gls.output.console import ConsoleProtocol

__all__ = [
    "REQUIRED_CAPABILITIES",
    "Capabilities",
    "DownloadCapability",
    "HeaderCapability",
    "InstallOptions",
    "LongOptionCapability",
    "SpinnerCapability",
    "UtilCapability",
]

# Load order matters: ``download`` uses ``util`` and ``spinner``.
REQUIRED_CAPABILITIES: tuple[str, ...] = ("util", "spinner", "header", "long_option", "download")


@dataclass(frozen=True, slots=True)
class InstallOptions:
    """Where the install/merge collaborator reads from and writes to."""

    project_root: Path
    work_dir: Path
    target_dir: Path
    backup_dir: Path


class UtilCapability(Protocol):
    def detect_existing_installation(self, project_root: Path) -> bool: ...

    def backup_file(self, path: Path, project_root: Path, backup_dir: Path) -> Path: ...


class SpinnerCapability(Protocol):
    def spin(self, console: ConsoleProtocol, message: str) -> AbstractContextManager[None]: ...


class HeaderCapability(Protocol):
    def print_header(self, console: ConsoleProtocol, kind: str) -> None: ...


class LongOptionCapability(Protocol):
    def set_long_options(self, args: Sequence[str]) -> bool: ...

    def list_long_options(self) -> list[str]: ...


class DownloadCapability(Protocol):
    def download_release_json(
        self, dest: Path, *, url: str, http: HttpClient, console: ConsoleProtocol
    ) -> bool: ...

    def install_latest_archive(
        self,
        json_path: Path,
        options: InstallOptions,
        *,
        http: HttpClient,
        console: ConsoleProtocol,
    ) -> bool: ...


_INTERFACE: dict[str, tuple[str, ...]] = {
    "util": ("detect_existing_installation", "backup_file"),
    "spinner": ("spin",),
    "header": ("print_header",),
    "long_option": ("set_long_options", "list_long_options"),
    "download": ("download_release_json", "install_latest_archive"),
}


def _check_interface(name: str, module: types.ModuleType | None) -> LoadFailure | None:
    if module is None:
        return LoadFailure(name=name, message=f"Capability was not loaded: {name}")
    missing = [attr for attr in _INTERFACE[name] if not callable(getattr(module, attr, None))]
    if missing:
        return LoadFailure(
            name=name,
            message=f"Capability {name} does not provide: {', '.join(missing)}",
        )
    return None


@dataclass(frozen=True, slots=True)
class Capabilities:
    util: UtilCapability
    spinner: SpinnerCapability
    header: HeaderCapability
    long_option: LongOptionCapability
    download: DownloadCapability

    @classmethod
    def from_dependency_set(cls, deps: DependencySet) -> Result[Capabilities, LoadFailure]:
        """Validate every loaded module against its interface and wrap them."""
        for name in REQUIRED_CAPABILITIES:
            failure = _check_interface(name, deps.get(name))
            if failure is not None:
                return Err(failure)

        return Ok(
            cls(
                util=cast(UtilCapability, deps.get("util")),
                spinner=cast(SpinnerCapability, deps.get("spinner")),
                header=cast(HeaderCapability, deps.get("header")),
                long_option=cast(LongOptionCapability, deps.get("long_option")),
                download=cast(DownloadCapability, deps.get("download")),
            )
        )
