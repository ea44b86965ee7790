"""Error presentation utilities.

Centralized error formatting and exit code mapping for the installer and
updater. Every fatal path ends with the same ABORTED marker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gls.core.errors import ErrorCode
from gls.output.console import Style

if TYPE_CHECKING:
    from gls.core.config import ConfigError
    from gls.deps.loader import LoadFailure
    from gls.lifecycle.errors import LifecycleError
    from gls.output.console import ConsoleProtocol

__all__ = [
    "ABORTED_MARKER",
    "lifecycle_error_exit_code",
    "print_aborted",
    "print_config_error",
    "print_lifecycle_error",
    "print_load_failure",
]

ABORTED_MARKER = "ABORTED"


def print_aborted(console: ConsoleProtocol) -> None:
    console.print(ABORTED_MARKER, Style.ERROR)


def _print_hint(console: ConsoleProtocol, hint: str | None) -> None:
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def print_lifecycle_error(error: LifecycleError, console: ConsoleProtocol) -> None:
    """Print a lifecycle failure; cleanup refusals are warnings, not aborts."""
    if error.kind == "unsafe_cleanup":
        console.warning(error.message)
        _print_hint(console, error.hint)
        return
    console.error(error.message)
    _print_hint(console, error.hint)
    print_aborted(console)


def lifecycle_error_exit_code(error: LifecycleError) -> int:
    match error.kind:
        case "invalid_argument" | "options_failed" | "unsupported_option":
            return int(ErrorCode.USER_ERROR)
        case "existing_installation" | "missing_installation" | "invalid_config":
            return int(ErrorCode.ENV_ERROR)
        case "download_failed" | "missing_metadata" | "rate_limited" | "malformed_release":
            return int(ErrorCode.NETWORK_ERROR)
        case "version_mismatch" | "base_too_old":
            return int(ErrorCode.VERSION_ERROR)
        case "staging_failed" | "install_failed" | "unsafe_cleanup":
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.IO_ERROR)


def print_load_failure(failure: LoadFailure, console: ConsoleProtocol) -> None:
    console.error(f"Failed to load dependency: {failure.name}\n\t{failure.message}")
    _print_hint(console, failure.hint)
    print_aborted(console)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.path is not None:
        console.print(f"config: {error.path}", Style.DIM)
    print_aborted(console)
