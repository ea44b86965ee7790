from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = [
    "ErrorCategory",
    "LifecycleError",
    "LifecycleErrorKind",
    "LifecycleStateError",
]

ErrorCategory = Literal["precondition", "resource", "resolution", "version_gate"]

LifecycleErrorKind = Literal[
    # precondition
    "existing_installation",
    "missing_installation",
    "invalid_argument",
    "options_failed",
    "unsupported_option",
    "invalid_config",
    # resource
    "staging_failed",
    "install_failed",
    "unsafe_cleanup",
    # resolution
    "download_failed",
    "missing_metadata",
    "rate_limited",
    "malformed_release",
    # version gate
    "version_mismatch",
    "base_too_old",
]

_CATEGORIES: dict[str, ErrorCategory] = {
    "existing_installation": "precondition",
    "missing_installation": "precondition",
    "invalid_argument": "precondition",
    "options_failed": "precondition",
    "unsupported_option": "precondition",
    "invalid_config": "precondition",
    "staging_failed": "resource",
    "install_failed": "resource",
    "unsafe_cleanup": "resource",
    "download_failed": "resolution",
    "missing_metadata": "resolution",
    "rate_limited": "resolution",
    "malformed_release": "resolution",
    "version_mismatch": "version_gate",
    "base_too_old": "version_gate",
}


@dataclass(frozen=True, slots=True)
class LifecycleError:
    """Why a run was aborted, plus the remediation when there is one."""

    kind: LifecycleErrorKind
    message: str
    hint: str | None = None

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self.kind]


class LifecycleStateError(RuntimeError):
    """A lifecycle method was called out of order (programming error)."""
