"""Base (currently installed) version resolution for the updater.

Best effort. The version is read from the marker file of the existing
installation. When that file is missing or cannot be parsed the operator is
asked; when the answer is missing, skipped or invalid, the base version is
``UNKNOWN`` and the update is allowed to proceed.

The only fatal outcome is an operator-supplied version older than the
oldest supported baseline: such projects have to be updated manually.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from gls.core.result import Err, Ok, Result
from gls.output.console import Style
from gls.release.semver import Ordering, Version, compare, extract_version, is_less, parse

if TYPE_CHECKING:
    from gls.output.console import ConsoleProtocol

__all__ = [
    "BASE_VERSION_PROMPT",
    "UNKNOWN",
    "BaseVersion",
    "BaseVersionError",
    "Prompt",
    "UnknownVersion",
    "passes_update_gate",
    "resolve_base_version",
]

BASE_VERSION_PROMPT = "Enter the gls version you are updating from (y=skip)"
SKIP_ANSWER = "y"

# major.minor.patch, each 0-9999 without leading zeros
_ANSWER_RE = re.compile(r"^(0|[1-9][0-9]{0,3})\.(0|[1-9][0-9]{0,3})\.(0|[1-9][0-9]{0,3})$")


class UnknownVersion(Enum):
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


UNKNOWN = UnknownVersion.UNKNOWN

type BaseVersion = Version | UnknownVersion

# Returns the operator's answer, or None when no answer could be read (EOF).
type Prompt = Callable[[str], str | None]


@dataclass(frozen=True, slots=True)
class BaseVersionError:
    kind: Literal["base_too_old"]
    message: str
    hint: str | None = None


def passes_update_gate(target: Version, base: BaseVersion) -> bool:
    """An update may only move strictly forward. UNKNOWN always passes."""
    if base is UNKNOWN:
        return True
    return compare(target, base) is Ordering.GREATER


def _unknown(console: ConsoleProtocol, min_version: Version) -> Ok[BaseVersion]:
    console.print(
        f"The current gls version has been set to 'unknown' but is assumed to be >= {min_version}",
        Style.WARNING,
    )
    return Ok(UNKNOWN)


def _ask(
    prompt: Prompt, console: ConsoleProtocol, min_version: Version
) -> Result[BaseVersion, BaseVersionError]:
    answer = prompt(BASE_VERSION_PROMPT)
    if answer is None:
        console.warning("No base version was given")
        return _unknown(console, min_version)

    answer = answer.strip()
    if answer == SKIP_ANSWER:
        return _unknown(console, min_version)

    parsed = parse(answer) if _ANSWER_RE.match(answer) else None
    if not isinstance(parsed, Ok):
        console.warning(f"Invalid version: {answer}")
        return _unknown(console, min_version)

    version = parsed.value
    if is_less(version, min_version):
        return Err(
            BaseVersionError(
                kind="base_too_old",
                message=f"Base version {version} is too old, it must be >= {min_version}",
                hint="You will need to perform the update manually",
            )
        )

    console.info(f"Base gls version set by user to: {version}")
    return Ok(version)


def resolve_base_version(
    project_root: Path,
    *,
    marker_file: str,
    min_version: Version,
    prompt: Prompt,
    console: ConsoleProtocol,
) -> Result[BaseVersion, BaseVersionError]:
    marker = project_root / marker_file
    if not marker.is_file():
        console.warning(f"Undetectable gls version\n\tCould not find required file: {marker}")
        return _ask(prompt, console, min_version)

    try:
        text = marker.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        console.error(f"Could not read {marker}: {e}")
        return _ask(prompt, console, min_version)

    version = extract_version(text)
    if version is None:
        console.error(
            f"Could not parse version number from: {marker}\n\tThis file should never be altered but it was."
        )
        return _ask(prompt, console, min_version)
    return Ok(version)
