"""Three-part numeric versions: parsing, extraction and ordering.

Only exact gating is supported ("is the candidate newer than what is
installed?"). There is no range syntax and no pre-release/build metadata.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from gls.core.result import Err, Ok, Result

__all__ = [
    "InvalidVersion",
    "Ordering",
    "Version",
    "compare",
    "extract_version",
    "is_at_least",
    "is_less",
    "parse",
]

_FIELD_RE = re.compile(r"^(0|[1-9]\d*)$")
_TOKEN_RE = re.compile(r"\d+\.\d+\.\d+")


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    text: str
    message: str


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse(text: str) -> Result[Version, InvalidVersion]:
    """Parse ``major.minor.patch``.

    The string is cut at the first and the last separator, so the middle
    field is whatever lies between them. Cutting by matching the outer
    fields as substrings would pick the wrong middle when major and patch
    share digits (``1.21.1``).
    """
    first = text.find(".")
    last = text.rfind(".")
    if first == -1 or first == last:
        return Err(InvalidVersion(text, f"expected major.minor.patch, got '{text}'"))

    fields = (text[:first], text[first + 1 : last], text[last + 1 :])
    for field in fields:
        if not _FIELD_RE.match(field):
            return Err(InvalidVersion(text, f"invalid version field '{field}' in '{text}'"))

    major, minor, patch = (int(f) for f in fields)
    return Ok(Version(major, minor, patch))


def extract_version(text: str) -> Version | None:
    """Return the first valid version token found in free text, if any.

    ``"v1.6.0"`` and ``"## [1.6.0] - 2022-03-01"`` both yield ``1.6.0``.
    """
    for match in _TOKEN_RE.finditer(text):
        result = parse(match.group(0))
        if isinstance(result, Ok):
            return result.value
    return None


def compare(a: Version, b: Version) -> Ordering:
    for left, right in ((a.major, b.major), (a.minor, b.minor), (a.patch, b.patch)):
        if left < right:
            return Ordering.LESS
        if left > right:
            return Ordering.GREATER
    return Ordering.EQUAL


def is_less(a: Version, b: Version) -> bool:
    return compare(a, b) is Ordering.LESS


def is_at_least(a: Version, b: Version) -> bool:
    return compare(a, b) is not Ordering.LESS
