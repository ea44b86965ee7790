"""Command line token validation.

gls accepts long options only. Commands, short options, a bare ``-`` and a
bare ``--`` are rejected, each with its own diagnostic.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal

__all__ = [
    "HELP_OPTION",
    "LOAD_DEPS_LOCALLY_OPTION",
    "STRICT_OPTION",
    "FLAG_OPTIONS",
    "SUPPORTED_OPTIONS",
    "ArgumentIssue",
    "find_argument_issue",
    "has_option",
    "valued_flags",
    "unsupported_options",
]

HELP_OPTION = "--help"
LOAD_DEPS_LOCALLY_OPTION = "--load-deps-locally"
# Reserved: accepted by validation, not used yet.
STRICT_OPTION = "--strict"

SUPPORTED_OPTIONS: tuple[str, ...] = (HELP_OPTION, LOAD_DEPS_LOCALLY_OPTION, STRICT_OPTION)
# None of the supported options takes a value.
FLAG_OPTIONS: tuple[str, ...] = SUPPORTED_OPTIONS

ArgumentIssueKind = Literal["bare_dash", "short_option", "bare_double_dash", "command"]

_LABELS: dict[ArgumentIssueKind, str] = {
    "bare_dash": "Illegal bare dash",
    "short_option": "Illegal short option",
    "bare_double_dash": "Illegal option",
    "command": "Unsupported command",
}


@dataclass(frozen=True, slots=True)
class ArgumentIssue:
    kind: ArgumentIssueKind
    arg: str

    @property
    def message(self) -> str:
        return f"{_LABELS[self.kind]}: {self.arg}"


def _classify(arg: str) -> ArgumentIssueKind | None:
    if arg == "-":
        return "bare_dash"
    if arg == "--":
        return "bare_double_dash"
    if arg.startswith("-") and not arg.startswith("--"):
        return "short_option"
    if not arg.startswith("-"):
        return "command"
    return None


def find_argument_issue(args: Sequence[str]) -> ArgumentIssue | None:
    """Return the first malformed token in ``args``, if any."""
    for arg in args:
        kind = _classify(arg)
        if kind is not None:
            return ArgumentIssue(kind=kind, arg=arg)
    return None


def unsupported_options(options: Iterable[str], supported: Iterable[str] = SUPPORTED_OPTIONS) -> list[str]:
    allowed = set(supported)
    return [o for o in options if o not in allowed]


def _option_name(arg: str) -> str:
    return arg.split("=", 1)[0]


def has_option(args: Iterable[str], name: str) -> bool:
    """True if ``name`` was given, with or without ``=value``."""
    return any(arg.startswith("--") and _option_name(arg) == name for arg in args)


def valued_flags(args: Iterable[str], flags: Iterable[str] = FLAG_OPTIONS) -> list[str]:
    """Tokens that attach ``=value`` to an option that takes none."""
    names = set(flags)
    return [arg for arg in args if "=" in arg and _option_name(arg) in names]
