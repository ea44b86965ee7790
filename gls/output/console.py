"""Operator-facing output.

Everything the installer and updater tell the operator goes through a
ConsoleProtocol. ``RichConsole`` renders to the terminal; ``MockConsole``
keeps every line in memory so tests can assert on what was said and how.

The message prefixes (``error:``, ``warning:``, ...) are the same for both,
so a MockConsole transcript reads like the terminal output minus colors.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Semantic styles; RichConsole maps each one to a rich theme entry."""

    DEFAULT = ""
    SUCCESS = "green"
    ERROR = "bold red"
    WARNING = "yellow"
    INFO = "cyan"
    DIM = "dim"
    BOLD = "bold"
    HEADER = "bold blue"

    def __str__(self) -> str:
        return self.name.lower()


_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}


def _prefixed(style: Style, message: str) -> str:
    return f"{_PREFIXES[style]} {message}"


class ConsoleProtocol(Protocol):
    """Styled console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def banner(self, title: str, subtitle: str) -> None:
        """Print a framed banner (installer/updater/success headers)."""
        ...

    def newline(self) -> None: ...

    def status(self, message: str) -> AbstractContextManager[None]:
        """Show a spinner with ``message`` while the block runs."""
        ...


class RichConsole:
    """Terminal console built on rich.

    Markup in messages is not interpreted: paths and release notes may
    contain square brackets.
    """

    def __init__(self, *, stderr: bool = False) -> None:
        from rich.console import Console
        from rich.theme import Theme

        theme = Theme({str(s): s.value for s in Style if s.value})
        self._console = Console(stderr=stderr, highlight=False, theme=theme)

    def _emit(self, message: str, style: Style) -> None:
        self._console.print(message, style=str(style) if style.value else None, markup=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._emit(message, style)

    def success(self, message: str) -> None:
        self._emit(_prefixed(Style.SUCCESS, message), Style.SUCCESS)

    def error(self, message: str) -> None:
        self._emit(_prefixed(Style.ERROR, message), Style.ERROR)

    def warning(self, message: str) -> None:
        self._emit(_prefixed(Style.WARNING, message), Style.WARNING)

    def info(self, message: str) -> None:
        self._emit(_prefixed(Style.INFO, message), Style.INFO)

    def header(self, message: str) -> None:
        self._console.print()
        self._emit(message, Style.HEADER)

    def banner(self, title: str, subtitle: str) -> None:
        from rich.panel import Panel
        from rich.text import Text

        body = Text(title, style="bold")
        body.append("\n")
        body.append(subtitle, style="dim")
        self._console.print(Panel.fit(body, border_style=Style.HEADER.value))

    def newline(self) -> None:
        self._console.print()

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        with self._console.status(message, spinner="dots"):
            yield


@dataclass
class OutputRecord:
    message: str
    style: Style


def _no_records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """In-memory console for tests."""

    outputs: list[OutputRecord] = field(default_factory=_no_records)

    def _record(self, message: str, style: Style) -> None:
        self.outputs.append(OutputRecord(message, style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._record(message, style)

    def success(self, message: str) -> None:
        self._record(_prefixed(Style.SUCCESS, message), Style.SUCCESS)

    def error(self, message: str) -> None:
        self._record(_prefixed(Style.ERROR, message), Style.ERROR)

    def warning(self, message: str) -> None:
        self._record(_prefixed(Style.WARNING, message), Style.WARNING)

    def info(self, message: str) -> None:
        self._record(_prefixed(Style.INFO, message), Style.INFO)

    def header(self, message: str) -> None:
        self._record(message, Style.HEADER)

    def banner(self, title: str, subtitle: str) -> None:
        self._record(f"{title} | {subtitle}", Style.HEADER)

    def newline(self) -> None:
        self._record("", Style.DEFAULT)

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        self._record(message, Style.DIM)
        yield

    # assertions helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style is Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
