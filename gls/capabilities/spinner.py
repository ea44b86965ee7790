"""Spinner shown around blocking steps (downloads, extraction)."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from gls.output.console import Style

if TYPE_CHECKING:
    from gls.output.console import ConsoleProtocol

REQUIRES: tuple[str, ...] = ()


@contextmanager
def spin(console: ConsoleProtocol, message: str) -> Iterator[None]:
    with console.status(f"{message}..."):
        yield
    console.print(f"{message}: done", Style.DIM)
