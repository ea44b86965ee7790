"""Banners printed at the start and the end of a run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gls import __version__

if TYPE_CHECKING:
    from gls.output.console import ConsoleProtocol

REQUIRES: tuple[str, ...] = ()

PROJECT = "gitpod-laravel-starter"

_TITLES = {
    "installer": f"{PROJECT} installer",
    "updater": f"{PROJECT} updater",
    "success": "SUCCESS",
}


def print_header(console: ConsoleProtocol, kind: str) -> None:
    """Print the ``installer``, ``updater`` or ``success`` banner."""
    title = _TITLES.get(kind)
    if title is None:
        raise ValueError(f"unknown header kind: {kind}")
    console.banner(title, f"gls-tools v{__version__}")
