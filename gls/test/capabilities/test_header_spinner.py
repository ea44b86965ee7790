from __future__ import annotations

import pytest

from gls import __version__
from gls.output.console import MockConsole, Style
from gls.test._support import load_capabilities


@pytest.mark.parametrize(
    ("kind", "title"),
    [
        ("installer", "gitpod-laravel-starter installer"),
        ("updater", "gitpod-laravel-starter updater"),
        ("success", "SUCCESS"),
    ],
)
def test_print_header(kind: str, title: str) -> None:
    console = MockConsole()
    load_capabilities().header.print_header(console, kind)
    assert console.messages == [f"{title} | gls-tools v{__version__}"]


def test_unknown_header_kind() -> None:
    with pytest.raises(ValueError, match="unknown header kind"):
        load_capabilities().header.print_header(MockConsole(), "banner")


def test_spin_wraps_block_in_status() -> None:
    console = MockConsole()
    with load_capabilities().spinner.spin(console, "Downloading"):
        console.print("inside")
    assert console.messages == ["Downloading...", "inside", "Downloading: done"]
    assert console.outputs[-1].style == Style.DIM


def test_spin_does_not_report_done_on_error() -> None:
    console = MockConsole()
    with pytest.raises(RuntimeError):
        with load_capabilities().spinner.spin(console, "Extracting"):
            raise RuntimeError("boom")
    assert "Extracting: done" not in console.messages
