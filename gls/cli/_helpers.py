"""Shared helpers for the gls commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from gls.core.errors import ErrorCode


def prompt_answer(question: str) -> str | None:
    """Ask the operator ``question``; None when stdin is closed or aborted."""
    try:
        answer: str = typer.prompt(question, default="", show_default=False)
    except (typer.Abort, EOFError):
        return None
    return answer


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def exit_unless_ok(code: int) -> None:
    if code != int(ErrorCode.OK):
        exit_with_code(code)
