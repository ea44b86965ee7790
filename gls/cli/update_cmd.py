from __future__ import annotations

import sys
from pathlib import Path

import typer

from gls.cli._helpers import exit_unless_ok, prompt_answer
from gls.cli.driver import execute
from gls.output.console import RichConsole

_RAW_ARGS = {"help_option_names": [], "ignore_unknown_options": True}

update_app = typer.Typer(add_completion=False, context_settings=_RAW_ARGS)


@update_app.command(context_settings=_RAW_ARGS)
def update(
    args: list[str] | None = typer.Argument(None, metavar="[OPTIONS]"),
) -> None:
    """Update the gitpod-laravel-starter installation in the current directory."""
    code = execute(
        "update",
        args or [],
        project_root=Path.cwd(),
        console=RichConsole(),
        prompt=prompt_answer,
    )
    exit_unless_ok(code)


def main() -> None:
    update_app(args=["--", *sys.argv[1:]], prog_name="gls-update")
