from __future__ import annotations

import sys
from pathlib import Path

import typer

from gls.cli._helpers import exit_unless_ok
from gls.cli.driver import execute
from gls.output.console import RichConsole

# Every token goes to gls' own validation: no click options, no click help.
_RAW_ARGS = {"help_option_names": [], "ignore_unknown_options": True}

install_app = typer.Typer(add_completion=False, context_settings=_RAW_ARGS)


@install_app.command(context_settings=_RAW_ARGS)
def install(
    args: list[str] | None = typer.Argument(None, metavar="[OPTIONS]"),
) -> None:
    """Install gitpod-laravel-starter into the current directory."""
    code = execute("install", args or [], project_root=Path.cwd(), console=RichConsole())
    exit_unless_ok(code)


def main() -> None:
    # A leading "--" keeps click from consuming a user-supplied "--".
    install_app(args=["--", *sys.argv[1:]], prog_name="gls-install")
