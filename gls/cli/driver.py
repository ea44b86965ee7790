"""Flow shared by gls-install and gls-update.

    --help?  -> usage, exit 1
    config   -> gls.toml / $GLS_CONFIG, defaults when absent
    deps     -> load every capability (remote, or local with --load-deps-locally)
    init     -> preconditions, argument validation, work dir
    run      -> resolve latest release, gate (update), install/merge
    cleanup  -> always, once

Returns the process exit code; the commands turn it into ``typer.Exit``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from gls.core.config import config_path_for, load_config_or_default
from gls.core.errors import ErrorCode
from gls.core.result import Err, Ok
from gls.deps.interfaces import REQUIRED_CAPABILITIES, Capabilities
from gls.deps.loader import DependencyLoader, select_source
from gls.lifecycle.arguments import HELP_OPTION, LOAD_DEPS_LOCALLY_OPTION, has_option
from gls.lifecycle.controller import LifecycleController
from gls.net.http import RealHttpClient
from gls.output.console import Style
from gls.output.errors import (
    lifecycle_error_exit_code,
    print_config_error,
    print_lifecycle_error,
    print_load_failure,
)

if TYPE_CHECKING:
    from gls.lifecycle.context import RunKind
    from gls.net.http import HttpClient
    from gls.output.console import ConsoleProtocol
    from gls.release.base_version import Prompt

__all__ = ["execute", "print_usage"]

_SUMMARY: dict[str, str] = {
    "install": "Install the latest gitpod-laravel-starter into the current directory.",
    "update": "Update the gitpod-laravel-starter installation in the current directory.",
}


def print_usage(kind: RunKind, console: ConsoleProtocol) -> None:
    console.header(f"Usage: gls-{kind} [OPTIONS]")
    console.print(_SUMMARY[kind])
    console.newline()
    console.print("Options:", Style.BOLD)
    console.print("  --help                Show this message and exit")
    console.print("  --load-deps-locally   Load dependencies from this installation instead of the network")
    console.print("  --strict              Reserved")


def execute(
    kind: RunKind,
    args: Sequence[str],
    *,
    project_root: Path,
    console: ConsoleProtocol,
    http: HttpClient | None = None,
    prompt: Prompt | None = None,
) -> int:
    if has_option(args, HELP_OPTION):
        print_usage(kind, console)
        return int(ErrorCode.USER_ERROR)

    config_result = load_config_or_default(config_path_for(project_root))
    if isinstance(config_result, Err):
        print_config_error(config_result.error, console)
        return int(ErrorCode.ENV_ERROR)
    config = config_result.value

    client = http if http is not None else RealHttpClient(timeout=config.http.timeout)
    local = has_option(args, LOAD_DEPS_LOCALLY_OPTION)
    source = select_source(local=local, http=client, deps=config.deps)
    load_code = int(ErrorCode.ENV_ERROR if local else ErrorCode.NETWORK_ERROR)

    loaded = DependencyLoader(source).load(REQUIRED_CAPABILITIES)
    if isinstance(loaded, Err):
        print_load_failure(loaded.error, console)
        return load_code

    caps = Capabilities.from_dependency_set(loaded.value)
    if isinstance(caps, Err):
        print_load_failure(caps.error, console)
        return load_code

    controller = LifecycleController(
        kind=kind,
        capabilities=caps.value,
        config=config,
        http=client,
        console=console,
        prompt=prompt,
    )

    code = int(ErrorCode.OK)
    try:
        result = controller.init(project_root, args)
        if isinstance(result, Ok):
            result = controller.run()
        if isinstance(result, Err):
            print_lifecycle_error(result.error, console)
            code = lifecycle_error_exit_code(result.error)
    finally:
        cleaned = controller.cleanup()
        if isinstance(cleaned, Err):
            print_lifecycle_error(cleaned.error, console)
            if code == int(ErrorCode.OK):
                code = lifecycle_error_exit_code(cleaned.error)
    return code
