"""Install/update lifecycle.

    UNINITIALIZED --init()--> INITIALIZED --run()--> RUNNING --> COMPLETED
          |                                             |
          +----------------------> ABORTED <------------+

``init()`` and ``run()`` each succeed at most once per controller. A failed
step never raises: it moves the controller to ABORTED and returns an Err.
Calling a method out of order raises ``LifecycleStateError`` without
touching any state. ``cleanup()`` must be called exactly once when the run
ends, whatever the outcome.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from gls.core.result import Err, Ok, Result
from gls.deps.interfaces import InstallOptions
from gls.lifecycle.arguments import find_argument_issue, unsupported_options, valued_flags
from gls.lifecycle.context import LifecycleContext, RunKind, work_dir_name
from gls.lifecycle.errors import LifecycleError, LifecycleStateError
from gls.lifecycle.staging import StagingArea
from gls.output.console import Style
from gls.release.base_version import BaseVersion, passes_update_gate, resolve_base_version
from gls.release.resolver import ReleaseResolver
from gls.release.semver import Version, parse

if TYPE_CHECKING:
    from gls.core.config import Config
    from gls.deps.interfaces import Capabilities
    from gls.net.http import HttpClient
    from gls.output.console import ConsoleProtocol
    from gls.release.base_version import Prompt

__all__ = ["LifecycleController", "Phase"]

REMOTE_INSTALL_COMMAND = "bash <(curl -fsSL https://raw.githubusercontent.com/apolopena/gls-tools/main/tools/install.sh)"
REMOTE_UPDATE_COMMAND = "bash <(curl -fsSL https://raw.githubusercontent.com/apolopena/gls-tools/main/tools/update.sh)"


class Phase(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"

    def __str__(self) -> str:
        return self.value


def _no_answer(_question: str) -> str | None:
    return None


class LifecycleController:
    def __init__(
        self,
        *,
        kind: RunKind,
        capabilities: Capabilities,
        config: Config,
        http: HttpClient,
        console: ConsoleProtocol,
        prompt: Prompt | None = None,
    ) -> None:
        self._kind: RunKind = kind
        self._caps = capabilities
        self._config = config
        self._http = http
        self._console = console
        self._prompt: Prompt = prompt or _no_answer
        self._phase = Phase.UNINITIALIZED
        self._context: LifecycleContext | None = None
        self._staging: StagingArea | None = None
        self._cleaned_up = False

    @property
    def kind(self) -> RunKind:
        return self._kind

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def context(self) -> LifecycleContext | None:
        return self._context

    # -------------------------------------------------------------------------
    # init
    # -------------------------------------------------------------------------

    def init(self, project_root: Path, args: Sequence[str]) -> Result[LifecycleContext, LifecycleError]:
        """Check preconditions, validate ``args`` and allocate the work dir.

        Nothing is written to disk unless every check passed.
        """
        if self._phase is not Phase.UNINITIALIZED:
            raise LifecycleStateError(f"init() can only be called once (phase: {self._phase})")

        root = project_root.resolve()

        installation = self._check_installation(root)
        if installation is not None:
            return self._abort(installation)

        options = self._check_arguments(args)
        if isinstance(options, Err):
            return self._abort(options.error)

        allocated = StagingArea.allocate(root, work_dir_name(self._kind))
        if isinstance(allocated, Err):
            return self._abort(
                LifecycleError(
                    kind="staging_failed",
                    message=allocated.error.message,
                    hint=allocated.error.hint,
                )
            )

        staging = allocated.value
        self._staging = staging
        self._context = LifecycleContext(
            kind=self._kind,
            project_root=root,
            work_dir=staging.work_dir,
            backup_dir=staging.backup_dir,
            options=options.value,
        )
        self._phase = Phase.INITIALIZED
        self._caps.header.print_header(self._console, "installer" if self._kind == "install" else "updater")
        return Ok(self._context)

    def _check_installation(self, root: Path) -> LifecycleError | None:
        installed = self._caps.util.detect_existing_installation(root)
        if self._kind == "install" and installed:
            return LifecycleError(
                kind="existing_installation",
                message=f"An existing installation of gitpod-laravel-starter was detected in:\n\t{root}",
                hint=(
                    "Try updating it instead. If gls-tools is installed locally run: gls-update\n"
                    f"Otherwise run: {REMOTE_UPDATE_COMMAND}"
                ),
            )
        if self._kind == "update" and not installed:
            return LifecycleError(
                kind="missing_installation",
                message=f"No installation of gitpod-laravel-starter was detected in:\n\t{root}",
                hint=(
                    "Install it instead. If gls-tools is installed locally run: gls-install\n"
                    f"Otherwise run: {REMOTE_INSTALL_COMMAND}"
                ),
            )
        return None

    def _check_arguments(self, args: Sequence[str]) -> Result[tuple[str, ...], LifecycleError]:
        issue = find_argument_issue(args)
        if issue is not None:
            return Err(
                LifecycleError(
                    kind="invalid_argument",
                    message=issue.message,
                    hint="Only long options (--name) are supported; run with --help for usage",
                )
            )

        long_option = self._caps.long_option
        if not long_option.set_long_options(args):
            return Err(LifecycleError(kind="options_failed", message="Failed to set options"))

        options = long_option.list_long_options()
        unsupported = unsupported_options(options)
        if unsupported:
            return Err(
                LifecycleError(
                    kind="unsupported_option",
                    message=f"Unsupported option(s): {' '.join(unsupported)}",
                    hint="Run with --help for the list of supported options",
                )
            )

        valued = valued_flags(args)
        if valued:
            return Err(
                LifecycleError(
                    kind="invalid_argument",
                    message=f"Option takes no value: {valued[0]}",
                    hint="Pass the option on its own, e.g. --load-deps-locally",
                )
            )
        return Ok(tuple(options))

    # -------------------------------------------------------------------------
    # run
    # -------------------------------------------------------------------------

    def run(self) -> Result[LifecycleContext, LifecycleError]:
        """Resolve the latest release and install or merge it."""
        if self._phase is not Phase.INITIALIZED or self._context is None or self._staging is None:
            raise LifecycleStateError(f"run() requires a successful init() (phase: {self._phase})")

        self._phase = Phase.RUNNING
        result: Result[LifecycleContext, LifecycleError] | None = None
        try:
            result = self._execute(self._context, self._staging)
        finally:
            match result:
                case Ok(value=ctx):
                    self._context = ctx
                    self._phase = Phase.COMPLETED
                case _:
                    self._phase = Phase.ABORTED
        return result

    def _execute(self, ctx: LifecycleContext, staging: StagingArea) -> Result[LifecycleContext, LifecycleError]:
        resolver = ReleaseResolver(
            work_dir=ctx.work_dir,
            url=self._config.release.latest_release_url,
            download=self._caps.download,
            http=self._http,
            console=self._console,
        )
        resolved = resolver.resolve_latest()
        if isinstance(resolved, Err):
            e = resolved.error
            return Err(LifecycleError(kind=e.kind, message=e.message, hint=e.hint))

        descriptor = resolved.value
        if descriptor.archive_location is None:
            return Err(
                LifecycleError(
                    kind="malformed_release",
                    message=(
                        f"Release v{descriptor.version} has no source archive (tarball_url) in:\n"
                        f"\t{descriptor.metadata_path}"
                    ),
                )
            )
        ctx = replace(ctx, target_version=descriptor.version)
        self._context = ctx

        if self._kind == "update":
            gated = self._gate_update(ctx, descriptor.version)
            if isinstance(gated, Err):
                return gated
            ctx = gated.value
            self._context = ctx

        target = staging.ensure_target_dir(resolver.target_dir(descriptor.version))
        if isinstance(target, Err):
            return Err(LifecycleError(kind="staging_failed", message=target.error.message))

        backup = staging.relocate_backup_dir(self._config.staging.backup_label)
        if isinstance(backup, Err):
            return Err(LifecycleError(kind="staging_failed", message=backup.error.message))
        ctx = replace(ctx, backup_dir=backup.value)
        self._context = ctx

        options = InstallOptions(
            project_root=ctx.project_root,
            work_dir=ctx.work_dir,
            target_dir=target.value,
            backup_dir=ctx.backup_dir,
        )
        installed = self._caps.download.install_latest_archive(
            descriptor.metadata_path, options, http=self._http, console=self._console
        )
        if not installed:
            return Err(
                LifecycleError(
                    kind="install_failed",
                    message=f"Failed to {self._kind} gitpod-laravel-starter v{descriptor.version}",
                    hint=f"Files replaced so far were backed up to:\n\t{ctx.backup_dir}",
                )
            )

        self._caps.header.print_header(self._console, "success")
        if self._kind == "install":
            self._console.success(
                f"gitpod-laravel-starter v{descriptor.version} has been installed to:\n\t{ctx.project_root}"
            )
        else:
            self._console.success(
                f"gitpod-laravel-starter has been updated from v{ctx.base_version} to v{descriptor.version}"
            )
        return Ok(ctx)

    def _gate_update(self, ctx: LifecycleContext, target: Version) -> Result[LifecycleContext, LifecycleError]:
        min_version = parse(self._config.update.min_base_version)
        if isinstance(min_version, Err):
            return Err(
                LifecycleError(
                    kind="invalid_config",
                    message=f"Invalid update.min_base_version: {min_version.error.message}",
                )
            )

        resolved = resolve_base_version(
            ctx.project_root,
            marker_file=self._config.update.marker_file,
            min_version=min_version.value,
            prompt=self._prompt,
            console=self._console,
        )
        if isinstance(resolved, Err):
            e = resolved.error
            return Err(LifecycleError(kind=e.kind, message=e.message, hint=e.hint))

        base: BaseVersion = resolved.value
        ctx = replace(ctx, base_version=base)
        if not passes_update_gate(target, base):
            return Err(
                LifecycleError(
                    kind="version_mismatch",
                    message=(
                        "Version mismatch\n"
                        f"\tYour current version v{base} must be less than the latest version v{target}"
                    ),
                    hint="There is nothing to update",
                )
            )

        self._console.print(f"Updating gls version {base} to version {target}", Style.INFO)
        return Ok(ctx)

    # -------------------------------------------------------------------------
    # cleanup
    # -------------------------------------------------------------------------

    def cleanup(self) -> Result[None, LifecycleError]:
        """Release the work dir (if one was allocated) and sweep empty backups."""
        if self._phase is Phase.RUNNING:
            raise LifecycleStateError("cleanup() cannot run while run() is in progress")
        if self._cleaned_up:
            raise LifecycleStateError("cleanup() can only be called once")
        self._cleaned_up = True

        if self._staging is None:
            return Ok(None)

        released = self._staging.release()
        if isinstance(released, Err):
            return Err(
                LifecycleError(
                    kind="unsafe_cleanup",
                    message=released.error.message,
                    hint=released.error.hint,
                )
            )
        return Ok(None)

    # -------------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------------

    def _abort(self, error: LifecycleError) -> Err[LifecycleError]:
        self._phase = Phase.ABORTED
        return Err(error)
