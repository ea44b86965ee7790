"""Tests for the install/update lifecycle controller."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gls.core.result import Err, Ok
from gls.lifecycle.controller import LifecycleController, Phase
from gls.lifecycle.errors import LifecycleStateError
from gls.lifecycle.context import RunKind
from gls.net.http import HttpError, MockHttpClient
from gls.output.console import MockConsole
from gls.release.base_version import UNKNOWN
from gls.release.semver import Version
from gls.test._support import (
    RELEASE_URL,
    TARBALL_URL,
    load_capabilities,
    make_config,
    make_installation,
    make_tarball,
    release_text,
)

RELEASE_FILES = {".gitpod.yml": "tasks: [new]\n", ".gp/CHANGELOG.md": "## [1.6.0] - 2022-03-01\n"}


def _http(version: str = "1.6.0") -> MockHttpClient:
    http = MockHttpClient()
    http.set_text(RELEASE_URL, release_text(version))
    http.set_download(TARBALL_URL, make_tarball(RELEASE_FILES))
    return http


def _controller(
    kind: RunKind,
    *,
    http: MockHttpClient | None = None,
    console: MockConsole | None = None,
    answer: str | None = None,
) -> LifecycleController:
    return LifecycleController(
        kind=kind,
        capabilities=load_capabilities(),
        config=make_config(),
        http=http or _http(),
        console=console or MockConsole(),
        prompt=lambda _question: answer,
    )


def _snapshot(root: Path) -> list[str]:
    return sorted(str(p.relative_to(root)) for p in root.rglob("*"))


# =============================================================================
# init
# =============================================================================


class TestInit:
    def test_allocates_work_dir_and_prints_header(self, tmp_path: Path) -> None:
        console = MockConsole()
        controller = _controller("install", console=console)

        result = controller.init(tmp_path, ["--strict"])

        assert isinstance(result, Ok)
        ctx = result.value
        assert controller.phase is Phase.INITIALIZED
        assert ctx.work_dir == tmp_path.resolve() / "tmp_gls_install"
        assert ctx.work_dir.is_dir()
        assert ctx.backup_dir == ctx.project_root
        assert ctx.options == ("--strict",)
        assert ctx.strict
        assert ctx.release_json == ctx.work_dir / "latest_release.json"
        assert console.find("gitpod-laravel-starter installer")

    def test_second_init_raises_without_changing_state(self, tmp_path: Path) -> None:
        controller = _controller("install")
        first = controller.init(tmp_path, [])
        assert isinstance(first, Ok)

        with pytest.raises(LifecycleStateError):
            controller.init(tmp_path, ["--strict"])

        assert controller.phase is Phase.INITIALIZED
        assert controller.context == first.value

    def test_init_after_abort_raises(self, tmp_path: Path) -> None:
        controller = _controller("install")
        assert isinstance(controller.init(tmp_path, ["-x"]), Err)
        with pytest.raises(LifecycleStateError):
            controller.init(tmp_path, [])

    def test_existing_installation_blocks_install(self, tmp_path: Path) -> None:
        make_installation(tmp_path)
        before = _snapshot(tmp_path)
        controller = _controller("install")

        result = controller.init(tmp_path, [])

        assert isinstance(result, Err)
        assert result.error.kind == "existing_installation"
        assert result.error.category == "precondition"
        assert result.error.hint is not None and "gls-update" in result.error.hint
        assert controller.phase is Phase.ABORTED
        assert controller.cleanup() == Ok(None)
        assert _snapshot(tmp_path) == before

    def test_update_requires_installation(self, tmp_path: Path) -> None:
        result = _controller("update").init(tmp_path, [])
        assert isinstance(result, Err)
        assert result.error.kind == "missing_installation"
        assert not (tmp_path / "tmp_gls_update").exists()

    @pytest.mark.parametrize("arg", ["-", "-x", "--", "install"])
    def test_malformed_arguments(self, tmp_path: Path, arg: str) -> None:
        controller = _controller("install")
        result = controller.init(tmp_path, [arg])
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_argument"
        assert arg in result.error.message
        assert list(tmp_path.iterdir()) == []

    def test_unsupported_long_option(self, tmp_path: Path) -> None:
        result = _controller("install").init(tmp_path, ["--strict", "--nope"])
        assert isinstance(result, Err)
        assert result.error.kind == "unsupported_option"
        assert "--nope" in result.error.message
        assert list(tmp_path.iterdir()) == []

    def test_empty_long_option_name(self, tmp_path: Path) -> None:
        result = _controller("install").init(tmp_path, ["--=1"])
        assert isinstance(result, Err)
        assert result.error.kind == "options_failed"

    @pytest.mark.parametrize("arg", ["--load-deps-locally=1", "--strict=yes", "--help=1"])
    def test_flag_with_value_is_rejected(self, tmp_path: Path, arg: str) -> None:
        result = _controller("install").init(tmp_path, [arg])
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_argument"
        assert arg in result.error.message
        assert list(tmp_path.iterdir()) == []


# =============================================================================
# run
# =============================================================================


class TestRunInstall:
    def test_installs_latest_release(self, tmp_path: Path) -> None:
        console = MockConsole()
        controller = _controller("install", console=console)
        assert isinstance(controller.init(tmp_path, []), Ok)

        result = controller.run()

        assert isinstance(result, Ok)
        assert controller.phase is Phase.COMPLETED
        assert result.value.target_version == Version(1, 6, 0)
        assert (tmp_path / ".gitpod.yml").read_text(encoding="utf-8") == "tasks: [new]\n"
        assert console.find("v1.6.0 has been installed to")
        assert console.find("SUCCESS")

        assert controller.cleanup() == Ok(None)
        assert not (tmp_path / "tmp_gls_install").exists()

    def test_run_before_init_raises(self) -> None:
        with pytest.raises(LifecycleStateError):
            _controller("install").run()

    def test_run_twice_raises(self, tmp_path: Path) -> None:
        controller = _controller("install")
        controller.init(tmp_path, [])
        controller.run()
        with pytest.raises(LifecycleStateError):
            controller.run()

    def test_rate_limit_is_reported_distinctly(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        body = json.dumps({"message": "API rate limit exceeded for 10.0.0.1."})
        http.set_text(RELEASE_URL, HttpError(url=RELEASE_URL, status=403, message="Forbidden", body=body))
        controller = _controller("install", http=http)
        controller.init(tmp_path, [])

        result = controller.run()

        assert isinstance(result, Err)
        assert result.error.kind == "rate_limited"
        assert controller.phase is Phase.ABORTED
        assert controller.cleanup() == Ok(None)
        assert list(tmp_path.iterdir()) == []

    def test_malformed_release(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_text(RELEASE_URL, "{}")
        controller = _controller("install", http=http)
        controller.init(tmp_path, [])
        result = controller.run()
        assert isinstance(result, Err)
        assert result.error.kind == "malformed_release"

    def test_release_without_archive_stops_before_staging(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_text(RELEASE_URL, json.dumps({"tag_name": "v1.6.0"}))
        controller = _controller("install", http=http)
        ctx = controller.init(tmp_path, []).unwrap()

        result = controller.run()

        assert isinstance(result, Err)
        assert result.error.kind == "malformed_release"
        assert "tarball_url" in result.error.message
        assert not (ctx.work_dir / "1.6.0").exists()
        assert not any(method == "download" for method, _ in http.calls)

    def test_archive_failure(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_text(RELEASE_URL, release_text("1.6.0"))
        controller = _controller("install", http=http)
        controller.init(tmp_path, [])
        result = controller.run()
        assert isinstance(result, Err)
        assert result.error.kind == "install_failed"


class TestRunUpdate:
    def test_updates_and_backs_up_changed_files(self, tmp_path: Path) -> None:
        make_installation(tmp_path, changelog="## [1.5.0] - 2021-12-01\n")
        console = MockConsole()
        controller = _controller("update", console=console)
        controller.init(tmp_path, [])

        result = controller.run()

        assert isinstance(result, Ok)
        ctx = result.value
        assert ctx.base_version == Version(1, 5, 0)
        assert ctx.target_version == Version(1, 6, 0)
        assert ctx.backup_dir == tmp_path.resolve() / "GLS_BACKUPS_project_data"
        assert console.find("Updating gls version 1.5.0 to version 1.6.0")
        assert (tmp_path / ".gitpod.yml").read_text(encoding="utf-8") == "tasks: [new]\n"
        assert (ctx.backup_dir / ".gitpod.yml").read_text(encoding="utf-8") == "tasks: []\n"

        assert controller.cleanup() == Ok(None)
        assert (ctx.backup_dir / ".gitpod.yml").is_file()
        assert not (tmp_path / "tmp_gls_update").exists()

    def test_unknown_base_version_proceeds(self, tmp_path: Path) -> None:
        make_installation(tmp_path, changelog=None)
        console = MockConsole()
        controller = _controller("update", console=console, answer="y")
        controller.init(tmp_path, [])

        result = controller.run()

        assert isinstance(result, Ok)
        assert result.value.base_version is UNKNOWN
        assert console.find("'unknown'")

    def test_base_newer_than_target_aborts(self, tmp_path: Path) -> None:
        make_installation(tmp_path, changelog="## [2.0.0]\n")
        controller = _controller("update")
        controller.init(tmp_path, [])

        result = controller.run()

        assert isinstance(result, Err)
        assert result.error.kind == "version_mismatch"
        assert "2.0.0" in result.error.message
        assert "1.6.0" in result.error.message
        assert controller.phase is Phase.ABORTED
        assert (tmp_path / ".gitpod.yml").read_text(encoding="utf-8") == "tasks: []\n"

    def test_same_version_aborts(self, tmp_path: Path) -> None:
        make_installation(tmp_path, changelog="## [1.6.0]\n")
        controller = _controller("update")
        controller.init(tmp_path, [])
        result = controller.run()
        assert isinstance(result, Err)
        assert result.error.kind == "version_mismatch"

    def test_base_too_old_aborts(self, tmp_path: Path) -> None:
        make_installation(tmp_path, changelog=None)
        controller = _controller("update", answer="0.9.0")
        controller.init(tmp_path, [])
        result = controller.run()
        assert isinstance(result, Err)
        assert result.error.kind == "base_too_old"
        assert result.error.category == "version_gate"


# =============================================================================
# cleanup
# =============================================================================


class TestCleanup:
    def test_cleanup_without_init_is_a_noop(self, tmp_path: Path) -> None:
        controller = _controller("install")
        assert controller.cleanup() == Ok(None)
        assert list(tmp_path.iterdir()) == []

    def test_cleanup_twice_raises(self, tmp_path: Path) -> None:
        controller = _controller("install")
        controller.init(tmp_path, [])
        controller.cleanup()
        with pytest.raises(LifecycleStateError):
            controller.cleanup()

    def test_cleanup_after_init_removes_work_dir(self, tmp_path: Path) -> None:
        controller = _controller("install")
        controller.init(tmp_path, [])
        assert controller.cleanup() == Ok(None)
        assert not (tmp_path / "tmp_gls_install").exists()
