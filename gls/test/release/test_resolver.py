"""Tests for latest release resolution."""

from __future__ import annotations

import json
from pathlib import Path

from gls.core.result import Err, Ok
from gls.net.http import HttpError, MockHttpClient
from gls.output.console import MockConsole
from gls.release.resolver import METADATA_FILE_NAME, ReleaseResolver, parse_release_metadata
from gls.release.semver import Version
from gls.test._support import RELEASE_URL, TARBALL_URL, load_capabilities, release_text


def _resolver(work_dir: Path, http: MockHttpClient, console: MockConsole) -> ReleaseResolver:
    return ReleaseResolver(
        work_dir=work_dir,
        url=RELEASE_URL,
        download=load_capabilities().download,
        http=http,
        console=console,
    )


class TestParseReleaseMetadata:
    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILE_NAME
        result = parse_release_metadata(release_text("1.6.0"), path)
        assert isinstance(result, Ok)
        assert result.value.version == Version(1, 6, 0)
        assert result.value.archive_location == TARBALL_URL
        assert result.value.metadata_path == path

    def test_rate_limited(self, tmp_path: Path) -> None:
        text = json.dumps({"message": "API rate limit exceeded for 1.2.3.4."})
        result = parse_release_metadata(text, tmp_path / METADATA_FILE_NAME)
        assert isinstance(result, Err)
        assert result.error.kind == "rate_limited"
        assert "rate limit exceeded" in result.error.message

    def test_malformed(self, tmp_path: Path) -> None:
        text = json.dumps({"tag_name": "latest"})
        result = parse_release_metadata(text, tmp_path / METADATA_FILE_NAME)
        assert isinstance(result, Err)
        assert result.error.kind == "malformed_release"

    def test_not_json(self, tmp_path: Path) -> None:
        result = parse_release_metadata("<html>oops</html>", tmp_path / METADATA_FILE_NAME)
        assert isinstance(result, Err)
        assert result.error.kind == "malformed_release"

    def test_rate_limit_and_malformed_have_different_hints(self, tmp_path: Path) -> None:
        path = tmp_path / METADATA_FILE_NAME
        limited = parse_release_metadata(json.dumps({"message": "rate limit exceeded"}), path)
        broken = parse_release_metadata("{}", path)
        assert isinstance(limited, Err) and isinstance(broken, Err)
        assert limited.error.hint != broken.error.hint


class TestReleaseResolver:
    def test_resolve_latest(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_text(RELEASE_URL, release_text("1.6.0"))
        resolver = _resolver(tmp_path, http, MockConsole())

        result = resolver.resolve_latest()
        assert isinstance(result, Ok)
        assert result.value.version == Version(1, 6, 0)
        assert (tmp_path / METADATA_FILE_NAME).is_file()
        assert resolver.target_dir(result.value.version) == tmp_path / "1.6.0"

    def test_download_failure(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_text(RELEASE_URL, HttpError(url=RELEASE_URL, status=0, message="unreachable"))
        result = _resolver(tmp_path, http, MockConsole()).resolve_latest()
        assert isinstance(result, Err)
        assert result.error.kind == "download_failed"

    def test_rate_limit_body_of_error_status(self, tmp_path: Path) -> None:
        body = json.dumps({"message": "API rate limit exceeded for 10.0.0.1."})
        http = MockHttpClient()
        http.set_text(RELEASE_URL, HttpError(url=RELEASE_URL, status=403, message="Forbidden", body=body))
        result = _resolver(tmp_path, http, MockConsole()).resolve_latest()
        assert isinstance(result, Err)
        assert result.error.kind == "rate_limited"
