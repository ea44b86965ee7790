"""Latest release resolution.

The release metadata is saved to ``<work_dir>/latest_release.json`` for the
duration of the run. The target version comes from its ``tag_name``. When
no version can be found, the same document is checked for GitHub's rate
limit message, because the two failures need different remediation
(waiting vs reporting a broken release).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from gls.core.result import Err, Ok, Result
from gls.core.structured import as_str_dict, get_str
from gls.release.model import ReleaseDescriptor, ResolutionError
from gls.release.semver import Version, extract_version

if TYPE_CHECKING:
    from gls.deps.interfaces import DownloadCapability
    from gls.net.http import HttpClient
    from gls.output.console import ConsoleProtocol

__all__ = [
    "METADATA_FILE_NAME",
    "RATE_LIMIT_MARKER",
    "ReleaseResolver",
    "parse_release_metadata",
]

METADATA_FILE_NAME = "latest_release.json"
RATE_LIMIT_MARKER = "rate limit exceeded"


def _is_rate_limited(text: str, data: dict[str, object] | None) -> bool:
    if data is not None:
        message = get_str(data, "message") or ""
        return RATE_LIMIT_MARKER in message.lower()
    return RATE_LIMIT_MARKER in text.lower()


def parse_release_metadata(text: str, metadata_path: Path) -> Result[ReleaseDescriptor, ResolutionError]:
    """Build a ReleaseDescriptor from a GitHub "latest release" document."""
    try:
        data = as_str_dict(json.loads(text))
    except json.JSONDecodeError:
        data = None

    tag = get_str(data, "tag_name") if data is not None else None
    version = extract_version(tag) if tag else None

    if version is None:
        message = f"Failed to parse target version from:\n\t{metadata_path}"
        if _is_rate_limited(text, data):
            return Err(
                ResolutionError(
                    kind="rate_limited",
                    message=f"{message}\n\tGithub hourly {RATE_LIMIT_MARKER}",
                    hint="Wait for the GitHub API rate limit to reset, then try again",
                )
            )
        return Err(
            ResolutionError(
                kind="malformed_release",
                message=message,
                hint="Try again; if the problem persists, report the release metadata as broken",
            )
        )

    archive = get_str(data, "tarball_url") if data is not None else None
    return Ok(
        ReleaseDescriptor(
            version=version,
            archive_location=archive,
            metadata_path=metadata_path,
        )
    )


class ReleaseResolver:
    """Resolve the latest release into a descriptor and a staging path."""

    def __init__(
        self,
        *,
        work_dir: Path,
        url: str,
        download: DownloadCapability,
        http: HttpClient,
        console: ConsoleProtocol,
    ) -> None:
        self._work_dir = work_dir
        self._url = url
        self._download = download
        self._http = http
        self._console = console

    @property
    def metadata_path(self) -> Path:
        return self._work_dir / METADATA_FILE_NAME

    def target_dir(self, version: Version) -> Path:
        """Staging subpath for ``version``: computed, never fetched."""
        return self._work_dir / str(version)

    def resolve_latest(self) -> Result[ReleaseDescriptor, ResolutionError]:
        path = self.metadata_path
        ok = self._download.download_release_json(
            path, url=self._url, http=self._http, console=self._console
        )
        if not ok:
            return Err(
                ResolutionError(
                    kind="download_failed",
                    message=f"Failed to download release data from:\n\t{self._url}",
                )
            )

        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            return Err(
                ResolutionError(
                    kind="missing_metadata",
                    message=f"Cannot set target version\n\tMissing required file {path}",
                )
            )
        return parse_release_metadata(text, path)
