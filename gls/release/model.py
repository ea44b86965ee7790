from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from gls.release.semver import Version


@dataclass(frozen=True, slots=True)
class ReleaseDescriptor:
    """A resolved release. Built once by the resolver and never changed."""

    version: Version
    # Source archive of the release (GitHub ``tarball_url``).
    archive_location: str | None
    # The raw release document as saved in the work dir.
    metadata_path: Path


@dataclass(frozen=True, slots=True)
class ResolutionError:
    kind: Literal[
        "download_failed",
        "missing_metadata",
        "rate_limited",
        "malformed_release",
    ]
    message: str
    hint: str | None = None
