"""Release metadata download, archive extraction and merge.

``install_latest_archive`` works in three steps:

1. download the release tarball named by ``tarball_url`` into the work dir
2. extract it into the target staging dir, dropping the archive's top-level
   directory and skipping unsafe members (absolute paths, ``..``, links,
   devices)
3. merge the staged tree into the project root; an existing file that would
   change is copied into the backup dir first, and nothing is written outside
   the root or through a symlink
"""

from __future__ import annotations

import filecmp
import json
import shutil
import tarfile
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from gls.core.result import Err
from gls.core.structured import as_str_dict, get_str
from gls.output.console import Style

if TYPE_CHECKING:
    from gls.capabilities import spinner, util
    from gls.deps.interfaces import InstallOptions
    from gls.net.http import HttpClient
    from gls.output.console import ConsoleProtocol

REQUIRES: tuple[str, ...] = ("util", "spinner")

ARCHIVE_NAME = "release.tar.gz"
STRIP_COMPONENTS = 1


def download_release_json(
    dest: Path, *, url: str, http: HttpClient, console: ConsoleProtocol
) -> bool:
    """Save the release metadata answered by ``url`` to ``dest``.

    An error status that comes with a body (GitHub rate limiting answers
    403 plus a JSON message) still counts as a download: the body is saved
    and the resolver reports on it.
    """
    with spinner.spin(console, "Downloading release data"):
        result = http.get_text(url)

    if isinstance(result, Err):
        if not result.error.body:
            console.error(f"Failed to download release data:\n\t{result.error}")
            return False
        text = result.error.body
    else:
        text = result.value

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(text, encoding="utf-8")
    except OSError as e:
        console.error(f"Failed to write {dest}: {e}")
        return False
    return True


def _tarball_url(json_path: Path) -> str | None:
    try:
        data = as_str_dict(json.loads(json_path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if data is None:
        return None
    return get_str(data, "tarball_url")


def _safe_relative_path(member_name: str) -> Path | None:
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None
    parts = PurePosixPath(normalized).parts
    if len(parts) <= STRIP_COMPONENTS:
        return None
    kept = parts[STRIP_COMPONENTS:]
    if any(part in {"", ".", ".."} for part in kept) or kept[0].endswith(":"):
        return None
    return Path(*kept)


def _extract(archive: Path, target_dir: Path) -> int:
    """Extract regular files of ``archive`` into ``target_dir``; returns the count."""
    root = target_dir.resolve()
    count = 0
    with tarfile.open(archive, "r:*") as tar:
        for member in tar.getmembers():
            if not member.isreg():
                continue
            rel = _safe_relative_path(member.name)
            if rel is None:
                continue
            dest = target_dir / rel
            if not dest.resolve().is_relative_to(root):
                continue
            src = tar.extractfile(member)
            if src is None:
                continue
            dest.parent.mkdir(parents=True, exist_ok=True)
            with src, open(dest, "wb") as out:
                shutil.copyfileobj(src, out)
            if member.mode & 0o111:
                dest.chmod(0o755)
            count += 1
    return count


def _merge(options: InstallOptions, console: ConsoleProtocol) -> tuple[int, int, int]:
    """Copy the staged tree over the project root.

    Returns (written, backed_up, refused). A destination whose parent
    resolves outside the project root, or that is a directory, is refused.
    A symlink in the way is backed up and replaced by a regular file.
    """
    root = options.project_root.resolve()
    written = 0
    backed_up = 0
    refused = 0
    for src in sorted(options.target_dir.rglob("*")):
        if not src.is_file():
            continue
        rel = src.relative_to(options.target_dir)
        dest = options.project_root / rel
        if not dest.parent.resolve().is_relative_to(root):
            console.error(f"Refusing to write outside the project root:\n\t{rel}")
            refused += 1
            continue
        if dest.is_dir() and not dest.is_symlink():
            console.error(f"Refusing to replace a directory with a file:\n\t{rel}")
            refused += 1
            continue
        if dest.is_symlink() or dest.is_file():
            if not dest.is_symlink() and filecmp.cmp(src, dest, shallow=False):
                continue
            saved = util.backup_file(dest, options.project_root, options.backup_dir)
            console.print(f"backed up {rel} -> {saved}", Style.DIM)
            backed_up += 1
            if dest.is_symlink():
                dest.unlink()
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
        written += 1
    return written, backed_up, refused


def install_latest_archive(
    json_path: Path,
    options: InstallOptions,
    *,
    http: HttpClient,
    console: ConsoleProtocol,
) -> bool:
    """Download, extract and merge the release described by ``json_path``."""
    url = _tarball_url(json_path)
    if url is None:
        console.error(f"Missing tarball_url in release data:\n\t{json_path}")
        return False

    archive = options.work_dir / ARCHIVE_NAME
    with spinner.spin(console, "Downloading release archive"):
        downloaded = http.download(url, archive)
    if isinstance(downloaded, Err):
        console.error(f"Failed to download the release archive:\n\t{downloaded.error}")
        return False

    try:
        with spinner.spin(console, "Extracting release archive"):
            extracted = _extract(archive, options.target_dir)
        if extracted == 0:
            console.error(f"Release archive contained no files:\n\t{archive}")
            return False
        written, backed_up, refused = _merge(options, console)
    except tarfile.TarError as e:
        console.error(f"Failed to extract {archive}: {e}")
        return False
    except OSError as e:
        console.error(f"Failed to install release files: {e}")
        return False

    console.print(f"{written} files written, {backed_up} backed up", Style.DIM)
    if refused:
        console.error(f"{refused} release files could not be installed")
        return False
    return True
