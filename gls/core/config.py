"""Typed configuration for the installer and updater.

Configuration is optional. When present it lives in ``gls.toml`` at the
project root (or wherever ``GLS_CONFIG`` points):

    [release]
    repo = "apolopena/gitpod-laravel-starter"

    [deps]
    base_url = "https://raw.githubusercontent.com/apolopena/gls-tools/main/gls/capabilities/"

    [staging]
    backup_label = "project_data"

    [update]
    marker_file = ".gp/CHANGELOG.md"
    min_base_version = "1.0.0"

    [http]
    timeout = 30
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILE_NAME",
    "Config",
    "ConfigError",
    "DepsConfig",
    "HttpConfig",
    "ReleaseConfig",
    "StagingConfig",
    "UpdateConfig",
    "config_path_for",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "gls.toml"
CONFIG_ENV_VAR = "GLS_CONFIG"

DEFAULT_REPO = "apolopena/gitpod-laravel-starter"
DEFAULT_DEPS_BASE_URL = "https://raw.githubusercontent.com/apolopena/gls-tools/main/gls/capabilities/"
DEFAULT_BACKUP_LABEL = "project_data"
DEFAULT_MARKER_FILE = ".gp/CHANGELOG.md"
DEFAULT_MIN_BASE_VERSION = "1.0.0"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    repo: str = DEFAULT_REPO
    # Overrides the GitHub API endpoint derived from ``repo``.
    api_url: str | None = None

    @property
    def latest_release_url(self) -> str:
        if self.api_url:
            return self.api_url
        return f"https://api.github.com/repos/{self.repo}/releases/latest"


@dataclass(frozen=True, slots=True)
class DepsConfig:
    base_url: str = DEFAULT_DEPS_BASE_URL

    def module_url(self, name: str) -> str:
        return f"{self.base_url.rstrip('/')}/{name}.py"


@dataclass(frozen=True, slots=True)
class StagingConfig:
    backup_label: str = DEFAULT_BACKUP_LABEL


@dataclass(frozen=True, slots=True)
class UpdateConfig:
    marker_file: str = DEFAULT_MARKER_FILE
    min_base_version: str = DEFAULT_MIN_BASE_VERSION


@dataclass(frozen=True, slots=True)
class HttpConfig:
    timeout: float = DEFAULT_HTTP_TIMEOUT


@dataclass(frozen=True, slots=True)
class Config:
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    deps: DepsConfig = field(default_factory=DepsConfig)
    staging: StagingConfig = field(default_factory=StagingConfig)
    update: UpdateConfig = field(default_factory=UpdateConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a parsed TOML mapping, defaulting missing keys."""
        release: StrDict = get_table(data, "release") or {}
        deps: StrDict = get_table(data, "deps") or {}
        staging: StrDict = get_table(data, "staging") or {}
        update: StrDict = get_table(data, "update") or {}
        http: StrDict = get_table(data, "http") or {}

        return cls(
            release=ReleaseConfig(
                repo=get_str(release, "repo") or DEFAULT_REPO,
                api_url=get_str(release, "api_url"),
            ),
            deps=DepsConfig(base_url=get_str(deps, "base_url") or DEFAULT_DEPS_BASE_URL),
            staging=StagingConfig(
                backup_label=get_str(staging, "backup_label") or DEFAULT_BACKUP_LABEL,
            ),
            update=UpdateConfig(
                marker_file=get_str(update, "marker_file") or DEFAULT_MARKER_FILE,
                min_base_version=get_str(update, "min_base_version") or DEFAULT_MIN_BASE_VERSION,
            ),
            http=HttpConfig(timeout=get_float(http, "timeout") or DEFAULT_HTTP_TIMEOUT),
        )


def config_path_for(project_root: Path) -> Path:
    """Config file location: ``$GLS_CONFIG`` if set, else ``<root>/gls.toml``."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return project_root / CONFIG_FILE_NAME


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigError(f"No config file at {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Cannot read config: {e}", path=path))

    try:
        parsed: object = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML in config: {e}", path=path))

    data = as_str_dict(parsed)
    if data is None:
        return Err(ConfigError("Config must be a TOML table at the top level", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Config.from_dict(result.value))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like load_config, but a missing file yields the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
