"""Capability loading.

Before any lifecycle step runs, gls acquires its capability modules
(``gls/capabilities/*.py``) from one of two sources, picked once at startup:

- RemoteSource: probes the configured base URL, then fetches each module's
  source and executes it as a fresh module.
- LocalSource: executes the module files that sit next to the installed
  package, resolved through symlinks.

Loading is ordered and all-or-nothing. Each module executes in a namespace
that already holds the capabilities loaded before it, and may list the ones
it relies on in a module-level ``REQUIRES`` tuple. Nothing is cached between
runs and nothing is registered in ``sys.modules``.

Usage:
    loader = DependencyLoader(select_source(local=False, http=http, deps=config.deps))
    match loader.load(REQUIRED_CAPABILITIES):
        case Ok(deps):
            ...
        case Err(failure):
            console.error(failure.message)
"""

from __future__ import annotations

import importlib.util
import types
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from gls.core.result import Err, Ok, Result
from gls.platform.paths import capabilities_dir

if TYPE_CHECKING:
    from gls.core.config import DepsConfig
    from gls.net.http import HttpClient

__all__ = [
    "CapabilitySource",
    "DependencyLoader",
    "DependencySet",
    "LoadFailure",
    "LocalSource",
    "RemoteSource",
    "select_source",
]

_PROBE_MODULE = "__init__"
_MODULE_PREFIX = "gls_capability_"


@dataclass(frozen=True, slots=True)
class LoadFailure:
    """A named capability could not be acquired; the run cannot continue."""

    name: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class DependencySet:
    """Loaded capability modules keyed by name."""

    modules: Mapping[str, types.ModuleType]

    def __contains__(self, name: object) -> bool:
        return name in self.modules

    def __iter__(self) -> Iterator[str]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    def get(self, name: str) -> types.ModuleType | None:
        return self.modules.get(name)


class CapabilitySource(Protocol):
    @property
    def description(self) -> str: ...

    def preflight(self) -> Result[None, LoadFailure]:
        """Check that the source is usable before anything is loaded."""
        ...

    def materialize(
        self, name: str, namespace: Mapping[str, types.ModuleType]
    ) -> Result[types.ModuleType, LoadFailure]:
        """Create and execute a fresh module for ``name``.

        ``namespace`` holds the capabilities already loaded; they are visible
        as globals while the module executes.
        """
        ...


def _new_module(name: str, origin: str, namespace: Mapping[str, types.ModuleType]) -> types.ModuleType:
    module = types.ModuleType(f"{_MODULE_PREFIX}{name}")
    module.__file__ = origin
    module.__dict__.update(namespace)
    return module


class RemoteSource:
    """Fetch capability sources over HTTP(S)."""

    def __init__(self, *, http: HttpClient, deps: DepsConfig) -> None:
        self._http = http
        self._deps = deps

    @property
    def description(self) -> str:
        return self._deps.base_url

    def preflight(self) -> Result[None, LoadFailure]:
        url = self._deps.module_url(_PROBE_MODULE)
        probe = self._http.head(url)
        if isinstance(probe, Err):
            return Err(
                LoadFailure(
                    name="loader",
                    message=f"Failed to reach the capability host:\n\t{url}\n\t{probe.error}",
                    hint="Check your network connection or rerun with --load-deps-locally",
                )
            )
        return Ok(None)

    def materialize(
        self, name: str, namespace: Mapping[str, types.ModuleType]
    ) -> Result[types.ModuleType, LoadFailure]:
        url = self._deps.module_url(name)
        fetched = self._http.get_text(url)
        if isinstance(fetched, Err):
            return Err(LoadFailure(name=name, message=f"Failed to download {url}: {fetched.error}"))

        module = _new_module(name, url, namespace)
        try:
            code = compile(fetched.value, url, "exec")
            exec(code, module.__dict__)
        except Exception as e:  # noqa: BLE001
            return Err(LoadFailure(name=name, message=f"Failed to execute {url}: {e}"))
        return Ok(module)


class LocalSource:
    """Execute capability files located next to the installed package."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = (directory or capabilities_dir()).resolve()

    @property
    def description(self) -> str:
        return str(self._directory)

    def preflight(self) -> Result[None, LoadFailure]:
        if not self._directory.is_dir():
            return Err(
                LoadFailure(
                    name="loader",
                    message=f"Failed to load capabilities from the local file system:\n\t{self._directory}",
                    hint="Reinstall gls or run without --load-deps-locally",
                )
            )
        return Ok(None)

    def materialize(
        self, name: str, namespace: Mapping[str, types.ModuleType]
    ) -> Result[types.ModuleType, LoadFailure]:
        path = self._directory / f"{name}.py"
        if not path.is_file():
            return Err(LoadFailure(name=name, message=f"Capability file not found: {path}"))

        spec = importlib.util.spec_from_file_location(f"{_MODULE_PREFIX}{name}", path)
        if spec is None or spec.loader is None:
            return Err(LoadFailure(name=name, message=f"Cannot create a module spec for {path}"))

        module = importlib.util.module_from_spec(spec)
        module.__dict__.update(namespace)
        try:
            spec.loader.exec_module(module)
        except Exception as e:  # noqa: BLE001
            return Err(LoadFailure(name=name, message=f"Failed to execute {path}: {e}"))
        return Ok(module)


def select_source(*, local: bool, http: HttpClient, deps: DepsConfig) -> CapabilitySource:
    if local:
        return LocalSource()
    return RemoteSource(http=http, deps=deps)


def _missing_requirements(module: types.ModuleType, loaded: Mapping[str, object]) -> list[str]:
    requires = getattr(module, "REQUIRES", ())
    if isinstance(requires, str):
        requires = (requires,)
    return [str(r) for r in requires if r not in loaded]


class DependencyLoader:
    """Load an ordered list of capabilities from a single source."""

    def __init__(self, source: CapabilitySource) -> None:
        self._source = source

    @property
    def source(self) -> CapabilitySource:
        return self._source

    def load(self, names: Sequence[str]) -> Result[DependencySet, LoadFailure]:
        """Load ``names`` in order; any failure discards everything loaded so far."""
        if len(set(names)) != len(names):
            return Err(LoadFailure(name="loader", message=f"Duplicate capability names: {list(names)}"))

        preflight = self._source.preflight()
        if isinstance(preflight, Err):
            return preflight

        loaded: dict[str, types.ModuleType] = {}
        for name in names:
            result = self._source.materialize(name, types.MappingProxyType(dict(loaded)))
            if isinstance(result, Err):
                return result

            missing = _missing_requirements(result.value, loaded)
            if missing:
                return Err(
                    LoadFailure(
                        name=name,
                        message=f"{name} requires {', '.join(missing)} to be loaded first",
                    )
                )
            loaded[name] = result.value

        return Ok(DependencySet(types.MappingProxyType(loaded)))
