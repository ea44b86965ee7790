"""Install-location paths.

The local capability strategy must find the real package directory even
when ``gls`` is reached through a symlinked checkout or a linked console
script, so every path here is resolved.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

__all__ = ["capabilities_dir", "package_dir"]


@lru_cache(maxsize=1)
def package_dir() -> Path:
    """Resolved directory of the installed ``gls`` package (symlinks followed)."""
    return Path(__file__).resolve().parents[1]


def capabilities_dir() -> Path:
    return package_dir() / "capabilities"
