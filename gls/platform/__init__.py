"""Platform abstraction layer."""

from .files import is_empty_dir, is_subpath, remove_tree
from .paths import capabilities_dir, package_dir

__all__ = [
    # files
    "is_empty_dir",
    "is_subpath",
    "remove_tree",
    # paths
    "capabilities_dir",
    "package_dir",
]
