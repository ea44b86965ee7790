"""Capability loading and the typed capability registry."""

from .interfaces import REQUIRED_CAPABILITIES, Capabilities, InstallOptions
from .loader import (
    CapabilitySource,
    DependencyLoader,
    DependencySet,
    LoadFailure,
    LocalSource,
    RemoteSource,
    select_source,
)

__all__ = [
    "REQUIRED_CAPABILITIES",
    "Capabilities",
    "CapabilitySource",
    "DependencyLoader",
    "DependencySet",
    "InstallOptions",
    "LoadFailure",
    "LocalSource",
    "RemoteSource",
    "select_source",
]
