"""Registry types: RegistryEntry, PackageMatch, DiscoveredEntry."""

from __future__ import annotations

import os
from dataclasses import dataclass

__all__ = [
    "RegistryEntry",
    "PackageMatch",
    "DiscoveredEntry",
]


@dataclass
class RegistryEntry:
    """Resolved generator stored under a namespace."""

    namespace: str
    resolved_path: str
    package_path: str | None = None
    entry_dir: str = ""

    def __post_init__(self) -> None:
        if not self.entry_dir:
            self.entry_dir = os.path.dirname(self.resolved_path)


@dataclass
class PackageMatch:
    """An entry file found inside a candidate package directory."""

    file_path: str
    package_path: str


@dataclass
class DiscoveredEntry:
    """Outcome of registering one entry file during a lookup."""

    entry_path: str
    package_path: str
    namespace: str
    registered: bool
