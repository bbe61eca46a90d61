"""In-memory store of registered generators and their packages."""

from __future__ import annotations

import logging

from cogenv.registry.types import RegistryEntry

logger = logging.getLogger(__name__)

__all__ = ["Store"]


class Store:
    """Namespace to :class:`RegistryEntry` table plus a package index.

    Not synchronized; :class:`~cogenv.environment.Environment` serializes access.
    """

    def __init__(self) -> None:
        self._metas: dict[str, RegistryEntry] = {}
        # Package namespace -> package roots, most recently added first.
        self._packages_paths: dict[str, list[str]] = {}
        self._packages_ns: dict[str, None] = {}

    def add(self, namespace: str, resolved_path: str, package_path: str | None = None) -> RegistryEntry:
        """Store a generator under ``namespace``, replacing any previous entry."""
        entry = RegistryEntry(namespace=namespace, resolved_path=resolved_path, package_path=package_path)
        self._metas[namespace] = entry
        return entry

    def get(self, namespace: str) -> RegistryEntry | None:
        return self._metas.get(namespace)

    def namespaces(self) -> list[str]:
        """Registered namespaces in registration order."""
        return list(self._metas)

    def get_metas(self) -> dict[str, RegistryEntry]:
        return dict(self._metas)

    def add_package(self, package_ns: str, package_path: str) -> None:
        """Record ``package_path`` as the preferred provider of ``package_ns``.

        A path already known for the namespace is moved to the front.
        """
        paths = self._packages_paths.get(package_ns)
        if paths is None:
            self._packages_paths[package_ns] = [package_path]
            return
        if paths[0] == package_path:
            return
        logger.info(
            "Overriding package %s at %s with %s",
            package_ns,
            paths[0],
            package_path,
        )
        if package_path in paths:
            paths.remove(package_path)
        paths.insert(0, package_path)

    def get_packages_paths(self) -> dict[str, list[str]]:
        return {ns: list(paths) for ns, paths in self._packages_paths.items()}

    def get_package_paths(self, package_ns: str) -> list[str] | None:
        paths = self._packages_paths.get(package_ns)
        return list(paths) if paths is not None else None

    def add_package_ns(self, package_ns: str) -> None:
        self._packages_ns.setdefault(package_ns, None)

    def get_packages_ns(self) -> list[str]:
        return list(self._packages_ns)

    def has_package_ns(self, package_ns: str) -> bool:
        return package_ns in self._packages_ns
