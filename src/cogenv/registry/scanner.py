"""Package and entry-point discovery inside package roots."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Iterable

from cogenv.naming import GENERATOR_PREFIX
from cogenv.paths import PathResolver, unique
from cogenv.registry.options import PackageLookupOptions
from cogenv.registry.types import PackageMatch
from cogenv.utils.pattern import glob_paths

logger = logging.getLogger(__name__)

__all__ = ["PackageLookup", "DEFAULT_PACKAGE_PATTERNS", "DEFAULT_FILE_PATTERNS"]

DEFAULT_PACKAGE_PATTERNS = [f"{GENERATOR_PREFIX}*"]
DEFAULT_FILE_PATTERNS = ["package.json"]

Visitor = Callable[[PackageMatch], Any]


def _is_package_dir(path: str) -> bool:
    return os.path.exists(path) and (os.path.isdir(path) or os.path.islink(path))


class PackageLookup:
    """Finds generator packages below package roots and entry files inside them."""

    def __init__(self, path_resolver: PathResolver | None = None) -> None:
        self.path_resolver = path_resolver or PathResolver()

    def _absolute(self, path: str) -> str:
        return os.path.normpath(os.path.join(self.path_resolver.cwd, os.path.expanduser(path)))

    def sync(
        self,
        options: PackageLookupOptions | dict[str, Any] | bool | None = None,
        visitor: Visitor | None = None,
    ) -> list[PackageMatch]:
        """Glob ``file_patterns`` inside every candidate package.

        Package paths come from ``options.package_paths`` or are searched
        for in ``options.npm_paths`` (default: :meth:`get_npm_paths`). With
        ``reverse`` the lower-priority roots are visited first. When
        ``visitor`` returns a truthy value the lookup stops and only that
        match is returned.
        """
        opts = PackageLookupOptions.coerce(options)
        logger.debug("Running lookup with options: %s", opts)
        file_patterns = opts.file_patterns or DEFAULT_FILE_PATTERNS

        if opts.package_paths:
            package_paths = [self._absolute(p) for p in opts.package_paths]
            if opts.reverse:
                package_paths.reverse()
        else:
            npm_paths = (
                list(opts.npm_paths)
                if opts.npm_paths
                else self.get_npm_paths(local_only=opts.local_only, filter_paths=bool(opts.filter_paths))
            )
            if opts.reverse:
                npm_paths.reverse()
            package_paths = self.find_packages_in(npm_paths, opts.package_patterns)

        logger.debug("Lookup package paths: %s", package_paths)

        matches: list[PackageMatch] = []
        for package_path in package_paths:
            if not _is_package_dir(package_path):
                continue
            try:
                found = glob_paths(package_path, file_patterns, max_depth=opts.max_depth)
            except OSError as e:
                logger.warning("Could not read package %s: %s", package_path, e)
                continue
            for file_path in found:
                match = PackageMatch(file_path=file_path, package_path=package_path)
                if visitor is not None and visitor(match):
                    return [match]
                matches.append(match)
        return matches

    def find_packages_in(
        self,
        search_paths: Iterable[str | None],
        package_patterns: str | Iterable[str] | None = None,
    ) -> list[str]:
        """Search package roots for directories matching ``package_patterns``.

        Only ``<root>/<package>`` and ``<root>/@scope/<package>`` are
        considered. A pattern such as ``@scope/gen-foo`` is only matched
        inside the scope folders it names, unscoped patterns are matched in
        the root and in every scope folder. Missing or unreadable roots are
        skipped.
        """
        if isinstance(package_patterns, str):
            package_patterns = [package_patterns]
        patterns: list[str] = []
        scoped: list[tuple[str, str]] = []
        for pattern in package_patterns or DEFAULT_PACKAGE_PATTERNS:
            if pattern.startswith("@") and "/" in pattern:
                scope, name = pattern.split("/", 1)
                scoped.append((scope, name))
            else:
                patterns.append(pattern)
        roots = [self._absolute(p) for p in search_paths if p]

        modules: list[str] = []
        for root in roots:
            if not os.path.isdir(root):
                continue
            try:
                if patterns:
                    modules.extend(glob_paths(root, patterns, only_directories=True, max_depth=0))
                    # Scope folders are searched one level deeper separately, never recursively.
                    for scope_dir in glob_paths(root, ["@*"], only_directories=True, max_depth=0):
                        modules.extend(glob_paths(scope_dir, patterns, only_directories=True, max_depth=0))
                for scope, name in scoped:
                    for scope_dir in glob_paths(root, [scope], only_directories=True, max_depth=0):
                        modules.extend(glob_paths(scope_dir, [name], only_directories=True, max_depth=0))
            except OSError as e:
                logger.debug("Could not access %s (%s)", root, e)
        return unique(modules)

    def get_npm_paths(self, local_only: bool = False, filter_paths: bool = False) -> list[str]:
        """Package roots to search, most local first."""
        return self.path_resolver.get_npm_paths(local_only=local_only, filter_paths=filter_paths)
