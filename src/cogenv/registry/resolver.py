"""Lookup, registration and alias resolution shared by environments."""

from __future__ import annotations

import abc
import logging
import os
import posixpath
import re
from dataclasses import dataclass
from typing import Any, Iterable, overload

from cogenv.errors import AliasLoopError, InvalidInputError
from cogenv.naming import DEFAULT_ENTRY_FILENAME, DEFAULT_LOOKUPS
from cogenv.paths import PathResolver
from cogenv.registry.options import LookupOptions
from cogenv.registry.scanner import DEFAULT_PACKAGE_PATTERNS, PackageLookup
from cogenv.registry.types import DiscoveredEntry, PackageMatch

logger = logging.getLogger(__name__)

__all__ = ["AliasRule", "Resolver", "default_file_patterns"]


@dataclass
class AliasRule:
    """Rewrite applied to namespaces before registry lookups."""

    match: re.Pattern[str]
    value: str

    def apply(self, value: str) -> str:
        if not self.match.search(value):
            return value
        return self.match.sub(self.value, value, count=1)


def default_file_patterns(lookups: Iterable[str], entry_filename: str = DEFAULT_ENTRY_FILENAME) -> list[str]:
    """``<lookup>/*/<entry_filename>`` for every lookup directory."""
    return [posixpath.join(prefix.replace("\\", "/"), "*", entry_filename) for prefix in lookups]


class Resolver(abc.ABC):
    """Finds generators in package roots and feeds them to :meth:`register`.

    Subclasses provide the store through :meth:`register` and the
    path-to-namespace derivation through :meth:`namespace`.
    """

    def __init__(
        self,
        path_resolver: PathResolver | None = None,
        lookups: Iterable[str] = DEFAULT_LOOKUPS,
        entry_filename: str = DEFAULT_ENTRY_FILENAME,
        package_patterns: Iterable[str] = DEFAULT_PACKAGE_PATTERNS,
        max_depth: int | None = None,
        filter_paths: bool = False,
    ) -> None:
        if isinstance(lookups, str):
            lookups = [lookups]
        if isinstance(package_patterns, str):
            package_patterns = [package_patterns]
        self.package_lookup = PackageLookup(path_resolver)
        self.lookups: list[str] = list(lookups)
        self.entry_filename = entry_filename
        self.package_patterns: list[str] = list(package_patterns)
        self.max_depth = max_depth
        self.filter_paths = filter_paths
        self.aliases: list[AliasRule] = []

    @abc.abstractmethod
    def namespace(self, file_path: str, lookups: Iterable[str] | None = None) -> str:
        """Derive the namespace of ``file_path``."""

    @abc.abstractmethod
    def register(self, name: str, namespace: str | None = None, package_path: str | None = None) -> Any:
        """Register the generator at ``name``."""

    # ----- Lookup -----

    def lookup(self, options: LookupOptions | dict[str, Any] | bool | None = None, **kwargs: Any) -> list[DiscoveredEntry]:
        """Search for generators and their sub-generators and register them.

        A generator is a ``<lookup>/<name>/template.toml`` file inside a
        ``gen-*`` package, so
        ``node_modules/gen-dummy/lib/generators/yo/template.toml`` is
        registered as ``dummy:yo``.

        Unless ``reverse`` is given, roots are visited lowest priority first
        so that more local packages override global ones. With
        ``single_result`` the lookup stops at the first registered entry.

        Returns:
            One :class:`DiscoveredEntry` per entry file found, registered or not.
        """
        opts = LookupOptions.coerce(options, **kwargs)
        lookups = opts.lookups or self.lookups
        if not opts.file_patterns:
            opts.file_patterns = default_file_patterns(lookups, self.entry_filename)
        if not opts.package_patterns:
            opts.package_patterns = list(self.package_patterns)
        if opts.max_depth is None:
            opts.max_depth = self.max_depth
        if opts.filter_paths is None:
            opts.filter_paths = self.filter_paths
        if opts.reverse is None:
            opts.reverse = not opts.single_result

        entries: list[DiscoveredEntry] = []

        def visit(match: PackageMatch) -> bool:
            repository_path = os.path.dirname(match.package_path)
            if os.path.basename(repository_path).startswith("@"):
                # Scoped package, the namespace keeps the scope folder.
                repository_path = os.path.dirname(repository_path)
            namespace = self.namespace(os.path.relpath(match.file_path, repository_path), lookups)
            registered = self._try_registering(match.file_path, match.package_path, namespace)
            entries.append(
                DiscoveredEntry(
                    entry_path=match.file_path,
                    package_path=match.package_path,
                    namespace=namespace,
                    registered=registered,
                )
            )
            return opts.single_result and registered

        self.package_lookup.sync(opts, visit)

        failed = sum(1 for e in entries if not e.registered)
        if failed:
            logger.warning("Lookup found %d entries, %d could not be registered", len(entries), failed)
        else:
            logger.debug("Lookup registered %d entries", len(entries))
        return entries

    def find_generators_in(
        self,
        search_paths: str | Iterable[str],
        package_patterns: str | Iterable[str] | None = None,
    ) -> list[str]:
        """Package directories matching ``package_patterns`` in ``search_paths``."""
        if isinstance(search_paths, str):
            search_paths = [search_paths]
        return self.package_lookup.find_packages_in(search_paths, package_patterns or self.package_patterns)

    def _try_registering(
        self,
        reference: str,
        package_path: str | None = None,
        namespace: str | None = None,
    ) -> bool:
        """Register ``reference``, logging instead of raising on failure."""
        try:
            real_path = os.path.realpath(reference, strict=True)
            logger.debug("Found %s, trying to register", reference)
            if not namespace and real_path != reference:
                namespace = self.namespace(reference)
            self.register(real_path, namespace, package_path)
            return True
        except Exception as e:
            logger.error("Unable to register %s (Error: %s)", reference, e)
            return False

    def get_npm_paths(self, local_only: bool = False, filter_paths: bool | None = None) -> list[str]:
        """Package roots (``node_modules`` folders) to search, most local first.

        ``filter_paths`` defaults to the value the resolver was built with.
        """
        if filter_paths is None:
            filter_paths = self.filter_paths
        return self.package_lookup.get_npm_paths(local_only=local_only, filter_paths=filter_paths)

    # ----- Aliases -----

    @overload
    def alias(self, match: str) -> str: ...

    @overload
    def alias(self, match: str | re.Pattern[str], value: str) -> Resolver: ...

    def alias(self, match: str | re.Pattern[str], value: str | None = None) -> Any:
        """Get or create an alias.

        Aliases let :meth:`get` find a generator under an alternate name, e.g.
        map ``gen-foo`` to ``foo`` or default ``angular`` to ``angular:app``.

        With ``value`` this registers a rule and returns ``self``. A string
        ``match`` must match the whole input; a compiled pattern is used as
        given. ``value`` uses :func:`re.sub` replacement syntax (``\\1``).

        With a single argument the rules are applied most recent first,
        pass after pass, until a pass changes nothing::

            env.alias(r"^([a-zA-Z0-9:*]+)$", r"gen-\\1")
            env.alias(r"^([^:]+)$", r"\\1:app")
            env.alias("foo")
            # => gen-foo:app

        Raises:
            AliasLoopError: If the rules keep rewriting the input for more
                passes than there are rules.
        """
        if value is not None:
            if not match:
                raise InvalidInputError(message="Alias match must be a non-empty pattern")
            pattern = match if isinstance(match, re.Pattern) else re.compile(f"^{match}$")
            self.aliases.append(AliasRule(match=pattern, value=value))
            return self

        if not isinstance(match, str):
            raise InvalidInputError(message="Only strings can be aliased")

        rules = list(reversed(self.aliases))
        limit = len(rules) + 1
        result = match
        for _ in range(limit):
            rewritten = result
            for rule in rules:
                rewritten = rule.apply(rewritten)
            if rewritten == result:
                return result
            result = rewritten
        raise AliasLoopError(value=match, iterations=limit)
