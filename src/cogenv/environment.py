"""Environment: namespace-based access to discovered generators."""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Any, Iterable, TextIO

from cogenv.config import Config
from cogenv.console import StatusLogger
from cogenv.errors import RegistrationError
from cogenv.naming import (
    DEFAULT_LOOKUPS,
    generator_hint,
    namespace_from_path,
    namespace_to_name,
)
from cogenv.paths import PathResolver
from cogenv.registry.options import GeneratorLookupOptions
from cogenv.registry.resolver import Resolver, default_file_patterns
from cogenv.registry.scanner import PackageLookup
from cogenv.registry.store import Store
from cogenv.registry.types import PackageMatch, RegistryEntry

logger = logging.getLogger(__name__)

__all__ = ["Environment"]

_PATH_SEPARATOR_RE = re.compile(r"[/\\]")


class Environment(Resolver):
    """Registry of generators available to the current working directory.

    Generators are registered explicitly with :meth:`register` or found in
    installed packages with :meth:`lookup`, then retrieved by namespace with
    :meth:`get`.

    Thread safety:
        Store reads and writes are serialized by an internal lock.
    """

    LOOKUPS: tuple[str, ...] = DEFAULT_LOOKUPS

    def __init__(
        self,
        config: Config | None = None,
        cwd: str | os.PathLike[str] | None = None,
        path_resolver: PathResolver | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialize the Environment.

        Args:
            config: Optional Config; defaults apply for missing keys.
            cwd: Working directory used for relative paths and local roots.
            path_resolver: Search-root provider; built from ``config`` and
                ``cwd`` when omitted.
            stream: Stream for the status logger (stderr by default).
        """
        self.config = config or Config()
        self.cwd = os.path.abspath(cwd) if cwd is not None else os.getcwd()
        if path_resolver is None:
            path_resolver = PathResolver(
                cwd=self.cwd,
                command_timeout=self.config.get("paths.command_timeout", 5.0),
                ask_package_managers=self.config.get("paths.ask_package_managers", True),
                extra_roots=self.config.get("paths.extra_roots", []),
            )
        super().__init__(
            path_resolver=path_resolver,
            lookups=self.config.get("lookup.lookups", self.LOOKUPS),
            entry_filename=self.config.get("lookup.entry_filename"),
            package_patterns=self.config.get("lookup.package_patterns"),
            max_depth=self.config.get("lookup.max_depth"),
            filter_paths=bool(self.config.get("paths.filter_paths", False)),
        )
        self.store = Store()
        self.log = StatusLogger(stream)
        self._lock = threading.RLock()

        self.alias(r"^([^:]+)$", r"\1:app")
        for rule in self.config.get("aliases", []):
            self.alias(rule["match"], rule["value"])

    @classmethod
    def create_env(cls, *args: Any, **kwargs: Any) -> Environment:
        """Factory taking the same arguments as the constructor."""
        return cls(*args, **kwargs)

    @staticmethod
    def namespace_to_name(namespace: str) -> str:
        """Convert a generator namespace to its package name."""
        return namespace_to_name(namespace)

    # ----- Registration -----

    def register(self, name: str, namespace: str | None = None, package_path: str | None = None) -> Environment:
        """Register the generator at ``name`` under ``namespace``.

        Args:
            name: File path of the generator entry.
            namespace: Namespace to register under; derived from the path if omitted.
            package_path: Root of the package providing the generator.

        Returns:
            This environment.

        Raises:
            RegistrationError: If ``name`` is not a path or no namespace can be derived.
        """
        if not isinstance(name, (str, os.PathLike)):
            raise RegistrationError(
                f"You must provide a generator path to register, got {type(name).__name__}",
                reference=name,
            )
        module_path = self.resolve_module_path(os.fspath(name))
        namespace = namespace or self.namespace(module_path)
        if not namespace:
            raise RegistrationError("Unable to determine namespace.", reference=module_path)

        package_ns = namespace_to_name(namespace)
        with self._lock:
            meta = self.store.get(namespace)
            if meta is not None and meta.resolved_path == module_path:
                return self
            self.store.add(namespace, module_path, package_path)
            self.store.add_package_ns(package_ns)
            if package_path:
                self.store.add_package(package_ns, package_path)

        logger.debug("Registered %s (%s) on package %s (%s)", namespace, module_path, package_ns, package_path)
        return self

    def resolve_module_path(self, path: str) -> str:
        """Expand ``~``, make the path absolute against the cwd and normalize."""
        path = os.path.expanduser(path)
        if not os.path.isabs(path):
            path = os.path.join(self.cwd, path)
        return os.path.normpath(path)

    def namespace(self, file_path: str, lookups: Iterable[str] | None = None) -> str:
        """Given a file path, figure out the relative namespace.

        Examples::

            env.namespace("backbone/all/index.js")              # backbone:all
            env.namespace("gen-mocha/backbone/model/index.js")  # mocha:backbone:model
        """
        return namespace_from_path(file_path, self.lookups if lookups is None else lookups)

    # ----- Queries -----

    def namespaces(self) -> list[str]:
        """Registered namespaces."""
        with self._lock:
            return self.store.namespaces()

    def get_generators(self) -> dict[str, RegistryEntry]:
        """Registered entries keyed by namespace."""
        with self._lock:
            return self.store.get_metas()

    def get_generator_names(self) -> list[str]:
        """Package names of the registered generators, without duplicates."""
        names: dict[str, None] = {}
        for namespace in self.namespaces():
            names.setdefault(namespace_to_name(namespace), None)
        return list(names)

    def is_package_registered(self, package_ns: str) -> bool:
        """True if any generator of ``package_ns`` has been registered."""
        with self._lock:
            return self.store.has_package_ns(package_ns)

    def get_registered_packages(self) -> list[str]:
        with self._lock:
            return self.store.get_packages_ns()

    def get_package_path(self, namespace: str) -> str | None:
        """Last registered package path for a package namespace.

        A full generator namespace (with ``:``) returns that generator's package path.
        """
        if ":" in namespace:
            entry = self.get(namespace)
            return entry.package_path if entry else None
        paths = self.get_package_paths(namespace) or []
        return paths[0] if paths else None

    def get_package_paths(self, namespace: str) -> list[str] | None:
        """Every package path registered for ``namespace``, most recent first."""
        aliased = namespace_to_name(self.alias(namespace))
        with self._lock:
            paths = self.store.get_package_paths(namespace)
            if paths is None:
                paths = self.store.get_package_paths(aliased)
        return paths

    def get(self, namespace_or_path: str | None = None) -> RegistryEntry | None:
        """Get a registered generator by namespace or by file path.

        A trailing path segment (``mocha:app:/some/path``) is ignored for
        compatibility with callers that append one. The namespace is looked
        up as-is, then through the aliases, and finally treated as a file
        path to register.

        Returns:
            The registered entry, or None if nothing matches.
        """
        if not namespace_or_path:
            return None

        namespace = namespace_or_path
        parts = namespace_or_path.split(":")
        maybe_path = parts[-1]
        if len(parts) > 1 and _PATH_SEPARATOR_RE.search(maybe_path):
            parts.pop()
            # Drop the drive letter of a Windows path as well.
            if "\\" in maybe_path and len(parts[-1]) == 1:
                parts.pop()
            namespace = ":".join(parts)

        with self._lock:
            entry = self.store.get(namespace) if namespace else None
            if entry is None and namespace:
                entry = self.store.get(self.alias(namespace))
        if entry is not None:
            return entry
        return self.get_by_path(namespace_or_path)

    def get_by_path(self, path: str) -> RegistryEntry | None:
        """Register the generator found at ``path`` and return it."""
        if not os.path.exists(self.resolve_module_path(path)):
            return None
        try:
            namespace = self.namespace(path)
            self.register(path, namespace)
        except RegistrationError as e:
            logger.warning("Unable to register generator at %s: %s", path, e)
            return None
        with self._lock:
            return self.store.get(namespace)

    # ----- Static lookup -----

    @classmethod
    def lookup_generator(
        cls,
        namespace: str,
        options: GeneratorLookupOptions | dict[str, Any] | bool | None = None,
        path_resolver: PathResolver | None = None,
        **kwargs: Any,
    ) -> str | list[str] | None:
        """Find the file providing ``namespace`` without registering anything.

        Args:
            namespace: Generator namespace, e.g. ``dummy:app``.
            options: Lookup options; a bool means ``local_only``. Extra
                flags: ``package_path`` returns the package root instead of
                the entry file, ``generator_path`` returns the generator
                folder, ``multiple`` returns every match.
            path_resolver: Search-root provider (a fresh one by default).

        Returns:
            A path, a list of paths when ``single_result`` is False, or None.
        """
        opts = GeneratorLookupOptions.coerce(options, **kwargs)
        lookups = opts.lookups or list(cls.LOOKUPS)
        if not opts.file_patterns:
            opts.file_patterns = default_file_patterns(lookups)
        if not opts.package_patterns:
            opts.package_patterns = [generator_hint(namespace_to_name(namespace))]

        package_lookup = PackageLookup(path_resolver)
        if not opts.package_paths:
            npm_paths = opts.npm_paths or package_lookup.get_npm_paths(
                local_only=opts.local_only, filter_paths=bool(opts.filter_paths)
            )
            opts.package_paths = package_lookup.find_packages_in(npm_paths, opts.package_patterns) or None
            if opts.package_paths is None:
                return None if opts.single_result else []

        paths: list[str] = []

        def visit(match: PackageMatch) -> bool:
            file_ns = namespace_from_path(match.file_path, lookups)
            if namespace != file_ns and not (opts.package_path and namespace == namespace_to_name(file_ns)):
                return False
            if opts.package_path:
                paths.append(match.package_path)
            elif opts.generator_path:
                paths.append(os.path.dirname(os.path.dirname(match.file_path)))
            else:
                paths.append(match.file_path)
            return opts.single_result

        package_lookup.sync(opts, visit)

        if opts.single_result:
            return paths[0] if paths else None
        return paths
