"""cogenv registry: package discovery, registration and the generator store.

Usage::

    from cogenv.registry import PackageLookup

    lookup = PackageLookup()
    packages = lookup.find_packages_in(lookup.get_npm_paths(), "gen-*")
"""

from __future__ import annotations

from cogenv.registry.options import GeneratorLookupOptions, LookupOptions, PackageLookupOptions
from cogenv.registry.resolver import AliasRule, Resolver, default_file_patterns
from cogenv.registry.scanner import PackageLookup
from cogenv.registry.store import Store
from cogenv.registry.types import DiscoveredEntry, PackageMatch, RegistryEntry

__all__ = [
    "AliasRule",
    "DiscoveredEntry",
    "GeneratorLookupOptions",
    "LookupOptions",
    "PackageLookup",
    "PackageLookupOptions",
    "PackageMatch",
    "RegistryEntry",
    "Resolver",
    "Store",
    "default_file_patterns",
]
