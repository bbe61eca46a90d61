"""cogenv - generator discovery, namespacing and registry layer."""

from __future__ import annotations

# Core
from cogenv.environment import Environment
from cogenv.paths import PathResolver
from cogenv.registry import (
    DiscoveredEntry,
    GeneratorLookupOptions,
    LookupOptions,
    PackageLookup,
    RegistryEntry,
    Store,
)

# Namespaces
from cogenv.namespace import (
    Namespace,
    NamespaceFlag,
    is_namespace,
    parse_namespace,
    require_namespace,
    to_namespace,
)
from cogenv.naming import generator_hint, namespace_from_path, namespace_to_name

# Config
from cogenv.config import Config

# Console
from cogenv.console import StatusKind, StatusLogger

# Errors
from cogenv.errors import (
    AliasLoopError,
    CogeError,
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    InvalidInputError,
    MissingNamespaceError,
    NamespaceSyntaxError,
    RegistrationError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Environment",
    "PathResolver",
    "PackageLookup",
    "Store",
    # Registry types
    "RegistryEntry",
    "DiscoveredEntry",
    "LookupOptions",
    "GeneratorLookupOptions",
    # Namespaces
    "Namespace",
    "NamespaceFlag",
    "parse_namespace",
    "to_namespace",
    "require_namespace",
    "is_namespace",
    "namespace_from_path",
    "namespace_to_name",
    "generator_hint",
    # Config
    "Config",
    # Console
    "StatusKind",
    "StatusLogger",
    # Errors
    "ErrorCodes",
    "CogeError",
    "ConfigError",
    "ConfigNotFoundError",
    "AliasLoopError",
    "NamespaceSyntaxError",
    "MissingNamespaceError",
    "RegistrationError",
    "InvalidInputError",
]
