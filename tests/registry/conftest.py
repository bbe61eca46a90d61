"""Shared pytest fixtures for the registry test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from cogenv.paths import PathResolver
from cogenv.registry.scanner import PackageLookup
from tree_helpers import make_generator


@pytest.fixture
def node_modules(project: Path) -> Path:
    """The project's local package root."""
    return project / "node_modules"


@pytest.fixture
def package_lookup(path_resolver: PathResolver) -> PackageLookup:
    return PackageLookup(path_resolver)


@pytest.fixture
def dummy_package(node_modules: Path) -> Path:
    """``gen-dummy`` with ``app`` and ``coge`` generators under ``generators/``."""
    make_generator(node_modules, "gen-dummy", "app")
    make_generator(node_modules, "gen-dummy", "coge")
    return node_modules / "gen-dummy"


@pytest.fixture
def scoped_package(node_modules: Path) -> Path:
    """``@dummyscope/gen-scoped`` with an ``app`` generator."""
    make_generator(node_modules, "@dummyscope/gen-scoped", "app")
    return node_modules / "@dummyscope" / "gen-scoped"
