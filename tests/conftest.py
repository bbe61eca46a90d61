"""Shared test fixtures for the cogenv test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from cogenv.environment import Environment
from cogenv.paths import PathResolver
from tree_helpers import FakeCommands


@pytest.fixture
def fake_commands() -> FakeCommands:
    return FakeCommands()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project directory with an empty ``node_modules``."""
    root = tmp_path / "project"
    (root / "node_modules").mkdir(parents=True)
    return root


@pytest.fixture
def path_resolver(project: Path, fake_commands: FakeCommands) -> PathResolver:
    """Resolver rooted at ``project`` with no environment and no real commands."""
    return PathResolver(cwd=project, env={}, platform="linux", run_command=fake_commands, argv0="")


@pytest.fixture
def env(project: Path, path_resolver: PathResolver) -> Environment:
    """Environment rooted at ``project``; nothing is registered yet."""
    return Environment(cwd=project, path_resolver=path_resolver)
