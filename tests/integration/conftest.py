"""Shared fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cogenv.paths import PathResolver
from tree_helpers import FakeCommands, make_generator


@pytest.fixture
def installed_tree(tmp_path: Path) -> dict[str, Path]:
    """A project with local packages plus a global root announced by ``npm root -g``.

    Layout::

        project/node_modules/gen-dummy/generators/{app,coge}
        project/node_modules/@dummyscope/gen-package/generators/app
        global/node_modules/gen-jquery/generators/app
        global/node_modules/gen-dummy/generators/app   (shadowed by the local one)
    """
    project = tmp_path / "project"
    local = project / "node_modules"
    global_root = tmp_path / "global" / "node_modules"

    make_generator(local, "gen-dummy", "app")
    make_generator(local, "gen-dummy", "coge")
    make_generator(local, "@dummyscope/gen-package", "app")
    make_generator(global_root, "gen-jquery", "app")
    make_generator(global_root, "gen-dummy", "app")
    return {"project": project, "local": local, "global": global_root}


@pytest.fixture
def tree_resolver(installed_tree: dict[str, Path]) -> PathResolver:
    commands = FakeCommands({("npm", "root", "-g"): str(installed_tree["global"])})
    return PathResolver(
        cwd=installed_tree["project"],
        env={},
        platform="linux",
        run_command=commands,
        argv0="",
    )
