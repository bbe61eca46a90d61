"""End-to-end discovery: search roots -> packages -> registration -> retrieval."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from cogenv.config import Config
from cogenv.environment import Environment
from cogenv.paths import PathResolver


class TestEndToEndLookup:
    def test_local_and_global_generators_are_registered(
        self, installed_tree: dict[str, Path], tree_resolver: PathResolver
    ) -> None:
        env = Environment(cwd=installed_tree["project"], path_resolver=tree_resolver)
        env.lookup()

        for namespace in ("dummy:app", "dummy:coge", "@dummyscope/package:app", "jquery:app"):
            assert env.get(namespace) is not None, namespace
        assert env.get("jquery").namespace == "jquery:app"

    def test_local_package_shadows_global(self, installed_tree: dict[str, Path], tree_resolver: PathResolver) -> None:
        env = Environment(cwd=installed_tree["project"], path_resolver=tree_resolver)
        env.lookup()

        local_pkg = str(installed_tree["local"] / "gen-dummy")
        global_pkg = str(installed_tree["global"] / "gen-dummy")
        assert env.get("dummy:app").resolved_path.startswith(os.path.realpath(local_pkg))
        assert env.get_package_paths("dummy") == [local_pkg, global_pkg]
        assert env.get_package_path("dummy") == local_pkg

    def test_local_only_ignores_global_root(self, installed_tree: dict[str, Path], tree_resolver: PathResolver) -> None:
        env = Environment(cwd=installed_tree["project"], path_resolver=tree_resolver)
        env.lookup(local_only=True)
        assert env.get("jquery:app") is None
        assert sorted(env.get_generator_names()) == ["@dummyscope/package", "dummy"]

    def test_two_roots_register_two_namespaces(self, tmp_path: Path, installed_tree: dict[str, Path]) -> None:
        env = Environment(cwd=installed_tree["project"], path_resolver=PathResolver(cwd=tmp_path, env={}, argv0=""))
        env.lookup(npm_paths=[str(installed_tree["global"])], package_patterns="gen-jquery")
        env.lookup(package_paths=[str(installed_tree["local"] / "@dummyscope" / "gen-package")])
        assert len(env.namespaces()) == 2

    def test_static_lookup_matches_registered_entry(
        self, installed_tree: dict[str, Path], tree_resolver: PathResolver
    ) -> None:
        env = Environment(cwd=installed_tree["project"], path_resolver=tree_resolver)
        env.lookup()
        found = Environment.lookup_generator("dummy:app", path_resolver=tree_resolver)
        assert os.path.realpath(found) == env.get("dummy:app").resolved_path

    def test_yaml_config_end_to_end(self, installed_tree: dict[str, Path], tree_resolver: PathResolver) -> None:
        config_path = installed_tree["project"] / "cogenv.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "lookup": {"package_patterns": ["gen-dummy"]},
                    "aliases": [{"match": "d", "value": "dummy"}],
                }
            )
        )
        env = Environment(config=Config.load(config_path), cwd=installed_tree["project"], path_resolver=tree_resolver)
        env.lookup(local_only=True)
        assert env.namespaces() == ["dummy:app", "dummy:coge"]
        assert env.get("d").namespace == "dummy:app"
