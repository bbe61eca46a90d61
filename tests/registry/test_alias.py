"""Tests for alias rules on the resolver."""

from __future__ import annotations

import re

import pytest

from cogenv.config import Config
from cogenv.environment import Environment
from cogenv.errors import AliasLoopError, InvalidInputError
from cogenv.paths import PathResolver


class TestAliasRules:
    def test_default_app_alias(self, env: Environment) -> None:
        assert env.alias("foo") == "foo:app"
        assert env.alias("foo:bar") == "foo:bar"

    def test_rules_apply_most_recent_first(self, env: Environment) -> None:
        env.alias(r"([a-zA-Z0-9:*]+)", r"gen-\1")
        assert env.alias("foo") == "gen-foo:app"
        assert env.alias("foo:bar") == "gen-foo:bar"

    def test_setter_returns_self(self, env: Environment) -> None:
        assert env.alias("old", "new") is env

    def test_string_match_is_anchored(self, env: Environment) -> None:
        env.alias("foo:app", "bar:app")
        assert env.alias("foo:app") == "bar:app"
        assert env.alias("xfoo:appx") == "xfoo:appx"

    def test_compiled_pattern_used_as_given(self, env: Environment) -> None:
        env.alias(re.compile(r"^old-"), "new-")
        assert env.alias("old-thing:app") == "new-thing:app"

    def test_unmatched_input_is_returned_unchanged(self, env: Environment) -> None:
        env.alias("foo:app", "bar:app")
        assert env.alias("baz:model") == "baz:model"

    def test_non_converging_rules_raise(self, env: Environment) -> None:
        env.alias(r"(.+):app", r"\1:app:app")
        with pytest.raises(AliasLoopError) as exc_info:
            env.alias("foo:app")
        assert exc_info.value.value == "foo:app"
        assert exc_info.value.code == "ALIAS_LOOP"

    def test_empty_match_rejected(self, env: Environment) -> None:
        with pytest.raises(InvalidInputError):
            env.alias("", "x")

    def test_non_string_lookup_rejected(self, env: Environment) -> None:
        with pytest.raises(InvalidInputError, match="Only strings"):
            env.alias(re.compile("foo"))


class TestAliasLookups:
    def test_get_follows_alias(self, env: Environment) -> None:
        env.register("/pkgs/gen-dummy/generators/app/template.toml", "dummy:app")
        entry = env.get("dummy")
        assert entry is not None
        assert entry.namespace == "dummy:app"

    def test_package_paths_follow_alias(self, env: Environment) -> None:
        env.register("/pkgs/gen-real/app/template.toml", "real:app", package_path="/pkgs/gen-real")
        env.alias("legacy", "real")
        assert env.get_package_paths("legacy") == ["/pkgs/gen-real"]

    def test_aliases_from_config(self, path_resolver: PathResolver) -> None:
        config = Config({"aliases": [{"match": "gen-(.*)", "value": r"\1"}]})
        env = Environment(config=config, path_resolver=path_resolver)
        assert env.alias("gen-foo") == "foo:app"
