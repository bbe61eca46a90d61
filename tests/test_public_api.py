"""Tests for the cogenv public API surface.

Verifies that all expected names are importable from the top-level
``cogenv`` package and that ``__all__`` is comprehensive.
"""

import cogenv
import cogenv.registry


class TestPublicAPIImports:
    """Every public component must be importable from ``import cogenv``."""

    def test_environment_importable(self):
        from cogenv import Environment

        assert Environment is not None

    def test_namespace_helpers_importable(self):
        from cogenv import Namespace, parse_namespace, require_namespace, to_namespace

        assert parse_namespace("foo:app") == require_namespace("foo:app")
        assert to_namespace("foo") is not None
        assert Namespace is not None

    def test_errors_importable(self):
        from cogenv import AliasLoopError, CogeError, ConfigError

        assert issubclass(AliasLoopError, ConfigError)
        assert issubclass(ConfigError, CogeError)

    def test_version(self):
        assert cogenv.__version__ == "0.1.0"


class TestAllExports:
    def test_every_name_in_all_exists(self):
        for name in cogenv.__all__:
            assert hasattr(cogenv, name), name

    def test_registry_all_exists(self):
        for name in cogenv.registry.__all__:
            assert hasattr(cogenv.registry, name), name

    def test_no_duplicates(self):
        assert len(cogenv.__all__) == len(set(cogenv.__all__))
