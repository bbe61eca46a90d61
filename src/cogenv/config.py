"""Configuration loading and validation."""

from __future__ import annotations

import copy
import logging
import os
from typing import Any

import yaml

from cogenv.errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["Config", "DEFAULTS"]

DEFAULTS: dict[str, Any] = {
    "lookup": {
        "lookups": [".", "generators", "lib/generators"],
        "entry_filename": "template.toml",
        "package_patterns": ["gen-*"],
        "max_depth": None,
    },
    "paths": {
        "filter_paths": False,
        "extra_roots": [],
        "ask_package_managers": True,
        "command_timeout": 5.0,
    },
    "aliases": [],
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration accessor with dot-path key support.

    Values not present in ``data`` fall back to :data:`DEFAULTS`.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = _merge(copy.deepcopy(DEFAULTS), data or {})

    @classmethod
    def load(cls, yaml_path: str | os.PathLike[str]) -> Config:
        """Load configuration from a YAML file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the YAML is invalid or is not a mapping.
        """
        path = os.fspath(yaml_path)
        if not os.path.isfile(path):
            raise ConfigNotFoundError(config_path=path)

        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        aliases = data.get("aliases", [])
        if not isinstance(aliases, list):
            raise ConfigError(f"'aliases' must be a list, got {type(aliases).__name__}")
        for i, rule in enumerate(aliases):
            if not isinstance(rule, dict) or "match" not in rule or "value" not in rule:
                raise ConfigError(f"Alias {i} must be a mapping with 'match' and 'value' keys")

        logger.debug("Loaded configuration from %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current
