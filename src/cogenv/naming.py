"""Deriving namespaces from filesystem paths."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Iterable

from cogenv.errors import MissingNamespaceError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_ENTRY_FILENAME",
    "DEFAULT_LOOKUPS",
    "GENERATOR_PREFIX",
    "generator_hint",
    "namespace_from_path",
    "namespace_to_name",
]

GENERATOR_PREFIX = "gen-"
DEFAULT_LOOKUPS = (".", "generators", "lib/generators")
DEFAULT_ENTRY_FILENAME = "template.toml"

_DEFAULT_FILE_RE = re.compile(r"/(?:coge|template|index|main)$")


def _to_posix(path: str) -> str:
    return path.replace("\\", "/")


def namespace_to_name(namespace: str) -> str:
    """Convert a generator namespace to its package name (``mocha:app`` -> ``mocha``)."""
    return namespace.split(":")[0]


def generator_hint(name: str) -> str:
    """Package directory name expected to provide ``name``."""
    if name.startswith("@") and "/" in name:
        scope, unscoped = name.split("/", 1)
        return f"{scope}/{GENERATOR_PREFIX}{unscoped}"
    return f"{GENERATOR_PREFIX}{name}"


def namespace_from_path(file_path: str, lookups: Iterable[str] | str | None = None) -> str:
    """Given a file path, figure out the relative namespace.

    Examples::

        namespace_from_path("backbone/all/index.js")              # backbone:all
        namespace_from_path("gen-backbone/model")                 # backbone:model
        namespace_from_path("backbone.js")                        # backbone
        namespace_from_path("gen-mocha/backbone/model/index.js")  # mocha:backbone:model
        namespace_from_path("@scope/gen-mocha/model/index.js")    # @scope/mocha:model

    Raises:
        MissingNamespaceError: If ``file_path`` is empty.
    """
    if not file_path:
        raise MissingNamespaceError()
    if isinstance(lookups, str):
        lookups = [lookups]
    lookups = list(lookups or [])

    ns = _to_posix(str(file_path))
    root, ext = posixpath.splitext(ns)
    if ext:
        ns = root
    ns = posixpath.normpath(ns)

    # Longest lookups first so ``lib/generators`` goes before ``generators``.
    ns_lookups = sorted(
        (posixpath.normpath(_to_posix(lookup)) for lookup in [*lookups, ".."]),
        key=len,
        reverse=True,
    )
    for lookup in ns_lookups:
        ns = re.sub(rf"(?:/|^){re.escape(lookup)}(?=/|$)", "", ns)

    folders = ns.split("/")
    scope_index = next((i for i in reversed(range(len(folders))) if folders[i].startswith("@")), None)
    scope = folders[scope_index] if scope_index is not None else None
    if scope_index is not None:
        # The scope folder is re-added as a prefix, drop it and anything above it.
        ns = "/" + "/".join(folders[scope_index + 1 :])

    ns = re.sub(rf".*{re.escape(GENERATOR_PREFIX)}", "", ns)
    ns = _DEFAULT_FILE_RE.sub("", ns)
    ns = ns.lstrip("/")
    ns = re.sub(r"/+", ":", ns)

    if scope:
        ns = f"{scope}/{ns}"

    logger.debug("Resolved namespace for %s: %s", file_path, ns)
    return ns
