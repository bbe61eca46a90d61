"""Glob matching of packages and entry files below a directory."""

from __future__ import annotations

import fnmatch
import logging
import os
import posixpath
import re
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)

__all__ = ["glob_paths"]

_MAGIC_RE = re.compile(r"[*?[]")

RECURSIVE = "**"


def _normalize_pattern(pattern: str) -> str:
    pattern = posixpath.normpath(pattern.replace("\\", "/"))
    return pattern.lstrip("/")


def _is_dir(entry: os.DirEntry[str], follow_symlinks: bool = True) -> bool:
    try:
        return entry.is_dir(follow_symlinks=follow_symlinks)
    except OSError:
        return False


def _scan(directory: str) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError as e:
        logger.debug("Could not list %s: %s", directory, e)
        return []


def _expand(
    root: str,
    relative: tuple[str, ...],
    parts: tuple[str, ...],
    max_depth: int | None,
) -> Iterator[tuple[str, ...]]:
    """Yield relative matches of ``parts`` below ``root/relative``.

    A directory is only listed while the matches it can produce stay within
    ``max_depth``, so deeper folders are never read.
    """
    if not parts:
        if relative:
            yield relative
        return
    if max_depth is not None and len(relative) > max_depth:
        return

    head, rest = parts[0], parts[1:]
    directory = os.path.join(root, *relative)

    if head == RECURSIVE:
        yield from _expand(root, relative, rest, max_depth)
        for entry in _scan(directory):
            # Symlinked folders are not followed recursively.
            if entry.name.startswith(".") or not _is_dir(entry, follow_symlinks=False):
                continue
            yield from _expand(root, (*relative, entry.name), parts, max_depth)
        return

    if not _MAGIC_RE.search(head):
        if os.path.exists(os.path.join(directory, head)):
            yield from _expand(root, (*relative, head), rest, max_depth)
        return

    allow_hidden = head.startswith(".")
    for entry in _scan(directory):
        if entry.name.startswith(".") and not allow_hidden:
            continue
        if not fnmatch.fnmatchcase(entry.name, head):
            continue
        if rest and not _is_dir(entry):
            continue
        yield from _expand(root, (*relative, entry.name), rest, max_depth)


def glob_paths(
    cwd: str | os.PathLike[str],
    patterns: str | Iterable[str],
    only_directories: bool = False,
    max_depth: int | None = None,
) -> list[str]:
    """Match ``patterns`` below ``cwd`` and return absolute paths.

    Symlinks are kept as-is. Results keep pattern order, each pattern's
    matches are sorted and duplicates are dropped. Hidden entries only match
    when the pattern spells out the dot component, ``**`` never enters them.
    ``max_depth`` of 0 limits the walk to direct children of ``cwd``.

    Raises:
        OSError: If ``cwd`` cannot be listed.
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    root = os.path.abspath(cwd)
    # Nested folders that cannot be read are skipped, the root must be readable.
    with os.scandir(root):
        pass

    seen: set[str] = set()
    results: list[str] = []
    for pattern in patterns:
        normalized = _normalize_pattern(pattern)
        if not normalized or normalized == ".":
            continue
        for relative in sorted(_expand(root, (), tuple(normalized.split("/")), max_depth)):
            path = os.path.join(root, *relative)
            if only_directories and not os.path.isdir(path):
                continue
            if path in seen:
                continue
            seen.add(path)
            results.append(path)
    return results
