"""Tests for glob_paths()."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from cogenv.utils.pattern import glob_paths

@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for rel in ("a/x.toml", "b/x.toml", "b/c/x.toml", ".hidden/x.toml", "top.toml"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
    return tmp_path

class TestGlobPaths:
    def test_results_are_absolute_and_sorted(self, tree: Path) -> None:
        assert glob_paths(tree, "*/x.toml") == [str(tree / "a" / "x.toml"), str(tree / "b" / "x.toml")]

    def test_hidden_entries_skipped_unless_named(self, tree: Path) -> None:
        assert str(tree / ".hidden" / "x.toml") not in glob_paths(tree, "**/x.toml")
        assert glob_paths(tree, ".hidden/*.toml") == [str(tree / ".hidden" / "x.toml")]

    def test_max_depth(self, tree: Path) -> None:
        assert glob_paths(tree, "**/*.toml", max_depth=0) == [str(tree / "top.toml")]
        assert len(glob_paths(tree, "**/*.toml", max_depth=1)) == 3

    def test_only_directories(self, tree: Path) -> None:
        assert glob_paths(tree, "*", only_directories=True) == [str(tree / "a"), str(tree / "b")]

    def test_pattern_order_and_dedupe(self, tree: Path) -> None:
        result = glob_paths(tree, ["b/*.toml", "*/x.toml"])
        assert result == [str(tree / "b" / "x.toml"), str(tree / "a" / "x.toml")]

    def test_patterns_are_normalized(self, tree: Path) -> None:
        assert glob_paths(tree, ["./a\\x.toml", "/top.toml", ".", ""]) == [
            str(tree / "a" / "x.toml"),
            str(tree / "top.toml"),
        ]

    def test_relative_cwd(self, tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tree)
        assert glob_paths("a", "*.toml") == [os.path.join(str(tree), "a", "x.toml")]

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            glob_paths(tmp_path / "missing", "*")

    def test_unreadable_root_raises(self, tree: Path) -> None:
        with patch("cogenv.utils.pattern.os.scandir", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                glob_paths(tree, "*")


class TestBoundedWalk:
    @pytest.fixture
    def deep_tree(self, tmp_path: Path) -> Path:
        for rel in ("a/b/c/d/x.toml", "node_modules/dep/lib/x.toml", ".git/objects/x.toml", "a/x.toml"):
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        return tmp_path

    def listed_dirs(self, root: Path, pattern: str, max_depth: int | None) -> tuple[list[str], list[Path]]:
        with patch("cogenv.utils.pattern.os.scandir", wraps=os.scandir) as scandir:
            found = glob_paths(root, pattern, max_depth=max_depth)
        return found, [Path(os.fspath(call.args[0])).relative_to(root) for call in scandir.call_args_list]

    def test_folders_below_max_depth_are_never_listed(self, deep_tree: Path) -> None:
        found, listed = self.listed_dirs(deep_tree, "**/*.toml", max_depth=1)
        assert found == [str(deep_tree / "a" / "x.toml")]
        assert all(len(rel.parts) <= 1 for rel in listed)
        assert Path("a", "b") not in listed

    def test_hidden_folders_are_not_entered(self, deep_tree: Path) -> None:
        _, listed = self.listed_dirs(deep_tree, "**/*.toml", max_depth=None)
        assert not any(rel.parts and rel.parts[0] == ".git" for rel in listed)

    def test_literal_components_do_not_list_folders(self, deep_tree: Path) -> None:
        found, listed = self.listed_dirs(deep_tree, "a/b/c/d/x.toml", max_depth=None)
        assert found == [str(deep_tree / "a" / "b" / "c" / "d" / "x.toml")]
        # Only the readability check of the root itself.
        assert listed == [Path(".")]

    def test_literal_components_respect_max_depth(self, deep_tree: Path) -> None:
        assert glob_paths(deep_tree, "a/b/c/d/x.toml", max_depth=2) == []

    def test_recursive_pattern_matches_zero_folders(self, deep_tree: Path) -> None:
        assert glob_paths(deep_tree, "a/**/x.toml") == [
            str(deep_tree / "a" / "b" / "c" / "d" / "x.toml"),
            str(deep_tree / "a" / "x.toml"),
        ]
