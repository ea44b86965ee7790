"""Tests for gls.platform.files module."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from gls.platform.files import is_empty_dir, is_subpath, remove_tree


class TestIsSubpath:
    def test_child(self, tmp_path: Path) -> None:
        assert is_subpath(tmp_path, tmp_path / "a" / "b")

    def test_self_is_not_a_subpath(self, tmp_path: Path) -> None:
        assert not is_subpath(tmp_path, tmp_path)

    def test_parent_is_not_a_subpath(self, tmp_path: Path) -> None:
        assert not is_subpath(tmp_path / "a", tmp_path)

    def test_dotdot_escape(self, tmp_path: Path) -> None:
        (tmp_path / "root").mkdir()
        assert not is_subpath(tmp_path / "root", tmp_path / "root" / ".." / "other")

    def test_sibling_with_common_prefix(self, tmp_path: Path) -> None:
        assert not is_subpath(tmp_path / "proj", tmp_path / "project2")

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlink_escape(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        (root / "link").symlink_to(outside)
        assert not is_subpath(root, root / "link")


class TestIsEmptyDir:
    def test_empty(self, tmp_path: Path) -> None:
        assert is_empty_dir(tmp_path)

    def test_not_empty(self, tmp_path: Path) -> None:
        (tmp_path / "f").write_text("x", encoding="utf-8")
        assert not is_empty_dir(tmp_path)

    def test_missing_or_file(self, tmp_path: Path) -> None:
        (tmp_path / "f").write_text("x", encoding="utf-8")
        assert not is_empty_dir(tmp_path / "missing")
        assert not is_empty_dir(tmp_path / "f")


class TestRemoveTree:
    def test_removes_nested_tree(self, tmp_path: Path) -> None:
        target = tmp_path / "t"
        (target / "a" / "b").mkdir(parents=True)
        (target / "a" / "b" / "f.txt").write_text("x", encoding="utf-8")
        remove_tree(target)
        assert not target.exists()

    def test_removes_read_only_file(self, tmp_path: Path) -> None:
        target = tmp_path / "t"
        target.mkdir()
        f = target / "ro.txt"
        f.write_text("x", encoding="utf-8")
        f.chmod(stat.S_IREAD)
        remove_tree(target)
        assert not target.exists()
