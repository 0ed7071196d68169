"""Tests for working tree traversal."""

import os
from pathlib import Path

import pytest

from fim_monitor.core import EntryKind, WalkEntry
from fim_monitor.ignore import IgnoreSpec
from fim_monitor.walker import iter_files, walk


@pytest.fixture
def tree(write_file, tmp_path):
    """A small tree with nesting and a store directory."""
    write_file("top.txt", "top")
    write_file("a/one.txt", "1")
    write_file("a/b/two.txt", "2")
    write_file("c/three.txt", "3")
    write_file(".fim/0123456789abcdef0123456789abcdef", "1 1 x")
    (tmp_path / "empty").mkdir()
    return tmp_path.resolve()


class TestWalk:
    """Test the tree walker."""

    def test_yields_all_regular_files(self, tree):
        files = set(iter_files(tree))

        assert files == {
            tree / "top.txt",
            tree / "a" / "one.txt",
            tree / "a" / "b" / "two.txt",
            tree / "c" / "three.txt",
        }

    def test_yields_subdirectories(self, tree):
        dirs = {e.path for e in walk(tree) if e.kind == EntryKind.DIRECTORY}

        assert dirs == {tree / "a", tree / "a" / "b", tree / "c", tree / "empty"}

    def test_skips_store_directory(self, tree):
        paths = [e.path for e in walk(tree)]
        assert all(".fim" not in p.parts for p in paths)

    def test_skips_nested_store_directory(self, tree, write_file):
        write_file("a/.fim/record", "x")
        assert all(".fim" not in p.parts for p in iter_files(tree))

    def test_custom_store_name(self, tree, write_file):
        write_file("a/.other/record", "x")
        files = set(iter_files(tree, store_name=".other"))

        assert tree / ".fim" / "0123456789abcdef0123456789abcdef" in files
        assert tree / "a" / ".other" / "record" not in files

    def test_parents_before_children(self, tree):
        entries = list(walk(tree))
        position = {e.path: i for i, e in enumerate(entries)}

        for entry in entries:
            parent = entry.path.parent
            if parent != tree:
                assert position[parent] < position[entry.path]

    def test_subtree_is_contiguous(self, tree):
        """Depth-first: a directory's contents follow it without interleaving."""
        paths = [e.path for e in walk(tree)]
        start = paths.index(tree / "a")
        inside = [p for p in paths if tree / "a" in p.parents]

        assert paths[start + 1:start + 1 + len(inside)] == inside

    def test_file_root_is_singleton(self, tree):
        entries = list(walk(tree / "a" / "one.txt"))
        assert entries == [WalkEntry(tree / "a" / "one.txt", EntryKind.FILE)]

    def test_each_call_is_a_fresh_traversal(self, tree, write_file):
        first = set(iter_files(tree))
        write_file("a/new.txt", "new")
        second = set(iter_files(tree))

        assert second - first == {tree / "a" / "new.txt"}

    def test_is_lazy(self, tree):
        gen = walk(tree)
        assert next(gen).path.parent == tree

    def test_symlinks_are_skipped(self, tree):
        try:
            os.symlink(tree / "top.txt", tree / "link.txt")
            os.symlink(tree / "a", tree / "link_dir")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        paths = {e.path for e in walk(tree)}

        assert tree / "link.txt" not in paths
        assert tree / "link_dir" not in paths
        assert tree / "link_dir" / "one.txt" not in paths

    def test_missing_root_reported(self, tmp_path):
        errors = []
        entries = list(walk(tmp_path / "nope", on_error=errors.append))

        assert entries == []
        assert len(errors) == 1
        assert errors[0].path == tmp_path / "nope"

    def test_store_root_is_not_walked(self, tree):
        errors = []
        entries = list(walk(tree / ".fim", on_error=errors.append))

        assert entries == []
        assert [e.path for e in errors] == [tree / ".fim"]
        assert "manifest store" in str(errors[0])

    def test_unreadable_directory_reported_and_siblings_walked(self, tree, monkeypatch):
        real_scandir = os.scandir

        def fake_scandir(path):
            if Path(path).name == "a":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)
        errors = []

        files = set(iter_files(tree, on_error=errors.append))

        assert files == {tree / "top.txt", tree / "c" / "three.txt"}
        assert [e.path for e in errors] == [tree / "a"]
        assert "Permission denied" in str(errors[0])

    def test_ignore_spec_excludes_entries(self, tree, write_file):
        write_file(".fimignore", "*.log\nc/\n")
        write_file("a/debug.log", "noise")
        spec = IgnoreSpec(tree)

        files = set(iter_files(tree, ignore=spec))

        assert tree / "a" / "debug.log" not in files
        assert tree / "c" / "three.txt" not in files
        assert tree / "a" / "one.txt" in files
        assert tree / ".fimignore" in files
