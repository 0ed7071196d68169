"""Shared test fixtures and utilities."""

import os
from pathlib import Path

import pytest

from fim_monitor.context import RepoContext


@pytest.fixture
def repo(tmp_path, monkeypatch):
    """Create an initialized repository in tmp_path and chdir into it."""
    monkeypatch.chdir(tmp_path)
    return RepoContext.init(tmp_path)


@pytest.fixture
def store(repo):
    """Manifest store of the initialized repository."""
    return repo.store


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content: str = "test content"):
        file_path = tmp_path.resolve() / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def test_files(write_file, tmp_path):
    """Create a small working tree in tmp_path."""
    def make_files():
        return {
            "file1.txt": write_file("file1.txt", "content1"),
            "file2.txt": write_file("file2.txt", "content2"),
            "src/main.py": write_file("src/main.py", "print('hello')"),
            "data/data.csv": write_file("data/data.csv", "a,b,c\n1,2,3"),
        }
    return make_files


def set_mtime(path: Path, mtime: float) -> None:
    """Set a file's mtime, keeping its atime."""
    st = path.stat()
    os.utime(path, (st.st_atime, mtime))


def snapshot_store(store_dir: Path) -> dict:
    """Map record name -> content for every record in a store."""
    return {
        p.name: p.read_text()
        for p in store_dir.iterdir()
        if p.is_file() and len(p.name) == 32
    }
