"""Tests for file stores"""

import os

import pytest

from sheafy.domain.errors import FileIOError
from sheafy.infrastructure.filestore.base import EntryKind
from sheafy.infrastructure.filestore.local import LocalFileStore
from sheafy.infrastructure.filestore.memory import MemoryFileStore


class TestLocalFileStore:
    """Tests for LocalFileStore"""

    def test_list_dir_kinds(self, tmp_path):
        """Test listing reports files, directories and symlinks"""
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.txt").write_text("a", encoding="utf-8")
        os.symlink(tmp_path / "sub", tmp_path / "link")

        kinds = {e.name: e.kind for e in LocalFileStore(tmp_path).list_dir("")}

        assert kinds == {
            "sub": EntryKind.DIRECTORY,
            "a.txt": EntryKind.FILE,
            "link": EntryKind.SYMLINK,
        }

    def test_read_write_nested(self, tmp_path):
        """Test writing and reading with forward-slash paths"""
        store = LocalFileStore(tmp_path)
        store.make_dirs("a/b")
        store.write_bytes("a/b/c.txt", b"data")

        assert store.read_bytes("a/b/c.txt") == b"data"
        assert store.is_file("a/b/c.txt")
        assert store.resolve("a/b/c.txt") == str(tmp_path.resolve() / "a" / "b" / "c.txt")

    def test_read_missing_file(self, tmp_path):
        """Test missing files raise FileIOError with the path"""
        with pytest.raises(FileIOError, match="missing.txt") as exc_info:
            LocalFileStore(tmp_path).read_bytes("missing.txt")
        assert exc_info.value.operation == "read"

    def test_list_missing_directory(self, tmp_path):
        """Test listing a missing directory raises FileIOError"""
        with pytest.raises(FileIOError):
            LocalFileStore(tmp_path).list_dir("nope")

    def test_make_dirs_over_file(self, tmp_path):
        """Test creating a directory where a file exists fails"""
        (tmp_path / "file").write_text("x", encoding="utf-8")

        with pytest.raises(FileIOError, match="create directory"):
            LocalFileStore(tmp_path).make_dirs("file/sub")


class TestMemoryFileStore:
    """Tests for MemoryFileStore"""

    def test_parents_are_implied(self):
        """Test directories exist for every file's parents"""
        store = MemoryFileStore({"a/b/c.txt": "c"})

        assert {e.name for e in store.list_dir("")} == {"a"}
        assert [e.name for e in store.list_dir("a")] == ["b"]
        assert store.list_dir("a/b")[0].kind == EntryKind.FILE

    def test_write_requires_parent(self):
        """Test writing without the parent directory fails"""
        with pytest.raises(FileIOError, match="No such directory"):
            MemoryFileStore().write_bytes("missing/a.txt", b"")

    def test_listed_records_calls(self):
        """Test listed tracks traversal"""
        store = MemoryFileStore({"a/b.txt": ""})
        store.list_dir("")
        store.list_dir("a")

        assert store.listed == ["", "a"]
