"""In-memory file store for testing and dry runs"""

from typing import Dict, Iterable, List, Optional

from sheafy.domain.errors import FileIOError
from sheafy.infrastructure.filestore.base import DirEntry, EntryKind, FileStore, join_path


class MemoryFileStore(FileStore):
    """File store that keeps everything in dictionaries"""

    def __init__(
        self,
        files: Optional[Dict[str, bytes]] = None,
        symlinks: Iterable[str] = (),
        read_only: Iterable[str] = (),
    ):
        """Initialize memory store

        Args:
            files: Mapping of relative path to content; str values are UTF-8 encoded
            symlinks: Paths that exist as symbolic links
            read_only: Paths (files or directories) that reject writes
        """
        self.files: Dict[str, bytes] = {}
        self.dirs = {""}
        self.symlinks = set(symlinks)
        self.read_only = set(read_only)
        self.listed: List[str] = []  # Every path passed to list_dir, in order

        for path, content in (files or {}).items():
            if isinstance(content, str):
                content = content.encode("utf-8")
            self._add_parents(path)
            self.files[path] = content
        for path in self.symlinks:
            self._add_parents(path)

    def _add_parents(self, path: str) -> None:
        parts = path.split("/")[:-1]
        for i in range(1, len(parts) + 1):
            self.dirs.add("/".join(parts[:i]))

    def _is_read_only(self, path: str) -> bool:
        return any(path == p or path.startswith(p + "/") for p in self.read_only)

    def list_dir(self, path: str) -> List[DirEntry]:
        if path not in self.dirs:
            raise FileIOError(path or ".", "list", "No such directory")
        self.listed.append(path)

        entries = {}
        for candidates, kind in (
            (self.dirs, EntryKind.DIRECTORY),
            (self.files, EntryKind.FILE),
            (self.symlinks, EntryKind.SYMLINK),
        ):
            for candidate in candidates:
                if not candidate:
                    continue
                parent, _, name = candidate.rpartition("/")
                if parent == path:
                    entries[name] = DirEntry(name=name, kind=kind)
        return list(entries.values())

    def read_bytes(self, path: str) -> bytes:
        if path not in self.files:
            raise FileIOError(path, "read", "No such file")
        return self.files[path]

    def write_bytes(self, path: str, data: bytes) -> None:
        parent = path.rpartition("/")[0]
        if parent not in self.dirs:
            raise FileIOError(path, "write", "No such directory")
        if path in self.dirs:
            raise FileIOError(path, "write", "Is a directory")
        if self._is_read_only(path):
            raise FileIOError(path, "write", "Permission denied")
        self.files[path] = data

    def make_dirs(self, path: str) -> None:
        if not path:
            return
        parts = path.split("/")
        for i in range(1, len(parts) + 1):
            current = "/".join(parts[:i])
            if current in self.dirs:
                continue
            if current in self.files:
                raise FileIOError(current, "create directory", "Not a directory")
            if self._is_read_only(current):
                raise FileIOError(current, "create directory", "Permission denied")
            self.dirs.add(current)

    def is_file(self, path: str) -> bool:
        return path in self.files

    def resolve(self, path: str) -> str:
        return join_path("memory:/", path)

    def read_text(self, path: str) -> str:
        """Convenience accessor for tests"""
        return self.read_bytes(path).decode("utf-8")
