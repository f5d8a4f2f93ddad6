"""File store backed by the local filesystem"""

import logging
import os
from pathlib import Path
from typing import List, Union

from sheafy.domain.errors import FileIOError
from sheafy.infrastructure.filestore.base import DirEntry, EntryKind, FileStore

logger = logging.getLogger(__name__)


class LocalFileStore(FileStore):
    """Reads and writes files under a directory on disk"""

    def __init__(self, root: Union[str, Path]):
        """Initialize local store

        Args:
            root: Directory all relative paths are resolved against
        """
        self.root = Path(root).resolve()

    def _full_path(self, path: str) -> Path:
        return self.root.joinpath(*path.split("/")) if path else self.root

    def list_dir(self, path: str) -> List[DirEntry]:
        entries = []
        try:
            with os.scandir(self._full_path(path)) as it:
                for item in it:
                    entries.append(DirEntry(name=item.name, kind=self._kind_of(item)))
        except OSError as e:
            raise FileIOError(path or ".", "list", e.strerror or str(e)) from e
        return entries

    def _kind_of(self, item: os.DirEntry) -> EntryKind:
        # Symlinks are reported as such, never followed
        if item.is_symlink():
            return EntryKind.SYMLINK
        if item.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if item.is_file(follow_symlinks=False):
            return EntryKind.FILE
        return EntryKind.OTHER

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._full_path(path).read_bytes()
        except OSError as e:
            raise FileIOError(path, "read", e.strerror or str(e)) from e

    def write_bytes(self, path: str, data: bytes) -> None:
        try:
            self._full_path(path).write_bytes(data)
        except OSError as e:
            raise FileIOError(path, "write", e.strerror or str(e)) from e

    def make_dirs(self, path: str) -> None:
        if not path:
            return
        full_path = self._full_path(path)
        if full_path.is_dir():
            return
        logger.debug(f"Creating directory: {full_path}")
        try:
            full_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileIOError(path, "create directory", e.strerror or str(e)) from e

    def is_file(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def resolve(self, path: str) -> str:
        return str(self._full_path(path))
