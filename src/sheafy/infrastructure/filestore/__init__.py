"""File stores"""

from sheafy.infrastructure.filestore.base import DirEntry, EntryKind, FileStore
from sheafy.infrastructure.filestore.local import LocalFileStore
from sheafy.infrastructure.filestore.memory import MemoryFileStore

__all__ = ["DirEntry", "EntryKind", "FileStore", "LocalFileStore", "MemoryFileStore"]
