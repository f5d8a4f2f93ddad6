"""Base file store interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List


class EntryKind(str, Enum):
    """Kind of a directory entry"""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing"""

    name: str
    kind: EntryKind


def join_path(parent: str, name: str) -> str:
    """Join a relative directory path and an entry name with '/'"""
    return f"{parent}/{name}" if parent else name


class FileStore(ABC):
    """Abstract tree of files rooted at one directory

    All paths are relative to the root and use forward slashes.
    The root itself is the empty string.
    """

    @abstractmethod
    def list_dir(self, path: str) -> List[DirEntry]:
        """List a directory (order unspecified)

        Raises:
            FileIOError: If the directory cannot be listed
        """
        pass

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Read a regular file

        Raises:
            FileIOError: If the file cannot be read
        """
        pass

    @abstractmethod
    def write_bytes(self, path: str, data: bytes) -> None:
        """Create or overwrite a regular file

        The parent directory must already exist.

        Raises:
            FileIOError: If the file cannot be written
        """
        pass

    @abstractmethod
    def make_dirs(self, path: str) -> None:
        """Create a directory and any missing parents

        Raises:
            FileIOError: If a directory cannot be created
        """
        pass

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """Check whether a regular file exists at path"""
        pass

    @abstractmethod
    def resolve(self, path: str) -> str:
        """Return a displayable absolute location for path"""
        pass
