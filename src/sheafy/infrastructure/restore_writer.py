"""Writes decoded bundle entries into a file store"""

import logging
from typing import Iterable

from sheafy.domain.errors import FileIOError
from sheafy.domain.models.bundle import FileEntry
from sheafy.domain.models.results import EntryOutcome, RestoreResult
from sheafy.infrastructure.filestore.base import FileStore

logger = logging.getLogger(__name__)


class RestoreWriter:
    """Materialize entries at their relative paths

    Existing files are overwritten unconditionally. A failing entry does
    not stop the batch; every outcome is reported in the result.
    """

    def __init__(self, store: FileStore):
        """Initialize restore writer

        Args:
            store: File store rooted at the restore target directory
        """
        self.store = store

    def restore(self, entries: Iterable[FileEntry]) -> RestoreResult:
        """Write all entries

        Args:
            entries: Entries to write, in order

        Returns:
            RestoreResult with one outcome per entry
        """
        result = RestoreResult()
        for entry in entries:
            result.outcomes.append(self._write_entry(entry))

        if result.failed:
            logger.warning(f"Failed to restore {len(result.failed)} of {len(result.outcomes)} files")
        logger.info(f"Restored {result.count} files")
        return result

    def _write_entry(self, entry: FileEntry) -> EntryOutcome:
        parent = entry.path.rpartition("/")[0]
        try:
            self.store.make_dirs(parent)
            if self.store.is_file(entry.path):
                logger.debug(f"Overwriting {entry.path}")
            self.store.write_bytes(entry.path, entry.content.encode("utf-8"))
        except FileIOError as e:
            logger.error(f"Error restoring {entry.path}: {e}")
            return EntryOutcome(path=entry.path, error=str(e))

        logger.info(f"Restoring: {self.store.resolve(entry.path)}")
        return EntryOutcome(path=entry.path)
