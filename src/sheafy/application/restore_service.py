"""Service for restoring files from a bundle document"""

import logging
from pathlib import Path
from typing import Optional

from sheafy.domain.errors import FileIOError
from sheafy.domain.models.results import RestoreResult
from sheafy.infrastructure.document.decoder import DocumentDecoder
from sheafy.infrastructure.filestore.base import FileStore
from sheafy.infrastructure.restore_writer import RestoreWriter

logger = logging.getLogger(__name__)


class RestoreService:
    """Decode a bundle and write its files under a target directory"""

    def __init__(self, store: FileStore, decoder: Optional[DocumentDecoder] = None):
        """Initialize restore service

        Args:
            store: File store rooted at the restore target
            decoder: Document decoder (creates default if None)
        """
        self.store = store
        self.decoder = decoder or DocumentDecoder()
        self.writer = RestoreWriter(store)

    def restore_text(self, text: str) -> RestoreResult:
        """Restore files from document text

        The whole document is decoded before anything is written.

        Args:
            text: Bundle document

        Returns:
            RestoreResult with per-entry outcomes

        Raises:
            ParseError: If the document is malformed
        """
        document = self.decoder.decode(text)
        if not document.entries:
            logger.warning("No file blocks found in bundle. No files restored.")
            return RestoreResult()
        return self.writer.restore(document.entries)

    def restore_file(self, input_path: Path) -> RestoreResult:
        """Restore files from a bundle file on disk

        Args:
            input_path: Bundle file to read

        Returns:
            RestoreResult with per-entry outcomes

        Raises:
            FileIOError: If the bundle cannot be read or is not UTF-8
            ParseError: If the bundle is malformed
        """
        logger.info(f"Restoring from {input_path}")
        try:
            data = input_path.read_bytes()
        except OSError as e:
            raise FileIOError(str(input_path), "read", e.strerror or str(e)) from e

        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileIOError(str(input_path), "decode", f"not valid UTF-8 (byte {e.start})") from e
        return self.restore_text(text)
