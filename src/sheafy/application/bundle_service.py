"""Service for bundling a working directory into one document"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from sheafy.domain.config import SheafyConfig
from sheafy.domain.errors import FileIOError
from sheafy.domain.models.bundle import BundleDocument
from sheafy.domain.models.results import BundleResult
from sheafy.infrastructure.document.encoder import DocumentEncoder
from sheafy.infrastructure.file_collector import FileCollector
from sheafy.infrastructure.filestore.base import FileStore
from sheafy.infrastructure.pattern_matcher import PatternMatcher

logger = logging.getLogger(__name__)


def relative_to_root(path: Path, root: Path) -> Optional[str]:
    """Forward-slash path of `path` inside `root`, or None if outside"""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return None


class BundleService:
    """Collect files, encode them and write the bundle"""

    def __init__(
        self,
        settings: SheafyConfig,
        store: FileStore,
        encoder: Optional[DocumentEncoder] = None,
    ):
        """Initialize bundle service

        Args:
            settings: Bundle settings (already validated)
            store: File store rooted at the working directory
            encoder: Document encoder (creates default if None)
        """
        self.settings = settings
        self.store = store
        self.encoder = encoder or DocumentEncoder()

    def build_matcher(self) -> PatternMatcher:
        """Compile configured ignore patterns

        Raises:
            ConfigError: If a pattern is malformed
        """
        return PatternMatcher.compile(self.settings.ignore_pattern_lines)

    def build_document(
        self,
        filters: Optional[List[str]] = None,
        use_gitignore: Optional[bool] = None,
        exclude_paths: Iterable[str] = (),
    ) -> BundleResult:
        """Collect and read the files that belong in the bundle

        Args:
            filters: Extension filters (overrides settings if given)
            use_gitignore: Respect .gitignore files (overrides settings if given)
            exclude_paths: Relative paths that must never be bundled

        Returns:
            BundleResult with collected entries and warnings

        Raises:
            ConfigError: If an ignore pattern is malformed
        """
        matcher = self.build_matcher()

        effective_filters = filters if filters is not None else self.settings.filters
        effective_gitignore = (
            use_gitignore if use_gitignore is not None else self.settings.use_gitignore
        )
        if effective_filters:
            logger.info(f"Using filters: {', '.join(effective_filters)}")
        if effective_gitignore:
            logger.info("Respecting .gitignore rules")
        else:
            logger.info("Ignoring .gitignore rules")

        collector = FileCollector(
            self.store,
            use_gitignore=effective_gitignore,
            include_hidden=self.settings.include_hidden,
            exclude_paths=exclude_paths,
        )
        collection = collector.collect_entries(matcher, effective_filters)
        return BundleResult(collection=collection)

    def encode(self, result: BundleResult) -> str:
        """Encode collected entries with the configured prologue and epilogue"""
        document = BundleDocument(
            entries=result.collection.entries,
            prologue=self.settings.prologue or "",
            epilogue=self.settings.epilogue or "",
        )
        return self.encoder.encode(document)

    def bundle(
        self,
        output_path: Path,
        filters: Optional[List[str]] = None,
        use_gitignore: Optional[bool] = None,
        extra_excludes: Iterable[str] = (),
    ) -> BundleResult:
        """Bundle the working directory into output_path

        Nothing is written when no file is selected.

        Args:
            output_path: Bundle file to create or overwrite
            filters: Extension filters (overrides settings if given)
            use_gitignore: Respect .gitignore files (overrides settings if given)
            extra_excludes: Relative paths to skip (the bundle itself, the config file)

        Returns:
            BundleResult

        Raises:
            ConfigError: If an ignore pattern is malformed
            EncodeError: If the prologue or epilogue cannot be encoded
            FileIOError: If the bundle cannot be written
        """
        result = self.build_document(filters, use_gitignore, extra_excludes)
        if result.is_empty:
            logger.info("No files found matching the specified filters and ignore rules")
            return result

        text = self.encode(result)
        logger.info(f"Writing bundle: {output_path}")
        try:
            output_path.write_bytes(text.encode("utf-8"))
        except OSError as e:
            raise FileIOError(str(output_path), "write", e.strerror or str(e)) from e

        result.output_path = str(output_path)
        logger.info(f"Bundled {len(result.paths)} files into {output_path}")
        return result
