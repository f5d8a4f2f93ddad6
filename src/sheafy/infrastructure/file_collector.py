"""File collection - walks a tree and selects the files to bundle"""

import logging
from pathlib import PurePosixPath
from typing import Iterable, List, NamedTuple, Optional

from sheafy.domain.errors import FileIOError
from sheafy.domain.models.bundle import FileEntry
from sheafy.domain.models.results import CollectionResult, CollectionWarning
from sheafy.infrastructure.filestore.base import EntryKind, FileStore, join_path
from sheafy.infrastructure.pattern_matcher import PatternMatcher, parse_rules

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"
ALWAYS_SKIPPED = {".git"}


class CollectedFile(NamedTuple):
    """A selected file"""

    relative_path: str
    absolute_path: str


def _sort_key(name: str) -> bytes:
    return name.encode("utf-8", "surrogateescape")


def file_extension(name: str) -> str:
    """Extension of a file name without the dot ("" if none)"""
    return PurePosixPath(name).suffix[1:]


class FileCollector:
    """Select files from a store using ignore rules and extension filters"""

    def __init__(
        self,
        store: FileStore,
        use_gitignore: bool = True,
        include_hidden: bool = False,
        exclude_paths: Iterable[str] = (),
    ):
        """Initialize file collector

        Args:
            store: File store rooted at the working directory
            use_gitignore: Whether .gitignore files contribute rules
            include_hidden: Whether dot-files and dot-directories are collected
            exclude_paths: Relative paths that are never collected (bundle, config)
        """
        self.store = store
        self.use_gitignore = use_gitignore
        self.include_hidden = include_hidden
        self.exclude_paths = set(exclude_paths)

    def collect(
        self, matcher: PatternMatcher, extension_filters: Optional[Iterable[str]] = None
    ) -> List[CollectedFile]:
        """Walk the store and return the selected files

        Traversal is depth-first, visiting each directory's entries in
        byte-wise ascending name order, so the result is deterministic.

        Args:
            matcher: Ignore rules from configuration
            extension_filters: Extensions to keep (None or empty = all)

        Returns:
            Selected files in traversal order

        Raises:
            ConfigError: If a .gitignore file contains a malformed pattern
            FileIOError: If the root directory cannot be listed
        """
        filters = set(extension_filters) if extension_filters else None
        selected: List[CollectedFile] = []
        self._walk("", matcher, filters, selected)
        logger.info(f"Selected {len(selected)} files")
        return selected

    def _walk(
        self,
        dir_path: str,
        matcher: PatternMatcher,
        filters: Optional[set],
        selected: List[CollectedFile],
    ) -> None:
        if self.use_gitignore:
            matcher = self._load_gitignore(dir_path, matcher)

        entries = sorted(self.store.list_dir(dir_path), key=lambda e: _sort_key(e.name))
        for entry in entries:
            path = join_path(dir_path, entry.name)

            if entry.name in ALWAYS_SKIPPED:
                continue
            if entry.name.startswith(".") and not self.include_hidden:
                logger.debug(f"Skipping hidden entry: {path}")
                continue

            if entry.kind == EntryKind.DIRECTORY:
                if matcher.is_excluded(path, is_dir=True):
                    continue
                try:
                    self._walk(path, matcher, filters, selected)
                except FileIOError as e:
                    logger.warning(f"Skipping directory {path}: {e}")
            elif entry.kind == EntryKind.FILE:
                if path in self.exclude_paths:
                    logger.debug(f"Skipping excluded path: {path}")
                    continue
                if matcher.is_excluded(path, is_dir=False):
                    continue
                if filters is not None and file_extension(entry.name) not in filters:
                    continue
                selected.append(CollectedFile(path, self.store.resolve(path)))
            else:
                # Symlinks are not followed to avoid cycles
                logger.debug(f"Skipping {entry.kind.value}: {path}")

    def _load_gitignore(self, dir_path: str, matcher: PatternMatcher) -> PatternMatcher:
        gitignore_path = join_path(dir_path, GITIGNORE_NAME)
        if not self.store.is_file(gitignore_path):
            return matcher
        try:
            text = self.store.read_bytes(gitignore_path).decode("utf-8", errors="replace")
        except FileIOError as e:
            logger.warning(f"Ignoring unreadable {gitignore_path}: {e}")
            return matcher
        rules = parse_rules(text.splitlines(), origin=gitignore_path, base_dir=dir_path)
        logger.debug(f"Loaded {len(rules)} rules from {gitignore_path}")
        return matcher.with_gitignore(rules)

    def read_entries(self, collected: Iterable[CollectedFile]) -> CollectionResult:
        """Read selected files as UTF-8 text

        Files that cannot be read or are not valid UTF-8 are skipped and
        recorded as warnings; content is never truncated.

        Args:
            collected: Files returned by collect()

        Returns:
            CollectionResult with entries in the same order
        """
        result = CollectionResult()
        for item in collected:
            warning = None
            try:
                data = self.store.read_bytes(item.relative_path)
                result.entries.append(FileEntry(path=item.relative_path, content=data.decode("utf-8")))
            except FileIOError as e:
                warning = CollectionWarning(item.relative_path, e.reason)
            except UnicodeDecodeError as e:
                warning = CollectionWarning(
                    item.relative_path, f"not valid UTF-8 (byte {e.start})"
                )
            except ValueError as e:
                warning = CollectionWarning(item.relative_path, str(e))

            if warning:
                logger.warning(str(warning))
                result.warnings.append(warning)

        if result.warnings:
            logger.info(
                f"Skipped {len(result.warnings)} files, {len(result.entries)} files remaining"
            )
        return result

    def collect_entries(
        self, matcher: PatternMatcher, extension_filters: Optional[Iterable[str]] = None
    ) -> CollectionResult:
        """Select files and read them in one step"""
        return self.read_entries(self.collect(matcher, extension_filters))
