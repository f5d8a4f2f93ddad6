"""Result models for bundle and restore runs"""

from dataclasses import dataclass, field
from typing import List, Optional

from sheafy.domain.models.bundle import FileEntry


@dataclass(frozen=True)
class CollectionWarning:
    """A file that was selected but could not be bundled"""

    path: str  # Relative path of the skipped file
    reason: str

    def __str__(self) -> str:
        return f"Could not read file '{self.path}': {self.reason}. Skipping."


@dataclass
class CollectionResult:
    """Entries read during collection plus anything that was skipped"""

    entries: List[FileEntry] = field(default_factory=list)
    warnings: List[CollectionWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


@dataclass
class BundleResult:
    """Outcome of a bundle run"""

    output_path: Optional[str] = None  # None when nothing was written
    collection: CollectionResult = field(default_factory=CollectionResult)

    @property
    def paths(self) -> List[str]:
        """Bundled paths in document order"""
        return [entry.path for entry in self.collection.entries]

    @property
    def is_empty(self) -> bool:
        return len(self.collection.entries) == 0


@dataclass(frozen=True)
class EntryOutcome:
    """Outcome of restoring one entry"""

    path: str
    error: Optional[str] = None  # Error message if the write failed

    @property
    def is_successful(self) -> bool:
        return self.error is None


@dataclass
class RestoreResult:
    """Aggregated outcome of a restore batch"""

    outcomes: List[EntryOutcome] = field(default_factory=list)

    @property
    def written(self) -> List[str]:
        """Paths that were written"""
        return [o.path for o in self.outcomes if o.is_successful]

    @property
    def failed(self) -> List[EntryOutcome]:
        """Outcomes of entries that could not be written"""
        return [o for o in self.outcomes if not o.is_successful]

    @property
    def count(self) -> int:
        """Number of files written"""
        return len(self.written)

    @property
    def all_failed(self) -> bool:
        """True when there was something to restore and nothing succeeded"""
        return len(self.outcomes) > 0 and self.count == 0
