"""Bundle models - file entries and the bundle document"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

HEADING_PREFIX = "## "

# Opening fence: three or more backticks followed by an optional info string
OPENING_FENCE = re.compile(r"^(`{3,})([^`]*)$")

# Drive prefix such as "C:" or "C:/..."; "a:b.txt" is an ordinary name
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:(/|$)")


def is_file_heading(lines: List[str], index: int) -> bool:
    """Check if lines[index] starts a file block

    A file heading is a "## " line immediately followed by an opening
    fence. Any other "## " line is ordinary Markdown text.
    """
    return (
        lines[index].startswith(HEADING_PREFIX)
        and index + 1 < len(lines)
        and OPENING_FENCE.match(lines[index + 1]) is not None
    )


def find_file_heading(lines: List[str], start: int = 0) -> Optional[int]:
    """Index of the first file heading at or after start, or None"""
    for index in range(start, len(lines)):
        if is_file_heading(lines, index):
            return index
    return None


def validate_relative_path(path: str) -> str:
    """Check that a path is a safe, normalized, forward-slash relative path

    Args:
        path: Path as it appears in a bundle

    Returns:
        The same path, unchanged

    Raises:
        ValueError: If the path is empty, absolute, escapes the root,
            or is not in normalized form
    """
    if not path or not path.strip():
        raise ValueError("path is empty")
    if path != path.strip():
        raise ValueError(f"path has surrounding whitespace: {path!r}")
    if "\n" in path or "\r" in path:
        raise ValueError(f"path contains a line break: {path!r}")
    if "\\" in path:
        raise ValueError(f"path must use forward slashes: {path!r}")
    if path.startswith("/") or _DRIVE_PREFIX.match(path):
        raise ValueError(f"path is absolute: {path!r}")

    for segment in path.split("/"):
        if segment == "..":
            raise ValueError(f"path escapes the target directory: {path!r}")
        if segment in ("", "."):
            raise ValueError(f"path is not normalized: {path!r}")
    return path


@dataclass(frozen=True)
class FileEntry:
    """A single file inside a bundle"""

    path: str  # Relative path with forward slashes
    content: str  # Full file text, unmodified

    def __post_init__(self):
        validate_relative_path(self.path)

    @property
    def extension(self) -> str:
        """File extension without the dot ("" if none)"""
        name = self.path.rsplit("/", 1)[-1]
        if "." not in name.lstrip("."):
            return ""
        return name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class BundleDocument:
    """Ordered file entries plus free text before and after them

    Without entries there is nothing to separate prologue from epilogue,
    so an epilogue is folded into the prologue.
    """

    entries: List[FileEntry] = field(default_factory=list)
    prologue: str = ""
    epilogue: str = ""

    def __post_init__(self):
        seen = set()
        for entry in self.entries:
            if entry.path in seen:
                raise ValueError(f"duplicate path in bundle: {entry.path}")
            seen.add(entry.path)

        if not self.entries and self.epilogue:
            object.__setattr__(self, "prologue", self.prologue + self.epilogue)
            object.__setattr__(self, "epilogue", "")

    @property
    def paths(self) -> List[str]:
        """Entry paths in document order"""
        return [entry.path for entry in self.entries]
