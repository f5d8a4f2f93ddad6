"""Bundle document decoder"""

import logging
from typing import List, Tuple

from sheafy.domain.errors import ParseError
from sheafy.domain.models.bundle import (
    HEADING_PREFIX,
    OPENING_FENCE,
    BundleDocument,
    FileEntry,
    find_file_heading,
    validate_relative_path,
)

logger = logging.getLogger(__name__)


class DocumentDecoder:
    """Parse Markdown bundle text back into a BundleDocument

    A file heading is a "## " line directly followed by an opening fence;
    other "## " lines are plain text. Text before the first heading is the
    prologue. After each block only blank lines may precede the next
    heading; anything else after the last block is the epilogue.
    """

    def decode(self, text: str) -> BundleDocument:
        """Decode a document

        Args:
            text: Document text as produced by DocumentEncoder

        Returns:
            BundleDocument with entries in document order

        Raises:
            ParseError: If the document is malformed
        """
        lines = text.split("\n")
        first = find_file_heading(lines, 0)
        if first is None:
            logger.debug("No file headings found")
            return BundleDocument(prologue=text)

        prologue = "\n".join(lines[:first])
        entries: List[FileEntry] = []
        seen = set()
        index = first
        epilogue = ""

        while True:
            heading = index
            entry, index = self._parse_block(lines, heading)
            if entry.path in seen:
                raise ParseError(f"duplicate path '{entry.path}'", line=heading + 1)
            seen.add(entry.path)
            entries.append(entry)

            # Skip the blank separator after the closing fence
            if index < len(lines) and lines[index] == "" and index + 1 < len(lines):
                index += 1
            next_heading = find_file_heading(lines, index)
            if next_heading is None:
                epilogue = "\n".join(lines[index:])
                break
            stray = [n for n in range(index, next_heading) if lines[n].strip()]
            if stray:
                raise ParseError("unexpected text between file blocks", line=stray[0] + 1)
            index = next_heading

        logger.debug(f"Decoded {len(entries)} entries")
        return BundleDocument(entries=entries, prologue=prologue, epilogue=epilogue)

    def _parse_block(self, lines: List[str], heading: int) -> Tuple[FileEntry, int]:
        """Parse one heading plus fenced block

        The caller guarantees the heading is followed by an opening fence.

        Returns:
            Tuple of (entry, index of the line after the closing fence)
        """
        heading_line = heading + 1
        path = lines[heading][len(HEADING_PREFIX):].strip()
        try:
            validate_relative_path(path)
        except ValueError as e:
            raise ParseError(f"invalid path: {e}", line=heading_line) from e

        opening = heading + 1
        fence = OPENING_FENCE.match(lines[opening]).group(1)

        for closing in range(opening + 1, len(lines)):
            # Only a fence of exactly the same length closes the block
            if lines[closing].rstrip() == fence:
                content = "\n".join(lines[opening + 1:closing])
                return FileEntry(path=path, content=content), closing + 1

        raise ParseError(
            f"code block for '{path}' opened with {fence} is never closed",
            line=opening + 1,
        )
