"""Bundle document encoder

Layout of an encoded document:

    <prologue>\\n            only when the prologue is non-empty and entries exist
    ## <path>\\n
    <fence><hint>\\n
    <content>\\n             one separator newline, always added
    <fence>\\n
    \\n
    ...
    <epilogue>
"""

import logging
import re
from typing import Iterator

from sheafy.domain.errors import EncodeError
from sheafy.domain.models.bundle import HEADING_PREFIX, BundleDocument, FileEntry, is_file_heading
from sheafy.infrastructure.document.languages import get_language_hint

logger = logging.getLogger(__name__)

FENCE_CHAR = "`"
MIN_FENCE_LENGTH = 3

_BACKTICK_RUN = re.compile(r"`+")


def choose_fence(content: str) -> str:
    """Shortest backtick fence that does not occur anywhere in content

    Args:
        content: Text that will be wrapped in the fence

    Returns:
        A run of at least three backticks
    """
    longest = max((len(run) for run in _BACKTICK_RUN.findall(content)), default=0)
    return FENCE_CHAR * max(MIN_FENCE_LENGTH, longest + 1)


def _check_free_text(text: str, name: str) -> None:
    lines = text.split("\n")
    for index in range(len(lines)):
        if is_file_heading(lines, index):
            raise EncodeError(
                f"{name} line {index + 1} starts with {HEADING_PREFIX!r} and is followed by "
                "a code fence, which is reserved for file headings"
            )


def encode_entry(entry: FileEntry, language_hint: str = "") -> str:
    """Encode a single file block"""
    fence = choose_fence(entry.content)
    return f"{HEADING_PREFIX}{entry.path}\n{fence}{language_hint}\n{entry.content}\n{fence}\n\n"


class DocumentEncoder:
    """Serialize a BundleDocument into Markdown text"""

    def __init__(self, language_hints: bool = True):
        """Initialize encoder

        Args:
            language_hints: Whether opening fences carry a language name
        """
        self.language_hints = language_hints

    def encode(self, document: BundleDocument) -> str:
        """Encode a document

        Args:
            document: Entries plus prologue and epilogue

        Returns:
            Document text

        Raises:
            EncodeError: If the prologue or epilogue contains a file heading
        """
        return "".join(self.iter_chunks(document))

    def iter_chunks(self, document: BundleDocument) -> Iterator[str]:
        """Yield the document text piece by piece

        Raises:
            EncodeError: If the prologue or epilogue contains a file heading
        """
        _check_free_text(document.prologue, "prologue")
        _check_free_text(document.epilogue, "epilogue")

        if document.prologue:
            yield document.prologue
            if document.entries:
                yield "\n"

        for entry in document.entries:
            logger.debug(f"Encoding {entry.path}")
            hint = get_language_hint(entry.extension) if self.language_hints else ""
            yield encode_entry(entry, hint)

        if document.epilogue:
            yield document.epilogue
