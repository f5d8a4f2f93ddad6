"""Bundle settings configuration model."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sheafy.domain.models.bundle import find_file_heading

DEFAULT_BUNDLE_NAME = "project_bundle.md"


class SheafyConfig(BaseModel):
    """Configuration for bundling and restoring.

    Attributes:
        bundle_name: Bundle file written by `bundle` and read by `restore`
        working_dir: Directory to bundle from and restore into
        use_gitignore: Whether .gitignore files contribute ignore rules
        ignore_patterns: Extra gitignore-style patterns, one per line
        filters: File extensions to include (None = every extension)
        include_hidden: Whether dot-files and dot-directories are collected
        prologue: Text written before the first file block
        epilogue: Text written after the last file block
    """

    bundle_name: str = Field(DEFAULT_BUNDLE_NAME, min_length=1)
    working_dir: str = Field(".", min_length=1)
    use_gitignore: bool = True
    ignore_patterns: Optional[str] = None
    filters: Optional[List[str]] = None
    include_hidden: bool = False
    prologue: Optional[str] = None
    epilogue: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("ignore_patterns", mode="before")
    @classmethod
    def _join_pattern_list(cls, value: Union[str, List[str], None]):
        if isinstance(value, list):
            return "\n".join(str(item) for item in value)
        return value

    @field_validator("filters")
    @classmethod
    def _normalize_filters(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        normalized = []
        for item in value:
            ext = item.strip().lstrip(".")
            if not ext:
                raise ValueError(f"empty extension filter: {item!r}")
            if "/" in ext:
                raise ValueError(f"extension filter contains '/': {item!r}")
            if ext not in normalized:
                normalized.append(ext)
        return normalized

    @field_validator("prologue", "epilogue")
    @classmethod
    def _reject_file_headings(cls, value: Optional[str]) -> Optional[str]:
        # A "## " line followed by a code fence would be read back as a file
        if value and find_file_heading(value.split("\n")) is not None:
            raise ValueError("must not contain a '## ' line directly followed by a code fence")
        return value

    @property
    def ignore_pattern_lines(self) -> List[str]:
        """Configured ignore patterns split into lines"""
        if not self.ignore_patterns:
            return []
        return self.ignore_patterns.splitlines()
