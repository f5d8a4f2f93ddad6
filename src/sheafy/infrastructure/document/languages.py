"""Language hints for fenced code blocks"""

LANGUAGE_HINTS = {
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "html": "html",
    "css": "css",
    "rs": "rust",
    "go": "go",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "sh": "bash",
    "md": "markdown",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "sql": "sql",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "scala": "scala",
}


def get_language_hint(extension: str) -> str:
    """Fence info string for a file extension ("" if unknown)"""
    return LANGUAGE_HINTS.get(extension, "")
