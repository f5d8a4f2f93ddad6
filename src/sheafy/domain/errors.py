"""Error types shared across sheafy"""

from typing import Optional


class SheafyError(Exception):
    """Base class for all sheafy errors"""

    pass


class ConfigError(SheafyError):
    """Invalid configuration or ignore pattern.

    Raised before any file is read or written.
    """

    pass


class ParseError(SheafyError):
    """Malformed bundle document"""

    def __init__(self, message: str, line: Optional[int] = None):
        self.reason = message
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class EncodeError(SheafyError):
    """Document cannot be represented in the bundle format"""

    pass


class FileIOError(SheafyError):
    """Filesystem failure for a single path"""

    def __init__(self, path: str, operation: str, reason: str):
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"Failed to {operation} '{path}': {reason}")
