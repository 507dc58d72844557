"""
Error types raised by the directory usage cache.

Each error records the path it concerns. The concrete classes also derive
from the matching builtin (NotADirectoryError, PermissionError, OSError) so
callers that only know the standard exceptions still catch them.
"""


class DirUsageError(Exception):
    """Base class for all dirusage errors."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class InvalidDirectory(DirUsageError, NotADirectoryError):
    """The queried path does not exist or is not a directory."""


class AccessDenied(DirUsageError, PermissionError):
    """Permission was refused while reading the directory's metadata."""


class WalkFailed(DirUsageError, OSError):
    """An entry could not be enumerated or stat'ed during a tree walk."""
