"""
Exceptions raised by weeksort.
"""

from pathlib import Path
from typing import Optional


class WeeksortError(Exception):
    """Base error for the project."""


class ConfigurationError(WeeksortError):
    pass


class FileSystemError(WeeksortError):
    """A filesystem call failed on a specific path."""

    action = "access"

    def __init__(self, path: Path, cause: Optional[BaseException] = None,
                 dest: Optional[Path] = None):
        self.path = path
        self.dest = dest
        self.cause = cause
        target = f"{path} -> {dest}" if dest is not None else str(path)
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {self.action} {target}{reason}")


class DirectoryListingError(FileSystemError):
    action = "read directory"


class MetadataReadError(FileSystemError):
    action = "read metadata of"


class DirectoryCreationError(FileSystemError):
    action = "create folder"


class MoveError(FileSystemError):
    action = "move file"


class TaskFailedError(WeeksortError):
    """A concurrent task failed with an unexpected exception."""
