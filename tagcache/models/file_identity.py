"""Module: file_identity.py

Date: 2026-10-19

FileIdentity: the unit of cache-key validity.

A cached artifact is valid for a (path, timestamp) pair. The path is
absolute and normalized; the timestamp is the file's modification time as
integer epoch milliseconds. Equal paths with different timestamps are
different validity states of the same file.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path


def normalize_path(file_path: str | os.PathLike[str]) -> str:
    """Return an absolute, normalized path string used as cache key.

    Args:
        file_path: Path to normalize

    Returns:
        Normalized absolute path

    """
    return os.path.normpath(os.path.abspath(os.fspath(file_path)))


def modification_millis(file_path: str | os.PathLike[str]) -> int:
    """Return the modification time of a file in epoch milliseconds.

    Raises:
        OSError: If the file cannot be stat'ed

    """
    return os.stat(file_path).st_mtime_ns // 1_000_000


@dataclass(frozen=True, slots=True)
class FileIdentity:
    """Absolute file path paired with its modification timestamp."""

    path: str
    timestamp: int

    def __post_init__(self):
        object.__setattr__(self, "path", normalize_path(self.path))
        object.__setattr__(self, "timestamp", int(self.timestamp))

    @classmethod
    def from_path(cls, file_path: str | os.PathLike[str]) -> "FileIdentity":
        """Create an identity from the file's current state on disk.

        Args:
            file_path: Path to an existing file

        Returns:
            FileIdentity with the current modification time

        Raises:
            OSError: If the file does not exist or cannot be stat'ed

        """
        return cls(os.fspath(file_path), modification_millis(file_path))

    @classmethod
    def for_path(cls, file_path: str | os.PathLike[str], timestamp: int) -> "FileIdentity":
        """Create an identity without touching the filesystem."""
        return cls(os.fspath(file_path), timestamp)

    def with_timestamp(self, timestamp: int) -> "FileIdentity":
        """Return a copy of this identity with another timestamp."""
        return replace(self, timestamp=timestamp)

    @property
    def name(self) -> str:
        """File name component of the path (for logging)."""
        return Path(self.path).name
