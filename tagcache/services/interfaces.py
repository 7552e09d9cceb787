"""Module: interfaces.py

Date: 2026-10-19

Protocols for the collaborators of the cache subsystem.

The caches never decode images or EXIF data themselves; readers and
generators are supplied by the host application. Directory providers decide
where each cache lives on disk.

All protocols are runtime-checkable, meaning isinstance() works with them.

Usage:
    class FakeGenerator:
        def generate_thumbnail(self, path: Path) -> bytes | None:
            return PNG_BYTES

    generator: ThumbnailGenerator = FakeGenerator()
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tagcache.models.exif_tags import ExifTagSet

__all__ = [
    "CacheDirectoryProvider",
    "CacheProvider",
    "ExifReader",
    "ThumbnailGenerator",
]


@runtime_checkable
class CacheDirectoryProvider(Protocol):
    """Hands out one directory per named cache."""

    def get_cache_directory(self, name: str) -> Path:
        """Return the directory for a named cache, created on first use.

        Raises:
            StorageUnavailable: If the directory cannot be created

        """
        ...


@runtime_checkable
class CacheProvider(Protocol):
    """A named cache that maintenance tooling can clear."""

    name: str

    def clear(self) -> int:
        """Remove every record and return how many were removed."""
        ...


@runtime_checkable
class ExifReader(Protocol):
    """Decodes EXIF metadata from an image file."""

    def read_exif_tags(self, path: Path) -> ExifTagSet | None:
        """Return the decoded tags, or None if the file has no EXIF data."""
        ...


@runtime_checkable
class ThumbnailGenerator(Protocol):
    """Renders an encoded thumbnail for an image file."""

    def generate_thumbnail(self, path: Path) -> bytes | None:
        """Return the encoded thumbnail, or None if none can be produced."""
        ...
