"""Module: thumbnail_record.py

Date: 2026-10-19

A cached thumbnail row.
"""

from dataclasses import dataclass

from tagcache.models.file_identity import FileIdentity


@dataclass(frozen=True, slots=True)
class ThumbnailRecord:
    """Encoded thumbnail bytes for a file identity, with optional dimensions."""

    identity: FileIdentity
    image: bytes
    width: int | None = None
    height: int | None = None
