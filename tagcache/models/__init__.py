"""Domain models: file identity, EXIF tag sets, cache results."""

from tagcache.models.cache_result import (
    CacheError,
    CacheErrorKind,
    CacheHit,
    CacheMiss,
    CacheResult,
    CacheStale,
)
from tagcache.models.exif_tags import ByteOrder, ExifIfd, ExifTag, ExifTagSet
from tagcache.models.file_identity import FileIdentity
from tagcache.models.thumbnail_record import ThumbnailRecord

__all__ = [
    "ByteOrder",
    "CacheError",
    "CacheErrorKind",
    "CacheHit",
    "CacheMiss",
    "CacheResult",
    "CacheStale",
    "ExifIfd",
    "ExifTag",
    "ExifTagSet",
    "FileIdentity",
    "ThumbnailRecord",
]
