"""Persistent caches for derived artifacts (EXIF tag sets, thumbnails)."""

from tagcache.infra.cache.metadata_cache import MetadataCache
from tagcache.infra.cache.thumbnail_cache import ThumbnailCache

__all__ = ["MetadataCache", "ThumbnailCache"]
