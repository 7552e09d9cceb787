"""Service layer: collaborator protocols, cache providers and their registry."""

from tagcache.services.cache_provider import CacheProviderAdapter
from tagcache.services.interfaces import (
    CacheDirectoryProvider,
    CacheProvider,
    ExifReader,
    ThumbnailGenerator,
)
from tagcache.services.registry import CacheProviderRegistry

__all__ = [
    "CacheDirectoryProvider",
    "CacheProvider",
    "CacheProviderAdapter",
    "CacheProviderRegistry",
    "ExifReader",
    "ThumbnailGenerator",
]
