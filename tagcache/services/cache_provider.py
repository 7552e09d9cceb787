"""Module: cache_provider.py

Date: 2026-10-19

Adapter exposing any cache as a named CacheProvider for maintenance tools.
"""

from __future__ import annotations

from typing import Any

from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class CacheProviderAdapter:
    """Wrap a cache with clear() -> int under a display name.

    Usage:
        provider = CacheProviderAdapter("ExifCache", metadata_cache)
        removed = provider.clear()
    """

    def __init__(self, name: str, cache: Any):
        if not callable(getattr(cache, "clear", None)):
            raise TypeError(f"{type(cache).__name__} has no clear() method")
        self.name = name
        self._cache = cache

    @property
    def cache(self) -> Any:
        return self._cache

    def clear(self) -> int:
        """Clear the wrapped cache and return the number of records removed."""
        removed = int(self._cache.clear())
        logger.info("[CacheProvider] %s: cleared %d records", self.name, removed)
        return removed

    def count(self) -> int | None:
        """Number of records in the wrapped cache, or None if it cannot tell."""
        count = getattr(self._cache, "count", None)
        return int(count()) if callable(count) else None

    def __repr__(self) -> str:
        return f"CacheProviderAdapter({self.name!r}, {type(self._cache).__name__})"
