"""Module: registry.py

Date: 2026-10-19

Cache provider registry.

An explicit name -> CacheProvider table, filled once at startup by
CacheContext.create(). There is no discovery: every provider is registered
by the code that owns it.

Usage:
    registry = CacheProviderRegistry()
    registry.register(CacheProviderAdapter("ExifCache", metadata_cache))
    removed = registry.clear_all()   # {"ExifCache": 12}
"""

from __future__ import annotations

import threading

from tagcache.services.interfaces import CacheProvider
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class CacheProviderRegistry:
    """Registration table of cache providers, in registration order."""

    def __init__(self) -> None:
        self._providers: dict[str, CacheProvider] = {}
        self._lock = threading.Lock()

    def register(self, provider: CacheProvider) -> None:
        """Register a provider under its name.

        Raises:
            ValueError: If a provider with the same name is registered

        """
        with self._lock:
            if provider.name in self._providers:
                raise ValueError(f"Cache provider already registered: {provider.name}")
            self._providers[provider.name] = provider
        logger.debug("[CacheProviderRegistry] Registered %s", provider.name)

    def get(self, name: str) -> CacheProvider | None:
        """Return the provider registered under name, or None."""
        with self._lock:
            return self._providers.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._providers)

    def providers(self) -> list[CacheProvider]:
        with self._lock:
            return list(self._providers.values())

    def clear_all(self) -> dict[str, int]:
        """Clear every registered cache.

        Returns:
            Mapping of provider name to number of records removed

        """
        results = {provider.name: provider.clear() for provider in self.providers()}
        logger.info(
            "[CacheProviderRegistry] Cleared %d caches (%d records)",
            len(results),
            sum(results.values()),
        )
        return results

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._providers
