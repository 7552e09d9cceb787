"""Module: application_context.py

Date: 2026-10-19

CacheContext: the caches, their registry and settings, built once and
passed to whoever needs them.

There are no module-level singletons. An application creates one context at
startup; tests create as many isolated contexts as they like on tmp_path.

Usage:
    with CacheContext.create(CacheSettings.resolve(os.environ)) as context:
        context.metadata_cache.get(identity)
        context.registry.clear_all()
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable
from typing import Any

from tagcache.config import EXIF_CACHE_DIR_NAME, THUMBNAIL_CACHE_DIR_NAME
from tagcache.config.resolution import CacheSettings
from tagcache.core.fetch_scheduler import ConcurrentFetchScheduler
from tagcache.infra.cache.keyed_cache import KeyedCache
from tagcache.infra.cache.metadata_cache import MetadataCache
from tagcache.infra.cache.thumbnail_cache import ThumbnailCache
from tagcache.infra.db.cache_store import CacheStore
from tagcache.infra.db.schema import CacheKind
from tagcache.services.cache_provider import CacheProviderAdapter
from tagcache.services.interfaces import CacheDirectoryProvider
from tagcache.services.registry import CacheProviderRegistry
from tagcache.utils.logging.logger_factory import get_cached_logger
from tagcache.utils.paths import FixedCacheDirectoryProvider, PlatformCacheDirectoryProvider

logger = get_cached_logger(__name__)


class CacheContext:
    """Owns the open caches of one application instance."""

    def __init__(
        self,
        settings: CacheSettings,
        directory_provider: CacheDirectoryProvider,
        metadata_cache: MetadataCache,
        thumbnail_cache: ThumbnailCache,
        registry: CacheProviderRegistry,
    ):
        self.settings = settings
        self.directory_provider = directory_provider
        self.metadata_cache = metadata_cache
        self.thumbnail_cache = thumbnail_cache
        self.registry = registry
        self._closed = False

    @classmethod
    def create(
        cls,
        settings: CacheSettings | None = None,
        directory_provider: CacheDirectoryProvider | None = None,
    ) -> CacheContext:
        """Open both caches and register them as cache providers.

        Args:
            settings: Resolved settings (built-in defaults when None)
            directory_provider: Where caches live (derived from
                settings.cache_root, else the platform cache directory)

        Returns:
            Ready CacheContext

        Raises:
            StorageUnavailable: If a cache directory or database cannot be
                created or opened

        """
        settings = settings or CacheSettings()
        if directory_provider is None:
            if settings.cache_root is not None:
                directory_provider = FixedCacheDirectoryProvider(settings.cache_root)
            else:
                directory_provider = PlatformCacheDirectoryProvider()

        metadata_store = CacheStore.open(
            directory_provider.get_cache_directory(EXIF_CACHE_DIR_NAME), CacheKind.METADATA
        )
        try:
            thumbnail_store = CacheStore.open(
                directory_provider.get_cache_directory(THUMBNAIL_CACHE_DIR_NAME),
                CacheKind.THUMBNAIL,
            )
        except Exception:
            metadata_store.close()
            raise

        metadata_cache = MetadataCache(metadata_store)
        thumbnail_cache = ThumbnailCache(thumbnail_store)

        registry = CacheProviderRegistry()
        registry.register(CacheProviderAdapter(EXIF_CACHE_DIR_NAME, metadata_cache))
        registry.register(CacheProviderAdapter(THUMBNAIL_CACHE_DIR_NAME, thumbnail_cache))

        logger.info(
            "[CacheContext] Caches ready (%s)", ", ".join(registry.names())
        )
        return cls(settings, directory_provider, metadata_cache, thumbnail_cache, registry)

    def new_scheduler(
        self,
        work: Callable[[Any], Any],
        on_complete: Callable[[Any], Any],
        on_failure: Callable[[Any, BaseException], Any] | None = None,
        name: str = "fetch",
    ) -> ConcurrentFetchScheduler:
        """Build a scheduler sized by settings.fetch_max_workers (not started)."""
        return ConcurrentFetchScheduler(
            work,
            on_complete,
            on_failure=on_failure,
            max_workers=self.settings.fetch_max_workers,
            name=name,
        )

    def caches(self) -> dict[str, KeyedCache]:
        """Open caches by name, in registration order."""
        return {
            EXIF_CACHE_DIR_NAME: self.metadata_cache,
            THUMBNAIL_CACHE_DIR_NAME: self.thumbnail_cache,
        }

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close both caches. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        with contextlib.ExitStack() as stack:
            stack.callback(self.thumbnail_cache.close)
            stack.callback(self.metadata_cache.close)
        logger.debug("[CacheContext] Closed", extra={"dev_only": True})

    def __enter__(self) -> CacheContext:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
