"""Module: maintenance.py

Date: 2026-10-19

Housekeeping for the caches: orphan pruning and statistics.

An orphan is a record whose file no longer exists (deleted or moved while
the application was not running to see it).
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from tagcache.core.application_context import CacheContext
from tagcache.infra.cache.keyed_cache import KeyedCache
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def prune_orphans(cache: KeyedCache, exists: Callable[[str], bool] = os.path.exists) -> int:
    """Delete records whose file is gone.

    Args:
        cache: Cache to prune
        exists: Predicate telling whether a cached path still exists

    Returns:
        Number of records removed

    """
    removed = 0
    for path in sorted(cache.list_keys()):
        if not exists(path) and cache.delete_path(path):
            removed += 1

    logger.info("[Maintenance] Pruned %d orphaned records from %s", removed, type(cache).__name__)
    return removed


def prune_all(
    context: CacheContext, exists: Callable[[str], bool] = os.path.exists
) -> dict[str, int]:
    """Prune every cache of a context. Returns removed counts per cache name."""
    return {name: prune_orphans(cache, exists) for name, cache in context.caches().items()}


def compact_all(context: CacheContext) -> dict[str, bool]:
    """Compact every cache of a context. Returns success per cache name."""
    return {name: cache.compact() for name, cache in context.caches().items()}


def cache_statistics(context: CacheContext) -> dict[str, dict[str, Any]]:
    """Row count and on-disk size of every cache, by cache name."""
    return {name: cache.store.stats() for name, cache in context.caches().items()}
