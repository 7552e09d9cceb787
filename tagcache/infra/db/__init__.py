"""SQLite storage backend for the caches."""

from tagcache.infra.db.cache_store import CacheStore
from tagcache.infra.db.schema import SCHEMA_VERSION, CacheKind

__all__ = ["SCHEMA_VERSION", "CacheKind", "CacheStore"]
