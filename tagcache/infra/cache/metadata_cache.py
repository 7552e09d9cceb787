"""Module: metadata_cache.py

Date: 2026-10-19

Persistent cache of decoded EXIF tag sets.

Each record stores the file's modification time next to the serialized
tag set. A lookup whose timestamp differs from the stored one is stale;
the timestamp is compared before the payload is parsed, so stale records
never cost an XML parse.

Usage:
    cache = MetadataCache(CacheStore.open(exif_dir, CacheKind.METADATA))
    result = cache.get(FileIdentity.from_path(path))
    if not result.is_hit:
        tags = reader.read_exif_tags(path)
        cache.put(identity, tags)
"""

from __future__ import annotations

import dataclasses
import sqlite3

from tagcache.core.errors import SerializationError
from tagcache.infra.cache.keyed_cache import KeyedCache
from tagcache.infra.db.cache_store import CacheStore
from tagcache.infra.serialization.exif_xml import deserialize_exif_tags, serialize_exif_tags
from tagcache.models.cache_result import (
    CacheError,
    CacheErrorKind,
    CacheHit,
    CacheMiss,
    CacheResult,
    CacheStale,
)
from tagcache.models.exif_tags import ExifTagSet
from tagcache.models.file_identity import FileIdentity
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class MetadataCache(KeyedCache):
    """EXIF tag sets keyed by file path, validated by modification time."""

    def __init__(self, store: CacheStore):
        super().__init__(store)
        logger.debug("[MetadataCache] Initialized on %s", store.database_path)

    def get(self, identity: FileIdentity) -> CacheResult[ExifTagSet]:
        """Look up the tag set for a file identity.

        Returns:
            CacheHit with the tag set, CacheMiss when nothing is stored,
            CacheStale when the stored timestamp differs, CacheError when
            the record cannot be read (callers treat it as a miss)

        """
        try:
            row = self._store.query_one(
                "SELECT last_modified, payload FROM exif_cache WHERE path = ?",
                (identity.path,),
            )
        except sqlite3.Error as e:
            logger.error("[MetadataCache] Lookup failed for %s: %s", identity.name, e)
            return CacheError(CacheErrorKind.STORAGE, str(e))

        if row is None:
            return CacheMiss()

        stored_timestamp = int(row["last_modified"])
        if stored_timestamp != identity.timestamp:
            logger.debug(
                "[MetadataCache] Stale record for %s (stored %d, current %d)",
                identity.name,
                stored_timestamp,
                identity.timestamp,
                extra={"dev_only": True},
            )
            return CacheStale(stored_timestamp)

        try:
            tags = deserialize_exif_tags(row["payload"])
        except SerializationError as e:
            logger.warning(
                "[MetadataCache] Purging unreadable record for %s: %s", identity.name, e
            )
            self._purge(identity)
            return CacheError(CacheErrorKind.SERIALIZATION, str(e))

        return CacheHit(tags)

    def _purge(self, identity: FileIdentity) -> None:
        # Only the record that failed to parse; a newer one may have landed meanwhile
        try:
            with self._store.transaction() as conn:
                conn.execute(
                    "DELETE FROM exif_cache WHERE path = ? AND last_modified = ?",
                    (identity.path, identity.timestamp),
                )
        except sqlite3.Error as e:
            logger.error("[MetadataCache] Failed to purge %s: %s", identity.name, e)

    def put(self, identity: FileIdentity, tags: ExifTagSet) -> bool:
        """Store the tag set for a file identity.

        The stored copy carries last_modified = identity.timestamp; the
        caller's object is not modified. A record already stored with the
        same timestamp is left untouched.

        Returns:
            True if the record is stored

        Raises:
            SerializationError: If the tag set cannot be serialized

        """
        payload = serialize_exif_tags(dataclasses.replace(tags, last_modified=identity.timestamp))

        try:
            with self._store.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO exif_cache (path, last_modified, payload)
                    VALUES (?, ?, ?)
                    ON CONFLICT(path) DO UPDATE SET
                        last_modified = excluded.last_modified,
                        payload = excluded.payload
                    WHERE excluded.last_modified != exif_cache.last_modified
                    """,
                    (identity.path, identity.timestamp, payload),
                )
        except sqlite3.Error as e:
            logger.error("[MetadataCache] Failed to store tags for %s: %s", identity.name, e)
            return False

        logger.debug(
            "[MetadataCache] Stored %d tags for %s", tags.tag_count(), identity.name
        )
        return True

    def has_up_to_date(self, identity: FileIdentity) -> bool:
        """True if a record exists for exactly this timestamp (no parsing)."""
        try:
            stored = self._stored_timestamp(identity.path)
        except sqlite3.Error as e:
            logger.error("[MetadataCache] Timestamp check failed for %s: %s", identity.name, e)
            return False
        return stored is not None and stored == identity.timestamp

    def __repr__(self) -> str:
        return f"MetadataCache({self._store.database_path})"
