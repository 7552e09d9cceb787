"""Module: schema.py

Date: 2026-10-19

Schema creation for the cache stores.

Every cache kind lives in its own database file with a single table keyed
by the normalized file path. Creation is idempotent, so it runs on every
open.
"""

import sqlite3
from enum import Enum

from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

SCHEMA_VERSION = 1


class CacheKind(Enum):
    """The kinds of derived artifacts that are cached."""

    METADATA = "metadata"
    THUMBNAIL = "thumbnail"

    @property
    def table(self) -> str:
        """Name of the table holding this kind's records."""
        return _TABLES[self]


_TABLES = {
    CacheKind.METADATA: "exif_cache",
    CacheKind.THUMBNAIL: "thumbnails",
}

_CREATE_TABLE = {
    CacheKind.METADATA: """
        CREATE TABLE IF NOT EXISTS exif_cache (
            path TEXT PRIMARY KEY,
            last_modified INTEGER NOT NULL,
            payload TEXT NOT NULL
        )
    """,
    CacheKind.THUMBNAIL: """
        CREATE TABLE IF NOT EXISTS thumbnails (
            path TEXT PRIMARY KEY,
            last_modified INTEGER NOT NULL,
            image BLOB NOT NULL,
            width INTEGER,
            height INTEGER
        )
    """,
}


def create_schema(connection: sqlite3.Connection, kind: CacheKind) -> None:
    """Create the table for a cache kind and record the schema version.

    Safe to call on every open.

    Args:
        connection: Writer connection (autocommit mode)
        kind: Cache kind whose table to create

    """
    connection.execute("BEGIN IMMEDIATE")
    try:
        connection.execute(_CREATE_TABLE[kind])
        connection.execute(
            "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER PRIMARY KEY)"
        )
        row = connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
        stored_version = row[0] if row else None

        if stored_version is None:
            connection.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
            )
            logger.info("[Schema] Created %s schema v%d", kind.value, SCHEMA_VERSION)
        elif stored_version != SCHEMA_VERSION:
            logger.warning(
                "[Schema] %s store has schema v%d, expected v%d",
                kind.value,
                stored_version,
                SCHEMA_VERSION,
            )
        connection.execute("COMMIT")
    except sqlite3.Error:
        connection.execute("ROLLBACK")
        raise
