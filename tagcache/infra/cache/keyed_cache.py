"""Module: keyed_cache.py

Date: 2026-10-19

Operations shared by every path-keyed cache: delete, rename, clear,
key listing and maintenance. Subclasses add the typed read/write API.

Keys are normalized absolute paths (see tagcache.models.file_identity).
"""

import os
import sqlite3
from pathlib import Path

from tagcache.infra.db.cache_store import CacheStore
from tagcache.models.file_identity import FileIdentity, normalize_path
from tagcache.utils.events import Observable, Signal
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class KeyedCache(Observable):
    """Base class for caches keyed by file path.

    Signals:
        cleared(int): all records were removed (number removed)
        record_deleted(str): the record for a path was removed
        record_renamed(str, str): a record moved from one path to another
    """

    cleared = Signal(int)
    record_deleted = Signal(str)
    record_renamed = Signal(str, str)

    def __init__(self, store: CacheStore):
        super().__init__()
        self._store = store
        self._table = store.table
        self._log_name = type(self).__name__

    @property
    def store(self) -> CacheStore:
        return self._store

    def _stored_timestamp(self, path: str) -> int | None:
        row = self._store.query_one(
            f"SELECT last_modified FROM {self._table} WHERE path = ?", (path,)
        )
        return None if row is None else int(row[0])

    def delete_path(self, file_path: str | os.PathLike[str]) -> bool:
        """Remove the record for a path.

        Returns:
            True if a record existed and was removed

        """
        path = normalize_path(file_path)
        try:
            with self._store.transaction() as conn:
                deleted = conn.execute(
                    f"DELETE FROM {self._table} WHERE path = ?", (path,)
                ).rowcount > 0
        except sqlite3.Error as e:
            logger.error("[%s] Failed to delete %s: %s", self._log_name, Path(path).name, e)
            return False

        if deleted:
            logger.debug("[%s] Deleted record: %s", self._log_name, Path(path).name)
            self.record_deleted.emit(path)
        return deleted

    def delete(self, target: FileIdentity | str | os.PathLike[str]) -> bool:
        """Remove the record of a file, given its identity or its path.

        The timestamp of an identity is ignored: whatever is stored for the
        path is removed.
        """
        if isinstance(target, FileIdentity):
            return self.delete_path(target.path)
        return self.delete_path(target)

    def rename(
        self, from_path: str | os.PathLike[str], to_path: str | os.PathLike[str]
    ) -> bool:
        """Move a record to a new key, keeping its timestamp and payload.

        Any record already stored under to_path is replaced. Readers see
        either the old key or the new key, never both or neither.

        Returns:
            True if the record was moved, False if from_path has no record

        """
        source = normalize_path(from_path)
        target = normalize_path(to_path)

        try:
            with self._store.transaction() as conn:
                found = conn.execute(
                    f"SELECT 1 FROM {self._table} WHERE path = ?", (source,)
                ).fetchone()
                if found is None:
                    moved = False
                elif source == target:
                    moved = True
                else:
                    conn.execute(f"DELETE FROM {self._table} WHERE path = ?", (target,))
                    conn.execute(
                        f"UPDATE {self._table} SET path = ? WHERE path = ?", (target, source)
                    )
                    moved = True
        except sqlite3.Error as e:
            logger.error("[%s] Failed to rename %s -> %s: %s", self._log_name, source, target, e)
            return False

        if not moved:
            logger.debug(
                "[%s] Nothing to rename for %s",
                self._log_name,
                Path(source).name,
                extra={"dev_only": True},
            )
            return False

        if source != target:
            logger.debug("[%s] Renamed %s -> %s", self._log_name, source, target)
            self.record_renamed.emit(source, target)
        return True

    def list_keys(self) -> set[str]:
        """Return every cached path."""
        try:
            rows = self._store.query_all(f"SELECT path FROM {self._table}")
        except sqlite3.Error as e:
            logger.error("[%s] Failed to list keys: %s", self._log_name, e)
            return set()
        return {row[0] for row in rows}

    def count(self) -> int:
        """Number of cached records (0 on storage errors)."""
        try:
            return self._store.count()
        except sqlite3.Error as e:
            logger.error("[%s] Failed to count records: %s", self._log_name, e)
            return 0

    def clear(self) -> int:
        """Remove every record.

        Returns:
            Number of records removed (0 on storage errors)

        """
        try:
            with self._store.transaction() as conn:
                removed = int(conn.execute(f"SELECT COUNT(*) FROM {self._table}").fetchone()[0])
                conn.execute(f"DELETE FROM {self._table}")
        except sqlite3.Error as e:
            logger.error("[%s] Failed to clear cache: %s", self._log_name, e)
            return 0

        logger.info("[%s] Cleared %d records", self._log_name, removed)
        self.cleared.emit(removed)
        return removed

    def compact(self) -> bool:
        """Reclaim disk space held by deleted records."""
        return self._store.compact()

    def close(self) -> None:
        self._store.close()
