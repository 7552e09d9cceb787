"""Module: cache_store.py

Date: 2026-10-19

SQLite-backed store for one cache kind.

One database file per cache kind, living in the directory handed out by the
cache directory provider:

    <cache_directory>/cache.db

Connection model:
- one writer connection, serialized by an RLock (SQLite allows a single
  writer); every write goes through transaction()
- read connections checked out of a small LIFO pool and returned after
  each query; WAL mode lets readers run concurrently with the writer.
  At most max_idle_readers stay open between queries, so short-lived
  worker threads never accumulate connections

Any failure to create the directory, open the file or configure the
connection raises StorageUnavailable from open(). After close() every
operation raises StorageUnavailable as well.
"""

import contextlib
import queue
import sqlite3
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from tagcache.config import (
    CACHE_DB_FILENAME,
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_CONNECT_TIMEOUT,
    SQLITE_JOURNAL_MODE,
    SQLITE_READ_POOL_SIZE,
    SQLITE_SYNCHRONOUS,
)
from tagcache.core.errors import StorageUnavailable
from tagcache.infra.db.schema import CacheKind, create_schema
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class CacheStore:
    """Connections, schema and transactions for one cache database."""

    def __init__(
        self,
        database_path: Path | str,
        kind: CacheKind,
        max_idle_readers: int = SQLITE_READ_POOL_SIZE,
    ):
        """Open (creating if needed) the database at database_path.

        Prefer CacheStore.open(cache_directory, kind).

        Args:
            database_path: Database file
            kind: Cache kind (selects the table)
            max_idle_readers: Read connections kept open between queries

        Raises:
            StorageUnavailable: If the database cannot be created or opened

        """
        self.database_path = Path(database_path)
        self.kind = kind
        self.max_idle_readers = max(0, max_idle_readers)

        self._write_lock = threading.RLock()
        self._readers_lock = threading.Lock()
        self._readers: set[sqlite3.Connection] = set()
        self._idle_readers: queue.LifoQueue[sqlite3.Connection] = queue.LifoQueue()
        self._closed = False

        try:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(
                f"Cannot create cache directory {self.database_path.parent}: {e}",
                self.database_path,
            ) from e

        try:
            self._conn = self._connect()
        except sqlite3.Error as e:
            raise StorageUnavailable(
                f"Cannot open cache database {self.database_path}: {e}", self.database_path
            ) from e

        try:
            self._conn.execute(f"PRAGMA journal_mode = {SQLITE_JOURNAL_MODE}")
            self._conn.execute(f"PRAGMA synchronous = {SQLITE_SYNCHRONOUS}")
            self.init_schema()
        except sqlite3.Error as e:
            with contextlib.suppress(sqlite3.Error):
                self._conn.close()
            raise StorageUnavailable(
                f"Cannot initialize cache database {self.database_path}: {e}",
                self.database_path,
            ) from e

        logger.info("[CacheStore] Opened %s store: %s", kind.value, self.database_path)

    @classmethod
    def open(cls, cache_directory: Path | str, kind: CacheKind) -> "CacheStore":
        """Open the store for a cache kind inside cache_directory.

        Args:
            cache_directory: Directory owned by this cache
            kind: Cache kind (selects the table)

        Returns:
            Open CacheStore

        Raises:
            StorageUnavailable: If the database cannot be created or opened

        """
        return cls(Path(cache_directory) / CACHE_DB_FILENAME, kind)

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode: transactions are opened explicitly in transaction()
        conn = sqlite3.connect(
            str(self.database_path),
            timeout=SQLITE_CONNECT_TIMEOUT,
            check_same_thread=False,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute(f"PRAGMA busy_timeout = {int(SQLITE_BUSY_TIMEOUT_MS)}")
        return conn

    def init_schema(self) -> None:
        """Create the table for this store's kind if missing (idempotent)."""
        self._ensure_open()
        with self._write_lock:
            create_schema(self._conn, self.kind)

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageUnavailable(
                f"Cache store {self.database_path} is closed", self.database_path
            )

    @property
    def table(self) -> str:
        return self.kind.table

    @property
    def is_closed(self) -> bool:
        return self._closed

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a write transaction on the writer connection.

        Usage:
            with store.transaction() as conn:
                conn.execute(...)
                # Commits on success, rolls back on exception

        Raises:
            StorageUnavailable: If the store is closed

        """
        with self._write_lock:
            self._ensure_open()
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                yield self._conn
            except BaseException:
                with contextlib.suppress(sqlite3.Error):
                    self._conn.execute("ROLLBACK")
                raise
            else:
                self._conn.execute("COMMIT")

    @property
    def open_reader_count(self) -> int:
        """Read connections currently open (idle in the pool or checked out)."""
        with self._readers_lock:
            return len(self._readers)

    @contextlib.contextmanager
    def reader(self) -> Iterator[sqlite3.Connection]:
        """Check out a read connection for the duration of the block.

        Raises:
            StorageUnavailable: If the store is closed or the connection
                cannot be opened

        """
        self._ensure_open()
        try:
            conn = self._idle_readers.get_nowait()
        except queue.Empty:
            conn = self._open_reader()
        try:
            yield conn
        finally:
            self._release_reader(conn)

    def _open_reader(self) -> sqlite3.Connection:
        try:
            conn = self._connect()
            conn.execute("PRAGMA query_only = ON")
        except sqlite3.Error as e:
            raise StorageUnavailable(
                f"Cannot open read connection to {self.database_path}: {e}",
                self.database_path,
            ) from e

        with self._readers_lock:
            if self._closed:
                conn.close()
                self._ensure_open()
            self._readers.add(conn)
        return conn

    def _release_reader(self, conn: sqlite3.Connection) -> None:
        # Idle puts happen under the lock, so qsize() cannot overshoot the cap
        with self._readers_lock:
            keep = not self._closed and self._idle_readers.qsize() < self.max_idle_readers
            if keep:
                self._idle_readers.put_nowait(conn)
            else:
                self._readers.discard(conn)

        if not keep:
            with contextlib.suppress(sqlite3.Error):
                conn.close()

    def query_one(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Row | None:
        """Run a read query and return the first row (or None)."""
        with self.reader() as conn:
            return conn.execute(sql, params).fetchone()

    def query_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        """Run a read query and return every row."""
        with self.reader() as conn:
            return conn.execute(sql, params).fetchall()

    def count(self) -> int:
        """Number of records in this store's table."""
        row = self.query_one(f"SELECT COUNT(*) FROM {self.table}")
        return int(row[0]) if row else 0

    def compact(self) -> bool:
        """Checkpoint the WAL and VACUUM the database.

        Returns:
            True if compaction succeeded

        """
        with self._write_lock:
            self._ensure_open()
            try:
                self._conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                self._conn.execute("VACUUM")
            except sqlite3.Error as e:
                logger.error("[CacheStore] Compaction of %s failed: %s", self.database_path, e)
                return False

        logger.info("[CacheStore] Compacted %s", self.database_path)
        return True

    def stats(self) -> dict[str, Any]:
        """Return row count and on-disk size (database plus WAL file)."""
        size = 0
        for suffix in ("", "-wal"):
            path = Path(f"{self.database_path}{suffix}")
            with contextlib.suppress(OSError):
                size += path.stat().st_size

        return {
            "kind": self.kind.value,
            "path": str(self.database_path),
            "records": self.count(),
            "size_bytes": size,
        }

    def close(self) -> None:
        """Close every connection. Safe to call more than once."""
        with self._write_lock:
            if self._closed:
                return
            self._closed = True

            with self._readers_lock:
                readers, self._readers = self._readers, set()
                while not self._idle_readers.empty():
                    self._idle_readers.get_nowait()

            for conn in readers:
                with contextlib.suppress(sqlite3.Error):
                    conn.close()

            try:
                self._conn.close()
            except sqlite3.Error as e:
                logger.warning("[CacheStore] Error closing %s: %s", self.database_path, e)

        logger.debug(
            "[CacheStore] Closed %s (%d read connections)",
            self.database_path,
            len(readers),
            extra={"dev_only": True},
        )

    def __enter__(self) -> "CacheStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
