"""Module: thumbnail_cache.py

Date: 2026-10-19

Persistent cache of encoded thumbnail images.

The image bytes are stored as produced by the thumbnail generator; no
transcoding happens here. Width and height are stored alongside when known
(probed with Pillow if the caller does not pass them).

find() does not judge staleness. Callers combine it with has_up_to_date():

    if not cache.has_up_to_date(identity):
        cache.insert(identity, generator.generate_thumbnail(path))
    image = cache.find(identity)
"""

from __future__ import annotations

import io
import sqlite3

from PIL import Image, UnidentifiedImageError

from tagcache.infra.cache.keyed_cache import KeyedCache
from tagcache.infra.db.cache_store import CacheStore
from tagcache.models.file_identity import FileIdentity
from tagcache.models.thumbnail_record import ThumbnailRecord
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def probe_dimensions(image_bytes: bytes) -> tuple[int | None, int | None]:
    """Read width and height from encoded image bytes (header only).

    Returns:
        (width, height), or (None, None) if the bytes are not a known image

    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        return None, None
    return width, height


class ThumbnailCache(KeyedCache):
    """Thumbnail images keyed by file path, validated by modification time."""

    def __init__(self, store: CacheStore):
        super().__init__(store)
        logger.debug("[ThumbnailCache] Initialized on %s", store.database_path)

    def exists(self, identity: FileIdentity) -> bool:
        """True if any thumbnail is stored for the path (fresh or not)."""
        try:
            return self._stored_timestamp(identity.path) is not None
        except sqlite3.Error as e:
            logger.error("[ThumbnailCache] Lookup failed for %s: %s", identity.name, e)
            return False

    def find(self, identity: FileIdentity) -> bytes | None:
        """Return the stored image bytes for the path, or None."""
        record = self.find_record(identity)
        return None if record is None else record.image

    def find_record(self, identity: FileIdentity) -> ThumbnailRecord | None:
        """Return the stored record for the path, or None.

        The record's identity carries the stored timestamp, which may differ
        from identity.timestamp.
        """
        try:
            row = self._store.query_one(
                "SELECT last_modified, image, width, height FROM thumbnails WHERE path = ?",
                (identity.path,),
            )
        except sqlite3.Error as e:
            logger.error("[ThumbnailCache] Lookup failed for %s: %s", identity.name, e)
            return None

        if row is None:
            return None

        return ThumbnailRecord(
            identity=identity.with_timestamp(int(row["last_modified"])),
            image=bytes(row["image"]),
            width=row["width"],
            height=row["height"],
        )

    def insert(
        self,
        identity: FileIdentity,
        image_bytes: bytes,
        width: int | None = None,
        height: int | None = None,
    ) -> bool:
        """Store a thumbnail for a file identity.

        A record already stored with the same timestamp is left untouched.

        Args:
            identity: File the thumbnail was generated from
            image_bytes: Encoded image
            width: Image width in pixels (probed when None)
            height: Image height in pixels (probed when None)

        Returns:
            True if the record is stored

        """
        if width is None or height is None:
            probed_width, probed_height = probe_dimensions(image_bytes)
            width = probed_width if width is None else width
            height = probed_height if height is None else height

        try:
            with self._store.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO thumbnails (path, last_modified, image, width, height)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(path) DO UPDATE SET
                        last_modified = excluded.last_modified,
                        image = excluded.image,
                        width = excluded.width,
                        height = excluded.height
                    WHERE excluded.last_modified != thumbnails.last_modified
                    """,
                    (identity.path, identity.timestamp, sqlite3.Binary(image_bytes), width, height),
                )
        except sqlite3.Error as e:
            logger.error("[ThumbnailCache] Failed to store thumbnail for %s: %s", identity.name, e)
            return False

        logger.debug(
            "[ThumbnailCache] Stored thumbnail for %s (%d bytes, %sx%s)",
            identity.name,
            len(image_bytes),
            width,
            height,
        )
        return True

    def has_up_to_date(self, identity: FileIdentity) -> bool:
        """False if nothing is stored or the stored timestamp is older."""
        try:
            stored = self._stored_timestamp(identity.path)
        except sqlite3.Error as e:
            logger.error("[ThumbnailCache] Timestamp check failed for %s: %s", identity.name, e)
            return False
        return stored is not None and stored >= identity.timestamp

    def __repr__(self) -> str:
        return f"ThumbnailCache({self._store.database_path})"
