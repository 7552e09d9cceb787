"""Module: artifact_service.py

Date: 2026-10-19

Read-through access to derived artifacts and housekeeping on file events.

The service owns no storage. It combines the caches of a CacheContext with
the host application's EXIF reader and thumbnail generator:

- get_exif_tags / get_thumbnail: serve from cache, regenerate when the
  record is missing, stale or unreadable
- populate_thumbnail: the unit of work run by the fetch scheduler
- prefetch_thumbnails: fan populate_thumbnail out over many files
- file_moved / file_deleted: keep cache keys in step with the filesystem
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from tagcache.core.application_context import CacheContext
from tagcache.core.fetch_scheduler import ConcurrentFetchScheduler
from tagcache.models.exif_tags import ExifTagSet
from tagcache.models.file_identity import FileIdentity
from tagcache.services.interfaces import ExifReader, ThumbnailGenerator
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class ArtifactService:
    """Cached EXIF tags and thumbnails for image files."""

    def __init__(
        self,
        context: CacheContext,
        exif_reader: ExifReader | None = None,
        thumbnail_generator: ThumbnailGenerator | None = None,
    ):
        self._context = context
        self._exif_reader = exif_reader
        self._thumbnail_generator = thumbnail_generator

    @property
    def context(self) -> CacheContext:
        return self._context

    def get_exif_tags(self, file_path: str | os.PathLike[str]) -> ExifTagSet | None:
        """Return the EXIF tags of a file, reading and caching them on a miss.

        Args:
            file_path: Image file

        Returns:
            The tag set, or None if the file is gone, has no EXIF data or
            no reader is configured

        """
        identity = self._identify(file_path)
        if identity is None:
            return None

        result = self._context.metadata_cache.get(identity)
        if result.is_hit:
            return result.value

        if self._exif_reader is None:
            logger.debug(
                "[ArtifactService] No EXIF reader, cannot fill %s", identity.name,
                extra={"dev_only": True},
            )
            return None

        tags = self._exif_reader.read_exif_tags(Path(identity.path))
        if tags is None:
            return None

        self._context.metadata_cache.put(identity, tags)
        return dataclasses.replace(tags, last_modified=identity.timestamp)

    def get_thumbnail(self, file_path: str | os.PathLike[str]) -> bytes | None:
        """Return the thumbnail of a file, generating and caching it if needed."""
        identity = self._identify(file_path)
        if identity is None:
            return None

        cache = self._context.thumbnail_cache
        if not cache.has_up_to_date(identity):
            self._generate_thumbnail(identity)
        return cache.find(identity)

    def populate_thumbnail(self, file_path: str | os.PathLike[str]) -> bool:
        """Generate and store the thumbnail of a file unless it is up to date.

        Errors from the generator (and a vanished file) propagate, so the
        fetch scheduler records them as failures.

        Returns:
            True if a new thumbnail was stored

        """
        identity = FileIdentity.from_path(file_path)
        if self._context.thumbnail_cache.has_up_to_date(identity):
            return False
        return self._generate_thumbnail(identity)

    def _generate_thumbnail(self, identity: FileIdentity) -> bool:
        if self._thumbnail_generator is None:
            logger.debug(
                "[ArtifactService] No thumbnail generator, cannot fill %s", identity.name,
                extra={"dev_only": True},
            )
            return False

        image = self._thumbnail_generator.generate_thumbnail(Path(identity.path))
        if not image:
            logger.debug("[ArtifactService] No thumbnail produced for %s", identity.name)
            return False
        return self._context.thumbnail_cache.insert(identity, image)

    def prefetch_thumbnails(
        self,
        paths: Iterable[str | os.PathLike[str]],
        on_complete: Callable[[Any], Any],
        on_failure: Callable[[Any, BaseException], Any] | None = None,
    ) -> ConcurrentFetchScheduler:
        """Populate thumbnails for many files concurrently.

        The returned scheduler is still accepting; the caller decides when to
        shut it down (and with which grace period).

        Args:
            paths: Files to populate
            on_complete: Called once per file whose population succeeded
            on_failure: Called with the path and error of each failed file

        Returns:
            The started scheduler

        """
        scheduler = self._context.new_scheduler(
            self.populate_thumbnail, on_complete, on_failure=on_failure, name="thumbnails"
        )
        scheduler.start()
        submitted = 0
        for path in paths:
            scheduler.submit(path)
            submitted += 1
        logger.info("[ArtifactService] Prefetching %d thumbnails", submitted)
        return scheduler

    def file_moved(
        self, old_path: str | os.PathLike[str], new_path: str | os.PathLike[str]
    ) -> dict[str, bool]:
        """Move cached artifacts of a renamed or moved file to its new path.

        Returns:
            Per cache name, whether a record was moved

        """
        moved = {
            name: cache.rename(old_path, new_path)
            for name, cache in self._context.caches().items()
        }
        logger.debug("[ArtifactService] File moved %s -> %s: %s", old_path, new_path, moved)
        return moved

    def file_deleted(self, file_path: str | os.PathLike[str]) -> dict[str, bool]:
        """Drop cached artifacts of a deleted file.

        Returns:
            Per cache name, whether a record was removed

        """
        deleted = {
            name: cache.delete_path(file_path)
            for name, cache in self._context.caches().items()
        }
        logger.debug("[ArtifactService] File deleted %s: %s", file_path, deleted)
        return deleted

    @staticmethod
    def _identify(file_path: str | os.PathLike[str]) -> FileIdentity | None:
        try:
            return FileIdentity.from_path(file_path)
        except OSError as e:
            logger.warning("[ArtifactService] Cannot stat %s: %s", file_path, e)
            return None
