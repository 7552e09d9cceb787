"""Module: paths.py

Date: 2026-10-19

Centralized path management and cache directory providers.

Platform-specific cache root:
- Windows: %LOCALAPPDATA%/tagcache/cache/
- Linux: $XDG_CACHE_HOME/tagcache/ or ~/.cache/tagcache/
- macOS: ~/Library/Caches/tagcache/

Each cache kind gets its own subdirectory, created on first use:

    <cache_root>/
    ├── ExifCache/
    │   └── cache.db
    └── ThumbnailCache/
        └── cache.db

Usage:
    provider = PlatformCacheDirectoryProvider()
    exif_dir = provider.get_cache_directory("ExifCache")
"""

import os
import platform
from pathlib import Path

from tagcache.config import APP_NAME
from tagcache.core.errors import StorageUnavailable
from tagcache.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class AppPaths:
    """Platform paths for the application (cache root, logs, preferences)."""

    @classmethod
    def get_cache_root(cls) -> Path:
        """Get the platform-specific cache root (not created).

        Returns:
            Path to the cache root directory.

        """
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("LOCALAPPDATA")
            if not base:
                base = str(Path(os.environ.get("USERPROFILE", "")) / "AppData" / "Local")
            return Path(base) / APP_NAME / "cache"

        if system == "Darwin":
            return Path.home() / "Library" / "Caches" / APP_NAME

        xdg_cache = os.environ.get("XDG_CACHE_HOME")
        if xdg_cache:
            return Path(xdg_cache) / APP_NAME
        return Path.home() / ".cache" / APP_NAME

    @classmethod
    def get_logs_dir(cls, cache_root: Path | None = None) -> Path:
        """Get path to the logs directory next to the caches.

        Returns:
            Path to logs directory (created).

        """
        logs_dir = (cache_root or cls.get_cache_root()) / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        return logs_dir

    @classmethod
    def get_preferences_path(cls, cache_root: Path | None = None) -> Path:
        """Get path to the stored preferences file (not created).

        Returns:
            Path to preferences.json.

        """
        return (cache_root or cls.get_cache_root()) / "preferences.json"


class FixedCacheDirectoryProvider:
    """Cache directory provider rooted at an explicit directory."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def get_cache_directory(self, name: str) -> Path:
        """Get (and create on first use) the directory for a named cache.

        Args:
            name: Cache name (e.g. "ExifCache")

        Returns:
            Path to the cache directory

        Raises:
            StorageUnavailable: If the directory cannot be created

        """
        if not name or os.sep in name or (os.altsep and os.altsep in name):
            raise ValueError(f"Invalid cache name: {name!r}")

        directory = self.root / name
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(
                f"Cannot create cache directory {directory}: {e}", directory
            ) from e

        logger.debug("[CacheDirectoryProvider] Using %s", directory, extra={"dev_only": True})
        return directory


class PlatformCacheDirectoryProvider(FixedCacheDirectoryProvider):
    """Cache directory provider rooted at the platform cache directory."""

    def __init__(self) -> None:
        super().__init__(AppPaths.get_cache_root())
