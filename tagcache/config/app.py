"""Module: tagcache.config.app

Date: 2026-10-19

Application-level configuration: app info, cache layout, storage tuning,
fetch scheduler defaults, logging settings.
"""

# =====================================
# APPLICATION INFORMATION
# =====================================

APP_NAME = "tagcache"
APP_VERSION = "1.0.0"

# =====================================
# CACHE LAYOUT
# =====================================

# Directory names requested from the cache directory provider
EXIF_CACHE_DIR_NAME = "ExifCache"
THUMBNAIL_CACHE_DIR_NAME = "ThumbnailCache"

# One database file per cache directory
CACHE_DB_FILENAME = "cache.db"

# =====================================
# SQLITE SETTINGS
# =====================================

SQLITE_CONNECT_TIMEOUT = 30.0  # seconds
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"
SQLITE_READ_POOL_SIZE = 8  # Idle read connections kept per store

# =====================================
# FETCH SCHEDULER
# =====================================

FETCH_MAX_WORKERS = None  # Auto-detect from CPU count
FETCH_WORKERS_PER_CPU = 8  # Work is I/O-bound
FETCH_MAX_WORKERS_CAP = 64
SHUTDOWN_GRACE_SECONDS = 60.0

# =====================================
# LOGGING CONFIGURATION
# =====================================

LOG_LEVEL = "INFO"

# Console logging
LOG_TO_CONSOLE = True
LOG_CONSOLE_LEVEL = "INFO"

# File logging
LOG_TO_FILE = True
LOG_FILE_LEVEL = "ERROR"
LOG_FILE_MAX_BYTES = 10_000_000  # 10MB per file
LOG_FILE_BACKUP_COUNT = 5

# Debug file logging
LOG_DEBUG_FILE_ENABLED = False
LOG_DEBUG_FILE_MAX_BYTES = 20_000_000
LOG_DEBUG_FILE_BACKUP_COUNT = 3

# Development logging settings
SHOW_DEV_ONLY_IN_CONSOLE = False
