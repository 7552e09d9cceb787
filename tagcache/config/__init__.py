"""Module: tagcache.config

Date: 2026-10-19

Configuration package for tagcache.

- app: Application info, cache names, storage and scheduler defaults, logging
- resolution: Layered setting resolution (environment > preferences > defaults)

Constants are re-exported from this module:
    from tagcache.config import APP_NAME, CACHE_DB_FILENAME
"""

from tagcache.config.app import *  # noqa: F401, F403
