"""Module: logger_factory.py

Date: 2026-10-19

Cached module loggers.

Every tagcache module does ``logger = get_cached_logger(__name__)`` at import
time. Scheduler worker threads import lazily too, so the cache is guarded by
a lock and each name resolves to exactly one configured Logger.
"""

import logging
import threading

from tagcache.utils.logging.logger_helper import get_logger

DEFAULT_LOGGER_NAME = "tagcache"


class LoggerFactory:
    """One Logger per module name, created on first request."""

    _loggers: dict[str, logging.Logger] = {}
    _lock = threading.Lock()

    @classmethod
    def get_logger(cls, name: str | None = None) -> logging.Logger:
        """Return the cached logger for name (the package logger when None)."""
        name = name or DEFAULT_LOGGER_NAME
        with cls._lock:
            logger = cls._loggers.get(name)
            if logger is None:
                logger = cls._loggers[name] = get_logger(name)
            return logger

    @classmethod
    def get_cached_names(cls) -> list[str]:
        with cls._lock:
            return sorted(cls._loggers)

    @classmethod
    def reset(cls) -> None:
        """Forget cached loggers (the Logger objects stay registered with logging)."""
        with cls._lock:
            cls._loggers.clear()


def get_cached_logger(name: str | None = None) -> logging.Logger:
    """Shortcut for LoggerFactory.get_logger."""
    return LoggerFactory.get_logger(name)
