"""Module: logger_helper.py

Date: 2026-10-19

Logger construction shared by the factory and the setup code.

File names in this domain routinely carry non-ASCII characters, and log
messages include them verbatim. Loggers returned by get_logger() retry a
message with ASCII replacements if a console stream cannot encode it,
instead of losing the record.

Records logged with extra={"dev_only": True} are noisy per-file traces;
DevOnlyFilter keeps them out of the console while file handlers store them.
"""

import logging
import re
from functools import partial

from tagcache.config import SHOW_DEV_ONLY_IN_CONSOLE

_ASCII_FALLBACKS = {
    "→": "->",
    "—": "--",
    "–": "-",
    "…": "...",
}
_FALLBACK_PATTERN = re.compile("|".join(map(re.escape, _ASCII_FALLBACKS)))

_SAFE_METHODS = ("debug", "info", "warning", "error", "critical")


def safe_text(text: str) -> str:
    """Replace typographic characters some consoles cannot encode."""
    return _FALLBACK_PATTERN.sub(lambda match: _ASCII_FALLBACKS[match.group(0)], text)


def safe_log(log_method, message, *args, **kwargs) -> None:
    """Call log_method, retrying with safe_text() on UnicodeEncodeError."""
    if not isinstance(message, str):
        message = repr(message)
    try:
        log_method(message, *args, **kwargs)
    except UnicodeEncodeError:
        log_method(safe_text(message), *args, **kwargs)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a propagating logger whose level methods go through safe_log.

    Handlers live on the root logger only (see logger_setup), so any handler
    attached directly to this logger is removed.
    """
    logger = logging.getLogger(name or "tagcache")
    logger.propagate = True
    logger.handlers.clear()

    if not getattr(logger, "_tagcache_safe", False):
        for method_name in _SAFE_METHODS:
            setattr(logger, method_name, partial(safe_log, getattr(logger, method_name)))
        logger._tagcache_safe = True

    return logger


class DevOnlyFilter(logging.Filter):
    """Drop dev-only records unless show_dev_only is set."""

    def __init__(self, show_dev_only: bool = SHOW_DEV_ONLY_IN_CONSOLE):
        super().__init__()
        self.show_dev_only = show_dev_only

    def filter(self, record: logging.LogRecord) -> bool:
        return self.show_dev_only or not getattr(record, "dev_only", False)
