"""Module: logger_setup.py

Date: 2026-10-19

Application-wide logging configuration.

ConfigureLogger logs INFO and higher to the console, ERROR and higher to a
rotating <name>.log file, and (optionally) DEBUG and higher to
<name>_debug.log. Levels and sizes come from tagcache.config.

init_logging(app_name, log_dir) is the single entry point used by the CLI.
"""

import contextlib
import logging
import os
import sys
from datetime import datetime

from tagcache.config import (
    LOG_CONSOLE_LEVEL,
    LOG_DEBUG_FILE_BACKUP_COUNT,
    LOG_DEBUG_FILE_ENABLED,
    LOG_DEBUG_FILE_MAX_BYTES,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_LEVEL,
    LOG_FILE_MAX_BYTES,
    LOG_TO_CONSOLE,
    LOG_TO_FILE,
)
from tagcache.utils.logging.logger_factory import get_cached_logger
from tagcache.utils.logging.logger_file_helper import add_file_handler
from tagcache.utils.logging.logger_helper import DevOnlyFilter

CONSOLE_LOG_FORMAT = "[%(levelname)s] %(message)s"


class ConfigureLogger:
    """Configure the root logger once per process.

    Handlers are only installed when the root logger has none, so calling
    this twice (or inside a test runner that already captures logs) never
    duplicates output.
    """

    def __init__(
        self,
        log_name: str = "tagcache",
        log_dir: str = "logs",
        console_level: str = LOG_CONSOLE_LEVEL,
        console_enabled: bool = LOG_TO_CONSOLE,
        file_enabled: bool = LOG_TO_FILE,
        debug_enabled: bool = LOG_DEBUG_FILE_ENABLED,
    ):
        """Install console and rotating file handlers on the root logger.

        Args:
            log_name: Base name for the log files.
            log_dir: Directory to store log files.
            console_level: Level name for the console handler.
            console_enabled: Whether to log to stdout.
            file_enabled: Whether to log errors to a rotating file.
            debug_enabled: Whether to keep a full debug log file.

        """
        self.logger = logging.getLogger()
        self.logger.setLevel(logging.DEBUG)  # Handlers filter levels

        if self.logger.handlers:
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        if console_enabled:
            self._setup_console_handler(getattr(logging, console_level.upper(), logging.INFO))

        if file_enabled:
            add_file_handler(
                logger=self.logger,
                log_path=os.path.join(log_dir, f"{log_name}_{timestamp}.log"),
                level=getattr(logging, LOG_FILE_LEVEL, logging.ERROR),
                max_bytes=LOG_FILE_MAX_BYTES,
                backup_count=LOG_FILE_BACKUP_COUNT,
            )

        if debug_enabled:
            add_file_handler(
                logger=self.logger,
                log_path=os.path.join(log_dir, f"{log_name}_debug_{timestamp}.log"),
                level=logging.DEBUG,
                max_bytes=LOG_DEBUG_FILE_MAX_BYTES,
                backup_count=LOG_DEBUG_FILE_BACKUP_COUNT,
            )

    def _setup_console_handler(self, level: int) -> None:
        """Set up a UTF-8 console handler that hides dev-only messages."""
        console_handler = logging.StreamHandler(sys.stdout)

        with contextlib.suppress(AttributeError, ValueError):
            console_handler.stream.reconfigure(encoding="utf-8")

        console_handler.setLevel(level)
        console_handler.addFilter(DevOnlyFilter())
        console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
        self.logger.addHandler(console_handler)


def init_logging(
    app_name: str = "tagcache",
    log_dir: str = "logs",
    console_level: str = LOG_CONSOLE_LEVEL,
    file_enabled: bool = LOG_TO_FILE,
) -> logging.Logger:
    """Initialize logging for the application.

    Args:
        app_name: Base name for log files.
        log_dir: Directory for log files.
        console_level: Console level name (e.g. "INFO").
        file_enabled: Whether to write the rotating error log.

    Returns:
        The application logger.

    """
    ConfigureLogger(
        log_name=app_name,
        log_dir=log_dir,
        console_level=console_level,
        file_enabled=file_enabled,
    )
    return get_cached_logger(app_name)
