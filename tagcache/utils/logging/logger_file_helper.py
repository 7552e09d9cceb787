"""Module: logger_file_helper.py

Date: 2026-10-19

Attach rotating file handlers to a logger, with optional filtering by
logger name.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

FILE_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class NameFilter(logging.Filter):
    """Pass only records emitted by one logger name."""

    def __init__(self, logger_name: str):
        super().__init__()
        self.logger_name = logger_name

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name == self.logger_name


def add_file_handler(
    logger: logging.Logger,
    log_path: str,
    level: int = logging.INFO,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    filter_by_name: str | None = None,
) -> RotatingFileHandler:
    """Attach a UTF-8 rotating file handler to a logger.

    Args:
        logger: The logger to attach the handler to.
        log_path: Path to the log file.
        level: Logging level for this file handler (e.g., logging.ERROR).
        max_bytes: Maximum file size before rotating.
        backup_count: Number of backup files to keep.
        filter_by_name: Only log messages from loggers with this name.

    Returns:
        The attached handler

    """
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))

    if filter_by_name:
        file_handler.addFilter(NameFilter(filter_by_name))

    logger.addHandler(file_handler)
    return file_handler
