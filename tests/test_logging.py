"""Tests for the logging helpers.

Date: 2026-10-19

Covers:
- cached loggers are shared and Unicode-safe
- dev-only records are hidden from the console filter
- file handlers write UTF-8 and honour name filters
"""

import logging

import pytest

from tagcache.utils.logging.logger_factory import LoggerFactory, get_cached_logger
from tagcache.utils.logging.logger_file_helper import add_file_handler
from tagcache.utils.logging.logger_helper import DevOnlyFilter, safe_text


def _record(name="tagcache.test", **extra):
    record = logging.LogRecord(name, logging.INFO, __file__, 1, "message", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_cached_logger_is_shared():
    first = get_cached_logger("tagcache.test.shared")
    second = get_cached_logger("tagcache.test.shared")

    assert first is second
    assert first.propagate
    assert "tagcache.test.shared" in LoggerFactory.get_cached_names()


@pytest.mark.unit
def test_cached_logger_emits_through_root(caplog):
    logger = get_cached_logger("tagcache.test.emit")

    with caplog.at_level(logging.INFO):
        logger.info("[Test] stored %d records for %s", 3, "Café.jpg")

    assert "[Test] stored 3 records for Café.jpg" in caplog.text


@pytest.mark.unit
def test_safe_text_replaces_typographic_characters():
    assert safe_text("a → b … c") == "a -> b ... c"


@pytest.mark.unit
def test_dev_only_filter():
    hidden = DevOnlyFilter(show_dev_only=False)
    shown = DevOnlyFilter(show_dev_only=True)

    assert hidden.filter(_record())
    assert not hidden.filter(_record(dev_only=True))
    assert shown.filter(_record(dev_only=True))


@pytest.mark.unit
def test_file_handler_writes_utf8_and_filters_by_name(tmp_path):
    log_path = tmp_path / "logs" / "rename.log"
    logger = logging.getLogger("tagcache.test.files")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    handler = add_file_handler(
        logger, str(log_path), level=logging.INFO, filter_by_name="tagcache.test.files"
    )
    try:
        logger.info("renamed Ελληνικά.jpg")
        logger.debug("below level")
        handler.flush()
    finally:
        logger.removeHandler(handler)
        handler.close()

    content = log_path.read_text(encoding="utf-8")
    assert "renamed Ελληνικά.jpg" in content
    assert "below level" not in content
