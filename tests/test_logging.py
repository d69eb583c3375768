"""Tests for logging setup."""

import logging

import pytest

from strata.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_strata_logger():
    yield
    logger = logging.getLogger("strata")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_log_file_gets_debug_records(tmp_path):
    log = tmp_path / "strata.log"
    setup_logging(log_file=log)
    get_logger("scanning.extractor").debug("a.h: skipped:generated")
    text = log.read_text()
    assert "a.h: skipped:generated" in text
    assert "strata.scanning.extractor" in text


def test_console_level_follows_flags():
    logger = setup_logging(quiet=True)
    (handler,) = logger.handlers
    assert handler.level == logging.ERROR
    assert logger.level == logging.ERROR
    assert setup_logging(verbose=True).level == logging.DEBUG


def test_reconfiguring_replaces_handlers(tmp_path):
    setup_logging(log_file=tmp_path / "first.log")
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_root_logger_untouched():
    root_handlers = list(logging.getLogger().handlers)
    setup_logging(verbose=True)
    assert logging.getLogger().handlers == root_handlers
    assert get_logger().propagate is False


def test_get_logger_prefixes_names():
    assert get_logger("graph.builder").name == "strata.graph.builder"
    assert get_logger("strata.api").name == "strata.api"
