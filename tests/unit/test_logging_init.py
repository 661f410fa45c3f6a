from __future__ import annotations

import logging
import sys
from io import StringIO

from biis_import.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()

    assert logger.name == LOGGER_NAME == "biis_import"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    """INFO|WARN|ERROR|SUMMARY labels prefix every line."""
    captured_output = StringIO()

    logger = logging.getLogger("test_biis_import_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured_output.getvalue().strip().split('\n')
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_formatter_appends_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "cannot read row 3", None, sys.exc_info())
    text = LabeledFormatter().format(record)
    assert text.startswith("ERROR cannot read row 3\n")
    assert "ValueError: boom" in text


def test_child_loggers_reach_the_configured_handler(capsys):
    setup_logging()
    logging.getLogger("biis_import.services.row_processor").warning("cannot convert 'Currency'")
    assert "WARN cannot convert 'Currency'" in capsys.readouterr().out


def test_log_summary(capsys):
    setup_logging()
    log_summary("rows=1 imported=1")
    assert "SUMMARY rows=1 imported=1" in capsys.readouterr().out


def test_get_logger_returns_configured_logger():
    setup_logger = setup_logging()
    assert get_logger() is setup_logger


def test_setup_logging_idempotent():
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger2.handlers) == 1


def test_reset_logging_removes_handlers():
    logger = setup_logging()
    reset_logging()
    assert logger.handlers == []
    assert logger.propagate is True
    assert setup_logging() is not None
