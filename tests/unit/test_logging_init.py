from __future__ import annotations
import logging

from invoice_import.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)


def test_setup_logging_is_idempotent(clean_logging):
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert first.name == LOGGER_NAME
    assert len(first.handlers) == 1
    assert first.propagate is False


def test_labels_written_to_stdout(clean_logging, capsys):
    logger = setup_logging()
    logger.info("hello")
    logger.warning("careful")
    logger.error("boom")
    log_summary("files=1/1")
    out = capsys.readouterr().out.splitlines()
    assert out == ["INFO hello", "WARN careful", "ERROR boom", "SUMMARY files=1/1"]


def test_child_loggers_share_handler(clean_logging, capsys):
    setup_logging()
    logging.getLogger(f"{LOGGER_NAME}.services.pipeline").info("from child")
    assert "INFO from child" in capsys.readouterr().out


def test_debug_hidden_by_default(clean_logging, capsys):
    get_logger().debug("hidden")
    assert capsys.readouterr().out == ""


def test_formatter_unknown_level_uses_level_name():
    record = logging.LogRecord("x", 5, __file__, 1, "msg", None, None)
    record.levelname = "TRACE"
    assert LabeledFormatter().format(record) == "TRACE msg"
    assert LabeledFormatter.LEVEL_LABELS[SUMMARY_LEVEL] == "SUMMARY"
