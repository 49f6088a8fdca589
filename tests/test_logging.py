"""Tests for logging setup helpers."""

import json
import logging
import sys

import pytest

from quizadmin.utils.logging import setup_logging
from quizadmin.utils.logging_config import (
    DocumentContextFilter,
    StructuredFormatter,
    configure_logging,
)


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def _record(msg="hello", **extra):
    record = logging.LogRecord("quizadmin.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_json_payload(self):
        payload = json.loads(StructuredFormatter().format(_record(status_code=502, counts={"a": 1})))
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "quizadmin.test"
        assert payload["status_code"] == 502
        assert payload["counts"] == {"a": 1}
        assert "document" not in payload

    def test_exception_included(self):
        try:
            raise RuntimeError("bad")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(StructuredFormatter().format(record))
        assert payload["exception"]["type"] == "RuntimeError"
        assert payload["exception"]["message"] == "bad"


def test_document_filter_tags_records():
    record = _record()
    assert DocumentContextFilter("pp_1").filter(record) is True
    assert record.document == "pp_1"


def test_configure_logging_writes_json_file(tmp_path, restore_root_logging):
    log_file = tmp_path / "logs" / "app.jsonl"
    configure_logging("DEBUG", log_file=str(log_file), structured=True, document="qz_9")
    logging.getLogger("quizadmin.test").info("saved", extra={"record_id": "qz_9"})
    for handler in logging.getLogger().handlers:
        handler.flush()

    line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "saved"
    assert payload["document"] == "qz_9"
    assert payload["record_id"] == "qz_9"


def test_setup_logging_file_handler(tmp_path):
    logger = setup_logging(str(tmp_path), "run.log", "DEBUG", name="quizadmin.test_setup")
    try:
        logger.debug("written")
        for handler in logger.handlers:
            handler.flush()
        assert "written" in (tmp_path / "run.log").read_text(encoding="utf-8")
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
