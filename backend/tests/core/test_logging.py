"""
Tests for core/logging module

Formatters, context variables, redaction and the LogTimer context manager.
"""

import json
import logging
import sys

import pytest

from content_studio.core.logging import (
    REDACTED,
    DevelopmentFormatter,
    LoggerAdapter,
    LogTimer,
    StructuredFormatter,
    clear_context,
    get_logger,
    job_id_var,
    request_id_var,
    sanitize_for_logging,
    set_job_id,
    set_request_id,
)


def _record(msg="Test message", level=logging.INFO):
    return logging.LogRecord(
        name="test.module",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


class TestStructuredFormatter:
    """Test suite for StructuredFormatter"""

    def test_format_basic_log(self):
        parsed = json.loads(StructuredFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["timestamp"].endswith("Z")
        assert parsed["logger"] == "test.module"

    def test_includes_correlation_ids(self):
        set_request_id("req-123")
        set_job_id("job-456")

        parsed = json.loads(StructuredFormatter().format(_record()))

        assert parsed["request_id"] == "req-123"
        assert parsed["job_id"] == "job-456"

    def test_extra_fields_are_sanitized(self):
        record = _record()
        record.api_key = "AIza-secret"
        record.stage = "video"

        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["extra"]["api_key"] == REDACTED
        assert parsed["extra"]["stage"] == "video"

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["exception"]["type"] == "ValueError"
        assert parsed["exception"]["message"] == "boom"


class TestDevelopmentFormatter:
    def test_contains_level_and_message(self):
        line = DevelopmentFormatter().format(_record())
        assert "INFO" in line
        assert "Test message" in line

    def test_shows_short_context(self):
        set_request_id("abcdefgh-1234")
        line = DevelopmentFormatter().format(_record())
        assert "req:abcdefgh" in line


class TestSanitize:
    def test_nested_sensitive_keys(self):
        value = {"config": {"credential": "k", "model": "veo"}, "items": [{"token": "t"}]}
        clean = sanitize_for_logging(value)
        assert clean["config"]["credential"] == REDACTED
        assert clean["config"]["model"] == "veo"
        assert clean["items"][0]["token"] == REDACTED

    def test_media_bytes_collapsed(self):
        clean = sanitize_for_logging({"chunk": b"\x00" * 4096, "images": [b"jpg"]})
        assert clean == {"chunk": "<4096 bytes>", "images": ["<3 bytes>"]}

    def test_plain_values_untouched(self):
        assert sanitize_for_logging("hello") == "hello"
        assert sanitize_for_logging(3) == 3


class TestLoggerAdapter:
    def test_bound_extra_and_context_merged(self):
        set_job_id("job-1")
        adapter = get_logger("adapter.test", component="pipeline")
        assert isinstance(adapter, LoggerAdapter)

        _msg, kwargs = adapter.process("hi", {"extra": {"stage": "script"}})

        assert kwargs["extra"]["stage"] == "script"
        assert kwargs["extra"]["component"] == "pipeline"
        assert kwargs["extra"]["job_id"] == "job-1"

    def test_call_site_extra_wins(self):
        adapter = get_logger("adapter.test", component="bound")
        _msg, kwargs = adapter.process("hi", {"extra": {"component": "call"}})
        assert kwargs["extra"]["component"] == "call"


class TestContext:
    def test_clear_context(self):
        set_request_id("r")
        set_job_id("j")
        clear_context()
        assert request_id_var.get() is None
        assert job_id_var.get() is None


class TestLogTimer:
    def test_records_duration(self, caplog):
        logger = get_logger("timer.test")
        with caplog.at_level(logging.INFO, logger="timer.test"):
            with LogTimer(logger, "script stage") as timer:
                pass

        assert timer.duration is not None and timer.duration >= 0
        messages = [r.getMessage() for r in caplog.records]
        assert "Starting: script stage" in messages
        assert "Completed: script stage" in messages

    def test_logs_failure_and_reraises(self, caplog):
        logger = get_logger("timer.test")
        with caplog.at_level(logging.INFO, logger="timer.test"):
            with pytest.raises(RuntimeError):
                with LogTimer(logger, "video stage"):
                    raise RuntimeError("nope")

        failed = [r for r in caplog.records if r.getMessage() == "Failed: video stage"]
        assert failed and failed[0].levelno == logging.ERROR
