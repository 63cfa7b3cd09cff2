"""Tests for structured logging"""
import json
import logging

import pytest

from variant_engine.core.config import config
from variant_engine.core.logger import ConsoleFormatter, JSONFormatter, StructuredLogger
from variant_engine.utils.correlation_id import correlation_id_context, set_correlation_id


@pytest.fixture
def structured():
    """StructuredLogger writing to its own logger name"""
    return StructuredLogger(name="variant_engine.tests")


@pytest.fixture(autouse=True)
def reset_correlation_id():
    token = correlation_id_context.set("")
    yield
    correlation_id_context.reset(token)


def make_record(message, **extra):
    record = logging.LogRecord("variant_engine", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestBuildLogEntry:
    """Test structured log entries"""

    def test_entry_fields(self, structured):
        entry = structured._build_log_entry("info", "Generated variants", metadata={"count": 6})

        assert entry["level"] == "INFO"
        assert entry["message"] == "Generated variants"
        assert entry["service"] == config.service_name
        assert entry["metadata"] == {"count": 6}
        assert entry["correlationId"] is None

    def test_correlation_id_from_context(self, structured):
        """Test the context correlation ID is used when none is passed"""
        set_correlation_id("req-42")
        assert structured._build_log_entry("info", "x")["correlationId"] == "req-42"

    def test_explicit_correlation_id_wins(self, structured):
        set_correlation_id("req-42")
        entry = structured._build_log_entry("info", "x", correlation_id="batch-7")
        assert entry["correlationId"] == "batch-7"


class TestErrorMetadata:
    """Test error details attached to warning and error entries"""

    def test_exception(self):
        metadata = StructuredLogger._with_error({"index": 2}, ValueError("bad image"))
        assert metadata == {
            "index": 2,
            "error": {"type": "ValueError", "message": "bad image"},
        }

    def test_string_error(self):
        assert StructuredLogger._with_error(None, "failed") == {"error": {"message": "failed"}}

    def test_no_error(self):
        assert StructuredLogger._with_error(None, None) == {}


class TestFormatters:
    """Test JSON and console formatters"""

    def test_json_passthrough(self):
        """Test pre-serialised entries are emitted unchanged"""
        payload = json.dumps({"message": "hello"})
        assert JSONFormatter().format(make_record(payload)) == payload

    def test_json_plain_message(self):
        output = json.loads(JSONFormatter().format(make_record("plain", metadata={"a": 1})))
        assert output["message"] == "plain"
        assert output["level"] == "INFO"
        assert output["metadata"] == {"a": 1}

    def test_console_appends_metadata(self):
        line = ConsoleFormatter().format(make_record("Generated", metadata={"count": 6}))
        assert "INFO" in line
        assert "Generated" in line
        assert '{"count": 6}' in line

    def test_logger_does_not_propagate(self, structured):
        """Test handlers stay on the package logger"""
        assert structured._logger.propagate is False
