"""
Tests for ravenlite.logger module

Tests cover:
- JSON formatter output and extra fields
- configure_logging() handler installation
- Structured capture/error records
- Duration tracking
"""

import json
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from ravenlite.logger import (
    JSONFormatter,
    configure_logging,
    log_capture,
    log_error,
    track_duration,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger("ravenlite")
    handlers = list(logger.handlers)
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(logging.NOTSET)


def make_record(message, **extra):
    record = logging.LogRecord("ravenlite.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test structured log formatting."""

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record("hello")))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "ravenlite.test"
        assert "timestamp" in data

    def test_extra_fields_merged(self):
        record = make_record("sent", extra_fields={"event_id": "abc", "duration_ms": 1.5})

        data = json.loads(JSONFormatter().format(record))

        assert data["event_id"] == "abc"
        assert data["duration_ms"] == 1.5


class TestConfigureLogging:
    """Test handler installation."""

    def test_installs_json_handler(self, package_logger):
        handler = configure_logging("debug")

        assert handler in package_logger.handlers
        assert isinstance(handler.formatter, JSONFormatter)
        assert package_logger.level == logging.DEBUG

    def test_repeat_call_replaces_handler(self, package_logger):
        first = configure_logging("INFO")
        second = configure_logging("INFO")

        assert first not in package_logger.handlers
        assert second in package_logger.handlers

    def test_keeps_null_handler(self, package_logger):
        configure_logging("INFO")

        assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)

    def test_unknown_level_defaults_to_info(self, package_logger):
        configure_logging("chatty")

        assert package_logger.level == logging.INFO


class TestStructuredRecords:
    """Test capture and error log helpers."""

    def test_log_capture(self, caplog):
        with caplog.at_level(logging.INFO, logger="ravenlite"):
            log_capture("abc", "UDPTransport", "error", 12.3456)

        record = caplog.records[-1]
        assert record.extra_fields["event_id"] == "abc"
        assert record.extra_fields["transport"] == "UDPTransport"
        assert record.extra_fields["duration_ms"] == 12.35
        assert record.extra_fields["is_slow"] is False

    def test_log_error_truncates(self, caplog):
        with caplog.at_level(logging.ERROR, logger="ravenlite"):
            log_error("abc", "ProtocolError", "x" * 1000)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert len(record.extra_fields["error_message"]) == 500


def test_track_duration():
    with track_duration() as elapsed_ms:
        pass

    assert elapsed_ms() >= 0
