"""
Unit Tests for Logging Module

Tests logger creation, trace context, processors and log_stage.
"""

from unittest.mock import MagicMock

import pytest

from src.core.config.constants import Stage
from src.core.logging.logger import (
    add_log_level_name,
    add_timestamp,
    add_trace_id,
    clear_trace_id,
    get_logger,
    get_trace_id,
    log_stage,
    redact_credentials,
    set_trace_id,
    setup_logging,
)


@pytest.mark.unit
class TestLoggerCreation:
    """Test logger creation and configuration."""

    def test_get_logger_returns_logger_instance(self):
        """Test that get_logger returns a logger instance."""
        logger = get_logger(__name__)
        assert logger is not None
        assert hasattr(logger, "info")

    def test_setup_logging_accepts_both_formats(self):
        """Test that setup_logging configures json and console renderers."""
        setup_logging(log_level="DEBUG", log_format="json")
        setup_logging(log_level="INFO", log_format="console")
        assert hasattr(get_logger("test"), "debug")


@pytest.mark.unit
class TestTraceContext:
    """Test trace ID context management."""

    def test_set_and_get_trace_id(self):
        """Test that set_trace_id stores the trace ID."""
        set_trace_id("trace-123")
        assert get_trace_id() == "trace-123"
        clear_trace_id()

    def test_clear_trace_id(self):
        """Test that clear_trace_id resets the context."""
        set_trace_id("trace-123")
        clear_trace_id()
        assert get_trace_id() is None

    def test_add_trace_id_processor(self):
        """Test that the processor injects the trace ID only when set."""
        clear_trace_id()
        assert "trace_id" not in add_trace_id(None, "info", {"event": "x"})

        set_trace_id("trace-456")
        assert add_trace_id(None, "info", {"event": "x"})["trace_id"] == "trace-456"
        clear_trace_id()


@pytest.mark.unit
class TestProcessors:
    """Test custom structlog processors."""

    def test_add_timestamp_uses_utc_z_suffix(self):
        """Test that timestamps are ISO 8601 UTC with a Z suffix."""
        event = add_timestamp(None, "info", {"event": "x"})
        assert event["timestamp"].endswith("Z")

    def test_add_log_level_name_uppercases(self):
        """Test that the level name is upper-cased."""
        assert add_log_level_name(None, "info", {"level": "info"})["level"] == "INFO"

    def test_redacts_url_userinfo(self):
        """Test that URL credentials are removed from fields."""
        event = redact_credentials(None, "info", {"event": "probe", "address": "http://user:pw@host:80/health"})
        assert event["address"] == "http://[REDACTED]@host:80/health"

    def test_redacts_secret_parameters(self):
        """Test that token / password query values are removed."""
        event = redact_credentials(None, "info", {"event": "GET /x?token=abc&password=def&page=2"})
        assert "abc" not in event["event"]
        assert "def" not in event["event"]
        assert "page=2" in event["event"]

    def test_non_string_fields_untouched(self):
        """Test that non-string values pass through."""
        event = redact_credentials(None, "info", {"event": "x", "latency_ms": 1.5})
        assert event["latency_ms"] == 1.5


@pytest.mark.unit
class TestLogStageFunction:
    """Test the log_stage utility function."""

    def test_log_stage_calls_logger(self):
        """Test that log_stage calls the logger with the stage field."""
        mock_logger = MagicMock()

        log_stage(mock_logger, Stage.ENGINE_INIT, "Engine ready", platform="linux")

        mock_logger.info.assert_called_once_with("Engine ready", stage=Stage.ENGINE_INIT, platform="linux")

    def test_log_stage_with_different_levels(self):
        """Test log_stage with different log levels."""
        mock_logger = MagicMock()

        log_stage(mock_logger, Stage.PROBE_RESULT, "Debug Stage", level="debug")
        mock_logger.debug.assert_called_once()

        log_stage(mock_logger, Stage.PROBE_FALLBACK, "Warning Stage", level="WARNING")
        mock_logger.warning.assert_called_once()
