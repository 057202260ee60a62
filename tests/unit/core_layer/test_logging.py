"""
Unit Tests for Logging Module

Tests thread context, stage logging, and secret redaction.
"""

from unittest.mock import MagicMock

import pytest

from src.core.config.constants import Stage
from src.core.logging.logger import (
    add_log_level_name,
    add_thread_id,
    clear_thread_id,
    get_logger,
    get_thread_id,
    log_stage,
    redact_secrets,
    set_thread_id,
)


@pytest.mark.unit
class TestLoggerCreation:
    def test_get_logger_returns_logger_instance(self):
        logger = get_logger(__name__)
        assert hasattr(logger, "info")


@pytest.mark.unit
class TestThreadContext:
    """Test thread ID context management."""

    def teardown_method(self):
        clear_thread_id()

    def test_set_and_get_thread_id(self):
        set_thread_id("thread-1")
        assert get_thread_id() == "thread-1"

    def test_clear_thread_id(self):
        set_thread_id("thread-1")
        clear_thread_id()
        assert get_thread_id() is None

    def test_thread_id_is_injected_into_events(self):
        set_thread_id("thread-2")
        event = add_thread_id(None, "info", {"event": "x"})
        assert event["thread_id"] == "thread-2"

    def test_explicit_thread_id_wins(self):
        set_thread_id("thread-2")
        event = add_thread_id(None, "info", {"event": "x", "thread_id": "explicit"})
        assert event["thread_id"] == "explicit"

    def test_no_thread_id_when_unset(self):
        clear_thread_id()
        assert "thread_id" not in add_thread_id(None, "info", {"event": "x"})


@pytest.mark.unit
class TestLogStage:
    def test_stage_enum_is_logged_by_value(self):
        logger = MagicMock()
        log_stage(logger, Stage.CACHE_LOOKUP, "Cache miss", cache_key="k")

        logger.info.assert_called_once_with("Cache miss", stage="4.0_CACHE_LOOKUP", cache_key="k")

    def test_plain_string_stage_and_level(self):
        logger = MagicMock()
        log_stage(logger, "9.9", "Custom", level="WARNING")

        logger.warning.assert_called_once_with("Custom", stage="9.9")


@pytest.mark.unit
class TestRedaction:
    """Signatures and credentials never reach the log sink."""

    def test_signature_in_query_string_is_redacted(self):
        event = redact_secrets(None, "info", {"path": "/?url=x&sig=abcdef0123&version=1"})
        assert event["path"] == "/?url=x&sig=[REDACTED]&version=1"

    def test_leading_signature_parameter_is_redacted(self):
        event = redact_secrets(None, "info", {"query": "?sig=deadbeef"})
        assert event["query"] == "?sig=[REDACTED]"

    def test_bearer_token_is_redacted(self):
        event = redact_secrets(None, "info", {"event": "calling with Bearer tok.en-123"})
        assert event["event"] == "calling with Bearer [REDACTED]"

    @pytest.mark.parametrize("field", ["sig", "signature", "secret", "Authorization", "api_token"])
    def test_sensitive_fields_are_redacted(self, field):
        event = redact_secrets(None, "info", {field: "value"})
        assert event[field] == "[REDACTED]"

    def test_other_fields_untouched(self):
        event = redact_secrets(None, "info", {"count": 3, "version": "1", "signature_length": 64})

        assert event == {"count": 3, "version": "1", "signature_length": 64}


@pytest.mark.unit
class TestLevelName:
    def test_level_is_uppercased(self):
        assert add_log_level_name(None, "info", {"level": "info"})["level"] == "INFO"

    def test_missing_level_is_left_alone(self):
        assert add_log_level_name(None, "info", {}) == {}
