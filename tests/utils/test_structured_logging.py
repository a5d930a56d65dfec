"""Tests for the structlog processors and helpers."""

from unittest.mock import MagicMock

import pytest

from lnquery.utils.logging import (
    LogPerformance,
    add_app_context,
    add_correlation_id,
    clear_correlation_id,
    filter_sensitive_data,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationId:
    """Test correlation id propagation."""

    def test_generated_and_cleared(self):
        correlation_id = set_correlation_id()

        assert get_correlation_id() == correlation_id
        assert add_correlation_id(None, "info", {"event": "x"})["correlation_id"] == correlation_id

        clear_correlation_id()
        assert get_correlation_id() is None

    def test_explicit_value_not_overwritten(self):
        set_correlation_id("abc")
        try:
            event = add_correlation_id(None, "info", {"event": "x", "correlation_id": "mine"})
            assert event["correlation_id"] == "mine"
        finally:
            clear_correlation_id()


class TestProcessors:
    """Test event dict processors."""

    def test_sensitive_keys_redacted(self):
        event = filter_sensitive_data(
            None,
            "info",
            {"event": "connect", "macaroon_path": "/x/admin.macaroon", "remote_pubkey": "02ab"},
        )

        assert event["macaroon_path"] == "[REDACTED]"
        assert event["remote_pubkey"] == "02ab"
        assert event["event"] == "connect"

    def test_error_text_sanitized(self):
        event = filter_sensitive_data(
            None, "error", {"event": "channel_fetch_failed", "error": "open /home/u/.lnd/tls.cert"}
        )
        assert event["error"] == "open [REDACTED_CERT_PATH]"

    def test_nested_mapping_redacted(self):
        event = filter_sensitive_data(
            None,
            "info",
            {"event": "gateway_connect", "lnd": {"host": "localhost:10009", "tls_cert_path": "/x/tls.cert"}},
        )

        assert event["lnd"] == {"host": "localhost:10009", "tls_cert_path": "[REDACTED]"}

    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "x"})
        assert event["app"] == "lnquery"
        assert "version" in event


class TestLogPerformance:
    """Test the timing context manager."""

    def test_logs_completion(self):
        logger = MagicMock()

        with LogPerformance("alias_enrichment", logger):
            pass

        logger.debug.assert_called_once_with("alias_enrichment_started")
        assert logger.info.call_args.args == ("alias_enrichment_completed",)
        assert logger.info.call_args.kwargs["operation"] == "alias_enrichment"

    def test_logs_failure_and_reraises(self):
        logger = MagicMock()

        with pytest.raises(RuntimeError):
            with LogPerformance("alias_enrichment", logger):
                raise RuntimeError("boom")

        assert logger.error.call_args.args == ("alias_enrichment_failed",)
        assert logger.error.call_args.kwargs["error_type"] == "RuntimeError"
