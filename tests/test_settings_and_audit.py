"""Tests for configuration loading and the audit logger."""

import pytest
from pydantic import ValidationError

from ledgerdesk.audit import AuditLogger
from ledgerdesk.config import AppSettings, BulkSettings, get_settings, validate_all_settings
from ledgerdesk.errors import UpstreamError
from ledgerdesk.models.audit import AuditEventBuilder, AuditEventType
from ledgerdesk.services.storage import InMemoryAuditStorage


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_bulk_defaults(self, monkeypatch):
        monkeypatch.delenv("BULK_MAX_OPERATIONS", raising=False)
        assert BulkSettings().max_operations == 20

    def test_bulk_from_env(self, monkeypatch):
        monkeypatch.setenv("BULK_MAX_OPERATIONS", "50")
        assert BulkSettings().max_operations == 50

    def test_bulk_limit_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("BULK_MAX_OPERATIONS", "0")
        with pytest.raises(ValidationError):
            BulkSettings()

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert AppSettings().log_level == "WARNING"

    def test_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            AppSettings()

    def test_debug_mode_forces_debug_level(self, monkeypatch):
        monkeypatch.setenv("DEBUG_MODE", "true")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert AppSettings().effective_log_level == "DEBUG"

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("BULK_MAX_OPERATIONS", "not-a-number")
        get_settings.cache_clear()
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()
        assert results["bulk"] is False
        assert "bulk_error" in results
        assert results["app"] is True


class BrokenAuditStorage(InMemoryAuditStorage):
    async def append_event(self, event):
        raise RuntimeError("disk full")


class TestAuditLogger:
    """Tests for AuditLogger."""

    @pytest.mark.asyncio
    async def test_events_reach_storage(self):
        storage = InMemoryAuditStorage()
        audit_logger = AuditLogger(storage)

        await audit_logger.log_transaction_deleted("tx-1")

        recent = await storage.get_recent_events()
        assert recent[0].event_type == AuditEventType.TRANSACTION_DELETED
        assert recent[0].entity_id == "tx-1"

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_raise(self):
        audit_logger = AuditLogger(BrokenAuditStorage())
        event = AuditEventBuilder.ledger_error(operation="list_tags", error_message="boom")

        assert await audit_logger.log(event) is False

    @pytest.mark.asyncio
    async def test_local_only_logger(self):
        audit_logger = AuditLogger()
        await audit_logger.log_bulk_execute_failed(
            preparation_id="prep-1",
            stage="push",
            error=UpstreamError("ledger push_transactions failed"),
        )
