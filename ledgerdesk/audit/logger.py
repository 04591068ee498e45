"""
Audit Logger

DESIGN DECISION: Every write-relevant action in the system is logged.
This provides:
1. Complete traceability of what reached the ledger
2. Debugging capability when a batch is rejected
3. A record of partial failures (push applied, delete failed)

The audit logger:
- Is async so it fits between ledger calls
- Gracefully handles failures (a broken audit sink never breaks a write)
- Supports correlation IDs to trace a prepare/execute pair
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledgerdesk.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from ledgerdesk.services.storage import AuditStorageInterface


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Logs go to stderr; stdout is left free for tool transports.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("ledgerdesk.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_bulk_prepared(
        self,
        preparation_id: str,
        created: int,
        updated: int,
        deleted: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a staged preparation."""
        await self.log(AuditEventBuilder.bulk_prepared(
            preparation_id=preparation_id,
            created=created,
            updated=updated,
            deleted=deleted,
            correlation_id=correlation_id,
        ))

    async def log_bulk_prepare_failed(
        self,
        operation_count: int,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected bulk batch."""
        await self.log(AuditEventBuilder.bulk_prepare_failed(
            operation_count=operation_count,
            error_code=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    async def log_bulk_executed(
        self,
        preparation_id: str,
        created: int,
        updated: int,
        deleted: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a fully executed preparation."""
        await self.log(AuditEventBuilder.bulk_executed(
            preparation_id=preparation_id,
            created=created,
            updated=updated,
            deleted=deleted,
            correlation_id=correlation_id,
        ))

    async def log_bulk_execute_failed(
        self,
        preparation_id: str,
        stage: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an execution that failed at the push or delete stage."""
        await self.log(AuditEventBuilder.bulk_execute_failed(
            preparation_id=preparation_id,
            stage=stage,
            error_code=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    async def log_bulk_applied(
        self,
        created: int,
        updated: int,
        deleted: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a bulk batch written without staging."""
        await self.log(AuditEventBuilder.bulk_applied(
            created=created,
            updated=updated,
            deleted=deleted,
            correlation_id=correlation_id,
        ))

    async def log_transaction_created(
        self,
        transaction_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_created(
            transaction_id=transaction_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    async def log_ledger_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed ledger client call."""
        await self.log(AuditEventBuilder.ledger_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new caller action (e.g., a prepare call).
    """
    return uuid4()
