"""
Audit Models for ledgerdesk

Every write-relevant action is recorded as an audit event:
1. Which batches were prepared, executed or rejected
2. Which single transactions were created or deleted
3. Which ledger calls failed

DESIGN DECISION: Events are immutable once built. Storage backends only append.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledgerdesk.models.ledger import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Two-phase bulk workflow
    BULK_PREPARED = "bulk_prepared"
    BULK_PREPARE_FAILED = "bulk_prepare_failed"
    BULK_EXECUTED = "bulk_executed"
    BULK_EXECUTE_FAILED = "bulk_execute_failed"

    # Direct writes
    BULK_APPLIED = "bulk_applied"
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_DELETED = "transaction_deleted"

    # Failures outside our control
    LEDGER_ERROR = "ledger_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One auditable occurrence in the ledgerdesk workflow.

    Events are emitted by the flow and never mutated afterwards.
    """

    # Event
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Event ID"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="UTC time the event was built"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="What happened"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="How serious it is"
    )

    # What it is about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'preparation', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Preparation key or transaction ID"
    )

    # Ties a prepare to its execute, and a flow call to its ledger errors
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one prepare/execute pair)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary for humans"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Counts, stage, operation name and similar structured data"
    )

    # Failures only
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Factory methods, one per AuditEventType.

    Usage:
        event = AuditEventBuilder.bulk_prepared(preparation_id, 2, 1, 0)
        event = AuditEventBuilder.ledger_error("push_transactions", str(e))
    """

    @staticmethod
    def bulk_prepared(
        preparation_id: str,
        created: int,
        updated: int,
        deleted: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_PREPARED,
            entity_type="preparation",
            entity_id=preparation_id,
            correlation_id=correlation_id,
            description=(
                f"Bulk batch prepared: {created} to create, "
                f"{updated} to update, {deleted} to delete"
            ),
            details={
                "created": created,
                "updated": updated,
                "deleted": deleted,
            },
        )

    @staticmethod
    def bulk_prepare_failed(
        operation_count: int,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_PREPARE_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Bulk batch of {operation_count} operations rejected",
            details={"operation_count": operation_count},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def bulk_executed(
        preparation_id: str,
        created: int,
        updated: int,
        deleted: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_EXECUTED,
            entity_type="preparation",
            entity_id=preparation_id,
            correlation_id=correlation_id,
            description=(
                f"Bulk batch executed: {created} created, "
                f"{updated} updated, {deleted} deleted"
            ),
            details={
                "created": created,
                "updated": updated,
                "deleted": deleted,
            },
        )

    @staticmethod
    def bulk_execute_failed(
        preparation_id: str,
        stage: str,
        error_code: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_EXECUTE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="preparation",
            entity_id=preparation_id,
            correlation_id=correlation_id,
            description=f"Bulk execution failed during {stage}",
            details={"stage": stage},
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def bulk_applied(
        created: int,
        updated: int,
        deleted: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_APPLIED,
            correlation_id=correlation_id,
            description=(
                f"Bulk batch applied: {created} created, "
                f"{updated} updated, {deleted} deleted"
            ),
            details={
                "created": created,
                "updated": updated,
                "deleted": deleted,
            },
        )

    @staticmethod
    def transaction_created(
        transaction_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction created: {transaction_id}",
            details={"amount": amount},
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction deleted: {transaction_id}",
        )

    @staticmethod
    def ledger_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Ledger call failed: {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
