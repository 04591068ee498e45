"""
Data Models Package

This package contains all Pydantic models used in ledgerdesk.
All data flowing through the system must conform to these schemas.

Response models live in ledgerdesk.models.responses and are not
re-exported here: they depend on ledgerdesk.resolution.
"""

from ledgerdesk.models.ledger import (
    Account,
    DeleteResult,
    Instrument,
    PushResult,
    Tag,
    Transaction,
)
from ledgerdesk.models.operations import (
    BulkOperation,
    CreateOperation,
    DeleteOperation,
    TransactionKind,
    UpdateOperation,
    parse_operation,
    parse_operations,
)
from ledgerdesk.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger records
    "Account",
    "DeleteResult",
    "Instrument",
    "PushResult",
    "Tag",
    "Transaction",
    # Operations
    "BulkOperation",
    "CreateOperation",
    "DeleteOperation",
    "TransactionKind",
    "UpdateOperation",
    "parse_operation",
    "parse_operations",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
