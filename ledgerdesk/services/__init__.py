"""Services package."""

from ledgerdesk.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryLedgerClient,
    LedgerClientInterface,
    LedgerConnectionError,
    LedgerError,
    LedgerWriteError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryLedgerClient",
    "LedgerClientInterface",
    "LedgerConnectionError",
    "LedgerError",
    "LedgerWriteError",
]
