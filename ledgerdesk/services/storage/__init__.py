"""
Storage Services Package

Provides the abstract ledger client and audit storage interfaces, plus
in-memory implementations. Designed so any ledger backend can be swapped in.
"""

from ledgerdesk.services.storage.interface import (
    AuditStorageInterface,
    LedgerClientInterface,
    LedgerConnectionError,
    LedgerError,
    LedgerWriteError,
)
from ledgerdesk.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerClient,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerClientInterface",
    # Exceptions
    "LedgerConnectionError",
    "LedgerError",
    "LedgerWriteError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLedgerClient",
]
