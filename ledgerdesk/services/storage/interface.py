"""
Abstract Ledger Client Interface

DESIGN DECISION: ledgerdesk never talks to the remote ledger directly.
It relies on this small contract. This allows us to:
1. Plug in any sync-capable ledger client
2. Use in-memory storage for testing
3. Keep staging/resolution logic decoupled from I/O

Reads return the most recently synced LOCAL state, not necessarily the
remote ledger's current state. Writes either fully apply or raise.
Authentication, retries and caching belong to the implementation.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from ledgerdesk.models.audit import AuditEvent
from ledgerdesk.models.ledger import (
    Account,
    DeleteResult,
    Instrument,
    PushResult,
    Tag,
    Transaction,
)


class LedgerClientInterface(ABC):
    """
    Abstract interface for ledger operations.

    Any ledger client (remote API, local file, in-memory) must
    implement these methods.
    """

    @abstractmethod
    async def list_accounts(self) -> list[Account]:
        """Snapshot of all accounts."""
        pass

    @abstractmethod
    async def list_tags(self) -> list[Tag]:
        """Snapshot of all category tags."""
        pass

    @abstractmethod
    async def list_instruments(self) -> list[Instrument]:
        """Snapshot of all currency instruments."""
        pass

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """Snapshot of all (non-deleted) transactions."""
        pass

    @abstractmethod
    async def push_transactions(self, transactions: Sequence[Transaction]) -> PushResult:
        """
        Upsert a batch of transactions.

        Args:
            transactions: New or modified transactions

        Returns:
            PushResult acknowledgement

        Raises:
            LedgerError: If the push fails (nothing is applied)
        """
        pass

    @abstractmethod
    async def delete_transactions(self, transaction_ids: Sequence[str]) -> DeleteResult:
        """
        Delete transactions by id.

        Args:
            transaction_ids: IDs to remove

        Returns:
            DeleteResult acknowledgement

        Raises:
            LedgerError: If the delete fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class LedgerError(Exception):
    """Base exception for ledger client operations."""
    pass


class LedgerConnectionError(LedgerError):
    """Could not reach the ledger backend."""
    pass


class LedgerWriteError(LedgerError):
    """The ledger rejected a push or delete."""
    pass
