"""
In-Memory Ledger and Audit Storage

Reference implementations of the storage interfaces, used by the test
suite and for local experiments. Everything lives in dicts; nothing is
persisted.

The ledger client records every write call (``push_calls`` and
``delete_calls``) so callers can assert exactly what reached the ledger.
Failures can be injected with ``fail_next_push`` / ``fail_next_delete``.
"""

from typing import Optional, Sequence

from ledgerdesk.models.audit import AuditEvent
from ledgerdesk.models.ledger import (
    Account,
    DeleteResult,
    Instrument,
    PushResult,
    Tag,
    Transaction,
)
from ledgerdesk.services.storage.interface import (
    AuditStorageInterface,
    LedgerClientInterface,
    LedgerError,
    LedgerWriteError,
)


class InMemoryLedgerClient(LedgerClientInterface):
    """Ledger client over plain dicts."""

    def __init__(
        self,
        accounts: Optional[Sequence[Account]] = None,
        tags: Optional[Sequence[Tag]] = None,
        instruments: Optional[Sequence[Instrument]] = None,
        transactions: Optional[Sequence[Transaction]] = None,
    ):
        self._accounts = {account.id: account for account in accounts or []}
        self._tags = {tag.id: tag for tag in tags or []}
        self._instruments = {instr.id: instr for instr in instruments or []}
        self._transactions = {tx.id: tx for tx in transactions or []}

        # Write log
        self.push_calls: list[list[Transaction]] = []
        self.delete_calls: list[list[str]] = []

        # Failure injection
        self._push_error: Optional[LedgerError] = None
        self._delete_error: Optional[LedgerError] = None

    # -------------------------------------------------------------------------
    # Reads (copies, so callers can't mutate ledger state by accident)
    # -------------------------------------------------------------------------

    async def list_accounts(self) -> list[Account]:
        return [account.model_copy() for account in self._accounts.values()]

    async def list_tags(self) -> list[Tag]:
        return [tag.model_copy() for tag in self._tags.values()]

    async def list_instruments(self) -> list[Instrument]:
        return [instr.model_copy() for instr in self._instruments.values()]

    async def list_transactions(self) -> list[Transaction]:
        return [
            tx.model_copy(deep=True)
            for tx in self._transactions.values()
            if not tx.deleted
        ]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def push_transactions(self, transactions: Sequence[Transaction]) -> PushResult:
        batch = [tx.model_copy(deep=True) for tx in transactions]
        self.push_calls.append(batch)

        if self._push_error is not None:
            error, self._push_error = self._push_error, None
            raise error

        for tx in batch:
            self._transactions[tx.id] = tx
        return PushResult(pushed=len(batch))

    async def delete_transactions(self, transaction_ids: Sequence[str]) -> DeleteResult:
        ids = list(transaction_ids)
        self.delete_calls.append(ids)

        if self._delete_error is not None:
            error, self._delete_error = self._delete_error, None
            raise error

        deleted = []
        for transaction_id in ids:
            if self._transactions.pop(transaction_id, None) is not None:
                deleted.append(transaction_id)
        return DeleteResult(deleted=deleted)

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def fail_next_push(self, error: Optional[LedgerError] = None) -> None:
        """Make the next push raise (default: LedgerWriteError)."""
        self._push_error = error or LedgerWriteError("push rejected by ledger")

    def fail_next_delete(self, error: Optional[LedgerError] = None) -> None:
        """Make the next delete raise (default: LedgerWriteError)."""
        self._delete_error = error or LedgerWriteError("delete rejected by ledger")

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    @property
    def write_count(self) -> int:
        """Total number of push + delete calls."""
        return len(self.push_calls) + len(self.delete_calls)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]
