"""
Shared fixtures for ledgerdesk tests

Ledger used throughout:
- Instruments: 1 = RUB (₽), 2 = USD ($)
- Accounts: A "Main Account" (RUB), B "Dollar Card" (USD), C "Legacy" (no currency)
- Tags: tag-food "Groceries", tag-salary "Salary"
- Transactions: tx-expense (A, 300 out), tx-income (A, 1000 in),
  tx-transfer (A 500 RUB -> B 6 USD)
"""

from decimal import Decimal

import pytest

from ledgerdesk.audit import AuditLogger
from ledgerdesk.models.ledger import Account, Instrument, Tag, Transaction
from ledgerdesk.orchestrator import BulkTransactionFlow
from ledgerdesk.resolution import LookupMaps, build_lookup_maps
from ledgerdesk.services.storage import InMemoryAuditStorage, InMemoryLedgerClient
from tests.factories import make_transaction


@pytest.fixture
def instruments() -> list[Instrument]:
    return [
        Instrument(id=1, title="Russian Ruble", short_title="RUB", symbol="₽", rate=Decimal("1")),
        Instrument(id=2, title="US Dollar", short_title="USD", symbol="$", rate=Decimal("90.5")),
    ]


@pytest.fixture
def accounts() -> list[Account]:
    return [
        Account(id="A", title="Main Account", instrument=1),
        Account(id="B", title="Dollar Card", instrument=2),
        Account(id="C", title="Legacy", instrument=None),
    ]


@pytest.fixture
def tags() -> list[Tag]:
    return [
        Tag(id="tag-food", title="Groceries"),
        Tag(id="tag-salary", title="Salary"),
    ]


@pytest.fixture
def maps(accounts, tags, instruments) -> LookupMaps:
    return build_lookup_maps(accounts, tags, instruments)


@pytest.fixture
def expense_tx() -> Transaction:
    return make_transaction(
        "tx-expense",
        outcome_amount="300",
        tags=["tag-food"],
        payee="Corner Shop",
        comment="milk",
    )


@pytest.fixture
def income_tx() -> Transaction:
    return make_transaction("tx-income", income_amount="1000", tags=["tag-salary"])


@pytest.fixture
def transfer_tx() -> Transaction:
    return make_transaction(
        "tx-transfer",
        outcome_account="A",
        outcome_amount="500",
        outcome_instrument=1,
        income_account="B",
        income_amount="6",
        income_instrument=2,
    )


@pytest.fixture
def existing_transactions(expense_tx, income_tx, transfer_tx) -> list[Transaction]:
    return [expense_tx, income_tx, transfer_tx]


@pytest.fixture
def ledger(accounts, tags, instruments, existing_transactions) -> InMemoryLedgerClient:
    return InMemoryLedgerClient(
        accounts=accounts,
        tags=tags,
        instruments=instruments,
        transactions=existing_transactions,
    )


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def flow(ledger, audit_storage) -> BulkTransactionFlow:
    return BulkTransactionFlow(
        ledger=ledger,
        audit_logger=AuditLogger(audit_storage),
        max_operations=5,
    )
