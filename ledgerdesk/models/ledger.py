"""
Ledger Record Models

These mirror the records owned by the ledger: accounts, tags,
instruments (currencies) and double-entry transactions.

DESIGN DECISION: A transaction is ALWAYS double-entry. It has an
outcome (source) side and an income (destination) side, each with its
own account, amount and instrument. Expenses and income are stored
with both sides pointing at the same account; only transfers have two
distinct accounts.

The ledger owns these records. ledgerdesk only builds or mutates
in-memory copies before handing them to the ledger client.
"""

from datetime import date as Date, datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Account(BaseModel):
    """A financial account (cash, card, deposit, ...)."""

    id: str
    title: str
    instrument: Optional[int] = Field(
        default=None,
        description="Currency instrument ID of the account, if known"
    )
    archive: bool = False
    balance: Optional[Decimal] = None


class Tag(BaseModel):
    """A category tag. Tags may be nested one level via ``parent``."""

    id: str
    title: str
    parent: Optional[str] = None


class Instrument(BaseModel):
    """A currency instrument."""

    id: int
    title: str
    short_title: str = Field(
        ...,
        description="Short code (e.g. 'USD')"
    )
    symbol: str = Field(
        ...,
        description="Display symbol (e.g. '$')"
    )
    rate: Decimal = Field(
        default=Decimal("1"),
        ge=0,
        description="Exchange rate as supplied by the ledger catalog"
    )


class Transaction(BaseModel):
    """
    A double-entry ledger transaction.

    Amounts are never negative. The semantic kind (expense, income,
    transfer) is NOT stored here; it is derived on demand from the four
    core fields (see ``ledgerdesk.resolution.classifier``).
    """
    model_config = ConfigDict(validate_assignment=True)

    # Identity
    id: str
    user: int = Field(
        default=0,
        description="Owner; 0 means unset (the ledger attaches the real user on commit)"
    )

    # Timestamps
    date: Date
    created: datetime = Field(default_factory=utc_now)
    changed: datetime = Field(default_factory=utc_now)
    deleted: bool = False

    # Outcome (source) side
    outcome_account: str
    outcome_amount: Decimal = Field(default=Decimal("0"), ge=0)
    outcome_instrument: int

    # Income (destination) side
    income_account: str
    income_amount: Decimal = Field(default=Decimal("0"), ge=0)
    income_instrument: int

    # Descriptive fields
    tags: Optional[list[str]] = None
    payee: Optional[str] = None
    comment: Optional[str] = None
    merchant: Optional[str] = None


class PushResult(BaseModel):
    """Acknowledgement for a batch upsert."""

    server_timestamp: datetime = Field(default_factory=utc_now)
    pushed: int = Field(ge=0)


class DeleteResult(BaseModel):
    """Acknowledgement for a batch delete."""

    server_timestamp: datetime = Field(default_factory=utc_now)
    deleted: list[str] = Field(default_factory=list)
