"""
Enriched Response Models

These resolve entity IDs to human-readable names (account titles, tag
titles, currency symbols) so previews and summaries are readable by a
person or an assistant without extra lookups.

The raw instrument IDs are kept next to the symbols so callers can
check exactly which currency each side uses.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ledgerdesk.models.ledger import Transaction
from ledgerdesk.models.operations import TransactionKind
from ledgerdesk.resolution.classifier import classify
from ledgerdesk.resolution.lookup import LookupMaps


class TransactionResponse(BaseModel):
    """Enriched transaction for display."""

    id: str
    date: str
    kind: TransactionKind

    # Income (destination) side
    income: Decimal
    income_account: str
    income_currency: str
    income_instrument: int

    # Outcome (source) side
    outcome: Decimal
    outcome_account: str
    outcome_currency: str
    outcome_instrument: int

    tags: list[str] = Field(
        default_factory=list,
        description="Category tag names"
    )
    payee: Optional[str] = None
    comment: Optional[str] = None

    @classmethod
    def from_transaction(cls, tx: Transaction, maps: LookupMaps) -> "TransactionResponse":
        """Create an enriched response from a raw transaction."""
        return cls(
            id=tx.id,
            date=tx.date.isoformat(),
            kind=classify(tx),
            income=tx.income_amount,
            income_account=maps.account_name(tx.income_account),
            income_currency=maps.instrument_symbol(tx.income_instrument),
            income_instrument=tx.income_instrument,
            outcome=tx.outcome_amount,
            outcome_account=maps.account_name(tx.outcome_account),
            outcome_currency=maps.instrument_symbol(tx.outcome_instrument),
            outcome_instrument=tx.outcome_instrument,
            tags=[maps.tag_name(tag_id) for tag_id in tx.tags or []],
            payee=tx.payee,
            comment=tx.comment,
        )


class PrepareResponse(BaseModel):
    """Preview of a staged bulk request."""

    preparation_id: str = Field(
        ...,
        description="Opaque ID to pass to execute"
    )
    created: int = Field(ge=0)
    updated: int = Field(ge=0)
    deleted: int = Field(ge=0)
    preview_transactions: list[TransactionResponse] = Field(
        default_factory=list,
        description="Transactions that will be created or updated"
    )
    preview_deletions: list[TransactionResponse] = Field(
        default_factory=list,
        description="Transactions that will be deleted"
    )


class ExecuteResponse(BaseModel):
    """Summary of an executed preparation."""

    created: int = Field(ge=0)
    updated: int = Field(ge=0)
    deleted: int = Field(ge=0)
    affected_transactions: list[TransactionResponse] = Field(
        default_factory=list,
        description="Transactions that were created or updated"
    )


class BulkOperationsResponse(BaseModel):
    """Summary of a bulk request applied without staging."""

    created: int = Field(ge=0)
    updated: int = Field(ge=0)
    deleted: int = Field(ge=0)
    transactions: list[TransactionResponse] = Field(default_factory=list)


class DeletedTransactionResponse(BaseModel):
    """What was removed by a single delete."""

    message: str
    transaction: TransactionResponse
