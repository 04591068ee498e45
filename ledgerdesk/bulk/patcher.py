"""
Transaction Patcher

Applies a partial update to an existing transaction IN PLACE while
keeping the double-entry record consistent.

Fields are applied in a fixed order:

    date -> tag_ids -> payee -> comment -> account_id -> to_account_id
         -> amount -> to_amount -> changed (always)

CRITICAL: The kind (expense/income/transfer) is re-derived with
``classify`` right before each account/amount rule, from the record as
mutated SO FAR. It is never cached, because an earlier rule in the same
patch can change it.
"""

from typing import Optional

from ledgerdesk.bulk.builder import parse_date
from ledgerdesk.errors import InvalidInputError
from ledgerdesk.models.ledger import Transaction, utc_now
from ledgerdesk.models.operations import TransactionKind, UpdateOperation
from ledgerdesk.resolution.classifier import classify
from ledgerdesk.resolution.instruments import resolve_instrument
from ledgerdesk.resolution.lookup import LookupMaps


def _blank_to_none(value: str) -> Optional[str]:
    """An empty string means "clear this field"."""
    return value if value else None


def apply_patch(tx: Transaction, patch: UpdateOperation, maps: LookupMaps) -> None:
    """
    Apply ``patch`` to ``tx``.

    Raises:
        InvalidDateError: patch.date is not a valid YYYY-MM-DD date
        UnresolvedInstrumentError: a new account has no derivable instrument
        InvalidInputError: an instrument override without its account
    """
    # An instrument override only applies to the account set alongside it
    if patch.instrument_id is not None and patch.account_id is None:
        raise InvalidInputError(
            "instrument_id can only be changed together with account_id",
            field="instrument_id",
        )
    if patch.to_instrument_id is not None and patch.to_account_id is None:
        raise InvalidInputError(
            "to_instrument_id can only be changed together with to_account_id",
            field="to_instrument_id",
        )

    if patch.date is not None:
        tx.date = parse_date(patch.date)

    # Full replacement, not a merge
    if patch.tag_ids is not None:
        tx.tags = list(patch.tag_ids)

    if patch.payee is not None:
        tx.payee = _blank_to_none(patch.payee)

    if patch.comment is not None:
        tx.comment = _blank_to_none(patch.comment)

    if patch.account_id is not None:
        kind = classify(tx)
        instrument = resolve_instrument(maps, patch.account_id, patch.instrument_id)
        if kind == TransactionKind.TRANSFER:
            tx.outcome_account = patch.account_id
            tx.outcome_instrument = instrument
        else:
            # Single-account shape: both sides move together
            tx.outcome_account = patch.account_id
            tx.outcome_instrument = instrument
            tx.income_account = patch.account_id
            tx.income_instrument = instrument

    # Destination side only. Meant for transfers, not rejected otherwise.
    if patch.to_account_id is not None:
        instrument = resolve_instrument(
            maps,
            patch.to_account_id,
            patch.to_instrument_id,
            field="to_instrument_id",
        )
        tx.income_account = patch.to_account_id
        tx.income_instrument = instrument

    if patch.amount is not None:
        kind = classify(tx)
        if kind == TransactionKind.INCOME:
            tx.income_amount = patch.amount
        else:
            tx.outcome_amount = patch.amount

    if patch.to_amount is not None:
        tx.income_amount = patch.to_amount

    tx.changed = utc_now()
