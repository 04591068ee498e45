"""
Side Resolution

Turns the user-facing "one account, one amount" description of a new
transaction into the ledger's two double-entry sides.

    EXPENSE   outcome = (account, amount, instr)   income = (account, 0, instr)
    INCOME    outcome = (account, 0, instr)        income = (account, amount, instr)
    TRANSFER  outcome = (account, amount, instr)   income = (to_account, to_amount, to_instr)

For transfers the destination amount defaults to the source amount.
No currency conversion happens here: for cross-currency transfers the
caller must supply ``to_amount``.
"""

from decimal import Decimal

from pydantic import BaseModel

from ledgerdesk.errors import MissingDestinationAccountError
from ledgerdesk.models.operations import CreateOperation, TransactionKind
from ledgerdesk.resolution.instruments import resolve_instrument
from ledgerdesk.resolution.lookup import LookupMaps


class ResolvedSides(BaseModel):
    """Both sides of a double-entry transaction."""

    outcome_account: str
    outcome_amount: Decimal
    outcome_instrument: int
    income_account: str
    income_amount: Decimal
    income_instrument: int


def resolve_sides(operation: CreateOperation, maps: LookupMaps) -> ResolvedSides:
    """
    Resolve the double-entry sides for a create operation.

    Raises:
        UnresolvedInstrumentError: An instrument can't be determined
        MissingDestinationAccountError: Transfer without to_account_id
    """
    zero = Decimal("0")

    if operation.kind == TransactionKind.EXPENSE:
        instrument = resolve_instrument(maps, operation.account_id, operation.instrument_id)
        return ResolvedSides(
            outcome_account=operation.account_id,
            outcome_amount=operation.amount,
            outcome_instrument=instrument,
            income_account=operation.account_id,
            income_amount=zero,
            income_instrument=instrument,
        )

    if operation.kind == TransactionKind.INCOME:
        instrument = resolve_instrument(maps, operation.account_id, operation.instrument_id)
        return ResolvedSides(
            outcome_account=operation.account_id,
            outcome_amount=zero,
            outcome_instrument=instrument,
            income_account=operation.account_id,
            income_amount=operation.amount,
            income_instrument=instrument,
        )

    if operation.kind == TransactionKind.TRANSFER:
        if not operation.to_account_id:
            raise MissingDestinationAccountError()

        source_instrument = resolve_instrument(
            maps, operation.account_id, operation.instrument_id
        )
        destination_instrument = resolve_instrument(
            maps,
            operation.to_account_id,
            operation.to_instrument_id,
            field="to_instrument_id",
        )
        to_amount = operation.to_amount if operation.to_amount is not None else operation.amount
        return ResolvedSides(
            outcome_account=operation.account_id,
            outcome_amount=operation.amount,
            outcome_instrument=source_instrument,
            income_account=operation.to_account_id,
            income_amount=to_amount,
            income_instrument=destination_instrument,
        )

    raise ValueError(f"Unsupported transaction kind: {operation.kind}")
