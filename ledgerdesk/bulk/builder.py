"""
Transaction Builder

Constructs brand-new ledger transactions from validated create
operations. Pure: no network, no storage.
"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from ledgerdesk.errors import InvalidDateError
from ledgerdesk.models.ledger import Transaction, utc_now
from ledgerdesk.models.operations import CreateOperation
from ledgerdesk.resolution.lookup import LookupMaps
from ledgerdesk.resolution.sides import resolve_sides

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str, field: str = "date") -> date:
    """
    Parse a YYYY-MM-DD date.

    Raises:
        InvalidDateError: Wrong format or impossible calendar date (e.g. 2024-02-30)
    """
    if not _DATE_PATTERN.match(value):
        raise InvalidDateError(value, "expected format YYYY-MM-DD", field=field)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateError(value, str(e), field=field) from e


def new_transaction(
    tx_date: date,
    outcome_account: str,
    outcome_amount: Decimal,
    outcome_instrument: int,
    income_account: str,
    income_amount: Decimal,
    income_instrument: int,
    tags: Optional[list[str]] = None,
    payee: Optional[str] = None,
    comment: Optional[str] = None,
) -> Transaction:
    """
    Stamp a brand-new transaction from fully resolved sides.

    The id is a fresh uuid4, ``created``/``changed`` are stamped with
    the current time and ``user`` is left unset (0); the ledger attaches
    the real owner on commit.

    Raises:
        pydantic.ValidationError: e.g. a negative amount
    """
    now = utc_now()
    return Transaction(
        id=str(uuid4()),
        user=0,
        date=tx_date,
        created=now,
        changed=now,
        outcome_account=outcome_account,
        outcome_amount=outcome_amount,
        outcome_instrument=outcome_instrument,
        income_account=income_account,
        income_amount=income_amount,
        income_instrument=income_instrument,
        tags=list(tags) if tags is not None else None,
        payee=payee,
        comment=comment,
    )


def build_transaction(operation: CreateOperation, maps: LookupMaps) -> Transaction:
    """
    Build a new transaction from a create operation.

    Raises:
        InvalidDateError, UnresolvedInstrumentError, MissingDestinationAccountError
    """
    tx_date = parse_date(operation.date)
    sides = resolve_sides(operation, maps)

    return new_transaction(
        tx_date,
        outcome_account=sides.outcome_account,
        outcome_amount=sides.outcome_amount,
        outcome_instrument=sides.outcome_instrument,
        income_account=sides.income_account,
        income_amount=sides.income_amount,
        income_instrument=sides.income_instrument,
        tags=operation.tag_ids,
        payee=operation.payee,
        comment=operation.comment,
    )
