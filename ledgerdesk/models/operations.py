"""
Bulk Operation Models

A bulk request is a list of operations. Each operation is exactly one of:

- CreateOperation  - a new transaction described as "one account, one
                     amount" (plus a destination for transfers)
- UpdateOperation  - a partial update of an existing transaction
- DeleteOperation  - removal of an existing transaction

DESIGN DECISION: This is a CLOSED union discriminated by ``action``.
Every consumer matches all three variants explicitly and treats
anything else as a programming error.

Dates stay as strings here on purpose: they are parsed (and rejected
with a field-specific error) by the transaction builder/patcher.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from ledgerdesk.errors import InvalidInputError


class TransactionKind(str, Enum):
    """
    Semantic kind of a transaction.

    Never stored on a transaction; always derived from its double-entry
    fields, or requested explicitly when creating one.
    """
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"


class CreateOperation(BaseModel):
    """Create a new transaction from a simplified description."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    action: Literal["create"] = "create"

    kind: TransactionKind = Field(
        ...,
        description="expense, income or transfer"
    )
    date: str = Field(
        ...,
        description="Transaction date, format YYYY-MM-DD"
    )
    account_id: str = Field(
        ...,
        min_length=1,
        description="Primary account (the source account for transfers)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount on the primary account"
    )
    instrument_id: Optional[int] = Field(
        default=None,
        description="Currency override; derived from the account when omitted"
    )

    # Transfer destination
    to_account_id: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Destination account (required for transfers)"
    )
    to_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Destination amount; defaults to amount"
    )
    to_instrument_id: Optional[int] = Field(
        default=None,
        description="Destination currency override"
    )

    tag_ids: Optional[list[str]] = None
    payee: Optional[str] = None
    comment: Optional[str] = None

    @field_validator('kind', mode='before')
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        """Accept 'Expense', 'EXPENSE', ... as well as 'expense'."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class UpdateOperation(BaseModel):
    """
    Partially update an existing transaction.

    Every field except ``id`` is optional; only fields that are set are
    applied. An empty string for payee/comment clears that field.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    action: Literal["update"] = "update"

    id: str = Field(
        ...,
        min_length=1,
        description="ID of the transaction to update"
    )
    date: Optional[str] = None
    account_id: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    instrument_id: Optional[int] = None
    to_account_id: Optional[str] = Field(default=None, min_length=1)
    to_amount: Optional[Decimal] = Field(default=None, ge=0)
    to_instrument_id: Optional[int] = None
    tag_ids: Optional[list[str]] = None
    payee: Optional[str] = None
    comment: Optional[str] = None


class DeleteOperation(BaseModel):
    """Delete an existing transaction."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    action: Literal["delete"] = "delete"

    id: str = Field(
        ...,
        min_length=1,
        description="ID of the transaction to delete"
    )


BulkOperation = Annotated[
    Union[CreateOperation, UpdateOperation, DeleteOperation],
    Field(discriminator="action"),
]

_operation_adapter = TypeAdapter(BulkOperation)


def _format_location(index: int, loc: tuple) -> str:
    """operations[2].amount style path, without the union tag in the middle."""
    parts = [str(part) for part in loc if part not in ("create", "update", "delete")]
    path = f"operations[{index}]"
    if parts:
        path += "." + ".".join(parts)
    return path


def parse_operation(raw: Any, index: int = 0) -> Union[CreateOperation, UpdateOperation, DeleteOperation]:
    """
    Validate one raw (JSON-like) operation into a typed operation.

    Already-typed operations are returned unchanged.

    Raises:
        InvalidInputError: naming the offending field
    """
    if isinstance(raw, (CreateOperation, UpdateOperation, DeleteOperation)):
        return raw

    try:
        return _operation_adapter.validate_python(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = _format_location(index, first.get("loc", ()))
        raise InvalidInputError(f"{field}: {first['msg']}", field=field) from e


def parse_operations(raw_operations: Sequence[Any]) -> list[Union[CreateOperation, UpdateOperation, DeleteOperation]]:
    """Validate a list of raw operations, failing on the first bad one."""
    return [parse_operation(raw, index) for index, raw in enumerate(raw_operations)]
