"""
Error Taxonomy for ledgerdesk

Every failure a caller can observe is one of four categories:

1. INVALID INPUT - the request itself is wrong (bad date, unknown id,
   oversized batch, account with no derivable currency). Never retried.
2. NOT FOUND - workflow/state error: the preparation key is unknown or
   was already consumed.
3. UPSTREAM - the ledger client failed on a read or a write.
4. INTERNAL - something broke on our side (e.g. serialization).

Callers can branch on the exception type or on ``error.category``.
"""

from typing import Optional


class LedgerDeskError(Exception):
    """Base exception for all ledgerdesk errors."""

    category = "internal"

    def to_dict(self) -> dict:
        """Convert to a dictionary suitable for a tool/JSON response."""
        return {
            "category": self.category,
            "error_type": type(self).__name__,
            "message": str(self),
        }


class InvalidInputError(LedgerDeskError):
    """The request is malformed or references something that doesn't exist."""

    category = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class InvalidDateError(InvalidInputError):
    """Date string is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: str, reason: str, field: str = "date"):
        self.value = value
        super().__init__(f"invalid date '{value}': {reason}", field=field)


class MissingDestinationAccountError(InvalidInputError):
    """A transfer was requested without a destination account."""

    def __init__(self):
        super().__init__(
            "to_account_id is required for transfer transactions",
            field="to_account_id",
        )


class TooManyOperationsError(InvalidInputError):
    """The batch exceeds the configured operation limit."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(
            f"too many operations: {count} (maximum is {limit})",
            field="operations",
        )


class TransactionNotFoundError(InvalidInputError):
    """An update/delete references a transaction id that doesn't exist."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"transaction not found: {transaction_id}", field="id")


class UnresolvedInstrumentError(InvalidInputError):
    """No instrument was given and none can be derived from the account."""

    def __init__(self, account_id: str, field: str = "instrument_id"):
        self.account_id = account_id
        super().__init__(
            f"cannot determine instrument for account '{account_id}'; "
            f"please provide {field} explicitly",
            field=field,
        )


class PreparationNotFoundError(LedgerDeskError):
    """Preparation key was never staged or has already been executed."""

    category = "not_found"

    def __init__(self, preparation_id: str):
        self.preparation_id = preparation_id
        super().__init__(
            f"preparation not found: {preparation_id} "
            "(it may have already been executed)"
        )


class UpstreamError(LedgerDeskError):
    """The ledger client failed. The original error is chained."""

    category = "upstream"


class InternalError(LedgerDeskError):
    """Unexpected failure inside ledgerdesk (e.g. response serialization)."""

    category = "internal"
