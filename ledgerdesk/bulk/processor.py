"""
Bulk Processor

Validates a batch of create/update/delete operations and turns it into
what must be sent to the ledger:

    to_push    - new and updated transactions (ready to upsert)
    to_delete  - ids of transactions to remove

GUARANTEES:
- All-or-nothing: the first invalid operation fails the whole batch
- Nothing is written here; there is nothing to roll back
- Existing transactions are never mutated (updates patch a copy)
- to_push and to_delete never reference the same transaction
"""

from typing import Sequence, Union

import structlog
from pydantic import BaseModel, Field

from ledgerdesk.bulk.builder import build_transaction
from ledgerdesk.bulk.patcher import apply_patch
from ledgerdesk.errors import (
    InvalidInputError,
    TooManyOperationsError,
    TransactionNotFoundError,
)
from ledgerdesk.models.ledger import Transaction
from ledgerdesk.models.operations import (
    CreateOperation,
    DeleteOperation,
    UpdateOperation,
)
from ledgerdesk.resolution.lookup import LookupMaps

logger = structlog.get_logger(__name__)

MAX_BULK_OPERATIONS = 20


class ProcessedBatch(BaseModel):
    """Validated output of one bulk request."""

    to_push: list[Transaction] = Field(default_factory=list)
    to_delete: list[str] = Field(default_factory=list)
    created_count: int = Field(default=0, ge=0)
    updated_count: int = Field(default=0, ge=0)

    # The existing records being deleted, kept for previews
    deleted_transactions: list[Transaction] = Field(default_factory=list)

    @property
    def deleted_count(self) -> int:
        return len(self.to_delete)

    @property
    def is_empty(self) -> bool:
        return not self.to_push and not self.to_delete


def process_operations(
    operations: Sequence[Union[CreateOperation, UpdateOperation, DeleteOperation]],
    existing_transactions: Sequence[Transaction],
    maps: LookupMaps,
    max_operations: int = MAX_BULK_OPERATIONS,
) -> ProcessedBatch:
    """
    Validate and transform a batch of operations, in input order.

    Args:
        operations: Typed bulk operations
        existing_transactions: Current ledger snapshot (for update/delete lookups)
        maps: Lookup maps for instrument resolution
        max_operations: Upper bound on the batch size

    Returns:
        ProcessedBatch ready to be staged or written

    Raises:
        TooManyOperationsError: Batch is larger than max_operations
        TransactionNotFoundError: Update/delete of an unknown id
        InvalidInputError: Any other invalid operation
    """
    if len(operations) > max_operations:
        raise TooManyOperationsError(len(operations), max_operations)

    existing = {tx.id: tx for tx in existing_transactions}
    batch = ProcessedBatch()
    referenced: set[str] = set()

    def claim(transaction_id: str) -> Transaction:
        original = existing.get(transaction_id)
        if original is None:
            raise TransactionNotFoundError(transaction_id)
        if transaction_id in referenced:
            raise InvalidInputError(
                f"transaction {transaction_id} is referenced by more than one operation",
                field="id",
            )
        referenced.add(transaction_id)
        return original

    for index, operation in enumerate(operations):
        if isinstance(operation, CreateOperation):
            batch.to_push.append(build_transaction(operation, maps))
            batch.created_count += 1

        elif isinstance(operation, UpdateOperation):
            original = claim(operation.id)
            updated = original.model_copy(deep=True)
            apply_patch(updated, operation, maps)
            batch.to_push.append(updated)
            batch.updated_count += 1

        elif isinstance(operation, DeleteOperation):
            original = claim(operation.id)
            batch.to_delete.append(operation.id)
            batch.deleted_transactions.append(original)

        else:
            raise InvalidInputError(
                f"unsupported operation at index {index}: {type(operation).__name__}",
                field=f"operations[{index}]",
            )

    logger.debug(
        "bulk_batch_processed",
        operations=len(operations),
        created=batch.created_count,
        updated=batch.updated_count,
        deleted=batch.deleted_count,
    )
    return batch
