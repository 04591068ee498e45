"""
Main Orchestrator for ledgerdesk

Ties the components together and defines the caller-facing flows:

1. Prepare  (operations -> validate -> stage -> preview)
2. Execute  (preparation id -> consume -> push/delete -> summary)
3. Direct writes (apply a bulk batch, create or delete one transaction)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The whole batch is validated before ANY ledger write
- A failed prepare leaves the ledger and the store untouched
- Lookup maps are rebuilt from fresh snapshots on every call
- The staging lock is never held across ledger I/O
- Ledger failures surface as UpstreamError; nothing is retried here

KNOWN GAP: execute is not transactional. If the push succeeds and the
delete then fails, the pushed changes stay applied and execute raises.
Choosing between a compensating action and a partial-success result is
a product decision, so the failure is audited and surfaced as-is.
"""

from decimal import Decimal
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, ValidationError

from ledgerdesk.audit import AuditLogger, configure_logging, create_correlation_id
from ledgerdesk.bulk import (
    InMemoryPreparationStore,
    PreparationStoreInterface,
    PreparedBatch,
    ProcessedBatch,
    new_transaction,
    parse_date,
    process_operations,
)
from ledgerdesk.config import get_settings
from ledgerdesk.errors import (
    InternalError,
    InvalidInputError,
    TooManyOperationsError,
    TransactionNotFoundError,
    UpstreamError,
)
from ledgerdesk.models.ledger import Transaction
from ledgerdesk.models.operations import CreateOperation, parse_operations
from ledgerdesk.models.responses import (
    BulkOperationsResponse,
    DeletedTransactionResponse,
    ExecuteResponse,
    PrepareResponse,
    TransactionResponse,
)
from ledgerdesk.resolution import LookupMaps, build_lookup_maps
from ledgerdesk.services.storage import AuditStorageInterface, LedgerClientInterface

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Transaction field -> create_transaction parameter, for error reporting
_CREATE_PARAMETER_NAMES = {
    "outcome_amount": "outcome",
    "income_amount": "income",
    "tags": "tag_ids",
}


def render_json(model: BaseModel) -> str:
    """
    Serialize a response model to pretty-printed JSON for tool output.

    Raises:
        InternalError: If the model can't be serialized
    """
    try:
        return model.model_dump_json(indent=2)
    except Exception as e:
        raise InternalError(f"failed to serialize response: {e}") from e


class BulkTransactionFlow:
    """
    Orchestrates the two-phase bulk transaction workflow.

    Flow:
    1. prepare(operations) -> validated batch staged under an opaque key,
       enriched preview returned
    2. Caller reviews the preview
    3. execute(preparation_id) -> staged batch consumed (single use),
       pushed/deleted against the ledger

    A preparation can be executed exactly once.
    """

    def __init__(
        self,
        ledger: LedgerClientInterface,
        store: Optional[PreparationStoreInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        max_operations: Optional[int] = None,
    ):
        self._ledger = ledger
        self._store = store or InMemoryPreparationStore()
        self._audit_logger = audit_logger
        if max_operations is None:
            max_operations = get_settings().bulk.max_operations
        self._max_operations = max_operations

    @property
    def max_operations(self) -> int:
        return self._max_operations

    # -------------------------------------------------------------------------
    # Ledger access
    # -------------------------------------------------------------------------

    async def _ledger_call(
        self,
        operation: str,
        call: Callable[..., Awaitable[T]],
        *args: Any,
        correlation_id: Optional[UUID] = None,
    ) -> T:
        """Run one ledger client call, wrapping any failure as UpstreamError."""
        try:
            return await call(*args)
        except Exception as e:
            logger.error("ledger_call_failed", operation=operation, error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_ledger_error(
                    operation=operation,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise UpstreamError(f"ledger {operation} failed: {e}") from e

    async def lookup_maps(self, correlation_id: Optional[UUID] = None) -> LookupMaps:
        """Build lookup maps from current ledger snapshots."""
        accounts = await self._ledger_call(
            "list_accounts", self._ledger.list_accounts, correlation_id=correlation_id
        )
        tags = await self._ledger_call(
            "list_tags", self._ledger.list_tags, correlation_id=correlation_id
        )
        instruments = await self._ledger_call(
            "list_instruments", self._ledger.list_instruments, correlation_id=correlation_id
        )
        return build_lookup_maps(accounts, tags, instruments)

    async def _list_transactions(self, correlation_id: Optional[UUID] = None) -> list[Transaction]:
        return await self._ledger_call(
            "list_transactions",
            self._ledger.list_transactions,
            correlation_id=correlation_id,
        )

    # -------------------------------------------------------------------------
    # Validation shared by prepare and apply
    # -------------------------------------------------------------------------

    async def _process(
        self,
        operations: Sequence[Any],
        correlation_id: UUID,
    ) -> tuple[ProcessedBatch, LookupMaps]:
        """
        Validate a raw or typed batch into a ProcessedBatch.

        Nothing is written. Invalid input is audited and re-raised.
        """
        try:
            # Size check comes before looking at any operation
            if len(operations) > self._max_operations:
                raise TooManyOperationsError(len(operations), self._max_operations)

            parsed = parse_operations(operations)
            maps = await self.lookup_maps(correlation_id)

            existing: list[Transaction] = []
            if any(not isinstance(op, CreateOperation) for op in parsed):
                existing = await self._list_transactions(correlation_id)

            batch = process_operations(
                parsed,
                existing,
                maps,
                max_operations=self._max_operations,
            )
        except InvalidInputError as e:
            logger.info("bulk_batch_rejected", error=str(e), field=e.field)
            if self._audit_logger:
                await self._audit_logger.log_bulk_prepare_failed(
                    operation_count=len(operations),
                    error=e,
                    correlation_id=correlation_id,
                )
            raise

        return batch, maps

    # -------------------------------------------------------------------------
    # Two-phase workflow
    # -------------------------------------------------------------------------

    async def prepare(
        self,
        operations: Sequence[Any],
        correlation_id: Optional[UUID] = None,
    ) -> PrepareResponse:
        """
        Validate and stage a batch without writing anything.

        Args:
            operations: Typed operations or raw dicts with an ``action`` key

        Returns:
            PrepareResponse with the preparation id and enriched previews

        Raises:
            InvalidInputError: The batch is invalid (nothing is staged)
            UpstreamError: Reading ledger snapshots failed
        """
        correlation_id = correlation_id or create_correlation_id()

        batch, maps = await self._process(operations, correlation_id)

        prepared = PreparedBatch(
            batch=batch,
            preview_transactions=[
                TransactionResponse.from_transaction(tx, maps) for tx in batch.to_push
            ],
            preview_deletions=[
                TransactionResponse.from_transaction(tx, maps)
                for tx in batch.deleted_transactions
            ],
        )
        preparation_id = await self._store.stage(prepared)

        if self._audit_logger:
            await self._audit_logger.log_bulk_prepared(
                preparation_id=preparation_id,
                created=batch.created_count,
                updated=batch.updated_count,
                deleted=batch.deleted_count,
                correlation_id=correlation_id,
            )

        return PrepareResponse(
            preparation_id=preparation_id,
            created=batch.created_count,
            updated=batch.updated_count,
            deleted=batch.deleted_count,
            preview_transactions=prepared.preview_transactions,
            preview_deletions=prepared.preview_deletions,
        )

    async def execute(
        self,
        preparation_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> ExecuteResponse:
        """
        Commit a previously prepared batch.

        The preparation is consumed before any write, so it can never be
        executed twice, even if this call fails afterwards.

        Raises:
            PreparationNotFoundError: Unknown or already executed preparation
            UpstreamError: The push or delete failed (no rollback)
        """
        correlation_id = correlation_id or create_correlation_id()

        prepared = await self._store.consume(preparation_id)
        batch = prepared.batch

        await self._write_batch(batch, correlation_id, preparation_id=preparation_id)

        if self._audit_logger:
            await self._audit_logger.log_bulk_executed(
                preparation_id=preparation_id,
                created=batch.created_count,
                updated=batch.updated_count,
                deleted=batch.deleted_count,
                correlation_id=correlation_id,
            )

        return ExecuteResponse(
            created=batch.created_count,
            updated=batch.updated_count,
            deleted=batch.deleted_count,
            affected_transactions=prepared.preview_transactions,
        )

    async def _write_batch(
        self,
        batch: ProcessedBatch,
        correlation_id: UUID,
        preparation_id: Optional[str] = None,
    ) -> None:
        """Push, then delete. Stops at the first failure without rollback."""
        stages = (
            ("push", "push_transactions", self._ledger.push_transactions, batch.to_push),
            ("delete", "delete_transactions", self._ledger.delete_transactions, batch.to_delete),
        )
        for stage, operation, call, payload in stages:
            if not payload:
                continue
            try:
                await self._ledger_call(
                    operation, call, payload, correlation_id=correlation_id
                )
            except UpstreamError as e:
                if self._audit_logger and preparation_id:
                    await self._audit_logger.log_bulk_execute_failed(
                        preparation_id=preparation_id,
                        stage=stage,
                        error=e,
                        correlation_id=correlation_id,
                    )
                raise

    # -------------------------------------------------------------------------
    # Direct writes
    # -------------------------------------------------------------------------

    async def apply_bulk_operations(
        self,
        operations: Sequence[Any],
        correlation_id: Optional[UUID] = None,
    ) -> BulkOperationsResponse:
        """
        Validate and write a batch in one step, without staging.

        Same validation as prepare; same no-rollback semantics as execute.
        """
        correlation_id = correlation_id or create_correlation_id()

        batch, maps = await self._process(operations, correlation_id)
        await self._write_batch(batch, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_bulk_applied(
                created=batch.created_count,
                updated=batch.updated_count,
                deleted=batch.deleted_count,
                correlation_id=correlation_id,
            )

        return BulkOperationsResponse(
            created=batch.created_count,
            updated=batch.updated_count,
            deleted=batch.deleted_count,
            transactions=[
                TransactionResponse.from_transaction(tx, maps) for tx in batch.to_push
            ],
        )

    async def create_transaction(
        self,
        date: str,
        outcome_account: str,
        outcome: Decimal,
        outcome_instrument: int,
        income_account: str,
        income: Decimal,
        income_instrument: int,
        tag_ids: Optional[list[str]] = None,
        payee: Optional[str] = None,
        comment: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionResponse:
        """
        Create one transaction from explicit double-entry fields.

        Nothing is derived here: both accounts, amounts and instruments
        are taken as given.

        Raises:
            InvalidInputError: Bad date or negative amount
            UpstreamError: The push failed
        """
        correlation_id = correlation_id or create_correlation_id()

        tx_date = parse_date(date)
        try:
            tx = new_transaction(
                tx_date,
                outcome_account=outcome_account,
                outcome_amount=outcome,
                outcome_instrument=outcome_instrument,
                income_account=income_account,
                income_amount=income,
                income_instrument=income_instrument,
                tags=tag_ids,
                payee=payee,
                comment=comment,
            )
        except ValidationError as e:
            first = e.errors()[0]
            loc = [str(part) for part in first.get("loc", ())]
            if loc:
                loc[0] = _CREATE_PARAMETER_NAMES.get(loc[0], loc[0])
            field = ".".join(loc)
            raise InvalidInputError(f"{field}: {first['msg']}", field=field) from e

        await self._ledger_call(
            "push_transactions",
            self._ledger.push_transactions,
            [tx],
            correlation_id=correlation_id,
        )

        if self._audit_logger:
            await self._audit_logger.log_transaction_created(
                transaction_id=tx.id,
                amount=str(max(tx.outcome_amount, tx.income_amount)),
                correlation_id=correlation_id,
            )

        maps = await self.lookup_maps(correlation_id)
        return TransactionResponse.from_transaction(tx, maps)

    async def delete_transaction(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> DeletedTransactionResponse:
        """
        Delete one transaction and report what was removed.

        Raises:
            TransactionNotFoundError: No transaction with that id
            UpstreamError: The delete failed
        """
        correlation_id = correlation_id or create_correlation_id()

        maps = await self.lookup_maps(correlation_id)
        existing = await self._list_transactions(correlation_id)
        tx = next((item for item in existing if item.id == transaction_id), None)
        if tx is None:
            raise TransactionNotFoundError(transaction_id)

        await self._ledger_call(
            "delete_transactions",
            self._ledger.delete_transactions,
            [transaction_id],
            correlation_id=correlation_id,
        )

        if self._audit_logger:
            await self._audit_logger.log_transaction_deleted(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )

        return DeletedTransactionResponse(
            message=f"Transaction '{transaction_id}' deleted successfully",
            transaction=TransactionResponse.from_transaction(tx, maps),
        )

    async def pending_preparations(self) -> int:
        """Number of prepared batches waiting to be executed."""
        return await self._store.pending_count()


def create_app_components(
    ledger: LedgerClientInterface,
    audit_storage: Optional[AuditStorageInterface] = None,
    store: Optional[PreparationStoreInterface] = None,
) -> tuple[BulkTransactionFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Configures logging from settings, then wires the flow to the given
    ledger client.

    Returns:
        (bulk_transaction_flow, audit_logger)
    """
    settings = get_settings()
    configure_logging(
        level=settings.app.effective_log_level,
        json_output=settings.app.log_json,
    )

    audit_logger = AuditLogger(audit_storage)
    flow = BulkTransactionFlow(
        ledger=ledger,
        store=store,
        audit_logger=audit_logger,
        max_operations=settings.bulk.max_operations,
    )

    logger.info(
        "ledgerdesk_ready",
        environment=settings.app.app_environment,
        max_operations=flow.max_operations,
    )
    return flow, audit_logger
