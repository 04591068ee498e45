"""Bulk transaction building, patching, processing and staging package."""

from ledgerdesk.bulk.builder import build_transaction, new_transaction, parse_date
from ledgerdesk.bulk.patcher import apply_patch
from ledgerdesk.bulk.processor import (
    MAX_BULK_OPERATIONS,
    ProcessedBatch,
    process_operations,
)
from ledgerdesk.bulk.store import (
    InMemoryPreparationStore,
    PreparationStoreInterface,
    PreparedBatch,
)

__all__ = [
    "InMemoryPreparationStore",
    "MAX_BULK_OPERATIONS",
    "PreparationStoreInterface",
    "PreparedBatch",
    "ProcessedBatch",
    "apply_patch",
    "build_transaction",
    "new_transaction",
    "parse_date",
    "process_operations",
]
