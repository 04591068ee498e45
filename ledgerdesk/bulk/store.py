"""
Preparation Store

Single-use staging area between "prepare" and "execute".

Lifecycle of a preparation key:

    stage(batch) -> key        STAGED
    consume(key) -> batch      CONSUMED (key is gone)
    consume(key) again         PreparationNotFoundError

DESIGN DECISION: The store is an injectable interface, not module-level
state. Tests get an isolated instance; a production store can add
expiry later without touching callers.

CONCURRENCY: The in-memory store guards its dict with an asyncio.Lock
held ONLY for a single insert or remove-and-return, never across ledger
I/O. Two concurrent consumes of the same key: exactly one wins.

NOTE: There is no expiry. Abandoned preparations stay in memory until
the process exits; ``pending_count()`` makes that growth observable.
"""

from abc import ABC, abstractmethod
from asyncio import Lock
from uuid import uuid4

import structlog
from pydantic import BaseModel, Field

from ledgerdesk.bulk.processor import ProcessedBatch
from ledgerdesk.errors import PreparationNotFoundError
from ledgerdesk.models.responses import TransactionResponse

logger = structlog.get_logger(__name__)


class PreparedBatch(BaseModel):
    """A validated, not-yet-committed batch plus its enriched previews."""

    batch: ProcessedBatch
    preview_transactions: list[TransactionResponse] = Field(default_factory=list)
    preview_deletions: list[TransactionResponse] = Field(default_factory=list)


class PreparationStoreInterface(ABC):
    """Abstract keyed, single-use staging area."""

    @abstractmethod
    async def stage(self, prepared: PreparedBatch) -> str:
        """
        Stage a prepared batch.

        Returns:
            A fresh, opaque preparation key
        """
        pass

    @abstractmethod
    async def consume(self, preparation_id: str) -> PreparedBatch:
        """
        Remove and return a staged batch.

        Raises:
            PreparationNotFoundError: Unknown or already consumed key
        """
        pass

    @abstractmethod
    async def pending_count(self) -> int:
        """Number of staged, not yet consumed batches."""
        pass


class InMemoryPreparationStore(PreparationStoreInterface):
    """Process-local store backed by a dict and an asyncio.Lock."""

    def __init__(self):
        self._prepared: dict[str, PreparedBatch] = {}
        self._lock = Lock()

    async def stage(self, prepared: PreparedBatch) -> str:
        preparation_id = str(uuid4())
        async with self._lock:
            self._prepared[preparation_id] = prepared
            pending = len(self._prepared)
        logger.debug("preparation_staged", preparation_id=preparation_id, pending=pending)
        return preparation_id

    async def consume(self, preparation_id: str) -> PreparedBatch:
        async with self._lock:
            prepared = self._prepared.pop(preparation_id, None)
        if prepared is None:
            raise PreparationNotFoundError(preparation_id)
        logger.debug("preparation_consumed", preparation_id=preparation_id)
        return prepared

    async def pending_count(self) -> int:
        async with self._lock:
            return len(self._prepared)
