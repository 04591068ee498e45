"""Tests for the single-use preparation store."""

import asyncio

import pytest

from ledgerdesk.bulk import InMemoryPreparationStore, PreparedBatch, ProcessedBatch
from ledgerdesk.errors import PreparationNotFoundError


def prepared(created: int = 0) -> PreparedBatch:
    return PreparedBatch(batch=ProcessedBatch(created_count=created))


class TestInMemoryPreparationStore:
    """Tests for InMemoryPreparationStore."""

    @pytest.mark.asyncio
    async def test_stage_then_consume(self):
        store = InMemoryPreparationStore()
        key = await store.stage(prepared(created=2))

        result = await store.consume(key)
        assert result.batch.created_count == 2

    @pytest.mark.asyncio
    async def test_consume_is_single_use(self):
        store = InMemoryPreparationStore()
        key = await store.stage(prepared())
        await store.consume(key)

        with pytest.raises(PreparationNotFoundError) as exc_info:
            await store.consume(key)
        assert exc_info.value.preparation_id == key

    @pytest.mark.asyncio
    async def test_unknown_key(self):
        store = InMemoryPreparationStore()
        with pytest.raises(PreparationNotFoundError):
            await store.consume("never-staged")

    @pytest.mark.asyncio
    async def test_keys_are_unique(self):
        store = InMemoryPreparationStore()
        keys = {await store.stage(prepared()) for _ in range(10)}
        assert len(keys) == 10

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        store = InMemoryPreparationStore()
        first = await store.stage(prepared(created=1))
        second = await store.stage(prepared(created=2))

        assert (await store.consume(second)).batch.created_count == 2
        assert (await store.consume(first)).batch.created_count == 1

    @pytest.mark.asyncio
    async def test_concurrent_consume_has_one_winner(self):
        store = InMemoryPreparationStore()
        key = await store.stage(prepared())

        results = await asyncio.gather(
            *(store.consume(key) for _ in range(5)),
            return_exceptions=True,
        )
        winners = [r for r in results if isinstance(r, PreparedBatch)]
        losers = [r for r in results if isinstance(r, PreparationNotFoundError)]
        assert len(winners) == 1
        assert len(losers) == 4

    @pytest.mark.asyncio
    async def test_pending_count(self):
        store = InMemoryPreparationStore()
        assert await store.pending_count() == 0

        key = await store.stage(prepared())
        await store.stage(prepared())
        assert await store.pending_count() == 2

        await store.consume(key)
        assert await store.pending_count() == 1
