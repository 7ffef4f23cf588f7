"""Tests for the bundled sync order queue."""

import asyncio

import pytest

from codguard.config.constants import QUEUE_KEY, QUEUE_TTL_SECONDS
from codguard.models.order import QueueEntry
from codguard.services.order_queue import OrderQueue
from codguard.storage.memory_store import MemoryKeyValueStore


class YieldingStore(MemoryKeyValueStore):
    """Memory store that gives up the event loop on every read and write."""

    async def get(self, key):
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key, value, ttl_seconds=None):
        await asyncio.sleep(0)
        await super().set(key, value, ttl_seconds)


def entry(outcome="1", status="completed", email="a@b.com"):
    return QueueEntry(
        eshop_id=12345,
        email=email,
        code="1001",
        status=status,
        outcome=outcome,
    )


@pytest.fixture
def queue(store):
    return OrderQueue(store)


class TestOrderQueue:
    @pytest.mark.asyncio
    async def test_upsert_last_write_wins(self, queue):
        assert await queue.upsert("1", entry(outcome="-1", status="cancelled")) == 1
        assert await queue.upsert("1", entry(outcome="1")) == 1

        snapshot = await queue.snapshot()
        assert list(snapshot) == ["1"]
        assert snapshot["1"]["outcome"] == "1"

    @pytest.mark.asyncio
    async def test_upsert_multiple_orders(self, queue):
        await queue.upsert("1", entry())
        assert await queue.upsert("2", entry(email="c@d.com")) == 2
        assert await queue.size() == 2

    @pytest.mark.asyncio
    async def test_queue_expires_after_a_day(self, queue, store, clock):
        await queue.upsert("1", entry())
        assert store.ttl(QUEUE_KEY) == QUEUE_TTL_SECONDS

        clock.advance(QUEUE_TTL_SECONDS)
        assert await queue.size() == 0

    @pytest.mark.asyncio
    async def test_remove_sent_clears_queue(self, queue, store):
        await queue.upsert("1", entry())
        snapshot = await queue.snapshot()

        assert await queue.remove_sent(snapshot) == 0
        assert await store.get(QUEUE_KEY) is None

    @pytest.mark.asyncio
    async def test_remove_sent_keeps_changed_and_new_entries(self, queue):
        await queue.upsert("1", entry())
        await queue.upsert("2", entry())
        snapshot = await queue.snapshot()

        await queue.upsert("2", entry(outcome="-1", status="cancelled"))
        await queue.upsert("3", entry())

        assert await queue.remove_sent(snapshot) == 2
        remaining = await queue.snapshot()
        assert set(remaining) == {"2", "3"}
        assert remaining["2"]["outcome"] == "-1"

    @pytest.mark.asyncio
    async def test_clear(self, queue):
        await queue.upsert("1", entry())
        await queue.clear()
        assert await queue.snapshot() == {}

    @pytest.mark.asyncio
    async def test_concurrent_upserts_all_kept(self, clock):
        queue = OrderQueue(YieldingStore(clock=clock))

        await asyncio.gather(*(queue.upsert(str(i), entry()) for i in range(50)))

        snapshot = await queue.snapshot()
        assert set(snapshot) == {str(i) for i in range(50)}

    @pytest.mark.asyncio
    async def test_upsert_during_removal_kept(self, clock):
        queue = OrderQueue(YieldingStore(clock=clock))
        await queue.upsert("1", entry())
        sent = await queue.snapshot()

        await asyncio.gather(queue.remove_sent(sent), queue.upsert("2", entry()))

        assert set(await queue.snapshot()) == {"2"}
