"""Order queue for the bundled sync.

Pending orders are kept as one mapping (order ID -> queue entry) in the
key-value store, with a 24 hour expiry as a safety net.
"""

import asyncio
from typing import Any, Dict

from codguard.config.constants import QUEUE_KEY, QUEUE_TTL_SECONDS
from codguard.core.logger import setup_logger
from codguard.models.order import QueueEntry
from codguard.storage.base import KeyValueStore

logger = setup_logger(__name__)


class OrderQueue:
    """Queue of orders waiting for the next bundled send.

    Read-modify-write cycles run under a lock so concurrent status changes
    never drop each other's entries.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = QUEUE_KEY,
        ttl_seconds: int = QUEUE_TTL_SECONDS,
    ):
        self.store = store
        self.key = key
        self.ttl_seconds = ttl_seconds
        self._lock = asyncio.Lock()

    async def upsert(self, order_id: str, entry: QueueEntry) -> int:
        """
        Add or replace the entry for an order.

        Args:
            order_id: Order identifier (last write wins)
            entry: Prepared order data

        Returns:
            Number of orders in the queue

        Raises:
            StoreError: If the queue could not be saved
        """
        async with self._lock:
            queue = await self._load()
            queue[str(order_id)] = entry.model_dump()
            await self.store.set(self.key, queue, self.ttl_seconds)
            size = len(queue)

        logger.debug(f"Order #{order_id} added to queue ({size} orders total)")
        return size

    async def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Get a copy of all queued entries keyed by order ID."""
        return await self._load()

    async def remove_sent(self, sent: Dict[str, Dict[str, Any]]) -> int:
        """
        Remove entries that were delivered.

        Entries changed since the snapshot was taken stay queued, so their
        newer state goes out with the next batch.

        Args:
            sent: Snapshot that was delivered

        Returns:
            Number of orders still queued
        """
        async with self._lock:
            queue = await self._load()
            for order_id, entry in sent.items():
                if queue.get(order_id) == entry:
                    del queue[order_id]

            if queue:
                await self.store.set(self.key, queue, self.ttl_seconds)
            else:
                await self.store.delete(self.key)

            return len(queue)

    async def clear(self) -> None:
        async with self._lock:
            await self.store.delete(self.key)

    async def size(self) -> int:
        return len(await self._load())

    async def _load(self) -> Dict[str, Dict[str, Any]]:
        queue = await self.store.get(self.key)
        return queue if isinstance(queue, dict) else {}
