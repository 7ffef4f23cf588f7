"""
COD Block Log

Append-only record of blocked COD attempts, kept for 90 days, with the
counters shown on the dashboard.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from codguard.config.constants import BLOCK_EVENTS_KEY, BLOCK_LOG_RETENTION_DAYS
from codguard.core.logger import setup_logger
from codguard.storage.base import KeyValueStore

logger = setup_logger(__name__)

DAY_IN_SECONDS = 86400


class BlockLog:
    """Time-windowed log of block events stored as one list."""

    def __init__(
        self,
        store: KeyValueStore,
        retention_days: int = BLOCK_LOG_RETENTION_DAYS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.retention_seconds = retention_days * DAY_IN_SECONDS
        self._clock = clock
        self._lock = asyncio.Lock()

    async def record(self, email: str, rating: float) -> int:
        """
        Record a block event and drop events outside the retention window.

        Args:
            email: Customer email
            rating: Rating that caused the block

        Returns:
            Number of events kept
        """
        async with self._lock:
            now = int(self._clock())
            events = await self._load()
            events.append({"timestamp": now, "email": email, "rating": float(rating)})

            cutoff = now - self.retention_seconds
            events = [event for event in events if event["timestamp"] > cutoff]

            await self.store.set(BLOCK_EVENTS_KEY, events)

        logger.debug(
            f"Block event recorded for {email} (rating: {rating:.2f}). "
            f"Total events: {len(events)}"
        )
        return len(events)

    async def events(self, since: Optional[float] = None) -> List[Dict[str, Any]]:
        """Get block events, optionally only those at or after a timestamp."""
        events = await self._load()
        if since is None:
            return events
        return [event for event in events if event["timestamp"] >= since]

    async def statistics(self) -> Dict[str, int]:
        """Count block events for today, the last 7 and 30 days, and overall."""
        events = await self._load()
        now = self._clock()

        today_start = datetime.fromtimestamp(now, timezone.utc).replace(
            hour=0, minute=0, second=0, microsecond=0
        ).timestamp()
        week_start = now - 7 * DAY_IN_SECONDS
        month_start = now - 30 * DAY_IN_SECONDS

        return {
            "today": sum(1 for e in events if e["timestamp"] >= today_start),
            "week": sum(1 for e in events if e["timestamp"] >= week_start),
            "month": sum(1 for e in events if e["timestamp"] >= month_start),
            "all": len(events),
        }

    async def _load(self) -> List[Dict[str, Any]]:
        events = await self.store.get(BLOCK_EVENTS_KEY)
        return events if isinstance(events, list) else []
