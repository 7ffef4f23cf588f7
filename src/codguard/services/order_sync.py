"""
Bundled Order Sync

Collects orders that reach the configured "good" or "refused" status and
sends them to the CodGuard import API in one batch, one bundle delay after
the first order was queued.

A failed send leaves the queue untouched; the next qualifying status change
schedules another attempt.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from codguard.api.client import CodGuardClient
from codguard.config.constants import (
    BUNDLE_DELAY_SECONDS,
    SEND_TASK_NAME,
    SYNC_HISTORY_KEY,
    SYNC_HISTORY_LIMIT,
)
from codguard.core.errors import OrderImportError, StoreError
from codguard.core.logger import setup_logger
from codguard.models.order import OrderProjection, QueueEntry
from codguard.models.shop_settings import ShopSettings
from codguard.services.feedback import outcome_for_status
from codguard.services.order_queue import OrderQueue
from codguard.services.scheduler import TaskScheduler
from codguard.services.settings_manager import SettingsManager
from codguard.storage.base import KeyValueStore

logger = setup_logger(__name__)


@dataclass
class FlushResult:
    """Result of one bundled send."""

    success: bool
    orders_sent: int = 0
    error: Optional[str] = None


class SyncHistory:
    """Most recent bundled send attempts, newest first."""

    def __init__(
        self,
        store: KeyValueStore,
        limit: int = SYNC_HISTORY_LIMIT,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.limit = limit
        self._clock = clock

    async def append(self, result: FlushResult) -> None:
        entries = await self.entries()
        entries.insert(0, {
            "timestamp": int(self._clock()),
            "status": "success" if result.success else "failed",
            "count": result.orders_sent,
            "error": result.error,
        })
        await self.store.set(SYNC_HISTORY_KEY, entries[:self.limit])

    async def entries(self) -> List[Dict[str, Any]]:
        entries = await self.store.get(SYNC_HISTORY_KEY)
        return entries if isinstance(entries, list) else []


class OrderSyncEngine:
    """Queues order outcomes and flushes them to the import API."""

    def __init__(
        self,
        settings_manager: SettingsManager,
        queue: OrderQueue,
        scheduler: TaskScheduler,
        client: CodGuardClient,
        history: Optional[SyncHistory] = None,
        bundle_delay: int = BUNDLE_DELAY_SECONDS,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.settings_manager = settings_manager
        self.queue = queue
        self.scheduler = scheduler
        self.client = client
        self.history = history
        self.bundle_delay = bundle_delay
        self._now = now or (lambda: datetime.now(timezone.utc))

    def register(self) -> None:
        """Register the bundled send with the scheduler."""
        self.scheduler.register(SEND_TASK_NAME, self.send_bundled_orders)

    async def on_order_status_changed(
        self,
        order: OrderProjection,
        old_status: str,
        new_status: str,
    ) -> bool:
        """
        Handle order status change.

        Adds the order to the queue and schedules the bundled send.

        Args:
            order: Order projection
            old_status: Previous status
            new_status: New status

        Returns:
            True if the order was queued

        Raises:
            StoreError: If the queue could not be saved
        """
        settings = await self.settings_manager.get_settings()
        if not settings.enabled:
            return False

        if new_status not in (settings.good_status, settings.refused_status):
            return False

        logger.info(
            f"Order #{order.id} status changed from {old_status} to {new_status} - adding to queue"
        )

        entry = self.prepare_order(order, settings, status=new_status)
        if entry is None:
            return False

        await self.queue.upsert(order.id, entry)
        self.ensure_scheduled()
        return True

    def prepare_order(
        self,
        order: OrderProjection,
        settings: ShopSettings,
        status: Optional[str] = None,
    ) -> Optional[QueueEntry]:
        """
        Prepare single order data for the API.

        Args:
            order: Order projection
            settings: Current shop settings
            status: Status to report (defaults to the order's own status)

        Returns:
            Queue entry, or None if the order has no billing email
        """
        email = (order.billing_email or "").strip()
        if not email:
            logger.warning(f"Skipping order #{order.id}: No email address")
            return None

        status = status or order.status

        return QueueEntry(
            eshop_id=settings.eshop_id,
            email=email,
            code=order.code,
            status=status,
            outcome=outcome_for_status(status, settings.refused_status),
            phone=order.billing_phone or "",
            country_code=order.billing_country or "",
            postal_code=order.billing_postcode or "",
            address=order.format_address(),
        )

    def ensure_scheduled(self) -> bool:
        """
        Schedule the bundled send if it is not already pending.

        Returns:
            True if a new send was scheduled
        """
        run_at = self._now() + timedelta(seconds=self.bundle_delay)
        scheduled = self.scheduler.schedule_once(SEND_TASK_NAME, run_at)
        if scheduled:
            logger.info(
                f"Bundled send scheduled for {run_at.strftime('%Y-%m-%d %H:%M:%S')} "
                f"({self.bundle_delay}s delay)"
            )
        return scheduled

    async def send_bundled_orders(self) -> FlushResult:
        """Send bundled orders from the queue."""
        snapshot = await self.queue.snapshot()

        if not snapshot:
            logger.info("Bundled send triggered but queue is empty")
            return FlushResult(success=True)

        logger.info(f"Sending {len(snapshot)} bundled orders to API")

        settings = await self.settings_manager.get_settings()
        try:
            await self.client.import_orders(settings, list(snapshot.values()))
        except OrderImportError as e:
            # Queue is kept for the next bundle
            logger.error(f"Bundled send failed: {e}")
            result = FlushResult(success=False, error=str(e))
            await self._record(result)
            return result

        remaining = await self.queue.remove_sent(snapshot)
        logger.info(f"Successfully sent {len(snapshot)} bundled orders")
        if remaining:
            logger.info(f"{remaining} orders changed during the send and stay queued")

        result = FlushResult(success=True, orders_sent=len(snapshot))
        await self._record(result)
        return result

    async def recover(self) -> bool:
        """
        Re-arm the bundled send for a queue persisted across a restart.

        Returns:
            True if a send was scheduled
        """
        pending = await self.queue.size()
        if not pending:
            return False

        logger.info(f"Found {pending} queued orders at startup")
        return self.ensure_scheduled()

    async def _record(self, result: FlushResult) -> None:
        if self.history is None:
            return
        try:
            await self.history.append(result)
        except StoreError as e:
            logger.warning(f"Failed to record sync history: {e}")
