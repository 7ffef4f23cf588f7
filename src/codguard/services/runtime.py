"""
Runtime wiring and lifecycle.

Builds every service on one key-value store and handles activation,
shutdown and deactivation.
"""

from dataclasses import dataclass
from typing import Optional

from codguard.api.client import CodGuardClient
from codguard.config.constants import SEND_TASK_NAME
from codguard.config.settings import Settings
from codguard.core.logger import setup_logger
from codguard.services.block_log import BlockLog
from codguard.services.checkout_gate import CheckoutGate
from codguard.services.feedback import FeedbackReporter
from codguard.services.order_queue import OrderQueue
from codguard.services.order_sync import OrderSyncEngine, SyncHistory
from codguard.services.scheduler import TaskScheduler
from codguard.services.settings_manager import SettingsManager
from codguard.storage.base import KeyValueStore

logger = setup_logger(__name__)


@dataclass
class Runtime:
    """All services of a running instance."""

    config: Settings
    store: KeyValueStore
    client: CodGuardClient
    settings_manager: SettingsManager
    block_log: BlockLog
    reporter: FeedbackReporter
    gate: CheckoutGate
    queue: OrderQueue
    scheduler: TaskScheduler
    history: SyncHistory
    sync: OrderSyncEngine

    async def start(self) -> None:
        """
        Activate the service.

        Steps:
        1. Write default settings (seeded from the environment) if none exist
        2. Register the bundled send and start the scheduler
        3. Re-arm the bundled send for orders queued before a restart
        """
        await self.settings_manager.initialize(seed_from_config(self.config))

        self.sync.register()
        self.scheduler.start()

        await self.sync.recover()
        logger.info("CodGuard runtime started")

    async def stop(self) -> None:
        """Release resources. Queued orders stay in the store."""
        self.scheduler.shutdown()
        await self.client.close()
        await self.store.close()
        logger.info("CodGuard runtime stopped")

    async def deactivate(self) -> None:
        """Clear the scheduled bundled send and the order queue."""
        self.scheduler.unschedule(SEND_TASK_NAME)
        await self.queue.clear()
        logger.info("Deactivated, queue cleared")


def seed_from_config(config: Settings) -> dict:
    """Initial shop settings taken from the environment."""
    seed = {}
    if config.codguard_shop_id:
        seed["shop_id"] = config.codguard_shop_id
    if config.codguard_public_key:
        seed["public_key"] = config.codguard_public_key
    if config.codguard_private_key:
        seed["private_key"] = config.codguard_private_key
    if config.codguard_cod_methods:
        seed["cod_methods"] = config.codguard_cod_methods
    return seed


def build_runtime(
    config: Settings,
    store: Optional[KeyValueStore] = None,
    client: Optional[CodGuardClient] = None,
    scheduler: Optional[TaskScheduler] = None,
) -> Runtime:
    """
    Create all services.

    Args:
        config: Environment configuration
        store: Key-value store (default: Redis if enabled, else in-memory)
        client: CodGuard API client (default: built from config)
        scheduler: Task scheduler (default: new AsyncIOScheduler)

    Returns:
        Runtime ready to be started
    """
    if store is None:
        if config.redis_enabled:
            from codguard.storage.redis_store import RedisKeyValueStore
            store = RedisKeyValueStore(config.redis_host, config.redis_port, config.redis_db)
        else:
            from codguard.storage.memory_store import MemoryKeyValueStore
            logger.warning("Redis disabled, using in-memory store (queue is lost on restart)")
            store = MemoryKeyValueStore()

    client = client or CodGuardClient(config.api_base_url)
    scheduler = scheduler or TaskScheduler()

    settings_manager = SettingsManager(store)
    block_log = BlockLog(store)
    reporter = FeedbackReporter(client)
    gate = CheckoutGate(settings_manager, client, reporter, block_log)
    queue = OrderQueue(store)
    history = SyncHistory(store)
    sync = OrderSyncEngine(
        settings_manager,
        queue,
        scheduler,
        client,
        history=history,
        bundle_delay=config.bundle_delay_seconds,
    )

    return Runtime(
        config=config,
        store=store,
        client=client,
        settings_manager=settings_manager,
        block_log=block_log,
        reporter=reporter,
        gate=gate,
        queue=queue,
        scheduler=scheduler,
        history=history,
        sync=sync,
    )
