"""
One-shot task scheduling using APScheduler.

Tasks are registered by name and scheduled at most once at a time: asking to
schedule a task that is already pending is a no-op. Run times are "not
before" targets; a late task still runs.
"""

from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from codguard.core.errors import UnknownTaskError
from codguard.core.logger import setup_logger

logger = setup_logger(__name__)

TaskHandler = Callable[[], Awaitable[object]]


class TaskScheduler:
    """Named one-shot tasks on an AsyncIOScheduler."""

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self.scheduler = scheduler or AsyncIOScheduler(timezone="UTC")
        self._handlers: Dict[str, TaskHandler] = {}
        self._started = False

    def register(self, task_name: str, handler: TaskHandler) -> None:
        """Register the coroutine function run when a task fires."""
        self._handlers[task_name] = handler
        logger.debug(f"Registered handler for task {task_name}")

    def is_scheduled(self, task_name: str) -> bool:
        return self.scheduler.get_job(task_name) is not None

    def schedule_once(self, task_name: str, run_at: datetime) -> bool:
        """
        Schedule a task unless it is already pending.

        Args:
            task_name: Registered task name
            run_at: Earliest run time (timezone-aware)

        Returns:
            True if a new run was scheduled, False if one was already pending

        Raises:
            UnknownTaskError: If no handler is registered for the task
        """
        if task_name not in self._handlers:
            raise UnknownTaskError(task_name)

        if self.is_scheduled(task_name):
            logger.debug(f"Task {task_name} already scheduled, keeping existing run")
            return False

        self.scheduler.add_job(
            self._run_task,
            DateTrigger(run_date=run_at),
            args=[task_name],
            id=task_name,
            name=task_name,
            misfire_grace_time=None,
            coalesce=True,
        )
        return True

    def unschedule(self, task_name: str) -> bool:
        """Remove a pending run. Returns False if nothing was scheduled."""
        if not self.is_scheduled(task_name):
            return False
        self.scheduler.remove_job(task_name)
        logger.info(f"Unscheduled task {task_name}")
        return True

    def next_run_time(self, task_name: str) -> Optional[datetime]:
        job = self.scheduler.get_job(task_name)
        if job is None:
            return None
        # Jobs added before start() have no computed run time yet
        return getattr(job, "next_run_time", None) or job.trigger.run_date

    async def run_now(self, task_name: str) -> object:
        """Run a task's handler immediately, outside the schedule."""
        handler = self._handlers.get(task_name)
        if handler is None:
            raise UnknownTaskError(task_name)
        return await handler()

    async def _run_task(self, task_name: str) -> None:
        """Wrapper for scheduled runs with error handling."""
        logger.info(f"Scheduled task triggered: {task_name}")
        try:
            await self.run_now(task_name)
        except Exception as e:
            logger.error(f"Scheduled task {task_name} failed: {e}", exc_info=True)

    def start(self) -> None:
        if self._started:
            logger.warning("Scheduler already started")
            return
        self.scheduler.start()
        self._started = True
        logger.info("Task scheduler started")

    def shutdown(self) -> None:
        """Stop the scheduler. Pending runs are dropped."""
        if not self._started:
            return
        self.scheduler.shutdown(wait=False)
        self._started = False
        logger.info("Task scheduler stopped")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._started and self.scheduler.running
