"""Tests for one-shot task scheduling."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from codguard.core.errors import UnknownTaskError
from codguard.services.scheduler import TaskScheduler


def in_an_hour() -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=1)


@pytest.fixture
async def scheduler():
    task_scheduler = TaskScheduler()
    yield task_scheduler
    # Shut down while the test's event loop is still running
    task_scheduler.shutdown()


class TestTaskScheduler:
    @pytest.mark.asyncio
    async def test_schedule_once_is_idempotent(self, scheduler):
        scheduler.register("send", lambda: asyncio.sleep(0))
        first_run = in_an_hour()

        assert scheduler.schedule_once("send", first_run) is True
        assert scheduler.schedule_once("send", first_run + timedelta(hours=1)) is False

        assert scheduler.is_scheduled("send")
        assert scheduler.next_run_time("send") == first_run

    @pytest.mark.asyncio
    async def test_unknown_task_rejected(self, scheduler):
        with pytest.raises(UnknownTaskError):
            scheduler.schedule_once("missing", in_an_hour())

    @pytest.mark.asyncio
    async def test_unschedule(self, scheduler):
        scheduler.register("send", lambda: asyncio.sleep(0))
        scheduler.schedule_once("send", in_an_hour())

        assert scheduler.unschedule("send") is True
        assert not scheduler.is_scheduled("send")
        assert scheduler.next_run_time("send") is None
        assert scheduler.unschedule("send") is False

    @pytest.mark.asyncio
    async def test_run_now(self, scheduler):
        calls = []

        async def handler():
            calls.append("ran")
            return "done"

        scheduler.register("send", handler)
        assert await scheduler.run_now("send") == "done"
        assert calls == ["ran"]

    @pytest.mark.asyncio
    async def test_run_now_unknown_task(self, scheduler):
        with pytest.raises(UnknownTaskError):
            await scheduler.run_now("missing")

    @pytest.mark.asyncio
    async def test_due_task_runs_and_can_be_rescheduled(self, scheduler):
        fired = asyncio.Event()

        async def handler():
            fired.set()

        scheduler.register("send", handler)
        scheduler.schedule_once("send", datetime.now(timezone.utc) - timedelta(seconds=1))
        scheduler.start()

        await asyncio.wait_for(fired.wait(), timeout=5)
        await asyncio.sleep(0)

        assert not scheduler.is_scheduled("send")
        assert scheduler.schedule_once("send", in_an_hour()) is True

    @pytest.mark.asyncio
    async def test_failing_task_is_logged_not_raised(self, scheduler):
        async def handler():
            raise RuntimeError("boom")

        scheduler.register("send", handler)
        await scheduler._run_task("send")

    @pytest.mark.asyncio
    async def test_start_and_shutdown(self, scheduler):
        scheduler.start()
        assert scheduler.is_running

        scheduler.shutdown()
        assert not scheduler.is_running
