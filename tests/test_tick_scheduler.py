# tests/test_tick_scheduler.py
"""asyncio 排程：逐步驅動、取代、停止。"""

import asyncio

import pytest

from forcegraph.layout.tick_scheduler import TickScheduler


def _counting_step(calls: list, limit: int | None = None):
    def step() -> bool:
        calls.append(len(calls))
        return limit is not None and len(calls) >= limit

    return step


def test_runs_step_until_it_reports_finished():
    async def scenario():
        calls: list = []
        scheduler = TickScheduler(interval=0)
        scheduler.start(_counting_step(calls, limit=3))
        assert scheduler.running
        finished = await scheduler.wait()
        return finished, calls, scheduler.running

    finished, calls, running = asyncio.run(scenario())
    assert finished is True
    assert len(calls) == 3
    assert running is False


def test_new_start_supersedes_pending_step():
    async def scenario():
        old_calls: list = []
        new_calls: list = []
        scheduler = TickScheduler(interval=0)
        scheduler.start(_counting_step(old_calls))
        scheduler.start(_counting_step(new_calls, limit=2))
        await scheduler.wait()
        return old_calls, new_calls

    old_calls, new_calls = asyncio.run(scenario())
    assert old_calls == []
    assert len(new_calls) == 2


def test_stop_cancels_waiters():
    async def scenario():
        scheduler = TickScheduler(interval=0.01)
        scheduler.start(_counting_step([]))
        waiter = asyncio.ensure_future(scheduler.wait())
        await asyncio.sleep(0)
        scheduler.stop()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        return scheduler.running

    assert asyncio.run(scenario()) is False


def test_wait_without_schedule_returns_false():
    assert asyncio.run(TickScheduler().wait()) is False


def test_start_without_running_loop_raises():
    with pytest.raises(RuntimeError):
        TickScheduler().start(lambda: True)
