"""Tests for the cursor Timer and the drag-seek ScheduledTask."""

import asyncio
from unittest.mock import Mock

import pytest

from wavesync.core import TICK_INTERVAL, ScheduledTask, Timer
from wavesync.protocols import TimerEvent


@pytest.mark.unit
class TestTimer:
    """Test the fixed-rate ticker."""

    def test_default_interval(self):
        assert Timer().interval == pytest.approx(1 / 60)
        assert TICK_INTERVAL == pytest.approx(1 / 60)

    async def test_ticks_while_running(self):
        timer = Timer(interval=0.01)
        ticks = Mock()
        timer.on(TimerEvent.TICK, ticks)

        timer.start()
        await asyncio.sleep(0.1)
        timer.stop()

        assert ticks.call_count >= 3
        assert not timer.is_running

    async def test_no_ticks_after_stop(self):
        timer = Timer(interval=0.01)
        ticks = Mock()
        timer.on(TimerEvent.TICK, ticks)

        timer.start()
        await asyncio.sleep(0.05)
        timer.stop()
        count = ticks.call_count
        await asyncio.sleep(0.05)

        assert ticks.call_count == count

    async def test_start_is_idempotent(self):
        timer = Timer(interval=0.01)
        timer.start()
        task = timer._task

        timer.start()

        assert timer._task is task
        timer.stop()

    def test_stop_when_stopped(self):
        timer = Timer()
        timer.stop()
        # Should not raise
        assert not timer.is_running

    async def test_destroy_drops_handlers(self):
        timer = Timer(interval=0.01)
        ticks = Mock()
        timer.on(TimerEvent.TICK, ticks)
        timer.start()

        timer.destroy()
        ticks.reset_mock()
        await asyncio.sleep(0.03)

        assert not timer.is_running
        ticks.assert_not_called()


@pytest.mark.unit
class TestScheduledTask:
    """Test the single-slot delayed call."""

    async def test_fires_after_delay(self):
        task = ScheduledTask()
        callback = Mock()

        task.schedule(0.02, callback, "arg")
        assert task.pending
        await asyncio.sleep(0.05)

        callback.assert_called_once_with("arg")
        assert not task.pending

    async def test_reschedule_replaces_pending_call(self):
        task = ScheduledTask()
        callback = Mock()

        task.schedule(0.02, callback, 1)
        task.schedule(0.02, callback, 2)
        task.schedule(0.02, callback, 3)
        await asyncio.sleep(0.05)

        callback.assert_called_once_with(3)

    async def test_cancel(self):
        task = ScheduledTask()
        callback = Mock()

        task.schedule(0.02, callback)
        assert task.cancel() is True
        await asyncio.sleep(0.05)

        callback.assert_not_called()
        assert task.cancel() is False
