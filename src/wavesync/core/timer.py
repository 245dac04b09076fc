"""Fixed-rate ticker for smooth cursor updates."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Optional

from wavesync.protocols import TimerEvent

from .event_bus import EventBus, Subscription

logger = logging.getLogger(__name__)

# ~60 ticks per second
TICK_INTERVAL = 1 / 60


class Timer:
    """
    Emits TimerEvent.TICK at a fixed interval while started.

    A media player's own position events arrive a few times per second at
    best, which makes a cursor jump. The orchestrator starts this timer on
    play and stops it on pause, recomputing progress on every tick.

    The ticking runs as a task on the running asyncio loop, so `start()` must
    be called from within that loop.
    """

    def __init__(self, interval: float = TICK_INTERVAL):
        """
        Initialize the timer.

        Args:
            interval: Seconds between ticks
        """
        self.interval = interval
        self._bus = EventBus(TimerEvent, name="timer")
        self._task: Optional[asyncio.Task] = None

    def on(self, event: TimerEvent | str, handler: Callable[..., Any]) -> Subscription:
        """Register a tick handler."""
        return self._bus.on(event, handler)

    @property
    def is_running(self) -> bool:
        """True while ticks are being produced."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin ticking. Does nothing if already started."""
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name="wavesync-timer")
        logger.debug("Timer started")

    def stop(self) -> None:
        """Halt ticking. Does nothing if already stopped."""
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.debug("Timer stopped")

    def destroy(self) -> None:
        """Stop ticking and drop every tick handler."""
        self.stop()
        self._bus.un_all()

    async def _run(self) -> None:
        while True:
            self._bus.emit(TimerEvent.TICK)
            await asyncio.sleep(self.interval)
