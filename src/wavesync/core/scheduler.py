"""Single-slot delayed call, used to debounce seeks while dragging."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ScheduledTask:
    """
    Owns at most one pending delayed call.

    Scheduling cancels whatever was pending and installs the new call, so a
    burst of `schedule()` calls results in exactly one callback: the last one.
    """

    def __init__(self, name: str = "task"):
        self.name = name
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not fired yet."""
        return self._handle is not None

    def schedule(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        """
        Replace any pending call with `callback(*args)` after `delay` seconds.

        Must be called from within the running asyncio loop.
        """
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, callback, args)

    def cancel(self) -> bool:
        """
        Cancel the pending call.

        Returns:
            True if a call was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug(f"Cancelled pending {self.name}")
        return True

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        callback(*args)
