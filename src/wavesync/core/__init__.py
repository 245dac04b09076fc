"""Core primitives: event bus, timer, scheduled task and plugin registry."""

from .event_bus import EventBus, Subscription
from .plugins import BasePlugin, PluginRegistry
from .scheduler import ScheduledTask
from .timer import TICK_INTERVAL, Timer

__all__ = [
    "BasePlugin",
    "EventBus",
    "PluginRegistry",
    "ScheduledTask",
    "Subscription",
    "TICK_INTERVAL",
    "Timer",
]
