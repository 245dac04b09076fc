"""Plugin base class and registry.

A plugin is attached with `Orchestrator.register_plugin()`. It stays active
until it destroys itself (emitting PluginEvent.DESTROY) or the orchestrator is
destroyed. The registry only listens to that signal; the plugin never holds a
reference to the registry.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

from wavesync.protocols import Plugin, PluginEvent

from .event_bus import EventBus, Subscription

logger = logging.getLogger(__name__)


class BasePlugin:
    """
    Convenience base for plugins.

    Subclasses override `on_init()` to wire themselves to `self.host` and put
    every subscription they take into `self.subscriptions`; `destroy()`
    releases them all after announcing PluginEvent.DESTROY.

    A subclass with more events sets `events` to its own enum, which must
    include a "destroy" member.

    Example:
        ```python
        class ReadyLogger(BasePlugin):
            def on_init(self):
                self.subscriptions.append(
                    self.host.on(WaveEvent.READY, lambda d: print(f"ready: {d:.2f}s"))
                )
        ```
    """

    events: type[Enum] = PluginEvent

    def __init__(self, options: Optional[dict[str, Any]] = None):
        """
        Initialize the plugin.

        Args:
            options: Plugin-specific options
        """
        self.options = options or {}
        self.host: Any = None
        self.subscriptions: list[Subscription] = []
        self._bus = EventBus(self.events, name=type(self).__name__)

    def on(self, event: Enum | str, handler: Callable[..., Any]) -> Subscription:
        """Register a handler for one of this plugin's events."""
        return self._bus.on(event, handler)

    def once(self, event: Enum | str, handler: Callable[..., Any]) -> Subscription:
        """Register a one-shot handler for one of this plugin's events."""
        return self._bus.once(event, handler)

    def emit(self, event: Enum | str, *payload: Any) -> None:
        """Emit one of this plugin's events."""
        self._bus.emit(event, *payload)

    def init(self, host: Any) -> None:
        """Attach to `host` (called by the registry)."""
        self.host = host
        self.on_init()

    def on_init(self) -> None:
        """Hook for subclasses; `self.host` is set when this runs."""

    def destroy(self) -> None:
        """Announce destruction, then release every subscription."""
        self._bus.emit(PluginEvent.DESTROY)
        for unsubscribe in self.subscriptions:
            unsubscribe()
        self.subscriptions.clear()
        self._bus.un_all()


class PluginRegistry:
    """
    Tracks the active plugins of one host.

    Each registered plugin maps to the one-shot subscription the registry
    holds on its destroy signal. When the signal fires the plugin is removed;
    a second signal, or a second removal, finds nothing and does nothing.
    """

    def __init__(self) -> None:
        self._plugins: list[Plugin] = []
        self._subscriptions: dict[int, Subscription] = {}

    def register(self, plugin: Plugin, host: Any) -> Plugin:
        """
        Initialize `plugin` against `host` and start tracking it.

        Registering an already-active plugin is a no-op.

        Returns:
            The same plugin instance
        """
        if self.is_registered(plugin):
            logger.debug(f"Plugin already registered: {type(plugin).__name__}")
            return plugin

        plugin.init(host)
        self._plugins.append(plugin)
        self._subscriptions[id(plugin)] = plugin.once(
            PluginEvent.DESTROY, lambda: self.remove(plugin)
        )
        logger.info(f"Registered plugin: {type(plugin).__name__}")
        return plugin

    def remove(self, plugin: Plugin) -> bool:
        """
        Stop tracking `plugin` without destroying it.

        Returns:
            True if the plugin was active
        """
        subscription = self._subscriptions.pop(id(plugin), None)
        if subscription is not None:
            subscription.release()

        remaining = [p for p in self._plugins if p is not plugin]
        if len(remaining) == len(self._plugins):
            return False
        self._plugins = remaining
        logger.info(f"Removed plugin: {type(plugin).__name__}")
        return True

    def is_registered(self, plugin: Plugin) -> bool:
        """True if `plugin` is currently active."""
        return any(p is plugin for p in self._plugins)

    @property
    def plugins(self) -> list[Plugin]:
        """Snapshot of the active plugins, in registration order."""
        return list(self._plugins)

    def destroy_all(self) -> None:
        """
        Destroy every active plugin.

        A plugin whose destroy() raises is logged and dropped; the rest are
        still destroyed.
        """
        for plugin in list(self._plugins):
            try:
                plugin.destroy()
            except Exception as e:
                logger.error(f"Error destroying plugin {type(plugin).__name__}: {e}", exc_info=True)
            self.remove(plugin)

    def release(self) -> None:
        """Release every destroy-signal subscription and forget all plugins."""
        for subscription in self._subscriptions.values():
            subscription.release()
        self._subscriptions.clear()
        self._plugins.clear()

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, plugin: Plugin) -> bool:
        return self.is_registered(plugin)
