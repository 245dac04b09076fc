"""Typed publish/subscribe primitive.

Every component in wavesync (orchestrator, renderer, media player, timer,
plugins) owns an EventBus keyed by one of the enums in
`wavesync.protocols.events`. Registering a handler returns a Subscription;
releasing it detaches the handler.
"""

import logging
from collections.abc import Callable
from enum import Enum
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

E = TypeVar("E", bound=Enum)


class Subscription:
    """
    Handle for one registered handler.

    Releasing detaches the handler from its bus. Release is idempotent, and the
    handle is callable so a list of subscriptions can be torn down with
    `for unsubscribe in subscriptions: unsubscribe()`.
    """

    __slots__ = ("_bus", "event", "handler", "once", "_active")

    def __init__(self, bus: "EventBus", event: Enum, handler: Handler, once: bool = False):
        self._bus = bus
        self.event = event
        self.handler = handler
        self.once = once
        self._active = True

    @property
    def active(self) -> bool:
        """True until the subscription is released."""
        return self._active

    def release(self) -> None:
        """Detach the handler. Releasing twice is a no-op."""
        if not self._active:
            return
        self._active = False
        self._bus._detach(self)

    def __call__(self) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "active" if self._active else "released"
        return f"<Subscription {self.event.value} {state}>"


class EventBus(Generic[E]):
    """
    Publish/subscribe keyed by a fixed set of event names.

    Type Parameters:
        E: The Enum listing every event this bus may carry

    Dispatch:
        `emit` calls the handlers registered for an event synchronously, in
        registration order. The handler list is copied before dispatch, and
        each handler is skipped if it was released by an earlier handler in
        the same dispatch. Handlers registered during a dispatch are first
        called on the next emit.

    Error Handling:
        An exception raised by a handler is logged with its traceback and does
        not stop the remaining handlers.

    Example:
        ```python
        bus = EventBus(WaveEvent, name="player")
        subscription = bus.on(WaveEvent.READY, lambda duration: print(duration))
        bus.emit(WaveEvent.READY, 12.5)
        subscription.release()
        ```
    """

    def __init__(self, event_type: type[E], name: str = "event", lock: "Lock | None" = None):
        """
        Initialize the bus.

        Args:
            event_type: Enum of the events this bus carries
            name: Name used in log messages (e.g. "renderer", "media")
            lock: Optional lock guarding the handler table
        """
        self._event_type = event_type
        self._name = name
        self._lock = lock or Lock()
        self._handlers: dict[E, list[Subscription]] = {}

    def _coerce(self, event: E | Enum | str) -> E:
        """Resolve an enum member or its string value to this bus's enum."""
        if isinstance(event, self._event_type):
            return event
        value = event.value if isinstance(event, Enum) else event
        try:
            return self._event_type(value)
        except ValueError:
            raise ValueError(f"Unknown {self._name} event: {value!r}") from None

    def on(self, event: E | str, handler: Handler) -> Subscription:
        """
        Register a durable handler.

        Args:
            event: Event to listen to (enum member or its string value)
            handler: Called with the event's positional payload

        Returns:
            Subscription that detaches the handler when released
        """
        return self._attach(self._coerce(event), handler, once=False)

    def once(self, event: E | str, handler: Handler) -> Subscription:
        """
        Register a handler that is released just before its first call.

        Returns:
            Subscription that detaches the handler if released before it fires
        """
        return self._attach(self._coerce(event), handler, once=True)

    def emit(self, event: E | str, *payload: Any) -> None:
        """
        Call every handler registered for `event` with `payload`.

        Args:
            event: Event to emit
            *payload: Positional arguments passed to each handler
        """
        key = self._coerce(event)
        with self._lock:
            subscriptions = list(self._handlers.get(key, ()))

        for subscription in subscriptions:
            if not subscription.active:
                continue
            if subscription.once:
                subscription.release()
            try:
                subscription.handler(*payload)
            except Exception as e:
                logger.error(
                    f"Error in {self._name} handler for '{key.value}': {e}",
                    exc_info=True,
                )

    def un(self, event: E | str, handler: Handler) -> None:
        """Release every subscription of `handler` to `event`."""
        key = self._coerce(event)
        with self._lock:
            matching = [s for s in self._handlers.get(key, ()) if s.handler == handler]
        for subscription in matching:
            subscription.release()

    def un_all(self) -> None:
        """Release every subscription on this bus."""
        with self._lock:
            subscriptions = [s for subs in self._handlers.values() for s in subs]
        for subscription in subscriptions:
            subscription.release()

    def listener_count(self, event: E | str | None = None) -> int:
        """
        Count active handlers.

        Args:
            event: Only count handlers for this event (all events if None)
        """
        with self._lock:
            if event is None:
                return sum(len(subs) for subs in self._handlers.values())
            return len(self._handlers.get(self._coerce(event), ()))

    def _attach(self, event: E, handler: Handler, once: bool) -> Subscription:
        subscription = Subscription(self, event, handler, once=once)
        with self._lock:
            self._handlers.setdefault(event, []).append(subscription)
        logger.debug(f"Subscribed {self._name} handler to '{event.value}' (once={once})")
        return subscription

    def _detach(self, subscription: Subscription) -> None:
        with self._lock:
            subscriptions = self._handlers.get(subscription.event)
            if subscriptions and subscription in subscriptions:
                subscriptions.remove(subscription)
                if not subscriptions:
                    del self._handlers[subscription.event]
