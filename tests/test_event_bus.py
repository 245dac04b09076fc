"""Tests for EventBus and Subscription."""

import logging
from unittest.mock import Mock

import pytest

from wavesync.core import EventBus
from wavesync.protocols import MediaEvent, RendererEvent, WaveEvent


@pytest.fixture
def bus():
    return EventBus(WaveEvent, name="test")


@pytest.mark.unit
class TestSubscribe:
    """Test registering and dispatching handlers."""

    def test_on_receives_payload(self, bus):
        handler = Mock()
        bus.on(WaveEvent.READY, handler)

        bus.emit(WaveEvent.READY, 12.5)

        handler.assert_called_once_with(12.5)

    def test_handlers_called_in_registration_order(self, bus):
        calls = []
        bus.on(WaveEvent.PLAY, lambda: calls.append("first"))
        bus.on(WaveEvent.PLAY, lambda: calls.append("second"))
        bus.on(WaveEvent.PLAY, lambda: calls.append("third"))

        bus.emit(WaveEvent.PLAY)

        assert calls == ["first", "second", "third"]

    def test_string_event_names(self, bus):
        handler = Mock()
        bus.on("timeupdate", handler)

        bus.emit("timeupdate", 1.0)
        bus.emit(WaveEvent.TIMEUPDATE, 2.0)

        assert [c.args for c in handler.call_args_list] == [(1.0,), (2.0,)]

    def test_other_enum_coerced_by_value(self, bus):
        """A member of another enum with the same value addresses the same event."""
        handler = Mock()
        bus.on(MediaEvent.PLAY, handler)

        bus.emit(WaveEvent.PLAY)

        handler.assert_called_once_with()

    def test_unknown_event_rejected(self, bus):
        with pytest.raises(ValueError, match="Unknown test event"):
            bus.on("nonsense", Mock())

        with pytest.raises(ValueError):
            bus.emit(RendererEvent.RENDER)

    def test_emit_without_handlers(self, bus):
        bus.emit(WaveEvent.FINISH)
        # Should not raise

    def test_events_are_isolated(self, bus):
        handler = Mock()
        bus.on(WaveEvent.PLAY, handler)

        bus.emit(WaveEvent.PAUSE)

        handler.assert_not_called()


@pytest.mark.unit
class TestOnce:
    """Test one-shot handlers."""

    def test_once_fires_a_single_time(self, bus):
        handler = Mock()
        bus.once(WaveEvent.READY, handler)

        bus.emit(WaveEvent.READY, 1.0)
        bus.emit(WaveEvent.READY, 2.0)

        handler.assert_called_once_with(1.0)
        assert bus.listener_count(WaveEvent.READY) == 0

    def test_once_released_before_call(self, bus):
        """Re-emitting from inside a once handler does not call it again."""
        handler = Mock(side_effect=lambda: bus.emit(WaveEvent.FINISH))
        bus.once(WaveEvent.FINISH, handler)

        bus.emit(WaveEvent.FINISH)

        handler.assert_called_once()

    def test_once_released_early_never_fires(self, bus):
        handler = Mock()
        subscription = bus.once(WaveEvent.READY, handler)

        subscription.release()
        bus.emit(WaveEvent.READY, 1.0)

        handler.assert_not_called()


@pytest.mark.unit
class TestUnsubscribe:
    """Test releasing handlers."""

    def test_release_is_idempotent(self, bus):
        handler = Mock()
        subscription = bus.on(WaveEvent.PLAY, handler)

        subscription.release()
        subscription.release()
        bus.emit(WaveEvent.PLAY)

        assert not subscription.active
        handler.assert_not_called()

    def test_subscription_is_callable(self, bus):
        handler = Mock()
        unsubscribe = bus.on(WaveEvent.PLAY, handler)

        unsubscribe()
        bus.emit(WaveEvent.PLAY)

        handler.assert_not_called()

    def test_un_removes_every_registration_of_handler(self, bus):
        handler = Mock()
        other = Mock()
        bus.on(WaveEvent.PLAY, handler)
        bus.on(WaveEvent.PLAY, handler)
        bus.on(WaveEvent.PLAY, other)

        bus.un(WaveEvent.PLAY, handler)
        bus.emit(WaveEvent.PLAY)

        handler.assert_not_called()
        other.assert_called_once()

    def test_un_all(self, bus):
        handlers = [Mock(), Mock()]
        bus.on(WaveEvent.PLAY, handlers[0])
        bus.on(WaveEvent.PAUSE, handlers[1])

        bus.un_all()
        bus.emit(WaveEvent.PLAY)
        bus.emit(WaveEvent.PAUSE)

        assert bus.listener_count() == 0
        for handler in handlers:
            handler.assert_not_called()

    def test_handler_released_during_dispatch_is_skipped(self, bus):
        second = Mock()
        subscriptions = []
        bus.on(WaveEvent.PLAY, lambda: subscriptions[0].release())
        subscriptions.append(bus.on(WaveEvent.PLAY, second))

        bus.emit(WaveEvent.PLAY)

        second.assert_not_called()

    def test_handler_added_during_dispatch_waits_for_next_emit(self, bus):
        late = Mock()
        bus.once(WaveEvent.PLAY, lambda: bus.on(WaveEvent.PLAY, late))

        bus.emit(WaveEvent.PLAY)
        late.assert_not_called()

        bus.emit(WaveEvent.PLAY)
        late.assert_called_once()


@pytest.mark.unit
class TestHandlerErrors:
    """Test that a failing handler does not break dispatch."""

    def test_error_logged_and_dispatch_continues(self, bus, caplog):
        after = Mock()
        bus.on(WaveEvent.READY, Mock(side_effect=RuntimeError("boom")))
        bus.on(WaveEvent.READY, after)

        with caplog.at_level(logging.ERROR, logger="wavesync.core.event_bus"):
            bus.emit(WaveEvent.READY, 3.0)

        after.assert_called_once_with(3.0)
        assert "boom" in caplog.text
        assert "ready" in caplog.text
