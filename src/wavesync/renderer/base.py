"""Renderer base class."""

from collections.abc import Callable
from typing import Any

from wavesync.audio.decoded import DecodedAudio
from wavesync.core.event_bus import EventBus, Subscription
from wavesync.models import WaveformOptions
from wavesync.protocols import RendererEvent


class BaseRenderer:
    """
    Event plumbing and options shared by renderers.

    Subclasses draw; this class only carries the RendererEvent bus the
    orchestrator listens to (CLICK, DRAG, SCROLL, RENDER) and the current
    options.
    """

    def __init__(self, options: WaveformOptions):
        self.options = options
        self._bus = EventBus(RendererEvent, name="renderer")

    def on(self, event: RendererEvent | str, handler: Callable[..., Any]) -> Subscription:
        """Register a handler for a renderer event."""
        return self._bus.on(event, handler)

    def once(self, event: RendererEvent | str, handler: Callable[..., Any]) -> Subscription:
        """Register a one-shot handler for a renderer event."""
        return self._bus.once(event, handler)

    def emit(self, event: RendererEvent, *payload: Any) -> None:
        self._bus.emit(event, *payload)

    def set_options(self, options: WaveformOptions) -> None:
        self.options = options

    def render(self, audio: DecodedAudio) -> None:
        raise NotImplementedError

    def render_progress(self, progress: float, animated: bool = False) -> None:
        raise NotImplementedError

    def zoom(self, min_px_per_sec: float) -> None:
        raise NotImplementedError

    def get_wrapper(self) -> Any:
        raise NotImplementedError

    def get_scroll(self) -> int:
        raise NotImplementedError

    def destroy(self) -> None:
        """Drop every listener."""
        self._bus.un_all()
