"""
Waveform player orchestrator.

Coordinates a fetcher, a decoder, a renderer and a media player so that a
waveform and an audio source behave as one player:

- load(): fetch -> duration resolution -> decode (or wrap peaks) -> render
- keep the rendered cursor in sync with the media position
- turn clicks, drags and scrolls on the waveform into seeks and events
- host plugins
"""

import asyncio
import logging
import math
from collections.abc import Callable, Sequence
from typing import Any, Optional, TypeVar

from wavesync.audio import AudioDecoder, AudioFetcher, DecodedAudio
from wavesync.core import EventBus, PluginRegistry, ScheduledTask, Subscription, Timer
from wavesync.exceptions import NothingLoadedError
from wavesync.media import HeadlessMediaPlayer
from wavesync.models import WaveformOptions
from wavesync.protocols import (
    Decoder,
    Fetcher,
    MediaEvent,
    MediaPlayer,
    Plugin,
    Renderer,
    RendererEvent,
    TimerEvent,
    WaveEvent,
)
from wavesync.renderer import TextRenderer

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Plugin)

# Delay before a drag commits its seek while paused (seconds)
DRAG_SEEK_DELAY = 0.2

# Duration used by empty() for its single silent sample (seconds)
EMPTY_DURATION = 0.001


def _is_usable_duration(value: Optional[float]) -> bool:
    """A duration source is usable unless it is missing, NaN or zero."""
    return value is not None and not math.isnan(value) and value != 0


class Orchestrator:
    """
    Navigable audio waveform player.

    Architecture:
        Orchestrator (this class)
        ├── Options: WaveformOptions (frozen, replaced on set_options)
        ├── State: duration, decoded_data (reset by every load)
        ├── Collaborators: fetcher, decoder, renderer, media player
        ├── Timer: ~60 Hz cursor updates while playing
        └── Plugins: PluginRegistry

    Communication:
        Collaborators -> Orchestrator: events on their own buses
        Orchestrator -> caller: WaveEvent (see `on()`)

    Everything runs on one asyncio loop. `load()` is a coroutine; starting a
    second load while one is in flight is allowed and the two share the
    duration/decoded-data fields, the last to finish each step winning.
    """

    def __init__(
        self,
        options: Optional[WaveformOptions] = None,
        *,
        renderer: Optional[Renderer] = None,
        media: Optional[MediaPlayer] = None,
        fetcher: Optional[Fetcher] = None,
        decoder: Optional[Decoder] = None,
        timer: Optional[Timer] = None,
        **option_values: Any,
    ):
        """
        Initialize the player.

        Args:
            options: Base options (defaults if None)
            renderer: Renderer to draw with (TextRenderer if None)
            media: Media player (`options.media`, else a HeadlessMediaPlayer)
            fetcher: Source fetcher (AudioFetcher if None)
            decoder: Audio decoder (AudioDecoder if None)
            timer: Cursor timer (Timer if None)
            **option_values: Options layered over `options`, by field name
                             or camelCase alias

        Raises:
            ConfigValidationError: If an option value is invalid
        """
        base = options if options is not None else WaveformOptions()
        self.options = base.merged(**option_values) if option_values else base

        self._bus = EventBus(WaveEvent, name="player")

        if media is None:
            media = self.options.media if self.options.media is not None else HeadlessMediaPlayer()
        self._media = media
        if self.options.audio_rate:
            self._media.set_playback_rate(self.options.audio_rate)

        self._fetcher = fetcher if fetcher is not None else AudioFetcher()
        self._decoder = decoder if decoder is not None else AudioDecoder()
        self._renderer = renderer if renderer is not None else TextRenderer(self.options)
        self._timer = timer if timer is not None else Timer()

        self._plugins = PluginRegistry()
        self._drag_seek = ScheduledTask(name="drag seek")
        self._subscriptions: list[Subscription] = []
        self._destroyed = False

        self._decoded_data: Optional[DecodedAudio] = None
        self._duration: Optional[float] = None

        self._init_player_events()
        self._init_renderer_events()
        self._init_timer_events()
        self._init_plugins()

    @classmethod
    async def create(cls, options: Optional[WaveformOptions] = None, **kwargs: Any) -> "Orchestrator":
        """
        Create a player and, if it has a source, load it.

        The source is `options.url`, else the media player's current source.
        Peaks and duration from the options are passed to `load()`.
        """
        player = cls(options, **kwargs)
        url = player.options.url or player._media.get_src()
        if url:
            await player.load(url, player.options.peaks, player.options.duration)
        return player

    # =================================================================
    # Events
    # =================================================================

    def on(self, event: WaveEvent | str, handler: Callable[..., Any]) -> Subscription:
        """
        Subscribe to a player event.

        Events and payloads:
            load(url), decode(duration), ready(duration), redraw(), play(),
            pause(), finish(), timeupdate(current_time),
            audioprocess(current_time), seeking(current_time),
            interaction(new_time), click(relative_x), drag(relative_x),
            scroll(start_time, end_time), zoom(min_px_per_sec), destroy()
        """
        return self._bus.on(event, handler)

    def once(self, event: WaveEvent | str, handler: Callable[..., Any]) -> Subscription:
        """Subscribe to the next occurrence of a player event."""
        return self._bus.once(event, handler)

    def un(self, event: WaveEvent | str, handler: Callable[..., Any]) -> None:
        """Unsubscribe `handler` from `event`."""
        self._bus.un(event, handler)

    def un_all(self) -> None:
        """Unsubscribe every player event handler."""
        self._bus.un_all()

    def _emit(self, event: WaveEvent, *payload: Any) -> None:
        self._bus.emit(event, *payload)

    # =================================================================
    # Wiring
    # =================================================================

    def _init_player_events(self) -> None:
        self._subscriptions.extend([
            self._media.on(MediaEvent.TIMEUPDATE, self._on_media_timeupdate),
            self._media.on(MediaEvent.PLAY, self._on_media_play),
            self._media.on(MediaEvent.PAUSE, self._on_media_pause),
            self._media.on(MediaEvent.ENDED, lambda: self._emit(WaveEvent.FINISH)),
            self._media.on(
                MediaEvent.SEEKING, lambda: self._emit(WaveEvent.SEEKING, self.get_current_time())
            ),
        ])

    def _init_renderer_events(self) -> None:
        self._subscriptions.extend([
            self._renderer.on(RendererEvent.CLICK, self._on_click),
            self._renderer.on(RendererEvent.DRAG, self._on_drag),
            self._renderer.on(RendererEvent.SCROLL, self._on_scroll),
            self._renderer.on(RendererEvent.RENDER, lambda: self._emit(WaveEvent.REDRAW)),
        ])

    def _init_timer_events(self) -> None:
        self._subscriptions.append(self._timer.on(TimerEvent.TICK, self._on_tick))

    def _init_plugins(self) -> None:
        for plugin in self.options.plugins:
            self.register_plugin(plugin)

    def _progress(self, time: float) -> float:
        duration = self.get_duration()
        if duration > 0 and math.isfinite(duration):
            return time / duration
        return 0.0

    def _on_media_timeupdate(self) -> None:
        current_time = self.get_current_time()
        self._renderer.render_progress(self._progress(current_time), self.is_playing())
        self._emit(WaveEvent.TIMEUPDATE, current_time)

    def _on_media_play(self) -> None:
        self._emit(WaveEvent.PLAY)
        self._timer.start()

    def _on_media_pause(self) -> None:
        self._emit(WaveEvent.PAUSE)
        self._timer.stop()

    def _on_tick(self) -> None:
        current_time = self.get_current_time()
        self._renderer.render_progress(self._progress(current_time), True)
        self._emit(WaveEvent.TIMEUPDATE, current_time)
        self._emit(WaveEvent.AUDIOPROCESS, current_time)

    def _on_click(self, relative_x: float) -> None:
        if not self.options.interact:
            return
        self.seek_to(relative_x)
        self._emit(WaveEvent.INTERACTION, self.get_current_time())
        self._emit(WaveEvent.CLICK, relative_x)

    def _on_drag(self, relative_x: float) -> None:
        if not self.options.interact:
            return

        # Move the cursor now, seek the audio once the drag settles
        self._renderer.render_progress(relative_x)
        delay = 0 if self.is_playing() else DRAG_SEEK_DELAY
        self._drag_seek.schedule(delay, self.seek_to, relative_x)

        self._emit(WaveEvent.INTERACTION, relative_x * self.get_duration())
        self._emit(WaveEvent.DRAG, relative_x)

    def _on_scroll(self, start_x: float, end_x: float) -> None:
        duration = self.get_duration()
        self._emit(WaveEvent.SCROLL, start_x * duration, end_x * duration)

    # =================================================================
    # Loading
    # =================================================================

    async def load(
        self,
        url: str,
        peaks: Optional[Sequence[Sequence[float]]] = None,
        duration: Optional[float] = None,
    ) -> None:
        """
        Load an audio source, optionally with precomputed peaks.

        With `peaks` nothing is fetched or decoded: the media player gets the
        bare URL and the peaks are drawn as they are.

        Args:
            url: Audio URL or path
            peaks: Precomputed per-channel amplitudes
            duration: Known duration in seconds

        Raises:
            Whatever the fetcher or decoder raises. State is left as it was
            when the failure happened.
        """
        if self.is_playing():
            self.pause()

        self._decoded_data = None
        self._duration = None

        logger.info(f"Loading {url!r}" + (" with precomputed peaks" if peaks is not None else ""))
        self._emit(WaveEvent.LOAD, url)

        blob = None
        if peaks is None:
            blob = await self._fetcher.fetch_blob(url, self.options.fetch_params)

        self._media.set_src(url, blob)

        self._duration = await self._resolve_duration(duration)

        if peaks is not None:
            self._decoded_data = self._decoder.create_buffer(peaks, self._duration)
        elif blob is not None:
            self._decoded_data = await self._decoder.decode(blob, self.options.sample_rate)

            # The media duration can be missing or wrong for some formats
            if self._duration == 0 or self._duration == math.inf:
                self._duration = self._decoded_data.duration

        self._emit(WaveEvent.DECODE, self._duration)

        if self._decoded_data is not None:
            self._renderer.render(self._decoded_data)

        logger.info(f"Ready: {url!r} ({self._duration:.3f}s)")
        self._emit(WaveEvent.READY, self._duration)

        if self.options.autoplay:
            self.play()

    async def _resolve_duration(self, explicit: Optional[float]) -> float:
        """Explicit duration, else the media's, else wait for its metadata, else 0."""
        if _is_usable_duration(explicit):
            logger.debug(f"Using explicit duration {explicit}")
            return explicit

        media_duration = self._media.get_duration()
        if _is_usable_duration(media_duration):
            logger.debug(f"Using media duration {media_duration}")
            return media_duration

        metadata: asyncio.Future[float] = asyncio.get_running_loop().create_future()

        def on_metadata() -> None:
            if not metadata.done():
                metadata.set_result(self._media.get_duration())

        subscription = self._media.once(MediaEvent.LOADEDMETADATA, on_metadata)
        try:
            media_duration = await metadata
        finally:
            subscription.release()

        if _is_usable_duration(media_duration):
            logger.debug(f"Using media duration {media_duration} from metadata")
            return media_duration
        logger.debug("No duration available, using 0")
        return 0.0

    def empty(self) -> "asyncio.Task[None]":
        """
        Clear the waveform by loading a tiny silent source.

        Returns:
            The task running the load; awaiting it is optional
        """
        return asyncio.get_running_loop().create_task(
            self.load("", [[0.0]], EMPTY_DURATION), name="wavesync-empty"
        )

    # =================================================================
    # Options
    # =================================================================

    def set_options(self, **partial: Any) -> None:
        """
        Layer `partial` over the current options and redraw.

        Raises:
            ConfigValidationError: If a value is invalid
        """
        self.options = self.options.merged(**partial)
        self._renderer.set_options(self.options)

        audio_rate = WaveformOptions.normalize_keys(partial).get("audio_rate")
        if audio_rate:
            self.set_playback_rate(audio_rate)

    def toggle_interaction(self, is_interactive: bool) -> None:
        """Enable or disable seeking by clicking and dragging."""
        self.options = self.options.merged(interact=is_interactive)

    # =================================================================
    # Plugins
    # =================================================================

    def register_plugin(self, plugin: P) -> P:
        """
        Attach a plugin.

        The plugin is initialized with this player as its host and stays
        active until it destroys itself or the player is destroyed.

        Returns:
            The same plugin
        """
        return self._plugins.register(plugin, self)

    def get_active_plugins(self) -> list[Plugin]:
        """Plugins currently attached, in registration order."""
        return self._plugins.plugins

    # =================================================================
    # Read-Only State Access
    # =================================================================

    def get_decoded_data(self) -> Optional[DecodedAudio]:
        """Decoded audio of the current source, or None until decoded."""
        return self._decoded_data

    def get_duration(self) -> float:
        """Resolved duration, or the media player's while unresolved."""
        if self._duration is not None:
            return self._duration
        return self._media.get_duration()

    def get_wrapper(self) -> Any:
        """The renderer's drawing surface (for plugins)."""
        return self._renderer.get_wrapper()

    def get_scroll(self) -> int:
        """Current scroll position of the renderer."""
        return self._renderer.get_scroll()

    def get_media_element(self) -> MediaPlayer:
        """The underlying media player."""
        return self._media

    def get_renderer(self) -> Renderer:
        """The renderer."""
        return self._renderer

    # =================================================================
    # Playback
    # =================================================================

    def zoom(self, min_px_per_sec: float) -> None:
        """
        Redraw the waveform at a minimum pixels-per-second.

        Raises:
            NothingLoadedError: If no audio has been decoded yet
        """
        if self._decoded_data is None:
            raise NothingLoadedError("zoom")
        self._renderer.zoom(min_px_per_sec)
        self._emit(WaveEvent.ZOOM, min_px_per_sec)

    def seek_to(self, progress: float) -> None:
        """Seek to a ratio of the duration (0 = start, 1 = end). Not clamped."""
        self.set_time(self.get_duration() * progress)

    def play(self) -> None:
        self._media.play()

    def pause(self) -> None:
        self._media.pause()

    def play_pause(self) -> None:
        """Toggle between playing and paused."""
        if self.is_playing():
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        """Pause and go back to the beginning."""
        self.pause()
        self.set_time(0)

    def skip(self, seconds: float) -> None:
        """Move the position by `seconds` (negative to go back). Not clamped."""
        self.set_time(self.get_current_time() + seconds)

    def is_playing(self) -> bool:
        return self._media.is_playing()

    def get_current_time(self) -> float:
        return self._media.get_current_time()

    def set_time(self, time: float) -> None:
        self._media.set_time(time)

    def get_volume(self) -> float:
        return self._media.get_volume()

    def set_volume(self, volume: float) -> None:
        self._media.set_volume(volume)

    def get_muted(self) -> bool:
        return self._media.get_muted()

    def set_muted(self, muted: bool) -> None:
        self._media.set_muted(muted)

    def get_playback_rate(self) -> float:
        return self._media.get_playback_rate()

    def set_playback_rate(self, rate: float) -> None:
        self._media.set_playback_rate(rate)

    # =================================================================
    # Lifecycle
    # =================================================================

    def destroy(self) -> None:
        """
        Tear the player down.

        Order: emit destroy (state still intact), destroy plugins, release
        subscriptions, then destroy the timer, renderer and media player.
        A pending drag seek is left alone.
        """
        if self._destroyed:
            logger.warning("Orchestrator already destroyed")
            return
        self._destroyed = True

        self._emit(WaveEvent.DESTROY)

        self._plugins.destroy_all()
        self._plugins.release()

        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()

        self._timer.destroy()
        self._renderer.destroy()
        self._media.destroy()
        self._bus.un_all()
        logger.info("Orchestrator destroyed")
