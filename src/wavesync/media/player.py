"""
Media players: the playback side of a waveform player.

A media player owns the audio source and the playback position and reports
what happens to them through MediaEvent. The orchestrator never changes the
position itself; it asks the player and listens for the events.

- BaseMediaPlayer: event bus plus source, volume, mute and rate bookkeeping
- HeadlessMediaPlayer: advances the position with the event loop clock and
  produces no sound (tests, servers, offline rendering)
"""

import asyncio
import logging
import math
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import soundfile as sf

from wavesync.audio.decoder import AudioDecoder
from wavesync.core.event_bus import EventBus, Subscription
from wavesync.protocols import MediaEvent

logger = logging.getLogger(__name__)

# Interval of the coarse position events a media element sends while playing
TIMEUPDATE_INTERVAL = 0.25


class BaseMediaPlayer:
    """
    Shared state and event plumbing for media players.

    Subclasses implement `play`, `pause`, `get_current_time`, `set_time` and
    `set_src`. Durations follow media-element conventions: NaN while no
    metadata is known, possibly infinity for streams.
    """

    def __init__(self, playback_rate: float = 1.0):
        """
        Initialize the player.

        Args:
            playback_rate: Initial playback rate (1.0 = normal speed)
        """
        self._bus = EventBus(MediaEvent, name="media")
        self._src: Optional[str] = None
        self._duration = math.nan
        self._volume = 1.0
        self._muted = False
        self._playback_rate = playback_rate

    # =================================================================
    # Events
    # =================================================================

    def on(self, event: MediaEvent | str, handler: Callable[..., Any]) -> Subscription:
        """Register a handler for a media event."""
        return self._bus.on(event, handler)

    def once(self, event: MediaEvent | str, handler: Callable[..., Any]) -> Subscription:
        """Register a one-shot handler for a media event."""
        return self._bus.once(event, handler)

    def _emit(self, event: MediaEvent) -> None:
        self._bus.emit(event)

    # =================================================================
    # Playback (implemented by subclasses)
    # =================================================================

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def is_playing(self) -> bool:
        raise NotImplementedError

    def get_current_time(self) -> float:
        raise NotImplementedError

    def set_time(self, time: float) -> None:
        raise NotImplementedError

    def set_src(self, url: str, blob: Optional[bytes] = None) -> None:
        raise NotImplementedError

    # =================================================================
    # Shared state
    # =================================================================

    def get_src(self) -> Optional[str]:
        """Current source URL, or None."""
        return self._src

    def get_duration(self) -> float:
        """Duration in seconds; NaN until metadata is known."""
        return self._duration

    def get_volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        """Set the output volume in [0, 1]."""
        self._volume = min(max(volume, 0.0), 1.0)

    def get_muted(self) -> bool:
        return self._muted

    def set_muted(self, muted: bool) -> None:
        self._muted = muted

    def get_playback_rate(self) -> float:
        return self._playback_rate

    def set_playback_rate(self, rate: float) -> None:
        """
        Set the playback rate.

        Raises:
            ValueError: If rate is not positive
        """
        if rate <= 0:
            raise ValueError(f"Playback rate must be positive, got {rate}")
        self._playback_rate = rate

    def destroy(self) -> None:
        """Stop playback and drop every listener."""
        if self.is_playing():
            self.pause()
        self._bus.un_all()

    def _clamp(self, time: float) -> float:
        """Clamp to [0, duration]; a NaN or unbounded time becomes 0."""
        if math.isnan(time):
            return 0.0
        time = max(time, 0.0)
        if math.isfinite(self._duration):
            time = min(time, self._duration)
        return time if math.isfinite(time) else 0.0

    @staticmethod
    def _probe_duration(url: str, blob: Optional[bytes]) -> float:
        """Duration from the blob header, or from a local file; NaN otherwise."""
        if blob is not None:
            return AudioDecoder.probe_duration(blob)
        path = Path(url).expanduser()
        if url and path.is_file():
            try:
                return sf.info(str(path)).duration
            except Exception as e:
                logger.debug(f"Could not probe duration of {path}: {e}")
        return math.nan


class HeadlessMediaPlayer(BaseMediaPlayer):
    """
    Media player without audio output.

    The position advances with the running event loop's clock, scaled by the
    playback rate. While playing it emits TIMEUPDATE every 250 ms, and when
    the position reaches the duration it emits PAUSE then ENDED, like a media
    element does.

    `play()`, `set_time()` and `set_src()` schedule work on the running loop
    and must be called from within it.
    """

    def __init__(self, playback_rate: float = 1.0):
        super().__init__(playback_rate)
        self._position = 0.0
        self._anchor: Optional[float] = None  # loop time at which _position was taken
        self._end_handle: Optional[asyncio.TimerHandle] = None
        self._update_handle: Optional[asyncio.TimerHandle] = None

    def is_playing(self) -> bool:
        return self._anchor is not None

    def get_current_time(self) -> float:
        if self._anchor is None:
            return self._position
        elapsed = asyncio.get_running_loop().time() - self._anchor
        return self._clamp(self._position + elapsed * self._playback_rate)

    def play(self) -> None:
        if self.is_playing():
            return
        if self._src is None:
            logger.warning("play() called without a source")
            return
        if math.isfinite(self._duration) and self._position >= self._duration:
            self._position = 0.0

        self._anchor = asyncio.get_running_loop().time()
        self._schedule()
        logger.debug(f"Playing from {self._position:.3f}s")
        self._emit(MediaEvent.PLAY)

    def pause(self) -> None:
        if not self.is_playing():
            return
        self._freeze()
        logger.debug(f"Paused at {self._position:.3f}s")
        self._emit(MediaEvent.PAUSE)

    def set_time(self, time: float) -> None:
        playing = self.is_playing()
        self._cancel()
        self._position = self._clamp(time)
        if playing:
            self._anchor = asyncio.get_running_loop().time()
            self._schedule()
        self._emit(MediaEvent.SEEKING)
        self._emit(MediaEvent.TIMEUPDATE)

    def set_playback_rate(self, rate: float) -> None:
        playing = self.is_playing()
        if playing:
            self._freeze()
        super().set_playback_rate(rate)
        if playing:
            self._anchor = asyncio.get_running_loop().time()
            self._schedule()

    def set_src(self, url: str, blob: Optional[bytes] = None) -> None:
        """
        Replace the source and reset the position.

        The duration is probed from `blob` or, without one, from a local file
        at `url`. LOADEDMETADATA follows on the next loop iteration for any
        non-empty source, even when the duration could not be determined.
        Playback in progress is paused first, with a PAUSE event.
        """
        self.pause()
        self._src = url
        self._position = 0.0
        self._duration = self._probe_duration(url, blob)
        logger.debug(f"Source set to {url!r} (duration {self._duration})")

        if url or blob is not None:
            asyncio.get_running_loop().call_soon(self._emit, MediaEvent.LOADEDMETADATA)

    def destroy(self) -> None:
        super().destroy()
        self._cancel()

    def _freeze(self) -> None:
        self._position = self.get_current_time()
        self._anchor = None
        self._cancel()

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        if math.isfinite(self._duration):
            remaining = max(self._duration - self._position, 0.0) / self._playback_rate
            self._end_handle = loop.call_later(remaining, self._on_ended)
        self._update_handle = loop.call_later(TIMEUPDATE_INTERVAL, self._on_timeupdate)

    def _cancel(self) -> None:
        for handle in (self._end_handle, self._update_handle):
            if handle is not None:
                handle.cancel()
        self._end_handle = None
        self._update_handle = None

    def _on_timeupdate(self) -> None:
        self._update_handle = asyncio.get_running_loop().call_later(
            TIMEUPDATE_INTERVAL, self._on_timeupdate
        )
        self._emit(MediaEvent.TIMEUPDATE)

    def _on_ended(self) -> None:
        self._cancel()
        self._anchor = None
        self._position = self._duration
        self._emit(MediaEvent.TIMEUPDATE)
        self._emit(MediaEvent.PAUSE)
        self._emit(MediaEvent.ENDED)
