"""Protocols for the collaborators the orchestrator drives.

The orchestrator depends only on these shapes. wavesync ships a default
implementation of each (AudioFetcher, AudioDecoder, TextRenderer,
HeadlessMediaPlayer, BasePlugin) but any object with the same methods works.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from wavesync.audio.decoded import DecodedAudio
    from wavesync.core.event_bus import Subscription
    from wavesync.models import WaveformOptions

from .events import MediaEvent, RendererEvent


@runtime_checkable
class Fetcher(Protocol):
    """Retrieves the raw bytes of an audio source."""

    async def fetch_blob(self, url: str, fetch_params: dict[str, Any] | None = None) -> bytes:
        """
        Fetch the complete payload behind `url`.

        Raises:
            Whatever the implementation raises on failure; the orchestrator
            propagates it unchanged.
        """
        ...


@runtime_checkable
class Decoder(Protocol):
    """Turns raw bytes (or caller-supplied peaks) into a decoded-audio handle."""

    async def decode(self, data: bytes, sample_rate: int) -> "DecodedAudio":
        """Decode `data` into per-channel samples at `sample_rate`."""
        ...

    def create_buffer(self, channel_data: Sequence[Sequence[float]], duration: float) -> "DecodedAudio":
        """Wrap precomputed peaks in a decoded-audio handle. Never fails."""
        ...


@runtime_checkable
class Renderer(Protocol):
    """
    Draws decoded audio and reports user interaction.

    Emits RendererEvent.CLICK(relative_x), DRAG(relative_x),
    SCROLL(start_ratio, end_ratio) and RENDER().
    """

    def on(self, event: RendererEvent, handler: Callable[..., Any]) -> "Subscription":
        ...

    def set_options(self, options: "WaveformOptions") -> None:
        ...

    def render(self, audio: "DecodedAudio") -> None:
        ...

    def render_progress(self, progress: float, animated: bool = False) -> None:
        ...

    def zoom(self, min_px_per_sec: float) -> None:
        ...

    def get_wrapper(self) -> Any:
        ...

    def get_scroll(self) -> int:
        ...

    def destroy(self) -> None:
        ...


@runtime_checkable
class MediaPlayer(Protocol):
    """
    Low-level playback control.

    Emits MediaEvent.TIMEUPDATE, PLAY, PAUSE, ENDED, SEEKING and
    LOADEDMETADATA, none of which carry a payload.
    """

    def on(self, event: MediaEvent, handler: Callable[..., Any]) -> "Subscription":
        ...

    def once(self, event: MediaEvent, handler: Callable[..., Any]) -> "Subscription":
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def is_playing(self) -> bool:
        ...

    def get_current_time(self) -> float:
        ...

    def set_time(self, time: float) -> None:
        ...

    def get_duration(self) -> float:
        ...

    def set_playback_rate(self, rate: float) -> None:
        ...

    def get_playback_rate(self) -> float:
        ...

    def get_volume(self) -> float:
        ...

    def set_volume(self, volume: float) -> None:
        ...

    def get_muted(self) -> bool:
        ...

    def set_muted(self, muted: bool) -> None:
        ...

    def get_src(self) -> str | None:
        ...

    def set_src(self, url: str, blob: bytes | None = None) -> None:
        ...

    def destroy(self) -> None:
        ...


@runtime_checkable
class Plugin(Protocol):
    """
    An extension attached to an orchestrator.

    A plugin signals its own teardown by emitting "destroy"; the registry
    listens with `once` and drops the plugin when it fires.
    """

    def init(self, host: Any) -> None:
        ...

    def destroy(self) -> None:
        ...

    def once(self, event: Any, handler: Callable[..., Any]) -> "Subscription":
        ...
