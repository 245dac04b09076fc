"""Media player that plays through a sounddevice output stream.

Importing this module loads PortAudio, so it is kept out of
`wavesync.media.__init__` and imported only where audio output is wanted.
"""

import asyncio
import io
import logging
from pathlib import Path
from threading import Lock
from typing import Optional

import numpy as np
import sounddevice as sd
import soundfile as sf

from wavesync.exceptions import FetchError, MediaPlaybackError
from wavesync.protocols import MediaEvent

from .player import TIMEUPDATE_INTERVAL, BaseMediaPlayer

logger = logging.getLogger(__name__)


class SoundDeviceMediaPlayer(BaseMediaPlayer):
    """
    Plays the whole decoded source through an audio output device.

    The source is decoded at its native rate in a worker thread after it is
    set. The output stream runs on PortAudio's thread; the callback advances
    the position and hands every event back to the asyncio loop with
    `call_soon_threadsafe`, so handlers always run on the loop thread.

    Playback rate changes speed and pitch together (nearest-sample stepping).
    """

    def __init__(
        self,
        device: Optional[int] = None,
        buffer_size: int = 512,
        playback_rate: float = 1.0,
    ):
        """
        Initialize the player.

        Args:
            device: Output device ID (None for the system default)
            buffer_size: Audio buffer size in frames
            playback_rate: Initial playback rate
        """
        super().__init__(playback_rate)
        self.device = device
        self.buffer_size = buffer_size

        self._lock = Lock()
        self._samples: Optional[np.ndarray] = None  # (frames, channels) float32
        self._source_rate = 0
        self._frame = 0.0
        self._playing = False
        self._frames_since_update = 0

        self._stream: Optional[sd.OutputStream] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._decode_task: Optional[asyncio.Task] = None
        self._play_when_ready = False

    # =================================================================
    # Source
    # =================================================================

    def set_src(self, url: str, blob: Optional[bytes] = None) -> None:
        """
        Set the source for playback.

        Only the header is read here. The samples are decoded in a worker
        thread and LOADEDMETADATA follows once that is done, whether or not
        decoding succeeded. A `play()` made in the meantime starts playback
        as soon as the samples are ready.

        Without `blob`, `url` must be a local file.

        Raises:
            FetchError: If there is no blob and `url` is not a readable file
            MediaPlaybackError: If the audio header cannot be read
        """
        self._loop = asyncio.get_running_loop()
        self.pause()
        self._close_stream()
        self._cancel_decode()

        if blob is None:
            path = Path(url).expanduser()
            if not path.is_file():
                raise FetchError(url, original_error=f"No such file: {path}")
            source: str | bytes = str(path)
        else:
            source = blob

        try:
            info = sf.info(_as_file(source))
        except Exception as e:
            raise MediaPlaybackError("Audio source cannot be played", original_error=str(e)) from e

        with self._lock:
            self._samples = None
            self._source_rate = info.samplerate
            self._frame = 0.0
        self._src = url
        self._duration = info.duration
        logger.info(f"Set {url!r} for playback: {self._duration:.2f}s, {info.channels} ch, {info.samplerate} Hz")

        self._decode_task = self._loop.create_task(self._decode(url, source), name="wavesync-media-decode")

    async def _decode(self, url: str, source: str | bytes) -> None:
        try:
            samples = await asyncio.to_thread(self._read_samples, source)
        except Exception as e:
            logger.error(f"Failed to decode {url!r} for playback: {e}", exc_info=True)
            self._play_when_ready = False
            self._emit(MediaEvent.LOADEDMETADATA)
            return

        with self._lock:
            self._samples = samples
        logger.debug(f"Decoded {len(samples)} frames of {url!r} for playback")
        self._emit(MediaEvent.LOADEDMETADATA)

        if self._play_when_ready:
            self._play_when_ready = False
            try:
                self.play()
            except MediaPlaybackError as e:
                logger.error(f"Deferred playback of {url!r} failed: {e.technical_message}")

    @staticmethod
    def _read_samples(source: str | bytes) -> np.ndarray:
        """Decode the whole source at its native rate (worker thread)."""
        samples, _ = sf.read(_as_file(source), dtype='float32', always_2d=True)
        return samples

    def _cancel_decode(self) -> None:
        self._play_when_ready = False
        if self._decode_task is not None and not self._decode_task.done():
            self._decode_task.cancel()
        self._decode_task = None

    # =================================================================
    # Playback
    # =================================================================

    def is_playing(self) -> bool:
        return self._playing

    def get_current_time(self) -> float:
        if not self._source_rate:
            return 0.0
        return self._frame / self._source_rate

    def play(self) -> None:
        if self._playing:
            return
        if self._samples is None:
            if self._decode_task is not None and not self._decode_task.done():
                logger.debug("Playback will start once the source is decoded")
                self._play_when_ready = True
                return
            logger.warning("play() called without a source")
            return

        self._loop = asyncio.get_running_loop()
        self._open_stream()
        with self._lock:
            if self._frame >= len(self._samples):
                self._frame = 0.0
            self._frames_since_update = 0
            self._playing = True
        self._emit(MediaEvent.PLAY)

    def pause(self) -> None:
        self._play_when_ready = False
        if not self._playing:
            return
        with self._lock:
            self._playing = False
        self._emit(MediaEvent.PAUSE)

    def set_time(self, time: float) -> None:
        with self._lock:
            self._frame = self._clamp(time) * self._source_rate
        self._emit(MediaEvent.SEEKING)
        self._emit(MediaEvent.TIMEUPDATE)

    def destroy(self) -> None:
        super().destroy()
        self._cancel_decode()
        self._close_stream()

    # =================================================================
    # Stream
    # =================================================================

    def _open_stream(self) -> None:
        if self._stream is not None:
            return
        try:
            self._stream = sd.OutputStream(
                samplerate=self._source_rate,
                blocksize=self.buffer_size,
                channels=self._samples.shape[1],
                device=self.device,
                dtype=np.float32,
                callback=self._audio_callback,
            )
            self._stream.start()
        except Exception as e:
            self._stream = None
            raise MediaPlaybackError(
                "Failed to open audio output", device_id=self.device, original_error=str(e)
            ) from e
        logger.info(f"Audio stream started (latency {self._stream.latency * 1000:.1f}ms)")

    def _close_stream(self) -> None:
        if self._stream is None:
            return
        self._stream.stop()
        self._stream.close()
        self._stream = None
        logger.info("Audio stream stopped")

    def _audio_callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        """Fill one output block (PortAudio thread)."""
        if status:
            logger.warning(f"Audio callback status: {status}")

        ended = False
        update = False
        with self._lock:
            if not self._playing or self._samples is None:
                outdata.fill(0)
                return

            total = len(self._samples)
            positions = self._frame + np.arange(frames) * self._playback_rate
            valid = positions < total
            indices = positions[valid].astype(int)

            gain = 0.0 if self._muted else self._volume
            outdata.fill(0)
            outdata[:len(indices)] = self._samples[indices] * gain

            self._frame = min(self._frame + frames * self._playback_rate, float(total))
            self._frames_since_update += frames
            if self._frames_since_update >= TIMEUPDATE_INTERVAL * self._source_rate:
                self._frames_since_update = 0
                update = True
            if not valid.all() or self._frame >= total:
                self._playing = False
                ended = True

        if ended:
            self._loop.call_soon_threadsafe(self._on_ended)
        elif update:
            self._loop.call_soon_threadsafe(self._emit, MediaEvent.TIMEUPDATE)

    def _on_ended(self) -> None:
        self._emit(MediaEvent.TIMEUPDATE)
        self._emit(MediaEvent.PAUSE)
        self._emit(MediaEvent.ENDED)


def _as_file(source: str | bytes) -> str | io.BytesIO:
    """Something soundfile can open: a path, or the encoded bytes in memory."""
    return io.BytesIO(source) if isinstance(source, bytes) else source
