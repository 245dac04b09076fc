"""Audio decoder backed by soundfile."""

import asyncio
import io
import logging
from typing import Sequence

import numpy as np
import soundfile as sf

from wavesync.exceptions import DecodeError

from .decoded import DecodedAudio

logger = logging.getLogger(__name__)


class AudioDecoder:
    """
    Decode audio bytes into per-channel samples.

    Handles WAV, FLAC, OGG, MP3 and the other formats libsndfile supports.
    Samples are resampled to the requested rate, which only sets the
    resolution of the waveform and never affects playback.
    """

    async def decode(self, data: bytes, sample_rate: int) -> DecodedAudio:
        """
        Decode `data` off the event loop.

        Args:
            data: Complete encoded audio file
            sample_rate: Target sample rate of the decoded channels

        Returns:
            DecodedAudio whose duration is that of the source file

        Raises:
            DecodeError: If the bytes cannot be decoded
        """
        return await asyncio.to_thread(self.decode_sync, data, sample_rate)

    def decode_sync(self, data: bytes, sample_rate: int) -> DecodedAudio:
        """Blocking version of `decode`."""
        try:
            samples, source_rate = sf.read(io.BytesIO(data), dtype='float32', always_2d=True)
        except Exception as e:
            raise DecodeError(original_error=str(e)) from e

        if len(samples) == 0:
            raise DecodeError(original_error="Audio data is empty")

        duration = len(samples) / source_rate
        if sample_rate != source_rate:
            samples = self._resample(samples, source_rate, sample_rate)

        audio = DecodedAudio.from_array(samples, sample_rate, duration)
        logger.debug(
            f"Decoded {len(data)} bytes: {audio.number_of_channels} channel(s), {duration:.3f}s, "
            f"{source_rate} Hz -> {sample_rate} Hz"
        )
        return audio

    def create_buffer(self, channel_data: Sequence[Sequence[float]], duration: float) -> DecodedAudio:
        """Wrap precomputed peaks spanning `duration` seconds."""
        return DecodedAudio.from_peaks(channel_data, duration)

    @staticmethod
    def _resample(data: np.ndarray, orig_sr: int, target_sr: int) -> np.ndarray:
        """
        Linear resampling of a (frames, channels) array.

        Good enough for drawing a waveform; not meant for listening.
        """
        new_length = max(1, int(len(data) * target_sr / orig_sr))
        x_old = np.linspace(0, 1, len(data))
        x_new = np.linspace(0, 1, new_length)

        resampled = np.zeros((new_length, data.shape[1]), dtype=np.float32)
        for ch in range(data.shape[1]):
            resampled[:, ch] = np.interp(x_new, x_old, data[:, ch])
        return resampled

    @staticmethod
    def probe_duration(data: bytes) -> float:
        """
        Read the duration from the file header without decoding.

        Returns:
            Duration in seconds, or NaN if the header cannot be read
        """
        try:
            return sf.info(io.BytesIO(data)).duration
        except Exception as e:
            logger.debug(f"Could not probe duration: {e}")
            return float("nan")
