"""Decoded audio handle.

This is a dataclass rather than a pydantic model: it holds NumPy arrays and is
passed straight from the decoder to the renderer without validation.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import numpy.typing as npt


@dataclass(slots=True)
class DecodedAudio:
    """
    Per-channel amplitude samples plus a duration.

    Produced either by decoding raw bytes (`from_array`) or by wrapping
    caller-supplied peaks (`from_peaks`). For peaks the sample rate is
    derived from the peak count and the duration.
    """

    channels: list[npt.NDArray[np.float32]]  # One 1D float32 array per channel
    duration: float                          # Seconds
    sample_rate: float                       # Samples per second per channel

    @classmethod
    def from_array(cls, data: npt.NDArray, sample_rate: int, duration: float | None = None) -> "DecodedAudio":
        """
        Create from a decoded NumPy array.

        Args:
            data: Shape (num_frames,) for mono or (num_frames, num_channels)
            sample_rate: Sample rate of `data` in Hz
            duration: Duration of the source in seconds, when `data` was
                resampled from it (defaults to num_frames / sample_rate)
        """
        if data.ndim == 1:
            channels = [data.astype(np.float32, copy=False)]
        elif data.ndim == 2:
            channels = [np.ascontiguousarray(data[:, ch], dtype=np.float32) for ch in range(data.shape[1])]
        else:
            raise ValueError(f"Audio data must be 1D or 2D, got {data.ndim}D")

        if duration is None:
            duration = len(channels[0]) / sample_rate
        return cls(channels=channels, duration=duration, sample_rate=float(sample_rate))

    @classmethod
    def from_peaks(cls, channel_data: Sequence[Sequence[float]], duration: float) -> "DecodedAudio":
        """
        Wrap precomputed peaks.

        Args:
            channel_data: One sequence of amplitudes per channel
            duration: Duration the peaks span, in seconds
        """
        channels = [np.asarray(channel, dtype=np.float32).ravel() for channel in channel_data]
        length = len(channels[0]) if channels else 0
        sample_rate = length / duration if duration > 0 else 0.0
        return cls(channels=channels, duration=duration, sample_rate=sample_rate)

    @property
    def number_of_channels(self) -> int:
        """Number of channels."""
        return len(self.channels)

    @property
    def length(self) -> int:
        """Samples per channel."""
        return len(self.channels[0]) if self.channels else 0

    def get_channel_data(self, channel: int) -> npt.NDArray[np.float32]:
        """
        Get the samples of one channel.

        Raises:
            IndexError: If the channel does not exist
        """
        if not 0 <= channel < len(self.channels):
            raise IndexError(f"Channel {channel} out of range (0-{len(self.channels) - 1})")
        return self.channels[channel]

    def get_peaks(self, num_buckets: int) -> npt.NDArray[np.float32]:
        """
        Reduce all channels to `num_buckets` absolute peak values.

        Each bucket holds the largest absolute amplitude of any channel within
        its slice of the samples.
        """
        if num_buckets <= 0 or self.length == 0:
            return np.zeros(max(num_buckets, 0), dtype=np.float32)

        envelope = np.max(np.abs(np.vstack(self.channels)), axis=0)
        edges = np.linspace(0, self.length, num_buckets + 1).astype(int)
        peaks = np.zeros(num_buckets, dtype=np.float32)
        for i in range(num_buckets):
            start, end = edges[i], max(edges[i + 1], edges[i] + 1)
            peaks[i] = envelope[start:min(end, self.length)].max(initial=0.0)
        return peaks

    def get_info(self) -> dict:
        """Summary of the decoded audio."""
        return {
            'duration': self.duration,
            'sample_rate': self.sample_rate,
            'num_channels': self.number_of_channels,
            'length': self.length,
            'peak': float(max((np.abs(ch).max(initial=0.0) for ch in self.channels), default=0.0)),
        }
