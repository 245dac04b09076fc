"""Data models for wavesync."""

from .config import WaveformOptions

__all__ = ["WaveformOptions"]
