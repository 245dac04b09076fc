"""Audio sources: fetching bytes and decoding them into channel data."""

from .decoded import DecodedAudio
from .decoder import AudioDecoder
from .fetcher import AudioFetcher

__all__ = [
    "AudioDecoder",
    "AudioFetcher",
    "DecodedAudio",
]
