"""Media players driving audio playback.

The sounddevice-backed player lives in `wavesync.media.device` and is not
imported here, so using wavesync headless never loads PortAudio.
"""

from .player import BaseMediaPlayer, HeadlessMediaPlayer

__all__ = ["BaseMediaPlayer", "HeadlessMediaPlayer"]
