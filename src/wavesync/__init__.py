"""wavesync: navigable audio waveforms kept in sync with playback."""

__version__ = "0.1.0"

from .audio import DecodedAudio
from .core import BasePlugin
from .models import WaveformOptions
from .orchestration import Orchestrator
from .protocols import WaveEvent

__all__ = [
    "BasePlugin",
    "DecodedAudio",
    "Orchestrator",
    "WaveEvent",
    "WaveformOptions",
]
