"""Event vocabularies and collaborator protocols.

- Events: enums naming what each EventBus may emit
- Collaborators: protocols for the fetcher, decoder, renderer, media player
  and plugins driven by the orchestrator
"""

from .collaborators import Decoder, Fetcher, MediaPlayer, Plugin, Renderer
from .events import MediaEvent, PluginEvent, RendererEvent, TimerEvent, WaveEvent

__all__ = [
    # Collaborators
    "Decoder",
    "Fetcher",
    "MediaPlayer",
    "Plugin",
    "Renderer",
    # Events
    "MediaEvent",
    "PluginEvent",
    "RendererEvent",
    "TimerEvent",
    "WaveEvent",
]
