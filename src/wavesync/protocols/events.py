"""Event vocabularies for every EventBus in wavesync.

Each bus is keyed by exactly one of these enums, so the set of event names a
component can emit is fixed and known up front:
- WaveEvent: the public events of the orchestrator
- RendererEvent: user interaction and render completion from a renderer
- MediaEvent: playback events from a media player
- TimerEvent: ticks from the position timer
- PluginEvent: lifecycle events owned by a plugin
"""

from enum import Enum


class WaveEvent(Enum):
    """Public events emitted by the orchestrator (payload in comments)."""

    LOAD = "load"                    # url
    DECODE = "decode"                # duration
    READY = "ready"                  # duration
    REDRAW = "redraw"                # -
    PLAY = "play"                    # -
    PAUSE = "pause"                  # -
    FINISH = "finish"                # -
    TIMEUPDATE = "timeupdate"        # current_time
    AUDIOPROCESS = "audioprocess"    # current_time, fired alongside timeupdate while playing
    SEEKING = "seeking"              # current_time
    INTERACTION = "interaction"      # new_time
    CLICK = "click"                  # relative_x
    DRAG = "drag"                    # relative_x
    SCROLL = "scroll"                # visible_start_time, visible_end_time
    ZOOM = "zoom"                    # min_px_per_sec
    DESTROY = "destroy"              # -


class RendererEvent(Enum):
    """Events emitted by a renderer."""

    CLICK = "click"    # relative_x
    DRAG = "drag"      # relative_x
    SCROLL = "scroll"  # start_ratio, end_ratio
    RENDER = "render"  # -


class MediaEvent(Enum):
    """Events emitted by a media player."""

    TIMEUPDATE = "timeupdate"
    PLAY = "play"
    PAUSE = "pause"
    ENDED = "ended"
    SEEKING = "seeking"
    LOADEDMETADATA = "loadedmetadata"


class TimerEvent(Enum):
    """Events emitted by the position timer."""

    TICK = "tick"


class PluginEvent(Enum):
    """Events owned by a plugin."""

    DESTROY = "destroy"
