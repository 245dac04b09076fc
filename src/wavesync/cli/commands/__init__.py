"""CLI commands for wavesync."""

from .info import info
from .play import play
from .show import show

__all__ = ["info", "play", "show"]
