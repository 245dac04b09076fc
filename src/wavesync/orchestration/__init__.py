"""Orchestration layer tying fetching, decoding, rendering and playback together."""

from .orchestrator import DRAG_SEEK_DELAY, EMPTY_DURATION, Orchestrator

__all__ = ["DRAG_SEEK_DELAY", "EMPTY_DURATION", "Orchestrator"]
