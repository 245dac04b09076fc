"""Renderers drawing decoded audio and reporting interaction."""

from .base import BaseRenderer
from .text import TextRenderer

__all__ = ["BaseRenderer", "TextRenderer"]
