"""Render waveforms as rows of Unicode block glyphs: ▁ ▂ ▇ ▃ ▅ ▂"""

import logging
import math
from typing import Optional

import numpy as np

from wavesync.audio.decoded import DecodedAudio
from wavesync.models import WaveformOptions
from wavesync.protocols import RendererEvent

from .base import BaseRenderer

logger = logging.getLogger(__name__)

GLYPHS = " ▁▂▃▄▅▆▇█"
CURSOR = "│"


class TextRenderer(BaseRenderer):
    """
    Waveform drawn one column per character.

    The drawn width is `width` columns, or `duration * min_px_per_sec` when
    that is wider (one column stands in for one pixel). When the waveform is
    wider than the view, the view scrolls; with `auto_scroll` it follows the
    cursor, centered if `auto_center` is set.

    Input is fed in by the host UI through `handle_click`, `handle_drag` and
    `scroll_to`, all in view columns.
    """

    def __init__(self, options: WaveformOptions, width: int = 80):
        """
        Initialize the renderer.

        Args:
            options: Waveform options
            width: Visible width in columns
        """
        super().__init__(options)
        self.width = width
        self._audio: Optional[DecodedAudio] = None
        self._rows: list[str] = []
        self._total_columns = width
        self._progress = 0.0
        self._scroll = 0

    # =================================================================
    # Drawing
    # =================================================================

    def set_options(self, options: WaveformOptions) -> None:
        super().set_options(options)
        if self._audio is not None:
            self.render(self._audio)

    def render(self, audio: DecodedAudio) -> None:
        """Draw `audio` and emit RENDER."""
        self._audio = audio
        self._total_columns = self._columns_for(audio.duration)

        if self.options.render_function is not None:
            rows = self.options.render_function(audio.channels, self._total_columns)
            self._rows = [rows] if isinstance(rows, str) else list(rows)
        elif self.options.split_channels:
            self._rows = [
                self._draw_row(DecodedAudio([channel], audio.duration, audio.sample_rate))
                for channel in audio.channels
            ]
        else:
            self._rows = [self._draw_row(audio)]

        self._scroll = self._clamp_scroll(self._scroll)
        logger.debug(f"Rendered {len(self._rows)} row(s) x {self._total_columns} columns")
        self.emit(RendererEvent.RENDER)

    def render_progress(self, progress: float, animated: bool = False) -> None:
        """Move the cursor to `progress` (ratio of the whole waveform)."""
        if math.isnan(progress):
            progress = 0.0
        self._progress = min(max(progress, 0.0), 1.0)

        if self.options.auto_scroll and self._total_columns > self.width:
            self._follow_cursor()

    def zoom(self, min_px_per_sec: float) -> None:
        """Redraw at a new minimum pixels-per-second."""
        self.options = self.options.merged(min_px_per_sec=min_px_per_sec)
        if self._audio is not None:
            self.render(self._audio)

    def get_wrapper(self) -> list[str]:
        """
        The full-width rendered rows.

        Plugins may append their own rows (e.g. a timeline) to this list.
        """
        return self._rows

    def get_scroll(self) -> int:
        """Index of the first visible column."""
        return self._scroll

    def get_frame(self) -> str:
        """The visible part of every row, with the cursor drawn in."""
        cursor = self._cursor_column()
        lines = []
        for row in self._rows:
            visible = list(row.ljust(self._total_columns)[self._scroll:self._scroll + self.width])
            if self.options.cursor_width > 0 and 0 <= cursor - self._scroll < len(visible):
                visible[cursor - self._scroll] = CURSOR
            lines.append("".join(visible))
        return "\n".join(lines)

    def _draw_row(self, audio: DecodedAudio) -> str:
        peaks = audio.get_peaks(self._total_columns)
        if self.options.normalize and peaks.size and peaks.max() > 0:
            peaks = peaks / peaks.max()
        peaks = peaks * (self.options.bar_height or 1.0)

        levels = np.clip(np.rint(peaks * (len(GLYPHS) - 1)), 0, len(GLYPHS) - 1).astype(int)
        return "".join(GLYPHS[level] for level in levels)

    def _columns_for(self, duration: float) -> int:
        px = math.ceil(duration * self.options.min_px_per_sec) if duration > 0 and math.isfinite(duration) else 0
        if self.options.fill_parent:
            return max(self.width, px)
        return px or self.width

    # =================================================================
    # Interaction
    # =================================================================

    def handle_click(self, column: int) -> None:
        """Report a click at a view column."""
        self.emit(RendererEvent.CLICK, self._relative_x(column))

    def handle_drag(self, column: int) -> None:
        """Report the cursor being dragged to a view column."""
        self.emit(RendererEvent.DRAG, self._relative_x(column))

    def scroll_to(self, column: int) -> None:
        """Scroll so that `column` is the first visible one."""
        self._set_scroll(column)

    def _relative_x(self, column: int) -> float:
        column = min(max(column, 0), self.width - 1)
        return min((self._scroll + column) / self._total_columns, 1.0)

    def _cursor_column(self) -> int:
        return min(int(self._progress * self._total_columns), self._total_columns - 1)

    def _follow_cursor(self) -> None:
        cursor = self._cursor_column()
        if self.options.auto_center:
            self._set_scroll(cursor - self.width // 2)
        elif not self._scroll <= cursor < self._scroll + self.width:
            self._set_scroll(cursor)

    def _clamp_scroll(self, column: int) -> int:
        return min(max(column, 0), max(self._total_columns - self.width, 0))

    def _set_scroll(self, column: int) -> None:
        column = self._clamp_scroll(column)
        if column == self._scroll:
            return
        self._scroll = column
        start = column / self._total_columns
        end = min((column + self.width) / self._total_columns, 1.0)
        self.emit(RendererEvent.SCROLL, start, end)

    def destroy(self) -> None:
        super().destroy()
        self._audio = None
        self._rows = []
