"""Waveform player options."""

from collections.abc import Callable
from typing import Any, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from wavesync.exceptions import wrap_pydantic_error


class WaveformOptions(BaseModel):
    """
    Options for one waveform player.

    Instances are frozen. A player starts from the defaults below, layers the
    constructor options on top, then layers every `set_options()` call on top
    of that with `merged()`. Every field also accepts its camelCase alias
    (`minPxPerSec`, `audioRate`, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        alias_generator=to_camel,
        populate_by_name=True,
        loc_by_alias=False,
        extra="forbid",
    )

    # Appearance (consumed by the renderer)
    height: int | Literal["auto"] = Field(
        default=128, description="Waveform height, or 'auto' to fill the container"
    )
    wave_color: str | list[str] = Field(default="#999", description="Waveform color")
    progress_color: str | list[str] = Field(default="#555", description="Progress mask color")
    cursor_color: str | None = Field(default=None, description="Playback cursor color")
    cursor_width: float = Field(default=1, ge=0, description="Playback cursor width")
    bar_width: float | None = Field(default=None, ge=0, description="Render bars of this width")
    bar_gap: float | None = Field(default=None, ge=0, description="Spacing between bars")
    bar_radius: float | None = Field(default=None, ge=0, description="Rounded bar corners")
    bar_height: float | None = Field(default=None, gt=0, description="Vertical scaling factor")
    bar_align: Literal["top", "bottom"] | None = Field(default=None, description="Vertical bar alignment")
    min_px_per_sec: float = Field(default=0, ge=0, description="Minimum pixels per second (zoom level)")
    fill_parent: bool = Field(default=True, description="Stretch the waveform to fill the container")
    hide_scrollbar: bool = Field(default=False, description="Hide the scrollbar")
    normalize: bool = Field(default=False, description="Stretch the waveform to the full height")
    split_channels: list[dict[str, Any]] | None = Field(
        default=None, description="Render each channel separately, with per-channel option overrides"
    )
    render_function: Callable[..., Any] | None = Field(
        default=None, description="Custom render function called with the channel peaks"
    )

    # Source
    url: str | None = Field(default=None, description="Audio URL or path to load on creation")
    peaks: list[np.ndarray] | None = Field(default=None, description="Precomputed per-channel peaks")
    duration: float | None = Field(default=None, ge=0, description="Precomputed duration in seconds")
    fetch_params: dict[str, Any] | None = Field(
        default=None, description="Extra keyword arguments for the HTTP request"
    )
    sample_rate: int = Field(default=8000, gt=0, description="Decoding sample rate (does not affect playback)")

    # Playback
    media: Any = Field(default=None, description="Use an existing media player instead of creating one")
    autoplay: bool = Field(default=False, description="Start playing once ready")
    audio_rate: float | None = Field(default=None, gt=0, description="Playback rate")

    # Interaction
    interact: bool = Field(default=True, description="React to clicks and drags on the waveform")
    auto_scroll: bool = Field(default=True, description="Keep the cursor in view while playing")
    auto_center: bool = Field(default=True, description="Keep the cursor centered while auto-scrolling")

    # Extensions
    plugins: list[Any] = Field(default_factory=list, description="Plugins to register on creation")

    @field_validator("peaks", mode="before")
    @classmethod
    def _coerce_peaks(cls, value: Any) -> list[np.ndarray] | None:
        """Accept nested sequences or arrays; store one float32 array per channel."""
        if value is None:
            return None
        return [np.asarray(channel, dtype=np.float32).ravel() for channel in value]

    @classmethod
    def build(cls, **values: Any) -> "WaveformOptions":
        """
        Create options from field names or camelCase aliases.

        Raises:
            ConfigValidationError: If a value fails validation
        """
        try:
            return cls.model_validate(cls.normalize_keys(values))
        except ValidationError as e:
            raise wrap_pydantic_error(e) from e

    def merged(self, **partial: Any) -> "WaveformOptions":
        """
        Return new options with `partial` layered over these.

        The merge is shallow: a given key replaces the whole value.

        Raises:
            ConfigValidationError: If a value fails validation
        """
        cls = type(self)
        values = {name: getattr(self, name) for name in cls.model_fields}
        values.update(cls.normalize_keys(partial))
        return cls.build(**values)

    @classmethod
    def normalize_keys(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Map camelCase aliases to field names; unknown keys pass through."""
        aliases = {field.alias: name for name, field in cls.model_fields.items() if field.alias}
        return {aliases.get(key, key): value for key, value in values.items()}
