"""Tests for WaveformOptions and error helpers."""

import numpy as np
import pytest
from pydantic import ValidationError

from wavesync.exceptions import (
    ConfigValidationError,
    FetchError,
    NothingLoadedError,
    WaveSyncError,
    format_error_for_display,
)
from wavesync.models import WaveformOptions


@pytest.mark.unit
class TestWaveformOptionsDefaults:
    """Test default option values."""

    def test_defaults(self):
        options = WaveformOptions()

        assert options.height == 128
        assert options.wave_color == "#999"
        assert options.progress_color == "#555"
        assert options.cursor_width == 1
        assert options.min_px_per_sec == 0
        assert options.fill_parent is True
        assert options.sample_rate == 8000
        assert options.interact is True
        assert options.auto_scroll is True
        assert options.auto_center is True
        assert options.autoplay is False
        assert options.plugins == []
        assert options.url is None
        assert options.peaks is None

    def test_frozen(self):
        options = WaveformOptions()
        with pytest.raises(ValidationError):
            options.height = 64


@pytest.mark.unit
class TestWaveformOptionsBuild:
    """Test building options from names and aliases."""

    def test_camel_case_aliases(self):
        options = WaveformOptions.build(minPxPerSec=50, waveColor="red", autoScroll=False)

        assert options.min_px_per_sec == 50
        assert options.wave_color == "red"
        assert options.auto_scroll is False

    def test_field_names(self):
        options = WaveformOptions.build(min_px_per_sec=20, bar_align="bottom")

        assert options.min_px_per_sec == 20
        assert options.bar_align == "bottom"

    def test_height_auto(self):
        assert WaveformOptions.build(height="auto").height == "auto"

    def test_peaks_coerced_to_float32_arrays(self):
        options = WaveformOptions.build(peaks=[[0, 0.5, 1], [0.25]])

        assert len(options.peaks) == 2
        assert options.peaks[0].dtype == np.float32
        np.testing.assert_allclose(options.peaks[0], [0.0, 0.5, 1.0])

    def test_invalid_value_wrapped(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            WaveformOptions.build(sampleRate=0)

        assert exc_info.value.field == "sample_rate"
        assert "positive integer" in exc_info.value.recovery_hint

    def test_invalid_bar_align_hint(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            WaveformOptions.build(barAlign="middle")

        assert "'top', 'bottom'" in exc_info.value.recovery_hint

    def test_unknown_option_rejected(self):
        with pytest.raises(ConfigValidationError):
            WaveformOptions.build(colour="red")

    def test_multiple_errors(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            WaveformOptions.build(sampleRate=0, barHeight=0)

        assert exc_info.value.field == "multiple fields"
        assert "2 validation errors" in exc_info.value.user_message

    def test_normalize_keys(self):
        assert WaveformOptions.normalize_keys({"audioRate": 2, "other": 1}) == {"audio_rate": 2, "other": 1}


@pytest.mark.unit
class TestWaveformOptionsMerged:
    """Test layering partial options."""

    def test_merged_layers_over_current(self):
        base = WaveformOptions.build(waveColor="red", height=64)

        merged = base.merged(height=200, progressColor="blue")

        assert merged.wave_color == "red"
        assert merged.height == 200
        assert merged.progress_color == "blue"

    def test_merged_leaves_original_untouched(self):
        base = WaveformOptions()
        base.merged(interact=False)

        assert base.interact is True

    def test_merge_is_shallow(self):
        base = WaveformOptions.build(fetchParams={"headers": {"a": "1"}, "timeout": 5})

        merged = base.merged(fetchParams={"headers": {"b": "2"}})

        assert merged.fetch_params == {"headers": {"b": "2"}}

    def test_merged_validates(self):
        with pytest.raises(ConfigValidationError):
            WaveformOptions().merged(audioRate=-1)


@pytest.mark.unit
class TestErrorDisplay:
    """Test formatting errors for the CLI."""

    def test_wavesync_error(self):
        message, hint = format_error_for_display(FetchError("https://x/a.mp3", status=404))

        assert message == "Failed to fetch audio from https://x/a.mp3 (HTTP 404)"
        assert hint is not None

    def test_generic_error(self):
        message, hint = format_error_for_display(ValueError("bad"))

        assert message == "ValueError: bad"
        assert hint is None

    def test_nothing_loaded_error(self):
        error = NothingLoadedError("zoom")

        assert isinstance(error, WaveSyncError)
        assert error.operation == "zoom"
        assert "zoom" in error.technical_message
        assert "ready" in error.get_full_message()

    def test_original_error_appended_to_technical_message(self):
        error = FetchError("song.wav", original_error="No such file")

        assert error.original_error == "No such file"
        assert error.technical_message == "Failed to fetch audio from song.wav\nOriginal error: No such file"
        assert str(error) == "Failed to fetch audio from song.wav"

    def test_technical_message_defaults_to_user_message(self):
        error = WaveSyncError("Something broke")

        assert error.technical_message == "Something broke"
        assert error.original_error is None
        assert error.get_full_message() == "Something broke"

    def test_base_options_are_keyword_only(self):
        with pytest.raises(TypeError):
            WaveSyncError("Something broke", "technical detail")
