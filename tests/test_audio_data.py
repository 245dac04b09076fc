"""Tests for DecodedAudio and AudioDecoder."""

import math

import numpy as np
import pytest

from wavesync.audio import AudioDecoder, DecodedAudio
from wavesync.exceptions import DecodeError


@pytest.mark.unit
class TestDecodedAudio:
    """Test the decoded audio handle."""

    def test_from_array_mono(self, sample_audio_array):
        audio = DecodedAudio.from_array(sample_audio_array, 44100)

        assert audio.number_of_channels == 1
        assert audio.length == len(sample_audio_array)
        assert audio.sample_rate == 44100
        assert audio.duration == pytest.approx(0.5)

    def test_from_array_stereo(self):
        data = np.zeros((1000, 2), dtype=np.float32)
        data[:, 1] = 0.5

        audio = DecodedAudio.from_array(data, 1000)

        assert audio.number_of_channels == 2
        assert audio.duration == pytest.approx(1.0)
        np.testing.assert_allclose(audio.get_channel_data(1), 0.5)

    def test_from_array_explicit_duration(self):
        audio = DecodedAudio.from_array(np.zeros(498, dtype=np.float32), 997, duration=0.5)

        assert audio.duration == 0.5
        assert audio.sample_rate == 997.0

    def test_from_array_rejects_3d(self):
        with pytest.raises(ValueError, match="1D or 2D"):
            DecodedAudio.from_array(np.zeros((2, 2, 2)), 100)

    def test_from_peaks(self):
        audio = DecodedAudio.from_peaks([[0.1, 0.5, -0.2, 0.3], [0.0, 0.1, 0.2, 0.3]], 2.0)

        assert audio.number_of_channels == 2
        assert audio.duration == 2.0
        assert audio.sample_rate == 2.0
        assert audio.get_channel_data(0).dtype == np.float32

    def test_from_peaks_zero_duration(self):
        audio = DecodedAudio.from_peaks([[0.5, 0.5]], 0)

        assert audio.duration == 0
        assert audio.sample_rate == 0

    def test_channel_out_of_range(self):
        audio = DecodedAudio.from_peaks([[0.0]], 1.0)

        with pytest.raises(IndexError):
            audio.get_channel_data(1)

    def test_get_peaks_takes_max_abs_across_channels(self):
        audio = DecodedAudio.from_peaks([[0.1, -0.9, 0.2, 0.0], [0.3, 0.1, -0.4, 0.05]], 1.0)

        np.testing.assert_allclose(audio.get_peaks(2), [0.9, 0.4])

    def test_get_peaks_more_buckets_than_samples(self):
        audio = DecodedAudio.from_peaks([[0.5, 1.0]], 1.0)

        peaks = audio.get_peaks(4)

        assert len(peaks) == 4
        assert peaks.max() == pytest.approx(1.0)

    def test_get_peaks_empty(self):
        audio = DecodedAudio(channels=[], duration=0.0, sample_rate=0.0)

        assert audio.get_peaks(3).tolist() == [0.0, 0.0, 0.0]

    def test_get_info(self):
        audio = DecodedAudio.from_peaks([[0.1, -0.7]], 1.0)

        info = audio.get_info()

        assert info['num_channels'] == 1
        assert info['length'] == 2
        assert info['peak'] == pytest.approx(0.7)


@pytest.mark.unit
class TestAudioDecoder:
    """Test decoding bytes with soundfile."""

    async def test_decode_resamples(self, sample_audio_bytes):
        audio = await AudioDecoder().decode(sample_audio_bytes, 8000)

        assert audio.sample_rate == 8000
        assert audio.number_of_channels == 1
        assert audio.length == 4000
        assert audio.duration == pytest.approx(0.5)

    async def test_decode_keeps_channels(self, stereo_audio_file):
        audio = await AudioDecoder().decode(stereo_audio_file.read_bytes(), 8000)

        assert audio.number_of_channels == 2
        assert audio.duration == pytest.approx(0.25)
        assert np.abs(audio.get_channel_data(0)).max() > np.abs(audio.get_channel_data(1)).max()

    def test_decode_native_rate(self, sample_audio_bytes):
        audio = AudioDecoder().decode_sync(sample_audio_bytes, 44100)

        assert audio.length == 22050

    def test_decode_uneven_rate_keeps_source_duration(self, sample_audio_bytes):
        audio = AudioDecoder().decode_sync(sample_audio_bytes, 997)

        assert audio.length == 498
        assert audio.duration == pytest.approx(0.5)
        assert audio.channels[0].dtype == np.float32

    async def test_decode_garbage_raises(self):
        with pytest.raises(DecodeError) as exc_info:
            await AudioDecoder().decode(b"definitely not audio", 8000)

        assert exc_info.value.__cause__ is not None

    def test_create_buffer(self):
        audio = AudioDecoder().create_buffer([[0.0, 1.0]], 4.0)

        assert audio.duration == 4.0
        assert audio.length == 2

    def test_probe_duration(self, sample_audio_bytes):
        assert AudioDecoder.probe_duration(sample_audio_bytes) == pytest.approx(0.5)
        assert math.isnan(AudioDecoder.probe_duration(b"junk"))
