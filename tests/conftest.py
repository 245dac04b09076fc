"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import AsyncMock, Mock

import numpy as np
import pytest
import soundfile as sf

from wavesync.orchestration import Orchestrator
from wavesync.protocols import WaveEvent

SAMPLE_RATE = 44100
SAMPLE_DURATION = 0.5


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_audio_array():
    """Half a second of a 440 Hz sine at 0.8 amplitude."""
    t = np.linspace(0, SAMPLE_DURATION, int(SAMPLE_RATE * SAMPLE_DURATION), endpoint=False, dtype=np.float32)
    return (0.8 * np.sin(2 * np.pi * 440 * t)).astype(np.float32)


@pytest.fixture
def sample_audio_file(temp_dir, sample_audio_array):
    """Mono WAV file of `sample_audio_array`."""
    file_path = temp_dir / "test.wav"
    sf.write(str(file_path), sample_audio_array, SAMPLE_RATE)
    return file_path


@pytest.fixture
def stereo_audio_file(temp_dir):
    """Stereo WAV file: a full-scale left channel and a quiet right channel."""
    duration = 0.25
    t = np.linspace(0, duration, int(SAMPLE_RATE * duration), endpoint=False, dtype=np.float32)
    left = np.sin(2 * np.pi * 220 * t)
    right = 0.25 * np.sin(2 * np.pi * 220 * t)
    file_path = temp_dir / "stereo.wav"
    sf.write(str(file_path), np.column_stack([left, right]).astype(np.float32), SAMPLE_RATE)
    return file_path


@pytest.fixture
def sample_audio_bytes(sample_audio_file):
    """Encoded bytes of the mono WAV file."""
    return sample_audio_file.read_bytes()


@pytest.fixture
def fetcher(sample_audio_bytes):
    """Fetcher returning the mono WAV bytes for any URL."""
    mock = Mock()
    mock.fetch_blob = AsyncMock(return_value=sample_audio_bytes)
    return mock


@pytest.fixture
async def player(fetcher):
    """Orchestrator with the default renderer, media player and decoder."""
    player = Orchestrator(fetcher=fetcher)
    yield player
    player.destroy()


class EventLog:
    """Records every WaveEvent emitted by a player as (name, payload)."""

    def __init__(self):
        self.entries: list[tuple[str, tuple]] = []

    def attach(self, player) -> "EventLog":
        for event in WaveEvent:
            player.on(event, self._recorder(event.value))
        return self

    def _recorder(self, name: str):
        def record(*payload):
            self.entries.append((name, payload))
        return record

    def names(self, *, exclude: tuple[str, ...] = ()) -> list[str]:
        return [name for name, _ in self.entries if name not in exclude]

    def payloads(self, name: str) -> list[tuple]:
        return [payload for entry, payload in self.entries if entry == name]

    def count(self, name: str) -> int:
        return len(self.payloads(name))

    def clear(self) -> None:
        self.entries.clear()


@pytest.fixture
def event_log(player):
    """EventLog attached to the `player` fixture."""
    return EventLog().attach(player)


@pytest.fixture
def record_events():
    """Attach a fresh EventLog to any player."""
    return lambda player: EventLog().attach(player)
