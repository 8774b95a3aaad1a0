"""
Pytest configuration and shared fixtures for tune tests.
"""
import random
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from tune.errors import PlaybackError
from tune.models import Track


class FakeSink:
    """In-memory audio sink. Tests drive position and end-of-stream by hand."""

    def __init__(self, output):
        self.output = output
        self.path = None
        self.paused = False
        self.volume = None
        self.pos = 0.0
        self.empty = True
        self.seeks = []
        self.reset = False

    def load_and_play(self, path):
        if path in self.output.broken:
            raise PlaybackError(f'Failed to decode {path.name}')
        self.path = path
        self.pos = 0.0
        self.empty = False

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    def stop_and_reset(self):
        self.path = None
        self.empty = True
        self.reset = True

    def set_volume(self, volume):
        self.volume = volume

    def seek(self, seconds):
        if self.path is None:
            return False
        self.seeks.append(seconds)
        self.pos = seconds
        self.empty = False
        return True

    def is_empty(self):
        return self.empty

    def position(self):
        return self.pos

    def finish(self):
        """Simulate the stream running dry."""
        self.empty = True


class FakeOutput:
    """Audio output handing out FakeSinks; paths in `broken` fail to play."""

    def __init__(self):
        self.sinks = []
        self.broken = set()
        self.closed = False

    def open(self):
        pass

    def create_sink(self):
        sink = FakeSink(self)
        self.sinks.append(sink)
        return sink

    def close(self):
        self.closed = True


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def state_path(temp_dir):
    """Provide path for a temporary state.json file."""
    return temp_dir / 'tune' / 'state.json'


@pytest.fixture
def output():
    return FakeOutput()


@pytest.fixture
def rng():
    """Seeded random source so shuffles are reproducible."""
    return random.Random(1234)


def make_tracks(count, duration=200):
    """Tracks whose file name order matches their list order."""
    return [
        Track(
            path=Path(f'/music/{i:02d}.mp3'),
            title=f'Song {i}',
            artist=f'Artist {i}',
            duration=duration,
        )
        for i in range(count)
    ]


@pytest.fixture
def tracks():
    return make_tracks(3)


@pytest.fixture
def five_tracks():
    return make_tracks(5)
