"""
Tune Data Models - Core data structures.
"""
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import DEFAULT_VOLUME, STATUS_MESSAGE_TTL
from .utils import quantize_volume

UNKNOWN_ARTIST = 'Unknown Artist'


@dataclass
class Track:
    """A discovered audio file with its tag metadata."""
    path: Path
    title: str
    artist: str = UNKNOWN_ARTIST
    duration: int = 0  # Whole seconds
    lyrics: Optional[str] = None

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def display_name(self) -> str:
        """'Artist - Title', or just the title when the artist is unknown."""
        if self.artist != UNKNOWN_ARTIST:
            return f'{self.artist} - {self.title}'
        return self.title


class PlaybackState(Enum):
    STOPPED = 'Stopped'
    PLAYING = 'Playing'
    PAUSED = 'Paused'


class RepeatMode(Enum):
    OFF = 'Off'
    ALL = 'All'
    ONE = 'One'

    def next(self) -> 'RepeatMode':
        """Cycle Off -> All -> One -> Off."""
        members = list(RepeatMode)
        return members[(members.index(self) + 1) % len(members)]

    @property
    def label(self) -> str:
        return f'Repeat: {self.value}'


class SortMode(Enum):
    FILENAME = 'Filename'
    TITLE = 'Title'
    ARTIST = 'Artist'

    def next(self) -> 'SortMode':
        """Cycle Filename -> Title -> Artist -> Filename."""
        members = list(SortMode)
        return members[(members.index(self) + 1) % len(members)]

    @property
    def label(self) -> str:
        return f'Sort: {self.value}'


@dataclass
class LyricLine:
    """One timestamped lyric line."""
    timestamp_ms: int
    text: str


@dataclass
class SessionState:
    """
    Preferences and last played track, persisted across runs.

    Loaded once at startup, handed to the player session, and returned by it
    at shutdown for saving.
    """
    volume: float = DEFAULT_VOLUME
    shuffle: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    sort_mode: SortMode = SortMode.FILENAME
    last_track_path: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'volume': self.volume,
            'shuffle': self.shuffle,
            'repeat_mode': self.repeat_mode.value,
            'sort_mode': self.sort_mode.value,
            'last_track_path': self.last_track_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SessionState':
        """Build state from a decoded document. Missing or invalid fields default."""
        state = cls()

        volume = data.get('volume')
        if isinstance(volume, (int, float)) and not isinstance(volume, bool):
            try:
                if math.isfinite(volume):
                    state.volume = quantize_volume(volume)
            except OverflowError:
                # Integer too large for a float
                pass

        shuffle = data.get('shuffle')
        if isinstance(shuffle, bool):
            state.shuffle = shuffle

        try:
            state.repeat_mode = RepeatMode(data.get('repeat_mode'))
        except ValueError:
            pass

        try:
            state.sort_mode = SortMode(data.get('sort_mode'))
        except ValueError:
            pass

        last_track = data.get('last_track_path')
        if isinstance(last_track, str) and last_track:
            state.last_track_path = last_track

        return state


@dataclass
class StatusMessage:
    """Transient message shown in the status bar."""
    text: str
    is_error: bool = False
    created_at: float = field(default_factory=time.time)

    @property
    def expired(self) -> bool:
        return time.time() - self.created_at >= STATUS_MESSAGE_TTL
