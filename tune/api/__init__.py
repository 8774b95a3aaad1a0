"""
Tune API modules - Audio output, library scanning and persistence.
"""
from .sink import AudioOutput, MixerSink, NullAudioOutput, NullSink
from .scanner import scan_music_directory, read_track
from .session import SessionStore

__all__ = [
    'AudioOutput',
    'MixerSink',
    'NullAudioOutput',
    'NullSink',
    'scan_music_directory',
    'read_track',
    'SessionStore',
]
