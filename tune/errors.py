"""
Tune Errors - Exception types shared across modules.
"""


class TuneError(Exception):
    """Base class for all tune errors."""


class AudioDeviceError(TuneError):
    """The audio output device could not be opened. Fatal at startup."""


class PlaybackError(TuneError):
    """A single track could not be opened or decoded."""
