"""
Audio Output - pygame.mixer device and single-stream playback sink.

The output device is opened once at startup. Each sink is single-use: after
stop_and_reset() the playback controller asks the output for a fresh one,
so end-of-stream detection never sees stale state from a previous track.
"""
import logging
import time
from pathlib import Path
from typing import Optional

import pygame

from ..config import MIXER_FREQUENCY, MIXER_BUFFER
from ..errors import AudioDeviceError, PlaybackError

logger = logging.getLogger(__name__)


class MixerSink:
    """Plays one stream through pygame.mixer.music."""

    def __init__(self):
        self._path: Optional[Path] = None
        self._offset = 0.0      # Seconds the current stream was started/seeked at
        self._paused = False
        self._volume = 1.0

    def load_and_play(self, path: Path):
        """Load a file and start playing it from the beginning."""
        try:
            pygame.mixer.music.load(str(path))
            pygame.mixer.music.set_volume(self._volume)
            pygame.mixer.music.play()
        except (pygame.error, OSError) as e:
            raise PlaybackError(f'Failed to play {path.name}: {e}') from e
        self._path = path
        self._offset = 0.0
        self._paused = False

    def pause(self):
        pygame.mixer.music.pause()
        self._paused = True

    def resume(self):
        pygame.mixer.music.unpause()
        self._paused = False

    def stop_and_reset(self):
        """Stop the stream and release the loaded file."""
        try:
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()
        except pygame.error as e:
            logger.debug(f'Mixer stop failed: {e}')
        self._path = None
        self._offset = 0.0
        self._paused = False

    def set_volume(self, volume: float):
        self._volume = volume
        pygame.mixer.music.set_volume(volume)

    def seek(self, seconds: float) -> bool:
        """Restart the stream at an absolute position. Best effort per codec."""
        if self._path is None:
            return False
        try:
            pygame.mixer.music.play(start=seconds)
            if self._paused:
                pygame.mixer.music.pause()
        except pygame.error as e:
            logger.warning(f'Seek to {seconds:.1f}s not supported for {self._path.name}: {e}')
            return False
        self._offset = seconds
        return True

    def is_empty(self) -> bool:
        """True when no audio is pending. A paused stream is not empty."""
        if self._paused:
            return False
        return not pygame.mixer.music.get_busy()

    def position(self) -> float:
        """Elapsed seconds in the current stream."""
        if self._path is None:
            return 0.0
        # get_pos() counts from the last play() call and is -1 when idle
        played_ms = max(0, pygame.mixer.music.get_pos())
        return self._offset + played_ms / 1000.0


class AudioOutput:
    """The pygame audio device. Hands out a fresh sink after every stop."""

    def __init__(self, frequency: int = MIXER_FREQUENCY, buffer: int = MIXER_BUFFER):
        self.frequency = frequency
        self.buffer = buffer
        self._opened = False

    def open(self):
        """Open the output device. Raises AudioDeviceError when no device is usable."""
        try:
            pygame.mixer.init(frequency=self.frequency, buffer=self.buffer)
        except pygame.error as e:
            raise AudioDeviceError(f'Failed to open audio output: {e}') from e
        self._opened = True
        freq, size, channels = pygame.mixer.get_init()
        logger.info(f'Audio output: {freq} Hz, {abs(size)}-bit, {channels} channels')

    def create_sink(self) -> MixerSink:
        return MixerSink()

    def close(self):
        if self._opened:
            pygame.mixer.quit()
            self._opened = False
            logger.info('Audio output closed')


class NullSink:
    """Silent sink for mock mode. Position follows the wall clock."""

    def __init__(self):
        self._path: Optional[Path] = None
        self._started_at = 0.0
        self._paused_at: Optional[float] = None

    def load_and_play(self, path: Path):
        self._path = path
        self._started_at = time.time()
        self._paused_at = None

    def pause(self):
        if self._paused_at is None:
            self._paused_at = time.time()

    def resume(self):
        if self._paused_at is not None:
            self._started_at += time.time() - self._paused_at
            self._paused_at = None

    def stop_and_reset(self):
        self._path = None
        self._paused_at = None

    def set_volume(self, volume: float):
        pass

    def seek(self, seconds: float) -> bool:
        if self._path is None:
            return False
        now = self._paused_at if self._paused_at is not None else time.time()
        self._started_at = now - seconds
        return True

    def is_empty(self) -> bool:
        return self._path is None

    def position(self) -> float:
        if self._path is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else time.time()
        return max(0.0, now - self._started_at)


class NullAudioOutput:
    """Audio output that never touches a device (mock mode)."""

    def open(self):
        logger.info('Audio output: null (mock mode)')

    def create_sink(self) -> NullSink:
        return NullSink()

    def close(self):
        pass
