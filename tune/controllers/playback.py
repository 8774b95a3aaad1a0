"""
Playback Controller - Stopped/Playing/Paused state machine over an audio sink.

The controller exclusively owns the sink. Starting a track always stops the
previous one first; stopping always discards the sink and takes a fresh one
from the output, since a sink is single-use for end-of-stream detection.
"""
import logging
from typing import Optional

from ..errors import PlaybackError
from ..models import PlaybackState, StatusMessage, Track
from .volume import VolumeController

logger = logging.getLogger(__name__)


class PlaybackController:
    """Transport, volume and status messages for a single audio stream."""

    def __init__(self, output, volume: float = 1.0):
        """
        Args:
            output: AudioOutput (or NullAudioOutput) that creates sinks
            volume: Initial volume level (0.0-1.0)
        """
        self.output = output
        self.sink = output.create_sink()
        self.volume = VolumeController(volume)
        self.state = PlaybackState.STOPPED
        self.current_track: Optional[Track] = None
        self._status: Optional[StatusMessage] = None

        self.sink.set_volume(self.volume.level)

    # ============================================
    # STATE
    # ============================================

    @property
    def is_stopped(self) -> bool:
        return self.state == PlaybackState.STOPPED

    def position(self) -> float:
        """Elapsed seconds of the loaded track (0 when stopped)."""
        if self.current_track is None:
            return 0.0
        return self.sink.position()

    def is_finished(self) -> bool:
        """True when the sink ran dry while we believe we are playing."""
        return self.state == PlaybackState.PLAYING and self.sink.is_empty()

    # ============================================
    # TRANSPORT
    # ============================================

    def play(self, track: Track) -> bool:
        """Stop whatever is playing and start track. Returns False on failure."""
        self.stop()

        try:
            self.sink.set_volume(self.volume.level)
            self.sink.load_and_play(track.path)
        except PlaybackError as e:
            logger.error(f'Playback failed: {e}')
            self.post_status(str(e), is_error=True)
            self.stop()
            return False

        self.state = PlaybackState.PLAYING
        self.current_track = track
        logger.info(f'Playing: {track.display_name}')
        return True

    def toggle_pause(self):
        """Playing <-> Paused. No effect when stopped."""
        if self.state == PlaybackState.PLAYING:
            self.sink.pause()
            self.state = PlaybackState.PAUSED
            logger.debug('Paused')
        elif self.state == PlaybackState.PAUSED:
            self.sink.resume()
            self.state = PlaybackState.PLAYING
            logger.debug('Resumed')

    def stop(self):
        """Reset to Stopped unconditionally and prepare a fresh sink."""
        self.sink.stop_and_reset()
        if self.current_track is not None:
            logger.debug(f'Stopped: {self.current_track.display_name}')
        self.state = PlaybackState.STOPPED
        self.current_track = None

        self.sink = self.output.create_sink()
        self.sink.set_volume(self.volume.level)

    def restart(self):
        """Rewind the loaded track to the start, keeping the current state."""
        self.seek_to(0)

    # ============================================
    # SEEK
    # ============================================

    def seek_to(self, seconds: float):
        if self.current_track is None:
            return
        self.sink.seek(max(0.0, seconds))

    def seek_by(self, delta: float):
        """Seek relative to the current position, never before zero."""
        if self.current_track is None:
            return
        self.seek_to(self.sink.position() + delta)

    def seek_percentage(self, percent: float):
        """Seek to a percentage of the loaded track's duration."""
        if self.current_track is None:
            return
        percent = min(100.0, max(0.0, percent))
        self.seek_to(self.current_track.duration * percent / 100)

    # ============================================
    # VOLUME
    # ============================================

    def _apply_volume(self):
        self.sink.set_volume(self.volume.level)

    def set_volume(self, value: float) -> float:
        level = self.volume.set(value)
        self._apply_volume()
        return level

    def increase_volume(self) -> float:
        level = self.volume.increase()
        self._apply_volume()
        return level

    def decrease_volume(self) -> float:
        level = self.volume.decrease()
        self._apply_volume()
        return level

    def toggle_mute(self) -> bool:
        muted = self.volume.toggle_mute()
        self._apply_volume()
        return muted

    # ============================================
    # STATUS MESSAGES
    # ============================================

    def post_status(self, text: str, is_error: bool = False):
        self._status = StatusMessage(text=text, is_error=is_error)

    @property
    def status_message(self) -> Optional[StatusMessage]:
        """The live status message, or None once it has expired."""
        if self._status is None or self._status.expired:
            return None
        return self._status

    def expire_status(self):
        """Drop the status message if it has outlived its TTL."""
        if self._status is not None and self._status.expired:
            self._status = None
