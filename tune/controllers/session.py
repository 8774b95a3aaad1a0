"""
Player Session - Catalog, queue and playback wired together.

Every operation that reorders the catalog or the queue is immediately
followed by relocating the cursor by track identity, so an index held here
is never stale: playing_index always equals queue.current while set.
"""
import random
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import RESTART_THRESHOLD, SEEK_STEP
from ..models import LyricLine, RepeatMode, SessionState, SortMode, Track
from ..managers import Catalog, QueueManager, LyricSynchronizer, active_line, visible_window
from .playback import PlaybackController

logger = logging.getLogger(__name__)


@dataclass
class LyricView:
    """What the lyric panel should show for the playing track."""
    lines: List[LyricLine]
    active: int
    window: Tuple[int, int]
    raw: Optional[str] = None  # Set when the lyrics have no timestamps

    @property
    def synced(self) -> bool:
        return bool(self.lines)


class PlayerSession:
    """The player's single owner of catalog, queue and playback state."""

    def __init__(self, tracks: List[Track], playback: PlaybackController,
                 state: Optional[SessionState] = None, rng: Optional[random.Random] = None):
        state = state or SessionState()

        self.catalog = Catalog(tracks)
        self.playback = playback
        self.repeat_mode = state.repeat_mode
        self.sort_mode = state.sort_mode
        self.playing_index: Optional[int] = None
        self.selected = 0
        self.show_lyrics = True
        self.show_help = False
        self.search_query: Optional[str] = None  # None unless the search prompt is open
        self.lyrics = LyricSynchronizer()

        self.playback.set_volume(state.volume)
        self.catalog.sort(self.sort_mode)
        self.queue = QueueManager(len(self.catalog), shuffle=state.shuffle, rng=rng)

        if state.last_track_path:
            last_index = self.catalog.index_of(state.last_track_path)
            if last_index is not None:
                self.selected = last_index
                logger.info(f'Restored selection: {self.catalog[last_index].display_name}')

    # ============================================
    # STATE ACCESS
    # ============================================

    @property
    def shuffle(self) -> bool:
        return self.queue.shuffle

    @property
    def playing_track(self) -> Optional[Track]:
        if self.playing_index is None:
            return None
        return self.catalog[self.playing_index]

    @property
    def selected_track(self) -> Optional[Track]:
        if not len(self.catalog):
            return None
        return self.catalog[self.selected]

    def snapshot(self) -> SessionState:
        """Current preferences, for persistence."""
        track = self.playing_track or self.selected_track
        return SessionState(
            volume=self.playback.volume.persisted_level,
            shuffle=self.shuffle,
            repeat_mode=self.repeat_mode,
            sort_mode=self.sort_mode,
            last_track_path=str(track.path) if track else None,
        )

    def close(self) -> SessionState:
        """Stop playback synchronously and hand back the state to save."""
        state = self.snapshot()
        self.stop()
        return state

    # ============================================
    # LIST NAVIGATION
    # ============================================

    def _select(self, index: int):
        if not len(self.catalog):
            self.selected = 0
            return
        self.selected = max(0, min(index, len(self.catalog) - 1))

    def select_next(self):
        self._select(self.selected + 1)

    def select_previous(self):
        self._select(self.selected - 1)

    def select_first(self):
        self._select(0)

    def select_last(self):
        self._select(len(self.catalog) - 1)

    def page_down(self, rows: int):
        self._select(self.selected + max(1, rows))

    def page_up(self, rows: int):
        self._select(self.selected - max(1, rows))

    def search(self, query: str) -> bool:
        """Select the next track matching query after the current selection."""
        match = self.catalog.search(query, start=self.selected + 1)
        if match is None:
            self.playback.post_status(f'No match for "{query}"')
            return False
        self.selected = match
        return True

    @property
    def searching(self) -> bool:
        return self.search_query is not None

    def begin_search(self):
        """Open the search prompt. Keys are fed in one tick at a time."""
        self.search_query = ''

    def search_input(self, text: str):
        if self.search_query is not None:
            self.search_query += text

    def search_backspace(self):
        if self.search_query:
            self.search_query = self.search_query[:-1]

    def cancel_search(self):
        self.search_query = None

    def submit_search(self) -> bool:
        """Close the prompt and select the next match for what was typed."""
        query = (self.search_query or '').strip()
        self.search_query = None
        if not query:
            return False
        return self.search(query)

    # ============================================
    # PLAYBACK
    # ============================================

    def play_index(self, catalog_index: int) -> bool:
        """Play a catalog index and keep the queue cursor on it."""
        track = self.catalog[catalog_index]
        if not self.playback.play(track):
            self.playing_index = None
            return False
        self.playing_index = catalog_index
        self.queue.relocate(catalog_index)
        return True

    def play_selected(self) -> bool:
        if not len(self.catalog):
            return False
        return self.play_index(self.selected)

    def _play_cursor(self) -> bool:
        return self.play_index(self.queue.current)

    def toggle_pause(self):
        """Pause/resume, or start the selected track when stopped."""
        if self.playback.is_stopped:
            self.play_selected()
        else:
            self.playback.toggle_pause()

    def stop(self):
        self.playback.stop()
        self.playing_index = None

    def play_next(self) -> bool:
        """User skip to the next queue position."""
        if self.queue.advance(self.repeat_mode) is None:
            self.playback.post_status('End of queue')
            return False
        return self._play_cursor()

    def play_previous(self) -> bool:
        """Restart the track if it is past the threshold, otherwise go back one."""
        if self.playing_index is not None and self.playback.position() > RESTART_THRESHOLD:
            self.playback.restart()
            return True
        if self.queue.retreat() is None:
            return False
        return self._play_cursor()

    def check_playback(self):
        """Per-tick completion poll. Decides what happens when a track ends."""
        if not self.playback.is_finished():
            return

        if self.repeat_mode == RepeatMode.ONE:
            logger.debug('Track finished, repeating')
            self.playback.restart()
            return

        if self.queue.advance(self.repeat_mode) is None:
            logger.info('End of queue, stopping')
            self.stop()
            return

        logger.debug('Track finished, advancing')
        self._play_cursor()

    # ============================================
    # SEEK & VOLUME
    # ============================================

    def seek_forward(self):
        self.playback.seek_by(SEEK_STEP)

    def seek_backward(self):
        self.playback.seek_by(-SEEK_STEP)

    def seek_percentage(self, percent: float):
        self.playback.seek_percentage(percent)

    def volume_up(self):
        self.playback.increase_volume()

    def volume_down(self):
        self.playback.decrease_volume()

    def toggle_mute(self):
        muted = self.playback.toggle_mute()
        self.playback.post_status('Muted' if muted else f'Volume {self.playback.volume.percent}%')

    # ============================================
    # ORDERING
    # ============================================

    def toggle_shuffle(self):
        """Flip shuffle without interrupting the playing track."""
        shuffle = self.queue.toggle_shuffle(self.playing_index)
        self.playback.post_status(f'Shuffle: {"On" if shuffle else "Off"}')

    def cycle_repeat(self):
        self.repeat_mode = self.repeat_mode.next()
        logger.info(self.repeat_mode.label)
        self.playback.post_status(self.repeat_mode.label)

    def cycle_sort(self):
        self.set_sort_mode(self.sort_mode.next())
        self.playback.post_status(self.sort_mode.label)

    def set_sort_mode(self, mode: SortMode):
        """Re-sort the catalog, then repair every index by track path."""
        playing_path = self.playing_track.path if self.playing_track else None
        selected_path = self.selected_track.path if self.selected_track else None

        self.sort_mode = mode
        self.catalog.sort(mode)
        self.queue.rebuild(self.queue.shuffle)

        if playing_path is not None:
            self.playing_index = self.catalog.index_of(playing_path)
            self.queue.relocate(self.playing_index)
        if selected_path is not None:
            self.selected = self.catalog.index_of(selected_path)

    # ============================================
    # PANELS
    # ============================================

    def toggle_lyrics(self):
        self.show_lyrics = not self.show_lyrics

    def toggle_help(self):
        self.show_help = not self.show_help

    def lyric_view(self, height: int) -> Optional[LyricView]:
        """Lyric lines, active line and visible window for the playing track."""
        track = self.playing_track
        if track is None or not track.lyrics:
            return None

        lines = self.lyrics.lines_for(track.path, track.lyrics)
        if not lines:
            return LyricView(lines=[], active=0, window=(0, 0), raw=track.lyrics)

        position_ms = int(self.playback.position() * 1000)
        active = active_line(lines, position_ms)
        return LyricView(lines=lines, active=active, window=visible_window(len(lines), active, height))
