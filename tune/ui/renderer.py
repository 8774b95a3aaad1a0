"""
Renderer - Draws the player into a curses window.

Reads session state but never changes it, apart from letting an expired
status message go.
"""
import curses
import logging

from ..config import COLOR_PAIRS
from ..models import PlaybackState
from ..utils import format_time, truncate

logger = logging.getLogger(__name__)

STATUS_HEIGHT = 3
LYRICS_MIN_WIDTH = 60   # Terminal width below which the lyric panel is hidden

HELP_LINES = [
    ('j / k, ↓ / ↑', 'Navigate'),
    ('g / G', 'First / last track'),
    ('PgUp / PgDn', 'Page up / down'),
    ('Enter', 'Play selected'),
    ('Space', 'Pause / resume'),
    ('s', 'Stop'),
    ('n / p', 'Next / previous track'),
    ('← / →', 'Seek -5s / +5s'),
    ('0-9', 'Seek to 0%-90%'),
    ('+ / -', 'Volume up / down'),
    ('m', 'Mute'),
    ('r', 'Cycle repeat'),
    ('z', 'Toggle shuffle'),
    ('o', 'Cycle sort'),
    ('l', 'Toggle lyrics'),
    ('/', 'Search'),
    ('h / ?', 'Toggle help'),
    ('q', 'Quit'),
]

STATE_ICONS = {
    PlaybackState.PLAYING: '▶',
    PlaybackState.PAUSED: '⏸',
    PlaybackState.STOPPED: '■',
}


class Renderer:
    """Draws playlist, lyrics, status bar and help overlay."""

    def __init__(self, screen):
        self.screen = screen
        self._colors = {}
        self._init_colors()

    def _init_colors(self):
        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error as e:
            logger.debug(f'No terminal colors: {e}')
            return
        for pair_id, (name, fg, bg) in enumerate(COLOR_PAIRS, start=1):
            try:
                curses.init_pair(pair_id, fg, bg)
                self._colors[name] = curses.color_pair(pair_id)
            except (curses.error, ValueError):
                # Color not available on this terminal
                self._colors[name] = curses.A_NORMAL

    def color(self, name: str) -> int:
        return self._colors.get(name, curses.A_NORMAL)

    def playlist_rows(self) -> int:
        """Visible playlist rows (inside the border)."""
        height, _ = self.screen.getmaxyx()
        return max(1, height - STATUS_HEIGHT - 2)

    # ============================================
    # FRAME
    # ============================================

    def draw(self, session):
        self.screen.erase()
        height, width = self.screen.getmaxyx()
        if height < STATUS_HEIGHT + 3 or width < 20:
            self._put(0, 0, 'Terminal too small', curses.A_BOLD)
            self.screen.refresh()
            return

        session.playback.expire_status()

        main_height = height - STATUS_HEIGHT
        show_lyrics = session.show_lyrics and width >= LYRICS_MIN_WIDTH
        list_width = width // 2 if show_lyrics else width

        self._draw_playlist(session, 0, 0, main_height, list_width)
        if show_lyrics:
            self._draw_lyrics(session, 0, list_width, main_height, width - list_width)
        self._draw_status(session, main_height, width)

        if session.show_help:
            self._draw_help(height, width)

        self.screen.refresh()

    # ============================================
    # PANELS
    # ============================================

    def _draw_playlist(self, session, top: int, left: int, height: int, width: int):
        self._box(top, left, height, width, ' Playlist ', self.color('border'))
        rows = height - 2
        count = len(session.catalog)
        if count == 0:
            self._put(top + 1, left + 2, 'No tracks found', self.color('muted'))
            return

        # Keep the selection in view
        first = max(0, min(session.selected - rows // 2, count - rows))
        for row, index in enumerate(range(first, min(count, first + rows))):
            track = session.catalog[index]
            marker = '♪ ' if index == session.playing_index else '  '
            duration = format_time(track.duration) if track.duration else ''
            name_width = width - 4 - len(marker) - len(duration) - 1
            text = f'{marker}{truncate(track.display_name, name_width):<{max(0, name_width)}} {duration}'

            attr = curses.A_NORMAL
            if index == session.playing_index:
                attr = self.color('playing') | curses.A_BOLD
            if index == session.selected:
                attr = self.color('selected') | curses.A_BOLD
            self._put(top + 1 + row, left + 1, truncate(text, width - 2), attr)

    def _draw_lyrics(self, session, top: int, left: int, height: int, width: int):
        self._box(top, left, height, width, ' Lyrics ', self.color('border'))
        rows = height - 2
        text_width = width - 4

        view = session.lyric_view(rows)
        if view is None:
            self._put(top + 1, left + 2, 'No lyrics', self.color('muted'))
            return

        if not view.synced:
            for row, line in enumerate(view.raw.splitlines()[:rows]):
                self._put(top + 1 + row, left + 2, truncate(line, text_width))
            return

        start, end = view.window
        for row, index in enumerate(range(start, end)):
            line = view.lines[index]
            if index == view.active:
                attr = self.color('lyric_active') | curses.A_BOLD
            else:
                attr = self.color('muted')
            self._put(top + 1 + row, left + 2, truncate(line.text, text_width), attr)

    def _draw_status(self, session, top: int, width: int):
        playback = session.playback
        self._box(top, 0, STATUS_HEIGHT, width, ' Status ', self.color('muted'))

        if session.searching:
            prompt = f'/{session.search_query}_'
            self._put(top + 1, 2, prompt[-(width - 4):], curses.A_BOLD)
            return

        message = playback.status_message
        if message is not None:
            attr = self.color('error') if message.is_error else self.color('playing')
            self._put(top + 1, 2, truncate(message.text, width - 4), attr | curses.A_BOLD)
            return

        icon = STATE_ICONS[playback.state]
        track = playback.current_track
        if track is not None:
            elapsed = format_time(playback.position())
            total = format_time(track.duration)
            now = f'{icon} {track.display_name}  {elapsed} / {total}'
        else:
            now = f'{icon} Stopped'

        volume = 'Muted' if playback.volume.muted else f'Vol {playback.volume.percent}%'
        flags = ' | '.join([
            volume,
            session.repeat_mode.label,
            f'Shuffle: {"On" if session.shuffle else "Off"}',
            session.sort_mode.label,
            'h: Help',
        ])
        room = width - 4 - len(flags) - 3
        line = f'{truncate(now, room)}   {flags}' if room > 10 else truncate(now, width - 4)
        self._put(top + 1, 2, line)

    def _draw_help(self, height: int, width: int):
        box_height = min(height, len(HELP_LINES) + 2)
        box_width = min(width, 44)
        top = max(0, (height - box_height) // 2)
        left = max(0, (width - box_width) // 2)

        for row in range(box_height):
            self._put(top + row, left, ' ' * box_width)
        self._box(top, left, box_height, box_width, ' Help ', self.color('border'))
        for row, (keys, action) in enumerate(HELP_LINES[:box_height - 2]):
            self._put(top + 1 + row, left + 2, truncate(f'{keys:<14} {action}', box_width - 4))

    # ============================================
    # PRIMITIVES
    # ============================================

    def _put(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL):
        """addstr that ignores writes past the window edge."""
        height, width = self.screen.getmaxyx()
        if y < 0 or y >= height or x >= width:
            return
        try:
            self.screen.addstr(y, x, text[:width - x], attr)
        except curses.error:
            # Writing the bottom-right cell raises after the text is drawn
            pass

    def _box(self, top: int, left: int, height: int, width: int, title: str, attr: int):
        if height < 2 or width < 2:
            return
        self._put(top, left, '┌' + '─' * (width - 2) + '┐', attr)
        for row in range(1, height - 1):
            self._put(top + row, left, '│', attr)
            self._put(top + row, left + width - 1, '│', attr)
        self._put(top + height - 1, left, '└' + '─' * (width - 2) + '┘', attr)
        self._put(top, left + 2, truncate(title, width - 4), attr | curses.A_BOLD)
