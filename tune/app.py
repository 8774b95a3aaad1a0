"""
Tune Application - Terminal host loop.
"""
import curses
import signal
import logging
from typing import List, Optional

from .config import TICK_MS
from .models import SessionState, Track
from .api import SessionStore
from .controllers import PlaybackController, PlayerSession
from .handlers import KeyHandler
from .ui import Renderer

logger = logging.getLogger(__name__)


class Tune:
    """Main tune application.

    Single-threaded: every tick renders, waits up to TICK_MS for a key,
    dispatches it, then polls for track completion.
    """

    def __init__(self, tracks: List[Track], output, store: SessionStore,
                 state: Optional[SessionState] = None):
        """
        Args:
            tracks: Scanned catalog
            output: Opened AudioOutput (or NullAudioOutput)
            store: Where the session state is saved on quit
            state: Restored session state (defaults when None)
        """
        self.output = output
        self.store = store
        self.playback = PlaybackController(output)
        self.session = PlayerSession(tracks, self.playback, state or SessionState())
        self.running = True

        self.renderer: Optional[Renderer] = None
        self.keys: Optional[KeyHandler] = None

    def _handle_signal(self, signum, frame):
        """Handle SIGTERM/SIGINT for graceful shutdown."""
        sig_name = 'SIGTERM' if signum == signal.SIGTERM else 'SIGINT'
        logger.info(f'Received {sig_name}, shutting down...')
        self.running = False

    def start(self):
        """Run until quit, then stop playback and save the session."""
        signal.signal(signal.SIGTERM, self._handle_signal)
        signal.signal(signal.SIGINT, self._handle_signal)

        logger.info('Starting tune...')
        try:
            curses.wrapper(self._run)
        finally:
            self.shutdown()

    def _run(self, screen):
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        screen.keypad(True)
        screen.timeout(TICK_MS)

        self.renderer = Renderer(screen)
        self.keys = KeyHandler(self.session, page_rows=self.renderer.playlist_rows)

        logger.info('Entering main loop...')
        while self.running:
            self.renderer.draw(self.session)

            key = screen.getch()
            if key == curses.KEY_RESIZE:
                curses.update_lines_cols()
            elif key != -1 and not self.keys.handle(key):
                self.running = False

            self.session.check_playback()

    def shutdown(self):
        """Synchronous stop followed by a state save."""
        logger.info('Shutting down...')
        state = self.session.close()
        self.store.save(state)
        self.output.close()
        logger.info('tune stopped')
