"""
Key Handler - Maps key presses to player session commands.
"""
import curses
import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

KEY_ESCAPE = 27
KEY_ENTER_CODES = (curses.KEY_ENTER, 10, 13)
KEY_BACKSPACE_CODES = (curses.KEY_BACKSPACE, 127, 8)

KEY_BINDINGS: Dict[int, str] = {
    ord('q'): 'quit',
    ord('h'): 'help',
    ord('?'): 'help',
    ord('j'): 'down',
    curses.KEY_DOWN: 'down',
    ord('k'): 'up',
    curses.KEY_UP: 'up',
    ord('g'): 'first',
    curses.KEY_HOME: 'first',
    ord('G'): 'last',
    curses.KEY_END: 'last',
    curses.KEY_NPAGE: 'page_down',
    curses.KEY_PPAGE: 'page_up',
    ord(' '): 'pause',
    ord('s'): 'stop',
    ord('n'): 'next',
    ord('p'): 'previous',
    curses.KEY_RIGHT: 'seek_forward',
    curses.KEY_LEFT: 'seek_backward',
    ord('+'): 'volume_up',
    ord('='): 'volume_up',
    ord('-'): 'volume_down',
    ord('m'): 'mute',
    ord('r'): 'repeat',
    ord('z'): 'shuffle',
    ord('o'): 'sort',
    ord('l'): 'lyrics',
    ord('/'): 'search',
}
for _code in KEY_ENTER_CODES:
    KEY_BINDINGS[_code] = 'play'
for _digit in range(10):
    KEY_BINDINGS[ord(str(_digit))] = f'percent_{_digit}'


class KeyHandler:
    """Dispatches keys to a PlayerSession."""

    def __init__(self, session, page_rows: Callable[[], int] = lambda: 10):
        """
        Args:
            session: PlayerSession to drive
            page_rows: Returns the number of visible playlist rows
        """
        self.session = session
        self.page_rows = page_rows

    def command_for(self, key: int) -> Optional[str]:
        return KEY_BINDINGS.get(key)

    def handle(self, key: int) -> bool:
        """Handle one key press. Returns False when the app should quit."""
        if self.session.searching:
            self._handle_search_key(key)
            return True

        command = self.command_for(key)

        # Help overlay swallows everything but closing it and quitting
        if self.session.show_help:
            if command == 'quit':
                return False
            if command == 'help' or key == KEY_ESCAPE:
                self.session.toggle_help()
            return True

        if command is None:
            return True
        if command == 'quit':
            logger.info('Quit requested')
            return False

        logger.debug(f'Key {key}: {command}')
        self._dispatch(command)
        return True

    def _dispatch(self, command: str):
        session = self.session

        if command.startswith('percent_'):
            session.seek_percentage(int(command.split('_')[1]) * 10)
            return

        if command == 'page_down':
            session.page_down(self.page_rows())
            return
        if command == 'page_up':
            session.page_up(self.page_rows())
            return

        actions = {
            'help': session.toggle_help,
            'down': session.select_next,
            'up': session.select_previous,
            'first': session.select_first,
            'last': session.select_last,
            'play': session.play_selected,
            'pause': session.toggle_pause,
            'stop': session.stop,
            'next': session.play_next,
            'previous': session.play_previous,
            'seek_forward': session.seek_forward,
            'seek_backward': session.seek_backward,
            'volume_up': session.volume_up,
            'volume_down': session.volume_down,
            'mute': session.toggle_mute,
            'repeat': session.cycle_repeat,
            'shuffle': session.toggle_shuffle,
            'sort': session.cycle_sort,
            'lyrics': session.toggle_lyrics,
            'search': session.begin_search,
        }
        actions[command]()

    def _handle_search_key(self, key: int):
        """Edit the open search prompt: Enter submits, Esc cancels."""
        session = self.session
        if key in KEY_ENTER_CODES:
            session.submit_search()
        elif key == KEY_ESCAPE:
            session.cancel_search()
        elif key in KEY_BACKSPACE_CODES:
            session.search_backspace()
        elif 32 <= key < 127:
            session.search_input(chr(key))
