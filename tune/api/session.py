"""
Session Store - Persists preferences and the last played track.

Handles:
- Loading state.json, with defaults for anything missing or malformed
- Atomic saves (write .tmp, then replace)
- Recovery from a .tmp left behind by an interrupted save
"""
import json
import logging
from pathlib import Path

from ..models import SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """Best-effort JSON persistence of SessionState. Never raises to the caller."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def temp_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + '.tmp')

    def load(self) -> SessionState:
        """Load state from disk, returning defaults on any failure."""
        self._recover_temp_file()

        if not self.path.exists():
            logger.info(f'No saved session at {self.path}, using defaults')
            return SessionState()

        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            logger.warning(f'Invalid JSON in session file: {e}')
            return SessionState()
        except (IOError, OSError, UnicodeDecodeError) as e:
            logger.warning(f'Cannot read session file: {e}')
            return SessionState()

        if not isinstance(data, dict):
            logger.warning('Session file is not a JSON object, using defaults')
            return SessionState()

        state = SessionState.from_dict(data)
        logger.info(f'Loaded session: volume={state.volume}, shuffle={state.shuffle}, '
                    f'repeat={state.repeat_mode.value}, sort={state.sort_mode.value}')
        return state

    def save(self, state: SessionState) -> bool:
        """Write state atomically. Returns False (and logs) on failure."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.temp_path.write_text(json.dumps(state.to_dict(), indent=2), encoding='utf-8')
            self.temp_path.replace(self.path)
            logger.info(f'Saved session to {self.path}')
            return True
        except (IOError, OSError) as e:
            logger.warning(f'Could not save session: {e}')
            return False
        except Exception as e:
            logger.warning(f'Unexpected error saving session: {e}', exc_info=True)
            return False

    def _recover_temp_file(self):
        """Promote a leftover temp file when the main file is missing."""
        temp_path = self.temp_path
        if not temp_path.exists():
            return
        try:
            if self.path.exists():
                temp_path.unlink()
                logger.debug('Removed stale session temp file')
            else:
                temp_path.replace(self.path)
                logger.info('Recovered session from temp file')
        except (IOError, OSError) as e:
            logger.warning(f'Could not recover session temp file: {e}')
