"""
Tests for SessionStore - load/save, defaults, atomic writes.
"""
import json
import pytest

from tune.api.session import SessionStore
from tune.models import RepeatMode, SessionState, SortMode


class TestLoad:
    """Tests for loading session state."""

    def test_missing_file_gives_defaults(self, state_path):
        state = SessionStore(state_path).load()
        assert state == SessionState()
        assert state.volume == 1.0
        assert state.shuffle is False
        assert state.repeat_mode == RepeatMode.OFF
        assert state.sort_mode == SortMode.FILENAME
        assert state.last_track_path is None

    def test_invalid_json_gives_defaults(self, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text('{not json')
        assert SessionStore(state_path).load() == SessionState()

    def test_non_object_gives_defaults(self, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text('[1, 2, 3]')
        assert SessionStore(state_path).load() == SessionState()

    def test_missing_and_unknown_fields(self, state_path):
        """Known fields are read, missing ones default, unknown ones are ignored."""
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({'shuffle': True, 'theme': 'dark'}))
        state = SessionStore(state_path).load()
        assert state.shuffle is True
        assert state.volume == 1.0
        assert state.repeat_mode == RepeatMode.OFF

    def test_invalid_values_default(self, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({
            'volume': 'loud',
            'shuffle': 'yes',
            'repeat_mode': 'Sometimes',
            'sort_mode': 42,
            'last_track_path': 7,
        }))
        assert SessionStore(state_path).load() == SessionState()

    def test_volume_is_quantized(self, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({'volume': 1.7}))
        assert SessionStore(state_path).load().volume == 1.0

    @pytest.mark.parametrize('volume', ['NaN', 'Infinity', '-Infinity', '1e400', '1' + '0' * 400])
    def test_non_finite_volume_defaults(self, state_path, volume):
        """Non-finite volumes decoded by json fall back to the default."""
        state_path.parent.mkdir(parents=True)
        state_path.write_text(f'{{"volume": {volume}, "shuffle": true}}')
        state = SessionStore(state_path).load()
        assert state.volume == 1.0
        assert state.shuffle is True


class TestSave:
    """Tests for saving session state."""

    def test_save_and_reload(self, state_path):
        store = SessionStore(state_path)
        state = SessionState(
            volume=0.4,
            shuffle=True,
            repeat_mode=RepeatMode.ALL,
            sort_mode=SortMode.ARTIST,
            last_track_path='/music/song.mp3',
        )
        assert store.save(state) is True
        assert SessionStore(state_path).load() == state

    def test_file_format(self, state_path):
        """Enums are stored by name so the file stays readable."""
        SessionStore(state_path).save(SessionState(repeat_mode=RepeatMode.ONE, sort_mode=SortMode.TITLE))
        data = json.loads(state_path.read_text())
        assert data == {
            'volume': 1.0,
            'shuffle': False,
            'repeat_mode': 'One',
            'sort_mode': 'Title',
            'last_track_path': None,
        }

    def test_creates_directory(self, state_path):
        assert not state_path.parent.exists()
        SessionStore(state_path).save(SessionState())
        assert state_path.exists()

    def test_no_temp_file_after_save(self, state_path):
        store = SessionStore(state_path)
        store.save(SessionState())
        assert not store.temp_path.exists()

    def test_failure_is_swallowed(self, temp_dir):
        """Save returns False instead of raising when the directory can't be made."""
        blocker = temp_dir / 'blocker'
        blocker.write_text('a file, not a directory')
        store = SessionStore(blocker / 'state.json')
        assert store.save(SessionState()) is False


class TestRecovery:
    """Tests for recovery from an interrupted save."""

    def test_recover_from_temp_file(self, state_path):
        store = SessionStore(state_path)
        state_path.parent.mkdir(parents=True)
        store.temp_path.write_text(json.dumps({'volume': 0.2}))

        state = store.load()
        assert state.volume == 0.2
        assert state_path.exists()
        assert not store.temp_path.exists()

    def test_stale_temp_file_removed(self, state_path):
        """With a main file present, a leftover temp file is discarded."""
        store = SessionStore(state_path)
        store.save(SessionState(volume=0.8))
        store.temp_path.write_text(json.dumps({'volume': 0.2}))

        assert store.load().volume == 0.8
        assert not store.temp_path.exists()
