"""
Tests for PlayerSession - end-to-end ordering, completion and persistence.
"""
import random
import pytest
from pathlib import Path

from tune.controllers.playback import PlaybackController
from tune.controllers.session import PlayerSession
from tune.handlers.keys import KeyHandler
from tune.models import PlaybackState, RepeatMode, SessionState, SortMode, Track

from conftest import make_tracks


def make_session(output, tracks, rng=None, **state):
    playback = PlaybackController(output)
    return PlayerSession(tracks, playback, SessionState(**state), rng=rng or random.Random(7))


def assert_consistent(session):
    """Queue is a permutation and the cursor points at the playing track."""
    assert sorted(session.queue.order) == list(range(len(session.catalog)))
    if session.playing_index is not None:
        assert session.queue.current == session.playing_index


class TestCompletion:
    """Tests for check_playback at the end of a track."""

    def test_not_finished_does_nothing(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(0)
        session.check_playback()
        assert session.playing_index == 0

    def test_repeat_one_restarts(self, output, tracks):
        """Repeat one rewinds the same track and keeps playing."""
        session = make_session(output, tracks, repeat_mode=RepeatMode.ONE)
        session.play_index(1)
        sink = session.playback.sink
        sink.pos = 199.0
        sink.finish()

        session.check_playback()
        assert session.playback.state == PlaybackState.PLAYING
        assert session.playing_index == 1
        assert session.playback.position() == 0.0
        assert session.queue.cursor == 1

    def test_repeat_all_wraps_to_first(self, output, tracks):
        """3 tracks, repeat all, last one finishes: next playing index is 0."""
        session = make_session(output, tracks, repeat_mode=RepeatMode.ALL)
        session.play_index(2)
        session.playback.sink.finish()

        session.check_playback()
        assert session.playing_index == 0
        assert session.queue.cursor == 0
        assert session.playback.state == PlaybackState.PLAYING

    def test_repeat_off_advances(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(0)
        session.playback.sink.finish()

        session.check_playback()
        assert session.playing_index == 1
        assert session.playback.current_track is tracks[1]

    def test_repeat_off_stops_at_last(self, output, tracks):
        """Repeat off, no shuffle, last track finishes: Stopped, nothing playing."""
        session = make_session(output, tracks)
        session.play_index(2)
        session.playback.sink.finish()

        session.check_playback()
        assert session.playback.state == PlaybackState.STOPPED
        assert session.playing_index is None
        assert session.playback.current_track is None

    def test_shuffled_queue_end_stops(self, output, five_tracks):
        """With shuffle on and repeat off, the end of the queue stops cleanly."""
        session = make_session(output, five_tracks, shuffle=True)
        last_in_queue = session.queue.order[-1]
        session.play_index(last_in_queue)
        session.playback.sink.finish()

        session.check_playback()
        assert session.playback.state == PlaybackState.STOPPED
        assert session.playing_index is None

    def test_shuffled_completion_follows_queue(self, output, five_tracks):
        session = make_session(output, five_tracks, shuffle=True)
        first = session.queue.order[0]
        session.play_index(first)
        session.playback.sink.finish()

        session.check_playback()
        assert session.playing_index == session.queue.order[1]
        assert_consistent(session)


class TestShuffle:
    """Tests for shuffle toggling while playing."""

    def test_enable_shuffle_keeps_playing(self, output, five_tracks):
        """Shuffling while track 3 plays doesn't interrupt it and follows it in the queue."""
        session = make_session(output, five_tracks)
        session.play_index(3)
        sink = session.playback.sink
        sinks_before = len(output.sinks)

        session.toggle_shuffle()
        assert session.shuffle is True
        assert session.playback.sink is sink
        assert len(output.sinks) == sinks_before
        assert session.playback.state == PlaybackState.PLAYING
        assert session.playing_index == 3
        assert session.queue.order[session.queue.cursor] == 3
        assert_consistent(session)

    def test_shuffle_on_then_off(self, output, five_tracks):
        session = make_session(output, five_tracks)
        session.play_index(2)
        session.toggle_shuffle()
        session.toggle_shuffle()
        assert session.queue.order == [0, 1, 2, 3, 4]
        assert session.queue.cursor == 2

    def test_permutation_after_many_operations(self, output):
        session = make_session(output, make_tracks(8), rng=random.Random(99))
        session.play_index(4)
        for _ in range(5):
            session.toggle_shuffle()
            assert_consistent(session)
            session.cycle_sort()
            assert_consistent(session)
            session.play_next()
            assert_consistent(session)


class TestSort:
    """Tests for re-sorting while playing."""

    @pytest.fixture
    def titled_tracks(self):
        return [
            Track(path=Path('/music/a.mp3'), title='Zulu', artist='Xavier'),
            Track(path=Path('/music/b.mp3'), title='alpha', artist='Yankee'),
            Track(path=Path('/music/c.mp3'), title='Mike', artist='Whiskey'),
        ]

    def test_sort_preserves_playing_identity(self, output, titled_tracks):
        """The playing track keeps playing although its index changes."""
        session = make_session(output, titled_tracks)
        session.play_index(0)
        sink = session.playback.sink

        session.cycle_sort()
        assert session.sort_mode == SortMode.TITLE
        assert session.playing_track.path == Path('/music/a.mp3')
        assert session.playing_index == 2
        assert session.queue.order == [0, 1, 2]
        assert session.queue.cursor == 2
        assert session.playback.sink is sink
        assert session.playback.state == PlaybackState.PLAYING

    def test_sort_with_shuffle(self, output, titled_tracks):
        session = make_session(output, titled_tracks, shuffle=True)
        session.play_index(1)
        session.set_sort_mode(SortMode.ARTIST)
        assert session.playing_track.path == Path('/music/b.mp3')
        assert session.queue.shuffle is True
        assert_consistent(session)

    def test_selection_follows_track(self, output, titled_tracks):
        session = make_session(output, titled_tracks)
        session.selected = 1
        session.set_sort_mode(SortMode.TITLE)
        assert session.selected_track.path == Path('/music/b.mp3')


class TestTransport:
    """Tests for next/previous/pause through the session."""

    def test_play_previous_restarts_after_threshold(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(1)
        session.playback.sink.pos = 10.0
        session.play_previous()
        assert session.playing_index == 1
        assert session.playback.position() == 0.0

    def test_play_previous_goes_back(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(1)
        session.playback.sink.pos = 2.0
        session.play_previous()
        assert session.playing_index == 0

    def test_play_previous_wraps(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(0)
        session.play_previous()
        assert session.playing_index == 2

    def test_play_next_at_end_without_repeat(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(2)
        assert session.play_next() is False
        assert session.playing_index == 2
        assert session.playback.status_message.text == 'End of queue'

    def test_toggle_pause_when_stopped_plays_selection(self, output, tracks):
        session = make_session(output, tracks)
        session.selected = 1
        session.toggle_pause()
        assert session.playing_index == 1
        session.toggle_pause()
        assert session.playback.state == PlaybackState.PAUSED

    def test_play_failure_clears_playing(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(0)
        output.broken.add(tracks[1].path)
        assert session.play_index(1) is False
        assert session.playing_index is None
        assert session.playback.state == PlaybackState.STOPPED
        assert session.playback.status_message.is_error

    def test_stop_clears_playing(self, output, tracks):
        session = make_session(output, tracks)
        session.play_index(1)
        session.stop()
        assert session.playing_index is None
        assert session.playback.state == PlaybackState.STOPPED


class TestNavigation:
    """Tests for list selection and search."""

    def test_selection_is_clamped(self, output, tracks):
        session = make_session(output, tracks)
        session.select_previous()
        assert session.selected == 0
        session.page_down(10)
        assert session.selected == 2
        session.select_next()
        assert session.selected == 2
        session.select_first()
        assert session.selected == 0
        session.select_last()
        assert session.selected == 2

    def test_search_selects_match(self, output, tracks):
        session = make_session(output, tracks)
        assert session.search('song 2') is True
        assert session.selected == 2

    def test_search_without_match(self, output, tracks):
        session = make_session(output, tracks)
        assert session.search('nope') is False
        assert session.selected == 0

    def test_search_prompt_submits_query(self, output, tracks):
        session = make_session(output, tracks)
        session.begin_search()
        assert session.searching
        for char in 'song 22':
            session.search_input(char)
        session.search_backspace()
        assert session.search_query == 'song 2'

        assert session.submit_search() is True
        assert session.selected == 2
        assert not session.searching

    def test_search_prompt_cancel_and_empty_submit(self, output, tracks):
        session = make_session(output, tracks)
        session.begin_search()
        session.search_input('song 2')
        session.cancel_search()
        assert not session.searching
        assert session.selected == 0

        session.begin_search()
        assert session.submit_search() is False
        assert session.playback.status_message is None

    def test_playback_advances_while_typing(self, output, tracks):
        """A track ending with the search prompt open still advances the queue."""
        session = make_session(output, tracks)
        keys = KeyHandler(session)
        session.play_index(0)
        keys.handle(ord('/'))
        keys.handle(ord('s'))

        session.playback.sink.finish()
        session.check_playback()
        assert session.playing_index == 1
        assert session.searching

        keys.handle(ord('o'))
        assert session.search_query == 'so'
        assert session.sort_mode == SortMode.FILENAME

    def test_empty_catalog(self, output):
        session = make_session(output, [])
        session.select_next()
        assert session.selected == 0
        assert session.play_selected() is False
        assert session.play_next() is False
        session.check_playback()


class TestPersistence:
    """Tests for restoring and snapshotting session state."""

    def test_restores_state(self, output, tracks):
        session = make_session(
            output, tracks,
            volume=0.5,
            shuffle=True,
            repeat_mode=RepeatMode.ALL,
            sort_mode=SortMode.TITLE,
            last_track_path='/music/01.mp3',
        )
        assert session.playback.volume.level == 0.5
        assert session.shuffle is True
        assert session.repeat_mode == RepeatMode.ALL
        assert session.sort_mode == SortMode.TITLE
        assert session.selected_track.path == Path('/music/01.mp3')
        assert session.playing_index is None

    def test_missing_last_track_ignored(self, output, tracks):
        session = make_session(output, tracks, last_track_path='/music/gone.mp3')
        assert session.selected == 0

    def test_close_stops_and_returns_state(self, output, tracks):
        """Quit stops playback and hands back what to save."""
        session = make_session(output, tracks, repeat_mode=RepeatMode.ONE)
        session.play_index(2)
        session.playback.toggle_mute()

        state = session.close()
        assert session.playback.state == PlaybackState.STOPPED
        assert state.last_track_path == '/music/02.mp3'
        assert state.repeat_mode == RepeatMode.ONE
        assert state.volume == 1.0


class TestLyricView:
    """Tests for the lyric panel data."""

    def test_synced_lyrics(self, output):
        track = Track(path=Path('/music/l.mp3'), title='L',
                      lyrics='[00:01.00]Hello\n[00:02.50]World')
        session = make_session(output, [track])
        session.play_index(0)

        session.playback.sink.pos = 1.5
        view = session.lyric_view(height=10)
        assert view.synced
        assert view.active == 0

        session.playback.sink.pos = 3.0
        assert session.lyric_view(height=10).active == 1

    def test_unsynced_lyrics_shown_raw(self, output):
        track = Track(path=Path('/music/l.mp3'), title='L', lyrics='No timestamps here')
        session = make_session(output, [track])
        session.play_index(0)
        view = session.lyric_view(height=10)
        assert not view.synced
        assert view.raw == 'No timestamps here'

    def test_no_lyrics(self, output, tracks):
        session = make_session(output, tracks)
        assert session.lyric_view(height=10) is None
        session.play_index(0)
        assert session.lyric_view(height=10) is None
