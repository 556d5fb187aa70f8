"""Tests for the playlist manager."""

import pytest

from console_music_player.errors import InputError, OutOfRange
from console_music_player.models.playback import Direction, RepeatMode
from console_music_player.models.track import Track


class TestAddAndRemove:
    """Cursor maintenance under mutation."""

    def test_add_to_empty_sets_cursor(self, playlist) -> None:
        """Test the first added track becomes current."""
        assert playlist.cursor is None
        playlist.add(Track("/music/a.mp3"))
        assert playlist.cursor == 0
        assert playlist.current.path == "/music/a.mp3"

    def test_add_keeps_existing_cursor(self, loaded) -> None:
        loaded.jump(2)
        loaded.add(Track("/music/extra.mp3"))
        assert loaded.cursor == 2
        assert len(loaded) == 6

    def test_duplicates_are_kept(self, playlist) -> None:
        playlist.add_paths(["/music/a.mp3", "/music/a.mp3"])
        assert playlist.paths == ["/music/a.mp3", "/music/a.mp3"]
        assert playlist.index_of_path("/music/a.mp3") == 0

    def test_remove_before_cursor_shifts_cursor(self, loaded) -> None:
        loaded.jump(3)
        loaded.remove(1)
        assert loaded.cursor == 2
        assert loaded.current.path == "/music/track03.mp3"

    def test_remove_after_cursor_keeps_cursor(self, loaded) -> None:
        loaded.jump(1)
        loaded.remove(3)
        assert loaded.cursor == 1

    def test_remove_at_cursor_selects_following_entry(self, loaded) -> None:
        loaded.jump(2)
        loaded.remove(2)
        assert loaded.cursor == 2
        assert loaded.current.path == "/music/track03.mp3"

    def test_remove_last_entry_at_cursor_clamps(self, loaded) -> None:
        loaded.jump(4)
        loaded.remove(4)
        assert loaded.cursor == 3

    def test_remove_only_entry_empties_cursor(self, playlist) -> None:
        playlist.add(Track("/music/a.mp3"))
        playlist.remove(0)
        assert playlist.cursor is None
        assert playlist.is_empty

    @pytest.mark.parametrize("index", [-1, 5, 99])
    def test_remove_out_of_range(self, loaded, index) -> None:
        with pytest.raises(OutOfRange):
            loaded.remove(index)
        assert len(loaded) == 5

    def test_cursor_stays_valid_under_mixed_mutations(self, loaded) -> None:
        for index in (4, 0, 1, 0):
            loaded.remove(index)
            assert loaded.cursor is None or 0 <= loaded.cursor < len(loaded)
        assert len(loaded) == 1

    def test_clear(self, loaded) -> None:
        loaded.clear()
        assert loaded.is_empty
        assert loaded.cursor is None
        assert loaded.advance(Direction.NEXT) is None

    def test_jump_out_of_range(self, loaded) -> None:
        with pytest.raises(OutOfRange):
            loaded.jump(5)


class TestSequentialTraversal:
    """Next/previous without shuffle."""

    def test_next_walks_in_order(self, loaded) -> None:
        visited = [loaded.cursor]
        while loaded.advance(Direction.NEXT) is not None:
            visited.append(loaded.cursor)
        assert visited == [0, 1, 2, 3, 4]

    def test_repeat_off_stops_at_end(self, loaded) -> None:
        loaded.jump(4)
        assert loaded.advance(Direction.NEXT) is None
        assert loaded.cursor == 4

    def test_repeat_all_wraps(self, loaded) -> None:
        loaded.set_repeat_mode(RepeatMode.ALL)
        loaded.jump(4)
        assert loaded.advance(Direction.NEXT).path == "/music/track00.mp3"
        assert loaded.advance(Direction.PREVIOUS).path == "/music/track04.mp3"

    def test_previous_at_start_stays(self, loaded) -> None:
        assert loaded.advance(Direction.PREVIOUS).path == "/music/track00.mp3"
        assert loaded.cursor == 0

    def test_repeat_one_keeps_track(self, loaded) -> None:
        loaded.set_repeat_mode(RepeatMode.ONE)
        loaded.jump(2)
        assert loaded.advance(Direction.NEXT).path == "/music/track02.mp3"
        assert loaded.advance(Direction.PREVIOUS).path == "/music/track02.mp3"

    def test_repeat_one_can_be_bypassed(self, loaded) -> None:
        loaded.set_repeat_mode(RepeatMode.ONE)
        loaded.jump(2)
        assert loaded.advance(Direction.NEXT, honor_repeat_one=False).path == "/music/track03.mp3"

    def test_advance_on_empty(self, playlist) -> None:
        assert playlist.advance(Direction.NEXT) is None
        assert playlist.advance(Direction.PREVIOUS) is None

    def test_cycle_repeat(self, playlist) -> None:
        assert playlist.cycle_repeat() == RepeatMode.ONE
        assert playlist.cycle_repeat() == RepeatMode.ALL
        assert playlist.cycle_repeat() == RepeatMode.OFF


class TestShuffle:
    """Shuffle order generation and invalidation."""

    def test_order_is_permutation_with_cursor_first(self, loaded) -> None:
        loaded.jump(3)
        loaded.toggle_shuffle()
        order = loaded.shuffle_order
        assert sorted(order) == [0, 1, 2, 3, 4]
        assert order[0] == 3

    def test_off_restores_sequential_order(self, loaded) -> None:
        loaded.toggle_shuffle()
        loaded.toggle_shuffle()
        assert loaded.shuffle_order is None
        assert loaded.traversal_order() == [0, 1, 2, 3, 4]

    def test_on_off_on_yields_valid_permutations(self, loaded) -> None:
        for _ in range(3):
            loaded.set_shuffle(True)
            assert sorted(loaded.traversal_order()) == list(range(5))
            loaded.set_shuffle(False)
            assert loaded.traversal_order() == list(range(5))

    def test_order_is_stable_between_reads(self, loaded) -> None:
        loaded.toggle_shuffle()
        assert loaded.shuffle_order == loaded.shuffle_order

    def test_add_regenerates_order(self, loaded) -> None:
        loaded.toggle_shuffle()
        loaded.shuffle_order
        loaded.add(Track("/music/extra.mp3"))
        order = loaded.shuffle_order
        assert sorted(order) == list(range(6))
        assert order[0] == loaded.cursor

    def test_remove_regenerates_order(self, loaded) -> None:
        loaded.toggle_shuffle()
        loaded.remove(1)
        assert sorted(loaded.shuffle_order) == list(range(4))

    def test_shuffled_traversal_visits_each_track_once(self, loaded) -> None:
        loaded.toggle_shuffle()
        visited = [loaded.cursor]
        while loaded.advance(Direction.NEXT) is not None:
            visited.append(loaded.cursor)
        assert sorted(visited) == [0, 1, 2, 3, 4]

    def test_shuffle_previous_follows_order(self, loaded) -> None:
        loaded.toggle_shuffle()
        order = loaded.shuffle_order
        loaded.advance(Direction.NEXT)
        loaded.advance(Direction.NEXT)
        assert loaded.cursor == order[2]
        loaded.advance(Direction.PREVIOUS)
        assert loaded.cursor == order[1]


class TestAddPath:
    """Adding files, directories and playlists from disk."""

    def test_add_file(self, playlist, tmp_path) -> None:
        song = tmp_path / "song.mp3"
        song.write_bytes(b"")
        added = playlist.add_path(str(song))
        assert [t.path for t in added] == [str(song)]

    def test_add_directory(self, playlist, tmp_path) -> None:
        (tmp_path / "b.mp3").write_bytes(b"")
        (tmp_path / "A.flac").write_bytes(b"")
        (tmp_path / "notes.txt").write_text("x")
        added = playlist.add_path(str(tmp_path))
        assert [t.filename for t in added] == ["A.flac", "b.mp3"]

    def test_add_empty_directory(self, playlist, tmp_path) -> None:
        assert playlist.add_path(str(tmp_path)) == []
        assert playlist.cursor is None

    def test_add_m3u(self, playlist, tmp_path) -> None:
        m3u = tmp_path / "mix.m3u"
        m3u.write_text("#EXTM3U\nfirst.mp3\n/abs/second.mp3\n", encoding="utf-8")
        playlist.add_path(str(m3u))
        assert playlist.paths == [str(tmp_path / "first.mp3"), "/abs/second.mp3"]

    def test_add_missing_path(self, playlist, tmp_path) -> None:
        with pytest.raises(InputError):
            playlist.add_path(str(tmp_path / "missing.mp3"))
