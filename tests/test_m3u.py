"""Tests for M3U reading and writing."""

import pytest

from console_music_player.errors import PersistenceError
from console_music_player.library.m3u import (
    M3U_HEADER,
    format_m3u,
    parse_m3u,
    read_m3u,
    write_m3u,
)


class TestParse:
    def test_skips_comments_and_blank_lines(self, tmp_path) -> None:
        text = "#EXTM3U\n\n#EXTINF:123,Artist - Title\n/music/a.mp3\n   \n/music/b.mp3\n"
        assert parse_m3u(text, tmp_path) == ["/music/a.mp3", "/music/b.mp3"]

    def test_relative_paths_resolve_against_playlist_dir(self, tmp_path) -> None:
        assert parse_m3u("sub/a.mp3\n", tmp_path) == [str(tmp_path / "sub" / "a.mp3")]

    def test_keeps_duplicates_and_order(self, tmp_path) -> None:
        text = "/music/b.mp3\n/music/a.mp3\n/music/b.mp3\n"
        assert parse_m3u(text, tmp_path) == ["/music/b.mp3", "/music/a.mp3", "/music/b.mp3"]

    def test_windows_line_endings(self, tmp_path) -> None:
        assert parse_m3u("#EXTM3U\r\n/music/a.mp3\r\n", tmp_path) == ["/music/a.mp3"]

    def test_keeps_surrounding_spaces(self, tmp_path) -> None:
        text = "#EXTM3U\r\n/music/ intro.mp3\r\n/music/outro.mp3 \n"
        assert parse_m3u(text, tmp_path) == ["/music/ intro.mp3", "/music/outro.mp3 "]

    def test_unicode_separators_are_not_line_breaks(self, tmp_path) -> None:
        assert parse_m3u("/music/a\u2028b.mp3\n", tmp_path) == ["/music/a\u2028b.mp3"]


class TestReadWrite:
    @pytest.mark.parametrize("count", [0, 1, 7])
    def test_round_trip(self, tmp_path, count) -> None:
        paths = [f"/music/album {i}/track #{i}.mp3" for i in range(count)]
        target = tmp_path / "list.m3u"
        write_m3u(target, paths)
        assert read_m3u(target) == paths

    def test_empty_playlist_writes_header_only(self, tmp_path) -> None:
        target = tmp_path / "empty.m3u"
        write_m3u(target, [])
        assert target.read_text(encoding="utf-8") == M3U_HEADER + "\n"

    def test_unicode_paths(self, tmp_path) -> None:
        paths = ["/music/Björk/Jóga.flac", "/music/坂本龍一/Merry.mp3"]
        target = tmp_path / "unicode.m3u"
        write_m3u(target, paths)
        assert read_m3u(target) == paths

    def test_bom_tolerated(self, tmp_path) -> None:
        target = tmp_path / "bom.m3u"
        target.write_bytes(b"\xef\xbb\xbf#EXTM3U\n/music/a.mp3\n")
        assert read_m3u(target) == ["/music/a.mp3"]

    def test_control_characters_skipped(self) -> None:
        text = format_m3u(["/music/a.mp3", "/music/bad\nname.mp3"])
        assert text.splitlines() == [M3U_HEADER, "/music/a.mp3"]

    @pytest.mark.parametrize("path", [
        "/music/ leading space.mp3",
        "/music/trailing space.mp3 ",
        "/music/  both  .mp3  ",
    ])
    def test_whitespace_in_names_round_trips(self, tmp_path, path) -> None:
        paths = ["/music/a.mp3", path, "/music/b.mp3"]
        target = tmp_path / "spaces.m3u"
        write_m3u(target, paths)
        assert read_m3u(target) == paths

    @pytest.mark.parametrize("path", [
        "/music/line\u2028sep.mp3",
        "/music/para\u2029sep.mp3",
        "/music/nel\x85x.mp3",
        "   ",
    ])
    def test_unstorable_paths_skipped(self, tmp_path, path) -> None:
        target = tmp_path / "skipped.m3u"
        write_m3u(target, ["/music/a.mp3", path, "/music/b.mp3"])
        assert read_m3u(target) == ["/music/a.mp3", "/music/b.mp3"]

    def test_read_missing_file(self, tmp_path) -> None:
        with pytest.raises(PersistenceError):
            read_m3u(tmp_path / "missing.m3u")

    def test_write_into_file_path_fails(self, tmp_path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(PersistenceError):
            write_m3u(blocker / "list.m3u", ["/music/a.mp3"])
