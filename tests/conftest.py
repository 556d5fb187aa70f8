"""Shared fixtures: an in-memory audio backend and a controllable clock."""

import logging
import random
from typing import List, Optional, Set

import pytest

from console_music_player.backends.base import AudioBackend
from console_music_player.core.dispatcher import CommandDispatcher
from console_music_player.core.history import HistoryLog
from console_music_player.core.playlist import PlaylistManager
from console_music_player.core.session import PlaybackSession
from console_music_player.errors import DecodeError
from console_music_player.models.track import Track


class FakeBackend(AudioBackend):
    """Records calls; fails to load any path in failing_paths."""

    def __init__(self):
        super().__init__()
        self.calls: List[tuple] = []
        self.failing_paths: Set[str] = set()
        self.loaded: Optional[str] = None
        self.current_handle = 0
        self.volume: Optional[int] = None
        self.pos = 0.0
        self.length: Optional[float] = None
        self.playing = False

    def load(self, path: str) -> int:
        self.calls.append(("load", path))
        if path in self.failing_paths:
            raise DecodeError(path, "corrupt file")
        self.loaded = path
        self.current_handle += 1
        self.pos = 0.0
        return self.current_handle

    def play(self) -> None:
        self.calls.append(("play",))
        self.playing = True

    def pause(self) -> None:
        self.calls.append(("pause",))
        self.playing = False

    def stop(self) -> None:
        self.calls.append(("stop",))
        self.playing = False
        self.loaded = None

    def seek(self, seconds: float) -> None:
        self.calls.append(("seek", seconds))
        self.pos = seconds

    def set_volume(self, volume: int) -> None:
        self.calls.append(("set_volume", volume))
        self.volume = volume

    def position(self) -> float:
        return self.pos

    def duration(self) -> Optional[float]:
        return self.length

    def loads(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "load"]

    def finish(self) -> None:
        """Simulate the loaded media reaching its end."""
        self._emit_finished(self.current_handle)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_paths(count: int) -> List[str]:
    return [f"/music/track{i:02d}.mp3" for i in range(count)]


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("player_tests")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def playlist(logger) -> PlaylistManager:
    return PlaylistManager(
        logger=logger,
        track_factory=lambda path: Track(path=path),
        rng=random.Random(1234)
    )


@pytest.fixture
def history(logger) -> HistoryLog:
    return HistoryLog(logger=logger)


@pytest.fixture
def session(playlist, history, backend, logger, clock) -> PlaybackSession:
    return PlaybackSession(
        playlist=playlist,
        history=history,
        backend=backend,
        logger=logger,
        clock=clock
    )


@pytest.fixture
def dispatcher(session, logger, backend) -> CommandDispatcher:
    dispatcher = CommandDispatcher(session, logger)
    backend.set_event_handlers(dispatcher.track_finished, dispatcher.backend_error)
    return dispatcher


@pytest.fixture
def paths() -> List[str]:
    """Five distinct track paths."""
    return make_paths(5)


@pytest.fixture
def loaded(playlist, paths) -> PlaylistManager:
    """Playlist holding the five paths, cursor on the first."""
    playlist.add_paths(paths)
    return playlist


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Point the per-platform config directory into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("APPDATA", str(home / "AppData"))
    return home
