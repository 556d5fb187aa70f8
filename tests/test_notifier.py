"""Tests for desktop notifications."""

from unittest.mock import MagicMock, patch

import pytest

from console_music_player.core.notifier import Notifier
from console_music_player.models.playback import PlaybackStatus, RepeatMode, SessionSnapshot
from console_music_player.models.track import Track

MODULE = "console_music_player.core.notifier"


def snapshot(status=PlaybackStatus.PLAYING, path="/music/a.mp3", error=None) -> SessionSnapshot:
    return SessionSnapshot(
        status=status,
        track=Track(path) if path else None,
        cursor=0,
        position=0.0,
        duration=None,
        volume=100,
        muted=False,
        shuffle=False,
        repeat_mode=RepeatMode.OFF,
        error=error
    )


@pytest.fixture
def plyer():
    fake = MagicMock()
    with patch(f"{MODULE}.sys.platform", "linux"), \
         patch(f"{MODULE}.PLYER_AVAILABLE", True), \
         patch(f"{MODULE}.plyer_notification", fake, create=True):
        yield fake


class TestNotifier:
    def test_disabled_sends_nothing(self, logger, plyer) -> None:
        notifier = Notifier(logger, enabled=False)
        assert not notifier.send("title", "message")
        plyer.notify.assert_not_called()

    def test_no_backend_disables(self, logger) -> None:
        with patch(f"{MODULE}.sys.platform", "linux"), \
             patch(f"{MODULE}.PLYER_AVAILABLE", False):
            notifier = Notifier(logger, enabled=True)
        assert not notifier.enabled

    def test_send_with_plyer(self, logger, plyer) -> None:
        notifier = Notifier(logger)
        assert notifier.send("Now Playing", "Song")
        assert plyer.notify.call_args.kwargs["app_name"] == "Console Music Player"

    def test_backend_failure_returns_false(self, logger, plyer) -> None:
        plyer.notify.side_effect = RuntimeError("no dbus")
        assert not Notifier(logger).send("title", "message")

    def test_track_change_notified_once(self, logger, plyer) -> None:
        notifier = Notifier(logger)
        notifier.on_snapshot(snapshot())
        notifier.on_snapshot(snapshot())
        notifier.on_snapshot(snapshot(path="/music/b.mp3"))
        assert plyer.notify.call_count == 2

    def test_replay_after_stop_notified(self, logger, plyer) -> None:
        notifier = Notifier(logger)
        notifier.on_snapshot(snapshot())
        notifier.on_snapshot(snapshot(status=PlaybackStatus.STOPPED, path=None))
        notifier.on_snapshot(snapshot())
        assert plyer.notify.call_count == 2

    def test_errors_notified(self, logger, plyer) -> None:
        notifier = Notifier(logger, on_track_change=False)
        notifier.on_snapshot(snapshot(status=PlaybackStatus.STOPPED, error="No playable tracks"))
        notifier.on_snapshot(snapshot(status=PlaybackStatus.STOPPED, error="No playable tracks"))
        plyer.notify.assert_called_once()
        assert plyer.notify.call_args.kwargs["title"] == "Playback Error"
