"""libVLC audio backend."""

import logging
from pathlib import Path
from typing import Iterable, Optional

import vlc

from ..errors import DecodeError
from .base import AudioBackend

DEFAULT_VLC_OPTIONS = ("--no-video", "--quiet")


class VlcBackend(AudioBackend):
    """Plays files through a single libVLC media player."""

    def __init__(self, logger: logging.Logger, options: Iterable[str] = DEFAULT_VLC_OPTIONS):
        """Initialize VLC instance and player.

        Args:
            logger: Logger instance
            options: Command-line options for the libVLC instance
        """
        super().__init__()
        self.logger = logger
        self._instance = vlc.Instance(list(options))
        if self._instance is None:
            raise RuntimeError("Failed to create libVLC instance")

        self._player = self._instance.media_player_new()
        self._handle = 0
        self._paused = False

        events = self._player.event_manager()
        events.event_attach(vlc.EventType.MediaPlayerEndReached, self._handle_end_reached)
        events.event_attach(vlc.EventType.MediaPlayerEncounteredError, self._handle_error)

    # libVLC callbacks (run on VLC's event thread)

    def _handle_end_reached(self, event) -> None:
        self._emit_finished(self._handle)

    def _handle_error(self, event) -> None:
        self._emit_error(self._handle, "libVLC could not decode the file")

    # AudioBackend

    def load(self, path: str) -> int:
        if not Path(path).is_file():
            raise DecodeError(path, "file not found")

        media = self._instance.media_new(path)
        if media is None:
            raise DecodeError(path, "libVLC rejected the media")

        self._player.stop()
        self._player.set_media(media)
        self._paused = False
        self._handle += 1
        self.logger.debug(f"Loaded {path} (handle {self._handle})")
        return self._handle

    def play(self) -> None:
        if self._paused:
            self._player.set_pause(0)
            self._paused = False
            return

        if self._player.play() == -1:
            self._emit_error(self._handle, "libVLC failed to start playback")

    def pause(self) -> None:
        self._player.set_pause(1)
        self._paused = True

    def stop(self) -> None:
        self._player.stop()
        self._paused = False

    def seek(self, seconds: float) -> None:
        self._player.set_time(int(max(0.0, seconds) * 1000))

    def set_volume(self, volume: int) -> None:
        self._player.audio_set_volume(max(0, min(100, int(volume))))

    def position(self) -> float:
        millis = self._player.get_time()
        return millis / 1000 if millis and millis > 0 else 0.0

    def duration(self) -> Optional[float]:
        millis = self._player.get_length()
        return millis / 1000 if millis and millis > 0 else None

    def close(self) -> None:
        self.stop()
        self._player.release()
        self._instance.release()
