"""Playback state machine.

The session owns the active playlist and the history log and is the only
code that talks to the audio backend. It is driven exclusively by the
command dispatcher's logic thread, so it holds no locks.
"""

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from ..backends.base import AudioBackend
from ..config.session_store import SessionState
from ..errors import DecodeError, InputError, OutOfRange
from ..library.m3u import write_m3u
from ..models.playback import Direction, PlaybackStatus, RepeatMode, SessionSnapshot
from ..models.track import Track
from .history import HistoryLog
from .playlist import PlaylistManager

NOTHING_TO_PLAY = "Nothing to play"

# Previous restarts the current track at or beyond this position
SMART_PREVIOUS_SECONDS = 3.0


def clamp_volume(volume: int) -> int:
    return max(0, min(100, int(volume)))


class PlaybackSession:
    """Current track, status, position, volume and mute for one player."""

    def __init__(
        self,
        playlist: PlaylistManager,
        history: HistoryLog,
        backend: AudioBackend,
        logger: logging.Logger,
        volume: int = 100,
        clock: Callable[[], float] = time.monotonic
    ):
        """Initialize a stopped session.

        Args:
            playlist: Active playlist
            history: History log
            backend: Audio backend to drive
            logger: Logger instance
            volume: Initial volume (0-100)
            clock: Monotonic clock used to measure play time
        """
        self.playlist = playlist
        self.history = history
        self.backend = backend
        self.logger = logger
        self.clock = clock

        self.status = PlaybackStatus.STOPPED
        self.position = 0.0
        self.volume = clamp_volume(volume)
        self.muted = False
        self.message = ""
        self.error: Optional[str] = None

        self.loaded_index: Optional[int] = None
        self._handle: Optional[int] = None
        self._played = 0.0
        self._resumed_at: Optional[float] = None
        self._failure_streak = 0

    # Read accessors

    @property
    def handle(self) -> Optional[int]:
        return self._handle

    @property
    def loaded_track(self) -> Optional[Track]:
        if self.loaded_index is None:
            return None
        return self.playlist[self.loaded_index]

    def played_seconds(self) -> float:
        """Seconds the loaded track has actually been playing."""
        running = self.clock() - self._resumed_at if self._resumed_at is not None else 0.0
        return self._played + running

    def snapshot(self) -> SessionSnapshot:
        track = self.loaded_track or self.playlist.current
        return SessionSnapshot(
            status=self.status,
            track=track,
            cursor=self.playlist.cursor,
            position=self.position,
            duration=track.duration if track else None,
            volume=self.volume,
            muted=self.muted,
            shuffle=self.playlist.shuffle,
            repeat_mode=self.playlist.repeat_mode,
            playlist=tuple(self.playlist.paths),
            history=tuple(self.history.entries()),
            message=self.message,
            error=self.error,
            unplayable=tuple(i for i, t in enumerate(self.playlist.tracks) if t.unplayable)
        )

    def report(self, message: str, error: bool = False) -> None:
        """Set the status line; errors are also kept until the next one."""
        self.message = message
        if error:
            self.error = message

    # User commands

    def play_pause(self) -> None:
        self._require_tracks()

        if self.status == PlaybackStatus.PLAYING:
            self.backend.pause()
            self._pause_clock()
            self.status = PlaybackStatus.PAUSED
            self.report(f"Paused: {self.loaded_track.display_name}")
        elif self.status == PlaybackStatus.PAUSED:
            self.backend.play()
            self._resume_clock()
            self.status = PlaybackStatus.PLAYING
            self.report(f"Playing: {self.loaded_track.display_name}")
        else:
            self._failure_streak = 0
            self._load_cursor(play=True)

    def next(self) -> None:
        self._require_tracks()
        self._failure_streak = 0
        self._record_loaded()

        if self.playlist.advance(Direction.NEXT) is None:
            self._stop_playback()
            self.report("End of playlist")
            return

        self._load_or_select()

    def previous(self) -> None:
        self._require_tracks()

        if self.loaded_index is not None and self.position >= SMART_PREVIOUS_SECONDS:
            self.backend.seek(0.0)
            self.position = 0.0
            self._reset_clock(running=self.status == PlaybackStatus.PLAYING)
            self.report(f"Restarted: {self.loaded_track.display_name}")
            return

        self._failure_streak = 0
        self._record_loaded()
        self.playlist.advance(Direction.PREVIOUS)
        self._load_or_select()

    def seek_by(self, seconds: float) -> None:
        if self.status == PlaybackStatus.STOPPED or self.loaded_index is None:
            raise InputError("Nothing is playing")

        target = max(0.0, self.position + seconds)
        duration = self.loaded_track.duration
        if duration is not None:
            target = min(target, duration)

        self.backend.seek(target)
        self.position = target

    def volume_by(self, delta: int) -> None:
        self.volume = clamp_volume(self.volume + delta)
        if self.muted:
            self.report(f"Volume: {self.volume}% (muted)")
            return
        self.backend.set_volume(self.volume)
        self.report(f"Volume: {self.volume}%")

    def toggle_mute(self) -> None:
        self.muted = not self.muted
        self._apply_volume()
        self.report("Muted" if self.muted else f"Volume: {self.volume}%")

    def toggle_shuffle(self) -> None:
        enabled = self.playlist.toggle_shuffle()
        self.report(f"Shuffle: {'on' if enabled else 'off'}")

    def cycle_repeat(self) -> None:
        mode = self.playlist.cycle_repeat()
        self.report(f"Repeat: {mode.value}")

    def remove_at(self, index: int) -> None:
        track = self.playlist[index]
        loaded = self.loaded_index

        if loaded is None or index != loaded:
            self.playlist.remove(index)
            if loaded is not None and index < loaded:
                self.loaded_index = loaded - 1
            self.report(f"Removed: {track.display_name}")
            return

        was_playing = self.status == PlaybackStatus.PLAYING
        self._record_loaded()
        self._stop_playback()

        if not was_playing:
            self.playlist.remove(index)
            self.report(f"Removed: {track.display_name}")
            return

        # Continue with whatever Next would have played
        self.playlist.jump(index)
        has_next = self.playlist.advance(Direction.NEXT, honor_repeat_one=False) is not None
        follows = has_next and self.playlist.cursor != index
        self.playlist.remove(index)
        self.report(f"Removed: {track.display_name}")

        if follows:
            self._failure_streak = 0
            self._load_cursor(play=True)

    def clear(self) -> None:
        self._record_loaded()
        self._stop_playback()
        self.playlist.clear()
        self.report("Playlist cleared")

    def add_path(self, path: str) -> List[Track]:
        added = self.playlist.add_path(path)
        self.report(f"Added {len(added)} track(s)")
        return added

    def save(self, path: str) -> None:
        write_m3u(Path(path).expanduser(), self.playlist.paths)
        self.report(f"Playlist saved: {path}")

    def play_at(self, index: int) -> None:
        track = self.playlist[index]
        self.logger.debug(f"Jumping to {track.path} at index {index}")
        self._failure_streak = 0
        self._record_loaded()
        self._stop_playback()
        self.playlist.jump(index)
        self._load_cursor(play=True)

    def play_history_entry(self, index: int) -> None:
        """Replay a history entry (0 = most recent)."""
        entries = self.history.entries()
        if not 0 <= index < len(entries):
            raise OutOfRange(index, len(entries))

        entry = entries[index]
        position = self.playlist.index_of_path(entry.path)
        if position is None:
            self.playlist.add(self.playlist.track_factory(entry.path))
            position = len(self.playlist) - 1

        self.play_at(position)

    def clear_history(self) -> None:
        self.history.clear()
        self.report("History cleared")

    def shutdown(self) -> None:
        """Record the loaded track and stop output (quit)."""
        self._record_loaded()
        self._stop_playback()

    # Backend events

    def on_track_finished(self, handle: int) -> bool:
        """Advance after natural completion.

        Returns:
            False when the event belongs to a superseded load and was ignored
        """
        if handle != self._handle or self.status != PlaybackStatus.PLAYING:
            self.logger.debug(f"Ignoring finished signal for stale handle {handle}")
            return False

        self._failure_streak = 0
        self._record_loaded(natural=True)

        if self.playlist.advance(Direction.NEXT) is None:
            self._stop_playback()
            self.report("End of playlist")
            return True

        self._load_cursor(play=True)
        return True

    def on_backend_error(self, handle: int, message: str) -> bool:
        """Skip a track the backend failed to play after loading it."""
        if handle != self._handle:
            self.logger.debug(f"Ignoring error for stale handle {handle}: {message}")
            return False

        track = self.loaded_track
        play = self.status != PlaybackStatus.PAUSED
        self._unload()
        if self._skip_failed(track, message):
            self._load_cursor(play=play)
        return True

    def tick(self) -> None:
        """Sample position and duration of the loaded track."""
        track = self.loaded_track
        if track is None:
            return

        self.position = self.backend.position()
        if track.duration is None:
            track.duration = self.backend.duration()

        if self.status == PlaybackStatus.PLAYING and self.position > 0:
            self._failure_streak = 0
            if track.unplayable:
                track.unplayable = False
                track.error = None

    # Persistence

    def to_state(self) -> SessionState:
        return SessionState(
            volume=self.volume,
            muted=self.muted,
            repeat_mode=self.playlist.repeat_mode,
            shuffle=self.playlist.shuffle,
            last_playlist_paths=self.playlist.paths,
            last_cursor=self.playlist.cursor
        )

    def restore(self, state: SessionState) -> None:
        """Rebuild playlist and preferences from persisted state."""
        self._stop_playback()
        self.playlist.clear()
        self.playlist.add_paths(state.last_playlist_paths)

        if state.last_cursor is not None and not self.playlist.is_empty:
            self.playlist.jump(max(0, min(state.last_cursor, len(self.playlist) - 1)))

        self.playlist.set_repeat_mode(RepeatMode(state.repeat_mode))
        self.playlist.set_shuffle(state.shuffle)
        self.volume = clamp_volume(state.volume)
        self.muted = state.muted
        self._apply_volume()

        self.logger.info(
            f"Restored session: {len(self.playlist)} track(s), volume {self.volume}%"
        )

    # Internals

    def _require_tracks(self) -> None:
        if self.playlist.is_empty:
            raise InputError(NOTHING_TO_PLAY)

    def _apply_volume(self) -> None:
        self.backend.set_volume(0 if self.muted else self.volume)

    def _pause_clock(self) -> None:
        if self._resumed_at is not None:
            self._played += self.clock() - self._resumed_at
            self._resumed_at = None

    def _resume_clock(self) -> None:
        if self._resumed_at is None:
            self._resumed_at = self.clock()

    def _reset_clock(self, running: bool) -> None:
        self._played = 0.0
        self._resumed_at = self.clock() if running else None

    def _record_loaded(self, natural: bool = False) -> None:
        """Add the loaded track to history if it played long enough."""
        track = self.loaded_track
        if track is None:
            return

        played = self.played_seconds()
        if natural and track.duration is not None:
            played = max(played, track.duration)

        self.history.record(track, played)
        self._reset_clock(running=False)

    def _unload(self) -> None:
        if self.loaded_index is not None:
            self.backend.stop()
        self.loaded_index = None
        self._handle = None
        self.position = 0.0
        self._reset_clock(running=False)

    def _stop_playback(self) -> None:
        self._unload()
        self.status = PlaybackStatus.STOPPED

    def _load_or_select(self) -> None:
        """Load the cursor track keeping Playing/Paused; only select it when stopped."""
        if self.status == PlaybackStatus.STOPPED:
            self.report(f"Selected: {self.playlist.current.display_name}")
            return
        self._load_cursor(play=self.status == PlaybackStatus.PLAYING)

    def _load_cursor(self, play: bool) -> bool:
        """Load the cursor track into the backend, skipping failures.

        Returns:
            True if a track was loaded
        """
        while True:
            index = self.playlist.cursor
            if index is None:
                self._stop_playback()
                self.report(NOTHING_TO_PLAY)
                return False

            track = self.playlist[index]
            try:
                handle = self.backend.load(track.path)
            except DecodeError as e:
                self._unload()
                if self._skip_failed(track, e.reason):
                    continue
                return False

            self._handle = handle
            self.loaded_index = index
            self.position = 0.0

            if play:
                self.backend.play()
                self.status = PlaybackStatus.PLAYING
                self.report(f"Playing: {track.display_name}")
            else:
                self.status = PlaybackStatus.PAUSED
                self.report(f"Paused: {track.display_name}")

            self._reset_clock(running=play)
            self.logger.info(f"Loaded {track.path} (index {index}, handle {handle})")
            return True

    def _skip_failed(self, track: Track, reason: str) -> bool:
        """Mark a track unplayable and move the cursor past it.

        Returns:
            True if there is another track to try
        """
        track.mark_unplayable(reason)
        self._failure_streak += 1
        self.logger.warning(f"Skipping unplayable track {track.path}: {reason}")

        if self._failure_streak >= len(self.playlist):
            failed = self._failure_streak
            self._failure_streak = 0
            self._stop_playback()
            self.report(f"No playable tracks: {failed} failed to load", error=True)
            return False

        if self.playlist.advance(Direction.NEXT, honor_repeat_one=False) is None:
            self._failure_streak = 0
            self._stop_playback()
            self.report(f"Cannot play {track.display_name}: {reason}", error=True)
            return False

        return True
