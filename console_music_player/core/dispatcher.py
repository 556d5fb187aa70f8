"""Single serialization point for user commands and backend events."""

import logging
import queue
import threading
from typing import Callable, Dict, List, Optional, Type

from ..config.session_store import SessionStore
from ..errors import InputError, PersistenceError
from ..models.commands import (
    AddPath,
    BackendError,
    Clear,
    ClearHistory,
    Command,
    CycleRepeat,
    Next,
    PersistSession,
    PlayAt,
    PlayHistoryEntry,
    PlayPause,
    Previous,
    Quit,
    RemoveAt,
    Save,
    SeekBy,
    Tick,
    ToggleMute,
    ToggleShuffle,
    TrackFinished,
    VolumeBy,
)
from ..models.playback import SessionSnapshot
from .session import PlaybackSession

SnapshotListener = Callable[[SessionSnapshot], None]


class CommandDispatcher:
    """Feeds every command and event through one queue to one logic thread.

    Only the logic thread touches the session (and through it the
    playlist, history and backend). Producers call submit() from any
    thread.
    """

    def __init__(
        self,
        session: PlaybackSession,
        logger: logging.Logger,
        store: Optional[SessionStore] = None
    ):
        """Initialize dispatcher.

        Args:
            session: Playback session owned by the logic thread
            logger: Logger instance
            store: Session store used for PersistSession and Quit (optional)
        """
        self.session = session
        self.logger = logger
        self.store = store

        self._queue: "queue.Queue[Command]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._listeners: List[SnapshotListener] = []
        self._last_snapshot: Optional[SessionSnapshot] = None
        self._stopped = threading.Event()

        self._handlers: Dict[Type[Command], Callable[[Command], None]] = {
            PlayPause: lambda c: session.play_pause(),
            Next: lambda c: session.next(),
            Previous: lambda c: session.previous(),
            SeekBy: lambda c: session.seek_by(c.seconds),
            VolumeBy: lambda c: session.volume_by(c.delta),
            ToggleMute: lambda c: session.toggle_mute(),
            ToggleShuffle: lambda c: session.toggle_shuffle(),
            CycleRepeat: lambda c: session.cycle_repeat(),
            RemoveAt: lambda c: session.remove_at(c.index),
            Clear: lambda c: session.clear(),
            AddPath: lambda c: session.add_path(c.path),
            Save: lambda c: session.save(c.path),
            PlayAt: lambda c: session.play_at(c.index),
            PlayHistoryEntry: lambda c: session.play_history_entry(c.index),
            ClearHistory: lambda c: session.clear_history(),
            TrackFinished: lambda c: session.on_track_finished(c.handle),
            BackendError: lambda c: session.on_backend_error(c.handle, c.message),
            Tick: lambda c: session.tick(),
            PersistSession: lambda c: self._persist(),
            Quit: self._quit,
        }

    # Producer side (any thread)

    def submit(self, command: Command) -> None:
        """Queue a command for the logic thread."""
        self._queue.put(command)

    def track_finished(self, handle: int) -> None:
        """Backend callback: the media behind handle reached its end."""
        self.submit(TrackFinished(handle))

    def backend_error(self, handle: int, message: str) -> None:
        """Backend callback: the media behind handle failed to play."""
        self.submit(BackendError(handle, message))

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback receiving a snapshot after each changing batch."""
        self._listeners.append(listener)

    # Lifecycle

    def start(self) -> None:
        """Start the logic thread."""
        if self._thread and self._thread.is_alive():
            return

        self._running = True
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="playback-dispatcher",
            daemon=True
        )
        self._thread.start()
        self.logger.info("Command dispatcher started")

    def stop(self, timeout: float = 5.0) -> None:
        """Ask the logic thread to quit and wait for it."""
        if not self._thread or not self._thread.is_alive():
            return

        self.submit(Quit())
        self._thread.join(timeout)
        if self._thread.is_alive():
            self.logger.error("Command dispatcher did not stop in time")
        else:
            self.logger.info("Command dispatcher stopped")

    def wait_stopped(self, timeout: Optional[float] = None) -> bool:
        """Block until a Quit command has been processed."""
        return self._stopped.wait(timeout)

    @property
    def running(self) -> bool:
        return self._running

    def _run(self) -> None:
        while self._running:
            batch = [self._queue.get()]
            batch.extend(self._drain())
            self.process_batch(batch)

    # Logic thread

    def run_pending(self) -> int:
        """Process everything already queued as one batch, on the calling thread.

        Returns:
            Number of commands taken from the queue
        """
        batch = self._drain()
        if batch:
            self.process_batch(batch)
        return len(batch)

    def process_batch(self, batch: List[Command]) -> None:
        """Dispatch one cycle worth of commands, then publish the snapshot."""
        for command in self.coalesce(batch):
            self._dispatch(command)
            if not self._running and isinstance(command, Quit):
                break
        self._publish()

    def coalesce(self, batch: List[Command]) -> List[Command]:
        """Drop TrackFinished events superseded by later navigation in the batch.

        A Next queued after the finished signal of the track it replaces
        must cause a single transition, not two.
        """
        kept = []
        for i, command in enumerate(batch):
            if isinstance(command, TrackFinished) and any(
                later.navigates for later in batch[i + 1:]
            ):
                self.logger.debug(f"Dropping superseded finished signal (handle {command.handle})")
                continue
            kept.append(command)
        return kept

    def _drain(self) -> List[Command]:
        commands = []
        while True:
            try:
                commands.append(self._queue.get_nowait())
            except queue.Empty:
                return commands

    def _dispatch(self, command: Command) -> None:
        handler = self._handlers.get(type(command))
        if handler is None:
            self.logger.error(f"No handler for command {command!r}")
            return

        try:
            handler(command)
        except InputError as e:
            self.logger.warning(f"{type(command).__name__}: {e}")
            self.session.report(str(e))
        except PersistenceError as e:
            self.logger.error(f"{type(command).__name__}: {e}")
            self.session.report(str(e), error=True)
        except Exception as e:
            # Keep the logic thread alive; the session state is still consistent
            self.logger.error(f"Error handling {command!r}: {e}", exc_info=True)

    def _publish(self) -> None:
        snapshot = self.session.snapshot()
        if snapshot == self._last_snapshot:
            return

        self._last_snapshot = snapshot
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error(f"Snapshot listener failed: {e}", exc_info=True)

    def _persist(self, force: bool = False) -> None:
        if self.store is None:
            return

        state = self.session.to_state()
        if force:
            self.store.save(state)
        elif self.store.save_if_changed(state):
            self.logger.debug("Session state autosaved")

    def _quit(self, command: Command) -> None:
        self.session.shutdown()
        try:
            self._persist(force=True)
        finally:
            self._running = False
            self._stopped.set()
