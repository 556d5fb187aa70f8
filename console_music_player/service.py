"""Player service: wires the components together and runs the console."""

import signal
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console

from .backends.base import AudioBackend
from .config.session_store import SessionStore
from .config.settings import Settings
from .console import PlayerConsole
from .core.dispatcher import CommandDispatcher
from .core.history import HistoryLog
from .core.notifier import Notifier
from .core.playlist import PlaylistManager
from .core.scheduler import PlaybackScheduler
from .core.session import PlaybackSession
from .models.commands import AddPath, PlayPause
from .utils.logger import setup_logger
from .utils.platform import is_windows


class PlayerService:
    """Owns the backend, session, dispatcher, scheduler and console."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        paths: Sequence[str] = (),
        restore: bool = True,
        verbose: bool = False,
        backend: Optional[AudioBackend] = None,
        console: Optional[Console] = None
    ):
        """Initialize the service.

        Args:
            config_path: Path to configuration file (optional)
            paths: Files, directories or M3U playlists to load instead of
                the last session's playlist
            restore: Whether to restore the last session's playlist
            verbose: Also log to the terminal
            backend: Audio backend (default: libVLC)
            console: Rich console for the interactive prompt
        """
        self.running = False
        self.config_path = config_path
        self.paths: List[str] = list(paths)

        # Load settings
        self.settings = Settings.from_file_or_default(config_path)
        self.restore_playlist = restore and self.settings.session.restore_on_start

        # Setup logging
        self.logger = setup_logger(
            log_file=self.settings.logging.path,
            level="DEBUG" if verbose else self.settings.logging.level,
            max_size_mb=self.settings.logging.max_size_mb,
            backup_count=self.settings.logging.backup_count,
            console=verbose
        )

        self.logger.info("Initializing Console Music Player")

        self.store = SessionStore(self.settings.session.path, self.logger)
        self.backend = backend or self._create_backend()

        self.playlist = PlaylistManager(
            logger=self.logger,
            audio_extensions=self.settings.library.audio_extensions,
            max_scan_depth=self.settings.library.max_scan_depth,
            max_scan_files=self.settings.library.max_scan_files
        )
        self.history = HistoryLog(logger=self.logger)
        self.session = PlaybackSession(
            playlist=self.playlist,
            history=self.history,
            backend=self.backend,
            logger=self.logger
        )
        self.dispatcher = CommandDispatcher(self.session, self.logger, store=self.store)
        self.backend.set_event_handlers(
            self.dispatcher.track_finished,
            self.dispatcher.backend_error
        )

        self.console = PlayerConsole(
            submit=self.dispatcher.submit,
            settings=self.settings,
            logger=self.logger,
            console=console
        )
        self.notifier = Notifier(
            logger=self.logger,
            enabled=self.settings.notifications.enabled,
            on_track_change=self.settings.notifications.on_track_change,
            on_error=self.settings.notifications.on_error
        )
        self.scheduler = PlaybackScheduler(
            logger=self.logger,
            submit=self.dispatcher.submit,
            position_interval_seconds=self.settings.polling.position_interval_seconds,
            autosave_interval_seconds=self.settings.session.autosave_interval_seconds
        )

    def _create_backend(self) -> AudioBackend:
        # Imported here so that libVLC is only required when actually playing
        from .backends.vlc_backend import VlcBackend

        return VlcBackend(self.logger, options=self.settings.player.vlc_options)

    def restore_session(self) -> None:
        """Apply persisted preferences and, unless replaced, the last playlist."""
        state = self.store.load()
        if self.paths or not self.restore_playlist:
            state.last_playlist_paths = []
            state.last_cursor = None
        self.session.restore(state)

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""

        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, shutting down...")
            # Unwinds the console prompt on the main thread
            raise KeyboardInterrupt

        # Windows uses SIGBREAK, Linux/macOS use SIGTERM
        signal.signal(signal.SIGINT, signal_handler)

        if is_windows():
            signal.signal(signal.SIGBREAK, signal_handler)
        else:
            signal.signal(signal.SIGTERM, signal_handler)

    def start(self) -> None:
        """Start the player and block until the user quits."""
        try:
            self.running = True

            self.setup_signal_handlers()
            self.restore_session()

            for path in self.paths:
                self.dispatcher.submit(AddPath(path))
            if self.paths:
                self.dispatcher.submit(PlayPause())

            self.dispatcher.add_listener(self.console.on_snapshot)
            self.dispatcher.add_listener(self.notifier.on_snapshot)
            self.dispatcher.start()
            self.scheduler.start()

            self.logger.info("Player started")
            self.console.run()

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        except Exception as e:
            self.logger.error(f"Service error: {e}", exc_info=True)
            raise
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Graceful shutdown: stop timers, quit the logic thread, release audio."""
        if not self.running:
            return

        self.logger.info("Shutting down player...")
        self.running = False

        self.scheduler.stop()
        # Quit records the loaded track and writes the session state
        self.dispatcher.stop()
        self.backend.close()

        self.logger.info("Player stopped")
