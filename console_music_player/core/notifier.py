"""Desktop notifications for track changes and playback errors."""

import logging
import sys
from typing import Callable, Optional

from ..models.playback import PlaybackStatus, SessionSnapshot
from ..models.track import Track

try:
    from plyer import notification as plyer_notification
    PLYER_AVAILABLE = True
except ImportError:
    PLYER_AVAILABLE = False

# Windows-specific notification support
if sys.platform == 'win32':
    try:
        from winotify import Notification as WinNotification
        WINOTIFY_AVAILABLE = True
    except ImportError:
        WINOTIFY_AVAILABLE = False
else:
    WINOTIFY_AVAILABLE = False

APP_NAME = "Console Music Player"


class Notifier:
    """Shows a desktop toast when a new track starts or an error surfaces.

    Registered as a dispatcher listener; it compares each snapshot with
    the previous one so every track change and every new error message
    produces exactly one notification.
    """

    def __init__(
        self,
        logger: logging.Logger,
        enabled: bool = True,
        on_track_change: bool = True,
        on_error: bool = True,
        app_name: str = APP_NAME
    ):
        """Initialize notifier.

        Args:
            logger: Logger instance
            enabled: Master switch for notifications
            on_track_change: Notify when a new track starts playing
            on_error: Notify when playback reports an error
            app_name: Application name shown by the desktop
        """
        self.logger = logger
        self.app_name = app_name
        self.on_track_change = on_track_change
        self.on_error = on_error

        self._announced_path: Optional[str] = None
        self._announced_error: Optional[str] = None

        self.backend = self._detect_backend()
        self._show: Optional[Callable[[str, str, int], None]] = {
            'winotify': self._show_winotify,
            'plyer': self._show_plyer,
        }.get(self.backend)

        self.enabled = enabled and self._show is not None
        if enabled and not self.enabled:
            self.logger.warning("No notification backend available, notifications disabled")

    def _detect_backend(self) -> Optional[str]:
        if sys.platform == 'win32' and WINOTIFY_AVAILABLE:
            return 'winotify'
        if PLYER_AVAILABLE:
            return 'plyer'
        return None

    def send(self, title: str, message: str, timeout: int = 5) -> bool:
        """Show one notification.

        Args:
            title: Notification title
            message: Notification body
            timeout: Seconds to keep it visible (ignored by some desktops)

        Returns:
            True if the backend accepted the notification
        """
        if not self.enabled:
            return False

        try:
            self._show(title, message, timeout)
        except Exception as e:
            # Missing D-Bus, notification daemon, etc.
            self.logger.error(f"Failed to send {self.backend} notification: {e}")
            return False

        self.logger.debug(f"Notification sent: {title}")
        return True

    def _show_winotify(self, title: str, message: str, timeout: int) -> None:
        WinNotification(
            app_id=self.app_name,
            title=title,
            msg=message,
            duration="short" if timeout <= 7 else "long"
        ).show()

    def _show_plyer(self, title: str, message: str, timeout: int) -> None:
        plyer_notification.notify(
            title=title,
            message=message,
            app_name=self.app_name,
            timeout=timeout
        )

    def notify_track_change(self, track: Track) -> bool:
        return self.send("Now Playing", f"{track.display_name}\n{track.album}")

    def notify_error(self, error_message: str) -> bool:
        return self.send("Playback Error", error_message)

    def on_snapshot(self, snapshot: SessionSnapshot) -> None:
        """Dispatcher listener."""
        track = snapshot.track
        if snapshot.status == PlaybackStatus.PLAYING and track is not None:
            if track.path != self._announced_path:
                self._announced_path = track.path
                if self.on_track_change:
                    self.notify_track_change(track)
        elif snapshot.status == PlaybackStatus.STOPPED:
            self._announced_path = None

        if snapshot.error and snapshot.error != self._announced_error:
            self._announced_error = snapshot.error
            if self.on_error:
                self.notify_error(snapshot.error)
