"""Core functionality for Console Music Player."""

from .dispatcher import CommandDispatcher
from .history import HistoryLog
from .notifier import Notifier
from .playlist import PlaylistManager
from .scheduler import PlaybackScheduler
from .session import PlaybackSession

__all__ = [
    "CommandDispatcher",
    "HistoryLog",
    "Notifier",
    "PlaylistManager",
    "PlaybackScheduler",
    "PlaybackSession",
]
