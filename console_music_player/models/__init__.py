"""Data models for Console Music Player."""

from .history import HistoryEntry
from .playback import Direction, PlaybackStatus, RepeatMode, SessionSnapshot
from .track import Track

__all__ = [
    "Direction",
    "HistoryEntry",
    "PlaybackStatus",
    "RepeatMode",
    "SessionSnapshot",
    "Track",
]
