"""Playback state enumerations and session snapshot."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .history import HistoryEntry
from .track import Track


class PlaybackStatus(str, Enum):
    """Playback status enumeration."""

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class RepeatMode(str, Enum):
    """Repeat mode enumeration."""

    OFF = "off"
    ONE = "one"
    ALL = "all"

    def cycled(self) -> "RepeatMode":
        """Return the next mode in the Off -> One -> All -> Off cycle."""
        order = [RepeatMode.OFF, RepeatMode.ONE, RepeatMode.ALL]
        return order[(order.index(self) + 1) % len(order)]


class Direction(str, Enum):
    """Traversal direction."""

    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to renderers and listeners."""

    status: PlaybackStatus
    track: Optional[Track]
    cursor: Optional[int]
    position: float
    duration: Optional[float]
    volume: int
    muted: bool
    shuffle: bool
    repeat_mode: RepeatMode
    playlist: Tuple[str, ...] = ()
    history: Tuple[HistoryEntry, ...] = ()
    message: str = ""
    error: Optional[str] = None
    unplayable: Tuple[int, ...] = ()
