"""Bounded log of completed plays."""

import logging
from collections import deque
from datetime import datetime
from typing import Callable, Deque, List, Optional

from ..models.history import HistoryEntry
from ..models.track import Track

MIN_PLAYED_SECONDS = 15.0
MAX_ENTRIES = 50


class HistoryLog:
    """Keeps the last MAX_ENTRIES qualifying plays, evicting the oldest first."""

    def __init__(
        self,
        logger: logging.Logger,
        capacity: int = MAX_ENTRIES,
        min_played_seconds: float = MIN_PLAYED_SECONDS,
        clock: Callable[[], datetime] = datetime.now
    ):
        """Initialize history log.

        Args:
            logger: Logger instance
            capacity: Maximum number of entries kept
            min_played_seconds: Minimum continuous play for a track to count
            clock: Source of the played_at timestamp
        """
        self.logger = logger
        self.capacity = capacity
        self.min_played_seconds = min_played_seconds
        self.clock = clock
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, track: Track, played_seconds: float) -> Optional[HistoryEntry]:
        """Record a play if it lasted long enough.

        Args:
            track: Track that was playing
            played_seconds: Seconds of continuous playback

        Returns:
            The new entry, or None if the play did not qualify
        """
        if played_seconds < self.min_played_seconds:
            self.logger.debug(
                f"Not recording {track.path}: played {played_seconds:.1f}s"
            )
            return None

        entry = HistoryEntry.from_track(track, self.clock(), played_seconds)
        if len(self._entries) == self.capacity:
            self.logger.debug(f"History full, evicting {self._entries[0].path}")
        self._entries.append(entry)
        self.logger.debug(f"Recorded {track.path} in history ({played_seconds:.1f}s)")
        return entry

    def entries(self) -> List[HistoryEntry]:
        """Entries, most recent first."""
        return list(reversed(self._entries))

    def clear(self) -> None:
        self._entries.clear()
        self.logger.info("History cleared")
