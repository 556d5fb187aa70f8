"""History entry model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .track import Track


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of a track at the time it was played."""

    path: str
    title: str
    artist: str
    album: str
    year: str
    duration: Optional[float]
    played_at: datetime
    played_seconds: float

    @classmethod
    def from_track(cls, track: Track, played_at: datetime, played_seconds: float) -> 'HistoryEntry':
        """Freeze the metadata of a track into a history entry."""
        return cls(
            path=track.path,
            title=track.title,
            artist=track.artist,
            album=track.album,
            year=track.year,
            duration=track.duration,
            played_at=played_at,
            played_seconds=played_seconds
        )
