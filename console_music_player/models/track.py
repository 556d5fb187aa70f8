"""Track data models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"
UNKNOWN_YEAR = "Unknown"


@dataclass
class Track:
    """Playable item: file path plus cached metadata."""

    path: str
    title: str = ""
    artist: str = UNKNOWN_ARTIST
    album: str = UNKNOWN_ALBUM
    year: str = UNKNOWN_YEAR
    duration: Optional[float] = None  # Duration in seconds, filled lazily
    unplayable: bool = False
    error: Optional[str] = None

    def __post_init__(self):
        """Validate path and default the title to the file name."""
        if not self.path:
            raise ValueError("Track path must not be empty")
        if not self.title:
            self.title = self.filename

    @property
    def filename(self) -> str:
        return Path(self.path).name or self.path

    @property
    def display_name(self) -> str:
        if self.artist and self.artist != UNKNOWN_ARTIST:
            return f"{self.artist} - {self.title}"
        return self.title

    def mark_unplayable(self, reason: str) -> None:
        self.unplayable = True
        self.error = reason
