"""Tag reading with mutagen.

Never raises: unreadable files and missing tags degrade to the
placeholder values defined on the Track model.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError

from ..models.track import UNKNOWN_ALBUM, UNKNOWN_ARTIST, UNKNOWN_YEAR, Track

logger = logging.getLogger(__name__)

_YEAR_PATTERN = re.compile(r"(\d{4})")


@dataclass
class Metadata:
    """Tag values read from an audio file (None when absent)."""

    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[str] = None
    duration: Optional[float] = None


def _first_tag(audio: Any, name: str) -> Optional[str]:
    """Return the first non-empty value of an easy tag."""
    try:
        value = audio.get(name)
    except (KeyError, ValueError):
        # Some formats raise ValueError for keys they do not support
        return None

    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None

    text = str(value).strip()
    return text or None


def _parse_year(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    match = _YEAR_PATTERN.search(value)
    return match.group(1) if match else None


def read_metadata(path: str) -> Metadata:
    """Read title/artist/album/year/duration from an audio file.

    Args:
        path: Path to the audio file

    Returns:
        Metadata with None for every field that could not be read
    """
    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        logger.debug(f"Cannot read tags from {path}: {e}")
        return Metadata()

    if audio is None:
        logger.debug(f"Unrecognized audio format: {path}")
        return Metadata()

    duration = None
    info = getattr(audio, 'info', None)
    length = getattr(info, 'length', None)
    if isinstance(length, (int, float)) and length > 0:
        duration = float(length)

    if audio.tags is None:
        return Metadata(duration=duration)

    return Metadata(
        title=_first_tag(audio, 'title'),
        artist=_first_tag(audio, 'artist'),
        album=_first_tag(audio, 'album'),
        year=_parse_year(_first_tag(audio, 'date')),
        duration=duration
    )


def track_from_path(path: str) -> Track:
    """Build a Track with cached metadata for a file path."""
    metadata = read_metadata(path)
    return Track(
        path=path,
        title=metadata.title or "",
        artist=metadata.artist or UNKNOWN_ARTIST,
        album=metadata.album or UNKNOWN_ALBUM,
        year=metadata.year or UNKNOWN_YEAR,
        duration=metadata.duration
    )
