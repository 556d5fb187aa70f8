"""M3U playlist reading and writing."""

import logging
import os
import unicodedata
from pathlib import Path
from typing import Iterable, List

from ..errors import PersistenceError

logger = logging.getLogger(__name__)

M3U_HEADER = "#EXTM3U"


def has_control_characters(path: str) -> bool:
    """Check if a path contains characters that break a line-based format.

    Covers C0/C1 controls and the Unicode line and paragraph separators,
    which other players may treat as line breaks.
    """
    return any(unicodedata.category(ch) in ('Cc', 'Zl', 'Zp') for ch in path)


def parse_m3u(text: str, base_dir: Path) -> List[str]:
    """Parse M3U text into an ordered list of paths.

    Blank lines and comment lines (#EXTM3U, #EXTINF, ...) are ignored.
    Lines split on newlines only and keep their surrounding spaces, which
    are legal in file names.
    Relative paths are resolved against base_dir. Duplicates and
    missing files are kept.
    """
    paths = []
    for line in text.split('\n'):
        if line.endswith('\r'):
            line = line[:-1]
        if not line.strip() or line.startswith('#'):
            continue

        entry = Path(os.path.expanduser(line))
        if not entry.is_absolute():
            entry = base_dir / entry
        paths.append(str(entry))

    return paths


def read_m3u(playlist_path: Path) -> List[str]:
    """Read an M3U file.

    Args:
        playlist_path: Path to the playlist file

    Returns:
        Ordered list of track paths

    Raises:
        PersistenceError: If the file cannot be read
    """
    playlist_path = Path(playlist_path)
    try:
        text = playlist_path.read_text(encoding='utf-8-sig', errors='replace')
    except OSError as e:
        raise PersistenceError(f"Failed to read playlist {playlist_path}: {e}") from e

    paths = parse_m3u(text, playlist_path.parent)
    logger.debug(f"Read {len(paths)} entries from {playlist_path}")
    return paths


def format_m3u(paths: Iterable[str]) -> str:
    """Render paths as M3U text with a header and one bare path per line."""
    lines = [M3U_HEADER]
    for path in paths:
        if has_control_characters(path) or not path.strip():
            logger.warning(f"Skipping path that cannot be stored in M3U: {path!r}")
            continue
        if path.startswith('#'):
            # A bare relative path would read back as a comment
            path = os.path.join('.', path)
        lines.append(path)
    return "\n".join(lines) + "\n"


def write_m3u(playlist_path: Path, paths: Iterable[str]) -> None:
    """Write paths to an M3U file.

    Raises:
        PersistenceError: If the file cannot be written
    """
    playlist_path = Path(playlist_path)
    content = format_m3u(paths)
    try:
        playlist_path.parent.mkdir(parents=True, exist_ok=True)
        playlist_path.write_text(content, encoding='utf-8')
    except OSError as e:
        raise PersistenceError(f"Failed to save playlist {playlist_path}: {e}") from e

    logger.info(f"Playlist saved to {playlist_path}")
