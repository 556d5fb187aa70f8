"""Directory expansion for adding folders to the playlist."""

import logging
import os
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_EXTENSIONS = ("mp3", "flac", "wav", "ogg")
PLAYLIST_EXTENSIONS = ("m3u", "m3u8")


def _normalize_extensions(extensions: Iterable[str]) -> set:
    return {ext.lower().lstrip('.') for ext in extensions}


def is_audio_file(path: Path, extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS) -> bool:
    """Check if a path has one of the audio extensions (case-insensitive)."""
    return path.suffix.lower().lstrip('.') in _normalize_extensions(extensions)


def is_playlist_file(path: Path) -> bool:
    """Check if a path is an M3U playlist."""
    return path.suffix.lower().lstrip('.') in PLAYLIST_EXTENSIONS


def _sorted_entries(directory: Path) -> List[os.DirEntry]:
    """List visible entries: directories first, then files, by name."""
    try:
        with os.scandir(directory) as it:
            entries = [entry for entry in it if not entry.name.startswith('.')]
    except OSError as e:
        logger.warning(f"Cannot read directory {directory}: {e}")
        return []

    def sort_key(entry: os.DirEntry):
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        return (not is_dir, entry.name.lower())

    return sorted(entries, key=sort_key)


def scan_audio_files(
    directory: Path,
    extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS,
    max_depth: int = 8,
    max_files: int = 5000
) -> List[str]:
    """Recursively collect audio files under a directory.

    Hidden files and folders are skipped. Inside each directory,
    sub-directories are visited before files and names are ordered
    case-insensitively, so the result is stable across runs.

    Args:
        directory: Directory to scan
        extensions: Audio file extensions to accept
        max_depth: Maximum recursion depth below the starting directory
        max_files: Stop after collecting this many files

    Returns:
        List of file paths in traversal order
    """
    wanted = _normalize_extensions(extensions)
    found: List[str] = []

    def walk(current: Path, depth: int) -> None:
        if depth > max_depth:
            return

        for entry in _sorted_entries(current):
            if len(found) >= max_files:
                return

            path = Path(entry.path)
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue

            if is_dir:
                walk(path, depth + 1)
            elif path.suffix.lower().lstrip('.') in wanted:
                found.append(str(path))

    walk(Path(directory), 0)

    if len(found) >= max_files:
        logger.warning(f"Scan of {directory} stopped at {max_files} files")
    logger.debug(f"Scanned {directory}: {len(found)} audio file(s)")

    return found
