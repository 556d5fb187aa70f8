"""Filesystem and tag collaborators for Console Music Player."""

from .m3u import read_m3u, write_m3u
from .metadata import Metadata, read_metadata, track_from_path
from .scanner import is_audio_file, is_playlist_file, scan_audio_files

__all__ = [
    "Metadata",
    "is_audio_file",
    "is_playlist_file",
    "read_m3u",
    "read_metadata",
    "scan_audio_files",
    "track_from_path",
    "write_m3u",
]
