"""Utility modules for Console Music Player."""

from .logger import setup_logger
from .platform import get_config_dir, get_music_dir, is_windows

__all__ = ["setup_logger", "get_config_dir", "get_music_dir", "is_windows"]
