"""Per-platform locations for configuration, session state and playlists."""

import os
import sys
from pathlib import Path

APP_DIR_NAME = 'console-music-player'


def is_windows() -> bool:
    return sys.platform == 'win32' or os.name == 'nt'


def is_macos() -> bool:
    return sys.platform == 'darwin'


def _config_base() -> Path:
    if is_windows():
        return Path(os.environ.get('APPDATA', Path.home()))
    if is_macos():
        return Path.home() / 'Library' / 'Application Support'
    return Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))


def get_config_dir() -> Path:
    """Return (and create) the directory holding config.yaml, session.yaml and logs.

    Returns:
        Path: Configuration directory path
            - Windows: %APPDATA%/console-music-player
            - macOS: ~/Library/Application Support/console-music-player
            - Linux: $XDG_CONFIG_HOME/console-music-player (~/.config by default)
    """
    config_dir = _config_base() / APP_DIR_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_music_dir() -> Path:
    """Default directory for saved playlists (not created here)."""
    return Path.home() / 'Music'
