"""Exception hierarchy for Console Music Player."""

from typing import Optional


class PlayerError(Exception):
    """Base class for all recoverable player errors."""


class InputError(PlayerError):
    """Invalid user input or a command that has nothing to act on."""


class OutOfRange(InputError):
    """Playlist or history index outside the valid range."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"No entry {index + 1} (size {size})")


class DecodeError(PlayerError):
    """The audio backend cannot open or play a file."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason or "unsupported or unreadable file"
        super().__init__(f"Cannot play {path}: {self.reason}")


class PersistenceError(PlayerError):
    """A config, session or playlist file cannot be read or written."""
