"""Persistence of the playback session between runs."""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import PersistenceError
from ..models.playback import RepeatMode


@dataclass
class SessionState:
    """User-preference state restored at startup."""

    volume: int = 100
    muted: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    shuffle: bool = False
    last_playlist_paths: List[str] = field(default_factory=list)
    last_cursor: Optional[int] = None

    def __post_init__(self):
        """Clamp out-of-range values instead of rejecting them."""
        try:
            self.volume = max(0, min(100, int(self.volume)))
        except (TypeError, ValueError):
            self.volume = 100

        try:
            self.repeat_mode = RepeatMode(self.repeat_mode)
        except (TypeError, ValueError):
            self.repeat_mode = RepeatMode.OFF

        self.muted = bool(self.muted)
        self.shuffle = bool(self.shuffle)
        self.last_playlist_paths = [str(p) for p in (self.last_playlist_paths or []) if p]

        if not self.last_playlist_paths:
            self.last_cursor = None
        elif self.last_cursor is not None:
            try:
                cursor = int(self.last_cursor)
            except (TypeError, ValueError):
                cursor = 0
            self.last_cursor = max(0, min(cursor, len(self.last_playlist_paths) - 1))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionState':
        """Build state from a loaded mapping, ignoring unknown keys."""
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['repeat_mode'] = self.repeat_mode.value
        return data


class SessionStore:
    """Reads and writes SessionState as YAML."""

    def __init__(self, path: Path, logger: logging.Logger):
        """Initialize session store.

        Args:
            path: Path to the session file
            logger: Logger instance
        """
        self.path = Path(path)
        self.logger = logger
        self._last_saved: Optional[Dict[str, Any]] = None

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> SessionState:
        """Load persisted state.

        A missing file yields defaults silently (first run); an unreadable
        or corrupt file logs a warning and yields defaults.
        """
        if not self.path.exists():
            self.logger.debug(f"No session file at {self.path}, using defaults")
            return SessionState()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("session file is not a mapping")
            state = SessionState.from_dict(data)
        except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
            self.logger.warning(f"Failed to load session from {self.path}: {e}")
            self.logger.warning("Using default session")
            return SessionState()

        self._last_saved = state.to_dict()
        return state

    def save(self, state: SessionState) -> None:
        """Write state atomically (temp file + replace).

        Raises:
            PersistenceError: If the file cannot be written
        """
        data = state.to_dict()
        tmp = self.path.with_suffix(self.path.suffix + '.tmp')

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, 'w', encoding='utf-8') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to save session to {self.path}: {e}") from e

        self._last_saved = data
        self.logger.debug(f"Session saved to {self.path}")

    def save_if_changed(self, state: SessionState) -> bool:
        """Save only when state differs from the last load/save.

        Returns:
            True if the file was written
        """
        if state.to_dict() == self._last_saved:
            return False
        self.save(state)
        return True
