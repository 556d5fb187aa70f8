"""Configuration management for Console Music Player."""

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import yaml

from ..utils.platform import get_config_dir, get_music_dir


@dataclass
class PlayerConfig:
    """Playback control configuration."""

    seek_step_seconds: int = 5
    volume_step: int = 5
    vlc_options: List[str] = field(default_factory=lambda: ["--no-video", "--quiet"])

    def __post_init__(self):
        """Validate configuration."""
        if self.seek_step_seconds <= 0:
            raise ValueError("seek_step_seconds must be > 0")

        if not (1 <= self.volume_step <= 100):
            raise ValueError("volume_step must be between 1 and 100")


@dataclass
class SessionConfig:
    """Session persistence configuration."""

    path: Optional[Path] = None
    autosave_interval_seconds: int = 30
    restore_on_start: bool = True

    def __post_init__(self):
        """Validate configuration and set defaults."""
        if self.path is None:
            self.path = get_config_dir() / 'session.yaml'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()

        if self.autosave_interval_seconds < 5:
            raise ValueError("autosave_interval_seconds must be >= 5")


@dataclass
class PollingConfig:
    """Backend position polling configuration."""

    position_interval_seconds: float = 0.5

    def __post_init__(self):
        """Validate configuration."""
        if not (0.1 <= self.position_interval_seconds <= 10):
            raise ValueError("position_interval_seconds must be between 0.1 and 10")


@dataclass
class LibraryConfig:
    """File discovery configuration."""

    audio_extensions: List[str] = field(
        default_factory=lambda: ["mp3", "flac", "wav", "ogg"]
    )
    max_scan_depth: int = 8
    max_scan_files: int = 5000
    default_playlist_dir: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration and normalize paths."""
        if not self.audio_extensions:
            raise ValueError("audio_extensions must not be empty")

        self.audio_extensions = [ext.lower().lstrip('.') for ext in self.audio_extensions]

        if self.max_scan_depth < 0:
            raise ValueError("max_scan_depth must be >= 0")

        if self.max_scan_files < 1:
            raise ValueError("max_scan_files must be >= 1")

        if isinstance(self.default_playlist_dir, str):
            self.default_playlist_dir = Path(self.default_playlist_dir).expanduser()

    def playlist_dir(self) -> Path:
        """Directory for playlists saved without an explicit path."""
        return self.default_playlist_dir or get_music_dir()


@dataclass
class NotificationConfig:
    """Notification configuration."""

    enabled: bool = False
    on_track_change: bool = True
    on_error: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    path: Optional[Path] = None
    level: str = "INFO"
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self):
        """Validate configuration and set defaults."""
        if self.path is None:
            self.path = get_config_dir() / 'player.log'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()

        # Validate log level
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")


def _yaml_value(value: Any) -> Any:
    """Convert Paths (also inside lists) to strings for YAML output."""
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_yaml_value(item) for item in value]
    return value


@dataclass
class Settings:
    """Main settings container."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    library: LibraryConfig = field(default_factory=LibraryConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def sections(cls) -> Dict[str, Type]:
        """Section name -> section dataclass, in file order."""
        return {f.name: f.default_factory for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Settings':
        """Build settings from a parsed YAML mapping; missing sections use defaults.

        Raises:
            ValueError: If a value fails validation
            TypeError: If a section has unknown keys
        """
        return cls(**{
            name: section(**(data.get(name) or {}))
            for name, section in cls.sections().items()
        })

    @classmethod
    def from_file(cls, config_path: Path) -> 'Settings':
        """Load settings from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        return cls.from_dict(data)

    @classmethod
    def from_file_or_default(cls, config_path: Optional[Path] = None) -> 'Settings':
        """Load settings, falling back to defaults when the file is missing or invalid."""
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        if not config_path.exists():
            logging.info(f"Config file not found at {config_path}, using defaults")
            return cls()

        try:
            return cls.from_file(config_path)
        except Exception as e:
            logging.warning(f"Failed to load config from {config_path}: {e}")
            logging.warning("Using default configuration")
            return cls()

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            name: {key: _yaml_value(value) for key, value in asdict(getattr(self, name)).items()}
            for name in self.sections()
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save settings to YAML file.

        Args:
            config_path: Path to save configuration (default: config.yaml in config dir)
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, indent=2)
