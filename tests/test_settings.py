"""Tests for YAML settings."""

from pathlib import Path

import pytest
import yaml

from console_music_player.config.settings import (
    LibraryConfig,
    PlayerConfig,
    PollingConfig,
    SessionConfig,
    Settings,
    _yaml_value,
)
from console_music_player.utils.platform import get_config_dir


class TestDefaults:
    def test_default_values(self) -> None:
        settings = Settings()
        assert settings.player.seek_step_seconds == 5
        assert settings.player.volume_step == 5
        assert settings.library.audio_extensions == ["mp3", "flac", "wav", "ogg"]
        assert settings.library.max_scan_depth == 8
        assert settings.library.max_scan_files == 5000
        assert settings.session.autosave_interval_seconds == 30
        assert not settings.notifications.enabled

    def test_default_paths_in_config_dir(self) -> None:
        settings = Settings()
        assert settings.session.path == get_config_dir() / "session.yaml"
        assert settings.logging.path == get_config_dir() / "player.log"

    def test_playlist_dir_defaults_to_music(self, isolated_config_dir) -> None:
        assert LibraryConfig().playlist_dir() == isolated_config_dir / "Music"


class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        {"seek_step_seconds": 0},
        {"volume_step": 0},
        {"volume_step": 101},
    ])
    def test_player_config(self, kwargs) -> None:
        with pytest.raises(ValueError):
            PlayerConfig(**kwargs)

    def test_autosave_minimum(self) -> None:
        with pytest.raises(ValueError):
            SessionConfig(autosave_interval_seconds=1)

    def test_polling_range(self) -> None:
        with pytest.raises(ValueError):
            PollingConfig(position_interval_seconds=0.01)

    def test_extensions_normalized(self) -> None:
        assert LibraryConfig(audio_extensions=[".MP3", "Flac"]).audio_extensions == ["mp3", "flac"]

    def test_empty_extensions(self) -> None:
        with pytest.raises(ValueError):
            LibraryConfig(audio_extensions=[])

    def test_string_paths_expanded(self, isolated_config_dir) -> None:
        config = LibraryConfig(default_playlist_dir="~/Playlists")
        assert config.default_playlist_dir == isolated_config_dir / "Playlists"


class TestFiles:
    def test_yaml_value_converts_paths(self) -> None:
        assert _yaml_value(Path("/music")) == "/music"
        assert _yaml_value((Path("/a"), "b", 3)) == ["/a", "b", 3]
        assert _yaml_value(5) == 5

    def test_save_and_load(self, tmp_path) -> None:
        settings = Settings()
        settings.player.volume_step = 10
        settings.library.default_playlist_dir = tmp_path / "lists"
        target = tmp_path / "config.yaml"

        settings.save(target)
        loaded = Settings.from_file(target)

        assert loaded.player.volume_step == 10
        assert loaded.library.default_playlist_dir == tmp_path / "lists"
        assert loaded.session.path == settings.session.path

    def test_partial_file_uses_defaults(self, tmp_path) -> None:
        target = tmp_path / "config.yaml"
        target.write_text(yaml.safe_dump({"player": {"seek_step_seconds": 10}}), encoding="utf-8")
        loaded = Settings.from_file(target)
        assert loaded.player.seek_step_seconds == 10
        assert loaded.polling.position_interval_seconds == 0.5

    def test_from_file_missing(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_file(tmp_path / "missing.yaml")

    def test_invalid_file_falls_back_to_defaults(self, tmp_path) -> None:
        target = tmp_path / "config.yaml"
        target.write_text(yaml.safe_dump({"player": {"volume_step": 500}}), encoding="utf-8")
        assert Settings.from_file_or_default(target).player.volume_step == 5

    def test_unknown_key_falls_back_to_defaults(self, tmp_path) -> None:
        target = tmp_path / "config.yaml"
        target.write_text(yaml.safe_dump({"player": {"speed": 2}}), encoding="utf-8")
        assert Settings.from_file_or_default(target) == Settings()

    def test_default_location(self) -> None:
        Settings().save()
        assert (get_config_dir() / "config.yaml").exists()
        assert isinstance(Settings.from_file_or_default(), Settings)
