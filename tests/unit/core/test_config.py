"""Unit tests for user configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
from birdnest.core.config import (
    BirdnestConfig,
    ConfigError,
    ConfigParseError,
    detect_package_manager,
    load_config,
    save_config,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """A missing config file yields the default settings."""
        config = load_config(tmp_path / "config.toml")

        assert config == BirdnestConfig()
        assert config.package_manager == "auto"
        assert config.auto_confirm is False
        assert config.flatpak_enabled is True

    def test_reads_values(self, tmp_path: Path) -> None:
        """Values in the file override defaults."""
        path = tmp_path / "config.toml"
        path.write_text('package_manager = "apt"\nauto_confirm = true\n')

        config = load_config(path)

        assert config.package_manager == "apt"
        assert config.auto_confirm is True
        assert config.flatpak_enabled is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        path = tmp_path / "config.toml"
        path.write_text("package_manager = \n")

        with pytest.raises(ConfigParseError, match="Invalid TOML syntax"):
            load_config(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        """An unknown package manager fails validation."""
        path = tmp_path / "config.toml"
        path.write_text('package_manager = "dnf"\n')

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys are rejected."""
        path = tmp_path / "config.toml"
        path.write_text("colour = true\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_default_path_from_xdg(self, isolated_config_home: Path) -> None:
        """Without a path the XDG location is used."""
        config_dir = isolated_config_home / "birdnest"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("flatpak_enabled = false\n")

        assert load_config().flatpak_enabled is False


class TestSaveConfig:
    """Tests for save_config."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Saved settings load back unchanged."""
        path = tmp_path / "sub" / "config.toml"
        config = BirdnestConfig(package_manager="pikman", auto_confirm=True)

        saved = save_config(config, path)

        assert saved == path
        assert load_config(path) == config

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        """Only the config file remains after saving."""
        path = tmp_path / "config.toml"

        save_config(BirdnestConfig(), path)

        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]


class TestDetectPackageManager:
    """Tests for detect_package_manager."""

    def test_explicit_setting_wins(self) -> None:
        """An explicit manager is used without probing PATH."""
        with patch("birdnest.core.config.command_exists") as mock_exists:
            assert detect_package_manager(BirdnestConfig(package_manager="apt")) == "apt"

        mock_exists.assert_not_called()

    @patch("birdnest.core.config.command_exists", return_value=True)
    def test_auto_prefers_pikman(self, mock_exists) -> None:
        """pikman is chosen when it is installed."""
        assert detect_package_manager() == "pikman"
        mock_exists.assert_called_once_with("pikman")

    @patch("birdnest.core.config.command_exists", return_value=False)
    def test_auto_falls_back_to_apt(self, mock_exists) -> None:
        """apt is the fallback."""
        assert detect_package_manager(BirdnestConfig()) == "apt"
