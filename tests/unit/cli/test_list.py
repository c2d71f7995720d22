"""Unit tests for the list and show commands."""

from pathlib import Path
from unittest.mock import patch

from birdnest.cli.main import app
from birdnest.models.package import InstalledPackage
from birdnest.utils.shell import CommandResult
from typer.testing import CliRunner

runner = CliRunner()


class TestListCommand:
    """Tests for birdnest list."""

    def test_lists_installed(self, isolated_config_home: Path) -> None:
        """System packages are shown with their versions."""
        with patch("birdnest.cli.commands.listing.AptBackend") as mock_backend:
            mock_backend.return_value.installed.return_value = [
                InstalledPackage("vim", "9.1"),
                InstalledPackage("curl", "8.5.0"),
            ]
            result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "Installed Packages (2)" in result.stdout
        assert "curl" in result.stdout

    def test_grep_filters(self, isolated_config_home: Path) -> None:
        """--grep keeps only matching names, case-insensitively."""
        with patch("birdnest.cli.commands.listing.AptBackend") as mock_backend:
            mock_backend.return_value.installed.return_value = [
                InstalledPackage("python3", "3.12"),
                InstalledPackage("vim", "9.1"),
            ]
            result = runner.invoke(app, ["list", "--grep", "PYTHON"])

        assert "Installed Packages (1)" in result.stdout
        assert "vim" not in result.stdout

    def test_empty_index(self, isolated_config_home: Path) -> None:
        """An empty index prints a message."""
        with patch("birdnest.cli.commands.listing.AptBackend") as mock_backend:
            mock_backend.return_value.installed.return_value = []
            result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No installed packages found." in result.stdout

    def test_lists_flatpaks(self, isolated_config_home: Path) -> None:
        """--flatpak lists installed applications."""
        with patch("birdnest.backends.flatpak.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="Firefox\torg.mozilla.firefox\nCalculator\torg.gnome.Calculator\n",
                stderr="",
                returncode=0,
            )
            result = runner.invoke(app, ["list", "--flatpak", "-g", "calc"])

        assert result.exit_code == 0
        assert "Calculator" in result.stdout
        assert "Firefox" not in result.stdout

    def test_flatpak_failure(self, isolated_config_home: Path) -> None:
        """A failing flatpak list exits with an error."""
        with patch("birdnest.backends.flatpak.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="boom", returncode=1)
            result = runner.invoke(app, ["list", "--flatpak"])

        assert result.exit_code == 1
        assert "flatpak list failed" in result.output


class TestShowCommand:
    """Tests for birdnest show."""

    def test_show_apt(self, isolated_config_home: Path, mock_apt_show_output: str) -> None:
        """apt details are shown in a table."""
        with (
            patch("birdnest.core.config.command_exists", return_value=False),
            patch("birdnest.backends.apt.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout=mock_apt_show_output, stderr="", returncode=0)
            result = runner.invoke(app, ["show", "vim"])

        assert result.exit_code == 0
        assert "2:9.1.0016-1ubuntu7" in result.stdout
        assert "4.00 MB" in result.stdout

    def test_show_pikman_repository(self, isolated_config_home: Path) -> None:
        """pikman details include the repository."""
        with patch("birdnest.backends.pikman.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="Version: 12.3.5-1\nRepository: aur\n", stderr="", returncode=0
            )
            result = runner.invoke(app, ["show", "yay", "--pikman"])

        assert result.exit_code == 0
        assert "Repository" in result.stdout
        assert "aur" in result.stdout

    def test_show_unknown(self, isolated_config_home: Path) -> None:
        """An unknown package exits with an error."""
        with (
            patch("birdnest.core.config.command_exists", return_value=False),
            patch("birdnest.backends.apt.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="", stderr="E: No packages found", returncode=100)
            result = runner.invoke(app, ["show", "ghost"])

        assert result.exit_code == 1
        assert "Failed to get package info for ghost" in result.output
