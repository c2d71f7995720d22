"""Unit tests for the update, clean, status and list --upgradable commands."""

from pathlib import Path
from unittest.mock import MagicMock, call, patch

import pytest
from birdnest.cli.main import app
from birdnest.models.package import UpgradablePackage
from birdnest.utils.shell import CommandResult, StreamLine
from typer.testing import CliRunner

runner = CliRunner()

APT_UPGRADABLE = "Listing... Done\nvim/noble-updates 2:9.1.2 amd64 [upgradable from: 2:9.1.1]\n"


def _stream(lines: list[str], returncode: int, elevated: bool = True) -> MagicMock:
    stream = MagicMock()
    stream.elevated = elevated
    stream.__iter__.return_value = [StreamLine(stream="stdout", text=line) for line in lines]
    stream.returncode = returncode
    return stream


@pytest.fixture
def apt_only(isolated_config_home: Path):
    """A host with apt and no pikman."""
    with (
        patch("birdnest.core.config.command_exists", return_value=False),
        patch("birdnest.operators.apt.command_exists", return_value=True),
    ):
        yield


class TestUpdateCommand:
    """Tests for birdnest update."""

    @patch("birdnest.cli.types.run_streaming")
    def test_update(self, mock_streaming, apt_only) -> None:
        """apt update runs elevated and its output is shown."""
        mock_streaming.return_value = _stream(["Hit:1 http://archive.ubuntu.com/ubuntu noble InRelease"], 0)

        result = runner.invoke(app, ["update"])

        assert result.exit_code == 0
        assert "noble InRelease" in result.stdout
        assert "Package lists updated." in result.stdout
        mock_streaming.assert_called_once_with(["apt", "update"], elevate=True, env=None)

    @patch("birdnest.cli.types.run_streaming")
    def test_update_authentication_cancelled(self, mock_streaming, apt_only) -> None:
        """A dismissed password prompt is reported as such."""
        mock_streaming.return_value = _stream([], 126)

        result = runner.invoke(app, ["update"])

        assert result.exit_code == 1
        assert "Authentication cancelled" in result.output

    @patch("birdnest.cli.types.run_streaming")
    def test_update_failure(self, mock_streaming, apt_only) -> None:
        """A failed refresh reports the exit code."""
        mock_streaming.return_value = _stream([], 100)

        result = runner.invoke(app, ["update"])

        assert result.exit_code == 1
        assert "Update failed with exit code: 100" in result.output

    @patch("birdnest.operators.flatpak.command_exists", return_value=True)
    @patch("birdnest.cli.types.run_streaming")
    def test_update_flatpak(self, mock_streaming, mock_exists, isolated_config_home: Path) -> None:
        """--flatpak refreshes appstream data without elevation."""
        mock_streaming.return_value = _stream([], 0, elevated=False)

        result = runner.invoke(app, ["update", "--flatpak"])

        assert result.exit_code == 0
        mock_streaming.assert_called_once_with(
            ["flatpak", "update", "--appstream", "--noninteractive"], elevate=False, env=None
        )

    @patch("birdnest.operators.apt.command_exists", return_value=False)
    @patch("birdnest.core.config.command_exists", return_value=False)
    def test_update_unavailable(self, mock_config_exists, mock_exists, isolated_config_home: Path) -> None:
        """A missing package manager is reported."""
        result = runner.invoke(app, ["update"])

        assert result.exit_code == 1
        assert "apt is not available" in result.output


class TestCleanCommand:
    """Tests for birdnest clean."""

    @patch("birdnest.cli.types.run_streaming")
    def test_clean_runs_both_steps(self, mock_streaming, apt_only) -> None:
        """apt clean is followed by apt autoclean."""
        mock_streaming.return_value = _stream([], 0)

        result = runner.invoke(app, ["clean"])

        assert result.exit_code == 0
        assert "Cache cleaned." in result.stdout
        assert mock_streaming.call_args_list == [
            call(["apt", "clean"], elevate=True, env=None),
            call(["apt", "autoclean"], elevate=True, env=None),
        ]

    @patch("birdnest.cli.types.run_streaming")
    def test_clean_stops_on_failure(self, mock_streaming, apt_only) -> None:
        """A failing step skips the rest."""
        mock_streaming.return_value = _stream([], 100)

        result = runner.invoke(app, ["clean"])

        assert result.exit_code == 1
        assert "Clean failed with exit code: 100" in result.output
        mock_streaming.assert_called_once()


class TestStatusCommand:
    """Tests for birdnest status."""

    @patch("birdnest.backends.flatpak.command_exists", return_value=False)
    @patch("birdnest.backends.apt.run_command")
    @patch("birdnest.cli.types.run_streaming")
    def test_status_without_refresh(self, mock_streaming, mock_run, mock_flatpak, apt_only) -> None:
        """--no-refresh only lists pending upgrades."""
        mock_run.return_value = CommandResult(stdout=APT_UPGRADABLE, stderr="", returncode=0)

        result = runner.invoke(app, ["status", "--no-refresh"])

        assert result.exit_code == 0
        assert "apt (setting: auto)" in result.stdout
        assert "not installed" in result.stdout
        assert "Upgradable Packages (1)" in result.stdout
        assert "2:9.1.2" in result.stdout
        mock_streaming.assert_not_called()

    @patch("birdnest.backends.flatpak.command_exists", return_value=True)
    @patch("birdnest.backends.apt.run_command")
    @patch("birdnest.cli.types.run_streaming")
    def test_status_refreshes_first(self, mock_streaming, mock_run, mock_flatpak, apt_only) -> None:
        """By default package lists are refreshed before listing."""
        mock_streaming.return_value = _stream([], 0)
        mock_run.return_value = CommandResult(stdout="Listing... Done\n", stderr="", returncode=0)

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "All packages are up to date." in result.stdout
        mock_streaming.assert_called_once_with(["apt", "update"], elevate=True, env=None)

    @patch("birdnest.backends.flatpak.command_exists", return_value=False)
    @patch("birdnest.backends.apt.run_command")
    @patch("birdnest.cli.types.run_streaming")
    def test_status_refresh_failure(self, mock_streaming, mock_run, mock_flatpak, apt_only) -> None:
        """A failed refresh stops before listing."""
        mock_streaming.return_value = _stream([], 100)

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "Update failed with exit code: 100" in result.output
        mock_run.assert_not_called()


class TestListUpgradable:
    """Tests for birdnest list --upgradable."""

    def test_list_upgradable(self, isolated_config_home: Path) -> None:
        """Pending upgrades are listed and filtered by --grep."""
        with (
            patch("birdnest.cli.types.detect_package_manager", return_value="apt"),
            patch("birdnest.cli.types.AptBackend") as mock_backend,
        ):
            mock_backend.return_value.upgradable.return_value = [
                UpgradablePackage("vim", "2:9.1.2", "2:9.1.1"),
                UpgradablePackage("curl", "8.5.0-2", "8.5.0-1"),
            ]
            result = runner.invoke(app, ["list", "--upgradable", "-g", "VIM"])

        assert result.exit_code == 0
        assert "Upgradable Packages (1)" in result.stdout
        assert "curl" not in result.stdout

    def test_list_upgradable_failure(self, isolated_config_home: Path) -> None:
        """A failing listing exits non-zero."""
        with (
            patch("birdnest.cli.types.detect_package_manager", return_value="apt"),
            patch("birdnest.cli.types.AptBackend") as mock_backend,
        ):
            mock_backend.return_value.upgradable.side_effect = RuntimeError("apt list failed: E: locked")
            result = runner.invoke(app, ["list", "--upgradable"])

        assert result.exit_code == 1
        assert "apt list failed" in result.output
