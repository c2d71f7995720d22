"""Unit tests for PikmanBackend."""

from unittest.mock import call, patch

import pytest
from birdnest.backends.pikman import PikmanBackend
from birdnest.models.package import DistroFilter, SourceTag
from birdnest.utils.shell import AuthenticationError, CommandResult


class TestSearchArgs:
    """Tests for PikmanBackend.search_args."""

    def test_default_has_no_flag(self) -> None:
        """The host repositories need no distro flag."""
        assert PikmanBackend().search_args("vim") == ["pikman", "search", "vim"]

    @pytest.mark.parametrize(
        ("distro", "flag"),
        [
            (DistroFilter.AUR, "--aur"),
            (DistroFilter.FEDORA, "--fedora"),
            (DistroFilter.ALPINE, "--alpine"),
        ],
    )
    def test_flag_precedes_subcommand(self, distro: DistroFilter, flag: str) -> None:
        """The distro flag is a global option placed before 'search'."""
        assert PikmanBackend(distro).search_args("vim") == ["pikman", flag, "search", "vim"]


class TestPikmanBackendSearch:
    """Tests for PikmanBackend.search."""

    @patch("birdnest.backends.pikman.run_command")
    def test_search(self, mock_run, mock_aur_search_output: str) -> None:
        """Output is parsed in the distro's dialect."""
        mock_run.return_value = CommandResult(stdout=mock_aur_search_output, stderr="", returncode=0)

        records = PikmanBackend(DistroFilter.AUR).search("yay")

        mock_run.assert_called_once_with(["pikman", "--aur", "search", "yay"])
        assert records[0].name == "yay"
        assert records[0].source is SourceTag.AUR

    @patch("birdnest.backends.pikman.run_command")
    def test_retries_elevated_on_permission_error(self, mock_run, mock_fedora_search_output: str) -> None:
        """A permission failure is retried once through the elevation helper."""
        mock_run.side_effect = [
            CommandResult(stdout="", stderr="Error: permission denied", returncode=1),
            CommandResult(stdout=mock_fedora_search_output, stderr="", returncode=0, elevated=True),
        ]

        records = PikmanBackend(DistroFilter.FEDORA).search("neovim")

        args = ["pikman", "--fedora", "search", "neovim"]
        assert mock_run.call_args_list == [call(args), call(args, elevate=True)]
        assert records[0].name == "neovim"

    @patch("birdnest.backends.pikman.run_command")
    def test_no_retry_for_other_errors(self, mock_run) -> None:
        """Failures unrelated to permissions are not retried."""
        mock_run.return_value = CommandResult(stdout="", stderr="container not found", returncode=1)

        with pytest.raises(RuntimeError, match="pikman search failed: container not found"):
            PikmanBackend(DistroFilter.ALPINE).search("musl")

        assert mock_run.call_count == 1

    @patch("birdnest.backends.pikman.run_command")
    def test_elevated_retry_failure(self, mock_run) -> None:
        """A failing elevated retry raises RuntimeError."""
        mock_run.side_effect = [
            CommandResult(stdout="", stderr="must be run with sudo", returncode=1),
            CommandResult(stdout="", stderr="still broken", returncode=1, elevated=True),
        ]

        with pytest.raises(RuntimeError, match="still broken"):
            PikmanBackend().search("vim")

    @patch("birdnest.backends.pikman.run_command")
    def test_cancelled_authentication_propagates(self, mock_run) -> None:
        """Dismissing the password prompt surfaces as AuthenticationError."""
        mock_run.side_effect = [
            CommandResult(stdout="", stderr="Permission denied", returncode=1),
            AuthenticationError("Authentication cancelled or failed. Please try again."),
        ]

        with pytest.raises(AuthenticationError):
            PikmanBackend().search("vim")


class TestPikmanBackendDetails:
    """Tests for PikmanBackend.details."""

    @patch("birdnest.backends.pikman.run_command")
    def test_details(self, mock_run) -> None:
        """pikman show output is parsed."""
        mock_run.return_value = CommandResult(
            stdout="Version: 12.3.5-1\nDescription: AUR helper\nRepository: aur\n",
            stderr="",
            returncode=0,
        )

        detail = PikmanBackend().details("yay")

        mock_run.assert_called_once_with(["pikman", "show", "yay"])
        assert detail.repository == "aur"

    @patch("birdnest.backends.pikman.run_command")
    def test_details_failure(self, mock_run) -> None:
        """A failing show raises RuntimeError."""
        mock_run.return_value = CommandResult(stdout="", stderr="not found", returncode=1)

        with pytest.raises(RuntimeError, match="Failed to get package info for ghost"):
            PikmanBackend().details("ghost")


class TestPikmanBackendUpgradable:
    """Tests for PikmanBackend.upgradable."""

    @patch("birdnest.backends.pikman.run_command")
    def test_upgradable(self, mock_run) -> None:
        """Host upgrades are listed in apt format."""
        mock_run.return_value = CommandResult(
            stdout="Listing... Done\ncurl/stable 8.5.0-2 amd64 [upgradable from: 8.5.0-1]\n",
            stderr="",
            returncode=0,
        )

        packages = PikmanBackend().upgradable()

        mock_run.assert_called_once_with(["pikman", "list", "--upgradable"])
        assert [p.name for p in packages] == ["curl"]

    @patch("birdnest.backends.pikman.run_command")
    def test_upgradable_failure(self, mock_run) -> None:
        """A failing listing raises RuntimeError."""
        mock_run.return_value = CommandResult(stdout="", stderr="boom", returncode=1)

        with pytest.raises(RuntimeError, match="pikman list failed"):
            PikmanBackend().upgradable()
