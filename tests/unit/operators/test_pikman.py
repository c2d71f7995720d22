"""Unit tests for PikmanOperator."""

from unittest.mock import patch

from birdnest.models.operation import OperationKind
from birdnest.models.package import DistroFilter
from birdnest.operators.pikman import PikmanOperator


class TestPikmanOperator:
    """Tests for PikmanOperator."""

    def test_install_default(self) -> None:
        """Host installs carry no distro flag and run elevated."""
        command = PikmanOperator().install_command(["vim"])

        assert command.args == ("pikman", "install", "-y", "vim")
        assert command.elevate is True

    def test_install_with_distro(self) -> None:
        """The distro flag follows the subcommand options."""
        command = PikmanOperator(DistroFilter.AUR).install_command(["yay", "paru"])

        assert command.args == ("pikman", "install", "-y", "--aur", "yay", "paru")

    def test_remove_with_distro(self) -> None:
        """Removal uses the same flag placement."""
        command = PikmanOperator(DistroFilter.FEDORA).remove_command(["neovim"])

        assert command.args == ("pikman", "remove", "-y", "--fedora", "neovim")
        assert command.elevate is True

    def test_autoremove_is_unprivileged(self) -> None:
        """autoremove runs as the invoking user."""
        command = PikmanOperator().autoremove_command()

        assert command.args == ("pikman", "autoremove", "-y")
        assert command.elevate is False

    @patch("birdnest.operators.pikman.command_exists", return_value=True)
    def test_command_for(self, mock_exists) -> None:
        """command_for dispatches by kind."""
        command = PikmanOperator(DistroFilter.ALPINE).command_for(OperationKind.REMOVE, ["musl"])

        assert command.args == ("pikman", "remove", "-y", "--alpine", "musl")
        mock_exists.assert_called_once_with("pikman")

    def test_upgrade_is_unprivileged(self) -> None:
        """Upgrades run as the invoking user with -y last."""
        command = PikmanOperator().upgrade_command(["vim"])

        assert command.args == ("pikman", "upgrade", "vim", "-y")
        assert command.elevate is False

    def test_maintenance_commands(self) -> None:
        """update and clean run unprivileged."""
        operator = PikmanOperator()

        assert operator.update_command().args == ("pikman", "update")
        assert operator.update_command().elevate is False
        assert [c.args for c in operator.clean_commands()] == [("pikman", "clean")]
