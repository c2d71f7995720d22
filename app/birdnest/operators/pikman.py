"""pikman package operator implementation.

pikman installs from the host repositories or, with a distro flag,
from a guest distribution container. Install and remove are elevated;
upgrade and the maintenance commands run as the invoking user.
"""

from birdnest.models.package import DistroFilter
from birdnest.operators.base import OperationCommand, Operator
from birdnest.utils.shell import command_exists


class PikmanOperator(Operator):
    """Operator for pikman.

    Args:
        distro: Guest distribution to install from.
    """

    def __init__(self, distro: DistroFilter = DistroFilter.DEFAULT) -> None:
        self.distro = distro

    @property
    def name(self) -> str:
        """Return "pikman" as the package manager."""
        return "pikman"

    @property
    def requires_elevation(self) -> bool:
        """pikman install/remove run through the elevation helper."""
        return True

    def is_available(self) -> bool:
        """Check if pikman is available."""
        return command_exists("pikman")

    def install_command(self, packages: list[str]) -> OperationCommand:
        """Build `pikman install -y [--aur|--fedora|--alpine] <packages>`."""
        args = ["pikman", "install", "-y"]
        if self.distro.flag:
            args.append(self.distro.flag)
        args.extend(packages)
        return OperationCommand(args=tuple(args), elevate=True)

    def remove_command(self, packages: list[str]) -> OperationCommand:
        """Build `pikman remove -y [flag] <packages>`."""
        args = ["pikman", "remove", "-y"]
        if self.distro.flag:
            args.append(self.distro.flag)
        args.extend(packages)
        return OperationCommand(args=tuple(args), elevate=True)

    def autoremove_command(self) -> OperationCommand:
        """Build `pikman autoremove -y`, which runs unprivileged."""
        return OperationCommand(args=("pikman", "autoremove", "-y"))

    def upgrade_command(self, packages: list[str]) -> OperationCommand:
        """Build `pikman upgrade [packages] -y`.

        Runs unprivileged, like autoremove.
        """
        return OperationCommand(args=("pikman", "upgrade", *packages, "-y"))

    def update_command(self) -> OperationCommand:
        """Build `pikman update`."""
        return OperationCommand(args=("pikman", "update"))

    def clean_commands(self) -> list[OperationCommand]:
        """Build `pikman clean`."""
        return [OperationCommand(args=("pikman", "clean"))]
