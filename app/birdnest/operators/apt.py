"""APT package operator implementation.

Builds the `apt` and `apt-get` command lines for install, remove,
upgrade and maintenance. All of them run with root privileges.
"""

from birdnest.operators.base import OperationCommand, Operator
from birdnest.utils.shell import command_exists


class AptOperator(Operator):
    """Operator for APT/dpkg packages."""

    @property
    def name(self) -> str:
        """Return "apt" as the package manager."""
        return "apt"

    @property
    def requires_elevation(self) -> bool:
        """APT always needs root."""
        return True

    def is_available(self) -> bool:
        """Check if apt-get is available."""
        return command_exists("apt-get")

    def install_command(self, packages: list[str]) -> OperationCommand:
        """Build `apt install -y <packages>`."""
        return OperationCommand(args=("apt", "install", "-y", *packages), elevate=True)

    def remove_command(self, packages: list[str]) -> OperationCommand:
        """Build `apt-get remove -y <packages>`.

        DEBIAN_FRONTEND=noninteractive suppresses debconf prompts.
        """
        return OperationCommand(
            args=("apt-get", "remove", "-y", *packages),
            elevate=True,
            env={"DEBIAN_FRONTEND": "noninteractive"},
        )

    def upgrade_command(self, packages: list[str]) -> OperationCommand:
        """Build `apt upgrade -y`, or `apt install --only-upgrade -y <packages>`.

        ``--only-upgrade`` leaves packages that are not installed alone.
        """
        if packages:
            args: tuple[str, ...] = ("apt", "install", "--only-upgrade", "-y", *packages)
        else:
            args = ("apt", "upgrade", "-y")
        return OperationCommand(args=args, elevate=True, env={"DEBIAN_FRONTEND": "noninteractive"})

    def update_command(self) -> OperationCommand:
        """Build `apt update`."""
        return OperationCommand(args=("apt", "update"), elevate=True)

    def clean_commands(self) -> list[OperationCommand]:
        """Build `apt clean` followed by `apt autoclean`."""
        return [
            OperationCommand(args=("apt", "clean"), elevate=True),
            OperationCommand(args=("apt", "autoclean"), elevate=True),
        ]
