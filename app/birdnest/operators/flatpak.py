"""Flatpak package operator implementation.

Flatpak operations run as the invoking user; targets are application
IDs and are validated before any command is built.
"""

import logging

from birdnest.models.package import validate_application_id
from birdnest.operators.base import OperationCommand, Operator
from birdnest.utils.shell import command_exists

logger = logging.getLogger(__name__)


class FlatpakOperator(Operator):
    """Operator for Flatpak applications."""

    @property
    def name(self) -> str:
        """Return "flatpak" as the package manager."""
        return "flatpak"

    @property
    def requires_elevation(self) -> bool:
        """Flatpak runs unprivileged."""
        return False

    def is_available(self) -> bool:
        """Check if flatpak is available."""
        return command_exists("flatpak")

    def install_command(self, packages: list[str]) -> OperationCommand:
        """Build `flatpak install -y <ids>`.

        Raises:
            InvalidApplicationIdError: If an ID is not reverse-DNS.
        """
        ids = [validate_application_id(package) for package in packages]
        return OperationCommand(args=("flatpak", "install", "-y", *ids))

    def remove_command(self, packages: list[str]) -> OperationCommand:
        """Build `flatpak uninstall --noninteractive -y <ids>`.

        Raises:
            InvalidApplicationIdError: If an ID is not reverse-DNS.
        """
        ids = [validate_application_id(package) for package in packages]
        logger.debug("Uninstalling flatpak applications: %s", ", ".join(ids))
        return OperationCommand(args=("flatpak", "uninstall", "--noninteractive", "-y", *ids))

    def upgrade_command(self, packages: list[str]) -> OperationCommand:
        """Build `flatpak update --noninteractive -y [ids]`.

        Raises:
            InvalidApplicationIdError: If an ID is not reverse-DNS.
        """
        ids = [validate_application_id(package) for package in packages]
        return OperationCommand(args=("flatpak", "update", "--noninteractive", "-y", *ids))

    def update_command(self) -> OperationCommand:
        """Build `flatpak update --appstream`, which refreshes remote metadata only."""
        return OperationCommand(args=("flatpak", "update", "--appstream", "--noninteractive"))

    def clean_commands(self) -> list[OperationCommand]:
        """Build `flatpak uninstall --unused`, removing orphaned runtimes."""
        return [OperationCommand(args=("flatpak", "uninstall", "--unused", "--noninteractive", "-y"))]
