"""Abstract base class for package operators.

This module defines the Operator interface that all package management
operators implement. Operators do not run anything themselves: they
build the command lines for install, remove, upgrade and the
maintenance tasks, and the caller streams them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from birdnest.models.operation import OperationKind


@dataclass(frozen=True, slots=True)
class OperationCommand:
    """A fully built package manager command.

    Attributes:
        args: Command and arguments, without any elevation helper.
        elevate: Whether the command must run with root privileges.
        env: Extra environment variables for the command.
    """

    args: tuple[str, ...]
    elevate: bool = False
    env: dict[str, str] = field(default_factory=dict)


class Operator(ABC):
    """Abstract base class for all package operators.

    Example:
        >>> operator = AptOperator()
        >>> command = operator.command_for(OperationKind.REMOVE, ["vim"])
        >>> command.args
        ('apt-get', 'remove', '-y', 'vim')
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the package manager this operator drives."""

    @property
    @abstractmethod
    def requires_elevation(self) -> bool:
        """Check if install/remove need root privileges."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def install_command(self, packages: list[str]) -> OperationCommand:
        """Build the command that installs packages.

        Args:
            packages: Package names or application IDs.

        Returns:
            The command to stream.
        """

    @abstractmethod
    def remove_command(self, packages: list[str]) -> OperationCommand:
        """Build the command that removes packages.

        Args:
            packages: Package names or application IDs.

        Returns:
            The command to stream.
        """

    @abstractmethod
    def upgrade_command(self, packages: list[str]) -> OperationCommand:
        """Build the command that upgrades packages.

        Args:
            packages: Packages to upgrade; empty upgrades everything.

        Returns:
            The command to stream.
        """

    @abstractmethod
    def update_command(self) -> OperationCommand:
        """Build the command that refreshes package metadata."""

    @abstractmethod
    def clean_commands(self) -> list[OperationCommand]:
        """Build the commands that clear caches and unused data, in order."""

    def command_for(self, kind: OperationKind, packages: list[str]) -> OperationCommand:
        """Build the command for an operation kind.

        Args:
            kind: Install, remove or upgrade.
            packages: Package names or application IDs.

        Returns:
            The command to stream.

        Raises:
            ValueError: If an install or remove has no packages, or a
                target is invalid.
            RuntimeError: If the package manager is not available.
        """
        if kind.requires_targets and not packages:
            msg = "No packages specified"
            raise ValueError(msg)

        if not self.is_available():
            msg = f"{self.name} is not available on this system"
            raise RuntimeError(msg)

        if kind is OperationKind.INSTALL:
            return self.install_command(packages)
        if kind is OperationKind.UPGRADE:
            return self.upgrade_command(packages)
        return self.remove_command(packages)
