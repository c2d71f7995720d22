"""Abstract base class for package backends.

A backend answers read-only questions about one package manager:
search, per-package details, pending upgrades and whether the manager
is installed.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from birdnest.models.package import FlatpakRecord, PackageDetail, PackageRecord, UpgradablePackage


class Backend(ABC):
    """Abstract base class for all package backends.

    Example:
        >>> backend = AptBackend()
        >>> if backend.is_available():
        ...     for record in backend.search("firefox"):
        ...         print(record.name, record.description)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the package manager this backend queries."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def search(self, query: str) -> Sequence[PackageRecord | FlatpakRecord]:
        """Search for packages.

        Args:
            query: Search term.

        Returns:
            Matching records.

        Raises:
            RuntimeError: If the search command fails.
        """

    @abstractmethod
    def details(self, name: str) -> PackageDetail:
        """Load display details for one package.

        Args:
            name: Package name or application ID.

        Returns:
            PackageDetail for the package.

        Raises:
            RuntimeError: If the details command fails.
        """

    @abstractmethod
    def upgradable(self) -> list[UpgradablePackage]:
        """List installed packages that have a newer version available.

        Returns:
            Upgradable packages, possibly empty.

        Raises:
            RuntimeError: If the listing command fails.
        """
