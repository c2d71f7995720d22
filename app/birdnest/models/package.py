"""Package models for search results, listings and details.

This module defines the core data structures for representing
packages from the supported sources (apt, Flatpak, pikman).
"""

from dataclasses import dataclass, field
from enum import Enum


class SourceTag(Enum):
    """Origin of a search or listing result."""

    SYSTEM = "System"
    AUR = "AUR"
    FEDORA = "Fedora"
    ALPINE = "Alpine"


class DistroFilter(Enum):
    """Guest distribution selector for pikman.

    Each member also selects the search output dialect pikman prints
    for that distribution.
    """

    DEFAULT = "default"
    AUR = "aur"
    FEDORA = "fedora"
    ALPINE = "alpine"

    @property
    def flag(self) -> str | None:
        """Return the global pikman flag for this distro, if any."""
        if self is DistroFilter.DEFAULT:
            return None
        return f"--{self.value}"

    @property
    def source_tag(self) -> SourceTag:
        """Return the source tag attached to records from this distro."""
        return _DISTRO_SOURCES[self]


_DISTRO_SOURCES: dict[DistroFilter, SourceTag] = {
    DistroFilter.DEFAULT: SourceTag.SYSTEM,
    DistroFilter.AUR: SourceTag.AUR,
    DistroFilter.FEDORA: SourceTag.FEDORA,
    DistroFilter.ALPINE: SourceTag.ALPINE,
}


class InvalidApplicationIdError(ValueError):
    """Raised when a Flatpak application ID is not a reverse-DNS identifier."""


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """A package returned by a search.

    Attributes:
        name: Package name (e.g., 'firefox').
        version: Version string, empty when the source format has none.
        description: Human-readable description.
        size: Display size, e.g. '1.2 MiB / 4.5 MiB'.
        source: Where the record came from.
    """

    name: str
    version: str = ""
    description: str = ""
    size: str = ""
    source: SourceTag = SourceTag.SYSTEM

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)


def validate_application_id(application_id: str) -> str:
    """Ensure a Flatpak application ID is well-formed.

    Args:
        application_id: Identifier such as 'org.mozilla.firefox'.

    Returns:
        The identifier, unchanged.

    Raises:
        InvalidApplicationIdError: If the identifier contains no '.'.
    """
    if "." not in application_id:
        msg = f"Invalid Flatpak application ID: {application_id!r}"
        raise InvalidApplicationIdError(msg)
    return application_id


@dataclass(frozen=True, slots=True)
class FlatpakRecord:
    """A Flatpak application from a search or an installed listing.

    Attributes:
        display_name: Human-readable application name.
        description: Summary line, empty for listings.
        version: Version string, empty for listings.
        application_id: Stable reverse-DNS identity (e.g., 'org.gnome.Calculator').
    """

    display_name: str
    application_id: str
    description: str = ""
    version: str = ""

    @property
    def is_well_formed(self) -> bool:
        """Check if the application ID can be used for install/remove."""
        return "." in self.application_id


@dataclass(frozen=True, slots=True)
class InstalledPackage:
    """An entry of the installed-package index."""

    name: str
    version: str


@dataclass(frozen=True, slots=True)
class UpgradablePackage:
    """An installed package with a newer version available.

    Attributes:
        name: Package name or Flatpak application ID.
        new_version: Version that an upgrade would install.
        current_version: Installed version, empty when the tool omits it.
    """

    name: str
    new_version: str
    current_version: str = ""

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PackageDetail:
    """Display details for a package targeted by an operation.

    Attributes:
        name: Package name or Flatpak application ID.
        version: Version string or 'Unknown'.
        description: Description or 'No description available'.
        size: Display size or 'Unknown'.
        is_flatpak: Whether the package is a Flatpak application.
        repository: Repository reported by pikman, if any.
    """

    name: str
    version: str = "Unknown"
    description: str = "No description available"
    size: str = "Unknown"
    is_flatpak: bool = False
    repository: str | None = field(default=None)
