"""APT package backend implementation.

Queries apt-cache and apt for search results and package details, and
serves the installed-package index through the binary cache.
"""

import logging

from birdnest.backends.base import Backend
from birdnest.core.cache import InstalledCache, load_installed_packages
from birdnest.models.package import InstalledPackage, PackageDetail, PackageRecord, UpgradablePackage
from birdnest.parsers.apt import parse_apt_search, parse_apt_show, parse_apt_upgradable, rank_by_query
from birdnest.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class AptBackend(Backend):
    """Backend for APT/dpkg packages.

    Args:
        cache: Installed-package cache. If None, the default cache is used.
    """

    def __init__(self, cache: InstalledCache | None = None) -> None:
        self._cache = cache

    @property
    def name(self) -> str:
        """Return "apt" as the package manager."""
        return "apt"

    def is_available(self) -> bool:
        """Check if apt-cache is available."""
        return command_exists("apt-cache")

    def search(self, query: str) -> list[PackageRecord]:
        """Search with `apt-cache search`, name matches ranked first.

        Args:
            query: Search term.

        Returns:
            Deduplicated, ranked records.

        Raises:
            RuntimeError: If apt-cache fails.
        """
        result = run_command(["apt-cache", "search", query])
        if not result.success:
            msg = f"apt-cache search failed: {result.stderr.strip()}"
            raise RuntimeError(msg)

        records = parse_apt_search(result.stdout)
        logger.debug("apt-cache search %r returned %d packages", query, len(records))
        return rank_by_query(records, query)

    def details(self, name: str) -> PackageDetail:
        """Load details with `apt show`.

        Raises:
            RuntimeError: If apt show fails.
        """
        result = run_command(["apt", "show", name])
        if not result.success:
            msg = f"Failed to get package info for {name}: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_apt_show(name, result.stdout)

    def installed(self) -> list[InstalledPackage]:
        """Return the installed-package index, from the cache when valid."""
        return load_installed_packages(self._cache)

    def upgradable(self) -> list[UpgradablePackage]:
        """List pending upgrades with `apt list --upgradable`.

        Raises:
            RuntimeError: If apt fails.
        """
        result = run_command(["apt", "list", "--upgradable"])
        if not result.success:
            msg = f"apt list failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_apt_upgradable(result.stdout)
