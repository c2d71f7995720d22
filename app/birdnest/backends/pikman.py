"""pikman package backend implementation.

pikman search sometimes needs root to reach a guest container. The
search is tried unprivileged first and repeated through the elevation
helper only when pikman reports a permission problem.
"""

import logging

from birdnest.backends.base import Backend
from birdnest.models.package import DistroFilter, PackageDetail, PackageRecord, UpgradablePackage
from birdnest.parsers.apt import parse_apt_upgradable
from birdnest.parsers.pikman import parse_pikman_search, parse_pikman_show
from birdnest.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# stderr fragments indicating the search must be retried with root
_PERMISSION_HINTS: tuple[str, ...] = ("permission", "denied", "sudo")


class PikmanBackend(Backend):
    """Backend for pikman.

    Args:
        distro: Guest distribution to search.
    """

    def __init__(self, distro: DistroFilter = DistroFilter.DEFAULT) -> None:
        self.distro = distro

    @property
    def name(self) -> str:
        """Return "pikman" as the package manager."""
        return "pikman"

    def is_available(self) -> bool:
        """Check if pikman is available."""
        return command_exists("pikman")

    def search_args(self, query: str) -> list[str]:
        """Build the search command; the distro flag precedes the subcommand."""
        args = ["pikman"]
        if self.distro.flag:
            args.append(self.distro.flag)
        args.extend(["search", query])
        return args

    def search(self, query: str) -> list[PackageRecord]:
        """Search with `pikman [flag] search`.

        Args:
            query: Search term.

        Returns:
            Records tagged with the distro's source.

        Raises:
            AuthenticationError: If the elevated retry was cancelled.
            RuntimeError: If the search fails.
        """
        args = self.search_args(query)
        result = run_command(args)

        if not result.success:
            stderr = result.stderr.lower()
            if any(hint in stderr for hint in _PERMISSION_HINTS):
                logger.info("pikman search needs elevated privileges, retrying")
                result = run_command(args, elevate=True)

        if not result.success:
            msg = f"pikman search failed: {result.stderr.strip()}"
            raise RuntimeError(msg)

        records = parse_pikman_search(result.stdout, self.distro)
        logger.debug("pikman search %r returned %d packages", query, len(records))
        return records

    def details(self, name: str) -> PackageDetail:
        """Load details with `pikman show`.

        Raises:
            RuntimeError: If pikman show fails.
        """
        result = run_command(["pikman", "show", name])
        if not result.success:
            msg = f"Failed to get package info for {name}: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_pikman_show(name, result.stdout)

    def upgradable(self) -> list[UpgradablePackage]:
        """List pending host upgrades with `pikman list --upgradable`.

        pikman forwards the listing to apt on the host, so the output
        has the apt shape.

        Raises:
            RuntimeError: If pikman fails.
        """
        result = run_command(["pikman", "list", "--upgradable"])
        if not result.success:
            msg = f"pikman list failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_apt_upgradable(result.stdout)
