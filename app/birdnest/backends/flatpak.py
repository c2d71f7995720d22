"""Flatpak package backend implementation."""

import logging
from collections.abc import Iterator

from birdnest.backends.base import Backend
from birdnest.models.package import FlatpakRecord, PackageDetail, UpgradablePackage
from birdnest.parsers.flatpak import (
    parse_flatpak_info,
    parse_flatpak_list,
    parse_flatpak_search,
    parse_flatpak_updates,
)
from birdnest.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Remotes tried for applications that are not installed, in order
COMMON_REMOTES: tuple[str, ...] = ("flathub", "fedora", "gnome-nightly", "kdeapps", "elementary")


class FlatpakBackend(Backend):
    """Backend for Flatpak applications.

    All queries run as the invoking user.
    """

    @property
    def name(self) -> str:
        """Return "flatpak" as the package manager."""
        return "flatpak"

    def is_available(self) -> bool:
        """Check if flatpak is available."""
        return command_exists("flatpak")

    def search(self, query: str) -> list[FlatpakRecord]:
        """Search configured remotes with `flatpak search`.

        Raises:
            RuntimeError: If flatpak fails.
        """
        result = run_command(["flatpak", "search", query])
        if not result.success:
            msg = f"flatpak search failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_flatpak_search(result.stdout)

    def details(self, name: str) -> PackageDetail:
        """Load details for an installed or remote application.

        `flatpak info` only knows installed applications. When it fails,
        `flatpak remote-info` is tried against flathub, the common
        remotes, and finally every configured remote.

        Raises:
            RuntimeError: If no source knows the application.
        """
        result = run_command(["flatpak", "info", name])
        if result.success:
            return parse_flatpak_info(name, result.stdout)
        logger.debug("flatpak info %s failed, trying remotes: %s", name, result.stderr.strip())

        tried: set[str] = set()
        for remote in self._candidate_remotes():
            if remote in tried:
                continue
            tried.add(remote)
            remote_result = run_command(["flatpak", "remote-info", remote, name])
            if remote_result.success:
                logger.debug("Found %s on remote %s", name, remote)
                return parse_flatpak_info(name, remote_result.stdout)

        msg = f"Failed to get flatpak info for {name}: {result.stderr.strip()}"
        raise RuntimeError(msg)

    def _candidate_remotes(self) -> Iterator[str]:
        yield from COMMON_REMOTES
        result = run_command(["flatpak", "remotes", "--columns=name"])
        if not result.success:
            logger.debug("flatpak remotes failed: %s", result.stderr.strip())
            return
        for line in result.stdout.splitlines():
            remote = line.strip()
            if remote:
                yield remote

    def installed(self) -> list[FlatpakRecord]:
        """List installed applications and runtimes.

        Raises:
            RuntimeError: If flatpak list fails.
        """
        result = run_command(["flatpak", "list", "--columns=name,application"])
        if not result.success:
            msg = f"flatpak list failed: {result.stderr.strip()}"
            raise RuntimeError(msg)

        records = parse_flatpak_list(result.stdout)
        logger.debug("Found %d installed flatpak applications", len(records))
        return records

    def upgradable(self) -> list[UpgradablePackage]:
        """List applications with pending updates on their remotes.

        Raises:
            RuntimeError: If flatpak remote-ls fails.
        """
        result = run_command(["flatpak", "remote-ls", "--updates", "--columns=application,version"])
        if not result.success:
            msg = f"flatpak remote-ls failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_flatpak_updates(result.stdout)
