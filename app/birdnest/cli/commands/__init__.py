"""CLI commands for birdnest.

This package contains all subcommand implementations.
"""

from birdnest.cli.commands import (
    autoremove,
    cache,
    clean,
    config,
    install,
    listing,
    remove,
    search,
    show,
    status,
    update,
    upgrade,
)

__all__ = [
    "autoremove",
    "cache",
    "clean",
    "config",
    "install",
    "listing",
    "remove",
    "search",
    "show",
    "status",
    "update",
    "upgrade",
]
