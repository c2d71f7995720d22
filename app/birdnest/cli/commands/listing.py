"""List command for installed packages.

This module provides the `birdnest list` command. System packages come
from the installed-package cache, which is rebuilt from the dpkg status
file when it is missing or out of date. With --upgradable, pending
upgrades are listed instead.
"""

from typing import Annotated

import typer

from birdnest.backends.apt import AptBackend
from birdnest.cli.types import get_flatpak_pair, get_system_pair, print_upgradable, require_config
from birdnest.utils.formatting import (
    console,
    create_flatpak_table,
    create_installed_table,
    print_error,
    print_info,
)


def list_installed(
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="List installed Flatpak applications.",
        ),
    ] = False,
    upgradable: Annotated[
        bool,
        typer.Option(
            "--upgradable",
            "-u",
            help="List packages with a newer version available.",
        ),
    ] = False,
    grep: Annotated[
        str | None,
        typer.Option(
            "--grep",
            "-g",
            help="Only show packages whose name contains this text.",
        ),
    ] = None,
) -> None:
    """List installed packages.

    Examples:
        birdnest list                # System packages
        birdnest list --grep python  # Filter by name
        birdnest list --flatpak      # Flatpak applications
        birdnest list --upgradable   # Pending upgrades
    """
    needle = grep.lower() if grep else None

    if upgradable:
        config = require_config()
        source, _ = get_flatpak_pair(config) if flatpak else get_system_pair(config)
        print_upgradable(source, needle)
        return

    if flatpak:
        backend, _ = get_flatpak_pair(require_config())
        try:
            records = backend.installed()
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        if needle:
            records = [
                r
                for r in records
                if needle in r.display_name.lower() or needle in r.application_id.lower()
            ]
        if not records:
            print_info("No Flatpak applications found.")
            return
        console.print(create_flatpak_table(records, title=f"Installed Flatpak Applications ({len(records)})"))
        return

    packages = AptBackend().installed()
    if needle:
        packages = [p for p in packages if needle in p.name.lower()]
    if not packages:
        print_info("No installed packages found.")
        return
    console.print(create_installed_table(packages))

