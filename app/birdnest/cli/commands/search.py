"""Search command.

This module provides the `birdnest search` command for querying the
system repositories, a pikman guest distribution or Flatpak remotes.
"""

from typing import Annotated

import typer
from rich.markup import escape

from birdnest.backends.base import Backend
from birdnest.backends.flatpak import FlatpakBackend
from birdnest.backends.pikman import PikmanBackend
from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config
from birdnest.models.package import DistroFilter, FlatpakRecord, PackageRecord
from birdnest.utils.formatting import (
    console,
    create_flatpak_table,
    create_package_table,
    format_package_row,
    print_error,
    print_info,
)


def search(
    query: Annotated[str, typer.Argument(help="Search term.")],
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Search Flatpak remotes.",
        ),
    ] = False,
    pikman: Annotated[
        bool,
        typer.Option(
            "--pikman",
            "-p",
            help="Search with pikman even if apt is configured.",
        ),
    ] = False,
    distro: Annotated[
        DistroFilter,
        typer.Option(
            "--distro",
            "-d",
            help="Guest distribution to search through pikman.",
            case_sensitive=False,
        ),
    ] = DistroFilter.DEFAULT,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of results to show (0 for all).",
        ),
    ] = 50,
) -> None:
    """Search for packages.

    Examples:
        birdnest search firefox                 # System repositories
        birdnest search firefox --flatpak       # Flatpak remotes
        birdnest search yay --distro aur        # AUR through pikman
    """
    config = require_config()
    label = escape(query)

    backend: Backend
    if flatpak:
        if pikman or distro is not DistroFilter.DEFAULT:
            print_error("--flatpak cannot be combined with --pikman or --distro.")
            raise typer.Exit(code=1)
        backend, _ = get_flatpak_pair(config)
    elif pikman or distro is not DistroFilter.DEFAULT:
        backend = PikmanBackend(distro)
    else:
        backend, _ = get_system_pair(config)

    if not backend.is_available():
        print_error(f"{backend.name} is not available on this system.")
        raise typer.Exit(code=1)

    try:
        with console.status(f"Searching {backend.name} for '{label}'..."):
            results = list(backend.search(query))
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not results:
        print_info(f"No packages found for '{query}'.")
        return

    shown = results[:limit] if limit > 0 else results

    if isinstance(backend, FlatpakBackend):
        flatpaks = [r for r in shown if isinstance(r, FlatpakRecord)]
        console.print(create_flatpak_table(flatpaks, title=f"Flatpak results for '{label}'"))
    else:
        table = create_package_table(title=f"Results for '{label}'")
        for record in shown:
            if isinstance(record, PackageRecord):
                table.add_row(*format_package_row(record))
        console.print(table)

    if len(shown) < len(results):
        print_info(f"Showing {len(shown)} of {len(results)} results. Use --limit 0 to show all.")
