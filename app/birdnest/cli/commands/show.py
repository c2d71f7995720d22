"""Show command for package details."""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from birdnest.backends.base import Backend
from birdnest.backends.pikman import PikmanBackend
from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config
from birdnest.utils.formatting import console, print_error


def show(
    name: Annotated[str, typer.Argument(help="Package name or Flatpak application ID.")],
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Show an installed Flatpak application.",
        ),
    ] = False,
    pikman: Annotated[
        bool,
        typer.Option(
            "--pikman",
            "-p",
            help="Query pikman even if apt is configured.",
        ),
    ] = False,
) -> None:
    """Show details for a package.

    Examples:
        birdnest show vim
        birdnest show org.mozilla.firefox --flatpak
    """
    config = require_config()

    backend: Backend
    if flatpak:
        backend, _ = get_flatpak_pair(config)
    elif pikman:
        backend = PikmanBackend()
    else:
        backend, _ = get_system_pair(config)

    try:
        detail = backend.details(name)
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(show_header=False, border_style="border", title=escape(detail.name))
    table.add_column("Field", style="muted")
    table.add_column("Value", style="text")
    table.add_row("Version", escape(detail.version))
    table.add_row("Size", escape(detail.size))
    if detail.repository:
        table.add_row("Repository", escape(detail.repository))
    table.add_row("Source", "Flatpak" if detail.is_flatpak else backend.name)
    table.add_row("Description", escape(detail.description))
    console.print(table)
