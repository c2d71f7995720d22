"""Status command.

Shows which package managers birdnest will use, then refreshes the
package lists and lists pending upgrades.
"""

from typing import Annotated

import typer
from rich.table import Table

from birdnest.backends.flatpak import FlatpakBackend
from birdnest.cli.types import get_system_pair, print_upgradable, require_config, stream_commands
from birdnest.utils.formatting import console, print_error, print_info


def status(
    refresh: Annotated[
        bool,
        typer.Option(
            "--refresh/--no-refresh",
            help="Refresh package lists before checking for upgrades.",
        ),
    ] = True,
) -> None:
    """Show package manager status and pending upgrades.

    Examples:
        birdnest status
        birdnest status --no-refresh
    """
    config = require_config()
    backend, operator = get_system_pair(config)

    if config.flatpak_enabled:
        flatpak = "available" if FlatpakBackend().is_available() else "not installed"
    else:
        flatpak = "disabled"

    table = Table(show_header=False, border_style="border")
    table.add_column("Key", style="header")
    table.add_column("Value", style="text")
    table.add_row("Package manager", f"{operator.name} (setting: {config.package_manager})")
    table.add_row("Available", "yes" if operator.is_available() else "no")
    table.add_row("Flatpak", flatpak)
    console.print(table)

    if not operator.is_available():
        print_error(f"{operator.name} is not available on this system.")
        raise typer.Exit(code=1)

    if refresh:
        print_info(f"Updating {operator.name} package lists...")
        returncode = stream_commands([operator.update_command()])
        if returncode != 0:
            print_error(f"Update failed with exit code: {returncode}")
            raise typer.Exit(code=1)

    print_upgradable(backend)
