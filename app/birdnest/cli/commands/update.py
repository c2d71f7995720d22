"""Update command for refreshing package metadata."""

from typing import Annotated

import typer

from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config, stream_commands
from birdnest.utils.formatting import print_error, print_info, print_success


def update(
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Refresh Flatpak remote metadata instead.",
        ),
    ] = False,
) -> None:
    """Refresh package lists.

    Examples:
        birdnest update
        birdnest update --flatpak
    """
    config = require_config()
    _, operator = get_flatpak_pair(config) if flatpak else get_system_pair(config)

    if not operator.is_available():
        print_error(f"{operator.name} is not available on this system.")
        raise typer.Exit(code=1)

    print_info(f"Updating {operator.name} package lists...")
    returncode = stream_commands([operator.update_command()])
    if returncode != 0:
        print_error(f"Update failed with exit code: {returncode}")
        raise typer.Exit(code=1)
    print_success("Package lists updated.")
