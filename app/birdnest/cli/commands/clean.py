"""Clean command for package caches."""

from typing import Annotated

import typer

from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config, stream_commands
from birdnest.utils.formatting import print_error, print_info, print_success


def clean(
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Remove unused Flatpak runtimes instead.",
        ),
    ] = False,
) -> None:
    """Clear downloaded package files.

    Examples:
        birdnest clean
        birdnest clean --flatpak
    """
    config = require_config()
    _, operator = get_flatpak_pair(config) if flatpak else get_system_pair(config)

    if not operator.is_available():
        print_error(f"{operator.name} is not available on this system.")
        raise typer.Exit(code=1)

    print_info(f"Cleaning {operator.name} cache...")
    returncode = stream_commands(operator.clean_commands())
    if returncode != 0:
        print_error(f"Clean failed with exit code: {returncode}")
        raise typer.Exit(code=1)
    print_success("Cache cleaned.")
