"""Install command.

This module provides the `birdnest install` command. The command output
is streamed to the console; a recognised conflict is shown in a panel.
"""

from typing import Annotated

import typer

from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config, run_operation
from birdnest.models.operation import OperationKind
from birdnest.models.package import DistroFilter
from birdnest.utils.formatting import print_error


def install(
    packages: Annotated[
        list[str],
        typer.Argument(help="Package names or Flatpak application IDs."),
    ],
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Install Flatpak applications.",
        ),
    ] = False,
    distro: Annotated[
        DistroFilter,
        typer.Option(
            "--distro",
            "-d",
            help="Install from a guest distribution through pikman.",
            case_sensitive=False,
        ),
    ] = DistroFilter.DEFAULT,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Install packages.

    Examples:
        birdnest install vim htop
        birdnest install yay --distro aur
        birdnest install org.gnome.Calculator --flatpak -y
    """
    config = require_config()

    if flatpak:
        if distro is not DistroFilter.DEFAULT:
            print_error("--flatpak cannot be combined with --distro.")
            raise typer.Exit(code=1)
        backend, operator = get_flatpak_pair(config)
    else:
        backend, operator = get_system_pair(config, distro)

    run_operation(
        OperationKind.INSTALL,
        packages,
        backend,
        operator,
        yes=yes or config.auto_confirm,
    )
