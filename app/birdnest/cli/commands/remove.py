"""Remove command.

This module provides the `birdnest remove` command. The command output
is streamed to the console; a recognised conflict is shown in a panel.
"""

from typing import Annotated

import typer

from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config, run_operation
from birdnest.models.operation import OperationKind


def remove(
    packages: Annotated[
        list[str],
        typer.Argument(help="Package names or Flatpak application IDs."),
    ],
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Remove Flatpak applications.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Remove packages.

    Examples:
        birdnest remove vim
        birdnest remove org.gnome.Calculator --flatpak
    """
    config = require_config()

    if flatpak:
        backend, operator = get_flatpak_pair(config)
    else:
        backend, operator = get_system_pair(config)

    run_operation(
        OperationKind.REMOVE,
        packages,
        backend,
        operator,
        yes=yes or config.auto_confirm,
    )
