"""Upgrade command.

This module provides the `birdnest upgrade` command. It runs through the
same operation state machine as install and remove, so authentication
failures and conflicts are reported the same way.
"""

from typing import Annotated

import typer

from birdnest.cli.types import get_flatpak_pair, get_system_pair, require_config, run_operation
from birdnest.models.operation import OperationKind


def upgrade(
    packages: Annotated[
        list[str] | None,
        typer.Argument(help="Packages to upgrade. Upgrades everything if omitted."),
    ] = None,
    flatpak: Annotated[
        bool,
        typer.Option(
            "--flatpak",
            "-f",
            help="Upgrade Flatpak applications.",
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
    """Upgrade installed packages.

    Examples:
        birdnest upgrade
        birdnest upgrade firefox vim
        birdnest upgrade --flatpak -y
    """
    config = require_config()
    backend, operator = get_flatpak_pair(config) if flatpak else get_system_pair(config)

    run_operation(
        OperationKind.UPGRADE,
        packages or [],
        backend,
        operator,
        yes=yes or config.auto_confirm,
    )
