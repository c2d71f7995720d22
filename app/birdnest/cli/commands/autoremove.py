"""Autoremove command for pikman."""

from typing import Annotated

import typer

from birdnest.cli.types import stream_commands
from birdnest.core.cache import InstalledCache
from birdnest.operators.pikman import PikmanOperator
from birdnest.utils.formatting import print_error, print_info, print_success


def autoremove(
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Remove packages that are no longer needed (pikman).

    Examples:
        birdnest autoremove
        birdnest autoremove -y
    """
    operator = PikmanOperator()
    if not operator.is_available():
        print_error("pikman is not available on this system.")
        raise typer.Exit(code=1)

    if not yes and not typer.confirm("Remove all unused packages?", default=False):
        print_info("Autoremove cancelled.")
        return

    InstalledCache().invalidate()
    returncode = stream_commands([operator.autoremove_command()])
    if returncode != 0:
        print_error(f"Autoremove failed with exit code: {returncode}")
        raise typer.Exit(code=1)
    print_success("Unused packages removed.")
