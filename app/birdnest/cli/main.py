"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from birdnest import __version__
from birdnest.cli.commands import (
    autoremove,
    cache,
    clean,
    config,
    install,
    listing,
    remove,
    search,
    show,
    status,
    update,
    upgrade,
)
from birdnest.utils.log import setup_logging

# Create main Typer app
app = typer.Typer(
    name="birdnest",
    help="Search, install, remove and upgrade packages with apt, pikman and Flatpak.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"birdnest version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """birdnest - Package manager front-end for apt, pikman and Flatpak.

    Search the system repositories, guest distributions and Flathub,
    and install, remove or upgrade packages with conflict reporting.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.command(name="search")(search.search)
app.command(name="list")(listing.list_installed)
app.command(name="show")(show.show)
app.command(name="install")(install.install)
app.command(name="remove")(remove.remove)
app.command(name="upgrade")(upgrade.upgrade)
app.command(name="autoremove")(autoremove.autoremove)
app.command(name="update")(update.update)
app.command(name="clean")(clean.clean)
app.command(name="status")(status.status)
app.add_typer(cache.app, name="cache")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
