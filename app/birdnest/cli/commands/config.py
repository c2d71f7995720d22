"""Configuration commands.

This module provides the `birdnest config` command group for viewing
and changing the settings in ~/.config/birdnest/config.toml.
"""

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from birdnest.cli.types import require_config
from birdnest.core.config import BirdnestConfig, ConfigError, save_config
from birdnest.core.paths import get_config_path
from birdnest.utils.formatting import console, print_error, print_success

app = typer.Typer(
    name="config",
    help="View and change birdnest settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the current settings."""
    config = require_config()

    table = Table(show_header=True, header_style="bold_header", border_style="border")
    table.add_column("Setting", style="header")
    table.add_column("Value", style="text")
    table.add_column("Description", style="muted")
    for key, info in BirdnestConfig.model_fields.items():
        value = getattr(config, key)
        shown = str(value).lower() if isinstance(value, bool) else str(value)
        table.add_row(key, escape(shown), info.description or "")
    console.print(table)
    console.print(f"[muted]{escape(str(get_config_path()))}[/]")


@app.command(name="set")
def set_value(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. package_manager.")],
    value: Annotated[str, typer.Argument(help="New value, e.g. apt or true.")],
) -> None:
    """Change a setting.

    Examples:
        birdnest config set package_manager apt
        birdnest config set auto_confirm true
    """
    config = require_config()

    if key not in BirdnestConfig.model_fields:
        print_error(f"Unknown setting: {key}")
        raise typer.Exit(code=1)

    try:
        updated = BirdnestConfig.model_validate({**config.model_dump(), key: value})
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(code=1) from e

    try:
        path = save_config(updated)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Set {key} = {value} in {path}")
