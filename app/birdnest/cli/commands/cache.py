"""Cache management commands.

This module provides the `birdnest cache` command group for inspecting
and clearing the installed-package cache.
"""

import typer

from birdnest.core.cache import InstalledCache
from birdnest.utils.formatting import console, print_info, print_success

app = typer.Typer(
    name="cache",
    help="Manage the installed-package cache.",
    no_args_is_help=True,
)


@app.command()
def status() -> None:
    """Show where the cache lives and whether it is current."""
    cache = InstalledCache()
    console.print(f"Cache file: {cache.cache_path}")
    if not cache.cache_path.exists():
        print_info("No cache yet; it is built on the next listing.")
    elif cache.is_stale():
        print_info(f"Cache is older than {cache.state_path} and will be rebuilt.")
    else:
        print_success("Cache is up to date.")


@app.command()
def clear() -> None:
    """Delete the cache; it is rebuilt on the next listing."""
    InstalledCache().invalidate()
    print_success("Installed-package cache cleared.")
