"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from birdnest.models.conflict import ConflictHandoff
    from birdnest.models.package import FlatpakRecord, InstalledPackage, PackageRecord, UpgradablePackage

# Theme style per source badge
_SOURCE_STYLES: dict[str, str] = {
    "System": "source_system",
    "AUR": "source_aur",
    "Fedora": "source_fedora",
    "Alpine": "source_alpine",
}

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "header": "#f5c542",
        "bold_header": "bold #f5c542",
        "border": "#3d3d3d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "info": "#0ec1c8",
        "source_system": "#808080",
        "source_aur": "#cc8080",
        "source_fedora": "#80a6e6",
        "source_alpine": "#66a6d9",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Packages") -> Table:
    """Create a pre-configured table for displaying package search results.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Source", width=8)
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")
    table.add_column("Size", style="info", justify="right")
    table.add_column("Description", style="text", overflow="ellipsis")
    return table


def format_package_row(record: PackageRecord) -> tuple[str, str, str, str, str]:
    """Format a package record as a table row.

    Args:
        record: The package record to format.

    Returns:
        Tuple of (source, name, version, size, description) with Rich markup.
    """
    label = record.source.value
    style = _SOURCE_STYLES.get(label, "muted")
    return (
        f"[{style}]{label}[/]",
        f"[header]{escape(record.name)}[/]",
        escape(record.version) or "-",
        escape(record.size) or "-",
        escape(record.description) or "-",
    )


def create_installed_table(packages: list[InstalledPackage]) -> Table:
    """Create a table listing installed packages with their versions."""
    table = Table(
        title=f"Installed Packages ({len(packages)})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")
    for pkg in packages:
        table.add_row(escape(pkg.name), escape(pkg.version))
    return table


def create_upgradable_table(packages: list[UpgradablePackage]) -> Table:
    """Create a table of packages with pending upgrades."""
    table = Table(
        title=f"Upgradable Packages ({len(packages)})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Installed", style="muted")
    table.add_column("Available", style="success")
    for pkg in packages:
        table.add_row(escape(pkg.name), escape(pkg.current_version) or "-", escape(pkg.new_version) or "-")
    return table


def create_flatpak_table(records: list[FlatpakRecord], title: str = "Flatpak Applications") -> Table:
    """Create a table listing Flatpak applications."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Application ID", style="info")
    table.add_column("Version", style="muted")
    table.add_column("Description", style="text", overflow="ellipsis")
    for record in records:
        table.add_row(
            f"[header]{escape(record.display_name)}[/]",
            record.application_id,
            escape(record.version) or "-",
            escape(record.description) or "-",
        )
    return table


def create_conflict_panel(handoff: ConflictHandoff) -> Panel:
    """Render a conflict handoff for display.

    Args:
        handoff: Target packages, conflict summary and full command output.

    Returns:
        Rich Panel with the summary, the affected packages and the output.
    """
    if len(handoff.target_packages) == 1:
        title = f"Cannot proceed with {escape(handoff.target_packages[0])}"
    else:
        title = f"Cannot proceed with {len(handoff.target_packages)} packages"

    body = (
        f"[warning]{escape(handoff.summary)}[/]\n\n"
        f"[muted]Packages:[/] {escape(', '.join(handoff.target_packages))}\n\n"
        f"[muted]Output:[/]\n{escape(handoff.output.rstrip())}"
    )
    return Panel(body, title=f"[error]{title}[/]", border_style="error")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")
