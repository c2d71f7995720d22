"""Shared helpers for CLI commands.

Resolves the configured package manager into backend/operator pairs,
runs install/remove/upgrade operations, and streams maintenance
commands with console output.
"""

import typer
from rich.markup import escape

from birdnest.backends.apt import AptBackend
from birdnest.backends.base import Backend
from birdnest.backends.flatpak import FlatpakBackend
from birdnest.backends.pikman import PikmanBackend
from birdnest.core.config import BirdnestConfig, ConfigError, detect_package_manager, load_config
from birdnest.core.operation import Operation
from birdnest.models.conflict import ConflictHandoff
from birdnest.models.operation import OperationKind, OperationPhase
from birdnest.models.package import DistroFilter
from birdnest.operators.apt import AptOperator
from birdnest.operators.base import OperationCommand, Operator
from birdnest.operators.flatpak import FlatpakOperator
from birdnest.operators.pikman import PikmanOperator
from birdnest.utils.formatting import (
    console,
    create_conflict_panel,
    create_upgradable_table,
    print_error,
    print_info,
    print_success,
)
from birdnest.utils.shell import AUTH_FAILED_MESSAGE, AUTH_FAILURE_CODES, CommandLaunchError, run_streaming


def require_config() -> BirdnestConfig:
    """Load the configuration or exit with an error message.

    Raises:
        typer.Exit: If the config file is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def get_system_pair(
    config: BirdnestConfig,
    distro: DistroFilter = DistroFilter.DEFAULT,
) -> tuple[Backend, Operator]:
    """Return the backend and operator for the system package manager.

    A distro other than DEFAULT always selects pikman.

    Args:
        config: Loaded settings.
        distro: Guest distribution for pikman.

    Returns:
        Tuple of (backend, operator).
    """
    if distro is not DistroFilter.DEFAULT or detect_package_manager(config) == "pikman":
        return PikmanBackend(distro), PikmanOperator(distro)
    return AptBackend(), AptOperator()


def get_flatpak_pair(config: BirdnestConfig) -> tuple[FlatpakBackend, FlatpakOperator]:
    """Return the Flatpak backend and operator.

    Raises:
        typer.Exit: If Flatpak support is disabled in the config.
    """
    if not config.flatpak_enabled:
        print_error("Flatpak support is disabled in the configuration.")
        raise typer.Exit(code=1)
    return FlatpakBackend(), FlatpakOperator()


def _show_conflict(handoff: ConflictHandoff) -> None:
    console.print(create_conflict_panel(handoff))


def run_operation(
    kind: OperationKind,
    packages: list[str],
    backend: Backend,
    operator: Operator,
    *,
    yes: bool,
) -> None:
    """Load details, confirm and run an install, remove or upgrade.

    Args:
        kind: Install, remove or upgrade.
        packages: Target package names or application IDs; an upgrade
            without targets upgrades everything.
        backend: Backend to load details from.
        operator: Operator building the command.
        yes: Skip the confirmation prompt.

    Raises:
        typer.Exit: With code 1 unless the operation completes or is declined.
    """
    operation = Operation(
        kind,
        packages,
        backend,
        operator,
        on_conflict=_show_conflict,
        on_output=lambda line: console.print(f"[muted]{escape(line)}[/]"),
    )

    with console.status("Loading package information..."):
        details = operation.load_details()

    if operation.phase is OperationPhase.FAILED:
        print_error(operation.error or "Failed to load package information")
        raise typer.Exit(code=1)

    for detail in details:
        console.print(
            f"[header]{escape(detail.name)}[/] [muted]{escape(detail.version)}[/]"
            f"  {escape(detail.size)}\n  {escape(detail.description)}"
        )

    if packages:
        prompt = f"{kind.value.capitalize()} {len(packages)} package(s)?"
    else:
        prompt = f"{kind.value.capitalize()} all packages?"
    if not yes and not typer.confirm(prompt, default=False):
        operation.decline()
        print_info(f"{kind.verb} cancelled.")
        return

    phase = operation.execute()

    if phase is OperationPhase.COMPLETE:
        print_success(operation.status)
        return
    if phase is OperationPhase.FAILED:
        print_error(operation.error or f"{kind.verb} failed")
    raise typer.Exit(code=1)


def stream_commands(commands: list[OperationCommand]) -> int:
    """Run commands one after another, printing their output as it arrives.

    Stops at the first command that exits non-zero.

    Args:
        commands: Commands to run, in order.

    Returns:
        Exit code of the last command that ran.

    Raises:
        typer.Exit: If a command cannot be launched or authentication fails.
    """
    returncode = 0
    for command in commands:
        try:
            stream = run_streaming(list(command.args), elevate=command.elevate, env=command.env or None)
            for line in stream:
                console.print(f"[muted]{escape(line.text)}[/]")
        except CommandLaunchError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

        if stream.elevated and stream.returncode in AUTH_FAILURE_CODES:
            print_error(AUTH_FAILED_MESSAGE)
            raise typer.Exit(code=1)
        returncode = stream.returncode if stream.returncode is not None else -1
        if returncode != 0:
            break
    return returncode


def print_upgradable(backend: Backend, needle: str | None = None) -> None:
    """Print the packages with pending upgrades as a table.

    Args:
        backend: Backend to query.
        needle: Lower-case text that package names must contain.

    Raises:
        typer.Exit: If the listing command fails.
    """
    try:
        packages = backend.upgradable()
    except RuntimeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if needle:
        packages = [p for p in packages if needle in p.name.lower()]
    if not packages:
        print_info("All packages are up to date.")
        return
    console.print(create_upgradable_table(packages))
