"""Utility modules for birdnest.

This module exports commonly used utility functions.
"""

from birdnest.utils.formatting import (
    console,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
)
from birdnest.utils.shell import (
    AuthenticationError,
    CommandLaunchError,
    CommandResult,
    StreamingCommand,
    StreamLine,
    command_exists,
    run_command,
    run_streaming,
)

__all__ = [
    "AuthenticationError",
    "CommandLaunchError",
    "CommandResult",
    "StreamLine",
    "StreamingCommand",
    "command_exists",
    "console",
    "create_package_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "run_command",
    "run_streaming",
]
