"""Logging setup for the command-line interface.

Library modules only create loggers; the CLI decides where records go.
"""

import logging

from rich.logging import RichHandler

from birdnest.utils.formatting import err_console

# Namespace shared by every module logger
ROOT_LOGGER = "birdnest"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route birdnest log records to stderr through Rich.

    Args:
        verbose: Log DEBUG records; otherwise only warnings and errors.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=err_console,
        level=level,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
