"""Logging setup for aoaicli using Rich."""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "aoaicli"

# Diagnostics go to stderr so they never mix with model replies on stdout.
_log_console = Console(stderr=True)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the aoaicli namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: Union[str, int] = "warning", show_path: bool = False) -> None:
    """Configure the package logger with a single Rich handler.

    Safe to call more than once; the handler is replaced and the level updated.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=_log_console,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root.addHandler(handler)
    root.setLevel(level)
