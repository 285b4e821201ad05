"""Built-in slash command implementations."""

from .clear import ClearCommand
from .exit import ExitCommand
from .help import HelpCommand
from .history import HistoryCommand
from .system import SystemCommand
from .transcript import ExportCommand, ImportCommand, MergeCommand

__all__ = [
    "HelpCommand",
    "SystemCommand",
    "HistoryCommand",
    "ClearCommand",
    "ExportCommand",
    "ImportCommand",
    "MergeCommand",
    "ExitCommand",
]
