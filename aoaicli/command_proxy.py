"""Command proxy system for handling slash-prefixed commands."""

import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import CliConfig
from .logger import get_logger
from .session import ReplSession, SessionExitResult, SessionStateError
from .slash_command import SlashCommandParser, SlashCommandResult

logger = get_logger(__name__)


@dataclass
class CommandContext:
    """State shared with command handlers."""

    session: ReplSession
    config: CliConfig
    exit_result: Optional[SessionExitResult] = None
    commands: Dict[str, "Command"] = field(default_factory=dict)


class Command(ABC):
    """Abstract base class for all commands."""

    @abstractmethod
    def execute(self, args: str, context: CommandContext) -> str:
        """Execute the command with the given argument string."""
        pass

    @abstractmethod
    def get_help(self) -> str:
        """Get help text for this command."""
        pass

    def validate_args(self, args: str) -> bool:
        """Validate command arguments. Override if needed."""
        return True


class CommandProxy:
    """Routes parsed slash commands to their handlers."""

    def __init__(self, context: CommandContext):
        self.context = context
        self.commands = self._register_commands()
        context.commands = self.commands

    def execute(self, result: SlashCommandResult) -> str:
        """Execute a parsed slash command and return its output."""
        if not result.is_slash_command:
            return ""

        if not result.is_valid:
            return result.error_message or "Invalid command."

        handler = self.commands.get(result.command_name)
        if handler is None:
            return (
                f"Unknown command '/{result.command_name}'. "
                "Type /help for available commands."
            )

        if not handler.validate_args(result.arguments):
            return f"Invalid arguments for /{result.command_name}\n{handler.get_help()}"

        logger.debug("Running /%s", result.command_name)

        try:
            return handler.execute(result.arguments, self.context)
        except SessionStateError:
            raise
        except Exception as e:
            logger.debug("/%s failed", result.command_name, exc_info=True)
            if self.context.config.show_debug:
                return f"Command execution error: {e}\n{traceback.format_exc()}"
            return f"Command execution error: {e}"

    def _register_commands(self) -> Dict[str, Command]:
        """Register a handler for every recognized command."""
        from .commands import (
            ClearCommand,
            ExitCommand,
            ExportCommand,
            HelpCommand,
            HistoryCommand,
            ImportCommand,
            MergeCommand,
            SystemCommand,
        )

        commands: Dict[str, Command] = {
            "help": HelpCommand(),
            "system": SystemCommand(),
            "history": HistoryCommand(),
            "clear": ClearCommand(),
            "export": ExportCommand(),
            "import": ImportCommand(),
            "merge": MergeCommand(),
            "quit": ExitCommand("/quit"),
            "exit": ExitCommand("/exit"),
        }

        missing = SlashCommandParser.get_valid_commands() - set(commands)
        if missing:
            raise RuntimeError(f"No handler for commands: {', '.join(sorted(missing))}")

        return commands

    def get_available_commands(self) -> List[str]:
        """Get list of available command names."""
        return sorted(self.commands.keys())

    def get_command_help(self, command: str) -> Optional[str]:
        """Get help for a specific command."""
        command = command.lstrip("/").lower()
        if command in self.commands:
            return self.commands[command].get_help()
        return None
