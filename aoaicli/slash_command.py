"""Slash command parsing for interactive mode.

Lines starting with ``/`` are local directives handled by the REPL and never
sent to the model. The parser only classifies and validates input; dispatch
is done by :class:`aoaicli.command_proxy.CommandProxy`.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional


@dataclass
class SlashCommandResult:
    """Outcome of parsing a single input line."""

    is_slash_command: bool = False
    command_name: str = ""
    arguments: str = ""
    is_valid: bool = False
    error_message: Optional[str] = None


class SlashCommandParser:
    """Stateless parser for slash commands."""

    VALID_COMMANDS: FrozenSet[str] = frozenset(
        {
            "help",
            "system",
            "history",
            "clear",
            "export",
            "import",
            "merge",
            "quit",
            "exit",
        }
    )

    @classmethod
    def parse(cls, input_text: Optional[str]) -> SlashCommandResult:
        """Parse a raw input line into a slash command result.

        Only the first character of the trimmed line decides whether it is a
        command, so text that merely contains a ``/`` is treated as a prompt.
        """
        result = SlashCommandResult()

        if input_text is None or not input_text.strip():
            return result

        trimmed = input_text.strip()
        if not trimmed.startswith("/"):
            return result

        result.is_slash_command = True

        command_part = trimmed[1:]
        if not command_part.strip():
            result.error_message = "Empty command. Type /help for available commands."
            return result

        name, _, arguments = command_part.partition(" ")
        result.command_name = name.lower()
        result.arguments = arguments.strip()

        if result.command_name in cls.VALID_COMMANDS:
            result.is_valid = True
        else:
            result.error_message = (
                f"Unknown command '/{result.command_name}'. "
                "Type /help for available commands."
            )

        return result

    @classmethod
    def get_valid_commands(cls) -> FrozenSet[str]:
        """Get the set of recognized command names (lowercase)."""
        return cls.VALID_COMMANDS
