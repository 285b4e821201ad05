"""Help command implementation for showing available commands."""

from ..command_proxy import Command, CommandContext


class HelpCommand(Command):
    """Command to show help information."""

    def execute(self, args: str, context: CommandContext) -> str:
        """Show help information."""
        if args:
            return self._show_command_help(args.split()[0], context)
        return self._show_general_help()

    def _show_general_help(self) -> str:
        """Show general help with all available commands."""
        return """aoaicli - Azure OpenAI chat

Type a message to send it to the model. Lines starting with / are commands.

AVAILABLE COMMANDS:
  /help [command]             - Show help (this message)
  /system [prompt]            - Show or change the system prompt
  /history [n]                - Show the last n turns
  /clear                      - Clear the conversation (keeps system prompt)
  /export <file> [--format]   - Save the conversation (json or markdown)
  /import <file>              - Restart from a saved conversation
  /merge <file>               - Append a saved conversation
  /quit, /exit                - Leave the session (so does plain 'exit')

Ctrl+D also ends the session.

For command-specific help: /help <command>"""

    def _show_command_help(self, command_name: str, context: CommandContext) -> str:
        """Show help for a specific command."""
        command_name = command_name.lstrip("/").lower()
        command = context.commands.get(command_name)

        if command is not None:
            return f"Help for /{command_name}:\n\n{command.get_help()}"

        available_commands = ", ".join(f"/{name}" for name in sorted(context.commands))
        return (
            f"Unknown command: /{command_name}\n\n"
            f"Available commands: {available_commands}\n\n"
            "Use '/help' for full help."
        )

    def get_help(self) -> str:
        """Get help text for the help command."""
        return """Show help information:
  /help                    - Show general help and all commands
  /help <command>          - Show help for specific command

Examples:
  /help export             - Show help for the export command"""
