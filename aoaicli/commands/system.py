"""System command implementation for the session's system prompt."""

from ..command_proxy import Command, CommandContext


class SystemCommand(Command):
    """Command to show or replace the system prompt."""

    def execute(self, args: str, context: CommandContext) -> str:
        if not args:
            current = context.session.system_prompt
            if not current:
                return "No system prompt set. Use /system <prompt> to set one."
            return f"Current system prompt:\n{current}"

        context.session.set_system_prompt(args)
        return "System prompt updated."

    def get_help(self) -> str:
        return """Show or change the system prompt:
  /system                  - Show the current system prompt
  /system <prompt>         - Replace the system prompt

Examples:
  /system You are a concise assistant."""
