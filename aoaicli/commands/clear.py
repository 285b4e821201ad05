"""Clear command implementation for clearing the conversation."""

from ..command_proxy import Command, CommandContext


class ClearCommand(Command):
    """Command to clear the conversation while keeping the system prompt."""

    def execute(self, args: str, context: CommandContext) -> str:
        """Clear conversation history."""
        context.session.clear_history()
        if context.session.system_prompt:
            return "Conversation cleared. System prompt kept."
        return "Conversation cleared."

    def get_help(self) -> str:
        """Get help text for the clear command."""
        return """Clear conversation history:
  /clear                   - Remove all messages except the system prompt"""
