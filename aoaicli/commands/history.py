"""History command implementation for reviewing the conversation."""

from ..command_proxy import Command, CommandContext

PREVIEW_LENGTH = 200


class HistoryCommand(Command):
    """Command to show recent turns of the conversation."""

    def validate_args(self, args: str) -> bool:
        if not args:
            return True
        return args.isdigit() and int(args) > 0

    def execute(self, args: str, context: CommandContext) -> str:
        """Show the last N turns."""
        session = context.session
        turns = int(args) if args else context.config.history_turns

        messages = session.get_history(turns)
        if not messages:
            return "No messages in this conversation yet."

        output = f"Last {len(messages)} messages:\n\n"
        for msg in messages:
            role = msg.role.value.upper()
            content = (
                msg.content[:PREVIEW_LENGTH] + "..."
                if len(msg.content) > PREVIEW_LENGTH
                else msg.content
            )
            output += f"[{role}] {content}\n\n"

        output += f"Turns: {session.get_turn_count()}/{session.max_turns}"
        if session.is_near_limit():
            output += "\nApproaching the turn limit. Use /clear to start fresh."

        return output

    def get_help(self) -> str:
        return """Show conversation history:
  /history                 - Show recent turns
  /history <n>             - Show the last n turns

Examples:
  /history 3               - Show the last 3 turns"""
