"""Exit command implementation."""

from ..command_proxy import Command, CommandContext


class ExitCommand(Command):
    """Command to end the session cleanly."""

    def __init__(self, reason: str = "quit"):
        self.reason = reason

    def execute(self, args: str, context: CommandContext) -> str:
        context.exit_result = context.session.end(self.reason)
        return "Goodbye!"

    def get_help(self) -> str:
        return "End the session. 'exit', /quit and /exit all work."
