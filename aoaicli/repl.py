"""Interactive read-eval-print loop."""

import asyncio
from typing import Callable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from .command_proxy import CommandContext, CommandProxy
from .config import CliConfig
from .llm_handler import LLMHandler
from .logger import get_logger
from .providers import ProviderError
from .session import ReplSession, SessionExitResult
from .slash_command import SlashCommandParser, SlashCommandResult
from .ui import console as default_console

logger = get_logger(__name__)


class Repl:
    """Reads lines, runs slash commands locally and sends the rest to the model."""

    def __init__(
        self,
        config: CliConfig,
        session: Optional[ReplSession] = None,
        handler: Optional[LLMHandler] = None,
        read_input: Optional[Callable[[], str]] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.session = session or ReplSession(max_turns=config.max_turns)
        self.console = console or default_console
        self.handler = handler or LLMHandler(config, self.session)
        self.context = CommandContext(session=self.session, config=config)
        self.proxy = CommandProxy(self.context)
        self._read_input = read_input or self._prompt

    def run(self) -> SessionExitResult:
        """Run the loop until the session ends and return how it ended."""
        self.session.start(self.config.system_prompt)
        self._show_banner()

        while self.session.is_active:
            try:
                line = self._read_input()
            except EOFError:
                self.console.print()
                return self.session.end("Ctrl+D")
            except KeyboardInterrupt:
                self.console.print()
                return self.session.end("Ctrl+C")

            if ReplSession.is_exit_command(line):
                return self.session.end(line.strip().lower())

            if not line or not line.strip():
                continue

            parsed = SlashCommandParser.parse(line)
            if parsed.is_slash_command:
                self._handle_command(parsed)
                continue

            exit_result = self._handle_prompt(line)
            if exit_result is not None:
                return exit_result

        return self.context.exit_result or self.session.end()

    def _prompt(self) -> str:
        return self.console.input("[bold cyan]> [/bold cyan]")

    def _show_banner(self):
        model = self.config.active_model or "no model"
        self.console.print(
            f"[bold blue]aoaicli[/bold blue] interactive mode ([cyan]{escape(model)}[/cyan])"
        )
        self.console.print("[dim]Type /help for commands, /quit or Ctrl+D to leave.[/dim]")

    def _handle_command(self, parsed: SlashCommandResult):
        output = self.proxy.execute(parsed)
        if not output:
            return
        style = "yellow" if not parsed.is_valid else None
        self.console.print(output, style=style, markup=False, highlight=False)

    def _handle_prompt(self, line: str) -> Optional[SessionExitResult]:
        if self.session.is_near_limit():
            self.console.print(
                f"[yellow]Approaching the turn limit "
                f"({self.session.get_turn_count()}/{self.session.max_turns}). "
                "Use /clear to start fresh.[/yellow]"
            )

        try:
            if self.config.rich_output:
                with self.console.status("[dim]Thinking...[/dim]"):
                    reply = asyncio.run(self.handler.chat(line))
            else:
                reply = asyncio.run(self.handler.chat(line))
        except ProviderError as e:
            self.console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            if e.fatal:
                return self.session.end_with_error(str(e))
            logger.debug("Recoverable provider error", exc_info=True)
            return None

        self._display_reply(reply)
        return None

    def _display_reply(self, reply: str):
        if self.config.rich_output:
            self.console.print(Markdown(reply))
        else:
            self.console.print(reply, markup=False, highlight=False)
        self.console.print()
