"""Main entry point for aoaicli with one-shot and interactive modes."""

if __name__ == "__main__" and __package__ is None:
    import sys
    from pathlib import Path

    # Add the project root to the Python path
    project_root = Path(__file__).resolve().parent.parent
    sys.path.insert(0, str(project_root))
    __package__ = "aoaicli"


import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel

from aoaicli.config import (
    CliConfig,
    ConfigurationError,
    load_configuration,
    save_active_model,
    validate_api_setup,
)
from aoaicli.llm_handler import LLMHandler
from aoaicli.logger import setup_logging
from aoaicli.providers import ProviderError
from aoaicli.repl import Repl
from aoaicli.session import ReplSession, SessionExitResult
from aoaicli.ui import console

UNHANDLED_ERROR_EXIT_CODE = 99

app = typer.Typer(
    name="aoaicli",
    help="Chat with an Azure OpenAI deployment from the terminal",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=False,
)

USAGE = """Usage:
  aoaicli <prompt>          - Ask a single question
  aoaicli --interactive     - Start an interactive session
  aoaicli --help            - Show all options"""


def load_env_file():
    """Load a .env file from the working directory, overriding the environment."""
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=True)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        from . import __version__

        console.print(f"aoaicli version {__version__}")
        raise typer.Exit()


def show_config_callback(value: bool):
    """Show current configuration and exit."""
    if value:
        try:
            load_env_file()
            config = load_configuration()
        except ConfigurationError as e:
            console.print(f"[bold red]Error loading configuration:[/bold red] {e}")
            raise typer.Exit(1)

        console.print("\n[bold blue]aoaicli Configuration[/bold blue]")
        console.print(f"Endpoint: [cyan]{config.azure_endpoint or 'not set'}[/cyan]")
        console.print(
            f"API Key: [green]{'✓ Set' if config.azure_api_key else '✗ Not set'}[/green]"
        )
        console.print(f"Active model: [cyan]{config.active_model or 'not set'}[/cyan]")
        if config.available_models:
            console.print(
                f"Available models: [cyan]{', '.join(config.available_models)}[/cyan]"
            )
        console.print(f"API version: [cyan]{config.api_version}[/cyan]")
        console.print(
            f"System prompt: [dim]{escape(config.system_prompt or 'none')}[/dim]"
        )
        console.print(f"Max turns: [cyan]{config.max_turns}[/cyan]")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    query: List[str] = typer.Argument(
        None, help="Prompt to send. Omit it with --interactive."
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Start an interactive chat session"
    ),
    system: Optional[str] = typer.Option(
        None, "--system", "-s", help="Override the system prompt"
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Select the deployment to use (saved as the active model)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug output and detailed error information",
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config-file", "-c", help="Path to custom configuration file"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimize output, show only results"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit.",
    ),
    show_config: Optional[bool] = typer.Option(
        None,
        "--show-config",
        callback=show_config_callback,
        is_eager=True,
        help="Show current configuration and exit.",
    ),
):
    """Main function for aoaicli."""
    if not query and not interactive:
        console.print("[bold red]Error:[/bold red] No prompt provided.")
        console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(1)

    try:
        load_env_file()
        config = load_configuration(
            config_file=config_file,
            debug=debug,
            model_override=model,
            system_prompt=system,
        )
        setup_logging(config.log_level.value)

        if model:
            save_active_model(config.active_model)

        validate_api_setup(config)

        if interactive:
            result = Repl(config).run()
        else:
            result = execute_prompt(" ".join(query), config, quiet)

    except ConfigurationError as e:
        handle_error(e, debug)
        console.print(
            "\n[bold]Tip:[/bold] Put AZUREOPENAIENDPOINT, AZUREOPENAIAPI and "
            "AZUREOPENAIMODEL in a .env file or run `aoaicli --show-config`."
        )
        raise typer.Exit(1)
    except Exception as e:
        handle_error(e, debug)
        raise typer.Exit(UNHANDLED_ERROR_EXIT_CODE)

    if not result.was_clean:
        console.print(f"\n[bold red]Error:[/bold red] {escape(result.exit_reason)}")
    raise typer.Exit(result.exit_code)


def execute_prompt(
    prompt_text: str, config: CliConfig, quiet: bool = False
) -> SessionExitResult:
    """Send a single prompt and display the reply."""
    session = ReplSession(max_turns=config.max_turns)
    session.start(config.system_prompt)
    handler = LLMHandler(config, session)

    try:
        if not quiet:
            with console.status(f"[dim]Thinking with {config.active_model}...[/dim]"):
                reply = asyncio.run(handler.chat(prompt_text))
        else:
            reply = asyncio.run(handler.chat(prompt_text))
    except ProviderError as e:
        return session.end_with_error(str(e))

    display_result(reply, config, quiet)
    return session.end("complete")


def display_result(result: str, config: CliConfig, quiet: bool = False):
    """Display result with appropriate formatting."""
    if not result:
        return

    if quiet or not config.rich_output:
        console.print(result, markup=False, highlight=False)
    else:
        console.print()
        console.print(
            Panel(
                Markdown(result),
                title=f"[bold green]{escape(config.active_model or 'Reply')}[/bold green]",
                border_style="green",
            )
        )


def handle_error(error: Exception, debug: bool = False):
    """Handle and display errors with appropriate formatting."""
    if debug:
        console.print("\n[bold red]Debug Error Details:[/bold red]")
        console.print_exception()
    else:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(error))}")
        console.print("[dim]Use --debug for more details[/dim]")


if __name__ == "__main__":
    app()
