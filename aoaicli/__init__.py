"""aoaicli - Azure OpenAI chat from the command line.

The package provides a one-shot prompt mode and an interactive session mode:

- Prompts: free text is sent to the configured Azure OpenAI deployment
- Slash commands: lines starting with / are handled locally (/help, /system,
  /history, /clear, /export, /import, /merge, /quit, /exit)

The session keeps the conversation (an optional system prompt plus the user
and assistant turns) and decides when the process exits and with which code.
"""

from .command_proxy import CommandProxy
from .config import CliConfig
from .llm_handler import LLMHandler
from .main import app
from .session import ReplSession, SessionExitResult, SessionStateError
from .slash_command import SlashCommandParser, SlashCommandResult

__version__ = "0.1.0"

__all__ = [
    "app",
    "CliConfig",
    "LLMHandler",
    "CommandProxy",
    "ReplSession",
    "SessionExitResult",
    "SessionStateError",
    "SlashCommandParser",
    "SlashCommandResult",
]
