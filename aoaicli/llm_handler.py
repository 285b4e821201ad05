"""LLM handler bridging the chat session and the completion provider."""

from typing import Any, Dict, List, Optional

from .config import CliConfig
from .logger import get_logger
from .session import ReplSession

logger = get_logger(__name__)


class LLMResponse:
    """Represents a response from an LLM provider."""

    def __init__(
        self,
        content: str,
        model: Optional[str] = None,
        usage: Optional[Dict[str, Any]] = None,
        finish_reason: Optional[str] = None,
    ):
        self.content = content
        self.model = model
        self.usage = usage
        self.finish_reason = finish_reason

    def __repr__(self):
        return f"LLMResponse(model='{self.model}', content={self.content[:40]!r})"


class LLMHandler:
    """Sends the session's conversation to the provider and records replies."""

    def __init__(self, config: CliConfig, session: ReplSession, provider=None):
        self.config = config
        self.session = session
        self.provider = provider or self._get_provider()

    async def chat(self, message: str) -> str:
        """Add a user message, get the model's reply and record it.

        Provider failures propagate as ``ProviderError``; the user message
        stays in the session in that case.
        """
        self.session.add_user_message(message)

        context_messages = self._get_conversation_context()
        logger.debug(
            "Sending %d messages to %s",
            len(context_messages),
            self.provider.get_model_name(),
        )

        response = await self.provider.generate_response(messages=context_messages)

        self.session.add_assistant_message(response.content)
        return response.content

    def _get_provider(self):
        """Get the completion provider for the configuration."""
        from .providers import AzureOpenAIProvider

        return AzureOpenAIProvider(self.config)

    def _get_conversation_context(self) -> List[Dict[str, str]]:
        """Build the message list: system prompt first, then recent turns."""
        messages = []

        if self.session.system_prompt:
            messages.append({"role": "system", "content": self.session.system_prompt})

        for entry in self.session.get_history(self.config.history_turns):
            messages.append({"role": entry.role.value, "content": entry.content})

        return messages
