"""Base LLM provider interface and common functionality."""

from abc import ABC, abstractmethod
from typing import Dict, List

from ..config import CliConfig
from ..llm_handler import LLMResponse


class ProviderError(Exception):
    """A completion request failed.

    ``fatal`` marks errors that retrying cannot fix, such as bad credentials.
    """

    def __init__(self, message: str, fatal: bool = False):
        super().__init__(message)
        self.fatal = fatal


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    def __init__(self, config: CliConfig):
        self.config = config

    @abstractmethod
    async def generate_response(self, messages: List[Dict[str, str]]) -> LLMResponse:
        """Generate a response from the LLM provider.

        Args:
            messages: List of conversation messages in OpenAI format

        Returns:
            LLMResponse object containing the reply

        Raises:
            ProviderError: if the request fails
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the current model name being used."""
        pass

    @abstractmethod
    def validate_configuration(self) -> bool:
        """Validate that the provider is properly configured."""
        pass
