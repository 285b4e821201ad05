"""Azure OpenAI provider implementation for aoaicli."""

from typing import Dict, List

import openai
from openai import AsyncAzureOpenAI

from ..config import CliConfig
from ..llm_handler import LLMResponse
from ..logger import get_logger
from .base import LLMProvider, ProviderError

logger = get_logger(__name__)


class AzureOpenAIProvider(LLMProvider):
    """Chat completions against an Azure OpenAI deployment."""

    def __init__(self, config: CliConfig):
        super().__init__(config)
        self.client = AsyncAzureOpenAI(
            azure_endpoint=config.azure_endpoint,
            api_key=config.azure_api_key,
            api_version=config.api_version,
        )
        self.model = config.active_model

    async def generate_response(self, messages: List[Dict[str, str]]) -> LLMResponse:
        """Generate response using the Azure OpenAI chat completions API."""
        request_params = {
            "model": self.model,
            "messages": messages,
            "max_completion_tokens": self.config.max_output_tokens,
            "temperature": self.config.temperature,
            "top_p": self.config.top_p,
            "frequency_penalty": self.config.frequency_penalty,
            "presence_penalty": self.config.presence_penalty,
        }

        try:
            response = await self.client.chat.completions.create(**request_params)
        except openai.AuthenticationError as e:
            logger.debug("Authentication failed: %s", e)
            raise ProviderError(
                "Authentication failed. Please check your Azure OpenAI API key.",
                fatal=True,
            ) from e
        except openai.RateLimitError as e:
            raise ProviderError(
                "Rate limit exceeded. Please try again in a moment."
            ) from e
        except openai.APIError as e:
            raise ProviderError(f"Azure OpenAI API error: {e}") from e

        choice = response.choices[0]
        content = choice.message.content or ""

        usage = (
            {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
            if response.usage
            else None
        )
        if usage:
            logger.debug("Token usage: %s", usage)

        return LLMResponse(
            content=content,
            model=self.model,
            usage=usage,
            finish_reason=choice.finish_reason,
        )

    def get_model_name(self) -> str:
        """Get the current deployment name."""
        return self.model or ""

    def validate_configuration(self) -> bool:
        """Validate Azure OpenAI configuration."""
        return self.config.validate_current_setup()
