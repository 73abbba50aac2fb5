"""
Anthropic (Claude) LLM Provider implementation.
"""

import logging
from typing import Optional

import anthropic
import httpx

from .provider import AIProviderConfig, BaseAIProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseAIProvider):
    """
    Provider for Anthropic's Claude models.

    Supports:
    - Claude 3.5 Sonnet
    - Claude 3 Opus
    - Claude 3 Haiku
    """

    provider_name = "Anthropic"
    api_key_env = "ANTHROPIC_API_KEY"
    default_model = "claude-3-5-sonnet-20241022"

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Anthropic provider.

        Args:
            config: Provider configuration
            transport: Optional httpx transport for the SDK's HTTP client
        """
        super().__init__(config, transport)

        # Retries are handled by generate_title
        client_args = {
            "api_key": config.api_key,
            "timeout": config.timeout,
            "max_retries": 0
        }
        if config.base_url:
            client_args["base_url"] = config.base_url
        if transport is not None:
            client_args["http_client"] = httpx.AsyncClient(transport=transport)

        self.client = anthropic.AsyncAnthropic(**client_args)

        logger.info(f"Anthropic provider initialized with model: {self.model}")

    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        response = await self.client.messages.create(
            model=self.model,
            system=system,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature
        )

        logger.debug(f"Response received: stop_reason={response.stop_reason}")
        if getattr(response, "usage", None):
            logger.debug(
                f"Token usage: input={response.usage.input_tokens}, "
                f"output={response.usage.output_tokens}"
            )

        return "".join(
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        )

    async def aclose(self) -> None:
        await self.client.close()
