"""
Google Gemini LLM Provider implementation.
"""

import logging
from typing import Optional

import httpx
from google import genai
from google.genai import types

from .provider import AIProviderConfig, BaseAIProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseAIProvider):
    """
    Provider for Google Gemini models.

    Supports:
    - Gemini 1.5 Pro
    - Gemini 1.5 Flash
    - Gemini Pro
    """

    provider_name = "Google"
    api_key_env = "GOOGLE_GENERATIVE_AI_API_KEY"
    default_model = "gemini-1.5-flash"

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Gemini provider.

        Args:
            config: Provider configuration
            transport: Unused, the SDK manages its own HTTP client
        """
        super().__init__(config, transport)

        http_options = None
        if config.base_url:
            http_options = types.HttpOptions(base_url=config.base_url)

        self.client = genai.Client(api_key=config.api_key, http_options=http_options)

        logger.info(f"Gemini provider initialized with model: {self.model}")

    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=temperature,
            max_output_tokens=max_tokens
        )

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=config
        )

        if getattr(response, "usage_metadata", None):
            logger.debug(
                f"Token usage: input={response.usage_metadata.prompt_token_count}, "
                f"output={response.usage_metadata.candidates_token_count}"
            )

        return response.text or ""
