"""
Cohere LLM Provider implementation (v2 chat API over httpx).
"""

import logging
from typing import Optional

import httpx

from .provider import AIProviderConfig, BaseAIProvider

logger = logging.getLogger(__name__)


class CohereProvider(BaseAIProvider):
    """
    Provider for Cohere Command models.
    """

    provider_name = "Cohere"
    api_key_env = "COHERE_API_KEY"
    default_model = "command-r-plus"
    default_base_url = "https://api.cohere.com"

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(config, transport)

        self.base_url = (config.base_url or self.default_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json"
            },
            timeout=config.timeout,
            transport=transport
        )

        logger.info(f"Cohere provider initialized with model: {self.model}")

    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        response = await self.client.post(
            "/v2/chat",
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt}
                ],
                "max_tokens": max_tokens,
                "temperature": temperature
            }
        )
        response.raise_for_status()

        data = response.json()
        content = (data.get("message") or {}).get("content") or []

        # Content is a list of blocks; only text blocks carry the answer
        return "".join(
            block.get("text", "")
            for block in content
            if block.get("type") == "text"
        )

    async def aclose(self) -> None:
        await self.client.aclose()
