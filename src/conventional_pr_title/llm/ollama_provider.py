"""
Ollama LLM Provider implementation for local models.
"""

import logging
from typing import Dict, Optional

import httpx

from .provider import AIProviderConfig, BaseAIProvider

logger = logging.getLogger(__name__)


class OllamaProvider(BaseAIProvider):
    """
    Provider for Ollama local models.

    Supports any model pulled into the Ollama server (llama3.x, qwen2.5,
    mistral, ...). No API key is needed for a local server; when one is
    given it is sent as a bearer token for hosted or proxied instances.
    """

    provider_name = "Ollama"
    api_key_env = "OLLAMA_API_KEY"
    api_key_optional = True
    default_model = "llama3.2"
    default_base_url = "http://localhost:11434"

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(config, transport)

        self.base_url = (config.base_url or self.default_base_url).rstrip("/")

        # Local inference can be slow to produce the first token
        timeout_config = httpx.Timeout(
            connect=10.0,
            read=config.timeout,
            write=30.0,
            pool=10.0
        )

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=timeout_config,
            transport=transport
        )

        logger.info(f"Ollama provider initialized at {self.base_url} with model: {self.model}")

    def _headers(self) -> Dict[str, str]:
        if self.config.api_key:
            return {"Authorization": f"Bearer {self.config.api_key}"}
        return {}

    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        response = await self.client.post(
            "/api/chat",
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt}
                ],
                "stream": False,
                "options": {
                    "temperature": temperature,
                    "num_predict": max_tokens
                }
            }
        )
        response.raise_for_status()

        data = response.json()

        if "prompt_eval_count" in data:
            logger.debug(
                f"Token usage: input={data.get('prompt_eval_count')}, "
                f"output={data.get('eval_count')}"
            )

        return (data.get("message") or {}).get("content") or ""

    async def aclose(self) -> None:
        await self.client.aclose()
