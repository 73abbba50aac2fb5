"""
Providers speaking the OpenAI chat-completions protocol over httpx.

OpenAI, Mistral, xAI and the OpenAI-compatible hosted inference services
differ only in their base URL, API key variable and default model.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .provider import AIProviderConfig, BaseAIProvider

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(BaseAIProvider):
    """
    Provider for any endpoint implementing ``POST /chat/completions``.
    """

    provider_name = "OpenAI"
    api_key_env = "OPENAI_API_KEY"
    default_model = "gpt-4o-mini"
    default_base_url = "https://api.openai.com/v1"

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(config, transport)

        self.base_url = (config.base_url or self.default_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=config.timeout,
            transport=transport
        )

        logger.info(f"{self.provider_name} provider initialized with model: {self.model}")

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _completion_path(self) -> str:
        return "/chat/completions"

    def _payload(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt}
            ],
            "max_tokens": max_tokens,
            "temperature": temperature
        }

    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        response = await self.client.post(
            self._completion_path(),
            json=self._payload(system, prompt, max_tokens, temperature)
        )
        response.raise_for_status()

        data = response.json()

        usage = data.get("usage")
        if usage:
            logger.debug(
                f"Token usage: input={usage.get('prompt_tokens')}, "
                f"output={usage.get('completion_tokens')}"
            )

        choices = data.get("choices") or []
        if not choices:
            logger.warning(f"{self.provider_name} returned no choices")
            return ""

        return (choices[0].get("message") or {}).get("content") or ""

    async def aclose(self) -> None:
        await self.client.aclose()


class OpenAIProvider(OpenAICompatibleProvider):
    """Provider for OpenAI GPT models"""
    pass


class MistralProvider(OpenAICompatibleProvider):
    """Provider for Mistral AI models"""
    provider_name = "Mistral"
    api_key_env = "MISTRAL_API_KEY"
    default_model = "mistral-large-latest"
    default_base_url = "https://api.mistral.ai/v1"


class XAIProvider(OpenAICompatibleProvider):
    """Provider for xAI Grok models"""
    provider_name = "XAI"
    api_key_env = "XAI_API_KEY"
    default_model = "grok-beta"
    default_base_url = "https://api.x.ai/v1"


class DeepSeekProvider(OpenAICompatibleProvider):
    provider_name = "DeepSeek"
    api_key_env = "DEEPSEEK_API_KEY"
    default_model = "deepseek-chat"
    default_base_url = "https://api.deepseek.com/v1"


class GroqProvider(OpenAICompatibleProvider):
    provider_name = "Groq"
    api_key_env = "GROQ_API_KEY"
    default_model = "llama-3.3-70b-versatile"
    default_base_url = "https://api.groq.com/openai/v1"


class OpenRouterProvider(OpenAICompatibleProvider):
    provider_name = "OpenRouter"
    api_key_env = "OPENROUTER_API_KEY"
    default_model = "openai/gpt-4o-mini"
    default_base_url = "https://openrouter.ai/api/v1"


class TogetherAIProvider(OpenAICompatibleProvider):
    provider_name = "TogetherAI"
    api_key_env = "TOGETHER_AI_API_KEY"
    default_model = "meta-llama/Llama-3.3-70B-Instruct-Turbo"
    default_base_url = "https://api.together.xyz/v1"


class FireworksProvider(OpenAICompatibleProvider):
    provider_name = "Fireworks"
    api_key_env = "FIREWORKS_API_KEY"
    default_model = "accounts/fireworks/models/llama-v3p1-70b-instruct"
    default_base_url = "https://api.fireworks.ai/inference/v1"


class DeepInfraProvider(OpenAICompatibleProvider):
    provider_name = "DeepInfra"
    api_key_env = "DEEPINFRA_API_KEY"
    default_model = "meta-llama/Meta-Llama-3.1-70B-Instruct"
    default_base_url = "https://api.deepinfra.com/v1/openai"


class CerebrasProvider(OpenAICompatibleProvider):
    provider_name = "Cerebras"
    api_key_env = "CEREBRAS_API_KEY"
    default_model = "llama3.1-8b"
    default_base_url = "https://api.cerebras.ai/v1"


class PerplexityProvider(OpenAICompatibleProvider):
    provider_name = "Perplexity"
    api_key_env = "PERPLEXITY_API_KEY"
    default_model = "sonar"
    default_base_url = "https://api.perplexity.ai"


class AzureOpenAIProvider(OpenAICompatibleProvider):
    """
    Provider for Azure OpenAI deployments.

    The model name is the deployment name; the resource endpoint must be
    given as the base URL (``https://<resource>.openai.azure.com``).
    """

    provider_name = "Azure"
    api_key_env = "AZURE_API_KEY"
    default_model = "gpt-4o-mini"
    default_base_url = ""
    api_version = "2024-10-21"

    def _validate_auth(self) -> None:
        super()._validate_auth()
        if not self.config.base_url:
            raise ValueError("AZURE_BASE_URL is required for Azure")

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "api-key": self.config.api_key
        }

    def _completion_path(self) -> str:
        return (
            f"/openai/deployments/{self.model}/chat/completions"
            f"?api-version={self.api_version}"
        )

    def _payload(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> Dict[str, Any]:
        payload = super()._payload(system, prompt, max_tokens, temperature)
        # Deployment is selected by the URL
        del payload["model"]
        return payload
