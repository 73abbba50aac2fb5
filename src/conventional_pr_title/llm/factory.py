"""
Provider registry - maps provider identifiers to implementations.

The registry is an explicit object created once per run and injected into
the service. It caches provider instances per (provider, model, base URL).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

import httpx

from ..errors import UnsupportedProviderError
from .provider import AIProvider, AIProviderConfig, BaseAIProvider
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider
from .cohere_provider import CohereProvider
from .ollama_provider import OllamaProvider
from .claude_code_provider import ClaudeCodeProvider
from .openai_compatible import (
    AzureOpenAIProvider,
    CerebrasProvider,
    DeepInfraProvider,
    DeepSeekProvider,
    FireworksProvider,
    GroqProvider,
    MistralProvider,
    OpenAIProvider,
    OpenRouterProvider,
    PerplexityProvider,
    TogetherAIProvider,
    XAIProvider
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderInfo:
    """Static description of a supported provider"""
    name: str
    required_api_key: str  # environment variable holding the key
    default_model: str
    supported_models: Tuple[str, ...]
    provider_class: Type[BaseAIProvider]
    default_base_url: Optional[str] = None
    base_url_env: Optional[str] = None
    api_key_optional: bool = False


@dataclass(frozen=True)
class ProviderCacheKey:
    """Identity of a cached provider instance"""
    provider: str
    model: str
    base_url: Optional[str]


PROVIDERS: Dict[str, ProviderInfo] = {
    "openai": ProviderInfo(
        name="OpenAI",
        required_api_key="OPENAI_API_KEY",
        default_model="gpt-4o-mini",
        supported_models=("gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo"),
        provider_class=OpenAIProvider,
        default_base_url="https://api.openai.com/v1",
        base_url_env="OPENAI_BASE_URL"
    ),
    "anthropic": ProviderInfo(
        name="Anthropic",
        required_api_key="ANTHROPIC_API_KEY",
        default_model="claude-3-5-sonnet-20241022",
        supported_models=(
            "claude-3-5-sonnet-20241022",
            "claude-3-haiku-20240307",
            "claude-3-opus-20240229",
        ),
        provider_class=AnthropicProvider,
        base_url_env="ANTHROPIC_BASE_URL"
    ),
    "google": ProviderInfo(
        name="Google",
        required_api_key="GOOGLE_GENERATIVE_AI_API_KEY",
        default_model="gemini-1.5-flash",
        supported_models=("gemini-1.5-pro", "gemini-1.5-flash", "gemini-pro"),
        provider_class=GeminiProvider,
        base_url_env="GOOGLE_BASE_URL"
    ),
    "mistral": ProviderInfo(
        name="Mistral",
        required_api_key="MISTRAL_API_KEY",
        default_model="mistral-large-latest",
        supported_models=(
            "mistral-large-latest",
            "mistral-medium-latest",
            "mistral-small-latest",
        ),
        provider_class=MistralProvider,
        default_base_url="https://api.mistral.ai/v1",
        base_url_env="MISTRAL_BASE_URL"
    ),
    "xai": ProviderInfo(
        name="XAI",
        required_api_key="XAI_API_KEY",
        default_model="grok-beta",
        supported_models=("grok-beta", "grok-vision-beta"),
        provider_class=XAIProvider,
        default_base_url="https://api.x.ai/v1",
        base_url_env="XAI_BASE_URL"
    ),
    "cohere": ProviderInfo(
        name="Cohere",
        required_api_key="COHERE_API_KEY",
        default_model="command-r-plus",
        supported_models=("command-r-plus", "command-r", "command-light"),
        provider_class=CohereProvider,
        default_base_url="https://api.cohere.com",
        base_url_env="COHERE_BASE_URL"
    ),
    "azure": ProviderInfo(
        name="Azure",
        required_api_key="AZURE_API_KEY",
        default_model="gpt-4o-mini",
        supported_models=("gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-35-turbo"),
        provider_class=AzureOpenAIProvider,
        base_url_env="AZURE_BASE_URL"
    ),
    "claude-code": ProviderInfo(
        name="Claude Code",
        required_api_key="CLAUDE_CODE_API_KEY",
        default_model="sonnet",
        supported_models=("sonnet", "opus", "claude-3-5-sonnet-20241022"),
        provider_class=ClaudeCodeProvider,
        api_key_optional=True
    ),
    "ollama": ProviderInfo(
        name="Ollama",
        required_api_key="OLLAMA_API_KEY",
        default_model="llama3.2",
        supported_models=("llama3.2", "llama3.1", "qwen2.5", "mistral"),
        provider_class=OllamaProvider,
        default_base_url="http://localhost:11434",
        base_url_env="OLLAMA_BASE_URL",
        api_key_optional=True
    ),
    "deepseek": ProviderInfo(
        name="DeepSeek",
        required_api_key="DEEPSEEK_API_KEY",
        default_model="deepseek-chat",
        supported_models=("deepseek-chat", "deepseek-reasoner"),
        provider_class=DeepSeekProvider,
        default_base_url="https://api.deepseek.com/v1",
        base_url_env="DEEPSEEK_BASE_URL"
    ),
    "groq": ProviderInfo(
        name="Groq",
        required_api_key="GROQ_API_KEY",
        default_model="llama-3.3-70b-versatile",
        supported_models=(
            "llama-3.3-70b-versatile",
            "llama-3.1-8b-instant",
            "mixtral-8x7b-32768",
        ),
        provider_class=GroqProvider,
        default_base_url="https://api.groq.com/openai/v1",
        base_url_env="GROQ_BASE_URL"
    ),
    "openrouter": ProviderInfo(
        name="OpenRouter",
        required_api_key="OPENROUTER_API_KEY",
        default_model="openai/gpt-4o-mini",
        supported_models=(
            "openai/gpt-4o-mini",
            "anthropic/claude-3.5-sonnet",
            "google/gemini-flash-1.5",
        ),
        provider_class=OpenRouterProvider,
        default_base_url="https://openrouter.ai/api/v1",
        base_url_env="OPENROUTER_BASE_URL"
    ),
    "togetherai": ProviderInfo(
        name="TogetherAI",
        required_api_key="TOGETHER_AI_API_KEY",
        default_model="meta-llama/Llama-3.3-70B-Instruct-Turbo",
        supported_models=(
            "meta-llama/Llama-3.3-70B-Instruct-Turbo",
            "mistralai/Mixtral-8x7B-Instruct-v0.1",
        ),
        provider_class=TogetherAIProvider,
        default_base_url="https://api.together.xyz/v1",
        base_url_env="TOGETHER_AI_BASE_URL"
    ),
    "fireworks": ProviderInfo(
        name="Fireworks",
        required_api_key="FIREWORKS_API_KEY",
        default_model="accounts/fireworks/models/llama-v3p1-70b-instruct",
        supported_models=(
            "accounts/fireworks/models/llama-v3p1-70b-instruct",
            "accounts/fireworks/models/llama-v3p1-8b-instruct",
        ),
        provider_class=FireworksProvider,
        default_base_url="https://api.fireworks.ai/inference/v1",
        base_url_env="FIREWORKS_BASE_URL"
    ),
    "deepinfra": ProviderInfo(
        name="DeepInfra",
        required_api_key="DEEPINFRA_API_KEY",
        default_model="meta-llama/Meta-Llama-3.1-70B-Instruct",
        supported_models=(
            "meta-llama/Meta-Llama-3.1-70B-Instruct",
            "meta-llama/Meta-Llama-3.1-8B-Instruct",
        ),
        provider_class=DeepInfraProvider,
        default_base_url="https://api.deepinfra.com/v1/openai",
        base_url_env="DEEPINFRA_BASE_URL"
    ),
    "cerebras": ProviderInfo(
        name="Cerebras",
        required_api_key="CEREBRAS_API_KEY",
        default_model="llama3.1-8b",
        supported_models=("llama3.1-8b", "llama3.1-70b"),
        provider_class=CerebrasProvider,
        default_base_url="https://api.cerebras.ai/v1",
        base_url_env="CEREBRAS_BASE_URL"
    ),
    "perplexity": ProviderInfo(
        name="Perplexity",
        required_api_key="PERPLEXITY_API_KEY",
        default_model="sonar",
        supported_models=("sonar", "sonar-pro"),
        provider_class=PerplexityProvider,
        default_base_url="https://api.perplexity.ai",
        base_url_env="PERPLEXITY_BASE_URL"
    ),
}


class ProviderRegistry:
    """
    Creates and caches provider instances.

    Identical (provider, model, base URL) keys always return the same
    instance for the lifetime of the registry.
    """

    def __init__(
        self,
        providers: Optional[Dict[str, ProviderInfo]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the registry.

        Args:
            providers: Provider table (defaults to PROVIDERS)
            transport: Optional httpx transport handed to HTTP-based providers
        """
        self.providers = dict(providers) if providers is not None else dict(PROVIDERS)
        self.transport = transport
        self._cache: Dict[ProviderCacheKey, AIProvider] = {}

    def _lookup(self, provider_id: str) -> ProviderInfo:
        info = self.providers.get(provider_id)
        if info is None:
            raise UnsupportedProviderError(f"Unsupported provider: {provider_id}")
        return info

    def create(self, provider_id: str, config: AIProviderConfig) -> AIProvider:
        """
        Get a provider instance, creating it on first use.

        Args:
            provider_id: Provider identifier (e.g. "openai")
            config: Provider configuration

        Returns:
            Cached or newly created provider

        Raises:
            UnsupportedProviderError: If the provider is unknown
            ValueError: If the provider rejects the configuration
        """
        info = self.providers.get(provider_id)
        if info is None:
            raise UnsupportedProviderError(f"Unsupported AI provider: {provider_id}")

        key = ProviderCacheKey(
            provider=provider_id,
            model=config.model or info.default_model,
            base_url=config.base_url
        )

        cached = self._cache.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Creating {info.name} provider for model {key.model}")

        provider = info.provider_class(config, transport=self.transport)
        self._cache[key] = provider
        return provider

    def is_provider_supported(self, provider_id: str) -> bool:
        return provider_id in self.providers

    def get_supported_providers(self) -> List[str]:
        return list(self.providers.keys())

    def get_provider_info(self, provider_id: str) -> ProviderInfo:
        return self._lookup(provider_id)

    def get_default_model(self, provider_id: str) -> str:
        return self._lookup(provider_id).default_model

    def get_supported_models(self, provider_id: str) -> List[str]:
        return list(self._lookup(provider_id).supported_models)

    def is_model_supported(self, provider_id: str, model: str) -> bool:
        info = self.providers.get(provider_id)
        if info is None:
            return False
        return model in info.supported_models

    def get_provider_environment_key(self, provider_id: str) -> str:
        return self._lookup(provider_id).required_api_key

    def get_provider_base_url_key(self, provider_id: str) -> Optional[str]:
        return self._lookup(provider_id).base_url_env

    async def health_check(self, provider_id: str, config: AIProviderConfig) -> bool:
        """
        Check that a provider can be created and answers a trivial request.

        Never raises; any failure is reported as unhealthy.
        """
        try:
            provider = self.create(provider_id, config)
            return await provider.is_healthy()
        except Exception as e:
            logger.warning(f"Health check for provider '{provider_id}' failed: {e}")
            return False

    async def aclose(self) -> None:
        """Close every cached provider and empty the cache"""
        providers = list(self._cache.values())
        self._cache.clear()

        for provider in providers:
            try:
                await provider.aclose()
            except Exception as e:
                logger.warning(f"Error closing provider: {e}")

    def clear_cache(self) -> None:
        """Drop cached instances without closing them (use aclose to release clients)"""
        self._cache.clear()
