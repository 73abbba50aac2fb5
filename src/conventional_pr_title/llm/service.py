"""
AI orchestration service - generates title suggestions through a provider.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..errors import AIServiceError, UnsupportedProviderError, is_retryable_error
from ..models import TitleGenerationRequest, TitleGenerationResponse
from ..utils.retry import LINEAR, RetryConfig, retry_async
from .factory import ProviderInfo, ProviderRegistry
from .provider import AIProviderConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AIServiceConfig:
    """Service-level settings: which provider to use and how"""
    provider: str
    model: Optional[str] = None
    api_key: str = ""
    base_url: Optional[str] = None
    max_tokens: int = 500
    temperature: float = 0.3
    max_retries: int = 3
    retry_delay: float = 1.0  # seconds, multiplied by the attempt number
    debug: bool = False
    timeout: float = 30.0


class AITitleService:
    """
    Generates title suggestions with a configured provider.

    Retries transient failures with linear backoff on top of the provider's
    own retries. Configuration errors surface immediately.
    """

    def __init__(self, config: AIServiceConfig, registry: Optional[ProviderRegistry] = None):
        """
        Initialize the service.

        Args:
            config: Service configuration
            registry: Provider registry (a new one is created if omitted)

        Raises:
            UnsupportedProviderError: If the provider is unknown
        """
        self.registry = registry or ProviderRegistry()

        if not self.registry.is_provider_supported(config.provider):
            raise UnsupportedProviderError(f"Unsupported AI provider: {config.provider}")

        self.config = config
        self.model = config.model or self.registry.get_default_model(config.provider)
        self.retry_config = RetryConfig(
            max_retries=config.max_retries,
            base_delay=config.retry_delay,
            strategy=LINEAR
        )

        logger.info(f"AI service using provider '{config.provider}' with model '{self.model}'")

    def _provider_config(self) -> AIProviderConfig:
        return AIProviderConfig(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            model=self.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            debug=self.config.debug,
            timeout=self.config.timeout
        )

    async def generate_title(self, request: TitleGenerationRequest) -> TitleGenerationResponse:
        """
        Generate title suggestions for a pull request.

        Args:
            request: Title generation request

        Returns:
            Normalized model response

        Raises:
            ValueError: On provider configuration errors
            AIServiceError: When every attempt failed
        """
        attempts = 0

        async def attempt() -> TitleGenerationResponse:
            nonlocal attempts
            attempts += 1
            provider = self.registry.create(self.config.provider, self._provider_config())
            return await provider.generate_title(request)

        try:
            response = await retry_async(
                attempt,
                self.retry_config,
                name="AI title generation",
                should_retry=is_retryable_error
            )
        except ValueError:
            raise
        except Exception as e:
            retries = max(attempts - 1, 0)
            raise AIServiceError(
                f"AI service failed after {retries} retries: {e}",
                attempts=attempts
            ) from e

        logger.info(
            f"Generated {len(response.suggestions)} suggestion(s) "
            f"(confidence {response.confidence:.2f})"
        )
        return response

    async def is_healthy(self) -> bool:
        return await self.registry.health_check(self.config.provider, self._provider_config())

    def get_provider_info(self) -> ProviderInfo:
        return self.registry.get_provider_info(self.config.provider)

    def get_supported_models(self) -> List[str]:
        return self.registry.get_supported_models(self.config.provider)

    def is_model_supported(self, model: str) -> bool:
        return self.registry.is_model_supported(self.config.provider, model)

    async def aclose(self) -> None:
        await self.registry.aclose()
