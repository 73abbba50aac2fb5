"""
AI provider abstraction layer.

Provides a unified interface for multiple LLM back-ends (OpenAI-compatible
APIs, Anthropic, Google, Cohere, Ollama, Claude Code) using a provider
pattern. Concrete providers only implement ``_complete``; prompt building,
retries, response parsing and health checks are shared.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from ..errors import ProviderError, get_error_code, is_retryable_error
from ..models import TitleGenerationOptions, TitleGenerationRequest, TitleGenerationResponse
from ..prompts.builder import PromptBuilder
from ..utils.retry import RetryConfig, retry_async
from .response_parser import parse_title_response

logger = logging.getLogger(__name__)

HEALTH_CHECK_SYSTEM = 'You are a test assistant. Reply with "OK".'
HEALTH_CHECK_PROMPT = "test"
HEALTH_CHECK_MAX_TOKENS = 10


@dataclass(frozen=True)
class AIProviderConfig:
    """Connection and sampling settings for a provider instance"""
    api_key: str = ""
    base_url: Optional[str] = None
    model: Optional[str] = None
    max_tokens: int = 500
    temperature: float = 0.3
    debug: bool = False
    timeout: float = 30.0  # seconds


class AIProvider(ABC):
    """
    Base interface for AI providers.

    All providers must implement this interface to be usable by the service.
    """

    @abstractmethod
    async def generate_title(self, request: TitleGenerationRequest) -> TitleGenerationResponse:
        """
        Generate conventional title suggestions for a pull request.

        Args:
            request: Title generation request

        Returns:
            Normalized model response
        """
        pass

    @abstractmethod
    async def is_healthy(self) -> bool:
        """Probe the back-end with a trivial request. Never raises."""
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider"""
        pass


class BaseAIProvider(AIProvider):
    """
    Base implementation with common functionality.

    Subclasses set the class attributes and implement ``_complete``.
    """

    provider_name: str = "Base"
    api_key_env: str = ""
    api_key_optional: bool = False
    default_model: str = ""

    # 1s, 2s, 4s between the four attempts
    retry_config = RetryConfig(max_retries=3, base_delay=1.0, exponential_base=2.0)

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize provider.

        Args:
            config: Provider configuration
            transport: Optional httpx transport used by HTTP-based providers
        """
        self.config = config
        self.model = config.model or self.default_model
        self.transport = transport
        self.prompt_builder = PromptBuilder()
        self._validate_auth()

    def _validate_auth(self) -> None:
        if not self.api_key_optional and not self.config.api_key:
            raise ValueError(f"{self.api_key_env} is required for {self.provider_name}")

    def validate_params(self) -> None:
        """
        Validate auth and sampling parameters before a request.

        Raises:
            ValueError: If the configuration cannot produce a valid request
        """
        self._validate_auth()

        if not 0 <= self.config.temperature <= 1:
            raise ValueError("Temperature must be between 0 and 1")

        if self.config.max_tokens < 1:
            raise ValueError("max_tokens must be greater than 0")

    def build_system_message(self, options: Optional[TitleGenerationOptions] = None) -> str:
        return self.prompt_builder.build_system_message(options)

    def build_user_prompt(self, request: TitleGenerationRequest) -> str:
        return self.prompt_builder.build_user_prompt(request)

    @abstractmethod
    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        """
        Send one completion request and return the raw text.

        Args:
            system: System message
            prompt: User prompt
            max_tokens: Max tokens to generate
            temperature: Sampling temperature

        Returns:
            Model output text
        """
        pass

    async def generate_title(self, request: TitleGenerationRequest) -> TitleGenerationResponse:
        """
        Generate title suggestions with retries.

        Raises:
            ValueError: If the provider configuration is invalid
            ProviderError: Once retries are exhausted or a fatal error occurs
        """
        self.validate_params()

        system = self.build_system_message(request.options)
        prompt = self.build_user_prompt(request)

        if self.config.debug:
            logger.debug(f"[{self.provider_name}] System message:\n{system}")
            logger.debug(f"[{self.provider_name}] Prompt:\n{prompt}")

        async def attempt() -> TitleGenerationResponse:
            text = await self._complete(
                system,
                prompt,
                self.config.max_tokens,
                self.config.temperature
            )
            logger.debug(f"[{self.provider_name}] Raw response: {text[:500]}")
            return parse_title_response(text)

        try:
            return await retry_async(
                attempt,
                self.retry_config,
                name=f"{self.provider_name} generate_title"
            )
        except Exception as e:
            raise self.handle_error(e, "generate_title") from e

    def handle_error(self, error: BaseException, context: str) -> ProviderError:
        """Log an error and wrap it into a ProviderError"""
        if isinstance(error, ProviderError):
            message = error.detail
        else:
            message = str(error) or type(error).__name__
        code = get_error_code(error)

        logger.error(f"[{self.provider_name}] Error in {context}: {message} (code={code})")

        return ProviderError(
            provider=self.provider_name,
            context=context,
            message=message,
            code=code,
            retryable=is_retryable_error(error)
        )

    async def is_healthy(self) -> bool:
        try:
            text = await self._complete(
                HEALTH_CHECK_SYSTEM,
                HEALTH_CHECK_PROMPT,
                HEALTH_CHECK_MAX_TOKENS,
                0.0
            )
        except Exception as e:
            logger.warning(f"[{self.provider_name}] Health check failed: {e}")
            return False

        return "ok" in (text or "").lower()
