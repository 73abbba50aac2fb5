"""
LLM module - Provider abstractions, registry and orchestration service.
"""

from .provider import AIProvider, AIProviderConfig, BaseAIProvider
from .response_parser import (
    extract_json_object,
    extract_suggestions_from_text,
    parse_title_response,
    strip_code_fences
)
from .factory import PROVIDERS, ProviderCacheKey, ProviderInfo, ProviderRegistry
from .service import AIServiceConfig, AITitleService


__all__ = [
    # Base classes
    "AIProvider",
    "AIProviderConfig",
    "BaseAIProvider",
    # Response parsing
    "extract_json_object",
    "extract_suggestions_from_text",
    "parse_title_response",
    "strip_code_fences",
    # Registry
    "PROVIDERS",
    "ProviderCacheKey",
    "ProviderInfo",
    "ProviderRegistry",
    # Service
    "AIServiceConfig",
    "AITitleService",
]
