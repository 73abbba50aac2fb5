"""
Error types, classification and formatting for the action.
"""

from .exceptions import (
    AIServiceError,
    ConfigError,
    ConfigurationError,
    ProviderError,
    UnsupportedProviderError
)
from .categories import (
    ErrorCategory,
    categorize_error,
    get_error_code,
    get_status_code,
    is_retryable_error
)
from .formatter import ErrorFormatter

__all__ = [
    "AIServiceError",
    "ConfigError",
    "ConfigurationError",
    "ProviderError",
    "UnsupportedProviderError",
    "ErrorCategory",
    "categorize_error",
    "get_error_code",
    "get_status_code",
    "is_retryable_error",
    "ErrorFormatter",
]
