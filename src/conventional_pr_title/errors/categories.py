"""
Error categorization for retry decisions and user-facing messages.

Classification is driven by exception types and HTTP status codes carried on
the exception objects, never by the text of the error message.
"""

import asyncio
from enum import Enum
from typing import Optional, Tuple

import httpx

from .exceptions import ConfigurationError, ProviderError


class ErrorCategory(Enum):
    """Categories of errors that can occur while processing a PR"""
    CONFIGURATION = "configuration"
    AUTH = "authentication"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NETWORK = "network"
    API = "api"
    INTERNAL = "internal"


# HTTP status codes that should be retried
RETRYABLE_STATUS_CODES = {
    408,  # Request Timeout
    409,  # Conflict
    429,  # Too Many Requests (rate limit)
    500,  # Internal Server Error
    502,  # Bad Gateway
    503,  # Service Unavailable
    504,  # Gateway Timeout
}

# HTTP status codes that should NOT be retried
NON_RETRYABLE_STATUS_CODES = {
    400,  # Bad Request
    401,  # Unauthorized
    403,  # Forbidden
    404,  # Not Found
    422,  # Unprocessable Entity
}


def get_status_code(error: BaseException) -> Optional[int]:
    """
    Extract an HTTP status code from an exception, if it carries one.

    Understands httpx status errors, SDK errors exposing ``status_code``
    (anthropic) or an integer ``code`` (google-genai), and ProviderError
    codes that were recorded from one of those.
    """
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code

    status = getattr(error, "status_code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status

    code = getattr(error, "code", None)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    if isinstance(code, str) and code.isdigit():
        return int(code)

    return None


def get_error_code(error: BaseException) -> str:
    """Best-effort error code used in provider error messages"""
    status = get_status_code(error)
    if status is not None:
        return str(status)

    code = getattr(error, "code", None)
    if code:
        return str(code)

    return "UNKNOWN"


def categorize_error(error: BaseException) -> Tuple[ErrorCategory, str]:
    """
    Categorize an error and provide a user-friendly explanation.

    Args:
        error: The exception to categorize

    Returns:
        Tuple of (ErrorCategory, explanation)
    """
    if isinstance(error, (ConfigurationError, ValueError)):
        return (
            ErrorCategory.CONFIGURATION,
            "Configuration error - please check the action inputs and API keys"
        )

    status = get_status_code(error)
    if status in (401, 403):
        return (
            ErrorCategory.AUTH,
            "Authentication failed - please check your API keys and token permissions"
        )
    if status == 429:
        return (
            ErrorCategory.RATE_LIMIT,
            "Rate limit exceeded - too many requests"
        )
    if status == 408:
        return (
            ErrorCategory.TIMEOUT,
            "Operation timed out - the model or API took too long to respond"
        )
    if status is not None:
        return (
            ErrorCategory.API,
            "API error - the service returned an error"
        )

    if isinstance(error, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return (
            ErrorCategory.TIMEOUT,
            "Operation timed out - the model or API took too long to respond"
        )

    if isinstance(error, (ConnectionError, httpx.TransportError)):
        return (
            ErrorCategory.NETWORK,
            "Network error - the service could not be reached"
        )

    return (
        ErrorCategory.INTERNAL,
        "An unexpected error occurred"
    )


def is_retryable_error(error: BaseException) -> bool:
    """
    Determine if an error should be retried.

    Configuration mistakes and client-side HTTP errors are final; everything
    else, including errors of unknown shape, is considered transient.

    Args:
        error: The exception to check

    Returns:
        True if the error should be retried
    """
    if isinstance(error, ProviderError):
        return error.retryable

    if isinstance(error, (ConfigurationError, ValueError)):
        return False

    status = get_status_code(error)
    if status in NON_RETRYABLE_STATUS_CODES:
        return False
    if status in RETRYABLE_STATUS_CODES:
        return True

    return True
