"""
Exception types shared across the action.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ConfigError:
    """A single problem found while reading the action inputs"""
    field: str
    message: str
    suggestion: Optional[str] = None


class ConfigurationError(Exception):
    """Aggregate of every input problem found during configuration parsing"""

    def __init__(self, errors: List[ConfigError]):
        self.errors = errors
        details = "\n".join(f"- {e.field}: {e.message}" for e in errors)
        super().__init__(f"Configuration errors:\n{details}")


class UnsupportedProviderError(ValueError):
    """Raised when a provider identifier is not in the registry"""
    pass


class ProviderError(Exception):
    """
    Raised by a provider once its own retries are exhausted.

    Carries the provider name, the failing operation, and the code of the
    underlying error so callers can classify it without parsing the message.
    """

    def __init__(
        self,
        provider: str,
        context: str,
        message: str,
        code: str = "UNKNOWN",
        retryable: bool = True
    ):
        self.provider = provider
        self.context = context
        self.code = code
        self.retryable = retryable
        self.detail = message
        super().__init__(f"{provider} provider failed in {context}: {message} ({code})")


class AIServiceError(Exception):
    """Raised when the orchestration layer gives up on a provider"""

    def __init__(self, message: str, attempts: int = 0):
        self.attempts = attempts
        super().__init__(message)
