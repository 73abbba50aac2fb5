"""
Utility modules.
"""

from .retry import RetryConfig, calculate_delay, retry_async, retry_with_backoff

__all__ = ["RetryConfig", "calculate_delay", "retry_async", "retry_with_backoff"]
