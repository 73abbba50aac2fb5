"""
Retry utility with exponential or linear backoff for handling transient failures.

Provides a coroutine helper, a decorator, and configuration for automatic retry logic.
"""

import os
import asyncio
import logging
import random
from functools import wraps
from typing import Awaitable, Callable, Optional, TypeVar
from dataclasses import dataclass

from ..errors.categories import is_retryable_error

logger = logging.getLogger(__name__)

T = TypeVar('T')

EXPONENTIAL = "exponential"
LINEAR = "linear"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior"""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: bool = False
    strategy: str = EXPONENTIAL


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay before the next attempt.

    Exponential: base_delay * exponential_base ** attempt
    Linear:      base_delay * (attempt + 1)

    Args:
        attempt: Number of the attempt that just failed (0-indexed)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    if config.strategy == LINEAR:
        delay = config.base_delay * (attempt + 1)
    else:
        delay = config.base_delay * (config.exponential_base ** attempt)

    delay = min(delay, config.max_delay)

    # Add jitter to prevent thundering herd
    if config.jitter:
        delay = delay * (0.5 + random.random() * 0.5)

    return delay


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    name: str = "operation",
    should_retry: Callable[[BaseException], bool] = is_retryable_error
) -> T:
    """
    Run an async operation, retrying transient failures.

    The last exception is re-raised unchanged once the retries are exhausted
    or as soon as ``should_retry`` rejects an error.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        config: Retry configuration
        name: Name used in log messages
        should_retry: Classifier deciding whether an error is transient

    Returns:
        The operation's result
    """
    total_attempts = config.max_retries + 1

    for attempt in range(total_attempts):
        try:
            result = await operation()

            if attempt > 0:
                logger.info(f"{name} succeeded on attempt {attempt + 1}")

            return result

        except Exception as e:
            if attempt >= config.max_retries:
                logger.error(f"{name} failed after {total_attempts} attempts: {e}")
                raise

            if not should_retry(e):
                logger.debug(f"{name} failed with non-retryable error: {e}")
                raise

            delay = calculate_delay(attempt, config)

            logger.warning(
                f"{name} failed on attempt {attempt + 1}/{total_attempts}, "
                f"retrying in {delay:.2f}s: {e}"
            )

            await asyncio.sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{name} exhausted retries without a result")


def retry_with_backoff(
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    exponential_base: Optional[float] = None,
    jitter: bool = True
):
    """
    Decorator for retrying async functions with exponential backoff.

    Reads configuration from environment variables if not provided:
    - MAX_RETRIES: Maximum number of retry attempts (default: 3)
    - RETRY_BASE_DELAY: Base delay in seconds (default: 1.0)
    - RETRY_BACKOFF_BASE: Exponential base for backoff (default: 2.0)
    - RETRY_MAX_DELAY: Maximum delay between retries (default: 60.0)

    Example:
        @retry_with_backoff(max_retries=3, base_delay=1.0)
        async def my_function():
            # Function that may fail transiently
            pass

    Returns:
        Decorated function with retry logic
    """
    # Read from environment if not provided
    if max_retries is None:
        max_retries = int(os.getenv("MAX_RETRIES", "3"))
    if base_delay is None:
        base_delay = float(os.getenv("RETRY_BASE_DELAY", "1.0"))
    if max_delay is None:
        max_delay = float(os.getenv("RETRY_MAX_DELAY", "60.0"))
    if exponential_base is None:
        exponential_base = float(os.getenv("RETRY_BACKOFF_BASE", "2.0"))

    config = RetryConfig(
        max_retries=max_retries,
        base_delay=base_delay,
        max_delay=max_delay,
        exponential_base=exponential_base,
        jitter=jitter
    )

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await retry_async(
                lambda: func(*args, **kwargs),
                config,
                name=func.__name__
            )

        return wrapper

    return decorator
