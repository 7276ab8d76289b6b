"""Retry logic with exponential backoff for device requests.

Provides an async decorator with configurable retry behavior, jitter,
and exception handling.
"""

import asyncio
import functools
import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, ParamSpec, TypeVar

import httpx

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts (including first try)
        base_delay: Initial delay in seconds before first retry
        max_delay: Maximum delay cap in seconds
        exponential_base: Base for exponential backoff calculation
        jitter: Whether to add random jitter to delays
        retryable_exceptions: Tuple of exception types that trigger retry
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 10.0
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: tuple[type[Exception], ...] = field(
        default_factory=lambda: (
            httpx.ConnectError,
            httpx.RemoteProtocolError,
            ConnectionError,
        )
    )

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff and optional jitter.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay = min(
            self.base_delay * (self.exponential_base**attempt),
            self.max_delay,
        )
        if self.jitter:
            # 50% to 100% of calculated delay
            delay *= 0.5 + random.random() * 0.5
        return delay


# Default config for device requests (timeouts are not retried)
DEVICE_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    base_delay=0.5,
    max_delay=5.0,
)

NO_RETRY = RetryConfig(max_attempts=1, jitter=False)


def async_retry(
    config: RetryConfig | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator for async retry with exponential backoff.

    Usage:
        @async_retry()
        async def post_command():
            ...
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            for attempt in range(config.max_attempts):
                try:
                    return await func(*args, **kwargs)
                except config.retryable_exceptions as e:
                    if attempt >= config.max_attempts - 1:
                        logger.error(
                            "All %d async attempts failed for %s",
                            config.max_attempts,
                            func.__name__,
                        )
                        raise
                    delay = config.calculate_delay(attempt)
                    logger.warning(
                        "Async retry %d/%d after %.1fs: %s",
                        attempt + 1,
                        config.max_attempts,
                        delay,
                        str(e),
                        extra={
                            "function": func.__name__,
                            "error_type": type(e).__name__,
                        },
                    )
                    await asyncio.sleep(delay)
            raise RuntimeError("Async retry failed with no attempts")

        return wrapper

    return decorator
