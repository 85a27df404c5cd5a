"""Bounded retries for provider calls."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

from pr_reviewer.core.logging import get_logger
from pr_reviewer.llm.errors import NotFoundError, RetryExhaustedError

logger = get_logger(__name__)

T = TypeVar("T")


async def with_retries(
    operation: Callable[[], Awaitable[T]],
    retries: int,
    *,
    base_delay: float = 0.5,
    max_delay: float = 8.0,
    label: Optional[str] = None,
) -> T:
    """
    Run an async operation, retrying it on failure.

    The operation is attempted `retries + 1` times at most, one attempt after
    another, sleeping with exponential backoff in between.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        retries: Number of retries after the first attempt (negative means 0)
        base_delay: Delay before the second attempt, in seconds
        max_delay: Upper bound for a single delay, in seconds
        label: Name used in log lines

    Returns:
        Result of the first successful attempt

    Raises:
        RetryExhaustedError: If every attempt failed
        NotFoundError: Immediately, store misuse is never retried
    """
    attempts = max(retries, 0) + 1
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except NotFoundError:
            raise
        except Exception as e:
            last_error = e
            logger.warning(
                "Attempt failed",
                operation=label,
                attempt=attempt,
                attempts=attempts,
                error=str(e),
            )
            if attempt < attempts:
                await asyncio.sleep(min(base_delay * (2 ** (attempt - 1)), max_delay))

    raise RetryExhaustedError(attempts, last_error) from last_error
