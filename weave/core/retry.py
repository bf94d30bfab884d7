"""
Retry with exponential backoff for outbound API calls.

Used for OpenAI embedding requests and Linear GraphQL calls. Only transient
failures are retried: network errors, timeouts and 5xx responses.

Usage:
    from weave.core.retry import retry_with_backoff

    embedding = await retry_with_backoff(
        lambda: client.embeddings.create(model=model, input=text),
        operation="embedding",
    )
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

logger = logging.getLogger("Weave.Retry")

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_MAX_DELAY = 10.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0


def _status_code(error: BaseException) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def is_transient_error(error: BaseException) -> bool:
    """Return True for network errors, timeouts and 5xx responses."""
    if isinstance(error, (httpx.TransportError, TimeoutError, ConnectionError)):
        return True

    status = _status_code(error)
    if status is not None:
        return 500 <= status < 600

    message = str(error).lower()
    return "timeout" in message or "timed out" in message or "connection error" in message


def calculate_delay(
    attempt: int,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
) -> float:
    """Exponential delay for the given 1-based attempt, capped, with ±10% jitter."""
    exponential = initial_delay * (backoff_multiplier ** (attempt - 1))
    capped = min(exponential, max_delay)
    jitter = capped * 0.2 * (random.random() - 0.5)
    return max(0.0, capped + jitter)


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
    should_retry: Callable[[BaseException], bool] = is_transient_error,
    operation: str = "request",
) -> T:
    """
    Await fn(), retrying transient failures.

    Args:
        fn: Zero-argument callable returning an awaitable
        max_retries: Retries after the first attempt
        initial_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any single delay
        backoff_multiplier: Growth factor between retries
        should_retry: Predicate deciding whether an error is retryable
        operation: Label used in log messages

    Returns:
        The result of fn()

    Raises:
        The last error once retries are exhausted, or immediately for
        non-retryable errors.
    """
    attempt = 1
    while True:
        try:
            return await fn()
        except Exception as e:
            if attempt > max_retries or not should_retry(e):
                raise

            delay = calculate_delay(attempt, initial_delay, max_delay, backoff_multiplier)
            logger.warning(
                f"{operation} failed (attempt {attempt}/{max_retries + 1}), "
                f"retrying in {delay:.2f}s: {e}"
            )
            await asyncio.sleep(delay)
            attempt += 1
