"""Bounded retry with exponential backoff for transient failures."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def wait_backoff_or_retry_after(backoff: float) -> Callable[[RetryCallState], float]:
    """Exponential backoff, stretched to the server's ``retry_after`` when given."""
    exponential = wait_exponential(multiplier=backoff)

    def wait(retry_state: RetryCallState) -> float:
        delay = exponential(retry_state)
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, RateLimitError) and exc.retry_after:
            delay = max(delay, exc.retry_after)
        return delay

    return wait


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    retries: int,
    backoff: float,
    retry_on: type[BaseException] | tuple[type[BaseException], ...],
    what: str,
) -> T:
    """Await ``func()``; on ``retry_on`` try again up to ``retries`` more times.

    The wait before attempt ``n + 1`` is ``backoff * 2 ** (n - 1)`` seconds, or
    the server's ``retry_after`` when a RateLimitError carries a longer one.
    The last exception is re-raised once attempts run out.
    """

    def log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "%s failed (%s); retry %d/%d in %.1fs",
            what,
            retry_state.outcome.exception(),
            retry_state.attempt_number,
            retries,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_backoff_or_retry_after(backoff),
        retry=retry_if_exception_type(retry_on),
        before_sleep=log_retry,
        sleep=asyncio.sleep,
        reraise=True,
    )
    return await retrying(func)
