"""GitHub rate limit tracking."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Track the ``X-RateLimit-*`` headers and pause before the budget runs out."""

    def __init__(self, threshold: int = 10):
        self.threshold = threshold
        self._remaining: int | None = None
        self._reset_at: float | None = None

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            try:
                self._remaining = int(remaining)
            except ValueError:
                self._remaining = None
        if reset is not None:
            try:
                self._reset_at = float(reset)
            except ValueError:
                self._reset_at = None

    @property
    def exhausted(self) -> bool:
        return self._remaining is not None and self._remaining <= self.threshold

    async def wait_if_needed(self) -> None:
        if not self.exhausted or self._reset_at is None:
            return
        delay = max(0.0, self._reset_at - time.time()) + 1
        logger.warning(
            "GitHub rate limit nearly exhausted (%d left), waiting %.0fs",
            self._remaining,
            delay,
        )
        await asyncio.sleep(delay)
        self._remaining = None
