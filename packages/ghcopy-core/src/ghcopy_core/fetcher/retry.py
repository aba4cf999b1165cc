"""Bounded retry with exponential backoff for single requests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ghcopy_core.errors import GhCopyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """``max_retries`` extra attempts, sleeping ``delay * 2**(n-1)`` before attempt n+1."""

    max_retries: int = 3
    delay: float = 1.0

    def backoff(self, attempt: int) -> float:
        return self.delay * (2 ** (attempt - 1))

    async def run(self, operation: Callable[[], Awaitable[T]], description: str) -> T:
        """Await *operation*, repeating it while it fails with a retryable error."""
        attempt = 1
        while True:
            try:
                return await operation()
            except GhCopyError as e:
                if not e.retryable or attempt > self.max_retries:
                    raise
                wait = self.backoff(attempt)
                logger.info(
                    "Retrying %s in %.1fs (attempt %d/%d): %s",
                    description, wait, attempt + 1, self.max_retries + 1, e,
                )
                await asyncio.sleep(wait)
                attempt += 1
