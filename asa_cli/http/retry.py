# asa_cli/http/retry.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from asa_cli.http.errors import RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Bounded exponential backoff for rate-limited calls."""

    max_attempts: int = 3
    # wait after attempt i (0-based) is base_delay * 2**i seconds
    base_delay: float = 2.0
    retry_on: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (RateLimitError,)
    )

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2 ** attempt)

    def should_retry(self, exc: BaseException, attempt: int) -> bool:
        return isinstance(exc, self.retry_on) and attempt < self.max_attempts - 1


def _log_retry(exc: BaseException, attempt: int, wait: float) -> None:
    logger.warning(
        "rate limited (attempt %d), retrying in %.1fs: %s", attempt + 1, wait, exc
    )


def retry_on_rate_limit(
    fn: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call fn() until it succeeds or the attempt budget runs out.

    Only errors listed in policy.retry_on are re-attempted; anything else
    propagates on the spot. When every attempt fails the last error is
    re-raised unchanged.
    """
    policy = policy or RetryPolicy()
    attempt = 0
    while True:
        try:
            return fn()
        except policy.retry_on as e:
            if not policy.should_retry(e, attempt):
                raise
            wait = policy.delay_for(attempt)
            _log_retry(e, attempt, wait)
            sleep(wait)
            attempt += 1


async def aretry_on_rate_limit(
    fn: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Coroutine flavour of retry_on_rate_limit; backoff waits are cancellable."""
    policy = policy or RetryPolicy()
    attempt = 0
    while True:
        try:
            return await fn()
        except policy.retry_on as e:
            if not policy.should_retry(e, attempt):
                raise
            wait = policy.delay_for(attempt)
            _log_retry(e, attempt, wait)
            await sleep(wait)
            attempt += 1
