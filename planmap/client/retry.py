"""Retry rules for reads and mutations, built on tenacity."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from planmap.client.api import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int
    base_delay: float
    max_delay: float
    exponential: bool = True
    no_retry_statuses: FrozenSet[int] = field(default_factory=frozenset)
    retry_client_errors: bool = True

    def is_retryable(self, error: BaseException) -> bool:
        """Only API failures are retried, and not the ones this policy treats as final."""
        if not isinstance(error, ApiError):
            return False
        if error.status in self.no_retry_statuses:
            return False
        if not self.retry_client_errors and 400 <= error.status < 500:
            return False
        return True

    def retrying(self, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> AsyncRetrying:
        if self.exponential:
            wait = wait_exponential(multiplier=self.base_delay, max=self.max_delay)
        else:
            wait = wait_fixed(min(self.base_delay, self.max_delay))
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait,
            retry=retry_if_exception(self.is_retryable),
            before_sleep=_log_retry,
            sleep=sleep,
            reraise=True,
        )


def _log_retry(retry_state: RetryCallState) -> None:
    logger.debug(
        f"Retrying after {retry_state.outcome.exception()!r} "
        f"(attempt {retry_state.attempt_number}, waiting {retry_state.next_action.sleep:.1f}s)"
    )


# Reads: auth and missing-resource errors are final, anything else gets 3 more tries
QUERY_RETRY = RetryPolicy(
    max_retries=3,
    base_delay=1.0,
    max_delay=30.0,
    no_retry_statuses=frozenset({401, 403, 404}),
)

# Mutations: a single retry after one second, never for a rejected request
MUTATION_RETRY = RetryPolicy(
    max_retries=1,
    base_delay=1.0,
    max_delay=1.0,
    exponential=False,
    retry_client_errors=False,
)

NO_RETRY = RetryPolicy(max_retries=0, base_delay=0.0, max_delay=0.0)


async def run_with_retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    return await policy.retrying(sleep)(fn)
