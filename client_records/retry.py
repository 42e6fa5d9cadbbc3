"""
Retry policy for store subscriptions.

Each failure of an attempt schedules a fresh attempt after an exponentially
growing delay (1s, 2s, 4s with the defaults). Once ``max_retries`` retries
have failed, the last failure propagates. Every failure kind is retried the
same way, whatever its classification.

The bookkeeping (attempt counter, waits, stop condition) is delegated to
tenacity; the policy only fixes the schedule and the logging.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from client_records.utils.logging import get_logger

log = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RetryPolicy:
    """
    Exponential backoff with a bounded number of retries.

    Parameters
    ----------
    max_retries : int
        Retries allowed after the first attempt; failure number ``max_retries + 1``
        is propagated.
    base_delay : float
        Delay in seconds before the first retry; doubles on every further retry.
    sleep : Callable[[float], Awaitable[None]]
        Timer used between attempts. Tests inject a recording fake.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_for(self, failure_index: int) -> Optional[float]:
        """
        Delay before retrying after failure ``failure_index`` (0-based), or None
        when that failure must be propagated instead.
        """
        if failure_index >= self.max_retries:
            return None
        return self.base_delay * 2**failure_index

    def _log_retry(self, label: str) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            delay = retry_state.next_action.sleep if retry_state.next_action else None
            log.warning(
                f"[RETRY] {label} attempt {retry_state.attempt_number} failed, retrying in {delay}s",
                extra={
                    "operation": label,
                    "attempt": retry_state.attempt_number,
                    "delay": delay,
                    "error": repr(error),
                },
            )

        return before_sleep

    def retrying(self, label: str = "operation") -> AsyncRetrying:
        """Fresh tenacity controller; its attempt counter starts at zero."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.base_delay),
            retry=retry_if_exception_type(Exception),
            reraise=True,
            sleep=self._sleep,
            before_sleep=self._log_retry(label),
        )

    async def run(self, attempt: Callable[[], Awaitable[None]], label: str = "operation") -> None:
        """
        Await ``attempt()`` until it returns, retrying failures per the policy.

        ``attempt`` must start from scratch on every call (e.g. open a new
        subscription). Cancellation is never retried.
        """
        async for trial in self.retrying(label):
            with trial:
                await attempt()


__all__ = ["RetryPolicy"]
