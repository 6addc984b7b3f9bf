"""
Timeout + bounded exponential-backoff retry around a provider call.

State per invocation: an attempt counter starting at 0. Each attempt runs
under a hard wall-clock timeout.

- timeout           -> LLMTimeoutError, no further attempts
- other error, n < max_attempts -> sleep 2**n seconds, retry
- other error on the last attempt -> LLMAPIError
- success           -> result returned immediately
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, TypeVar

from gitinsight.llm.provider import LLMAPIError, LLMTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3
BACKOFF_BASE = 2


def backoff_seconds(attempt: int) -> int:
    """Delay after failed attempt number *attempt* (1-based)."""
    return BACKOFF_BASE**attempt


class RetryController:
    """Runs an operation with a per-attempt timeout and exponential backoff.

    ``sleep`` is injectable so callers (and tests) control the backoff wait.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.timeout = timeout
        self.retries = retries
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return max(1, self.retries)

    def run(self, operation: Callable[[], T]) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return self._run_with_timeout(operation)
            except LLMTimeoutError:
                raise
            except Exception as exc:
                if attempt >= self.max_attempts:
                    raise LLMAPIError(
                        f"LLM request failed after {attempt} attempts: {exc}"
                    ) from exc
                delay = backoff_seconds(attempt)
                logger.warning(
                    "LLM attempt %d/%d failed: %s. Retrying in %ds...",
                    attempt,
                    self.max_attempts,
                    exc,
                    delay,
                )
                self._sleep(delay)

    def _run_with_timeout(self, operation: Callable[[], T]) -> T:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="llm-call")
        future = executor.submit(operation)
        try:
            # wait() instead of result(timeout=...): a TimeoutError raised by the
            # operation itself is an ordinary failure, not a wall-clock expiry.
            done, _ = wait([future], timeout=self.timeout)
            if not done:
                future.cancel()
                raise LLMTimeoutError(f"LLM request timed out after {self.timeout} seconds")
            return future.result()
        finally:
            # An abandoned call keeps running in its worker; don't block on it.
            executor.shutdown(wait=False)


def with_retry(
    timeout: float,
    max_attempts: int,
    operation: Callable[[], T],
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Functional form of ``RetryController(timeout, max_attempts).run(operation)``."""
    return RetryController(timeout=timeout, retries=max_attempts, sleep=sleep).run(operation)
