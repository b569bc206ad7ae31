"""Retry helper for transient model provider failures."""

import asyncio
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from interview_eval.config import RetrySettings, get_settings
from interview_eval.utils.errors import TransientProviderError
from interview_eval.utils.logging import get_logger

logger = get_logger("retry")

T = TypeVar("T")


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    delay = state.next_action.sleep if state.next_action else 0
    logger.warning(
        f"Retry {state.attempt_number} after {delay:.1f}s due to: {exc}",
        extra={"attempt": state.attempt_number, "delay_seconds": delay},
    )


async def retry_transient(
    fn: Callable[[], Awaitable[T]],
    retry_settings: Optional[RetrySettings] = None,
    retry_on: Tuple[Type[BaseException], ...] = (TransientProviderError,),
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """
    Await ``fn()`` and retry it while it raises a transient error.

    Delays grow exponentially from ``base_delay`` (1s, 2s, 4s, ...), capped at
    ``max_delay``. Exceptions outside ``retry_on`` propagate on the first
    attempt; after the attempt budget is spent the last error is re-raised.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        retry_settings: Attempt/delay schedule (defaults to settings.retry)
        retry_on: Exception types treated as transient
        sleep: Awaitable sleep used between attempts (tests pass a stub)

    Returns:
        The value returned by the first successful attempt
    """
    retry_settings = retry_settings or get_settings().retry

    retrying = AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(max(1, retry_settings.max_attempts)),
        wait=wait_exponential(
            multiplier=retry_settings.base_delay,
            max=retry_settings.max_delay,
        ),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        sleep=sleep or asyncio.sleep,
    )
    async for attempt in retrying:
        with attempt:
            return await fn()
    # unreachable due to reraise=True
    raise RuntimeError("retry loop exited without a result")
