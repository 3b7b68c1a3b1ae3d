"""
Retry-with-backoff as a reusable higher-order function.

The retry policy is fully parameterized: which exceptions are retryable,
how many retries are allowed, and how long to wait before each retry.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]
DelaySchedule = Callable[[int], float]


def linear_backoff(base_delay: float) -> DelaySchedule:
    """Delay grows with the retry number: base, 2*base, 3*base, ... (no jitter)."""
    def schedule(retry_number: int) -> float:
        return base_delay * retry_number
    return schedule


def retry_on(*exc_types: type[BaseException]) -> RetryPredicate:
    def predicate(exc: BaseException) -> bool:
        return isinstance(exc, exc_types)
    return predicate


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    should_retry: RetryPredicate,
    max_retries: int,
    delay_schedule: DelaySchedule,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    label: str = "call",
) -> T:
    """
    Await ``fn()``; on a retryable failure wait and try again.

    At most ``max_retries`` retries follow the first attempt. Exceptions
    rejected by ``should_retry``, and the last one once retries run out,
    propagate unchanged.
    """
    retries_done = 0
    while True:
        try:
            return await fn()
        except Exception as exc:
            if retries_done >= max_retries or not should_retry(exc):
                raise
            retries_done += 1
            delay = delay_schedule(retries_done)
            logger.warning(
                "%s failed (%s), retrying in %.2fs (%d/%d)",
                label, exc, delay, retries_done, max_retries,
            )
            await sleep(delay)


def with_retry(
    *,
    should_retry: RetryPredicate,
    max_retries: int,
    delay_schedule: DelaySchedule,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator form of retry_async for coroutine functions."""
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry_async(
                lambda: func(*args, **kwargs),
                should_retry=should_retry,
                max_retries=max_retries,
                delay_schedule=delay_schedule,
                sleep=sleep,
                label=func.__qualname__,
            )
        return wrapper
    return decorator
