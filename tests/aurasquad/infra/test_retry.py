"""Tests for the retry helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from aurasquad.core.errors import LLMError, RateLimitedError
from aurasquad.infra.retry import linear_backoff, retry_async, retry_on, with_retry


class TestLinearBackoff:
    def test_grows_with_retry_number(self):
        schedule = linear_backoff(2.0)
        assert [schedule(n) for n in (1, 2, 3)] == [2.0, 4.0, 6.0]


class TestRetryAsync:
    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        fn = AsyncMock(side_effect=[RateLimitedError("429"), RateLimitedError("429"), "ok"])
        sleep = AsyncMock()

        result = await retry_async(
            fn, should_retry=retry_on(RateLimitedError), max_retries=5,
            delay_schedule=linear_backoff(2.0), sleep=sleep,
        )

        assert result == "ok"
        assert fn.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        fn = AsyncMock(side_effect=RateLimitedError("429"))
        sleep = AsyncMock()

        with pytest.raises(RateLimitedError):
            await retry_async(
                fn, should_retry=retry_on(RateLimitedError), max_retries=5,
                delay_schedule=linear_backoff(2.0), sleep=sleep,
            )

        assert fn.await_count == 6
        assert sleep.await_count == 5

    @pytest.mark.asyncio
    async def test_non_retryable_propagates_immediately(self):
        fn = AsyncMock(side_effect=LLMError("bad request"))
        sleep = AsyncMock()

        with pytest.raises(LLMError):
            await retry_async(
                fn, should_retry=retry_on(RateLimitedError), max_retries=5,
                delay_schedule=linear_backoff(2.0), sleep=sleep,
            )

        assert fn.await_count == 1
        sleep.assert_not_awaited()


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_decorated_coroutine_is_retried(self):
        attempts = []
        sleep = AsyncMock()

        @with_retry(
            should_retry=retry_on(ConnectionError), max_retries=2,
            delay_schedule=linear_backoff(0.5), sleep=sleep,
        )
        async def flaky(value):
            attempts.append(value)
            if len(attempts) < 2:
                raise ConnectionError("reset")
            return value * 2

        assert await flaky(21) == 42
        assert attempts == [21, 21]
        sleep.assert_awaited_once_with(0.5)
