"""Tests for the exponential-backoff retry policy."""

from __future__ import annotations

import logging

import httpx
import pytest

from config.settings import Settings
from data.retry import RetryPolicy


@pytest.fixture
def delays() -> list[float]:
    return []


@pytest.fixture
def policy(delays) -> RetryPolicy:
    """Default schedule (3 retries from 1s) with a recording sleep."""

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    return RetryPolicy(Settings(_env_file=None), sleep=fake_sleep)


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://quotes.test/v8/finance/chart/ZZZZ")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(f"{code}", request=request, response=response)


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_backoff_schedule_on_exhaustion(self, policy, delays):
        """Three retries at 1s, 2s, 4s, then the last error is raised."""
        attempts = 0

        async def always_fails():
            nonlocal attempts
            attempts += 1
            raise httpx.ConnectError("connection refused")

        with pytest.raises(httpx.ConnectError):
            await policy.call(always_fails)

        assert attempts == 4
        assert delays == [1.0, 2.0, 4.0]
        assert delays[1] / delays[0] == 2
        assert delays[2] / delays[1] == 2

    @pytest.mark.asyncio
    async def test_non_success_status_is_retried(self, policy, delays):
        attempts = 0

        async def not_found():
            nonlocal attempts
            attempts += 1
            raise _status_error(404)

        with pytest.raises(httpx.HTTPStatusError):
            await policy.call(not_found)
        assert attempts == 4

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, policy, delays):
        attempts = 0

        async def flaky():
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise httpx.ReadTimeout("timed out")
            return "ok"

        assert await policy.call(flaky) == "ok"
        assert delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_non_transport_errors_not_retried(self, policy, delays):
        attempts = 0

        async def bad_payload():
            nonlocal attempts
            attempts += 1
            raise ValueError("not json")

        with pytest.raises(ValueError):
            await policy.call(bad_payload)
        assert attempts == 1
        assert delays == []

    @pytest.mark.asyncio
    async def test_retries_are_logged(self, policy, caplog):
        async def always_fails():
            raise httpx.ConnectError("connection refused")

        with caplog.at_level(logging.WARNING, logger="data.retry"):
            with pytest.raises(httpx.ConnectError):
                await policy.call(always_fails)

        assert "Retrying request (1/3) after 1000ms delay" in caplog.text
        assert "Retrying request (3/3) after 4000ms delay" in caplog.text

    @pytest.mark.asyncio
    async def test_zero_retries(self, delays):
        async def fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        policy = RetryPolicy(Settings(_env_file=None, max_retries=0), sleep=fake_sleep)
        attempts = 0

        async def always_fails():
            nonlocal attempts
            attempts += 1
            raise httpx.ConnectError("connection refused")

        with pytest.raises(httpx.ConnectError):
            await policy.call(always_fails)
        assert attempts == 1
        assert delays == []
