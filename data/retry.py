"""Exponential-backoff retry policy for quote requests.

Wraps a single awaitable call. Only transport-level failures (connection
errors, timeouts, non-2xx responses) are retried; a successful response
with no usable data is not a failure and goes straight back to the caller.

With the defaults a failing call is attempted 4 times, sleeping 1s, 2s and
4s between attempts, then the last exception is re-raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# HTTPStatusError comes from raise_for_status(); TransportError covers
# connect/read timeouts, refused connections and protocol errors.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    httpx.HTTPStatusError,
    httpx.TransportError,
)


class RetryPolicy:
    """Bounded exponential backoff around one remote call."""

    def __init__(
        self,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        settings = settings or default_settings
        self.max_retries = settings.max_retries
        self.base_delay = settings.retry_base_delay
        self._sleep = sleep

    def _log_retry(self, retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retrying request (%d/%d) after %.0fms delay (%s)",
            retry_state.attempt_number,
            self.max_retries,
            delay * 1000,
            exc,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2),
            retry=retry_if_exception_type(TRANSPORT_ERRORS),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )

    async def call(
        self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """Await ``fn(*args, **kwargs)``, retrying transport failures.

        Raises:
            The final transport exception once retries are exhausted, or any
            non-transport exception immediately.
        """
        return await self._retrying()(fn, *args, **kwargs)
