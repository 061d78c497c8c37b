"""Bounded batch scheduler for quote lookups.

Tickers are processed in consecutive groups of ``concurrency_limit``. Each
group's lookups run concurrently and the whole group is awaited before the
next one starts, so no more than ``concurrency_limit`` requests are ever in
flight. A short pause between groups keeps the upstream from throttling us.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from config.settings import Settings, settings as default_settings
from core.models import NO_DATA, AttributeKind
from data.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)


def _chunked(lst: list, size: int):
    """Yield successive chunks of size from lst."""
    for i in range(0, len(lst), size):
        yield lst[i : i + size]


class BatchScheduler:
    """Fan-out/fan-in over fixed-size groups of tickers."""

    def __init__(
        self,
        provider: QuoteProvider,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        settings = settings or default_settings
        self._provider = provider
        self._sleep = sleep
        self.batch_size = settings.concurrency_limit
        self.batch_delay = settings.batch_delay

    async def _lookup(self, ticker: str, kind: AttributeKind) -> tuple[str, float]:
        try:
            value = await self._provider.fetch(ticker, kind)
        except Exception:
            logger.warning(
                "Unexpected error fetching %s for %s", kind.value, ticker, exc_info=True,
            )
            value = NO_DATA
        return ticker, value

    async def run(self, tickers: list[str], kind: AttributeKind) -> dict[str, float]:
        """Resolve ``kind`` for every ticker.

        Returns:
            {ticker: value} with an entry for every input ticker. Failed
            lookups are 0.0.
        """
        results: dict[str, float] = {}
        total = len(tickers)
        processed = 0

        for batch in _chunked(tickers, self.batch_size):
            pairs = await asyncio.gather(*(self._lookup(t, kind) for t in batch))
            results.update(pairs)

            processed += len(batch)
            percent = int(processed * 100 / total + 0.5)
            logger.info("Progress: %d/%d (%d%%)", processed, total, percent)

            if processed < total:
                await self._sleep(self.batch_delay)

        return results
