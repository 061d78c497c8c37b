"""Fetch orchestrator: cache first, network for the rest.

For each attribute kind the cached tickers are reused as-is and only the
misses go through the batch scheduler. New values are merged into the
cache snapshot and the file is rewritten once per kind, right after that
kind's batch finishes.
"""

from __future__ import annotations

import logging
import time

from config.settings import Settings, settings as default_settings
from core.models import AttributeKind, ResolvedQuotes
from data.cache import QuoteCache
from data.quote_provider import QuoteProvider
from data.scheduler import BatchScheduler

logger = logging.getLogger(__name__)


class QuoteFetcher:
    """Resolve price and average volume for a ticker list."""

    def __init__(
        self,
        settings: Settings | None = None,
        cache: QuoteCache | None = None,
        provider: QuoteProvider | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._cache = cache or QuoteCache(self._settings)
        self._provider = provider

    async def resolve(
        self, tickers: list[str], cache_only: bool = False
    ) -> ResolvedQuotes:
        """Return price and volume maps for ``tickers``.

        Args:
            tickers: Deduplicated ticker list.
            cache_only: Answer from the cache files only. No requests are
                made and tickers missing from the cache have no entry.

        Returns:
            ResolvedQuotes. In normal mode every ticker has an entry in both
            maps (0.0 when nothing could be fetched).
        """
        started = time.perf_counter()
        cached = {kind: self._cache.load(kind) for kind in AttributeKind}

        if cache_only:
            logger.info("Using cached data only (cache-only mode)")
            return ResolvedQuotes(
                prices=cached[AttributeKind.PRICE],
                volumes=cached[AttributeKind.AVERAGE_VOLUME],
            )

        missing = {
            kind: [t for t in tickers if t not in cached[kind]]
            for kind in AttributeKind
        }
        for kind in AttributeKind:
            logger.info(
                "Need to fetch %s data for %d tickers", kind.value, len(missing[kind]),
            )

        if any(missing.values()):
            provider = self._provider
            client = None
            if provider is None:
                from data.quote_client import YahooQuoteClient
                provider = client = YahooQuoteClient(self._settings)
            try:
                scheduler = BatchScheduler(provider, self._settings)
                for kind in AttributeKind:
                    if not missing[kind]:
                        continue
                    logger.info("Fetching %s data via %s...", kind.value, provider.name)
                    fetched = await scheduler.run(missing[kind], kind)
                    cached[kind].update(fetched)
                    self._cache.save(kind, cached[kind])
                    logger.info(
                        "Fetched %s data for %d tickers", kind.value, len(fetched),
                    )
            finally:
                if client is not None:
                    await client.aclose()

        logger.info("Data fetching took %.2fs", time.perf_counter() - started)
        return ResolvedQuotes(
            prices=cached[AttributeKind.PRICE],
            volumes=cached[AttributeKind.AVERAGE_VOLUME],
        )
