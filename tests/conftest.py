"""Shared test fixtures for ticker-filter."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from config.settings import Settings
from core.models import NO_DATA, AttributeKind
from data.cache import QuoteCache
from data.quote_provider import QuoteProvider

BASE_URL = "https://quotes.test/v8/finance/chart/"


def chart_payload(
    price: float | None = None,
    closes: list[float | None] | None = None,
    volumes: list[float | None] | None = None,
) -> dict:
    """Build a chart-endpoint response body."""
    meta: dict = {"symbol": "TEST"}
    if price is not None:
        meta["regularMarketPrice"] = price
    quote: dict = {}
    if closes is not None:
        quote["close"] = closes
    if volumes is not None:
        quote["volume"] = volumes
    return {
        "chart": {
            "result": [{"meta": meta, "indicators": {"quote": [quote]}}],
            "error": None,
        }
    }


class FakeQuoteService:
    """In-memory chart endpoint for httpx.MockTransport.

    ``quotes`` maps symbol -> (price, volumes). Unknown symbols get 404.
    Every request is recorded in ``calls`` as (symbol, range).
    """

    def __init__(self, quotes: dict[str, tuple[float, list[float]]]) -> None:
        self.quotes = quotes
        self.calls: list[tuple[str, str]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        symbol = request.url.path.rsplit("/", 1)[-1]
        query_range = request.url.params.get("range", "")
        self.calls.append((symbol, query_range))
        if symbol not in self.quotes:
            return httpx.Response(404, json={"chart": {"result": None}})
        price, volumes = self.quotes[symbol]
        return httpx.Response(
            200, json=chart_payload(price=price, closes=[price], volumes=volumes),
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class CountingProvider(QuoteProvider):
    """Provider that records call counts and peak concurrency."""

    def __init__(
        self,
        values: dict[str, float] | None = None,
        delay: float = 0.01,
    ) -> None:
        self.values = values or {}
        self.delay = delay
        self.calls: list[tuple[str, AttributeKind]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, ticker: str, kind: AttributeKind) -> float:
        self.calls.append((ticker, kind))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return self.values.get(ticker, NO_DATA)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with no delays and caches under tmp_path."""
    return Settings(
        _env_file=None,
        quote_api_base=BASE_URL,
        retry_base_delay=0.0,
        batch_delay=0.0,
        price_cache_path=tmp_path / "price_cache.json",
        volume_cache_path=tmp_path / "volume_cache.json",
    )


@pytest.fixture
def quote_cache(test_settings: Settings) -> QuoteCache:
    return QuoteCache(test_settings)


@pytest.fixture
def fake_service() -> FakeQuoteService:
    """AAPL resolves, anything else is a 404."""
    return FakeQuoteService({"AAPL": (150.0, [4_000_000, 6_000_000])})


@pytest.fixture
def sample_csv() -> str:
    """Spreadsheet-style export with headers, notes and blank cells."""
    return (
        "###Gap Up,,Notes\r\n"
        "AAPL,MSFT,earnings beat\r\n"
        "PENNY,,\r\n"
        "BRK.B,AAPL,\r\n"
        "AB/WS,lower case,TOOLONG\r\n"
    )


@pytest.fixture
def make_payload():
    """Factory for chart-endpoint response bodies."""
    return chart_payload


@pytest.fixture
def make_provider():
    """Factory for CountingProvider instances."""
    return CountingProvider


@pytest.fixture
def write_cache():
    """Write a raw JSON cache file."""

    def _write(path: Path, data: object) -> None:
        path.write_text(json.dumps(data), encoding="utf-8")

    return _write
