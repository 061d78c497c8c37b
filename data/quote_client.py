"""Yahoo Finance chart-endpoint client.

One GET per (ticker, kind):

    {quote_api_base}{SYMBOL}?interval=1d&range=1d    -> price
    {quote_api_base}{SYMBOL}?interval=1d&range=1mo   -> average volume

Every lookup resolves to a float. Transport failures are retried by the
RetryPolicy; anything that still fails, and any response without usable
data, comes back as the 0.0 sentinel.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from config.settings import Settings, settings as default_settings
from core.filters import format_volume
from core.models import NO_DATA, AttributeKind
from core.tickers import canonical_symbol
from data.quote_provider import QuoteProvider
from data.retry import RetryPolicy

logger = logging.getLogger(__name__)


def ticker_from_url(url: str | httpx.URL) -> str:
    """Last path segment of a chart URL, i.e. the symbol requested."""
    return httpx.URL(str(url)).path.rstrip("/").rsplit("/", 1)[-1]


def _numbers(series: Any) -> list[float]:
    """Non-null numeric entries of a JSON series."""
    if not isinstance(series, list):
        return []
    return [
        float(v) for v in series
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    ]


def _quote_block(result: dict) -> dict:
    """indicators.quote[0], or {} when any level is missing."""
    indicators = result.get("indicators")
    if not isinstance(indicators, dict):
        return {}
    quotes = indicators.get("quote")
    if not isinstance(quotes, list) or not quotes or not isinstance(quotes[0], dict):
        return {}
    return quotes[0]


def extract_value(payload: Any, kind: AttributeKind) -> float | None:
    """Pull a price or average volume out of a chart response.

    Price: meta.regularMarketPrice, falling back to the last non-null close.
    Volume: mean of the non-null daily volumes.

    Returns:
        The value, or None when the response carries no usable data.
    """
    try:
        result = payload["chart"]["result"][0]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(result, dict):
        return None

    quote = _quote_block(result)

    if kind is AttributeKind.PRICE:
        meta = result.get("meta")
        if isinstance(meta, dict):
            price = meta.get("regularMarketPrice")
            if isinstance(price, (int, float)) and not isinstance(price, bool):
                return float(price)
        closes = _numbers(quote.get("close"))
        return closes[-1] if closes else None

    volumes = _numbers(quote.get("volume"))
    if not volumes:
        return None
    return sum(volumes) / len(volumes)


class YahooQuoteClient(QuoteProvider):
    """Async HTTP client for the chart endpoint with retry."""

    def __init__(
        self,
        settings: Settings | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._retry = retry_policy or RetryPolicy(self._settings)
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._settings.user_agent},
            timeout=httpx.Timeout(self._settings.request_timeout),
            follow_redirects=True,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "Yahoo Finance"

    def build_url(self, ticker: str) -> str:
        return f"{self._settings.quote_api_base}{canonical_symbol(ticker)}"

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        """Single GET; logs the failing symbol before the retry policy sees it."""
        try:
            resp = await self._client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Request failed for ticker: %s, Error: %s", ticker_from_url(url), e)
            raise
        return resp

    async def fetch(self, ticker: str, kind: AttributeKind) -> float:
        """Resolve one attribute for one ticker. Never raises for data or transport problems."""
        symbol = canonical_symbol(ticker)
        params = {
            "interval": self._settings.quote_interval,
            "range": kind.query_range(self._settings),
        }

        try:
            resp = await self._retry.call(self._get, self.build_url(ticker), params)
            payload = resp.json()
        except httpx.HTTPError as e:
            logger.error("Failed to fetch %s for %s: %s", kind.value, symbol, e)
            return NO_DATA
        except ValueError:
            logger.warning("Malformed %s response for %s", kind.value, symbol)
            return NO_DATA

        value = extract_value(payload, kind)
        if value is None:
            logger.warning("No %s data available for %s", kind.value, symbol)
            return NO_DATA

        if kind is AttributeKind.PRICE:
            logger.info("%s: $%.2f", symbol, value)
        else:
            logger.info("%s: %s avg volume", symbol, format_volume(value))
        return value

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> YahooQuoteClient:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
