"""Threshold filter for tickers.

Rules (all must hold for a ticker to pass):
  - 1-month average volume >= min_average_volume
  - price >= min_share_price
  - price <= max_share_price

A ticker with no value in a map is treated as 0, so it fails the volume and
low-price checks.
"""

from __future__ import annotations

from core.models import FilterResult, FilterThresholds, RemovedTicker


def filter_tickers(
    tickers: list[str],
    volumes: dict[str, float],
    prices: dict[str, float],
    thresholds: FilterThresholds | None = None,
) -> FilterResult:
    """Split tickers into those meeting all thresholds and those removed.

    Args:
        tickers: Tickers in report order.
        volumes: {ticker: average volume}.
        prices: {ticker: price}.
        thresholds: Defaults to the standard volume floor and $2-$500 window.

    Returns:
        FilterResult with passed tickers in input order and a removal
        record (with reasons) for each failure.
    """
    thresholds = thresholds or FilterThresholds()
    result = FilterResult()

    for ticker in tickers:
        volume = volumes.get(ticker) or 0.0
        price = prices.get(ticker) or 0.0
        reasons = rejection_reasons(volume, price, thresholds)

        if reasons:
            result.removed.append(
                RemovedTicker(ticker=ticker, volume=volume, price=price, reasons=reasons)
            )
        else:
            result.passed.append(ticker)

    return result


def rejection_reasons(
    volume: float, price: float, thresholds: FilterThresholds
) -> list[str]:
    """Human-readable reasons a (volume, price) pair fails the thresholds."""
    reasons: list[str] = []
    if volume < thresholds.min_average_volume:
        reasons.append(
            f"low volume ({format_volume(volume)} < "
            f"{format_volume(thresholds.min_average_volume)})"
        )
    if price < thresholds.min_share_price:
        reasons.append(f"low price (${price:.2f} < ${thresholds.min_share_price:.2f})")
    if price > thresholds.max_share_price:
        reasons.append(f"high price (${price:.2f} > ${thresholds.max_share_price:.2f})")
    return reasons


def format_volume(volume: float) -> str:
    """Thousands-separated volume, keeping up to 3 decimals like a locale format."""
    text = f"{volume:,.3f}".rstrip("0").rstrip(".")
    return text or "0"
