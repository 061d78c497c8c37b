"""Domain models for ticker filtering.

Pure data structures with computed properties. Fetching lives in data/,
filtering and reporting in core/filters.py and core/report.py.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field

from config.settings import Settings

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

# 0.0 stands for "no data could be obtained". It is indistinguishable from a
# genuine zero price or volume.
NO_DATA = 0.0


class AttributeKind(str, Enum):
    """Which attribute a lookup resolves."""

    PRICE = "price"
    AVERAGE_VOLUME = "volume"

    def query_range(self, settings: Settings) -> str:
        """Chart range parameter for this kind (short for price, 1mo for volume)."""
        if self is AttributeKind.PRICE:
            return settings.price_range
        return settings.volume_range


# ---------------------------------------------------------------------------
# Fetch results
# ---------------------------------------------------------------------------


class ResolvedQuotes(BaseModel):
    """Price and average-volume maps returned by the fetch orchestrator.

    In normal mode both maps cover every requested ticker. In cache-only mode
    they are the cache contents verbatim and may be partial.
    """

    prices: dict[str, float] = Field(default_factory=dict)
    volumes: dict[str, float] = Field(default_factory=dict)

    def for_kind(self, kind: AttributeKind) -> dict[str, float]:
        return self.prices if kind is AttributeKind.PRICE else self.volumes


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


class FilterThresholds(BaseModel):
    """Volume floor and price window a ticker must satisfy."""

    min_average_volume: float = 2_000_000
    min_share_price: float = 2.0
    max_share_price: float = 500.0

    @classmethod
    def from_settings(cls, settings: Settings) -> FilterThresholds:
        return cls(
            min_average_volume=settings.min_average_volume,
            min_share_price=settings.min_share_price,
            max_share_price=settings.max_share_price,
        )


class RemovedTicker(BaseModel):
    """A ticker that failed at least one threshold."""

    ticker: str
    volume: float
    price: float
    reasons: list[str]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def reason_text(self) -> str:
        return ", ".join(self.reasons)


class FilterResult(BaseModel):
    """Outcome of applying thresholds to a ticker list."""

    passed: list[str] = Field(default_factory=list)
    removed: list[RemovedTicker] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.passed) + len(self.removed)
