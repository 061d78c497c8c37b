"""Application settings with Pydantic validation.

Supports .env file and environment variable overrides.  All env vars
prefixed with TICKERFILTER_ (e.g., TICKERFILTER_CONCURRENCY_LIMIT).

Every fetch component takes a Settings instance at construction, so tests
can build one with tiny delays instead of patching module constants.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """Global application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TICKERFILTER_",
        extra="ignore",
    )

    # --- Quote service ---
    quote_api_base: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart/",
        description="Chart endpoint; the symbol is appended to this URL",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every quote request",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout in seconds",
    )
    quote_interval: str = Field(
        default="1d",
        description="Bar interval requested from the chart endpoint",
    )
    price_range: str = Field(
        default="1d",
        description="Chart range used for price lookups",
    )
    volume_range: str = Field(
        default="1mo",
        description="Chart range used for average volume lookups",
    )

    # --- Retry / rate limiting ---
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries after the first failed attempt (3 = 4 attempts total)",
    )
    retry_base_delay: float = Field(
        default=1.0,
        ge=0,
        description="First backoff delay in seconds; doubles on each retry",
    )
    concurrency_limit: int = Field(
        default=20,
        gt=0,
        description="Lookups in flight at once (also the batch size)",
    )
    batch_delay: float = Field(
        default=0.5,
        ge=0,
        description="Pause between batches to avoid upstream rate limiting",
    )

    # --- Cache ---
    price_cache_path: Path = Field(
        default=Path("price_cache.json"),
        description="JSON cache of ticker -> last price",
    )
    volume_cache_path: Path = Field(
        default=Path("volume_cache.json"),
        description="JSON cache of ticker -> average volume",
    )

    # --- Filter thresholds ---
    min_average_volume: float = Field(
        default=2_000_000,
        ge=0,
        description="Minimum 1-month average daily volume",
    )
    min_share_price: float = Field(
        default=2.0,
        ge=0,
        description="Minimum share price in dollars",
    )
    max_share_price: float = Field(
        default=500.0,
        ge=0,
        description="Maximum share price in dollars",
    )

    # --- Files ---
    input_path: Path = Field(
        default=Path("complete_list.csv"),
        description="Default CSV to read tickers from",
    )
    output_path: Path = Field(
        default=Path("filtered_list.csv"),
        description="Default CSV to write the filtered list to",
    )
    watchlist_input_path: Path = Field(
        default=Path("Gaps  & Earnings - Gaps List.csv"),
        description="Sectioned gaps spreadsheet export for the watchlist converter",
    )
    watchlist_output_path: Path = Field(
        default=Path("complete_list.csv"),
        description="Where the converter writes the TradingView watchlist",
    )
    watchlist_sections_path: Path = Field(
        default=Path("config/watchlist_sections.yaml"),
        description="Section layout for the watchlist converter",
    )

    # --- Application ---
    log_level: str = Field(default="INFO", description="Logging level")

    @model_validator(mode="after")
    def _check_price_window(self) -> Settings:
        if self.min_share_price > self.max_share_price:
            raise ValueError(
                f"min_share_price ({self.min_share_price}) exceeds "
                f"max_share_price ({self.max_share_price})"
            )
        return self


# Singleton instance
settings = Settings()
