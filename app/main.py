"""Ticker Filter command-line entry point.

Reads a CSV watchlist, looks up price and 1-month average volume for every
ticker, drops tickers outside the volume/price thresholds and writes the
filtered CSV plus a text report.

Launch with: ticker-filter [input.csv] [output.csv] [--cache-only]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

from config.settings import Settings, settings as default_settings
from core.filters import filter_tickers
from core.models import FilterThresholds
from core.report import generate_report, report_path_for
from core.tickers import InputError, read_tickers, rewrite_csv
from data.fetcher import QuoteFetcher
from data.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)

EPILOG = """\
examples:
  ticker-filter
  ticker-filter my_watchlist.csv filtered_watchlist.csv
  ticker-filter --cache-only
"""


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ticker-filter",
        description="Filter a CSV watchlist by average volume and share price.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=settings.input_path,
        help=f"Path to the input CSV file (default: {settings.input_path})",
    )
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        default=settings.output_path,
        help=f"Path to the output CSV file (default: {settings.output_path})",
    )
    parser.add_argument(
        "--cache-only",
        action="store_true",
        help="Use only cached volume and price data (no API calls)",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def run(
    input_path: Path,
    output_path: Path,
    cache_only: bool = False,
    settings: Settings | None = None,
    provider: QuoteProvider | None = None,
) -> int:
    """Run the full filter pipeline. Returns the process exit code."""
    settings = settings or default_settings
    started = time.perf_counter()

    try:
        csv_text, tickers = read_tickers(input_path)
    except InputError as e:
        logger.error("%s", e)
        return 1

    fetcher = QuoteFetcher(settings, provider=provider)
    quotes = asyncio.run(fetcher.resolve(tickers, cache_only=cache_only))

    thresholds = FilterThresholds.from_settings(settings)
    result = filter_tickers(tickers, quotes.volumes, quotes.prices, thresholds)
    logger.info(
        "Results: %d tickers, %d meeting criteria, %d filtered out",
        len(tickers), len(result.passed), len(result.removed),
    )

    output_path.write_text(
        rewrite_csv(csv_text, result.passed), encoding="utf-8", newline="",
    )
    logger.info("Filtered tickers saved to %s", output_path)

    report_path = report_path_for(output_path)
    report_path.write_text(
        generate_report(
            tickers, result, quotes.volumes, quotes.prices,
            input_path, output_path, thresholds,
        ),
        encoding="utf-8",
    )
    logger.info("Detailed report saved to %s", report_path)
    logger.info("Total execution time: %.2fs", time.perf_counter() - started)
    return 0


def main(argv: list[str] | None = None) -> int:
    settings = default_settings
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.log_level)
    try:
        return run(args.input, args.output, cache_only=args.cache_only, settings=settings)
    except OSError as e:
        logger.error("Error: %s", e, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
