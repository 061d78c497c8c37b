"""Plain-text report generator for a filter run.

Produces the human-readable summary written next to the filtered CSV.
No I/O here; the CLI decides where the text goes.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from core.filters import format_volume
from core.models import FilterResult, FilterThresholds


def generate_report(
    tickers: list[str],
    result: FilterResult,
    volumes: dict[str, float],
    prices: dict[str, float],
    input_path: Path | str,
    output_path: Path | str,
    thresholds: FilterThresholds | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Generate the filter report.

    Sections:
    1. Header (files, thresholds, date)
    2. Summary counts
    3. Tickers meeting criteria (alphabetical)
    4. Filtered out tickers with reasons (alphabetical)
    """
    thresholds = thresholds or FilterThresholds()
    generated_at = generated_at or datetime.now()
    lines: list[str] = []

    lines.append("Stock Filter Report")
    lines.append("=================")
    lines.append("")
    lines.append(f"Input file: {input_path}")
    lines.append(f"Output file: {output_path}")
    lines.append(
        f"Minimum volume threshold: {format_volume(thresholds.min_average_volume)}"
    )
    lines.append(
        f"Price range: ${thresholds.min_share_price:.2f} - "
        f"${thresholds.max_share_price:.2f}"
    )
    lines.append(f"Date: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    lines.append("Summary:")
    lines.append(f"- Total tickers analyzed: {len(tickers)}")
    lines.append(f"- Tickers meeting all criteria: {len(result.passed)}")
    lines.append(f"- Tickers filtered out: {len(result.removed)}")
    lines.append("")

    lines.append("Tickers Meeting Criteria:")
    for ticker in sorted(result.passed):
        lines.append(
            f"{ticker}: Volume={format_volume(volumes.get(ticker, 0.0))}, "
            f"Price=${prices.get(ticker, 0.0):.2f}"
        )

    lines.append("")
    lines.append("Filtered Out Tickers:")
    for item in sorted(result.removed, key=lambda r: r.ticker):
        lines.append(
            f"{item.ticker}: Volume={format_volume(item.volume)}, "
            f"Price=${item.price:.2f} - Removed due to: {item.reason_text}"
        )

    return "\n".join(lines) + "\n"


def report_path_for(output_path: Path) -> Path:
    """Report file beside the output CSV: filtered_list.csv -> filtered_list_report.txt."""
    return output_path.with_name(f"{output_path.stem}_report.txt")
