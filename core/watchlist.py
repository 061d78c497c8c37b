"""Gaps spreadsheet -> TradingView watchlist converter.

The spreadsheet export has section titles on one row ("Complete List",
"Trimmed List", "Favorite Gaps") and direction headers on the next
("Up"/"Down", "Bullish"/"Bearish"). Symbols fill the columns below.
"Complete List" symbols already present in the matching "Trimmed List"
column are dropped so each symbol shows up once.

Output is a single line of ``###<label>,SYM,SYM,...`` groups.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from core.tickers import SECTION_MARKER, parse_rows

logger = logging.getLogger(__name__)


class WatchlistGroup(BaseModel):
    """One ``###`` group in the output watchlist."""

    label: str
    section: str
    column: str
    exclude_section: str | None = None


class WatchlistLayout(BaseModel):
    """Where sections live in the sheet and how they map to output groups."""

    title_row: int = 1
    header_row: int = 2
    first_data_row: int = 3
    sections: list[str] = Field(default_factory=list)
    groups: list[WatchlistGroup] = Field(default_factory=list)


def load_layout(path: Path) -> WatchlistLayout:
    """Load the section layout from YAML config."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return WatchlistLayout(**data)


def locate_columns(
    rows: list[list[str]], layout: WatchlistLayout
) -> dict[tuple[str, str], int]:
    """Find the column index of every (section, header) pair.

    Returns:
        {(section title, column header): column index}. Pairs that can't be
        found are omitted.
    """
    if len(rows) <= max(layout.title_row, layout.header_row):
        logger.warning("Sheet has only %d rows; no section headers found", len(rows))
        return {}

    titles = [cell.strip() for cell in rows[layout.title_row]]
    headers = [cell.strip() for cell in rows[layout.header_row]]

    starts: list[tuple[int, str]] = []
    for section in layout.sections:
        if section in titles:
            idx = titles.index(section)
            starts.append((idx, section))
            logger.info('Found "%s" at index %d', section, idx)
        else:
            logger.warning('Section "%s" not found in title row', section)
    starts.sort()

    columns: dict[tuple[str, str], int] = {}
    for n, (start, section) in enumerate(starts):
        end = starts[n + 1][0] if n + 1 < len(starts) else len(headers)
        for i in range(start, end):
            title = titles[i] if i < len(titles) else ""
            # A later column with the same header wins
            if headers[i] and title in ("", section):
                columns[(section, headers[i])] = i
    return columns


def _clean_symbol(cell: str) -> str:
    """Strip surrounding space and any '(note)' suffix."""
    return cell.split("(", 1)[0].strip()


def extract_column(rows: list[list[str]], column: int, first_row: int) -> list[str]:
    """Non-empty symbols in a column from first_row down."""
    symbols: list[str] = []
    for row in rows[first_row:]:
        if column < len(row) and row[column].strip():
            symbol = _clean_symbol(row[column])
            if symbol:
                symbols.append(symbol)
    return symbols


def convert_watchlist(
    csv_text: str, layout: WatchlistLayout
) -> tuple[str, dict[str, int]]:
    """Convert a sectioned sheet into a TradingView watchlist line.

    Returns:
        (watchlist text, {group label: symbol count}) for non-empty groups.
    """
    rows = parse_rows(csv_text)
    logger.info("Total rows: %d", len(rows))
    columns = locate_columns(rows, layout)

    def symbols_for(section: str, header: str) -> list[str]:
        idx = columns.get((section, header))
        if idx is None:
            return []
        return extract_column(rows, idx, layout.first_data_row)

    parts: list[str] = []
    counts: dict[str, int] = {}
    for group in layout.groups:
        symbols = symbols_for(group.section, group.column)
        if group.exclude_section:
            excluded = set(symbols_for(group.exclude_section, group.column))
            before = len(symbols)
            symbols = [s for s in symbols if s not in excluded]
            logger.info(
                "%s: %d symbols (%d already in %s)",
                group.label, len(symbols), before - len(symbols), group.exclude_section,
            )
        if symbols:
            parts.append(f"{SECTION_MARKER}{group.label}")
            parts.extend(symbols)
            counts[group.label] = len(symbols)

    return ",".join(parts), counts


def convert_file(
    input_path: Path, output_path: Path, layout_path: Path
) -> tuple[str, dict[str, int]]:
    """Read a sheet export, convert it and write the watchlist.

    Raises:
        OSError: the sheet or layout can't be read, or the output can't be written.
    """
    layout = load_layout(layout_path)
    with open(input_path, encoding="utf-8-sig", newline="") as f:
        csv_text = f.read()
    text, counts = convert_watchlist(csv_text, layout)
    output_path.write_text(text, encoding="utf-8")
    logger.info("Conversion complete! Output saved to %s", output_path)
    return text, counts
