"""Ticker extraction from loosely structured CSV watchlists.

The input is a spreadsheet export where tickers can sit in any cell, mixed
with section headers (prefixed ``###``), notes and blank padding. Any short
uppercase token that looks like a symbol is treated as a candidate.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

TICKER_PATTERN = re.compile(r"^[A-Z0-9./\-]{1,5}$")
SECTION_MARKER = "###"


class InputError(Exception):
    """The identifier source is unreadable or contains no tickers."""


def canonical_symbol(ticker: str) -> str:
    """Strip a ``/``-suffixed qualifier (e.g. warrants: 'ABC/WS' -> 'ABC')."""
    return ticker.split("/", 1)[0]


def is_ticker_cell(cell: str | None) -> bool:
    """True when a raw CSV cell looks like a ticker symbol."""
    if not cell or cell.startswith(SECTION_MARKER):
        return False
    trimmed = cell.strip()
    return bool(trimmed) and " " not in trimmed and bool(TICKER_PATTERN.match(trimmed))


def parse_rows(csv_text: str) -> list[list[str]]:
    """Parse CSV text into rows, skipping blank lines.

    Rows made only of separators (",,,") are kept so column positions and
    row offsets stay aligned with the spreadsheet.
    """
    reader = csv.reader(io.StringIO(csv_text))
    return [row for row in reader if row]


def extract_tickers(csv_text: str) -> list[str]:
    """Return unique ticker candidates in order of first appearance."""
    rows = parse_rows(csv_text)
    logger.info("Parsed %d rows from CSV", len(rows))

    tickers: dict[str, None] = {}
    for row in rows:
        for cell in row:
            if is_ticker_cell(cell):
                tickers.setdefault(cell.strip(), None)

    logger.info("Extracted %d potential ticker symbols", len(tickers))
    return list(tickers)


def read_tickers(path: Path) -> tuple[str, list[str]]:
    """Read a CSV file and extract its tickers.

    Returns:
        (raw CSV text, ticker list)

    Raises:
        InputError: the file can't be read or holds no tickers.
    """
    try:
        # utf-8-sig drops the BOM Excel writes; newline="" keeps \r\n intact for csv
        with open(path, encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Could not read input file {path}: {e}") from e
    logger.info("Read %s (%d bytes)", path, len(text))

    tickers = extract_tickers(text)
    if not tickers:
        raise InputError(f"No valid tickers found in {path}")
    return text, tickers


def rewrite_csv(csv_text: str, keep: list[str] | set[str]) -> str:
    """Blank out every ticker cell not in ``keep``.

    Headers, notes and row shape are preserved so the output still lines up
    with the original spreadsheet sections.
    """
    rows = parse_rows(csv_text)
    if not rows:
        return csv_text

    keep_set = set(keep)
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\r\n")
    for row in rows:
        writer.writerow(
            "" if is_ticker_cell(cell) and cell.strip() not in keep_set else cell
            for cell in row
        )
    return out.getvalue().rstrip("\r\n")
