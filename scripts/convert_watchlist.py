#!/usr/bin/env python3
"""Convert the gaps spreadsheet export into a TradingView watchlist.

    python scripts/convert_watchlist.py [input.csv] [output.csv]

Paths default to TICKERFILTER_WATCHLIST_* settings. The output is the
input format expected by ``ticker-filter``.
"""
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from core.watchlist import convert_file

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("convert_watchlist")

input_path = Path(sys.argv[1]) if len(sys.argv) > 1 else settings.watchlist_input_path
output_path = Path(sys.argv[2]) if len(sys.argv) > 2 else settings.watchlist_output_path

try:
    text, counts = convert_file(input_path, output_path, settings.watchlist_sections_path)
except OSError as e:
    logger.error("Error processing file: %s", e)
    sys.exit(1)

print(text[:200] + ("..." if len(text) > 200 else ""))
print("Sections in output:")
for label, count in counts.items():
    print(f"- {label}: {count} symbols")
