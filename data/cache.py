"""JSON file cache for resolved quote attributes.

One file per AttributeKind, each a flat {ticker: value} object. Entries
never expire: once a ticker has a value (including the 0.0 "no data"
sentinel) it is reused until the file is deleted or the cache bypassed.

I/O failures are never fatal. An unreadable file loads as an empty cache,
a failed save is logged and leaves the previous file in place.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from config.settings import Settings, settings as default_settings
from core.models import AttributeKind

logger = logging.getLogger(__name__)


class QuoteCache:
    """Load/save wrapper around the per-kind JSON cache files."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or default_settings
        self._paths = {
            AttributeKind.PRICE: Path(settings.price_cache_path),
            AttributeKind.AVERAGE_VOLUME: Path(settings.volume_cache_path),
        }

    def path_for(self, kind: AttributeKind) -> Path:
        return self._paths[kind]

    def load(self, kind: AttributeKind) -> dict[str, float]:
        """Read the cache for a kind. Missing or corrupt files give {}."""
        path = self.path_for(kind)
        if not path.exists():
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError):
            logger.error("Error loading cache from %s", path, exc_info=True)
            return {}

        if not isinstance(raw, dict):
            logger.error(
                "Cache file %s holds %s, expected an object; ignoring it",
                path, type(raw).__name__,
            )
            return {}

        data: dict[str, float] = {}
        for ticker, value in raw.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.warning("Dropping non-numeric cache entry %s=%r in %s", ticker, value, path)
                continue
            data[ticker] = float(value)

        logger.info("Loaded %d cached %s values from %s", len(data), kind.value, path)
        return data

    def save(self, kind: AttributeKind, data: dict[str, float]) -> None:
        """Overwrite the cache for a kind.

        Writes to a temp file in the same directory and renames it over the
        target, so readers never see a half-written file.
        """
        path = self.path_for(kind)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
            logger.info("Saved %d %s values to %s", len(data), kind.value, path)
        except OSError:
            logger.error("Error saving cache to %s", path, exc_info=True)
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name)
