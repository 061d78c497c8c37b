"""Tests for the JSON quote cache."""

from __future__ import annotations

import json
import logging

from core.models import AttributeKind
from data.cache import QuoteCache

PRICE = AttributeKind.PRICE
VOLUME = AttributeKind.AVERAGE_VOLUME


class TestQuoteCache:
    def test_missing_file_is_cold_cache(self, quote_cache):
        assert quote_cache.load(PRICE) == {}
        assert quote_cache.load(VOLUME) == {}

    def test_save_then_load(self, quote_cache):
        """Sentinel zeros are persisted like any other value."""
        quote_cache.save(PRICE, {"AAPL": 150.0, "ZZZZ": 0.0})
        assert quote_cache.load(PRICE) == {"AAPL": 150.0, "ZZZZ": 0.0}

    def test_kinds_are_independent(self, quote_cache):
        quote_cache.save(PRICE, {"AAPL": 150.0})
        assert quote_cache.load(VOLUME) == {}

    def test_file_is_readable_json(self, quote_cache, test_settings):
        quote_cache.save(VOLUME, {"AAPL": 5_000_000.0})
        text = test_settings.volume_cache_path.read_text(encoding="utf-8")
        assert json.loads(text) == {"AAPL": 5_000_000.0}
        assert "\n  " in text  # indented

    def test_save_leaves_no_temp_files(self, quote_cache, tmp_path):
        quote_cache.save(PRICE, {"AAPL": 1.0})
        quote_cache.save(PRICE, {"AAPL": 2.0})
        assert sorted(p.name for p in tmp_path.iterdir()) == ["price_cache.json"]

    def test_corrupt_file_is_cold_cache(self, quote_cache, test_settings, caplog):
        test_settings.price_cache_path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.ERROR, logger="data.cache"):
            assert quote_cache.load(PRICE) == {}
        assert "Error loading cache" in caplog.text

    def test_non_object_file_is_cold_cache(self, quote_cache, test_settings, write_cache):
        write_cache(test_settings.price_cache_path, [1, 2, 3])
        assert quote_cache.load(PRICE) == {}

    def test_non_numeric_entries_dropped(self, quote_cache, test_settings, write_cache):
        write_cache(
            test_settings.price_cache_path,
            {"AAPL": 150, "BAD": "n/a", "NUL": None, "FLAG": True},
        )
        assert quote_cache.load(PRICE) == {"AAPL": 150.0}

    def test_failed_save_keeps_previous_file(
        self, quote_cache, test_settings, monkeypatch, caplog, tmp_path,
    ):
        quote_cache.save(PRICE, {"AAPL": 150.0})

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("data.cache.os.replace", broken_replace)
        with caplog.at_level(logging.ERROR, logger="data.cache"):
            quote_cache.save(PRICE, {"AAPL": 999.0})

        assert "Error saving cache" in caplog.text
        assert QuoteCache(test_settings).load(PRICE) == {"AAPL": 150.0}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["price_cache.json"]

    def test_unwritable_location_is_not_fatal(self, test_settings, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        settings = test_settings.model_copy(
            update={"price_cache_path": blocker / "price_cache.json"},
        )
        with caplog.at_level(logging.ERROR, logger="data.cache"):
            QuoteCache(settings).save(PRICE, {"AAPL": 1.0})
        assert "Error saving cache" in caplog.text
