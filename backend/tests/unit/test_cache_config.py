"""Unit tests for cache options and domain presets."""

import os
import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from travel_cache.models import BYTES_PER_MB, CacheOptions, CacheStats
from travel_cache.services.cache import (
    CITIES,
    PACKING_LIST,
    WEATHER,
    default_presets,
    load_preset,
    preset_names,
)


class TestCacheOptions:
    """Tests for CacheOptions validation."""

    def test_valid_options(self) -> None:
        options = CacheOptions(
            max_entries=3,
            max_memory_bytes=1_000_000,
            ttl_seconds=1.0,
            sweep_interval_seconds=0.5,
        )
        assert options.max_entries == 3
        assert options.ttl_seconds == 1.0

    def test_zero_ttl_allowed(self) -> None:
        options = CacheOptions(
            max_entries=3, max_memory_bytes=10, ttl_seconds=0, sweep_interval_seconds=1
        )
        assert options.ttl_seconds == 0

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_entries", 0),
            ("max_memory_bytes", 0),
            ("ttl_seconds", -1),
            ("sweep_interval_seconds", 0),
        ],
    )
    def test_rejects_out_of_range(self, field: str, value: float) -> None:
        fields = {
            "max_entries": 3,
            "max_memory_bytes": 10,
            "ttl_seconds": 1,
            "sweep_interval_seconds": 1,
        }
        fields[field] = value
        with pytest.raises(ValidationError):
            CacheOptions(**fields)

    def test_all_fields_required(self) -> None:
        with pytest.raises(ValidationError):
            CacheOptions(max_entries=3)

    def test_options_are_frozen(self) -> None:
        options = CacheOptions(
            max_entries=3, max_memory_bytes=10, ttl_seconds=1, sweep_interval_seconds=1
        )
        with pytest.raises(ValidationError):
            options.max_entries = 5


class TestCacheStats:
    """Tests for CacheStats."""

    def test_memory_usage_mb(self) -> None:
        stats = CacheStats(entry_count=1, memory_usage_bytes=BYTES_PER_MB // 2)
        assert stats.memory_usage_mb == 0.5


class TestCachePresets:
    """Tests for the domain presets."""

    def setup_method(self) -> None:
        self.presets = default_presets()

    def test_exports_all_presets(self) -> None:
        assert set(preset_names()) == {WEATHER, CITIES, PACKING_LIST}
        assert set(default_presets()) == {WEATHER, CITIES, PACKING_LIST}

    def test_weather_defaults(self) -> None:
        weather = self.presets[WEATHER]
        assert weather.max_entries == 1000
        assert weather.max_memory_bytes == 30 * BYTES_PER_MB
        assert weather.ttl_seconds == 45 * 60
        assert weather.sweep_interval_seconds == 15 * 60

    def test_presets_differ(self) -> None:
        assert self.presets[WEATHER].ttl_seconds != self.presets[CITIES].ttl_seconds
        assert self.presets[CITIES].max_entries != self.presets[PACKING_LIST].max_entries

    def test_ttls_follow_data_lifetime(self) -> None:
        assert self.presets[WEATHER].ttl_seconds < self.presets[CITIES].ttl_seconds
        assert self.presets[PACKING_LIST].ttl_seconds > self.presets[WEATHER].ttl_seconds
        assert self.presets[PACKING_LIST].ttl_seconds == 48 * 60 * 60

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_WEATHER_TTL_SECONDS", "60")
        monkeypatch.setenv("CACHE_WEATHER_MAX_MEMORY_MB", "0.5")
        monkeypatch.setenv("CACHE_WEATHER_MAX_ENTRIES", "10")

        options = load_preset(WEATHER)

        assert options.ttl_seconds == 60
        assert options.max_memory_bytes == BYTES_PER_MB // 2
        assert options.max_entries == 10
        assert options.sweep_interval_seconds == 15 * 60

    def test_blank_override_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_CITIES_MAX_ENTRIES", "  ")
        assert load_preset(CITIES).max_entries == 2000

    def test_invalid_override_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_CITIES_MAX_ENTRIES", "0")
        with pytest.raises(ValidationError):
            load_preset(CITIES)

    def test_unknown_preset(self) -> None:
        with pytest.raises(KeyError):
            load_preset("nope")

    def test_non_numeric_override_falls_back(self, monkeypatch, caplog) -> None:
        monkeypatch.setenv("CACHE_WEATHER_TTL_SECONDS", "45m")

        with caplog.at_level("WARNING"):
            options = load_preset(WEATHER)

        assert options.ttl_seconds == 45 * 60
        assert "CACHE_WEATHER_TTL_SECONDS" in caplog.text

    def test_overrides_read_at_call_time(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_PACKING_LIST_MAX_ENTRIES", "42")
        assert default_presets()[PACKING_LIST].max_entries == 42

    def test_bad_override_does_not_break_import(self) -> None:
        backend_dir = Path(__file__).resolve().parents[2]
        env = {
            **os.environ,
            "CACHE_WEATHER_TTL_SECONDS": "45m",
            "CACHE_CITIES_MAX_ENTRIES": "0",
            "PYTHONPATH": str(backend_dir),
        }

        result = subprocess.run(
            [sys.executable, "-c", "import travel_cache.services.cache, travel_cache.main"],
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )

        assert result.returncode == 0, result.stderr
