"""Tests for the timestamped cache."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from coach_engine.errors import ConfigurationError
from coach_engine.history.cache import TimestampedCache

T0 = datetime(2026, 3, 1, 6, 0, tzinfo=timezone.utc)


class _Clock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestTimestampedCache:
    def test_fresh_entry_is_reused(self) -> None:
        clock = _Clock()
        cache: TimestampedCache[int] = TimestampedCache(timedelta(hours=24), clock=clock)
        compute = MagicMock(return_value=42)
        assert cache.get_or_compute("zones", compute) == 42
        clock.now = T0 + timedelta(hours=23)
        assert cache.get_or_compute("zones", compute) == 42
        compute.assert_called_once()

    def test_stale_entry_is_recomputed(self) -> None:
        clock = _Clock()
        cache: TimestampedCache[int] = TimestampedCache(timedelta(hours=24), clock=clock)
        cache.put("zones", 1)
        clock.now = T0 + timedelta(hours=25)
        assert cache.get("zones") is None
        assert cache.get_or_compute("zones", lambda: 2) == 2
        assert cache.stored_at("zones") == clock.now

    def test_invalidate(self) -> None:
        cache: TimestampedCache[int] = TimestampedCache(timedelta(hours=1), clock=_Clock())
        cache.put("k", 1)
        cache.invalidate("k")
        assert cache.get("k") is None

    def test_in_memory_cache_skips_persistence(self, tmp_path: Path) -> None:
        cache: TimestampedCache[int] = TimestampedCache(timedelta(hours=1), clock=_Clock())
        cache.put("k", 1)
        cache._load()
        assert cache.get("k") == 1
        assert list(tmp_path.iterdir()) == []

    def test_persistent_cache_needs_codec(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="encode and decode"):
            TimestampedCache(timedelta(hours=1), path=tmp_path / "cache.json")

    def test_survives_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        clock = _Clock()
        first: TimestampedCache[dict] = TimestampedCache(
            timedelta(hours=24), path=path, encode=dict, decode=dict, clock=clock
        )
        first.put("zones", {"THRESHOLD": 3.0})

        clock.now = T0 + timedelta(hours=2)
        second: TimestampedCache[dict] = TimestampedCache(
            timedelta(hours=24), path=path, encode=dict, decode=dict, clock=clock
        )
        assert second.get("zones") == {"THRESHOLD": 3.0}
        assert second.stored_at("zones") == T0

    def test_unreadable_file_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        path.write_text("{not json")
        cache: TimestampedCache[dict] = TimestampedCache(
            timedelta(hours=1), path=path, encode=dict, decode=dict, clock=_Clock()
        )
        assert cache.get("zones") is None
