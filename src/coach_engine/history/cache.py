"""TimestampedCache — derived data with an explicit freshness window.

Every entry carries the time it was stored. Reads inside the TTL return
the cached value; anything older is dropped and the caller recomputes.
With a path the cache is mirrored to a small JSON file so the window
survives between scheduler invocations.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

from coach_engine.errors import ConfigurationError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    stored_at: datetime

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.stored_at <= ttl


class TimestampedCache(Generic[T]):
    """Key -> value cache with a time-to-live.

    Args:
        ttl: Maximum age of a reusable entry.
        path: Optional JSON file used to persist entries.
        encode: Converts a value to JSON-compatible data (needed with path).
        decode: Inverse of encode.
        clock: Returns the current aware datetime; injectable for tests.
    """

    def __init__(
        self,
        ttl: timedelta,
        path: Path | None = None,
        encode: Callable[[T], Any] | None = None,
        decode: Callable[[Any], T] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if path is not None and (encode is None or decode is None):
            raise ConfigurationError("A persistent cache needs encode and decode functions")
        self.ttl = ttl
        self.path = path
        self._encode = encode
        self._decode = decode
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        if path is not None:
            self._load()

    def get(self, key: str) -> T | None:
        """Cached value for *key*, or None when absent or stale."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self.ttl):
            logger.debug("Cache entry %s is stale (stored %s)", key, entry.stored_at)
            del self._entries[key]
            return None
        return entry.value

    def put(self, key: str, value: T) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        self._save()

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the fresh cached value or compute, store and return a new one."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute()
        self.put(key, value)
        return value

    def invalidate(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._save()

    def stored_at(self, key: str) -> datetime | None:
        entry = self._entries.get(key)
        return entry.stored_at if entry else None

    # -- Persistence ------------------------------------------------------

    def _load(self) -> None:
        if self.path is None or self._decode is None:
            return
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, exc)
            return
        for key, item in raw.items():
            try:
                self._entries[key] = CacheEntry(
                    value=self._decode(item["value"]),
                    stored_at=datetime.fromisoformat(item["stored_at"]),
                )
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Dropping malformed cache entry %s: %s", key, exc)

    def _save(self) -> None:
        if self.path is None or self._encode is None:
            return
        payload = {
            key: {"value": self._encode(entry.value), "stored_at": entry.stored_at.isoformat()}
            for key, entry in self._entries.items()
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2))
