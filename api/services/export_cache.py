"""
Cache for generated export workbooks.

Keeps serialized workbooks keyed by a digest of the rows they were built
from, so repeated downloads of an unchanged sheet skip the openpyxl pass.
Bounded by capacity (least recently used entry evicted first) and by TTL.
Thread-safe; owned by the HTTP layer and injected where needed.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)


def rows_digest(columns: Sequence[str], rows: Iterable[Mapping[str, Any]], sheet_title: str = "") -> str:
    """SHA-256 of the serialized sheet content."""
    payload = json.dumps(
        {"title": sheet_title, "columns": list(columns), "rows": [dict(row) for row in rows]},
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ExportCache:
    """Thread-safe TTL + LRU cache of workbook bytes."""

    def __init__(
        self,
        capacity: int = 32,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache.

        Args:
            capacity: Maximum number of workbooks kept (0 disables caching)
            ttl_seconds: Time to live for a cached workbook
            clock: Time source, injectable for tests
        """
        self._cache: dict[str, bytes] = {}
        self._cache_times: dict[str, float] = {}
        self._access_times: dict[str, float] = {}
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._hit_count = 0
        self._miss_count = 0

        logger.info(f"ExportCache initialized with TTL={ttl_seconds}s, capacity={capacity}")

    def get(self, key: str) -> bytes | None:
        """Return cached workbook bytes, or None if missing or expired."""
        with self._lock:
            if key not in self._cache:
                self._miss_count += 1
                logger.debug(f"Export cache miss for {key[:12]}")
                return None

            now = self._clock()
            if now - self._cache_times[key] > self._ttl:
                logger.debug(f"Export cache entry expired for {key[:12]}")
                self._evict(key)
                self._miss_count += 1
                return None

            self._access_times[key] = now
            self._hit_count += 1
            return self._cache[key]

    def put(self, key: str, content: bytes) -> None:
        """Store workbook bytes, evicting the least recently used entry when full."""
        if self._capacity <= 0:
            return

        with self._lock:
            if len(self._cache) >= self._capacity and key not in self._cache:
                self._evict_lru()

            now = self._clock()
            self._cache[key] = content
            self._cache_times[key] = now
            self._access_times[key] = now

    def clear(self) -> None:
        """Clear all cached workbooks."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._cache_times.clear()
            self._access_times.clear()
            logger.info(f"Cleared {count} cached exports")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total_requests = self._hit_count + self._miss_count
            hit_rate = self._hit_count / total_requests if total_requests > 0 else 0.0

            return {
                "cache_size": len(self._cache),
                "hit_count": self._hit_count,
                "miss_count": self._miss_count,
                "hit_rate": round(hit_rate, 3),
                "total_requests": total_requests,
                "ttl_seconds": self._ttl,
                "capacity": self._capacity,
            }

    def _evict(self, key: str) -> None:
        if key in self._cache:
            del self._cache[key]
            del self._cache_times[key]
            self._access_times.pop(key, None)

    def _evict_lru(self) -> None:
        if not self._access_times:
            return

        lru_key = min(self._access_times.items(), key=lambda x: x[1])[0]
        logger.debug(f"Evicting LRU export: {lru_key[:12]}")
        self._evict(lru_key)
