"""Tests for the export workbook cache."""

from __future__ import annotations

from api.services.export_cache import ExportCache, rows_digest


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestRowsDigest:
    def test_same_content_same_key(self) -> None:
        a = rows_digest(("Name",), [{"Name": "Asha"}], "All")
        b = rows_digest(["Name"], [{"Name": "Asha"}], "All")

        assert a == b
        assert len(a) == 64

    def test_content_changes_key(self) -> None:
        assert rows_digest(("Name",), [{"Name": "Asha"}]) != rows_digest(("Name",), [{"Name": "Ravi"}])
        assert rows_digest(("Name",), [], "All") != rows_digest(("Name",), [], "Approved")


class TestExportCache:
    def test_hit_and_miss(self) -> None:
        cache = ExportCache(capacity=2, ttl_seconds=60, clock=FakeClock())

        assert cache.get("k") is None
        cache.put("k", b"xlsx")

        assert cache.get("k") == b"xlsx"
        stats = cache.get_stats()
        assert stats["hit_count"] == 1
        assert stats["miss_count"] == 1

    def test_ttl_expiry(self) -> None:
        clock = FakeClock()
        cache = ExportCache(capacity=2, ttl_seconds=60, clock=clock)
        cache.put("k", b"xlsx")

        clock.now += 61

        assert cache.get("k") is None
        assert len(cache) == 0

    def test_lru_eviction(self) -> None:
        """The least recently used entry goes when capacity is reached."""
        clock = FakeClock()
        cache = ExportCache(capacity=2, ttl_seconds=600, clock=clock)
        cache.put("a", b"1")
        clock.now += 1
        cache.put("b", b"2")
        clock.now += 1
        cache.get("a")
        clock.now += 1

        cache.put("c", b"3")

        assert cache.get("b") is None
        assert cache.get("a") == b"1"
        assert cache.get("c") == b"3"

    def test_zero_capacity_disables(self) -> None:
        cache = ExportCache(capacity=0, ttl_seconds=60)
        cache.put("k", b"xlsx")

        assert cache.get("k") is None

    def test_clear(self) -> None:
        cache = ExportCache(capacity=2, ttl_seconds=60)
        cache.put("k", b"xlsx")

        cache.clear()

        assert len(cache) == 0
