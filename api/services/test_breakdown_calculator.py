"""Tests for the breakdown calculator.

The helpers here decide zero-safety and rounding for every percentage shown on
the dashboard, so they are pinned down precisely.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest


@dataclass
class MockMember:
    """Mock team member for testing."""

    id: str | None
    college: str | None = None
    year: str | None = None


class TestSafeRate:
    """Tests for safe_rate."""

    def test_divides(self) -> None:
        """safe_rate returns the ratio for a positive denominator."""
        from api.services.breakdown_calculator import safe_rate

        assert safe_rate(1, 4) == 0.25

    def test_zero_denominator(self) -> None:
        """safe_rate returns 0.0 instead of raising."""
        from api.services.breakdown_calculator import safe_rate

        assert safe_rate(5, 0) == 0.0


class TestCalculatePercentage:
    """Tests for calculate_percentage."""

    def test_whole_number(self) -> None:
        """Percentages are whole numbers."""
        from api.services.breakdown_calculator import calculate_percentage

        assert calculate_percentage(1, 3) == 33
        assert calculate_percentage(2, 3) == 67

    def test_half_rounds_up(self) -> None:
        """A share of exactly .5 rounds up, unlike Python's round()."""
        from api.services.breakdown_calculator import calculate_percentage

        assert calculate_percentage(1, 8) == 13  # 12.5
        assert calculate_percentage(5, 8) == 63  # 62.5

    def test_zero_total(self) -> None:
        """Zero total gives 0, never an exception."""
        from api.services.breakdown_calculator import calculate_percentage

        assert calculate_percentage(0, 0) == 0
        assert calculate_percentage(3, 0) == 0


class TestFormatAverage:
    """Tests for format_average."""

    def test_one_decimal(self) -> None:
        from api.services.breakdown_calculator import format_average

        assert format_average([2, 3, 3]) == "2.7"
        assert format_average([4]) == "4.0"

    def test_empty(self) -> None:
        """No values gives the literal '0'."""
        from api.services.breakdown_calculator import format_average

        assert format_average([]) == "0"

    def test_halves_round_up(self) -> None:
        """An exact half goes up, matching the percentage rounding."""
        from api.services.breakdown_calculator import format_average

        assert format_average([2, 2, 2, 3]) == "2.3"
        assert format_average([1, 2, 2, 2, 2, 3, 3, 3]) == "2.3"
        assert format_average([2, 3]) == "2.5"


class TestComputeBreakdown:
    """Tests for the compute_breakdown function."""

    def test_affiliation_breakdown(self) -> None:
        """compute_breakdown counts categories and attaches percentages."""
        from api.services.breakdown_calculator import BreakdownStats, compute_breakdown
        from api.services.extractors import extract_affiliation

        members = [
            MockMember("1", college="Hindustan Institute of Technology"),
            MockMember("2", college="HITS Chennai"),
            MockMember("3", college="Anna University"),
            MockMember("4", college="hindustan university"),
            MockMember("5", college=None),
        ]

        result = compute_breakdown(members, extract_affiliation)

        assert result["Internal"] == BreakdownStats(count=3, percentage=60)
        assert result["External"] == BreakdownStats(count=2, percentage=40)

    def test_fixed_buckets_always_present(self) -> None:
        """Fixed buckets appear with zero counts and keep their order."""
        from api.services.breakdown_calculator import compute_breakdown
        from api.services.extractors import YEAR_BUCKETS, extract_year

        members = [MockMember("1", year="3"), MockMember("2", year="3")]

        result = compute_breakdown(members, extract_year, buckets=YEAR_BUCKETS)

        assert list(result) == ["1", "2", "3", "4", "Other"]
        assert result["3"].count == 2
        assert result["3"].percentage == 100
        assert result["1"].count == 0
        assert result["1"].percentage == 0

    def test_empty_records(self) -> None:
        """No records with fixed buckets gives all zeros."""
        from api.services.breakdown_calculator import compute_breakdown
        from api.services.extractors import extract_affiliation

        result = compute_breakdown([], extract_affiliation, buckets=("Internal", "External"))

        assert all(stats.count == 0 and stats.percentage == 0 for stats in result.values())

    @pytest.mark.parametrize(
        ("year", "bucket"),
        [("1", "1"), ("4", "4"), (" 2 ", "2"), ("5", "Other"), ("", "Other"), (None, "Other"), ("First", "Other")],
    )
    def test_year_extraction(self, year: str | None, bucket: str) -> None:
        """Anything outside 1-4 lands in Other."""
        from api.services.extractors import extract_year

        assert extract_year(MockMember("1", year=year)) == bucket
