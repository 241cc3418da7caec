"""Generic breakdown calculator for dashboard distributions.

This module provides the shared count/percentage helpers used by every
distribution, comparison and attendance report so that zero-safety and
rounding are decided in one place.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class BreakdownStats:
    """Statistics for a single breakdown category."""

    count: int
    percentage: int


def safe_rate(numerator: float, denominator: float) -> float:
    """Calculate rate, handling division by zero.

    Args:
        numerator: The numerator value.
        denominator: The denominator value.

    Returns:
        The ratio, or 0.0 if denominator is zero.
    """
    return numerator / denominator if denominator > 0 else 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3).

    Python's round() uses banker's rounding, which disagrees with the
    percentages the dashboard has always shown.
    """
    return int(math.floor(value + 0.5))


def calculate_percentage(count: int, total: int) -> int:
    """Calculate a whole-number percentage, handling division by zero.

    Args:
        count: The count to convert to percentage.
        total: The total to divide by.

    Returns:
        round(count / total * 100), or 0 if total is zero.
    """
    return round_half_up(safe_rate(count, total) * 100)


def format_average(values: Iterable[float]) -> str:
    """Mean of values formatted to one decimal place, or "0" when empty."""
    items = list(values)
    if not items:
        return "0"
    # Halves go up, as for percentages. The inner round() clears binary float noise first.
    tenths = round_half_up(round(sum(items) / len(items) * 10, 6))
    return f"{tenths / 10:.1f}"


def compute_breakdown(
    records: Iterable[Any],
    extractor: Callable[[Any], T],
    buckets: Iterable[T] | None = None,
) -> dict[T, BreakdownStats]:
    """Count records per category and attach percentages.

    Args:
        records: Records to classify (already de-duplicated by the caller).
        extractor: Function that extracts the category value from a record.
        buckets: Optional fixed categories; they are always present in the
            result (with zero counts) and keep the given order.

    Returns:
        Dictionary mapping category value to BreakdownStats.

    Example:
        >>> from api.services.extractors import extract_affiliation
        >>> result = compute_breakdown(members, extract_affiliation)
        >>> result["Internal"].percentage
        60
    """
    counts: dict[Any, int] = {bucket: 0 for bucket in buckets} if buckets is not None else {}

    for record in records:
        value = extractor(record)
        counts[value] = counts.get(value, 0) + 1

    total = sum(counts.values())
    return {
        key: BreakdownStats(count=count, percentage=calculate_percentage(count, total))
        for key, count in counts.items()
    }
