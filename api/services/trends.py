"""Daily trend series for the dashboard charts.

Every series covers the trailing window ending today (inclusive), one point
per calendar day in ascending order. Days without records are reported as
zero, so a 7-day window always yields 7 points.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import date, timedelta

from api.schemas.metrics import RevenueTrendPoint, TrendPoint
from innothon.models import ContactMessage, Registration

from .normalizer import day_key_of
from .revenue import AMOUNT_DECIMALS, revenue_split
from .safety import total_function

DEFAULT_WINDOW_DAYS = 7


def trend_days(window_days: int = DEFAULT_WINDOW_DAYS, today: date | None = None) -> list[str]:
    """Contiguous ascending day keys for the trailing window."""
    if window_days < 1:
        return []
    end = today or date.today()
    return [(end - timedelta(days=offset)).isoformat() for offset in range(window_days - 1, -1, -1)]


def _empty_counts(
    records: Iterable[object] = (), window_days: int = DEFAULT_WINDOW_DAYS, today: date | None = None
) -> list[TrendPoint]:
    return [TrendPoint(date=day, count=0) for day in trend_days(window_days, today)]


def _empty_revenue(
    registrations: Iterable[object] = (), window_days: int = DEFAULT_WINDOW_DAYS, today: date | None = None
) -> list[RevenueTrendPoint]:
    return [RevenueTrendPoint(date=day, revenue=0.0, potential_revenue=0.0) for day in trend_days(window_days, today)]


def _count_trend(created: Iterable[object], window_days: int, today: date | None) -> list[TrendPoint]:
    days = trend_days(window_days, today)
    counts = Counter(day_key_of(timestamp) for timestamp in created)
    return [TrendPoint(date=day, count=counts.get(day, 0)) for day in days]


@total_function(_empty_counts)
def registration_trend(
    records: Iterable[Registration],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> list[TrendPoint]:
    """Registrations created per day over the trailing window."""
    return _count_trend((record.created_at for record in records), window_days, today)


@total_function(_empty_counts)
def message_trend(
    messages: Iterable[ContactMessage],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> list[TrendPoint]:
    """Contact messages received per day over the trailing window."""
    return _count_trend((message.created_at for message in messages), window_days, today)


@total_function(_empty_revenue)
def revenue_trend(
    registrations: Iterable[Registration],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: date | None = None,
) -> list[RevenueTrendPoint]:
    """Recognized and potential revenue per day over the trailing window.

    Args:
        registrations: Normalized registrations (any status).
        window_days: Number of days in the window.
        today: Last day of the window (defaults to the local date).

    Returns:
        One point per day; revenue counts approved registrations only while
        potential_revenue counts every registration.
    """
    days = trend_days(window_days, today)
    recognized: dict[str, float] = defaultdict(float)
    potential: dict[str, float] = defaultdict(float)
    for registration in registrations:
        day = day_key_of(registration.created_at)
        split = revenue_split(registration)
        recognized[day] += split.recognized
        potential[day] += split.potential

    return [
        RevenueTrendPoint(
            date=day,
            revenue=round(recognized.get(day, 0.0), AMOUNT_DECIMALS),
            potential_revenue=round(potential.get(day, 0.0), AMOUNT_DECIMALS),
        )
        for day in days
    ]
