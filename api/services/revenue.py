"""Revenue calculation for registrations.

Two figures are reported and they must not be mixed up:

- potential: total_amount of every registration, whatever its status
- recognized: total_amount of approved registrations only

revenue_of() returns the would-be amount regardless of status. Deciding
whether that amount counts is the caller's job; use revenue_split() or
total_revenue() instead of filtering by hand so approved money is never
counted twice.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from innothon.models import Registration

from .safety import total_function

# Currency amounts are rounded once, on the final aggregate
AMOUNT_DECIMALS = 2


@dataclass(frozen=True)
class Revenue:
    """Potential vs recognized revenue."""

    potential: float = 0.0
    recognized: float = 0.0

    def __add__(self, other: Revenue) -> Revenue:
        if not isinstance(other, Revenue):
            return NotImplemented
        return Revenue(
            potential=self.potential + other.potential,
            recognized=self.recognized + other.recognized,
        )

    def rounded(self) -> Revenue:
        return Revenue(
            potential=round(self.potential, AMOUNT_DECIMALS),
            recognized=round(self.recognized, AMOUNT_DECIMALS),
        )


def revenue_of(registration: Registration) -> float:
    """Would-be amount of a registration, ignoring its status."""
    return registration.total_amount


def revenue_split(registration: Registration) -> Revenue:
    """Revenue of one registration, recognized only when approved."""
    amount = revenue_of(registration)
    return Revenue(potential=amount, recognized=amount if registration.is_approved else 0.0)


def apportion(registration: Registration) -> dict[str, float]:
    """Split a registration's amount evenly across its selected events.

    Shares are not rounded; a registration with no selected events yields an
    empty mapping.
    """
    events = registration.selected_events
    if not events:
        return {}
    share = revenue_of(registration) / len(events)
    return {event_id: share for event_id in events}


@total_function(lambda *args, **kwargs: {})
def revenue_by_event(
    registrations: Iterable[Registration],
    recognized_only: bool = True,
) -> dict[str, float]:
    """Sum apportioned revenue per event id.

    Args:
        registrations: Normalized registrations.
        recognized_only: Count approved registrations only (default). Pass
            False for potential revenue.

    Returns:
        Event id to amount, rounded to 2 decimals after summing.
    """
    totals: dict[str, float] = defaultdict(float)
    for registration in registrations:
        if recognized_only and not registration.is_approved:
            continue
        for event_id, share in apportion(registration).items():
            totals[event_id] += share
    return {event_id: round(amount, AMOUNT_DECIMALS) for event_id, amount in totals.items()}


@total_function(lambda *args, **kwargs: Revenue())
def total_revenue(registrations: Iterable[Registration]) -> Revenue:
    """Potential and recognized revenue across all registrations."""
    total = Revenue()
    for registration in registrations:
        total = total + revenue_split(registration)
    return total.rounded()
