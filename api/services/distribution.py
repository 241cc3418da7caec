"""Distribution aggregators for the analytics page.

Three breakdowns share one shape (bucket, count, percentage of total):

- by event: fan-out, a registration counts once for every event it selected
- by affiliation: unique members classified internal/external
- by year of study: unique members bucketed into 1-4 and Other

Member breakdowns de-duplicate by member id first, so someone on two team
rosters is counted once. Members without an id are skipped.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from api.schemas.metrics import DistributionSlice
from innothon.models import Registration, TeamMember

from .breakdown_calculator import calculate_percentage, compute_breakdown
from .extractors import EXTERNAL, INTERNAL, YEAR_BUCKETS, extract_affiliation, extract_member_id, extract_year
from .safety import empty_list, total_function, zero


def unique_members(registrations: Iterable[Registration]) -> dict[str, TeamMember]:
    """Team members keyed by id, merged across every roster.

    When the same id appears on several rosters, the first roster wins for
    every field except college: a member is kept internal if any roster lists
    an internal college, so the result does not depend on input order.
    """
    members: dict[str, TeamMember] = {}
    for registration in registrations:
        for member in registration.team_members:
            member_id = extract_member_id(member)
            if member_id is None:
                continue
            seen = members.get(member_id)
            if seen is None:
                members[member_id] = member
            elif extract_affiliation(seen) == EXTERNAL and extract_affiliation(member) == INTERNAL:
                members[member_id] = seen.model_copy(update={"college": member.college})
    return members


@total_function(empty_list)
def event_distribution(registrations: Iterable[Registration]) -> list[DistributionSlice]:
    """Registrations per selected event, largest first.

    A registration selecting k events contributes to k buckets; one selecting
    none contributes to none.
    """
    counts: Counter[str] = Counter()
    for registration in registrations:
        counts.update(registration.selected_events)

    total = sum(counts.values())
    return [
        DistributionSlice(name=event_id, value=count, percentage=calculate_percentage(count, total))
        for event_id, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


@total_function(empty_list)
def affiliation_distribution(registrations: Iterable[Registration]) -> list[DistributionSlice]:
    """Unique members split into Internal and External (both always present)."""
    breakdown = compute_breakdown(
        unique_members(registrations).values(), extract_affiliation, buckets=(INTERNAL, EXTERNAL)
    )
    return [
        DistributionSlice(name=name, value=stats.count, percentage=stats.percentage)
        for name, stats in breakdown.items()
    ]


@total_function(empty_list)
def year_distribution(registrations: Iterable[Registration]) -> list[DistributionSlice]:
    """Unique members per year of study, in the order 1, 2, 3, 4, Other."""
    breakdown = compute_breakdown(unique_members(registrations).values(), extract_year, buckets=YEAR_BUCKETS)
    return [
        DistributionSlice(name=name, value=stats.count, percentage=stats.percentage)
        for name, stats in breakdown.items()
    ]


@total_function(zero)
def distribution_percentage(slices: Iterable[DistributionSlice], name: str) -> int:
    """Share of one bucket in a distribution, 0 for an empty distribution."""
    items = list(slices)
    total = sum(item.value for item in items)
    count = sum(item.value for item in items if item.name == name)
    return calculate_percentage(count, total)
