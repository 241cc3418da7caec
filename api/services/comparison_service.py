"""Comparison service - per-event statistics for the event overview page.

Builds one comparison row per event that appears in any registration, plus the
online/offline summary cards. Rows come back ordered by event id; ranking them
is a presentation concern (see sort_by_participation).
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping

from api.schemas.metrics import EventComparisonRow, EventOverviewResponse, ModeSummary, RevenueSummary
from innothon.events import catalog_by_id, event_title, is_online_event
from innothon.models import EventInfo, Registration, TeamMember

from .breakdown_calculator import calculate_percentage, format_average
from .distribution import unique_members
from .extractors import is_internal
from .revenue import revenue_by_event, total_revenue
from .safety import empty_list, total_function

ONLINE = "online"
OFFLINE = "offline"


def _affiliation_counts(members: Mapping[str, TeamMember]) -> tuple[int, int]:
    internal = sum(1 for member in members.values() if is_internal(member))
    return internal, len(members) - internal


def _build_row(
    event_id: str,
    registrations: list[Registration],
    revenue: float,
    catalog: Mapping[str, EventInfo],
) -> EventComparisonRow:
    members = unique_members(registrations)
    internal, external = _affiliation_counts(members)
    participants = len(members)
    approved = sum(1 for registration in registrations if registration.is_approved)

    return EventComparisonRow(
        event_id=event_id,
        title=event_title(event_id, catalog),
        is_online=is_online_event(event_id),
        team_count=len(registrations),
        participant_count=participants,
        internal_count=internal,
        external_count=external,
        internal_percentage=calculate_percentage(internal, participants),
        external_percentage=calculate_percentage(external, participants),
        approved_count=approved,
        approval_percentage=calculate_percentage(approved, len(registrations)),
        revenue=revenue,
        average_team_size=format_average(registration.team_size for registration in registrations),
    )


def _group_by_event(registrations: Iterable[Registration]) -> dict[str, list[Registration]]:
    grouped: dict[str, list[Registration]] = defaultdict(list)
    for registration in registrations:
        for event_id in registration.selected_events:
            grouped[event_id].append(registration)
    return grouped


@total_function(empty_list)
def build_event_comparison(
    registrations: Iterable[Registration],
    catalog: Iterable[EventInfo] | None = None,
) -> list[EventComparisonRow]:
    """Build one comparison row per event selected by any registration.

    Args:
        registrations: Normalized registrations (all statuses).
        catalog: Event metadata used for titles (defaults to the static catalog).

    Returns:
        EventComparisonRow list ordered by event id. Revenue counts approved
        registrations only, apportioned across their selected events.
    """
    registrations = list(registrations)
    lookup = catalog_by_id(catalog)
    revenue = revenue_by_event(registrations)
    grouped = _group_by_event(registrations)

    return [
        _build_row(event_id, grouped[event_id], revenue.get(event_id, 0.0), lookup)
        for event_id in sorted(grouped)
    ]


def sort_by_participation(rows: Iterable[EventComparisonRow]) -> list[EventComparisonRow]:
    """Order rows by participant count (descending), ties by event id."""
    return sorted(rows, key=lambda row: (-row.participant_count, row.event_id))


def _mode_summary(mode: str, registrations: list[Registration]) -> ModeSummary:
    members = unique_members(registrations)
    internal, external = _affiliation_counts(members)
    return ModeSummary(
        mode=mode,
        team_count=len(registrations),
        participant_count=len(members),
        internal_count=internal,
        external_count=external,
    )


def _empty_modes(*args: object, **kwargs: object) -> dict[str, ModeSummary]:
    return {mode: _mode_summary(mode, []) for mode in (ONLINE, OFFLINE)}


@total_function(_empty_modes)
def summarize_by_mode(registrations: Iterable[Registration]) -> dict[str, ModeSummary]:
    """Participation in online vs offline events.

    A registration counts toward a mode when it selected at least one event of
    that mode, so a team in both kinds of event shows up in both summaries.
    """
    online: list[Registration] = []
    offline: list[Registration] = []
    for registration in registrations:
        events = registration.selected_events
        if any(is_online_event(event_id) for event_id in events):
            online.append(registration)
        if any(not is_online_event(event_id) for event_id in events):
            offline.append(registration)
    return {ONLINE: _mode_summary(ONLINE, online), OFFLINE: _mode_summary(OFFLINE, offline)}


def build_overview(
    registrations: Iterable[Registration],
    catalog: Iterable[EventInfo] | None = None,
) -> EventOverviewResponse:
    """Headline numbers and comparison rows for the event overview page."""
    registrations = list(registrations)
    catalog = list(catalog) if catalog is not None else None
    modes = summarize_by_mode(registrations)
    revenue = total_revenue(registrations)

    return EventOverviewResponse(
        total_registrations=len(registrations),
        total_participants=len(unique_members(registrations)),
        approved_count=sum(1 for registration in registrations if registration.is_approved),
        revenue=RevenueSummary(potential=revenue.potential, recognized=revenue.recognized),
        online=modes[ONLINE],
        offline=modes[OFFLINE],
        events=sort_by_participation(build_event_comparison(registrations, catalog)),
    )
