"""Attendance statistics for the check-in page.

A member is present for an event when an attendance record exists with the
member's id and that event id. The registration desk is tracked the same way
under its own sentinel event id; whether a venue check-in implies a desk
check-in is enforced by the check-in UI, not here.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from api.schemas.metrics import AttendanceStatsResponse, AttendanceSummary, EventAttendance
from innothon.events import EVENT_CATALOG, REGISTRATION_DESK, catalog_by_id, event_title
from innothon.models import AttendanceRecord, EventInfo, Registration

from .breakdown_calculator import calculate_percentage
from .extractors import extract_member_id
from .safety import empty_list, total_function

logger = logging.getLogger(__name__)

# Attendance index: event id -> ids of members marked present
AttendanceIndex = dict[str, set[str]]

ALL_EVENTS = "All Events"
PRESENT = "Present"
ABSENT = "Absent"

ATTENDANCE_COLUMNS = (
    "Team ID",
    "Team Name",
    "Member Name",
    "Email",
    "Phone",
    "College",
    "Department",
    "Year",
    "Event",
    "Attendance Status",
    "Date",
)


def _coerce_record(record: Any) -> AttendanceRecord | None:
    if isinstance(record, AttendanceRecord):
        return record
    try:
        if isinstance(record, Mapping):
            return AttendanceRecord.model_validate(record)
        return AttendanceRecord(
            team_member_id=getattr(record, "team_member_id", None),
            event_id=getattr(record, "event_id", None),
            marked_at=getattr(record, "marked_at", None),
            marked_by=getattr(record, "marked_by", None),
        )
    except ValueError as e:
        logger.warning(f"Skipping malformed attendance record: {e}")
        return None


def index_attendance(records: Iterable[Any]) -> AttendanceIndex:
    """Group attendance records by event id into sets of member ids."""
    index: AttendanceIndex = defaultdict(set)
    for raw in records:
        record = _coerce_record(raw)
        if record is None or not record.team_member_id or not record.event_id:
            continue
        index[record.event_id].add(record.team_member_id)
    return dict(index)


def is_present(index: Mapping[str, set[str]], member_id: str | None, event_id: str) -> bool:
    """True if the member has an attendance record for the event."""
    if not member_id:
        return False
    return member_id in index.get(event_id, set())


def _as_index(attendance: Iterable[Any] | Mapping[str, Iterable[str]]) -> AttendanceIndex:
    if isinstance(attendance, Mapping):
        return {event_id: set(member_ids) for event_id, member_ids in attendance.items()}
    return index_attendance(attendance)


def _empty_stats(*args: Any, **kwargs: Any) -> AttendanceStatsResponse:
    return AttendanceStatsResponse(
        summary=AttendanceSummary(total_approved=0, total_attended=0, attendance_percentage=0),
        by_event=[],
    )


def _event_attendance(
    event_id: str,
    registrations: list[Registration],
    index: AttendanceIndex,
    catalog: Mapping[str, EventInfo],
) -> EventAttendance:
    if event_id == REGISTRATION_DESK:
        rosters = registrations
    else:
        rosters = [registration for registration in registrations if event_id in registration.selected_events]

    registered = 0
    present = 0
    for registration in rosters:
        for member in registration.team_members:
            registered += 1
            if is_present(index, extract_member_id(member), event_id):
                present += 1

    return EventAttendance(
        event_id=event_id,
        title=event_title(event_id, catalog),
        total_registered=registered,
        total_present=present,
        attendance_percentage=calculate_percentage(present, registered),
    )


@total_function(_empty_stats)
def build_attendance_stats(
    registrations: Iterable[Registration],
    attendance: Iterable[Any] | Mapping[str, Iterable[str]],
    catalog: Iterable[EventInfo] | None = None,
) -> AttendanceStatsResponse:
    """Compute the attendance summary and per-event breakdown.

    Args:
        registrations: Normalized registrations; only approved ones count.
        attendance: Raw attendance records, or an index from index_attendance().
        catalog: Known events (defaults to the static catalog). The
            registration desk row is always listed first.

    Returns:
        AttendanceStatsResponse. The summary compares every approved team
        member with every attendance mark across all events, so one member
        checked in at the desk and an event counts twice in total_attended.
    """
    approved = [registration for registration in registrations if registration.is_approved]
    index = _as_index(attendance)
    events = list(EVENT_CATALOG if catalog is None else catalog)
    lookup = catalog_by_id(events)

    total_approved = sum(len(registration.team_members) for registration in approved)
    total_attended = sum(len(member_ids) for member_ids in index.values())

    event_ids = [REGISTRATION_DESK] + [event.id for event in events if event.id != REGISTRATION_DESK]
    return AttendanceStatsResponse(
        summary=AttendanceSummary(
            total_approved=total_approved,
            total_attended=total_attended,
            attendance_percentage=calculate_percentage(total_attended, total_approved),
        ),
        by_event=[_event_attendance(event_id, approved, index, lookup) for event_id in event_ids],
    )


@total_function(empty_list)
def attendance_rows(
    registrations: Iterable[Registration],
    index: Mapping[str, set[str]],
    event_id: str | None = None,
    catalog: Iterable[EventInfo] | None = None,
    date_label: str = "N/A",
) -> list[dict[str, str]]:
    """Rows for the attendance sheet, one per team member.

    Args:
        registrations: Approved registrations to list.
        index: Attendance index from index_attendance().
        event_id: Event to report presence for. When omitted every member is
            listed under "All Events" with their registration desk status.
        catalog: Event metadata used for titles.
        date_label: Value of the Date column (the export date).

    Returns:
        Rows keyed by ATTENDANCE_COLUMNS.
    """
    lookup = catalog_by_id(catalog)
    check_event = event_id or REGISTRATION_DESK
    event_label = event_title(event_id, lookup) if event_id else ALL_EVENTS

    rows: list[dict[str, str]] = []
    for registration in registrations:
        if event_id and event_id != REGISTRATION_DESK and event_id not in registration.selected_events:
            continue
        for member in registration.team_members:
            present = is_present(index, extract_member_id(member), check_event)
            rows.append(
                {
                    "Team ID": registration.team_id or "N/A",
                    "Team Name": registration.team_name or "N/A",
                    "Member Name": member.name or "N/A",
                    "Email": member.email or "N/A",
                    "Phone": member.phone or "N/A",
                    "College": member.college or "N/A",
                    "Department": member.department or "N/A",
                    "Year": member.year or "N/A",
                    "Event": event_label,
                    "Attendance Status": PRESENT if present else ABSENT,
                    "Date": date_label,
                }
            )
    return rows
