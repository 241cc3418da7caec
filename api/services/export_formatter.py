"""Spreadsheet row formatting for registration exports.

Every export type has a fixed column tuple. Each row is a flat dict holding
exactly those keys in that order, so rows from different registrations always
concatenate into one table. Missing values are written as "N/A".

Formatting is total per registration: a registration that cannot be
formatted yields a single diagnostic row marked "Error" rather than aborting
the whole export.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from api.schemas.metrics import EventComparisonRow
from innothon.errors import UnknownEventError, UnknownExportKindError
from innothon.events import GAMES, PIXEL_SHOWDOWN, REGISTRATION_DESK, catalog_by_id, event_title
from innothon.models import EventInfo, Registration, RegistrationStatus

from .attendance_service import ATTENDANCE_COLUMNS, attendance_rows, index_attendance
from .comparison_service import build_event_comparison, sort_by_participation
from .gaming_service import gaming_registrations
from .revenue import AMOUNT_DECIMALS, apportion
from .safety import total_function

logger = logging.getLogger(__name__)

Row = dict[str, str | int | float]

NOT_AVAILABLE = "N/A"
ERROR = "Error"
DEFAULT_TIMEZONE = "Asia/Kolkata"
DATE_FORMAT = "%d/%m/%Y, %H:%M"


class ExportKind(str, Enum):
    ALL = "all"
    APPROVED = "approved"
    PENDING = "pending"
    ACCOUNTS = "accounts"
    EVENT = "event"
    STATISTICS = "statistics"
    ATTENDANCE = "attendance"
    GAMING = "gaming"


MEMBER_COLUMNS = (
    "Team ID",
    "Registration ID",
    "Team Name",
    "Status",
    "Total Amount",
    "Member Type",
    "Name",
    "Email",
    "Phone",
    "College",
    "Department",
    "Year",
    "Selected Events",
    "Registration Date",
)

EVENT_COLUMNS = MEMBER_COLUMNS + ("Event", "Event Fee", "Apportioned Amount")

# The gaming event sheet also names the game each team plays
PIXEL_EVENT_COLUMNS = EVENT_COLUMNS + ("Game Type", "Game ID")

ACCOUNTS_COLUMNS = (
    "Team ID",
    "Registration ID",
    "Team Name",
    "Leader Name",
    "Leader Phone",
    "Status",
    "Total Amount",
    "Payment Method",
    "Transaction ID",
    "Payment Status",
    "Selected Events",
    "Registration Date",
)

GAMING_COLUMNS = (
    "Team ID",
    "Registration ID",
    "Game Type",
    "Game Format",
    "Player ID",
    "Team Lead",
    "Email",
    "Phone",
    "College",
    "Department",
    "Year",
    "Team Size",
    "Amount",
    "Status",
    "Registration Date",
    "Team Members",
    "Team Members Emails",
    "Team Members Phones",
)

STATISTICS_COLUMNS = (
    "Event",
    "Mode",
    "Teams",
    "Participants",
    "Internal",
    "External",
    "Internal %",
    "External %",
    "Approved Teams",
    "Approval %",
    "Revenue",
    "Average Team Size",
)


@dataclass
class ExportTable:
    """Rows of one export plus what the workbook writer needs to lay them out."""

    kind: ExportKind
    columns: tuple[str, ...]
    rows: list[Row] = field(default_factory=list)
    sheet_title: str = "Registrations"
    filename_prefix: str = "registrations"


def format_date(value: Any, timezone: str = DEFAULT_TIMEZONE) -> str:
    """Render a timestamp as DD/MM/YYYY, HH:MM in the display timezone.

    Naive timestamps are taken as UTC. Anything unparseable renders as N/A.
    """
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            return NOT_AVAILABLE
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(ZoneInfo(timezone)).strftime(DATE_FORMAT)


def event_titles(event_ids: Iterable[str], catalog: Mapping[str, EventInfo]) -> str:
    """Comma-joined display titles, N/A when there are none."""
    titles = [event_title(event_id, catalog) for event_id in event_ids]
    return ", ".join(titles) if titles else NOT_AVAILABLE


def _text(value: Any) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


def _status_label(status: RegistrationStatus) -> str:
    return status.value.capitalize()


def error_row(columns: tuple[str, ...], registration: Any = None) -> Row:
    """Diagnostic row: every column "Error" except the registration id when known."""
    row: Row = {column: ERROR for column in columns}
    registration_id = getattr(registration, "id", None)
    if "Registration ID" in row and registration_id:
        row["Registration ID"] = str(registration_id)
    return row


def _per_registration(columns: tuple[str, ...]) -> Callable[[Callable[..., list[Row]]], Callable[..., list[Row]]]:
    """Apply the safety net to a single-registration formatter."""

    def fallback(*args: Any, **kwargs: Any) -> list[Row]:
        registration = args[0] if args else kwargs.get("registration")
        return [error_row(columns, registration)]

    return total_function(fallback)


def _member_rows(registration: Registration, lookup: Mapping[str, EventInfo], timezone: str) -> list[Row]:
    base: Row = {
        "Team ID": _text(registration.team_id),
        "Registration ID": _text(registration.id),
        "Team Name": _text(registration.team_name),
        "Status": _status_label(registration.status),
        "Total Amount": registration.total_amount,
    }
    shared: Row = {
        "Selected Events": event_titles(registration.selected_events, lookup),
        "Registration Date": format_date(registration.created_at, timezone),
    }

    members = registration.team_members or [None]
    rows: list[Row] = []
    for position, member in enumerate(members):
        row = dict(base)
        row["Member Type"] = "Leader" if position == 0 else f"Member {position + 1}"
        for column, attribute in (
            ("Name", "name"),
            ("Email", "email"),
            ("Phone", "phone"),
            ("College", "college"),
            ("Department", "department"),
            ("Year", "year"),
        ):
            row[column] = _text(getattr(member, attribute, None))
        row.update(shared)
        rows.append({column: row[column] for column in MEMBER_COLUMNS})
    return rows


@_per_registration(MEMBER_COLUMNS)
def to_rows(
    registration: Registration,
    catalog: Mapping[str, EventInfo] | Iterable[EventInfo] | None = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> list[Row]:
    """Flatten a registration into one row per team member.

    The leader (first roster entry) comes first, labelled "Leader"; others
    follow in roster order as "Member 2", "Member 3", ... A registration with
    no members still yields one row with N/A member fields.
    """
    lookup = catalog if isinstance(catalog, Mapping) else catalog_by_id(catalog)
    return _member_rows(registration, lookup, timezone)


def event_columns(event_id: str) -> tuple[str, ...]:
    """Column tuple of a per-event sheet."""
    return PIXEL_EVENT_COLUMNS if event_id == PIXEL_SHOWDOWN else EVENT_COLUMNS


def _event_error_rows(registration: Any = None, event_id: str = "", *args: Any, **kwargs: Any) -> list[Row]:
    return [error_row(event_columns(event_id), registration)]


@total_function(_event_error_rows)
def event_rows(
    registration: Registration,
    event_id: str,
    catalog: Mapping[str, EventInfo] | Iterable[EventInfo] | None = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> list[Row]:
    """Member rows for a per-event sheet, with the event's fee and revenue share.

    Pixel Showdown rows also carry the team's game and format (N/A when the
    team never picked one).
    """
    lookup = catalog if isinstance(catalog, Mapping) else catalog_by_id(catalog)
    event = lookup.get(event_id)
    share = apportion(registration).get(event_id, 0.0)
    extra: Row = {
        "Event": event_title(event_id, lookup),
        "Event Fee": event.registration_fee if event is not None else NOT_AVAILABLE,
        "Apportioned Amount": round(share, AMOUNT_DECIMALS),
    }
    if event_id == PIXEL_SHOWDOWN:
        details = registration.game_details
        extra["Game Type"] = _text(details.game if details else None)
        extra["Game ID"] = _text(details.format if details else None)
    return [{**row, **extra} for row in _member_rows(registration, lookup, timezone)]


@_per_registration(ACCOUNTS_COLUMNS)
def accounts_row(
    registration: Registration,
    catalog: Mapping[str, EventInfo] | Iterable[EventInfo] | None = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> list[Row]:
    """One payment row per registration for the accounts sheet."""
    lookup = catalog if isinstance(catalog, Mapping) else catalog_by_id(catalog)
    leader = registration.team_members[0] if registration.team_members else None
    return [
        {
            "Team ID": _text(registration.team_id),
            "Registration ID": _text(registration.id),
            "Team Name": _text(registration.team_name),
            "Leader Name": _text(getattr(leader, "name", None)),
            "Leader Phone": _text(getattr(leader, "phone", None)),
            "Status": _status_label(registration.status),
            "Total Amount": registration.total_amount,
            "Payment Method": _text(registration.payment_method),
            "Transaction ID": _text(registration.transaction_id),
            "Payment Status": _text(registration.payment_status),
            "Selected Events": event_titles(registration.selected_events, lookup),
            "Registration Date": format_date(registration.created_at, timezone),
        }
    ]


def _joined(members: Iterable[Any], attribute: str) -> str:
    values = [_text(getattr(member, attribute, None)) for member in members]
    return ", ".join(values) if values else NOT_AVAILABLE


@_per_registration(GAMING_COLUMNS)
def gaming_row(registration: Registration, timezone: str = DEFAULT_TIMEZONE) -> list[Row]:
    """One row per gaming team: the leader's contact details, then the rest of the roster joined."""
    details = registration.game_details
    leader = registration.team_members[0] if registration.team_members else None
    others = registration.team_members[1:]
    return [
        {
            "Team ID": _text(registration.team_id),
            "Registration ID": _text(registration.id),
            "Game Type": _text(details.game.upper() if details and details.game else None),
            "Game Format": _text(details.format.upper() if details and details.format else None),
            "Player ID": _text(getattr(leader, "player_id", None)),
            "Team Lead": _text(getattr(leader, "name", None)),
            "Email": _text(getattr(leader, "email", None)),
            "Phone": _text(getattr(leader, "phone", None)),
            "College": _text(getattr(leader, "college", None)),
            "Department": _text(getattr(leader, "department", None)),
            "Year": _text(getattr(leader, "year", None)),
            "Team Size": registration.team_size or 1,
            "Amount": registration.total_amount,
            "Status": registration.status.value.upper(),
            "Registration Date": format_date(registration.created_at, timezone),
            "Team Members": _joined(others, "name"),
            "Team Members Emails": _joined(others, "email"),
            "Team Members Phones": _joined(others, "phone"),
        }
    ]


def statistics_rows(comparison_rows: Iterable[EventComparisonRow]) -> list[Row]:
    """Statistics summary sheet, one row per event comparison row."""
    return [
        {
            "Event": row.title,
            "Mode": "Online" if row.is_online else "Offline",
            "Teams": row.team_count,
            "Participants": row.participant_count,
            "Internal": row.internal_count,
            "External": row.external_count,
            "Internal %": row.internal_percentage,
            "External %": row.external_percentage,
            "Approved Teams": row.approved_count,
            "Approval %": row.approval_percentage,
            "Revenue": row.revenue,
            "Average Team Size": row.average_team_size,
        }
        for row in comparison_rows
    ]


# Member-row exports: sheet title, filename prefix, registration filter
MEMBER_EXPORTS: dict[ExportKind, tuple[str, str, Callable[[Registration], bool]]] = {
    ExportKind.ALL: ("All", "all-registrations", lambda registration: True),
    ExportKind.APPROVED: ("Approved", "approved-participants", lambda registration: registration.is_approved),
    ExportKind.PENDING: (
        "Pending",
        "pending-registrations",
        lambda registration: registration.status is RegistrationStatus.PENDING,
    ),
}


def _member_export(
    registrations: Iterable[Registration],
    lookup: Mapping[str, EventInfo],
    timezone: str,
) -> list[Row]:
    rows: list[Row] = []
    for registration in registrations:
        rows.extend(to_rows(registration, lookup, timezone))
    return rows


def build_export(
    kind: ExportKind | str,
    registrations: Iterable[Registration],
    catalog: Iterable[EventInfo] | None = None,
    event_id: str | None = None,
    attendance: Iterable[Any] | None = None,
    timezone: str = DEFAULT_TIMEZONE,
    today: datetime | None = None,
    game: str | None = None,
) -> ExportTable:
    """Build the rows for one export type.

    Args:
        kind: Export type (ExportKind or its string value).
        registrations: Normalized registrations of every status.
        catalog: Event metadata (defaults to the static catalog).
        event_id: Event to export; required for the event sheet, optional
            for the attendance sheet.
        attendance: Attendance records, used by the attendance sheet.
        timezone: Display timezone for dates.
        today: Export date shown on the attendance sheet.
        game: Game to keep on the gaming sheet (all games when omitted).

    Returns:
        ExportTable with the kind's fixed columns.

    Raises:
        UnknownExportKindError: If kind is not a known export type.
        UnknownEventError: If event_id does not name a catalog event where
            one is required, or game is not a known game.
    """
    try:
        kind = ExportKind(kind)
    except ValueError as e:
        raise UnknownExportKindError(f"Unknown export type: {kind}") from e

    events = list(catalog) if catalog is not None else None
    lookup = catalog_by_id(events)
    registrations = list(registrations)

    # The registration desk is an attendance point, not an event with its own sheet
    desk_allowed = kind is ExportKind.ATTENDANCE and event_id == REGISTRATION_DESK
    if event_id is not None and not desk_allowed and event_id not in lookup:
        raise UnknownEventError(f"Unknown event: {event_id}")

    if kind in MEMBER_EXPORTS:
        sheet_title, prefix, keep = MEMBER_EXPORTS[kind]
        selected = [registration for registration in registrations if keep(registration)]
        return ExportTable(kind, MEMBER_COLUMNS, _member_export(selected, lookup, timezone), sheet_title, prefix)

    if kind is ExportKind.ACCOUNTS:
        rows: list[Row] = []
        for registration in registrations:
            rows.extend(accounts_row(registration, lookup, timezone))
        return ExportTable(kind, ACCOUNTS_COLUMNS, rows, "Accounts", "accounts")

    if kind is ExportKind.EVENT:
        if event_id is None:
            raise UnknownEventError("An event id is required for the event export")
        rows = []
        for registration in registrations:
            if event_id in registration.selected_events:
                rows.extend(event_rows(registration, event_id, lookup, timezone))
        # Worksheet titles are limited to 31 characters
        sheet_title = event_title(event_id, lookup)[:31]
        return ExportTable(kind, event_columns(event_id), rows, sheet_title, f"{event_id}-registrations")

    if kind is ExportKind.GAMING:
        game = game.strip().lower() if game else None
        if game is not None and game not in GAMES:
            raise UnknownEventError(f"Unknown game: {game}")
        rows = []
        for registration in gaming_registrations(registrations, game):
            rows.extend(gaming_row(registration, timezone))
        prefix = f"{game}-gaming-registrations" if game else "all-gaming-registrations"
        return ExportTable(kind, GAMING_COLUMNS, rows, "Gaming", prefix)

    if kind is ExportKind.STATISTICS:
        comparison = sort_by_participation(build_event_comparison(registrations, events))
        return ExportTable(kind, STATISTICS_COLUMNS, statistics_rows(comparison), "Statistics", "event-statistics")

    approved = [registration for registration in registrations if registration.is_approved]
    date_label = (today or datetime.now(ZoneInfo(timezone))).strftime("%d/%m/%Y")
    rows = attendance_rows(approved, index_attendance(attendance or []), event_id, events, date_label)
    prefix = f"attendance-{event_id}" if event_id else "attendance"
    return ExportTable(kind, ATTENDANCE_COLUMNS, rows, "Attendance", prefix)
