from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    CLOSED = "closed"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


class TeamMember(BaseModel):
    """One participant on a registration roster.

    Every field is optional because rosters come straight from the backend and
    older rows were created before some columns existed.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    college: str | None = None
    department: str | None = None
    year: str | None = None
    player_id: str | None = None

    @field_validator("id", "name", "email", "phone", "college", "department", "year", "player_id", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)


class GameDetails(BaseModel):
    """Game choice attached to a Pixel Showdown registration."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    game: str | None = None
    format: str | None = None

    @field_validator("game", "format", mode="before")
    @classmethod
    def coerce_choice(cls, v: Any) -> str | None:
        text = _as_text(v)
        if text is None:
            return None
        return text.strip().lower() or None


class Registration(BaseModel):
    """A team's signup, the root record every report is derived from.

    Validators absorb missing or malformed values into fixed defaults so that
    aggregators can rely on well-formed input:

    - selected_events: [] (de-duplicated, first occurrence wins)
    - team_members: []
    - total_amount: 0
    - team_size: 0
    - created_at: current UTC timestamp (ISO-8601)
    - status: pending when absent or unrecognised
    - game_details: None unless it is an object
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str | None = None
    team_id: str | None = None
    team_name: str | None = None
    selected_events: list[str] = Field(default_factory=list)
    team_size: int = 0
    total_amount: float = 0.0
    status: RegistrationStatus = RegistrationStatus.PENDING
    created_at: str = Field(default_factory=_now_iso)
    transaction_id: str | None = None
    payment_method: str | None = None
    payment_proof: str | None = None
    payment_status: str | None = None
    team_members: list[TeamMember] = Field(default_factory=list)
    game_details: GameDetails | None = None

    @field_validator(
        "id",
        "team_id",
        "team_name",
        "transaction_id",
        "payment_method",
        "payment_proof",
        "payment_status",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("selected_events", mode="before")
    @classmethod
    def coerce_selected_events(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set, frozenset)):
            return []
        events: list[str] = []
        for item in v:
            if item is None:
                continue
            event_id = str(item).strip()
            if event_id and event_id not in events:
                events.append(event_id)
        return events

    @field_validator("team_size", mode="before")
    @classmethod
    def coerce_team_size(cls, v: Any) -> int:
        try:
            return int(float(v))
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator("total_amount", mode="before")
    @classmethod
    def coerce_total_amount(cls, v: Any) -> float:
        try:
            amount = float(v)
        except (TypeError, ValueError):
            return 0.0
        return amount if math.isfinite(amount) else 0.0

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: Any) -> RegistrationStatus:
        if isinstance(v, RegistrationStatus):
            return v
        try:
            return RegistrationStatus(str(v).strip().lower())
        except ValueError:
            return RegistrationStatus.PENDING

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> str:
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        if not v:
            return _now_iso()
        return str(v)

    @field_validator("team_members", mode="before")
    @classmethod
    def coerce_team_members(cls, v: Any) -> list[Any]:
        if not isinstance(v, (list, tuple)):
            return []
        return [member for member in v if isinstance(member, (Mapping, TeamMember))]

    @field_validator("game_details", mode="before")
    @classmethod
    def coerce_game_details(cls, v: Any) -> Any:
        return v if isinstance(v, (Mapping, GameDetails)) else None

    @property
    def is_approved(self) -> bool:
        return self.status is RegistrationStatus.APPROVED


class AttendanceRecord(BaseModel):
    """A (team member, event) presence mark."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    team_member_id: str
    event_id: str
    marked_at: str | None = None
    marked_by: str | None = None

    @field_validator("team_member_id", "event_id", "marked_at", "marked_by", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _as_text(v)


class EventInfo(BaseModel):
    """Static event metadata shown on the marketing site and in reports."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    status: EventStatus = EventStatus.UPCOMING
    registration_fee: str = "N/A"

    @property
    def is_online(self) -> bool:
        from innothon.events import is_online_event

        return is_online_event(self.id)


class ContactMessage(BaseModel):
    """A message left through the public contact form."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str | None = None
    name: str = ""
    email: str = ""
    message: str = ""
    is_read: bool = False
    created_at: str = Field(default_factory=_now_iso)

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("is_read", mode="before")
    @classmethod
    def coerce_is_read(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> str:
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        if not v:
            return _now_iso()
        return str(v)


class Expense(BaseModel):
    """A bill paid out of pocket by an organiser, awaiting or past reimbursement."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str | None = None
    bill_name: str = ""
    person_name: str = ""
    bill_number: str | None = None
    items: list[str] = Field(default_factory=list)
    quantity: list[float] = Field(default_factory=list)
    amount: float = 0.0
    needs_stamp: bool = False
    is_reimbursed: bool = False
    bill_file: str | None = None
    created_at: str = Field(default_factory=_now_iso)

    @field_validator("bill_name", "person_name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("id", "bill_number", "bill_file", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> str | None:
        return _as_text(v)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [str(item) for item in v if item is not None]

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> list[float]:
        if not isinstance(v, (list, tuple)):
            return []
        quantities = []
        for item in v:
            try:
                quantities.append(float(item))
            except (TypeError, ValueError):
                quantities.append(0.0)
        return quantities

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        try:
            amount = float(v)
        except (TypeError, ValueError):
            return 0.0
        return amount if math.isfinite(amount) else 0.0

    @field_validator("needs_stamp", "is_reimbursed", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> str:
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        if not v:
            return _now_iso()
        return str(v)
