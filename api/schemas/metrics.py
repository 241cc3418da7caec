"""
Pydantic schemas for metrics API endpoints.

Defines response models for trend, distribution, event comparison,
gaming, attendance, message and expense metrics.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# ============================================================================
# Trends
# ============================================================================


class TrendPoint(BaseModel):
    """One day of a count trend."""

    date: str = Field(description="Calendar day (YYYY-MM-DD)")
    count: int = Field(description="Number of records created that day")


class RevenueTrendPoint(BaseModel):
    """One day of the revenue trend."""

    date: str = Field(description="Calendar day (YYYY-MM-DD)")
    revenue: float = Field(description="Revenue from approved registrations")
    potential_revenue: float = Field(description="Revenue from all registrations, any status")


class TrendsResponse(BaseModel):
    """Daily trends for the dashboard charts."""

    window_days: int = Field(description="Number of days covered")
    registrations: list[TrendPoint]
    revenue: list[RevenueTrendPoint]
    messages: list[TrendPoint]


# ============================================================================
# Distributions
# ============================================================================


class DistributionSlice(BaseModel):
    """One bucket of a categorical breakdown."""

    name: str = Field(description="Bucket label (event id, affiliation or year)")
    value: int = Field(description="Count in this bucket")
    percentage: int = Field(0, description="Whole-number share of the total")


class DistributionResponse(BaseModel):
    """Registration and participant breakdowns."""

    total_registrations: int
    total_participants: int = Field(description="Unique team members (by id)")
    by_event: list[DistributionSlice]
    by_affiliation: list[DistributionSlice]
    by_year: list[DistributionSlice]


# ============================================================================
# Revenue
# ============================================================================


class RevenueSummary(BaseModel):
    """Potential vs recognized revenue."""

    potential: float = Field(description="Sum of total_amount for all registrations")
    recognized: float = Field(description="Sum of total_amount for approved registrations")


class EventRevenue(BaseModel):
    """Apportioned revenue for one event."""

    event_id: str
    title: str
    recognized: float
    potential: float


class RevenueResponse(BaseModel):
    """Revenue totals plus the per-event apportionment."""

    total: RevenueSummary
    by_event: list[EventRevenue]


# ============================================================================
# Event comparison
# ============================================================================


class EventComparisonRow(BaseModel):
    """Side-by-side statistics for one event."""

    event_id: str
    title: str
    is_online: bool
    team_count: int = Field(description="Registrations that selected the event")
    participant_count: int = Field(description="Unique members across those teams")
    internal_count: int
    external_count: int
    internal_percentage: int
    external_percentage: int
    approved_count: int
    approval_percentage: int = Field(description="Approved teams / all teams, rounded")
    revenue: float = Field(description="Apportioned revenue of approved teams")
    average_team_size: str = Field(description="Mean team_size to one decimal, or '0'")


class GameStats(BaseModel):
    """Pixel Showdown teams and fees for one game."""

    game: str = Field(description="Game bucket key (e.g. 'freefire_squad')")
    title: str
    team_count: int
    approved_count: int
    fee: float = Field(description="Flat fee per team")
    recognized_revenue: float = Field(description="Fees of approved teams")
    potential_revenue: float = Field(description="Fees of every team, whatever its status")


class GameBreakdownResponse(BaseModel):
    """Per-game breakdown of the online gaming event."""

    total_teams: int = Field(description="Pixel Showdown registrations with a game chosen")
    approved_count: int
    recognized_revenue: float
    potential_revenue: float
    games: list[GameStats]


class ModeSummary(BaseModel):
    """Participation in online or offline events."""

    mode: str = Field(description="'online' or 'offline'")
    team_count: int
    participant_count: int
    internal_count: int
    external_count: int


class EventOverviewResponse(BaseModel):
    """Event overview page: headline numbers plus comparison rows."""

    total_registrations: int
    total_participants: int
    approved_count: int
    revenue: RevenueSummary
    online: ModeSummary
    offline: ModeSummary
    events: list[EventComparisonRow]


# ============================================================================
# Attendance
# ============================================================================


class AttendanceSummary(BaseModel):
    """Attendance totals across all events."""

    total_approved: int = Field(description="Team members on approved registrations")
    total_attended: int = Field(description="Attendance marks across every event")
    attendance_percentage: int


class EventAttendance(BaseModel):
    """Attendance for one event."""

    event_id: str
    title: str
    total_registered: int
    total_present: int
    attendance_percentage: int


class AttendanceStatsResponse(BaseModel):
    """Attendance summary plus the per-event breakdown."""

    summary: AttendanceSummary
    by_event: list[EventAttendance]


# ============================================================================
# Messages
# ============================================================================


class MessageItem(BaseModel):
    """One contact message as listed in the inbox."""

    id: str | None = None
    name: str
    email: str
    message: str
    is_read: bool
    created_at: str


class MessageSummaryResponse(BaseModel):
    """Contact message counters plus the messages matching the inbox filter."""

    total: int
    unread: int
    recent: int = Field(description="Messages received in the last 24 hours")
    messages: list[MessageItem] = Field(default_factory=list, description="Matching messages, newest first")


# ============================================================================
# Expenses
# ============================================================================


class ExpenseSummaryResponse(BaseModel):
    """Organiser expense totals for the accounts team."""

    count: int
    total_amount: float = Field(description="Sum of every bill")
    pending_reimbursement: float = Field(description="Sum of bills not yet reimbursed")
    needs_stamp: int = Field(description="Unreimbursed bills still waiting for a stamp")
    reimbursed: int = Field(description="Bills already reimbursed")
