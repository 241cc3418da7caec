"""Reporting service - loads snapshots and runs the aggregators.

The aggregators are pure functions over already-fetched lists. This service
is the seam where the repository is called (concurrently where the data is
independent) and the results are handed over, so endpoints stay thin and the
whole flow can be tested with a mocked repository.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

from api.schemas.metrics import (
    AttendanceStatsResponse,
    DistributionResponse,
    EventOverviewResponse,
    EventRevenue,
    ExpenseSummaryResponse,
    GameBreakdownResponse,
    MessageItem,
    MessageSummaryResponse,
    RevenueResponse,
    RevenueSummary,
    TrendsResponse,
)
from innothon.errors import UnknownExportKindError
from innothon.events import event_title
from innothon.models import RegistrationStatus

from .attendance_service import build_attendance_stats
from .comparison_service import build_overview
from .distribution import affiliation_distribution, event_distribution, unique_members, year_distribution
from .expenses_service import expense_summary
from .export_formatter import DEFAULT_TIMEZONE, ExportKind, ExportTable, build_export
from .gaming_service import game_breakdown
from .messages_service import count_recent, count_unread, filter_messages
from .revenue import revenue_by_event, total_revenue
from .trends import DEFAULT_WINDOW_DAYS, message_trend, registration_trend, revenue_trend

if TYPE_CHECKING:
    from .reporting_repository import ReportingRepository

logger = logging.getLogger(__name__)


class ReportingService:
    """Business logic for dashboard metrics and exports - fully testable with mocked repository."""

    def __init__(
        self,
        repository: ReportingRepository,
        display_timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        """Initialize with repository for data access.

        Args:
            repository: ReportingRepository instance for data access.
            display_timezone: Timezone used for dates in exports.
        """
        self.repo = repository
        self.display_timezone = display_timezone

    async def trends(self, window_days: int = DEFAULT_WINDOW_DAYS, today: date | None = None) -> TrendsResponse:
        """Registration, revenue and message trends over the trailing window."""
        registrations, messages = await asyncio.gather(
            self.repo.fetch_registrations(),
            self.repo.fetch_messages(),
        )
        logger.debug(f"Building {window_days}-day trends from {len(registrations)} registrations")
        return TrendsResponse(
            window_days=window_days,
            registrations=registration_trend(registrations, window_days, today),
            revenue=revenue_trend(registrations, window_days, today),
            messages=message_trend(messages, window_days, today),
        )

    async def distribution(self) -> DistributionResponse:
        """Event, affiliation and year-of-study breakdowns over all registrations."""
        registrations = await self.repo.fetch_registrations()
        return DistributionResponse(
            total_registrations=len(registrations),
            total_participants=len(unique_members(registrations)),
            by_event=event_distribution(registrations),
            by_affiliation=affiliation_distribution(registrations),
            by_year=year_distribution(registrations),
        )

    async def event_overview(self) -> EventOverviewResponse:
        """Headline numbers and per-event comparison rows."""
        registrations, events = await asyncio.gather(
            self.repo.fetch_registrations(),
            self.repo.fetch_events(),
        )
        return build_overview(registrations, events)

    async def revenue(self) -> RevenueResponse:
        """Recognized vs potential revenue, overall and apportioned per event."""
        registrations, events = await asyncio.gather(
            self.repo.fetch_registrations(),
            self.repo.fetch_events(),
        )
        total = total_revenue(registrations)
        recognized = revenue_by_event(registrations)
        potential = revenue_by_event(registrations, recognized_only=False)

        return RevenueResponse(
            total=RevenueSummary(potential=total.potential, recognized=total.recognized),
            by_event=[
                EventRevenue(
                    event_id=event_id,
                    title=event_title(event_id, events),
                    recognized=recognized.get(event_id, 0.0),
                    potential=potential.get(event_id, 0.0),
                )
                for event_id in sorted(potential)
            ],
        )

    async def game_breakdown(self) -> GameBreakdownResponse:
        """Teams and fees per Pixel Showdown game."""
        registrations = await self.repo.fetch_registrations()
        return game_breakdown(registrations)

    async def attendance_stats(self) -> AttendanceStatsResponse:
        """Attendance summary and per-event breakdown for approved teams."""
        registrations, attendance, events = await asyncio.gather(
            self.repo.fetch_registrations(status=RegistrationStatus.APPROVED),
            self.repo.fetch_attendance_index(),
            self.repo.fetch_events(),
        )
        return build_attendance_stats(registrations, attendance, events)

    async def message_summary(
        self,
        now: datetime | None = None,
        query: str = "",
        unread_only: bool = False,
    ) -> MessageSummaryResponse:
        """Total, unread and last-24-hour counts, plus the messages matching the inbox filter.

        The counters always cover every message; only the list is filtered.
        """
        messages = await self.repo.fetch_messages()
        return MessageSummaryResponse(
            total=len(messages),
            unread=count_unread(messages),
            recent=count_recent(messages, now),
            messages=[
                MessageItem.model_validate(message.model_dump())
                for message in filter_messages(messages, query, unread_only)
            ],
        )

    async def expense_summary(self) -> ExpenseSummaryResponse:
        """Organiser expense totals."""
        expenses = await self.repo.fetch_expenses()
        return expense_summary(expenses)

    async def export(
        self,
        kind: ExportKind | str,
        event_id: str | None = None,
        today: datetime | None = None,
        game: str | None = None,
    ) -> ExportTable:
        """Build the rows for an export type.

        Raises:
            UnknownExportKindError: If kind is not a known export type.
            UnknownEventError: If event_id is not a catalog event or game is unknown.
            UpstreamFetchError: If registrations cannot be loaded.
        """
        try:
            kind = ExportKind(kind)
        except ValueError as e:
            raise UnknownExportKindError(f"Unknown export type: {kind}") from e

        registrations, events = await asyncio.gather(
            self.repo.fetch_registrations(),
            self.repo.fetch_events(),
        )
        attendance = await self.repo.fetch_attendance() if kind == ExportKind.ATTENDANCE else None

        table = build_export(
            kind,
            registrations,
            events,
            event_id=event_id,
            attendance=attendance,
            timezone=self.display_timezone,
            today=today,
            game=game,
        )
        logger.info(f"Built {table.kind.value} export with {len(table.rows)} rows")
        return table
