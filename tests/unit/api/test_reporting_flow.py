"""
End-to-end reporting flow over a mocked PocketBase.

Backend-shaped records go through the repository (normalization, expand,
status merge) and the reporting service, so the aggregators see exactly
what they would see in production.
"""

from __future__ import annotations

from datetime import date

import pytest

from api.services.reporting_repository import ReportingRepository
from api.services.reporting_service import ReportingService
from tests.conftest import create_mock_pocketbase, make_member, make_record


@pytest.fixture
def service() -> ReportingService:
    registrations = [
        make_record(
            id="r1",
            team_id="INNO-001",
            team_name="Bit Benders",
            selected_events=["code-quest", "capture-the-flag", "pixel-showdown"],
            team_members=["m1", "m2"],
            team_size=2,
            total_amount=1500,
            status="approved",
            created="2025-03-07 10:00:00.000Z",
            game_details={"game": "bgmi", "format": "squad"},
            expand={
                "team_members": [
                    make_record(**make_member("m1", college="Hindustan Institute of Technology", year="3")),
                    make_record(**make_member("m2", college="SRM", year="5")),
                ]
            },
        ),
        make_record(
            id="r2",
            team_id="INNO-002",
            selected_events=None,
            team_members=None,
            total_amount=None,
            status="pending",
            created="2025-03-08 09:00:00.000Z",
        ),
    ]
    pb = create_mock_pocketbase(
        {
            "registrations": registrations,
            "events": [make_record(id="code-quest", status="closed")],
            "attendance": [make_record(team_member_id="m1", event_id="registration-desk")],
            "contact_messages": [],
        }
    )
    return ReportingService(ReportingRepository(pb))


class TestReportingFlow:
    @pytest.mark.asyncio
    async def test_revenue_apportioned_without_loss(self, service: ReportingService) -> None:
        result = await service.revenue()

        assert result.total.recognized == 1500
        assert result.total.potential == 1500
        assert sum(row.recognized for row in result.by_event) == 1500
        assert {row.event_id for row in result.by_event} == {"code-quest", "capture-the-flag", "pixel-showdown"}

    @pytest.mark.asyncio
    async def test_malformed_registration_still_counted(self, service: ReportingService) -> None:
        result = await service.distribution()

        assert result.total_registrations == 2
        assert result.total_participants == 2
        affiliation = {item.name: item.value for item in result.by_affiliation}
        assert affiliation == {"Internal": 1, "External": 1}
        years = {item.name: item.value for item in result.by_year}
        assert years["3"] == 1
        assert years["Other"] == 1

    @pytest.mark.asyncio
    async def test_trend_uses_backend_timestamps(self, service: ReportingService) -> None:
        result = await service.trends(window_days=2, today=date(2025, 3, 8))

        assert [(point.date, point.count) for point in result.registrations] == [
            ("2025-03-07", 1),
            ("2025-03-08", 1),
        ]

    @pytest.mark.asyncio
    async def test_attendance_desk(self, service: ReportingService) -> None:
        result = await service.attendance_stats()

        desk = result.by_event[0]
        assert desk.event_id == "registration-desk"
        assert desk.total_registered == 2
        assert desk.total_present == 1
        assert desk.attendance_percentage == 50

    @pytest.mark.asyncio
    async def test_game_breakdown_from_backend_json(self, service: ReportingService) -> None:
        result = await service.game_breakdown()

        games = {stats.game: stats for stats in result.games}
        assert result.total_teams == 1
        assert games["bgmi"].recognized_revenue == 200

    @pytest.mark.asyncio
    async def test_empty_backend(self, mock_pocketbase) -> None:
        """An empty backend yields zero-filled, non-failing reports."""
        empty = ReportingService(ReportingRepository(mock_pocketbase))

        overview = await empty.event_overview()
        trends = await empty.trends(window_days=7, today=date(2025, 3, 8))

        assert overview.total_registrations == 0
        assert overview.events == []
        assert overview.revenue.recognized == 0
        assert [point.count for point in trends.registrations] == [0] * 7
