"""
Unit tests for the spreadsheet export endpoint.
"""

from __future__ import annotations

import io
import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

# Set before any imports that might load settings
os.environ["SKIP_PB_AUTH"] = "true"

from api.dependencies import get_export_cache, get_reporting_service
from api.main import create_app
from api.services.export_cache import ExportCache
from api.services.reporting_repository import ReportingRepository
from api.services.reporting_service import ReportingService
from api.services.workbook_writer import XLSX_MEDIA_TYPE
from innothon.errors import UpstreamFetchError
from innothon.events import EVENT_CATALOG
from innothon.models import Registration

REGISTRATIONS = [
    Registration(
        id="r1",
        team_id="INNO-001",
        team_name="Bit Benders",
        selected_events=["code-quest"],
        team_members=[{"id": "m1", "name": "Asha", "college": "HITS"}, {"id": "m2", "name": "Ravi"}],
        status="approved",
        total_amount=500,
        created_at="2025-03-01T10:00:00Z",
    ),
    Registration(id="r2", team_id="INNO-002", selected_events=["design-derby"], status="pending"),
]


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock(spec=ReportingRepository)
    repo.fetch_registrations = AsyncMock(return_value=REGISTRATIONS)
    repo.fetch_events = AsyncMock(return_value=list(EVENT_CATALOG))
    repo.fetch_attendance = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def cache() -> ExportCache:
    return ExportCache(capacity=4, ttl_seconds=60)


@pytest.fixture
def client(repo: MagicMock, cache: ExportCache) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_reporting_service] = lambda: ReportingService(repo)
    app.dependency_overrides[get_export_cache] = lambda: cache
    return TestClient(app)


def read_sheet(content: bytes) -> list[tuple]:
    return list(load_workbook(io.BytesIO(content)).active.iter_rows(values_only=True))


class TestDownloadExport:
    def test_all_registrations(self, client: TestClient) -> None:
        response = client.get("/api/exports/all")

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        disposition = response.headers["content-disposition"]
        assert disposition.startswith("attachment; filename=all-registrations_")
        assert disposition.endswith(".xlsx")

        rows = read_sheet(response.content)
        assert rows[0][0] == "Team ID"
        assert len(rows) == 4

    def test_approved_only(self, client: TestClient) -> None:
        response = client.get("/api/exports/approved")

        rows = read_sheet(response.content)
        assert {row[1] for row in rows[1:]} == {"r1"}

    def test_event_export(self, client: TestClient) -> None:
        response = client.get("/api/exports/event", params={"event_id": "code-quest"})

        assert response.status_code == 200
        assert "code-quest-registrations_" in response.headers["content-disposition"]

    def test_cached_workbook_reused(self, client: TestClient, cache: ExportCache) -> None:
        first = client.get("/api/exports/accounts")
        second = client.get("/api/exports/accounts")

        assert first.content == second.content
        assert cache.get_stats()["hit_count"] == 1
        assert len(cache) == 1


class TestGamingExport:
    def test_filtered_by_game(self, repo: MagicMock, client: TestClient) -> None:
        repo.fetch_registrations = AsyncMock(
            return_value=REGISTRATIONS
            + [
                Registration(
                    id="g1",
                    selected_events=["pixel-showdown"],
                    game_details={"game": "freefire", "format": "squad"},
                    team_members=[{"id": "p1", "name": "Kavin", "player_id": "FF-1"}],
                )
            ]
        )

        response = client.get("/api/exports/gaming", params={"game": "freefire"})

        assert response.status_code == 200
        assert "freefire-gaming-registrations_" in response.headers["content-disposition"]
        rows = read_sheet(response.content)
        assert rows[0][2] == "Game Type"
        assert rows[1][2] == "FREEFIRE"
        assert rows[1][4] == "FF-1"

    def test_unknown_game(self, client: TestClient) -> None:
        response = client.get("/api/exports/gaming", params={"game": "chess"})

        assert response.status_code == 404


class TestExportErrors:
    def test_unknown_kind(self, client: TestClient) -> None:
        response = client.get("/api/exports/payroll")

        assert response.status_code == 404

    def test_unknown_event(self, client: TestClient) -> None:
        response = client.get("/api/exports/event", params={"event_id": "robo-race"})

        assert response.status_code == 404

    def test_registration_desk_has_no_event_sheet(self, client: TestClient) -> None:
        response = client.get("/api/exports/event", params={"event_id": "registration-desk"})

        assert response.status_code == 404

    def test_event_without_id(self, client: TestClient) -> None:
        response = client.get("/api/exports/event")

        assert response.status_code == 404

    def test_upstream_failure(self, client: TestClient, repo: MagicMock) -> None:
        repo.fetch_registrations = AsyncMock(side_effect=UpstreamFetchError("registrations", "timeout"))

        response = client.get("/api/exports/all")

        assert response.status_code == 500
        assert "registrations" in response.json()["detail"]
