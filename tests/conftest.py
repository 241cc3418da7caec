"""
Shared fixtures for the Innothon reporting tests.

Service tests live beside the code in api/services/; cross-cutting tests
(settings, logging, routers, the repository-to-service flow) live under
tests/unit/. Every test runs against a mocked PocketBase.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import Mock, patch

import pytest

# Project root on sys.path so `api` and `innothon` import without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# The app module signs in on startup unless told not to
os.environ.setdefault("SKIP_PB_AUTH", "true")


def create_mock_pocketbase(records: dict[str, list[Any]] | None = None) -> Mock:
    """PocketBase stand-in whose collections return canned records.

    Args:
        records: Collection name -> records returned by get_full_list.
            Unlisted collections are empty.
    """
    records = records or {}

    def collection(name: str) -> Mock:
        mock_collection = Mock()
        mock_collection.get_full_list = Mock(return_value=list(records.get(name, [])))
        mock_collection.auth_with_password = Mock(return_value=True)
        return mock_collection

    pb = Mock()
    pb.collection = Mock(side_effect=collection)
    return pb


@pytest.fixture
def mock_pocketbase() -> Mock:
    """An empty mocked backend."""
    return create_mock_pocketbase()


@pytest.fixture(autouse=True)
def no_real_pocketbase():
    """Any PocketBase client constructed during a test talks to an empty mock.

    Set SKIP_MOCKING=true to run against a real instance.
    """
    if os.environ.get("SKIP_MOCKING") == "true":
        yield None
        return

    with patch("pocketbase.PocketBase", return_value=create_mock_pocketbase()) as client_class:
        yield client_class


def make_member(
    member_id: str | None,
    college: str = "Anna University",
    year: str = "2",
    name: str | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """Team member as stored in the backend."""
    return {
        "id": member_id,
        "name": name if name is not None else f"Member {member_id}",
        "email": f"{member_id}@example.com" if member_id else None,
        "phone": "9876543210",
        "college": college,
        "department": "CSE",
        "year": year,
        **fields,
    }


def make_registration(
    registration_id: str = "r1",
    status: str = "approved",
    total_amount: float = 500,
    selected_events: list[str] | None = None,
    members: list[dict[str, Any]] | None = None,
    created_at: str = "2025-03-01T10:00:00Z",
    **fields: Any,
):
    """Normalized registration built from backend-shaped fields."""
    from innothon.models import Registration

    members = members if members is not None else [make_member(f"{registration_id}-m1")]
    return Registration.model_validate(
        {
            "id": registration_id,
            "team_id": f"INNO-{registration_id.upper()}",
            "team_name": f"Team {registration_id}",
            "selected_events": selected_events if selected_events is not None else ["code-quest"],
            "team_size": len(members),
            "total_amount": total_amount,
            "status": status,
            "created_at": created_at,
            "team_members": members,
            **fields,
        }
    )


def make_record(**fields: Any) -> SimpleNamespace:
    """Backend record object exposing columns as attributes."""
    return SimpleNamespace(**fields)


@pytest.fixture
def registration_factory():
    """Factory for normalized registrations."""
    return make_registration


@pytest.fixture
def member_factory():
    """Factory for backend-shaped team members."""
    return make_member
