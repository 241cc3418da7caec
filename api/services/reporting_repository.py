"""Data access layer for reporting.

This module isolates all PocketBase interactions for the metrics and export
endpoints. Records are normalized on the way out, so everything downstream
receives well-formed models.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from innothon.errors import UpstreamFetchError
from innothon.events import EVENT_CATALOG, merge_event_status
from innothon.logging_config import TRACE
from innothon.models import AttendanceRecord, ContactMessage, EventInfo, Expense, Registration, RegistrationStatus

from .attendance_service import index_attendance
from .normalizer import normalize_registrations

if TYPE_CHECKING:
    from pocketbase import PocketBase

logger = logging.getLogger(__name__)


class ReportingRepository:
    """Data access layer for reporting - enables mocking in tests.

    Every backend call lives here so aggregation code can be tested against
    plain lists.
    """

    def __init__(self, pb: PocketBase) -> None:
        """Initialize with PocketBase client.

        Args:
            pb: PocketBase client instance.
        """
        self.pb = pb

    async def _full_list(self, collection: str, query_params: dict[str, Any]) -> list[Any]:
        logger.log(TRACE, f"Fetching {collection} with {query_params}")
        try:
            records = await asyncio.to_thread(
                self.pb.collection(collection).get_full_list,
                query_params=query_params,
            )
        except ClientResponseError as e:
            logger.error(f"Failed to fetch {collection}: {e}", exc_info=True)
            raise UpstreamFetchError(collection, str(e)) from e
        logger.log(TRACE, f"Fetched {len(records)} {collection} records")
        return records

    async def fetch_registrations(self, status: RegistrationStatus | str | None = None) -> list[Registration]:
        """Fetch registrations with their team members.

        Args:
            status: Optional status filter (e.g. 'approved'). None fetches all.

        Returns:
            Normalized registrations, newest first.
        """
        query_params: dict[str, Any] = {"expand": "team_members", "sort": "-created"}
        if status is not None:
            value = status.value if isinstance(status, RegistrationStatus) else RegistrationStatus(status).value
            query_params["filter"] = f'status = "{value}"'

        records = await self._full_list("registrations", query_params)
        return normalize_registrations(records)

    async def fetch_attendance(self) -> list[AttendanceRecord]:
        """Fetch every attendance mark."""
        records = await self._full_list("attendance", {})
        attendance = []
        for record in records:
            try:
                attendance.append(
                    AttendanceRecord(
                        team_member_id=getattr(record, "team_member_id", None),
                        event_id=getattr(record, "event_id", None),
                        marked_at=getattr(record, "marked_at", None),
                        marked_by=getattr(record, "marked_by", None),
                    )
                )
            except ValueError as e:
                logger.warning(f"Skipping malformed attendance record {getattr(record, 'id', '?')}: {e}")
        return attendance

    async def fetch_attendance_index(self) -> dict[str, set[str]]:
        """Fetch attendance grouped by event id."""
        return index_attendance(await self.fetch_attendance())

    async def fetch_events(self) -> list[EventInfo]:
        """Static event catalog with statuses stored in the backend applied.

        The catalog is still usable when the events collection cannot be read,
        so a backend failure falls back to the static statuses.
        """
        try:
            rows = await self._full_list("events", {"fields": "id,status"})
        except UpstreamFetchError as e:
            logger.warning(f"Using static event statuses: {e}")
            return list(EVENT_CATALOG)
        return merge_event_status(EVENT_CATALOG, rows)

    async def fetch_messages(self) -> list[ContactMessage]:
        """Fetch contact form messages, newest first."""
        records = await self._full_list("contact_messages", {"sort": "-created"})
        messages = []
        for record in records:
            messages.append(
                ContactMessage(
                    id=getattr(record, "id", None),
                    name=getattr(record, "name", ""),
                    email=getattr(record, "email", ""),
                    message=getattr(record, "message", ""),
                    is_read=getattr(record, "is_read", False),
                    created_at=getattr(record, "created_at", None) or getattr(record, "created", None),
                )
            )
        return messages

    async def fetch_expenses(self) -> list[Expense]:
        """Fetch organiser expense bills, newest first."""
        records = await self._full_list("expenses", {"sort": "-created"})
        expenses = []
        for record in records:
            expenses.append(
                Expense(
                    id=getattr(record, "id", None),
                    bill_name=getattr(record, "bill_name", ""),
                    person_name=getattr(record, "person_name", ""),
                    bill_number=getattr(record, "bill_number", None),
                    items=getattr(record, "items", None),
                    quantity=getattr(record, "quantity", None),
                    amount=getattr(record, "amount", None),
                    needs_stamp=getattr(record, "needs_stamp", False),
                    is_reimbursed=getattr(record, "is_reimbursed", False),
                    bill_file=getattr(record, "bill_file", None),
                    created_at=getattr(record, "created_at", None) or getattr(record, "created", None),
                )
            )
        return expenses
