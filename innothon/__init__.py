"""
Innothon - Core domain for the Innothon registration admin.

This package contains:
- models: Record models (Registration, TeamMember, AttendanceRecord, ...)
- events: Static event catalog and event helpers
- errors: Reporting exception hierarchy
- logging_config: Unified logging format
"""

from innothon.events import (
    EVENT_CATALOG,
    ONLINE_EVENT_IDS,
    REGISTRATION_DESK,
    event_title,
    is_online_event,
)
from innothon.models import (
    AttendanceRecord,
    ContactMessage,
    EventInfo,
    EventStatus,
    Registration,
    RegistrationStatus,
    TeamMember,
)

__all__ = [
    "EVENT_CATALOG",
    "ONLINE_EVENT_IDS",
    "REGISTRATION_DESK",
    "AttendanceRecord",
    "ContactMessage",
    "EventInfo",
    "EventStatus",
    "Registration",
    "RegistrationStatus",
    "TeamMember",
    "event_title",
    "is_online_event",
]
