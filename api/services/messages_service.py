"""List/filter helpers for contact form messages."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from innothon.models import ContactMessage

from .safety import empty_list, total_function, zero


def _parse(timestamp: str) -> datetime | None:
    try:
        moment = datetime.fromisoformat(timestamp.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)


@total_function(empty_list)
def filter_messages(
    messages: Iterable[ContactMessage],
    query: str = "",
    unread_only: bool = False,
) -> list[ContactMessage]:
    """Messages matching a case-insensitive search on name, email or body, newest first."""
    needle = query.strip().lower()
    matches = [
        message
        for message in messages
        if (not unread_only or not message.is_read)
        and (
            not needle
            or needle in message.name.lower()
            or needle in message.email.lower()
            or needle in message.message.lower()
        )
    ]
    return sorted(matches, key=lambda message: message.created_at, reverse=True)


@total_function(zero)
def count_unread(messages: Iterable[ContactMessage]) -> int:
    return sum(1 for message in messages if not message.is_read)


@total_function(zero)
def count_recent(messages: Iterable[ContactMessage], now: datetime | None = None, hours: int = 24) -> int:
    """Messages created within the last `hours` hours (unparseable dates are not counted)."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    cutoff = now - timedelta(hours=hours)
    count = 0
    for message in messages:
        created = _parse(message.created_at)
        if created is not None and created >= cutoff:
            count += 1
    return count
