"""Record normalization for registration snapshots.

Backend rows arrive with any of selected_events, team_members, total_amount,
team_size and created_at missing or malformed. Everything downstream takes
the Registration model produced here, so the defaults are applied once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from innothon.models import Registration

logger = logging.getLogger(__name__)

# Fields read off backend record objects (the SDK exposes columns as attributes)
REGISTRATION_FIELDS = tuple(Registration.model_fields)


def _record_to_dict(raw: Any) -> dict[str, Any]:
    """Flatten a mapping or a backend record object into a plain dict.

    The team roster is stored in a separate collection; when it was fetched
    with ``expand=team_members`` the related rows live under
    ``expand["team_members"]`` and take precedence over the relation ids.
    """
    if isinstance(raw, Mapping):
        data = dict(raw)
        expand = data.pop("expand", None) or {}
    else:
        data = {field: getattr(raw, field) for field in REGISTRATION_FIELDS if hasattr(raw, field)}
        expand = getattr(raw, "expand", None) or {}

    # Rows without an explicit created_at fall back to the backend record timestamp
    if not data.get("created_at"):
        created = raw.get("created") if isinstance(raw, Mapping) else getattr(raw, "created", None)
        if created:
            data["created_at"] = created

    members = expand.get("team_members") if isinstance(expand, Mapping) else None
    if members is not None:
        data["team_members"] = [_member_to_dict(member) for member in members]
    elif isinstance(data.get("team_members"), (list, tuple)):
        data["team_members"] = [
            _member_to_dict(member) for member in data["team_members"] if not isinstance(member, str)
        ]
    return data


def _member_to_dict(member: Any) -> Any:
    if member is None or isinstance(member, Mapping):
        return member
    if hasattr(member, "model_dump"):
        return member.model_dump()
    if not hasattr(member, "__dict__"):
        return None
    return {key: value for key, value in vars(member).items() if not key.startswith("_")}


def normalize_registration(raw: Any, now: datetime | None = None) -> Registration:
    """Produce a well-formed Registration from a loosely shaped record.

    Idempotent: an already-normalized Registration is returned unchanged. A bare
    scalar is not a record and yields an all-defaults Registration.

    Args:
        raw: A mapping, a Registration, or a backend record object.
        now: Timestamp used when created_at is missing (defaults to UTC now).

    Returns:
        Registration with the documented defaults applied.
    """
    if isinstance(raw, Registration):
        return raw
    if isinstance(raw, (str, bytes, int, float, bool)):
        logger.warning(f"Registration record is a bare {type(raw).__name__}, using defaults")
        data: dict[str, Any] = {}
    else:
        data = _record_to_dict(raw) if raw is not None else {}
    if not data.get("created_at"):
        data["created_at"] = (now or datetime.now(UTC)).isoformat()
    return Registration.model_validate(data)


def normalize_registrations(raws: Iterable[Any], now: datetime | None = None) -> list[Registration]:
    """Normalize a batch of registration records.

    Records that cannot be interpreted at all are logged and dropped.
    """
    normalized: list[Registration] = []
    for raw in raws:
        try:
            normalized.append(normalize_registration(raw, now=now))
        except Exception as e:
            logger.warning(f"Skipping unreadable registration record: {e}")
    return normalized


def day_key_of(timestamp: Any) -> str:
    """Calendar-day key (YYYY-MM-DD) of a timestamp.

    This is a string-prefix comparison on the date portion of the stored value,
    not a timezone-aware conversion: two timestamps sharing a date prefix fall on
    the same day regardless of their time-of-day or offset. Both the ISO form
    ("2025-03-01T10:00:00Z") and the backend's space-separated form
    ("2025-03-01 10:00:00.000Z") are accepted.
    """
    if isinstance(timestamp, datetime):
        return timestamp.date().isoformat()
    if isinstance(timestamp, date):
        return timestamp.isoformat()
    if not timestamp:
        return ""
    return str(timestamp).strip().split(" ")[0].split("T")[0]
