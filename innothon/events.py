"""
Static event catalog for Innothon.

The catalog is reference data: titles and fees are fixed at build time while
the open/closed status can be overridden by rows in the backend ``events``
collection (see merge_event_status).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from innothon.models import EventInfo, EventStatus, GameDetails

logger = logging.getLogger(__name__)

# Sentinel event id used for the initial check-in at the registration desk
REGISTRATION_DESK = "registration-desk"

# Pixel Showdown is the only online (gaming) event; everything else is on campus
PIXEL_SHOWDOWN = "pixel-showdown"
ONLINE_EVENT_IDS = frozenset({PIXEL_SHOWDOWN})

EVENT_CATALOG: tuple[EventInfo, ...] = (
    EventInfo(id="code-quest", title="Code Quest", registration_fee="₹500 per team"),
    EventInfo(id="design-derby", title="Design Derby", registration_fee="₹500 per team"),
    EventInfo(id="idea-innovate", title="Idea Innovate", registration_fee="₹500 per team"),
    EventInfo(id="capture-the-flag", title="Capture The Flag", registration_fee="₹500 per team"),
    EventInfo(id="digital-divas", title="Digital Divas", registration_fee="₹200 per participant"),
    EventInfo(id="pixel-showdown", title="Pixel Showdown", registration_fee="₹100 - ₹250 per team"),
)


@dataclass(frozen=True)
class GameInfo:
    """One Pixel Showdown game bucket and the flat fee a team pays for it."""

    key: str
    title: str
    fee: float


# Display order. Valorant is played but never charged; Free Fire splits by team format.
GAME_CATALOG: tuple[GameInfo, ...] = (
    GameInfo(key="valorant", title="Valorant", fee=0.0),
    GameInfo(key="bgmi", title="BGMI", fee=200.0),
    GameInfo(key="freefire_squad", title="Free Fire (Squad)", fee=200.0),
    GameInfo(key="freefire_duo", title="Free Fire (Duo)", fee=100.0),
    GameInfo(key="pes", title="PES", fee=100.0),
)

# Values the registration form stores in game_details.game
GAMES = frozenset({"valorant", "bgmi", "freefire", "pes"})


def is_online_event(event_id: str) -> bool:
    """Return True for the online gaming event."""
    return event_id in ONLINE_EVENT_IDS


def catalog_by_id(catalog: Iterable[EventInfo] | None = None) -> dict[str, EventInfo]:
    """Index a catalog by event id (defaults to the static catalog)."""
    return {event.id: event for event in (EVENT_CATALOG if catalog is None else catalog)}


def event_title(event_id: str, catalog: Mapping[str, EventInfo] | Iterable[EventInfo] | None = None) -> str:
    """Display title for an event id.

    Unknown ids are title-cased from their slug ("capture-the-flag" ->
    "Capture The Flag") so reports never show a blank title.
    """
    lookup = catalog if isinstance(catalog, Mapping) else catalog_by_id(catalog)
    event = lookup.get(event_id)
    if event is not None:
        return event.title
    if event_id == REGISTRATION_DESK:
        return "Registration Desk"
    return " ".join(word[:1].upper() + word[1:] for word in event_id.split("-") if word)


def merge_event_status(
    catalog: Iterable[EventInfo],
    rows: Iterable[Any],
) -> list[EventInfo]:
    """Overlay statuses stored in the backend onto the static catalog.

    Args:
        catalog: Static event definitions (order is preserved).
        rows: Backend rows with ``id`` and ``status`` (mappings or records).

    Returns:
        A new list of EventInfo. Events without a backend row keep their static
        status; backend rows for unknown ids and invalid statuses are ignored.
    """
    statuses: dict[str, EventStatus] = {}
    for row in rows:
        if isinstance(row, Mapping):
            event_id, status = row.get("id"), row.get("status")
        else:
            event_id, status = getattr(row, "id", None), getattr(row, "status", None)
        if not event_id:
            continue
        try:
            statuses[str(event_id)] = EventStatus(str(status))
        except ValueError:
            logger.warning(f"Ignoring unknown status {status!r} for event {event_id}")

    return [
        event.model_copy(update={"status": statuses[event.id]}) if event.id in statuses else event
        for event in catalog
    ]


def game_key(details: GameDetails | None) -> str | None:
    """GAME_CATALOG bucket for a registration's game choice.

    Free Fire without a format counts as a squad; unknown games have no bucket.
    """
    if details is None or details.game is None:
        return None
    if details.game == "freefire":
        return "freefire_duo" if details.format == "duo" else "freefire_squad"
    return details.game if details.game in GAMES else None
