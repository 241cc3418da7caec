"""Gaming service - per-game breakdown of Pixel Showdown.

Teams entering the online gaming event pick one game. Each game charges a flat
per-team fee (GAME_CATALOG), so game revenue is counted from those fees rather
than from the registration's total_amount.
"""

from __future__ import annotations

from collections.abc import Iterable

from api.schemas.metrics import GameBreakdownResponse, GameStats
from innothon.events import GAME_CATALOG, PIXEL_SHOWDOWN, game_key
from innothon.models import Registration

from .revenue import AMOUNT_DECIMALS
from .safety import total_function


def gaming_registrations(registrations: Iterable[Registration], game: str | None = None) -> list[Registration]:
    """Pixel Showdown registrations that chose a game, optionally only those playing `game`."""
    return [
        registration
        for registration in registrations
        if PIXEL_SHOWDOWN in registration.selected_events
        and registration.game_details is not None
        and (game is None or registration.game_details.game == game)
    ]


def _empty_breakdown(*args: object, **kwargs: object) -> GameBreakdownResponse:
    return GameBreakdownResponse(
        total_teams=0,
        approved_count=0,
        recognized_revenue=0.0,
        potential_revenue=0.0,
        games=[
            GameStats(
                game=info.key,
                title=info.title,
                team_count=0,
                approved_count=0,
                fee=info.fee,
                recognized_revenue=0.0,
                potential_revenue=0.0,
            )
            for info in GAME_CATALOG
        ],
    )


@total_function(_empty_breakdown)
def game_breakdown(registrations: Iterable[Registration]) -> GameBreakdownResponse:
    """Teams, approvals and fees per game, one entry for every game in GAME_CATALOG.

    Teams whose game is not in the catalog still count towards total_teams
    but fall in no game bucket.
    """
    players = gaming_registrations(registrations)
    teams: dict[str, int] = {info.key: 0 for info in GAME_CATALOG}
    approved: dict[str, int] = {info.key: 0 for info in GAME_CATALOG}
    for registration in players:
        key = game_key(registration.game_details)
        if key is None:
            continue
        teams[key] += 1
        if registration.is_approved:
            approved[key] += 1

    games = [
        GameStats(
            game=info.key,
            title=info.title,
            team_count=teams[info.key],
            approved_count=approved[info.key],
            fee=info.fee,
            recognized_revenue=round(approved[info.key] * info.fee, AMOUNT_DECIMALS),
            potential_revenue=round(teams[info.key] * info.fee, AMOUNT_DECIMALS),
        )
        for info in GAME_CATALOG
    ]
    return GameBreakdownResponse(
        total_teams=len(players),
        approved_count=sum(1 for registration in players if registration.is_approved),
        recognized_revenue=round(sum(stats.recognized_revenue for stats in games), AMOUNT_DECIMALS),
        potential_revenue=round(sum(stats.potential_revenue for stats in games), AMOUNT_DECIMALS),
        games=games,
    )
