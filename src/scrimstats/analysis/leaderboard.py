"""
Leaderboard, League Averages and Dashboard Summary

Read-only views over the career aggregates and the match collection:
sorting and searching players, league-wide averages, headline dashboard
numbers, and a per-day match activity histogram.
"""

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

from scrimstats.analysis.derived import (
    average_damage_per_round,
    average_rating,
    classify_role,
    kill_death_ratio,
    kills_per_round,
)
from scrimstats.analysis.models import AggregatedPlayerStats, MatchRecord
from scrimstats.core.constants import ACTIVITY_WINDOW_DAYS, RECENT_MATCH_COUNT

logger = logging.getLogger(__name__)

# Derived sort keys; anything else must be an aggregate field
DERIVED_SORT_KEYS: dict[str, Callable[[AggregatedPlayerStats], float]] = {
    "rating": average_rating,
    "adr": average_damage_per_round,
    "kd": kill_death_ratio,
    "kpr": kills_per_round,
}

SORTABLE_FIELDS = (
    "name",
    "matches",
    "kills",
    "deaths",
    "assists",
    "rounds_played",
    "damage_total",
    "sniper_kills",
    "utility_damage",
    "flashes_thrown",
    "opening_kills",
    "opening_deaths",
    "opening_attempts",
    "trade_kills",
    "clutches_won",
)


def sort_players(
    players: Iterable[AggregatedPlayerStats],
    key: str = "rating",
    descending: bool = True,
) -> list[AggregatedPlayerStats]:
    """
    Sort players by an aggregate field or a derived stat.

    Args:
        players: Career aggregates
        key: Field name, or one of "rating", "adr", "kd", "kpr"
        descending: Highest first (default)

    Returns:
        New sorted list (stable for ties)
    """
    if key in DERIVED_SORT_KEYS:
        key_fn = DERIVED_SORT_KEYS[key]
    elif key in SORTABLE_FIELDS:
        key_fn = lambda p: getattr(p, key)  # noqa: E731
    else:
        raise ValueError(f"Cannot sort by {key!r}")
    return sorted(players, key=key_fn, reverse=descending)


def search_players(
    players: Iterable[AggregatedPlayerStats], term: str
) -> list[AggregatedPlayerStats]:
    """Players whose name contains the term (case-insensitive)."""
    needle = term.lower()
    return [p for p in players if needle in p.name.lower()]


@dataclass
class LeagueAverages:
    """Mean of each player's own rate stats (every player weighted equally)."""

    rating: float = 0.0
    adr: float = 0.0
    kd: float = 0.0
    kpr: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "rating": round(self.rating, 2),
            "adr": round(self.adr, 1),
            "kd": round(self.kd, 2),
            "kpr": round(self.kpr, 2),
        }


def league_averages(players: Iterable[AggregatedPlayerStats]) -> LeagueAverages:
    """League-wide averages; all zeros for an empty league."""
    players = list(players)
    if not players:
        return LeagueAverages()
    n = len(players)
    return LeagueAverages(
        rating=sum(average_rating(p) for p in players) / n,
        adr=sum(average_damage_per_round(p) for p in players) / n,
        kd=sum(kill_death_ratio(p) for p in players) / n,
        kpr=sum(kills_per_round(p) for p in players) / n,
    )


@dataclass
class DashboardSummary:
    """Headline numbers for the dashboard."""

    total_matches: int = 0
    total_rounds: int = 0
    total_kills: int = 0
    top_player: AggregatedPlayerStats | None = None
    recent_matches: list[MatchRecord] = field(default_factory=list)
    league: LeagueAverages = field(default_factory=LeagueAverages)

    def to_dict(self) -> dict[str, Any]:
        top = None
        if self.top_player is not None:
            top = {
                "steam_id": self.top_player.steam_id,
                "name": self.top_player.name,
                "rating": round(self.top_player.average_rating, 2),
            }
        return {
            "total_matches": self.total_matches,
            "total_rounds": self.total_rounds,
            "total_kills": self.total_kills,
            "top_player": top,
            "recent_matches": [
                {"id": m.id, "filename": m.filename, "timestamp": m.timestamp}
                for m in self.recent_matches
            ],
            "league": self.league.to_dict(),
        }


def summarize(
    matches: Iterable[MatchRecord],
    players: Iterable[AggregatedPlayerStats],
    recent: int = RECENT_MATCH_COUNT,
) -> DashboardSummary:
    """
    Build the dashboard summary.

    Rounds per match are taken from the first listed participant, since
    every participant of a match played the same rounds.
    """
    matches = list(matches)
    players = list(players)
    top = sort_players(players, "rating")[0] if players else None
    return DashboardSummary(
        total_matches=len(matches),
        total_rounds=sum(m.players[0].rounds_played for m in matches if m.players),
        total_kills=sum(p.kills for p in players),
        top_player=top,
        recent_matches=sorted(matches, key=lambda m: m.timestamp, reverse=True)[:recent],
        league=league_averages(players),
    )


def match_activity(
    matches: Iterable[MatchRecord],
    days: int = ACTIVITY_WINDOW_DAYS,
    today: date | None = None,
) -> list[tuple[date, int]]:
    """
    Matches played per local calendar day over the last N days.

    Returns:
        (day, count) pairs, oldest first, ending with today
    """
    today = today or date.today()
    counts = Counter(datetime.fromtimestamp(m.timestamp / 1000).date() for m in matches)
    return [
        (day, counts.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(days - 1, -1, -1))
    ]


def leaderboard_dataframe(
    players: Iterable[AggregatedPlayerStats], sort_by: str = "rating"
) -> pd.DataFrame:
    """
    Leaderboard as a DataFrame with raw totals plus derived rate columns.

    Args:
        players: Career aggregates
        sort_by: Sort key accepted by sort_players

    Returns:
        DataFrame with one row per player
    """
    rows = []
    for p in sort_players(players, sort_by):
        row = p.to_dict()
        row.update(
            {
                "rating": average_rating(p),
                "adr": average_damage_per_round(p),
                "kd": kill_death_ratio(p),
                "kpr": kills_per_round(p),
                "role": str(classify_role(p)),
            }
        )
        rows.append(row)

    columns = [
        "steam_id", "name", "role", "matches", "rating", "kd", "adr", "kpr",
        "kills", "deaths", "assists", "rounds_played", "damage_total",
        "sniper_kills", "utility_damage", "flashes_thrown", "opening_kills",
        "opening_deaths", "opening_attempts", "trade_kills", "clutches_won",
    ]  # fmt: skip
    df = pd.DataFrame(rows, columns=columns)
    logger.debug(f"Leaderboard frame: {len(df)} rows")
    return df
