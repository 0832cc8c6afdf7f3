"""
Career Stat Aggregation

Folds a collection of matches into one AggregatedPlayerStats per steam id.

Aggregation is always a full replay of the match collection passed in:
there is no incremental state, so callers re-run it whenever matches are
added, removed, or replaced. Sums are order independent. The display name
is last-write-wins over a chronological replay (ascending timestamp, ties
in input order), so the name from the most recent match is kept.
"""

import logging
from collections.abc import Iterable

from scrimstats.analysis.models import (
    AggregatedPlayerStats,
    MatchRecord,
    PlayerMatchRecord,
)
from scrimstats.core.constants import COUNTING_STATS
from scrimstats.core.utils import normalize_steamid, timed

logger = logging.getLogger(__name__)


def replay_order(matches: Iterable[MatchRecord]) -> list[MatchRecord]:
    """Matches in the order aggregation folds them (oldest first, stable)."""
    return sorted(matches, key=lambda m: m.timestamp)


def _fold_player(aggregate: AggregatedPlayerStats, record: PlayerMatchRecord) -> None:
    aggregate.name = record.name
    aggregate.matches += 1
    for stat in COUNTING_STATS:
        setattr(aggregate, stat, getattr(aggregate, stat) + getattr(record, stat))
    aggregate.clutches_won += record.clutches_won


@timed
def aggregate_player_stats(matches: Iterable[MatchRecord]) -> list[AggregatedPlayerStats]:
    """
    Aggregate career stats for every player in a set of matches.

    Args:
        matches: Match collection (not modified)

    Returns:
        One aggregate per unique steam id, in order of first appearance
        during the chronological replay
    """
    players: dict[str, AggregatedPlayerStats] = {}
    match_count = 0

    for match in replay_order(matches):
        match_count += 1
        for record in match.players:
            steam_id = normalize_steamid(record.steam_id)
            aggregate = players.get(steam_id)
            if aggregate is None:
                aggregate = AggregatedPlayerStats(steam_id=steam_id, name=record.name)
                players[steam_id] = aggregate
            _fold_player(aggregate, record)

    logger.debug(f"Aggregated {len(players)} players from {match_count} matches")
    return list(players.values())


def aggregate_by_steamid(matches: Iterable[MatchRecord]) -> dict[str, AggregatedPlayerStats]:
    """Same as aggregate_player_stats, keyed by steam id."""
    return {p.steam_id: p for p in aggregate_player_stats(matches)}


def find_player(
    players: Iterable[AggregatedPlayerStats], steam_id: str
) -> AggregatedPlayerStats | None:
    """Look up an aggregate by steam id."""
    sid = normalize_steamid(steam_id)
    for player in players:
        if player.steam_id == sid:
            return player
    return None


def player_match_history(
    matches: Iterable[MatchRecord], steam_id: str
) -> list[tuple[MatchRecord, PlayerMatchRecord]]:
    """
    Every match a player took part in, with their record, newest first.

    Args:
        matches: Match collection
        steam_id: Player to look up

    Returns:
        (match, player record) pairs sorted by timestamp descending
    """
    history = []
    for match in matches:
        record = match.find_player(steam_id)
        if record is not None:
            history.append((match, record))
    history.sort(key=lambda item: item[0].timestamp, reverse=True)
    return history


def without_matches(matches: Iterable[MatchRecord], match_ids: Iterable[str]) -> list[MatchRecord]:
    """The match collection with some matches removed, ready for re-aggregation."""
    removed = set(match_ids)
    return [m for m in matches if m.id not in removed]
