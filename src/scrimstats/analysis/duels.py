"""
Head-to-Head Duel Reconciliation

Match exports record each duel from one player's point of view only, and
not necessarily from both. This module rebuilds a single symmetric kill
ledger between two players across every match they played together.

Per match, the lookup order is:
1. PREFER_A: A's own entry for B (A kills = entry kills, B kills = entry deaths)
2. FALLBACK_B: B's entry for A read the other way round
   (A kills = entry deaths, B kills = entry kills)
3. NO_RECORD: neither side recorded the duel; the match contributes nothing
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from scrimstats.analysis.aggregation import aggregate_player_stats, find_player
from scrimstats.analysis.derived import classify_role
from scrimstats.analysis.models import (
    AggregatedPlayerStats,
    MatchRecord,
    PlayerMatchRecord,
)
from scrimstats.core.constants import WeaponRole
from scrimstats.core.utils import normalize_steamid

logger = logging.getLogger(__name__)


class DuelSource(Enum):
    """Which side's record a match's duel result was taken from."""

    PREFER_A = "prefer_a"
    FALLBACK_B = "fallback_b"
    NO_RECORD = "no_record"


@dataclass
class DuelResolution:
    """Duel outcome for one match, from player A's perspective."""

    source: DuelSource
    a_kills: int = 0
    b_kills: int = 0


@dataclass
class DuelHistoryEntry:
    """One match's contribution to a head-to-head ledger."""

    match_id: str
    filename: str
    timestamp: int
    a_kills: int
    b_kills: int
    a_role: WeaponRole
    b_role: WeaponRole
    a_team: str
    b_team: str
    source: DuelSource

    def to_dict(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "filename": self.filename,
            "timestamp": self.timestamp,
            "a_kills": self.a_kills,
            "b_kills": self.b_kills,
            "a_role": str(self.a_role),
            "b_role": str(self.b_role),
            "a_team": self.a_team,
            "b_team": self.b_team,
            "source": self.source.value,
        }


@dataclass
class DuelLedger:
    """Symmetric head-to-head totals between two players."""

    player_a: AggregatedPlayerStats
    player_b: AggregatedPlayerStats
    a_kills: int = 0
    b_kills: int = 0
    history: list[DuelHistoryEntry] = field(default_factory=list)

    @property
    def matches_together(self) -> int:
        """Matches that contributed a recorded duel."""
        return len(self.history)

    @property
    def a_share(self) -> float:
        """A's fraction of all kills between the two (0.5 with none)."""
        total = self.a_kills + self.b_kills
        return self.a_kills / total if total > 0 else 0.5

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_a": {"steam_id": self.player_a.steam_id, "name": self.player_a.name},
            "player_b": {"steam_id": self.player_b.steam_id, "name": self.player_b.name},
            "a_kills": self.a_kills,
            "b_kills": self.b_kills,
            "history": [entry.to_dict() for entry in self.history],
        }


def resolve_duel(record_a: PlayerMatchRecord, record_b: PlayerMatchRecord) -> DuelResolution:
    """
    Resolve one match's duel between two participants.

    Args:
        record_a: Player A's record in the match
        record_b: Player B's record in the same match

    Returns:
        DuelResolution from A's perspective
    """
    a_entry = record_a.duel_against(record_b.steam_id)
    if a_entry is not None:
        return DuelResolution(DuelSource.PREFER_A, a_kills=a_entry.kills, b_kills=a_entry.deaths)

    b_entry = record_b.duel_against(record_a.steam_id)
    if b_entry is not None:
        return DuelResolution(DuelSource.FALLBACK_B, a_kills=b_entry.deaths, b_kills=b_entry.kills)

    return DuelResolution(DuelSource.NO_RECORD)


def reconcile_duel(
    matches: Iterable[MatchRecord],
    player_a_id: str,
    player_b_id: str,
    players: Iterable[AggregatedPlayerStats] | None = None,
) -> DuelLedger | None:
    """
    Build the head-to-head ledger between two players.

    Args:
        matches: Full match collection
        player_a_id: Steam id of player A
        player_b_id: Steam id of player B
        players: Career aggregates to resolve the ids against
            (aggregated from ``matches`` when omitted)

    Returns:
        DuelLedger with totals and history (newest first), or None when
        either id has no aggregate
    """
    matches = list(matches)
    a_id = normalize_steamid(player_a_id)
    b_id = normalize_steamid(player_b_id)

    if players is None:
        players = aggregate_player_stats(matches)
    players = list(players)

    player_a = find_player(players, a_id)
    player_b = find_player(players, b_id)
    if player_a is None or player_b is None:
        logger.debug(f"No duel data: unresolved player(s) {a_id} / {b_id}")
        return None

    ledger = DuelLedger(player_a=player_a, player_b=player_b)

    for match in matches:
        record_a = match.find_player(a_id)
        record_b = match.find_player(b_id)
        if record_a is None or record_b is None:
            continue

        resolution = resolve_duel(record_a, record_b)
        if resolution.source is DuelSource.NO_RECORD:
            logger.debug(f"Match {match.id}: no duel recorded between {a_id} and {b_id}")
            continue

        ledger.a_kills += resolution.a_kills
        ledger.b_kills += resolution.b_kills
        ledger.history.append(
            DuelHistoryEntry(
                match_id=match.id,
                filename=match.filename,
                timestamp=match.timestamp,
                a_kills=resolution.a_kills,
                b_kills=resolution.b_kills,
                a_role=classify_role(record_a),
                b_role=classify_role(record_b),
                a_team=record_a.team_name,
                b_team=record_b.team_name,
                source=resolution.source,
            )
        )

    ledger.history.sort(key=lambda entry: entry.timestamp, reverse=True)
    logger.debug(
        f"Duel {player_a.name} vs {player_b.name}: "
        f"{ledger.a_kills}-{ledger.b_kills} over {ledger.matches_together} matches"
    )
    return ledger
