"""
Match Detail Views

Per-match scoreboard and duel breakdown built from single match records,
plus the newest-first match list with filename search.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from scrimstats.analysis.derived import average_damage_per_round, classify_role
from scrimstats.analysis.models import MatchRecord
from scrimstats.core.config import RatingConfig
from scrimstats.core.constants import WeaponRole
from scrimstats.core.utils import normalize_steamid

logger = logging.getLogger(__name__)


@dataclass
class ScoreboardRow:
    """One participant's line on a match scoreboard."""

    steam_id: str
    name: str
    team_name: str
    kills: int
    deaths: int
    assists: int
    adr: float
    rating: float
    role: WeaponRole

    def to_dict(self) -> dict[str, Any]:
        return {
            "steam_id": self.steam_id,
            "name": self.name,
            "team_name": self.team_name,
            "kills": self.kills,
            "deaths": self.deaths,
            "assists": self.assists,
            "adr": round(self.adr, 1),
            "rating": round(self.rating, 2),
            "role": str(self.role),
        }


@dataclass
class MatchDuelRow:
    """A player's duel against one opponent within a single match."""

    opponent_id: str
    opponent_name: str
    kills: int
    deaths: int
    # None when the opponent has no record in this match
    opponent_role: WeaponRole | None = None

    @property
    def diff(self) -> int:
        return self.kills - self.deaths

    def to_dict(self) -> dict[str, Any]:
        return {
            "opponent_id": self.opponent_id,
            "opponent_name": self.opponent_name,
            "kills": self.kills,
            "deaths": self.deaths,
            "diff": self.diff,
            "opponent_role": str(self.opponent_role) if self.opponent_role else None,
        }


def search_matches(matches: Iterable[MatchRecord], term: str = "") -> list[MatchRecord]:
    """Matches whose filename contains the term (case-insensitive), newest first."""
    needle = term.lower()
    found = [m for m in matches if needle in m.filename.lower()]
    return sorted(found, key=lambda m: m.timestamp, reverse=True)


def find_match(matches: Iterable[MatchRecord], ref: str) -> MatchRecord | None:
    """Look up a match by id, falling back to an exact filename."""
    matches = list(matches)
    for match in matches:
        if match.id == ref:
            return match
    for match in matches:
        if match.filename == ref:
            return match
    return None


def match_scoreboard(
    match: MatchRecord, config: RatingConfig | None = None
) -> list[ScoreboardRow]:
    """
    Scoreboard for one match, most kills first.

    Args:
        match: Stored match
        config: Role classification settings

    Returns:
        One row per participant; equal kill counts keep export order
    """
    rows = [
        ScoreboardRow(
            steam_id=p.steam_id,
            name=p.name,
            team_name=p.team_name,
            kills=p.kills,
            deaths=p.deaths,
            assists=p.assists,
            adr=average_damage_per_round(p),
            rating=p.rating_score,
            role=classify_role(p, config),
        )
        for p in match.players
    ]
    rows.sort(key=lambda row: row.kills, reverse=True)
    return rows


def player_match_duels(
    match: MatchRecord, steam_id: str, config: RatingConfig | None = None
) -> list[MatchDuelRow]:
    """
    A player's recorded duels in one match, best differential first.

    Only the player's own duel entries are listed; opponents' entries about
    this player are not mirrored here (see reconcile_duel for that).

    Args:
        match: Stored match
        steam_id: Player whose duels to list
        config: Role classification settings for the opponents

    Returns:
        Duel rows sorted by kills - deaths descending; empty when the player
        did not take part
    """
    record = match.find_player(steam_id)
    if record is None:
        logger.debug(f"Player {normalize_steamid(steam_id)} not in match {match.id}")
        return []

    rows = []
    for opponent_id, duel in record.duels.items():
        opponent = match.find_player(opponent_id)
        rows.append(
            MatchDuelRow(
                opponent_id=opponent_id,
                opponent_name=duel.opponent_name,
                kills=duel.kills,
                deaths=duel.deaths,
                opponent_role=classify_role(opponent, config) if opponent else None,
            )
        )
    rows.sort(key=lambda row: row.diff, reverse=True)
    return rows
