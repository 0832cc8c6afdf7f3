"""
Data Models for Match Records and Career Aggregates

Typed views of the per-match player exports plus the career aggregate
produced by the aggregation engine. Both PlayerMatchRecord and
AggregatedPlayerStats expose the same stat attribute names (including
``matches`` and ``clutches_won``), so every derived metric accepts either.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from scrimstats.core.constants import CLUTCH_BRACKETS
from scrimstats.core.errors import RecordFormatError
from scrimstats.core.schemas import DuelDict, MatchDict, PlayerMatchDict
from scrimstats.core.utils import (
    is_numeric_steamid,
    normalize_steamid,
    parse_timestamp_from_filename,
    to_number,
)

logger = logging.getLogger(__name__)


class StatLine(Protocol):
    """Anything derived metrics can be computed from."""

    kills: int
    deaths: int
    assists: int
    rounds_played: int
    damage_total: float
    rating_score: float
    sniper_kills: int
    utility_damage: float
    opening_kills: int
    opening_attempts: int
    trade_kills: int

    @property
    def matches(self) -> int: ...

    @property
    def clutches_won(self) -> int: ...


# =============================================================================
# Per-match records
# =============================================================================


@dataclass
class DuelEntry:
    """One player's head-to-head result against one opponent in one match."""

    opponent_name: str
    kills: int = 0
    deaths: int = 0

    @property
    def diff(self) -> int:
        return self.kills - self.deaths

    @classmethod
    def from_dict(cls, data: DuelDict) -> "DuelEntry":
        entry = cls(
            opponent_name=str(data.get("opponent_name", "")),
            kills=int(to_number(data.get("kills"))),
            deaths=int(to_number(data.get("deaths"))),
        )
        recorded = data.get("diff")
        if recorded is not None and to_number(recorded) != entry.diff:
            logger.debug(
                f"Duel vs {entry.opponent_name}: recorded diff {recorded} "
                f"!= {entry.kills}-{entry.deaths}, using computed value"
            )
        return entry

    def to_dict(self) -> dict[str, Any]:
        return {
            "opponent_name": self.opponent_name,
            "kills": self.kills,
            "deaths": self.deaths,
            "diff": self.diff,
        }


@dataclass
class PlayerMatchRecord:
    """One player's performance in one match."""

    name: str
    steam_id: str
    team_name: str = ""
    side: str = ""
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    rounds_played: int = 0
    damage_total: float = 0.0
    sniper_kills: int = 0
    utility_damage: float = 0.0
    flashes_thrown: int = 0
    opening_kills: int = 0
    opening_deaths: int = 0
    opening_attempts: int = 0
    trade_kills: int = 0
    clutches_won_1v1: int = 0
    clutches_won_1v2: int = 0
    clutches_won_1v3: int = 0
    clutches_won_1v4: int = 0
    clutches_won_1v5: int = 0
    rating_score: float = 0.0
    # Keyed by opponent steam id; may be recorded on either side of a duel only
    duels: dict[str, DuelEntry] = field(default_factory=dict)

    @property
    def matches(self) -> int:
        """A single record always covers one match."""
        return 1

    @property
    def clutches_won(self) -> int:
        """Clutches won across all 1vX brackets."""
        return sum(getattr(self, f"clutches_won_{b}") for b in CLUTCH_BRACKETS)

    def duel_against(self, opponent_id: str) -> DuelEntry | None:
        """This player's recorded duel against an opponent, if any."""
        return self.duels.get(normalize_steamid(opponent_id))

    @classmethod
    def from_dict(cls, data: PlayerMatchDict) -> "PlayerMatchRecord":
        """
        Build a record from a raw export entry.

        Optional fields (trade kills, clutch brackets, duels) default to 0/empty.
        The only hard requirement is a steam id.
        """
        if not isinstance(data, dict):
            raise RecordFormatError(f"Player record must be an object, got {type(data).__name__}")

        steam_id = normalize_steamid(data.get("steam_id"))
        if not steam_id:
            raise RecordFormatError(f"Player record without steam_id: {data.get('name')!r}")
        if not is_numeric_steamid(steam_id):
            logger.warning(
                f"Player {data.get('name')!r} has non-numeric steam id {steam_id!r}, "
                "duels and lookups keyed by it may not match"
            )

        def num(key: str) -> float:
            return to_number(data.get(key))

        raw_duels = data.get("duels") or {}
        duels = {
            normalize_steamid(opp_id): DuelEntry.from_dict(duel)
            for opp_id, duel in raw_duels.items()
            if isinstance(duel, dict)
        }

        return cls(
            name=str(data.get("name", "")),
            steam_id=steam_id,
            team_name=str(data.get("last_team_name", "") or ""),
            side=str(data.get("last_side", "") or ""),
            kills=int(num("kills")),
            deaths=int(num("deaths")),
            assists=int(num("assists")),
            rounds_played=int(num("rounds_played")),
            damage_total=num("damage_total"),
            sniper_kills=int(num("sniper_kills")),
            utility_damage=num("utility_damage"),
            flashes_thrown=int(num("flashes_thrown")),
            opening_kills=int(num("opening_kills")),
            opening_deaths=int(num("opening_deaths")),
            opening_attempts=int(num("opening_attempts")),
            trade_kills=int(num("trade_kills")),
            clutches_won_1v1=int(num("clutches_won_1v1")),
            clutches_won_1v2=int(num("clutches_won_1v2")),
            clutches_won_1v3=int(num("clutches_won_1v3")),
            clutches_won_1v4=int(num("clutches_won_1v4")),
            clutches_won_1v5=int(num("clutches_won_1v5")),
            rating_score=num("hltv_3_0_score"),
            duels=duels,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the export format."""
        data: dict[str, Any] = {
            "name": self.name,
            "steam_id": self.steam_id,
            "last_team_name": self.team_name,
            "last_side": self.side,
            "duels": {opp: duel.to_dict() for opp, duel in self.duels.items()},
            "kills": self.kills,
            "deaths": self.deaths,
            "assists": self.assists,
            "rounds_played": self.rounds_played,
            "damage_total": self.damage_total,
            "opening_kills": self.opening_kills,
            "opening_deaths": self.opening_deaths,
            "opening_attempts": self.opening_attempts,
            "sniper_kills": self.sniper_kills,
            "utility_damage": self.utility_damage,
            "flashes_thrown": self.flashes_thrown,
            "hltv_3_0_score": self.rating_score,
            "trade_kills": self.trade_kills,
        }
        for bracket in CLUTCH_BRACKETS:
            data[f"clutches_won_{bracket}"] = getattr(self, f"clutches_won_{bracket}")
        return data


@dataclass
class MatchRecord:
    """A stored match: one PlayerMatchRecord per participant."""

    id: str
    filename: str
    timestamp: int  # epoch ms
    players: list[PlayerMatchRecord] = field(default_factory=list)

    def find_player(self, steam_id: str) -> PlayerMatchRecord | None:
        """Participant record for a steam id, or None if they did not play."""
        sid = normalize_steamid(steam_id)
        for player in self.players:
            if player.steam_id == sid:
                return player
        return None

    def has_player(self, steam_id: str) -> bool:
        return self.find_player(steam_id) is not None

    @classmethod
    def from_dict(cls, data: MatchDict, now: int | None = None) -> "MatchRecord":
        """
        Build a match from a stored match object ({id, filename, timestamp, data}).

        When the timestamp is missing it is derived from the filename.
        """
        if not isinstance(data, dict):
            raise RecordFormatError(f"Match must be an object, got {type(data).__name__}")
        players_raw = data.get("data", [])
        if not isinstance(players_raw, list):
            raise RecordFormatError(f"Match {data.get('id')!r}: 'data' must be a list")

        filename = str(data.get("filename", ""))
        timestamp = data.get("timestamp")
        if timestamp is None:
            timestamp = parse_timestamp_from_filename(filename, now=now)

        return cls(
            id=str(data.get("id") or filename),
            filename=filename,
            timestamp=int(to_number(timestamp)),
            players=[PlayerMatchRecord.from_dict(p) for p in players_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "timestamp": self.timestamp,
            "data": [p.to_dict() for p in self.players],
        }


# =============================================================================
# Career aggregate
# =============================================================================


@dataclass
class AggregatedPlayerStats:
    """Career totals for one steam id across every match they appear in."""

    steam_id: str
    name: str
    matches: int = 0
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    rounds_played: int = 0
    damage_total: float = 0.0
    rating_score: float = 0.0  # sum of per-match ratings
    sniper_kills: int = 0
    utility_damage: float = 0.0
    flashes_thrown: int = 0
    opening_kills: int = 0
    opening_deaths: int = 0
    opening_attempts: int = 0
    trade_kills: int = 0
    clutches_won: int = 0

    @property
    def average_rating(self) -> float:
        """Mean per-match rating (0 with no matches)."""
        return self.rating_score / self.matches if self.matches > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "steam_id": self.steam_id,
            "name": self.name,
            "matches": self.matches,
            "kills": self.kills,
            "deaths": self.deaths,
            "assists": self.assists,
            "rounds_played": self.rounds_played,
            "damage_total": self.damage_total,
            "rating_score": self.rating_score,
            "sniper_kills": self.sniper_kills,
            "utility_damage": self.utility_damage,
            "flashes_thrown": self.flashes_thrown,
            "opening_kills": self.opening_kills,
            "opening_deaths": self.opening_deaths,
            "opening_attempts": self.opening_attempts,
            "trade_kills": self.trade_kills,
            "clutches_won": self.clutches_won,
        }
