"""
ScrimStats Data Contracts

Shape of the raw records handed to the core by whatever reads the match
exports. Typed records in scrimstats.analysis.models are built from these.

Producers: match export tool (per-match JSON array), backup files
Consumers: analysis/models.py from_dict(), cli.py
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# ============================================================
# PER-MATCH PLAYER EXPORT
# ============================================================
# One entry per participant; a match export is a list of these.


class DuelDict(TypedDict):
    """Head-to-head result against one opponent, from this player's side."""

    opponent_name: str
    kills: int
    deaths: int
    diff: NotRequired[int]  # kills - deaths


class PlayerMatchDict(TypedDict):
    """One player's performance in one match."""

    name: str
    steam_id: int | str
    last_team_name: NotRequired[str]
    last_side: NotRequired[str]  # "CT" or "TERRORIST"
    duels: NotRequired[dict[str, DuelDict]]  # keyed by opponent steam id
    kills: int
    deaths: int
    assists: int
    rounds_played: int
    damage_total: float
    opening_kills: int
    opening_deaths: int
    opening_attempts: int
    sniper_kills: int
    utility_damage: float
    flashes_thrown: int
    hltv_3_0_score: float  # per-match composite rating
    # Absent from older exports
    trade_kills: NotRequired[int]
    clutches_won_1v1: NotRequired[int]
    clutches_won_1v2: NotRequired[int]
    clutches_won_1v3: NotRequired[int]
    clutches_won_1v4: NotRequired[int]
    clutches_won_1v5: NotRequired[int]


# ============================================================
# STORED MATCH
# ============================================================
# Produced by: the upload/storage layer (outside this package)
# Consumed by: MatchRecord.from_dict(), cli.py backup loading


class MatchDict(TypedDict):
    """A stored match, as written to backup files."""

    id: str
    filename: str
    timestamp: NotRequired[int]  # epoch ms; derived from filename when absent
    data: list[PlayerMatchDict]
