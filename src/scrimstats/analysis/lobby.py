"""
Lobby state for team building.

Holds the selected steam ids and their manual slots, and hands them to the
balancer together with freshly aggregated career stats.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from scrimstats.analysis.balancer import TeamBalance, balance_teams
from scrimstats.analysis.models import AggregatedPlayerStats
from scrimstats.core.config import BalancerConfig
from scrimstats.core.constants import MAX_LOBBY_SIZE, RosterSlot
from scrimstats.core.utils import normalize_steamid

logger = logging.getLogger(__name__)


@dataclass
class Lobby:
    """Players picked for the next match, with optional team/bench pins."""

    max_size: int = MAX_LOBBY_SIZE
    players: list[str] = field(default_factory=list)
    assignments: dict[str, RosterSlot] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.players)

    def __contains__(self, steam_id: object) -> bool:
        return normalize_steamid(steam_id) in self.players

    def add(self, steam_id: str) -> bool:
        """Add a player. Returns False for duplicates or when the lobby is full."""
        sid = normalize_steamid(steam_id)
        if sid in self.players:
            return False
        if len(self.players) >= self.max_size:
            logger.debug(f"Lobby full ({self.max_size}), not adding {sid}")
            return False
        self.players.append(sid)
        return True

    def remove(self, steam_id: str) -> None:
        """Remove a player and any slot they were pinned to."""
        sid = normalize_steamid(steam_id)
        if sid in self.players:
            self.players.remove(sid)
        self.assignments.pop(sid, None)

    def assign(self, steam_id: str, slot: RosterSlot | str | None) -> None:
        """Pin a lobby player to team1/team2/bench, or clear the pin with None."""
        sid = normalize_steamid(steam_id)
        if slot is None:
            self.assignments.pop(sid, None)
            return
        if sid not in self.players:
            raise KeyError(f"Player {sid} is not in the lobby")
        self.assignments[sid] = RosterSlot(slot)

    def clear(self) -> None:
        self.players.clear()
        self.assignments.clear()

    def roster(self, players: Iterable[AggregatedPlayerStats]) -> list[AggregatedPlayerStats]:
        """Lobby members resolved to aggregates, in lobby order. Unknown ids are skipped."""
        by_id = {p.steam_id: p for p in players}
        return [by_id[sid] for sid in self.players if sid in by_id]

    def balance(
        self,
        players: Iterable[AggregatedPlayerStats],
        strategy: str | None = None,
        config: BalancerConfig | None = None,
    ) -> TeamBalance:
        """Balance the lobby against the current career aggregates."""
        return balance_teams(self.roster(players), self.assignments, strategy, config)
