"""
Team Balancer

Splits a lobby into two equal-size teams with similar summed average
rating, honoring manual team pins and bench assignments.

Rules:
- Benched players are excluded entirely.
- The active player count must be even and at least 2, otherwise a
  RosterValidationError is raised and nothing is assigned.
- Players pinned to team1/team2 are placed first and count toward both
  team size and team rating.
- Unassigned players are sorted by average rating (descending, stable) and
  handed out by the selected strategy.

The default greedy strategy walks the sorted pool and puts each player on
team1 when team1 has room and either its rating sum is not above team2's
or team2 is already full; otherwise on team2. It is a
heuristic, not an optimal partition. The exhaustive strategy searches every
completion of the pins for the minimum rating gap and is intended for
small pools.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any

from scrimstats.analysis.models import AggregatedPlayerStats
from scrimstats.core.config import BalancerConfig
from scrimstats.core.constants import RosterSlot
from scrimstats.core.errors import RosterValidationError
from scrimstats.core.utils import normalize_steamid

logger = logging.getLogger(__name__)


def player_rating(player: AggregatedPlayerStats) -> float:
    """Rating used for balancing: the player's average per-match rating."""
    return player.average_rating


def team_rating(team: Iterable[AggregatedPlayerStats]) -> float:
    """Summed average rating of a team."""
    return sum(player_rating(p) for p in team)


@dataclass
class TeamBalance:
    """Result of a successful balance."""

    team1: list[AggregatedPlayerStats] = field(default_factory=list)
    team2: list[AggregatedPlayerStats] = field(default_factory=list)
    bench: list[AggregatedPlayerStats] = field(default_factory=list)
    strategy: str = "greedy"

    @property
    def team1_rating(self) -> float:
        return team_rating(self.team1)

    @property
    def team2_rating(self) -> float:
        return team_rating(self.team2)

    @property
    def rating_gap(self) -> float:
        return abs(self.team1_rating - self.team2_rating)

    @staticmethod
    def _average(team: list[AggregatedPlayerStats]) -> float:
        return team_rating(team) / len(team) if team else 0.0

    @property
    def team1_average(self) -> float:
        return self._average(self.team1)

    @property
    def team2_average(self) -> float:
        return self._average(self.team2)

    def to_dict(self) -> dict[str, Any]:
        def members(team: list[AggregatedPlayerStats]) -> list[dict[str, Any]]:
            return [
                {"steam_id": p.steam_id, "name": p.name, "rating": round(player_rating(p), 2)}
                for p in team
            ]

        return {
            "strategy": self.strategy,
            "team1": members(self.team1),
            "team2": members(self.team2),
            "bench": members(self.bench),
            "team1_average": round(self.team1_average, 2),
            "team2_average": round(self.team2_average, 2),
            "rating_gap": round(self.rating_gap, 3),
        }


# =============================================================================
# Strategies
# =============================================================================


class BalanceStrategy:
    """Distributes the unpinned pool onto the two (possibly pre-filled) teams."""

    name = "base"

    def distribute(
        self,
        pool: list[AggregatedPlayerStats],
        team1: list[AggregatedPlayerStats],
        team2: list[AggregatedPlayerStats],
        team_size: int,
    ) -> None:
        """
        Append pool players to team1/team2 in place.

        The pool always fits into the free seats of the two teams.
        """
        raise NotImplementedError


class GreedyBalancer(BalanceStrategy):
    """Running-sum greedy: highest rated first, onto the weaker team."""

    name = "greedy"

    def distribute(self, pool, team1, team2, team_size):
        for player in pool:
            team1_full = len(team1) >= team_size
            team2_full = len(team2) >= team_size
            if not team1_full and (team_rating(team1) <= team_rating(team2) or team2_full):
                team1.append(player)
            else:
                team2.append(player)


class ExhaustiveBalancer(BalanceStrategy):
    """Minimum rating gap over every way of completing the pinned teams."""

    name = "exhaustive"

    def __init__(self, max_pool: int = 14):
        self.max_pool = max_pool

    def distribute(self, pool, team1, team2, team_size):
        if len(pool) > self.max_pool:
            logger.warning(
                f"Pool of {len(pool)} exceeds exhaustive limit {self.max_pool}, using greedy"
            )
            return GreedyBalancer().distribute(pool, team1, team2, team_size)

        need1 = max(0, team_size - len(team1))
        need2 = max(0, team_size - len(team2))
        if need1 + need2 != len(pool):
            # Pins overfilled a side, so the other side takes the whole pool
            return GreedyBalancer().distribute(pool, team1, team2, team_size)

        ratings = [player_rating(p) for p in pool]
        total = sum(ratings)
        base1 = team_rating(team1)
        base2 = team_rating(team2)

        best: tuple[int, ...] = ()
        best_gap: float | None = None
        for combo in combinations(range(len(pool)), need1):
            picked = sum(ratings[i] for i in combo)
            gap = abs((base1 + picked) - (base2 + total - picked))
            if best_gap is None or gap < best_gap:
                best, best_gap = combo, gap

        chosen = set(best)
        for i, player in enumerate(pool):
            (team1 if i in chosen else team2).append(player)


_STRATEGIES: dict[str, type[BalanceStrategy]] = {
    GreedyBalancer.name: GreedyBalancer,
    ExhaustiveBalancer.name: ExhaustiveBalancer,
}


def get_strategy(name: str, config: BalancerConfig | None = None) -> BalanceStrategy:
    """Look up a balancing strategy by name."""
    config = config or BalancerConfig()
    key = name.lower()
    if key == ExhaustiveBalancer.name:
        return ExhaustiveBalancer(max_pool=config.exhaustive_max_pool)
    if key in _STRATEGIES:
        return _STRATEGIES[key]()
    raise ValueError(f"Unknown balancing strategy: {name!r} (expected one of {sorted(_STRATEGIES)})")


# =============================================================================
# Entry point
# =============================================================================


def _parse_slot(steam_id: str, value: Any) -> RosterSlot | None:
    if value is None or value == "":
        return None
    try:
        return RosterSlot(value)
    except ValueError:
        raise RosterValidationError(
            f"Invalid roster slot {value!r} for player {steam_id}"
        ) from None


def normalize_assignments(assignments: Mapping[str, Any] | None) -> dict[str, RosterSlot]:
    """Validate an assignment mapping; unassigned (None) entries are dropped."""
    result: dict[str, RosterSlot] = {}
    for steam_id, value in (assignments or {}).items():
        sid = normalize_steamid(steam_id)
        slot = _parse_slot(sid, value)
        if slot is not None:
            result[sid] = slot
    return result


def balance_teams(
    roster: Iterable[AggregatedPlayerStats],
    assignments: Mapping[str, Any] | None = None,
    strategy: str | BalanceStrategy | None = None,
    config: BalancerConfig | None = None,
) -> TeamBalance:
    """
    Split a roster into two balanced teams.

    Args:
        roster: Lobby players (career aggregates)
        assignments: steam id -> "team1" / "team2" / "bench"; missing or None
            means unassigned
        strategy: Strategy name or instance (defaults to the configured
            strategy, normally greedy)
        config: Balancer configuration

    Returns:
        TeamBalance with both teams in insertion order

    Raises:
        RosterValidationError: if the active (non-benched) player count is odd
            or below 2, or a slot label is invalid
    """
    config = config or BalancerConfig()
    slots = normalize_assignments(assignments)
    roster = list(roster)

    if strategy is None:
        strategy = config.strategy
    balancer = strategy if isinstance(strategy, BalanceStrategy) else get_strategy(strategy, config)

    bench = [p for p in roster if slots.get(p.steam_id) is RosterSlot.BENCH]
    active = [p for p in roster if slots.get(p.steam_id) is not RosterSlot.BENCH]

    if len(active) < 2 or len(active) % 2 != 0:
        raise RosterValidationError(
            f"Need an even number of at least 2 active players, got {len(active)}",
            active_count=len(active),
        )

    team_size = len(active) // 2
    team1 = [p for p in active if slots.get(p.steam_id) is RosterSlot.TEAM1]
    team2 = [p for p in active if slots.get(p.steam_id) is RosterSlot.TEAM2]
    if len(team1) > team_size or len(team2) > team_size:
        logger.warning(
            f"Pins exceed team size {team_size} (team1={len(team1)}, team2={len(team2)})"
        )

    pool = sorted(
        (p for p in active if p.steam_id not in slots),
        key=player_rating,
        reverse=True,
    )
    balancer.distribute(pool, team1, team2, team_size)

    result = TeamBalance(
        team1=team1,
        team2=team2,
        bench=bench,
        strategy=balancer.name,
    )
    logger.info(
        f"Balanced {len(active)} players ({balancer.name}): "
        f"{result.team1_rating:.2f} vs {result.team2_rating:.2f}"
    )
    return result
