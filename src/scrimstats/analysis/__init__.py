"""
ScrimStats Analysis - Career aggregation and the computations built on it.

This module contains:
- models: Match records and career aggregates
- aggregation: Full-replay career stat aggregation
- derived: Rate stats, weapon role, playstyle scores, impact rating
- duels: Head-to-head reconciliation from one-sided duel records
- balancer: Team balancing with pins and bench
- lobby: Lobby state for team building
- leaderboard: Sorting, league averages, dashboard summary
- matches: Per-match scoreboard, duel breakdown and match search
"""

from scrimstats.analysis.aggregation import (
    aggregate_by_steamid,
    aggregate_player_stats,
    find_player,
    player_match_history,
    without_matches,
)
from scrimstats.analysis.balancer import (
    BalanceStrategy,
    ExhaustiveBalancer,
    GreedyBalancer,
    TeamBalance,
    balance_teams,
)
from scrimstats.analysis.derived import (
    PlayerProfile,
    PlaystyleScores,
    RateStats,
    build_player_profile,
    calculate_playstyle,
    calculate_rates,
    classify_role,
    impact_rating,
)
from scrimstats.analysis.duels import (
    DuelHistoryEntry,
    DuelLedger,
    DuelSource,
    reconcile_duel,
    resolve_duel,
)
from scrimstats.analysis.leaderboard import (
    DashboardSummary,
    LeagueAverages,
    league_averages,
    leaderboard_dataframe,
    match_activity,
    search_players,
    sort_players,
    summarize,
)
from scrimstats.analysis.lobby import Lobby
from scrimstats.analysis.matches import (
    MatchDuelRow,
    ScoreboardRow,
    find_match,
    match_scoreboard,
    player_match_duels,
    search_matches,
)
from scrimstats.analysis.models import (
    AggregatedPlayerStats,
    DuelEntry,
    MatchRecord,
    PlayerMatchRecord,
)

__all__: list[str] = [
    # Models
    "AggregatedPlayerStats",
    "DuelEntry",
    "MatchRecord",
    "PlayerMatchRecord",
    # Aggregation
    "aggregate_by_steamid",
    "aggregate_player_stats",
    "find_player",
    "player_match_history",
    "without_matches",
    # Derived metrics
    "PlayerProfile",
    "PlaystyleScores",
    "RateStats",
    "build_player_profile",
    "calculate_playstyle",
    "calculate_rates",
    "classify_role",
    "impact_rating",
    # Duels
    "DuelHistoryEntry",
    "DuelLedger",
    "DuelSource",
    "reconcile_duel",
    "resolve_duel",
    # Balancing
    "BalanceStrategy",
    "ExhaustiveBalancer",
    "GreedyBalancer",
    "Lobby",
    "TeamBalance",
    "balance_teams",
    # Leaderboard
    "DashboardSummary",
    "LeagueAverages",
    "league_averages",
    "leaderboard_dataframe",
    "match_activity",
    "search_players",
    "sort_players",
    "summarize",
    # Match views
    "MatchDuelRow",
    "ScoreboardRow",
    "find_match",
    "match_scoreboard",
    "player_match_duels",
    "search_matches",
]
