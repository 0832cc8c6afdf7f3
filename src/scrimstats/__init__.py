"""
ScrimStats - Career Stats and Team Builder for CS2 Scrims

Aggregates per-match player exports into career statistics, derives
playstyle scores, reconciles head-to-head duel records, and balances
lobbies into two even teams.

Usage:
    from scrimstats import MatchRecord, aggregate_player_stats, balance_teams

    matches = [MatchRecord.from_dict(m) for m in stored_matches]
    players = aggregate_player_stats(matches)
    teams = balance_teams(players, {"76561198000000001": "team1"})
"""

__version__ = "0.1.0"
__author__ = "ScrimStats Contributors"


def __getattr__(name):
    """Lazy import for heavy dependencies."""
    if name in {
        "MatchRecord",
        "PlayerMatchRecord",
        "AggregatedPlayerStats",
    }:
        from scrimstats.analysis import models

        return getattr(models, name)
    elif name == "aggregate_player_stats":
        from scrimstats.analysis.aggregation import aggregate_player_stats

        return aggregate_player_stats
    elif name == "build_player_profile":
        from scrimstats.analysis.derived import build_player_profile

        return build_player_profile
    elif name == "reconcile_duel":
        from scrimstats.analysis.duels import reconcile_duel

        return reconcile_duel
    elif name == "balance_teams":
        from scrimstats.analysis.balancer import balance_teams

        return balance_teams
    elif name == "Lobby":
        from scrimstats.analysis.lobby import Lobby

        return Lobby
    raise AttributeError(f"module 'scrimstats' has no attribute '{name}'")


__all__ = [
    "__version__",
    "MatchRecord",
    "PlayerMatchRecord",
    "AggregatedPlayerStats",
    "aggregate_player_stats",
    "build_player_profile",
    "reconcile_duel",
    "balance_teams",
    "Lobby",
]
