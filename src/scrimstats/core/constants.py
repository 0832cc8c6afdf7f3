"""
ScrimStats - Constants

Defines player roles, roster slots, and the reference values used for
derived statistics and playstyle scoring.
"""

from enum import StrEnum


class WeaponRole(StrEnum):
    """
    Primary weapon role of a player.

    A player is a sniper when AWP/Scout kills make up more than
    SNIPER_KILL_SHARE of their total kills.
    """

    SNIPER = "Sniper"
    RIFLER = "Rifler"


class RosterSlot(StrEnum):
    """Manual lobby assignment. Players without a slot are unassigned."""

    TEAM1 = "team1"
    TEAM2 = "team2"
    BENCH = "bench"


# Sniper classification threshold (strictly greater than)
SNIPER_KILL_SHARE = 0.40

# Impact rating damping applied to the average rating
IMPACT_DAMPING = 0.95

# Clutch brackets recorded per match (clutches_won_1v1 .. clutches_won_1v5)
CLUTCH_BRACKETS = ("1v1", "1v2", "1v3", "1v4", "1v5")

# Counting stats summed during aggregation
COUNTING_STATS = (
    "kills",
    "deaths",
    "assists",
    "rounds_played",
    "damage_total",
    "rating_score",
    "sniper_kills",
    "utility_damage",
    "flashes_thrown",
    "opening_kills",
    "opening_deaths",
    "opening_attempts",
    "trade_kills",
)

# Reference maxima for the 0-100 playstyle scale.
# A value equal to the target scores 100.
PLAYSTYLE_TARGETS = {
    "firepower": 100.0,  # ADR
    "entrying": 0.6,  # opening kills / opening attempts
    "opening": 3.5,  # opening kills per match
    "trading": 3.0,  # trade kills per match
    "clutching": 1.0,  # clutches won per match
    "sniping": 0.5,  # sniper kills / kills
    "utility": 300.0,  # utility damage per match
}

# Lobby size cap for team building (two full 5v5 sides)
MAX_LOBBY_SIZE = 10

# Recent matches shown on the dashboard summary
RECENT_MATCH_COUNT = 5

# Days covered by the activity histogram
ACTIVITY_WINDOW_DAYS = 30
