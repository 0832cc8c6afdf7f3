"""
Derived Player Metrics

Rate stats, weapon role, playstyle scores and impact rating computed from
either a career aggregate or a single match record.

Every division guards its denominator and yields 0 instead of raising or
producing inf/nan. The one exception to "0 on zero denominator" is K/D,
which falls back to the raw kill count when a player never died.

Playstyle scores map a per-match (or per-attempt) value onto a 0-100
scale linearly against a reference target:

    score = min(100, round(value / target * 100))

Targets:
- Firepower: ADR, target 100
- Entrying: opening kills / opening attempts, target 0.6
- Opening: opening kills per match, target 3.5
- Trading: trade kills per match, target 3.0
- Clutching: clutches won per match, target 1.0
- Sniping: sniper kills / kills, target 0.5
- Utility: utility damage per match, target 300
"""

import logging
from dataclasses import dataclass
from typing import Any

from scrimstats.analysis.models import StatLine
from scrimstats.core.config import PlaystyleConfig, RatingConfig
from scrimstats.core.constants import WeaponRole
from scrimstats.core.utils import round_half_up, safe_divide

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class RateStats:
    """Per-round and per-match rates for a player."""

    kpr: float
    dpr: float
    apr: float
    adr: float
    kd: float
    average_rating: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kpr": round(self.kpr, 2),
            "dpr": round(self.dpr, 2),
            "apr": round(self.apr, 2),
            "adr": round(self.adr, 1),
            "kd": round(self.kd, 2),
            "average_rating": round(self.average_rating, 2),
        }


@dataclass
class PlaystyleScores:
    """Seven independent 0-100 playstyle scores."""

    firepower: int
    entrying: int
    opening: int
    trading: int
    clutching: int
    sniping: int
    utility: int

    def to_dict(self) -> dict[str, int]:
        return {
            "firepower": self.firepower,
            "entrying": self.entrying,
            "opening": self.opening,
            "trading": self.trading,
            "clutching": self.clutching,
            "sniping": self.sniping,
            "utility": self.utility,
        }


@dataclass
class PlayerProfile:
    """Everything the player profile view shows, for one player."""

    steam_id: str
    name: str
    matches: int
    role: WeaponRole
    rates: RateStats
    playstyle: PlaystyleScores
    impact_rating: float
    utility_damage_per_round: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "steam_id": self.steam_id,
            "name": self.name,
            "matches": self.matches,
            "role": str(self.role),
            "rates": self.rates.to_dict(),
            "playstyle": self.playstyle.to_dict(),
            "impact_rating": round(self.impact_rating, 2),
            "utility_damage_per_round": round(self.utility_damage_per_round, 1),
        }


# =============================================================================
# Rate Stats
# =============================================================================


def kills_per_round(stats: StatLine) -> float:
    return safe_divide(stats.kills, stats.rounds_played)


def deaths_per_round(stats: StatLine) -> float:
    return safe_divide(stats.deaths, stats.rounds_played)


def assists_per_round(stats: StatLine) -> float:
    return safe_divide(stats.assists, stats.rounds_played)


def average_damage_per_round(stats: StatLine) -> float:
    return safe_divide(stats.damage_total, stats.rounds_played)


def kill_death_ratio(stats: StatLine) -> float:
    """K/D ratio; a player with no deaths gets their kill count."""
    if stats.deaths > 0:
        return stats.kills / stats.deaths
    return float(stats.kills)


def average_rating(stats: StatLine) -> float:
    """Sum of per-match ratings divided by matches played."""
    return safe_divide(stats.rating_score, stats.matches)


def calculate_rates(stats: StatLine) -> RateStats:
    """All rate stats for a player."""
    return RateStats(
        kpr=kills_per_round(stats),
        dpr=deaths_per_round(stats),
        apr=assists_per_round(stats),
        adr=average_damage_per_round(stats),
        kd=kill_death_ratio(stats),
        average_rating=average_rating(stats),
    )


# =============================================================================
# Role and Ratings
# =============================================================================


def classify_role(stats: StatLine, config: RatingConfig | None = None) -> WeaponRole:
    """
    Classify a player as Sniper or Rifler.

    Sniper requires sniper kills to be strictly more than 40% of kills;
    exactly 40% is still a Rifler. No kills means Rifler.
    """
    config = config or RatingConfig()
    if stats.kills <= 0:
        return WeaponRole.RIFLER
    share = stats.sniper_kills / stats.kills
    return WeaponRole.SNIPER if share > config.sniper_kill_share else WeaponRole.RIFLER


def impact_rating(stats: StatLine, config: RatingConfig | None = None) -> float:
    """Average rating damped by a fixed factor (0.95)."""
    config = config or RatingConfig()
    return average_rating(stats) * config.impact_damping


def scale_score(value: float, target: float) -> int:
    """Linear 0-100 score against a target, capped at 100."""
    if target <= 0:
        return 0
    return max(0, min(100, round_half_up(value / target * 100)))


def calculate_playstyle(stats: StatLine, config: PlaystyleConfig | None = None) -> PlaystyleScores:
    """
    Calculate the seven playstyle scores for a player.

    Args:
        stats: Career aggregate or single match record
        config: Optional score targets (defaults to the standard targets)

    Returns:
        PlaystyleScores, each in [0, 100]
    """
    targets = (config or PlaystyleConfig()).targets()
    matches = stats.matches

    entry_rate = safe_divide(stats.opening_kills, stats.opening_attempts)
    entrying = scale_score(entry_rate, targets["entrying"]) if stats.opening_attempts > 0 else 0

    return PlaystyleScores(
        firepower=scale_score(average_damage_per_round(stats), targets["firepower"]),
        entrying=entrying,
        opening=scale_score(safe_divide(stats.opening_kills, matches), targets["opening"]),
        trading=scale_score(safe_divide(stats.trade_kills, matches), targets["trading"]),
        clutching=scale_score(safe_divide(stats.clutches_won, matches), targets["clutching"]),
        sniping=scale_score(safe_divide(stats.sniper_kills, stats.kills), targets["sniping"]),
        utility=scale_score(safe_divide(stats.utility_damage, matches), targets["utility"]),
    )


def build_player_profile(
    stats: StatLine,
    steam_id: str,
    name: str,
    playstyle_config: PlaystyleConfig | None = None,
    rating_config: RatingConfig | None = None,
) -> PlayerProfile:
    """Bundle rates, role, playstyle and impact for one player."""
    profile = PlayerProfile(
        steam_id=steam_id,
        name=name,
        matches=stats.matches,
        role=classify_role(stats, rating_config),
        rates=calculate_rates(stats),
        playstyle=calculate_playstyle(stats, playstyle_config),
        impact_rating=impact_rating(stats, rating_config),
        utility_damage_per_round=safe_divide(stats.utility_damage, stats.rounds_played),
    )
    logger.debug(f"Profile for {name} ({steam_id}): role={profile.role}")
    return profile
