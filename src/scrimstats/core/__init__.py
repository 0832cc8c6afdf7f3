"""
ScrimStats Core - Foundation modules shared by the analysis layer.

This module contains:
- constants: Roles, roster slots, and scoring reference values
- config: Application configuration management
- errors: Exception types
- schemas: Raw record contracts
- utils: General utility functions
"""

from scrimstats.core.constants import (
    CLUTCH_BRACKETS,
    COUNTING_STATS,
    IMPACT_DAMPING,
    MAX_LOBBY_SIZE,
    PLAYSTYLE_TARGETS,
    SNIPER_KILL_SHARE,
    RosterSlot,
    WeaponRole,
)
from scrimstats.core.errors import RecordFormatError, RosterValidationError, ScrimStatsError
from scrimstats.core.schemas import DuelDict, MatchDict, PlayerMatchDict

__all__ = [
    # Enums
    "RosterSlot",
    "WeaponRole",
    # Constants
    "CLUTCH_BRACKETS",
    "COUNTING_STATS",
    "IMPACT_DAMPING",
    "MAX_LOBBY_SIZE",
    "PLAYSTYLE_TARGETS",
    "SNIPER_KILL_SHARE",
    # Errors
    "RecordFormatError",
    "RosterValidationError",
    "ScrimStatsError",
    # Schemas (data contracts)
    "DuelDict",
    "MatchDict",
    "PlayerMatchDict",
]
