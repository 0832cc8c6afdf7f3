"""
ScrimStats exception types.

Computation functions never raise for missing optional data; these are
reserved for records that cannot be read at all and for lobby validation.
"""


class ScrimStatsError(ValueError):
    """Base class for all ScrimStats errors."""


class RecordFormatError(ScrimStatsError):
    """A match or player record is missing its identity or has the wrong shape."""


class RosterValidationError(ScrimStatsError):
    """The lobby cannot be split into two equal teams."""

    def __init__(self, message: str, active_count: int | None = None):
        super().__init__(message)
        self.active_count = active_count
