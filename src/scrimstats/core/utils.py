"""
Utility functions for ScrimStats.

This module provides:
- Performance timing decorator
- Steam ID normalization and checks
- Safe arithmetic helpers
- Match date detection from filenames
"""

import logging
import re
import time
from collections.abc import Callable
from datetime import datetime, timezone
from functools import wraps
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

# Type variable for generic decorators
F = TypeVar("F", bound=Callable[..., Any])

# YYMMDDHHMM, e.g. "match_2501182130.json"
_TEN_DIGIT_PATTERN = re.compile(r"(\d{10})")
# YYYY-MM-DD or YYYY_MM_DD
_ISO_DATE_PATTERN = re.compile(r"(\d{4})[-_](\d{2})[-_](\d{2})")


def timed(func: F) -> F:
    """
    Decorator to measure and log function execution time.

    Usage:
        @timed
        def my_function():
            ...
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{func.__name__} completed in {elapsed:.3f}s")
        return result

    return wrapper  # type: ignore


def normalize_steamid(steam_id: Any) -> str:
    """
    Normalize a Steam ID to its string form.

    64-bit Steam IDs do not fit in a double, so exports that wrote them
    as JSON numbers are read back as ints and converted here. Integral
    floats are accepted; anything else is stringified and stripped.

    Args:
        steam_id: Raw Steam ID value

    Returns:
        Steam ID as a string ("" for None)
    """
    if steam_id is None:
        return ""
    if isinstance(steam_id, bool):
        return str(int(steam_id))
    if isinstance(steam_id, int):
        return str(steam_id)
    if isinstance(steam_id, float) and steam_id.is_integer():
        return str(int(steam_id))
    return str(steam_id).strip()


def is_numeric_steamid(steam_id: Any) -> bool:
    """True when the id normalizes to a positive all-digit SteamID64 string."""
    sid = normalize_steamid(steam_id)
    return sid.isdigit() and int(sid) > 0


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if denominator is 0.

    Args:
        numerator: Top of fraction
        denominator: Bottom of fraction
        default: Value to return if denominator is 0

    Returns:
        Result of division or default
    """
    if denominator == 0:
        return default
    return numerator / denominator


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (not banker's rounding)."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def to_number(value: Any, default: float = 0) -> float:
    """Coerce an optional numeric field, treating None and junk as the default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        text = str(value).strip()
        return int(text) if text.lstrip("-").isdigit() else float(text)
    except ValueError:
        return default


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def parse_timestamp_from_filename(filename: str, now: int | None = None) -> int:
    """
    Guess when a match was played from its export filename.

    Tries, in order:
    - the first 10-digit run as YYMMDDHHMM (year 2000 + YY)
    - a YYYY-MM-DD or YYYY_MM_DD date

    Args:
        filename: Export filename
        now: Fallback timestamp in epoch ms (defaults to the current time)

    The ten-digit form is read as local time; a bare date is midnight UTC.

    Returns:
        Timestamp in epoch milliseconds
    """
    match = _TEN_DIGIT_PATTERN.search(filename)
    if match:
        seq = match.group(1)
        yy, mm, dd, hh, mi = (int(seq[i : i + 2]) for i in range(0, 10, 2))
        if 1 <= mm <= 12 and 1 <= dd <= 31 and 0 <= hh <= 23 and 0 <= mi <= 59:
            try:
                return int(datetime(2000 + yy, mm, dd, hh, mi).timestamp() * 1000)
            except ValueError:
                logger.debug(f"Invalid date sequence {seq} in {filename}")

    match = _ISO_DATE_PATTERN.search(filename)
    if match:
        year, month, day = (int(g) for g in match.groups())
        try:
            return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp() * 1000)
        except ValueError:
            logger.debug(f"Invalid date {match.group(0)} in {filename}")

    return now if now is not None else now_ms()
