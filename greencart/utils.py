# greencart-dispatch/greencart/utils.py
"""
Utility functions for the GreenCart Delivery Simulation.

Provides time parsing and arithmetic, rounding helpers and run identifiers.
"""

from __future__ import annotations

import math
import random
import re
import string
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from . import config

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def parse_start_time(value: str) -> time:
    """
    Parse a 24-hour "HH:MM" route start time.

    Args:
        value: Time string, leading zero on the hour optional ("9:05" is valid)

    Returns:
        A datetime.time object

    Raises:
        ValueError: If the string is not a valid 24-hour HH:MM time

    Example:
        >>> parse_start_time("09:30")
        datetime.time(9, 30)
    """
    if not isinstance(value, str) or re.match(config.START_TIME_PATTERN, value) is None:
        raise ValueError(f"Invalid start time {value!r}, expected HH:MM")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def calendar_day(value: Union[date, datetime]) -> date:
    """
    Calendar day of a date or timestamp.

    datetime is a subclass of date but never compares equal to one, so
    timestamps must be reduced before day-level comparisons.

    Example:
        >>> calendar_day(datetime(2025, 8, 10, 18, 30))
        datetime.date(2025, 8, 10)
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(as_of: date, start_time: time) -> datetime:
    """Anchor a clock time on the simulated calendar day."""
    return datetime.combine(as_of, start_time)


def add_minutes(base: datetime, minutes_to_add: Union[int, float]) -> datetime:
    """
    Add a number of minutes to a datetime.

    Unlike a bare time-of-day, a datetime keeps counting past midnight,
    so long days with a late start stay ordered.

    Example:
        >>> add_minutes(datetime(2024, 1, 1, 23, 30), 45)
        datetime.datetime(2024, 1, 2, 0, 15)
    """
    return base + timedelta(minutes=minutes_to_add)


def minutes_between(start: datetime, end: datetime) -> float:
    """Elapsed minutes from start to end (negative if end is earlier)."""
    return (end - start).total_seconds() / 60


def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Round halves upward, the way dashboards round KPIs.

    Python's built-in round() uses banker's rounding (round(12.5) == 12);
    KPI reports expect 12.5 -> 13.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        An int when digits == 0, otherwise a float

    Example:
        >>> round_half_up(12.5)
        13
        >>> round_half_up(0.125, 2)
        0.13
    """
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def generate_simulation_id(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """
    Create a unique run identifier: sim_<epoch milliseconds>_<9 base-36 chars>.

    Args:
        now: Timestamp to embed (defaults to the current time)
        rng: Random source for the suffix (defaults to the module RNG)

    Returns:
        Identifier such as "sim_1718000000000_k3j9x0a2b"
    """
    now = now or datetime.now()
    rng = rng or random
    millis = int(now.timestamp() * 1000)
    suffix = "".join(rng.choice(_BASE36_ALPHABET) for _ in range(9))
    return f"sim_{millis}_{suffix}"


def format_time_duration(minutes: float) -> str:
    """
    Format a duration in minutes as a human-readable string.

    Args:
        minutes: Duration in minutes

    Returns:
        Formatted string like "1h 23m" or "45m"
    """
    if minutes < 60:
        return f"{minutes:.0f}m"
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    return f"{hours}h {mins}m"
