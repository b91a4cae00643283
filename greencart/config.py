# greencart-dispatch/greencart/config.py
"""
Configuration parameters for the GreenCart Delivery Simulation.

This module centralizes all business rules and run defaults, making it easy to:
- Adjust the fuel and delivery-time models
- Tune the scoring rules (grace period, penalties, bonuses)
- Change the bounds the caller layer enforces on run parameters

All parameters are documented with their purpose and typical value ranges.
"""

from typing import Dict, Final

# =============================================================================
# FUEL MODEL
# =============================================================================

FUEL_COST_PER_KM: float = 5.0
"""Base fuel cost in currency units (Rs) per kilometre of route distance."""

HIGH_TRAFFIC_SURCHARGE_PER_KM: float = 2.0
"""Extra fuel cost per kilometre, charged only on High-traffic routes."""

# =============================================================================
# DELIVERY TIME MODEL
# =============================================================================

TRAFFIC_TIME_MULTIPLIERS: Final[Dict[str, float]] = {
    "Low": 1.0,
    "Medium": 1.2,
    "High": 1.5,
}
"""
Multiplier applied to a route's base time for each traffic level.
Applied first; the fatigue multiplier stacks on top of it.
"""

FATIGUE_TIME_MULTIPLIER: float = 1.3
"""Fatigued drivers deliver 30% slower. Applied after the traffic multiplier."""

# =============================================================================
# FATIGUE RULE
# =============================================================================

FATIGUE_SHIFT_HOURS_THRESHOLD: float = 8.0
"""
A driver who worked MORE than this many hours on the calendar day before the
simulation is fatigued for the whole run. Exactly 8 hours is not fatigue.
"""

# =============================================================================
# SCHEDULING
# =============================================================================

TURNAROUND_BUFFER_MINS: int = 15
"""
Break between two deliveries of the same driver.
Advances the driver's clock but does NOT count towards hours worked.
"""

# =============================================================================
# SCORING
# =============================================================================

ON_TIME_GRACE_MINS: int = 10
"""Allowance beyond the route's nominal base time before a delivery is late."""

LATE_DELIVERY_PENALTY: float = 50.0
"""Flat penalty (Rs) for every late delivery."""

HIGH_VALUE_THRESHOLD: float = 1000.0
"""Orders strictly above this value earn the high-value bonus when on time."""

HIGH_VALUE_BONUS_RATE: float = 0.10
"""Bonus as a fraction of order value (0.0 - 1.0)."""

# =============================================================================
# ORDER RANKING
# =============================================================================

PRIORITY_WEIGHTS: Final[Dict[str, int]] = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
"""Ranking weight per priority. Higher weight = dispatched earlier."""

DEFAULT_PRIORITY_WEIGHT: int = 2
"""Weight used for orders with no recorded priority (same as medium)."""

# =============================================================================
# RUN PARAMETERS
# =============================================================================

MIN_DRIVERS: Final[int] = 1
MAX_DRIVERS: Final[int] = 100

MIN_HOURS_PER_DRIVER: Final[float] = 1.0
MAX_HOURS_PER_DRIVER: Final[float] = 24.0

START_TIME_PATTERN: Final[str] = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"
"""Accepted route start time format: 24-hour HH:MM (leading zero optional)."""

DEFAULT_NUMBER_OF_DRIVERS: int = 3
"""Fleet size used by the CLI when none is given."""

DEFAULT_ROUTE_START_TIME: str = "09:00"
"""Shared clock value every driver starts the day with."""

DEFAULT_MAX_HOURS_PER_DRIVER: float = 8.0
"""Per-driver hour cap used by the CLI when none is given."""

# =============================================================================
# DATA FILES
# =============================================================================

DEFAULT_DATA_DIR: str = "data"
"""Directory holding the driver/route/order CSV snapshots."""

DRIVERS_FILE: str = "drivers.csv"
ROUTES_FILE: str = "routes.csv"
ORDERS_FILE: str = "orders.csv"
