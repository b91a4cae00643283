# greencart-dispatch/greencart/scoring.py
"""
Cost and scoring functions for the GreenCart Delivery Simulation.

Two groups of functions live here:
1. Route cost model: fuel cost and traffic/fatigue-adjusted delivery time.
   Pure functions of a route (and a fatigue flag).
2. Order scoring: on-time status, penalty, bonus and profit of a delivery.

Key Business Rules:
1. Fuel costs Rs 5/km, plus Rs 2/km on High-traffic routes
2. Medium traffic adds 20% to the base time, High traffic 50%; fatigue adds 30% on top
3. A scheduled delivery is on time if it takes at most base time + 10 minutes
4. Late deliveries pay a flat Rs 50 penalty
5. On-time orders above Rs 1000 earn a 10% bonus
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from . import config, utils
from .models import Assignment, AssignmentOutcome, Order, Route, TrafficLevel


# =============================================================================
# ROUTE COST MODEL
# =============================================================================

def calculate_fuel_cost(route: Route) -> float:
    """
    Fuel cost of driving a route once.

    Independent of who drives: only distance and traffic matter.

    Args:
        route: The route being driven

    Returns:
        Cost in currency units, unrounded

    Example:
        >>> calculate_fuel_cost(Route("R1", 10, TrafficLevel.HIGH, 30))
        70.0
    """
    cost = route.distance_km * config.FUEL_COST_PER_KM
    if route.traffic_level is TrafficLevel.HIGH:
        cost += route.distance_km * config.HIGH_TRAFFIC_SURCHARGE_PER_KM
    return cost


def get_expected_delivery_time(route: Route, is_fatigued: bool = False) -> int:
    """
    Expected delivery time of a route in whole minutes.

    The traffic multiplier is applied to the base time first, then the
    fatigue multiplier. The product is rounded up once, at the very end.

    Args:
        route: The route being driven
        is_fatigued: Whether the driver is fatigued for this run

    Returns:
        Minutes, rounded up to the next whole minute

    Example:
        >>> get_expected_delivery_time(Route("R1", 10, TrafficLevel.MEDIUM, 60))
        72
        >>> get_expected_delivery_time(Route("R1", 10, TrafficLevel.LOW, 60), True)
        78
    """
    minutes = route.base_time_minutes * config.TRAFFIC_TIME_MULTIPLIERS[route.traffic_level.value]
    if is_fatigued:
        minutes *= config.FATIGUE_TIME_MULTIPLIER
    return math.ceil(minutes)


# =============================================================================
# ORDER SCORING
# =============================================================================

def is_delivery_on_time(delivery_minutes: float, route: Route) -> bool:
    """
    On-time check used for scheduled deliveries.

    Compares against the route's NOMINAL base time plus grace, not the
    traffic/fatigue-adjusted time used for scheduling. A Medium or High
    traffic route with a long base time can therefore never be on time.
    """
    return delivery_minutes <= route.base_time_minutes + config.ON_TIME_GRACE_MINS


def calculate_penalty(is_on_time: bool) -> float:
    """Flat late-delivery penalty."""
    return 0.0 if is_on_time else config.LATE_DELIVERY_PENALTY


def calculate_bonus(order_value: float, is_on_time: Optional[bool]) -> float:
    """
    High-value bonus: a share of the order value for on-time orders above the threshold.

    Late (or undetermined) deliveries never earn a bonus, whatever the value.
    """
    if is_on_time and order_value > config.HIGH_VALUE_THRESHOLD:
        return order_value * config.HIGH_VALUE_BONUS_RATE
    return 0.0


def calculate_profit(order_value: float, bonus: float, penalty: float, fuel_cost: float) -> float:
    """Order profit. May be negative; no floor is applied."""
    return order_value + bonus - penalty - fuel_cost


def score_assignment(assignment: Assignment) -> AssignmentOutcome:
    """
    Compute the financial outcome of a committed assignment.

    Args:
        assignment: An order placed on a driver by the scheduler

    Returns:
        AssignmentOutcome with unrounded penalty, bonus, fuel cost and profit
    """
    order = assignment.order
    route = assignment.route

    is_on_time = is_delivery_on_time(assignment.delivery_minutes, route)
    penalty = calculate_penalty(is_on_time)
    bonus = calculate_bonus(order.value, is_on_time)
    fuel_cost = calculate_fuel_cost(route)
    profit = calculate_profit(order.value, bonus, penalty, fuel_cost)

    return AssignmentOutcome(
        order_id=order.order_id,
        driver_id=assignment.driver_id,
        route_id=route.route_id,
        scheduled_time=assignment.scheduled_time,
        actual_time=assignment.actual_time,
        is_on_time=is_on_time,
        penalty=penalty,
        bonus=bonus,
        fuel_cost=fuel_cost,
        profit=profit,
    )


# =============================================================================
# RECORDED DELIVERIES
# =============================================================================

@dataclass(frozen=True)
class DeliveryEvaluation:
    """KPIs of a delivery recorded outside the simulation."""
    order_id: str
    is_on_time: Optional[bool]
    penalty: float
    bonus: float
    fuel_cost: float
    profit: float


def evaluate_recorded_delivery(
    order: Order,
    route: Route,
    scheduled_time: Optional[datetime],
    actual_time: Optional[datetime],
    is_fatigued: bool = False,
) -> DeliveryEvaluation:
    """
    Score a delivery with real scheduled/actual timestamps.

    This is the order-record rule, which differs from the simulation rule:
    the allowed window is the ADJUSTED expected time (traffic and fatigue)
    plus grace, measured between the two timestamps. The two rules disagree
    under Medium/High traffic or fatigue.

    Args:
        order: The delivered order
        route: The order's route
        scheduled_time: When the delivery was scheduled to start
        actual_time: When the delivery actually completed
        is_fatigued: Fatigue flag of the driver who made the delivery

    Returns:
        DeliveryEvaluation; is_on_time is None when either timestamp is missing
    """
    is_on_time: Optional[bool] = None
    penalty = 0.0
    if scheduled_time is not None and actual_time is not None:
        allowed = get_expected_delivery_time(route, is_fatigued) + config.ON_TIME_GRACE_MINS
        is_on_time = utils.minutes_between(scheduled_time, actual_time) <= allowed
        penalty = calculate_penalty(is_on_time)

    bonus = calculate_bonus(order.value, is_on_time)
    fuel_cost = calculate_fuel_cost(route)

    return DeliveryEvaluation(
        order_id=order.order_id,
        is_on_time=is_on_time,
        penalty=penalty,
        bonus=bonus,
        fuel_cost=fuel_cost,
        profit=calculate_profit(order.value, bonus, penalty, fuel_cost),
    )
