# greencart-dispatch/greencart/models.py
"""
Core domain models for the GreenCart Delivery Simulation.

This module defines the data structures used throughout the simulation:
- Driver, Route, Order: read-only snapshots supplied by the surrounding system
- DriverWorkState: per-run bookkeeping for one selected driver
- Assignment / AssignmentOutcome: an order placed on a driver, before and after scoring
- SimulationResult and friends: the immutable output of one run
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .exceptions import InputValidationError


class TrafficLevel(Enum):
    """Traffic classification of a route."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: str) -> TrafficLevel:
        """Case-insensitive lookup. Raises ValueError for unknown levels."""
        normalized = str(value).strip().lower()
        for level in cls:
            if level.value.lower() == normalized:
                return level
        raise ValueError(f"Unknown traffic level: {value!r}")


class Priority(Enum):
    """Order priority. Drives the dispatch sequence."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: str) -> Priority:
        """Case-insensitive lookup. Raises ValueError for unknown priorities."""
        normalized = str(value).strip().lower()
        for priority in cls:
            if priority.value == normalized:
                return priority
        raise ValueError(f"Unknown priority: {value!r}")

    @property
    def weight(self) -> int:
        return config.PRIORITY_WEIGHTS[self.value]


class OrderStatus(Enum):
    """Lifecycle states for an order in the delivery system."""
    PENDING = "pending"        # Awaiting dispatch, eligible for simulation
    ASSIGNED = "assigned"      # Assigned to a driver
    IN_TRANSIT = "in_transit"  # Out for delivery
    DELIVERED = "delivered"    # Successfully delivered
    FAILED = "failed"          # Delivery failed


@dataclass
class Driver:
    """
    Represents a driver record as stored by the surrounding system.

    Attributes:
        driver_id: Unique identifier
        name: Display name
        shift_hours: Hours recorded for the driver's last worked day
        last_work_date: Calendar day of that shift (None if never worked)
        past_week_hours: Daily hours over the last seven days (informational)
        is_active: Inactive drivers are never selected for a run
    """
    driver_id: str
    name: str
    shift_hours: float = 0.0
    last_work_date: Optional[date] = None
    past_week_hours: List[int] = field(default_factory=list)
    is_active: bool = True

    @property
    def past_7_day_work_hours(self) -> int:
        """Total hours over the recorded week."""
        return sum(self.past_week_hours)

    def __repr__(self) -> str:
        return f"Driver({self.driver_id}, {self.name})"


@dataclass(frozen=True)
class Route:
    """
    Represents a delivery route. Immutable for the engine's purposes.

    Attributes:
        route_id: Unique identifier
        distance_km: Route length in kilometres
        traffic_level: Low / Medium / High (strings are parsed on construction)
        base_time_minutes: Nominal delivery time with no traffic or fatigue
        name: Display name
        start_location / end_location: Free-text endpoints
        is_active: Inactive routes are not part of the simulation snapshot
    """
    route_id: str
    distance_km: float
    traffic_level: TrafficLevel
    base_time_minutes: float
    name: str = ""
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.traffic_level, TrafficLevel):
            object.__setattr__(self, "traffic_level", TrafficLevel.parse(self.traffic_level))
        if self.distance_km < 0:
            raise ValueError(f"Route {self.route_id}: distance_km must be >= 0")
        if self.base_time_minutes < 1:
            raise ValueError(f"Route {self.route_id}: base_time_minutes must be >= 1")

    def __repr__(self) -> str:
        return f"Route({self.route_id}, {self.distance_km}km, {self.traffic_level.value})"


@dataclass
class Order:
    """
    Represents a customer order bound to exactly one route.

    Attributes:
        order_id: Unique identifier
        value: Order value in currency units (Rs)
        route_id: Reference to the route this order is delivered on
        priority: high / medium / low, or None when not recorded
        status: Current lifecycle state; only PENDING orders are simulated
        customer_name: Optional display name
    """
    order_id: str
    value: float
    route_id: str
    priority: Optional[Priority] = None
    status: OrderStatus = OrderStatus.PENDING
    customer_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.priority is not None and not isinstance(self.priority, Priority):
            self.priority = Priority.parse(self.priority)
        if not isinstance(self.status, OrderStatus):
            self.status = OrderStatus(str(self.status).strip().lower())
        if self.value < 0:
            raise ValueError(f"Order {self.order_id}: value must be >= 0")

    @property
    def priority_weight(self) -> int:
        """Ranking weight; unrecorded priority ranks like medium."""
        if self.priority is None:
            return config.DEFAULT_PRIORITY_WEIGHT
        return self.priority.weight

    def __repr__(self) -> str:
        return f"Order({self.order_id}, {self.status.value})"


@dataclass
class DriverWorkState:
    """
    Per-run state of one selected driver.

    Created at the start of a run, mutated in place by the scheduler and
    discarded afterwards. The fatigue flag is captured once and never re-read.

    Attributes:
        driver_id / driver_name: Copied from the driver record
        is_fatigued: Fatigue flag frozen for the run
        current_time: When the driver is next available
        hours_worked: Cumulative delivery hours assigned in this run
        order_ids: Orders assigned in this run, in assignment order
    """
    driver_id: str
    driver_name: str
    is_fatigued: bool
    current_time: datetime
    hours_worked: float = 0.0
    order_ids: List[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"DriverWorkState({self.driver_id}, {self.hours_worked:.2f}h, orders={len(self.order_ids)})"


@dataclass(frozen=True)
class Assignment:
    """An order committed to a driver by the scheduler, not yet scored."""
    order: Order
    route: Route
    driver_id: str
    scheduled_time: datetime
    actual_time: datetime
    delivery_minutes: int


@dataclass(frozen=True)
class AssignmentOutcome:
    """
    Scored result of one placed order.

    Attributes:
        order_id / driver_id / route_id: What was delivered, by whom, on which route
        scheduled_time: Driver clock when the delivery started
        actual_time: Computed completion time
        is_on_time: Delivery time within base time plus grace
        penalty / bonus / fuel_cost / profit: Financial outcome (Rs, unrounded)
    """
    order_id: str
    driver_id: str
    route_id: str
    scheduled_time: datetime
    actual_time: datetime
    is_on_time: bool
    penalty: float
    bonus: float
    fuel_cost: float
    profit: float

    @property
    def delivery_minutes(self) -> float:
        return (self.actual_time - self.scheduled_time).total_seconds() / 60

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "driver_id": self.driver_id,
            "route_id": self.route_id,
            "scheduled_time": self.scheduled_time.isoformat(),
            "actual_time": self.actual_time.isoformat(),
            "is_on_time": self.is_on_time,
            "profit": self.profit,
            "penalty": self.penalty,
            "bonus": self.bonus,
            "fuel_cost": self.fuel_cost,
        }


@dataclass(frozen=True)
class DriverUtilization:
    """Per-driver summary of a run."""
    driver_id: str
    driver_name: str
    hours_worked: float
    orders_delivered: int
    is_fatigued: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "driver_id": self.driver_id,
            "driver_name": self.driver_name,
            "hours_worked": self.hours_worked,
            "orders_delivered": self.orders_delivered,
            "is_fatigued": self.is_fatigued,
        }


@dataclass(frozen=True)
class SimulationTotals:
    """Fleet-level KPIs. Currency values are rounded to 2 decimals."""
    total_profit: float
    total_fuel_cost: float
    total_penalties: float
    total_bonuses: float
    on_time_deliveries: int
    late_deliveries: int
    total_deliveries: int
    efficiency_score: int
    average_delivery_time: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_profit": self.total_profit,
            "efficiency_score": self.efficiency_score,
            "on_time_deliveries": self.on_time_deliveries,
            "late_deliveries": self.late_deliveries,
            "total_deliveries": self.total_deliveries,
            "total_fuel_cost": self.total_fuel_cost,
            "total_penalties": self.total_penalties,
            "total_bonuses": self.total_bonuses,
            "average_delivery_time": self.average_delivery_time,
        }


@dataclass(frozen=True)
class SimulationSettings:
    """
    Run configuration supplied by the caller.

    Attributes:
        number_of_drivers: How many active drivers to put on the road (1-100)
        route_start_time: Shared start clock, 24-hour "HH:MM"
        max_hours_per_driver: Hour cap per driver for the run (1-24)
    """
    number_of_drivers: int = config.DEFAULT_NUMBER_OF_DRIVERS
    route_start_time: str = config.DEFAULT_ROUTE_START_TIME
    max_hours_per_driver: float = config.DEFAULT_MAX_HOURS_PER_DRIVER

    def validate(self) -> None:
        """
        Check parameter ranges the way the API layer does.

        Raises:
            InputValidationError: On the first out-of-range parameter
        """
        if (isinstance(self.number_of_drivers, bool)
                or not isinstance(self.number_of_drivers, int)
                or not config.MIN_DRIVERS <= self.number_of_drivers <= config.MAX_DRIVERS):
            raise InputValidationError(
                f"Number of drivers must be between {config.MIN_DRIVERS} and {config.MAX_DRIVERS}"
            )
        if (not isinstance(self.route_start_time, str)
                or re.match(config.START_TIME_PATTERN, self.route_start_time) is None):
            raise InputValidationError("Route start time must be in HH:MM format")
        if (isinstance(self.max_hours_per_driver, bool)
                or not isinstance(self.max_hours_per_driver, (int, float))
                or not config.MIN_HOURS_PER_DRIVER <= self.max_hours_per_driver <= config.MAX_HOURS_PER_DRIVER):
            raise InputValidationError(
                f"Max hours per driver must be between "
                f"{config.MIN_HOURS_PER_DRIVER:g} and {config.MAX_HOURS_PER_DRIVER:g}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number_of_drivers": self.number_of_drivers,
            "route_start_time": self.route_start_time,
            "max_hours_per_driver": self.max_hours_per_driver,
        }


@dataclass(frozen=True)
class SimulationResult:
    """
    Immutable output of one run, handed to the persistence collaborator.

    Attributes:
        simulation_id: Unique run identifier
        settings: The inputs the run was made with
        totals: Fleet KPIs
        order_details: One outcome per placed order, in dispatch sequence
        driver_utilization: One entry per selected driver, in selection order
        created_at: When the run finished
    """
    simulation_id: str
    settings: SimulationSettings
    totals: SimulationTotals
    order_details: Tuple[AssignmentOutcome, ...]
    driver_utilization: Tuple[DriverUtilization, ...]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "simulation_id": self.simulation_id,
            "inputs": self.settings.to_dict(),
            "results": self.totals.to_dict(),
            "order_details": [o.to_dict() for o in self.order_details],
            "driver_utilization": [d.to_dict() for d in self.driver_utilization],
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class SimulationSummary:
    """Headline counters returned alongside a result."""
    orders_processed: int
    total_orders_available: int
    drivers_used: int
    average_orders_per_driver: float
    dropped_order_ids: Tuple[str, ...] = ()  # no eligible driver, in dispatch order

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orders_processed": self.orders_processed,
            "total_orders_available": self.total_orders_available,
            "drivers_used": self.drivers_used,
            "average_orders_per_driver": self.average_orders_per_driver,
            "dropped_order_ids": list(self.dropped_order_ids),
        }


@dataclass(frozen=True)
class SimulationReport:
    """What the caller layer returns: the result plus summary counters."""
    result: SimulationResult
    summary: SimulationSummary

    @property
    def simulation_id(self) -> str:
        return self.result.simulation_id

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["summary"] = self.summary.to_dict()
        return data
