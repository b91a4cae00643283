# greencart-dispatch/greencart/__init__.py

from .models import (
    Driver,
    Route,
    Order,
    TrafficLevel,
    Priority,
    OrderStatus,
    DriverWorkState,
    AssignmentOutcome,
    SimulationSettings,
    SimulationResult,
    SimulationReport,
)
from .config import (
    DEFAULT_ROUTE_START_TIME,
    DEFAULT_MAX_HOURS_PER_DRIVER,
    TURNAROUND_BUFFER_MINS,
    ON_TIME_GRACE_MINS,
)
from .exceptions import GreenCartError, InputValidationError, SimulationError, DataLoadError
from .simulation import Simulation, run_simulation, evaluate_fatigue, aggregate_totals
from .dispatch import DispatchEngine, rank_orders
from .scoring import (
    calculate_fuel_cost,
    get_expected_delivery_time,
    score_assignment,
    evaluate_recorded_delivery,
)

__version__ = "1.0.0"
__author__ = "GreenCart Logistics Team"

__all__ = [
    # Models
    "Driver",
    "Route",
    "Order",
    "TrafficLevel",
    "Priority",
    "OrderStatus",
    "DriverWorkState",
    "AssignmentOutcome",
    "SimulationSettings",
    "SimulationResult",
    "SimulationReport",
    # Errors
    "GreenCartError",
    "InputValidationError",
    "SimulationError",
    "DataLoadError",
    # Core
    "Simulation",
    "DispatchEngine",
    "run_simulation",
    # Functions
    "rank_orders",
    "evaluate_fatigue",
    "aggregate_totals",
    "calculate_fuel_cost",
    "get_expected_delivery_time",
    "score_assignment",
    "evaluate_recorded_delivery",
    # Config
    "DEFAULT_ROUTE_START_TIME",
    "DEFAULT_MAX_HOURS_PER_DRIVER",
    "TURNAROUND_BUFFER_MINS",
    "ON_TIME_GRACE_MINS",
]
