# greencart-dispatch/greencart/simulation.py
"""
Simulation Engine for the GreenCart Delivery Simulation.

This module runs one simulated day of deliveries. Key responsibilities:
- Fatigue evaluation of the selected drivers (frozen for the run)
- Ranking and greedy dispatch of the pending backlog
- Per-order scoring and fleet KPI aggregation
- Input validation and driver selection on behalf of the caller
- Loading driver/route/order snapshots from CSV

A run is synchronous and self-contained: it reads its snapshot once and
either returns a complete SimulationResult or raises before producing one.

KEY METRIC: Efficiency Score = on-time deliveries / deliveries * 100
"""

from __future__ import annotations

import csv
import logging
import os
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from . import config, utils
from .dispatch import DispatchEngine, rank_orders
from .exceptions import DataLoadError, InputValidationError, SimulationError
from .models import (
    AssignmentOutcome,
    Driver,
    DriverUtilization,
    DriverWorkState,
    Order,
    OrderStatus,
    Route,
    SimulationReport,
    SimulationResult,
    SimulationSettings,
    SimulationSummary,
    SimulationTotals,
)
from .scoring import score_assignment

logger = logging.getLogger(__name__)


# =============================================================================
# FATIGUE
# =============================================================================

def evaluate_fatigue(driver: Driver, as_of: date) -> bool:
    """
    Whether a driver starts the simulated day fatigued.

    Fatigued iff the driver's last worked day is exactly the day before
    as_of AND that shift was longer than the threshold (8h). Only that one
    day is consulted; no weekly history.

    Both sides are reduced to calendar days, so a timestamped last-work
    record compares by its date alone.

    Args:
        driver: Driver record (not modified)
        as_of: The simulated calendar day (a datetime is reduced to its date)

    Returns:
        True if fatigued; False when no last work date is recorded
    """
    if driver.last_work_date is None:
        return False
    yesterday = utils.calendar_day(as_of) - timedelta(days=1)
    return (utils.calendar_day(driver.last_work_date) == yesterday
            and driver.shift_hours > config.FATIGUE_SHIFT_HOURS_THRESHOLD)


# =============================================================================
# AGGREGATION
# =============================================================================

def aggregate_totals(outcomes: Sequence[AssignmentOutcome]) -> SimulationTotals:
    """
    Fold per-order outcomes into fleet KPIs.

    Sums are accumulated unrounded; currency totals are rounded to 2
    decimals only here. With no outcomes the efficiency score and average
    delivery time are 0.
    """
    total_profit = 0.0
    total_fuel_cost = 0.0
    total_penalties = 0.0
    total_bonuses = 0.0
    total_delivery_minutes = 0.0
    on_time = 0

    for outcome in outcomes:
        total_profit += outcome.profit
        total_fuel_cost += outcome.fuel_cost
        total_penalties += outcome.penalty
        total_bonuses += outcome.bonus
        total_delivery_minutes += outcome.delivery_minutes
        if outcome.is_on_time:
            on_time += 1

    total = len(outcomes)
    efficiency_score = utils.round_half_up(on_time / total * 100) if total > 0 else 0
    average_delivery_time = utils.round_half_up(total_delivery_minutes / total) if total > 0 else 0

    return SimulationTotals(
        total_profit=utils.round_half_up(total_profit, 2),
        total_fuel_cost=utils.round_half_up(total_fuel_cost, 2),
        total_penalties=utils.round_half_up(total_penalties, 2),
        total_bonuses=utils.round_half_up(total_bonuses, 2),
        on_time_deliveries=on_time,
        late_deliveries=total - on_time,
        total_deliveries=total,
        efficiency_score=efficiency_score,
        average_delivery_time=average_delivery_time,
    )


def summarize_driver_utilization(work_states: Sequence[DriverWorkState]) -> Tuple[DriverUtilization, ...]:
    """One utilization entry per selected driver, in selection order."""
    return tuple(
        DriverUtilization(
            driver_id=state.driver_id,
            driver_name=state.driver_name,
            hours_worked=utils.round_half_up(state.hours_worked, 2),
            orders_delivered=len(state.order_ids),
            is_fatigued=state.is_fatigued,
        )
        for state in work_states
    )


# =============================================================================
# ENGINE
# =============================================================================

class Simulation:
    """
    One simulated delivery day over a fixed snapshot.

    The engine trusts its inputs: drivers are already selected, routes and
    orders already filtered. It only rejects snapshots it cannot run at all.

    Attributes:
        drivers: Selected drivers, in enumeration order (the tie-break order)
        routes_map: Route snapshot keyed by route_id
        orders: Pending orders, in backlog order
        settings: Run configuration
        as_of: Simulated calendar day (fatigue lookback and clock anchor)
        start_time: Shared start clock of every driver
        dropped_order_ids: Orders no driver could fit, filled by run()
    """

    def __init__(
        self,
        drivers: Sequence[Driver],
        routes: Sequence[Route],
        orders: Sequence[Order],
        settings: SimulationSettings,
        as_of: Optional[date] = None,
    ) -> None:
        """
        Initialize the simulation with fleet, routes and backlog.

        Raises:
            SimulationError: Empty driver/route/order set or malformed start time
        """
        if not drivers:
            raise SimulationError("no drivers selected")
        if not routes:
            raise SimulationError("no routes in snapshot")
        if not orders:
            raise SimulationError("no pending orders")

        try:
            start_clock = utils.parse_start_time(settings.route_start_time)
        except ValueError as e:
            raise SimulationError(f"malformed route start time {settings.route_start_time!r}") from e

        self.drivers: List[Driver] = list(drivers)
        self.routes_map: Dict[str, Route] = {r.route_id: r for r in routes}
        self.orders: List[Order] = list(orders)
        self.settings: SimulationSettings = settings
        self.as_of: date = utils.calendar_day(as_of) if as_of else date.today()
        self.start_time: datetime = utils.start_of_day(self.as_of, start_clock)
        self.dropped_order_ids: List[str] = []

    def _build_work_states(self) -> List[DriverWorkState]:
        """Fresh per-run state for every selected driver, fatigue evaluated once."""
        return [
            DriverWorkState(
                driver_id=driver.driver_id,
                driver_name=driver.name,
                is_fatigued=evaluate_fatigue(driver, self.as_of),
                current_time=self.start_time,
            )
            for driver in self.drivers
        ]

    def run(
        self,
        simulation_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> SimulationResult:
        """
        Run the full pipeline: fatigue, ranking, dispatch, scoring, aggregation.

        Args:
            simulation_id: Run identifier (generated if omitted)
            created_at: Result timestamp (now if omitted)

        Returns:
            The immutable SimulationResult

        Raises:
            SimulationError: If an order references a route outside the snapshot
        """
        work_states = self._build_work_states()
        fatigued = sum(1 for s in work_states if s.is_fatigued)
        logger.info("Simulating %d orders with %d drivers (%d fatigued), start %s, cap %sh",
                    len(self.orders), len(work_states), fatigued,
                    self.start_time.strftime("%H:%M"), self.settings.max_hours_per_driver)

        ranked = rank_orders(self.orders)
        engine = DispatchEngine(work_states, self.settings.max_hours_per_driver)
        assignments = engine.run(ranked, self.routes_map)
        self.dropped_order_ids = list(engine.dropped_order_ids)

        outcomes = tuple(score_assignment(a) for a in assignments)
        totals = aggregate_totals(outcomes)

        logger.info("Simulation complete: %d/%d orders placed, efficiency %d%%, profit %.2f",
                    totals.total_deliveries, len(self.orders), totals.efficiency_score,
                    totals.total_profit)

        return SimulationResult(
            simulation_id=simulation_id or utils.generate_simulation_id(),
            settings=self.settings,
            totals=totals,
            order_details=outcomes,
            driver_utilization=summarize_driver_utilization(work_states),
            created_at=created_at or datetime.now(),
        )

    @staticmethod
    def load_data(
        drivers_file: str,
        routes_file: str,
        orders_file: str,
    ) -> Tuple[List[Driver], List[Route], List[Order]]:
        """
        Load a simulation snapshot from CSV files.

        Args:
            drivers_file: Path to drivers CSV
            routes_file: Path to routes CSV
            orders_file: Path to orders CSV

        Returns:
            Tuple of (drivers, routes, orders) lists in file order

        Raises:
            FileNotFoundError: If a file doesn't exist
            DataLoadError: If a row is invalid
        """
        for path in (drivers_file, routes_file, orders_file):
            if not os.path.exists(path):
                raise FileNotFoundError(f"Data file not found: {path}")

        drivers: List[Driver] = []
        with open(drivers_file, "r", newline="") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                try:
                    last_work = (row.get("last_work_date") or "").strip()
                    week = (row.get("past_week_hours") or "").strip()
                    drivers.append(Driver(
                        driver_id=row["driver_id"].strip(),
                        name=row["name"].strip(),
                        shift_hours=float(row["shift_hours"]),
                        last_work_date=date.fromisoformat(last_work) if last_work else None,
                        past_week_hours=[int(h) for h in week.split("|")] if week else [],
                        is_active=_parse_bool(row.get("is_active"), default=True),
                    ))
                except (KeyError, ValueError) as e:
                    raise DataLoadError(f"Invalid driver data in {drivers_file} line {line}: {e}") from e

        routes: List[Route] = []
        with open(routes_file, "r", newline="") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                try:
                    routes.append(Route(
                        route_id=row["route_id"].strip(),
                        name=(row.get("name") or "").strip(),
                        distance_km=float(row["distance_km"]),
                        traffic_level=row["traffic_level"],
                        base_time_minutes=float(row["base_time_min"]),
                        start_location=(row.get("start_location") or "").strip() or None,
                        end_location=(row.get("end_location") or "").strip() or None,
                        is_active=_parse_bool(row.get("is_active"), default=True),
                    ))
                except (KeyError, ValueError) as e:
                    raise DataLoadError(f"Invalid route data in {routes_file} line {line}: {e}") from e

        orders: List[Order] = []
        with open(orders_file, "r", newline="") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                try:
                    orders.append(Order(
                        order_id=row["order_id"].strip(),
                        value=float(row["value_rs"]),
                        route_id=row["route_id"].strip(),
                        priority=(row.get("priority") or "").strip() or None,
                        status=(row.get("status") or "").strip() or OrderStatus.PENDING,
                        customer_name=(row.get("customer_name") or "").strip() or None,
                    ))
                except (KeyError, ValueError) as e:
                    raise DataLoadError(f"Invalid order data in {orders_file} line {line}: {e}") from e

        return drivers, routes, orders


def _parse_bool(value: Optional[str], default: bool) -> bool:
    """Parse a CSV boolean cell; empty means default."""
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in ("true", "1", "yes", "y"):
        return True
    if normalized in ("false", "0", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean {value!r}")


# =============================================================================
# CALLER LAYER
# =============================================================================

def run_simulation(
    drivers: Sequence[Driver],
    routes: Sequence[Route],
    orders: Sequence[Order],
    settings: SimulationSettings,
    as_of: Optional[date] = None,
    simulation_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> SimulationReport:
    """
    Validate a request, select the fleet and run the simulation.

    Mirrors the service endpoint: active drivers are taken in enumeration
    order up to the requested count and only pending orders are simulated.
    At least one route must be active; an inactive route still serves the
    pending orders bound to it. Input records are never modified.

    Args:
        drivers: Full driver list
        routes: Full route list
        orders: Full order list (any status)
        settings: Requested run configuration
        as_of: Simulated calendar day (today if omitted)
        simulation_id: Run identifier (generated if omitted)
        created_at: Result timestamp (now if omitted)

    Returns:
        SimulationReport with the result and summary counters

    Raises:
        InputValidationError: Bad parameters or an unusable snapshot
        SimulationError: The engine could not complete the run
    """
    settings.validate()

    active_drivers = [d for d in drivers if d.is_active]
    active_routes = [r for r in routes if r.is_active]
    pending_orders = [o for o in orders if o.status is OrderStatus.PENDING]

    if len(active_drivers) < settings.number_of_drivers:
        raise InputValidationError(
            "Not enough active drivers available",
            details={"available": len(active_drivers), "requested": settings.number_of_drivers},
        )
    if not active_routes:
        raise InputValidationError("No active routes available")
    if not pending_orders:
        raise InputValidationError("No pending orders available")

    selected = active_drivers[:settings.number_of_drivers]

    # A pending order keeps the route it is bound to, active or not
    referenced = {o.route_id for o in pending_orders}
    snapshot_routes = active_routes + [
        r for r in routes if not r.is_active and r.route_id in referenced
    ]

    simulation = Simulation(selected, snapshot_routes, pending_orders, settings, as_of=as_of)
    result = simulation.run(simulation_id=simulation_id, created_at=created_at)

    processed = result.totals.total_deliveries
    summary = SimulationSummary(
        orders_processed=processed,
        total_orders_available=len(pending_orders),
        drivers_used=len(selected),
        average_orders_per_driver=utils.round_half_up(processed / len(selected), 2),
        dropped_order_ids=tuple(simulation.dropped_order_ids),
    )
    return SimulationReport(result=result, summary=summary)
