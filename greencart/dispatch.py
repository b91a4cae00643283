# greencart-dispatch/greencart/dispatch.py
"""
Dispatch Engine for the GreenCart Delivery Simulation.

This module decides which driver carries which order:

1. **Ranking**: Pending orders are sorted by priority (high first), then by
   value (highest first). Ties keep their backlog order.

2. **Least-loaded greedy assignment**: Orders are visited once, in ranked
   order. Each goes to the eligible driver with the fewest hours assigned so
   far. A driver is eligible if the delivery still fits under the hour cap.
   Orders no driver can fit are dropped, which is a normal outcome.

There is no look-ahead, backtracking or route re-sequencing.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from . import config, scoring, utils
from .exceptions import SimulationError
from .models import Assignment, DriverWorkState, Order, Route

logger = logging.getLogger(__name__)


def rank_orders(orders: Sequence[Order]) -> List[Order]:
    """
    Sort orders into dispatch sequence.

    Priority descending (high=3, medium=2, low=1, unrecorded=2), then value
    descending. Python's sort is stable, so orders equal on both keys keep
    their backlog order and runs are reproducible.

    Args:
        orders: Pending-order backlog in enumeration order

    Returns:
        New list in dispatch order (the input is not modified)
    """
    return sorted(orders, key=lambda o: (-o.priority_weight, -o.value))


class DispatchEngine:
    """
    Greedy order-to-driver scheduler.

    Drivers are held in an explicit list of DriverWorkState, indexed by
    selection position and mutated in place. The scan order of that list is
    the tie-break: among equally loaded eligible drivers the first one wins.

    Attributes:
        work_states: Per-driver state for this run, in selection order
        max_hours_per_driver: Hour cap no driver may exceed
        dropped_order_ids: Orders no driver could take, in visiting order
    """

    def __init__(self, work_states: List[DriverWorkState], max_hours_per_driver: float) -> None:
        if not work_states:
            raise SimulationError("no drivers to schedule")
        self.work_states: List[DriverWorkState] = work_states
        self.max_hours_per_driver: float = max_hours_per_driver
        self.dropped_order_ids: List[str] = []

    def _find_least_loaded_driver(self, route: Route) -> Optional[int]:
        """
        Index of the eligible driver with the smallest workload.

        Delivery time depends on each driver's own fatigue flag, so
        eligibility is evaluated per driver.

        Returns:
            Position in work_states, or None if nobody can take the route
        """
        best_index: Optional[int] = None
        min_workload = float("inf")

        for i, state in enumerate(self.work_states):
            delivery_hours = scoring.get_expected_delivery_time(route, state.is_fatigued) / 60
            if state.hours_worked + delivery_hours > self.max_hours_per_driver:
                continue
            # Strict comparison keeps the first driver on ties
            if state.hours_worked < min_workload:
                min_workload = state.hours_worked
                best_index = i

        return best_index

    def _assign_order_to_driver(self, index: int, order: Order, route: Route) -> Assignment:
        """
        Commit an order to a driver.

        Updates driver state:
        - Delivery starts at the driver's current clock
        - Clock advances to completion plus the turnaround buffer
        - Hours worked grow by the delivery time only
        - Order id is appended to the driver's list
        """
        state = self.work_states[index]
        delivery_minutes = scoring.get_expected_delivery_time(route, state.is_fatigued)

        scheduled_time = state.current_time
        actual_time = utils.add_minutes(scheduled_time, delivery_minutes)

        state.hours_worked += delivery_minutes / 60
        state.current_time = utils.add_minutes(actual_time, config.TURNAROUND_BUFFER_MINS)
        state.order_ids.append(order.order_id)

        logger.debug(
            "Assigned %s (route %s, %d min) to driver %s, now at %.2fh",
            order.order_id, route.route_id, delivery_minutes, state.driver_id, state.hours_worked,
        )

        return Assignment(
            order=order,
            route=route,
            driver_id=state.driver_id,
            scheduled_time=scheduled_time,
            actual_time=actual_time,
            delivery_minutes=delivery_minutes,
        )

    def run(self, ranked_orders: Sequence[Order], routes: Dict[str, Route]) -> List[Assignment]:
        """
        Visit every ranked order exactly once and place it if possible.

        Args:
            ranked_orders: Orders in dispatch sequence (see rank_orders)
            routes: Route snapshot keyed by route_id

        Returns:
            Committed assignments, in dispatch sequence

        Raises:
            SimulationError: If an order references a route not in the snapshot
        """
        if not routes:
            raise SimulationError("no routes in snapshot")

        assignments: List[Assignment] = []

        for order in ranked_orders:
            route = routes.get(order.route_id)
            if route is None:
                raise SimulationError(
                    f"order {order.order_id} references unknown route {order.route_id}"
                )

            index = self._find_least_loaded_driver(route)
            if index is None:
                logger.info("No driver can fit order %s under %sh cap, skipping",
                            order.order_id, self.max_hours_per_driver)
                self.dropped_order_ids.append(order.order_id)
                continue

            assignments.append(self._assign_order_to_driver(index, order, route))

        return assignments
