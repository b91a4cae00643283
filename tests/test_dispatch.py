"""Tests for greencart.dispatch: order ranking and the greedy scheduler."""

from datetime import datetime, timedelta

import pytest

from greencart.dispatch import DispatchEngine, rank_orders
from greencart.exceptions import SimulationError
from greencart.models import DriverWorkState, Priority, TrafficLevel


def _states(count, start, fatigued=()):
    return [
        DriverWorkState(
            driver_id=f"D{i + 1}",
            driver_name=f"Driver {i + 1}",
            is_fatigued=i in fatigued,
            current_time=start,
        )
        for i in range(count)
    ]


class TestRankOrders:
    """Priority descending, value descending, stable on ties."""

    def test_priority_first(self, make_order):
        low = make_order("L", value=5000, priority=Priority.LOW)
        high = make_order("H", value=10, priority=Priority.HIGH)
        medium = make_order("M", value=100, priority=Priority.MEDIUM)

        assert [o.order_id for o in rank_orders([low, medium, high])] == ["H", "M", "L"]

    def test_value_breaks_priority_ties(self, make_order):
        orders = [make_order("A", value=500), make_order("B", value=1500), make_order("C", value=900)]
        assert [o.order_id for o in rank_orders(orders)] == ["B", "C", "A"]

    def test_unrecorded_priority_ranks_as_medium(self, make_order):
        orders = [
            make_order("LOW", value=100, priority=Priority.LOW),
            make_order("NONE", value=100, priority=None),
            make_order("MED", value=200, priority=Priority.MEDIUM),
        ]
        assert [o.order_id for o in rank_orders(orders)] == ["MED", "NONE", "LOW"]

    def test_ties_keep_backlog_order(self, make_order):
        orders = [make_order(f"O{i}", value=700) for i in range(5)]
        assert [o.order_id for o in rank_orders(orders)] == ["O0", "O1", "O2", "O3", "O4"]

        reversed_orders = list(reversed(orders))
        assert [o.order_id for o in rank_orders(reversed_orders)] == ["O4", "O3", "O2", "O1", "O0"]

    def test_input_not_modified(self, make_order):
        orders = [make_order("A", value=1), make_order("B", value=2)]
        rank_orders(orders)
        assert [o.order_id for o in orders] == ["A", "B"]


class TestDispatchEngine:
    """Least-loaded eligible driver, hour cap, drops, clock advance."""

    def test_requires_drivers(self):
        with pytest.raises(SimulationError, match="Unable to simulate"):
            DispatchEngine([], 8)

    def test_least_loaded_with_first_driver_tie_break(self, make_route, make_order, start_time):
        routes = {"R1": make_route()}
        orders = [make_order(f"O{i}") for i in range(4)]
        engine = DispatchEngine(_states(2, start_time), 8)

        assignments = engine.run(orders, routes)

        assert [a.driver_id for a in assignments] == ["D1", "D2", "D1", "D2"]

    def test_least_loaded_prefers_lower_hours(self, make_route, make_order, start_time):
        routes = {"R1": make_route(), "SHORT": make_route("SHORT", base_time_minutes=30)}
        states = _states(3, start_time)
        engine = DispatchEngine(states, 8)

        engine.run([make_order("A"), make_order("B", route_id="SHORT"), make_order("C")], routes)

        # A -> D1 (1h), B -> D2 (0.5h), C -> D3 (0h)
        assert [s.order_ids for s in states] == [["A"], ["B"], ["C"]]

    def test_clock_and_hours_advance(self, make_route, make_order, start_time):
        routes = {"R1": make_route(base_time_minutes=60)}
        states = _states(1, start_time)
        engine = DispatchEngine(states, 8)

        first, second = engine.run([make_order("A"), make_order("B")], routes)

        assert first.scheduled_time == start_time
        assert first.actual_time == start_time + timedelta(minutes=60)
        # 15 minute turnaround between deliveries
        assert second.scheduled_time == start_time + timedelta(minutes=75)
        assert second.actual_time == start_time + timedelta(minutes=135)
        # Buffer does not count as worked time
        assert states[0].hours_worked == pytest.approx(2.0)
        assert states[0].current_time == start_time + timedelta(minutes=150)

    def test_fatigued_driver_takes_longer(self, make_route, make_order, start_time):
        routes = {"R1": make_route(base_time_minutes=60)}
        states = _states(1, start_time, fatigued={0})
        engine = DispatchEngine(states, 8)

        (assignment,) = engine.run([make_order("A")], routes)

        assert assignment.delivery_minutes == 78
        assert states[0].hours_worked == pytest.approx(1.3)

    def test_order_too_long_for_cap_is_dropped(self, make_route, make_order, start_time):
        routes = {"R1": make_route(base_time_minutes=120)}
        engine = DispatchEngine(_states(1, start_time), 1)

        assignments = engine.run([make_order("A")], routes)

        assert assignments == []
        assert engine.dropped_order_ids == ["A"]

    def test_cap_equality_is_allowed(self, make_route, make_order, start_time):
        routes = {"R1": make_route(base_time_minutes=60)}
        engine = DispatchEngine(_states(1, start_time), 2)

        assignments = engine.run([make_order("A"), make_order("B"), make_order("C")], routes)

        assert [a.order.order_id for a in assignments] == ["A", "B"]
        assert engine.dropped_order_ids == ["C"]

    def test_cap_never_exceeded(self, make_route, make_order, start_time):
        routes = {
            "LOW": make_route("LOW", base_time_minutes=45),
            "MED": make_route("MED", traffic_level=TrafficLevel.MEDIUM, base_time_minutes=50),
            "HIGH": make_route("HIGH", traffic_level=TrafficLevel.HIGH, base_time_minutes=70),
        }
        orders = [make_order(f"O{i}", value=100 + i, route_id=rid)
                  for i, rid in enumerate(["LOW", "MED", "HIGH"] * 10)]
        states = _states(3, start_time, fatigued={1})
        engine = DispatchEngine(states, 5)

        assignments = engine.run(rank_orders(orders), routes)

        assert max(s.hours_worked for s in states) <= 5
        assert len(assignments) + len(engine.dropped_order_ids) == len(orders)

    def test_dropped_order_does_not_block_later_orders(self, make_route, make_order, start_time):
        routes = {"LONG": make_route("LONG", base_time_minutes=180), "R1": make_route()}
        engine = DispatchEngine(_states(1, start_time), 2)

        assignments = engine.run([make_order("BIG", route_id="LONG"), make_order("SMALL")], routes)

        assert [a.order.order_id for a in assignments] == ["SMALL"]
        assert engine.dropped_order_ids == ["BIG"]

    def test_eligibility_is_per_driver(self, make_route, make_order, start_time):
        # Fatigued driver needs 78 min for the route, rested driver 60 min
        routes = {"R1": make_route(base_time_minutes=60)}
        states = _states(2, start_time, fatigued={0})
        states[0].hours_worked = 0.5
        states[1].hours_worked = 0.6
        engine = DispatchEngine(states, 1.75)

        (assignment,) = engine.run([make_order("A")], routes)

        # D1 is less loaded but 0.5 + 1.3 > 1.75; D2 fits with 0.6 + 1.0
        assert assignment.driver_id == "D2"

    def test_unknown_route_is_fatal(self, make_route, make_order, start_time):
        engine = DispatchEngine(_states(1, start_time), 8)

        with pytest.raises(SimulationError, match="unknown route MISSING"):
            engine.run([make_order("A"), make_order("B", route_id="MISSING")], {"R1": make_route()})

    def test_empty_route_snapshot_is_fatal(self, make_order, start_time):
        engine = DispatchEngine(_states(1, start_time), 8)

        with pytest.raises(SimulationError):
            engine.run([make_order("A")], {})

    def test_clock_runs_past_midnight(self, make_route, make_order):
        late_start = datetime(2025, 8, 11, 23, 30)
        routes = {"R1": make_route(base_time_minutes=60)}
        engine = DispatchEngine(_states(1, late_start), 8)

        (assignment,) = engine.run([make_order("A")], routes)

        assert assignment.actual_time == datetime(2025, 8, 12, 0, 30)
