"""Shared fixtures for the simulation tests."""

from datetime import date, datetime, timedelta
from typing import Callable

import pytest

from greencart.models import Driver, Order, Priority, Route, SimulationSettings, TrafficLevel

AS_OF = date(2025, 8, 11)


@pytest.fixture
def as_of() -> date:
    """Simulated calendar day used across tests."""
    return AS_OF


@pytest.fixture
def make_route() -> Callable[..., Route]:
    """Factory for routes with sensible defaults."""
    def _make(route_id="R1", distance_km=10.0, traffic_level=TrafficLevel.LOW, base_time_minutes=60, **kwargs):
        return Route(
            route_id=route_id,
            distance_km=distance_km,
            traffic_level=traffic_level,
            base_time_minutes=base_time_minutes,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Factory for pending orders on route R1."""
    def _make(order_id="O1", value=500.0, route_id="R1", priority=Priority.MEDIUM, **kwargs):
        return Order(order_id=order_id, value=value, route_id=route_id, priority=priority, **kwargs)
    return _make


@pytest.fixture
def make_driver() -> Callable[..., Driver]:
    """Factory for active, rested drivers."""
    def _make(driver_id="D1", name=None, shift_hours=6.0, last_work_date=None, **kwargs):
        return Driver(
            driver_id=driver_id,
            name=name or f"Driver {driver_id}",
            shift_hours=shift_hours,
            last_work_date=last_work_date,
            **kwargs,
        )
    return _make


@pytest.fixture
def fatigued_driver(make_driver) -> Driver:
    """Worked 10 hours the day before AS_OF."""
    return make_driver("DF", shift_hours=10, last_work_date=AS_OF - timedelta(days=1))


@pytest.fixture
def start_time() -> datetime:
    """09:00 on the simulated day."""
    return datetime(2025, 8, 11, 9, 0)


@pytest.fixture
def default_settings() -> SimulationSettings:
    """Two drivers, 09:00 start, 8 hour cap."""
    return SimulationSettings(number_of_drivers=2, route_start_time="09:00", max_hours_per_driver=8)
