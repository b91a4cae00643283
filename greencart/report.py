# greencart-dispatch/greencart/report.py
"""
Reporting helpers for simulation results.

Turns a SimulationResult into pandas tables for display and CSV export,
and writes the JSON record handed to whatever stores run history.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List

import pandas as pd

from .models import SimulationReport, SimulationResult

ORDER_DETAIL_COLUMNS: List[str] = [
    "order_id",
    "driver_id",
    "route_id",
    "scheduled_time",
    "actual_time",
    "delivery_minutes",
    "is_on_time",
    "penalty",
    "bonus",
    "fuel_cost",
    "profit",
]

DRIVER_UTILIZATION_COLUMNS: List[str] = [
    "driver_id",
    "driver_name",
    "hours_worked",
    "orders_delivered",
    "is_fatigued",
]


def order_details_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per placed order, in dispatch sequence."""
    rows = []
    for outcome in result.order_details:
        rows.append({
            "order_id": outcome.order_id,
            "driver_id": outcome.driver_id,
            "route_id": outcome.route_id,
            "scheduled_time": outcome.scheduled_time,
            "actual_time": outcome.actual_time,
            "delivery_minutes": outcome.delivery_minutes,
            "is_on_time": outcome.is_on_time,
            "penalty": outcome.penalty,
            "bonus": outcome.bonus,
            "fuel_cost": outcome.fuel_cost,
            "profit": outcome.profit,
        })
    return pd.DataFrame(rows, columns=ORDER_DETAIL_COLUMNS)


def driver_utilization_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per selected driver, including drivers with no orders."""
    rows = [d.to_dict() for d in result.driver_utilization]
    return pd.DataFrame(rows, columns=DRIVER_UTILIZATION_COLUMNS)


def totals_table(result: SimulationResult) -> pd.DataFrame:
    """Headline KPIs as a two-column Metric / Value table."""
    totals = result.totals
    table_data = [
        {"Metric": "Total Profit", "Value": f"Rs {totals.total_profit:,.2f}"},
        {"Metric": "Efficiency Score", "Value": f"{totals.efficiency_score}%"},
        {"Metric": "Deliveries", "Value": totals.total_deliveries},
        {"Metric": "On-Time Deliveries", "Value": totals.on_time_deliveries},
        {"Metric": "Late Deliveries", "Value": totals.late_deliveries},
        {"Metric": "Total Fuel Cost", "Value": f"Rs {totals.total_fuel_cost:,.2f}"},
        {"Metric": "Total Penalties", "Value": f"Rs {totals.total_penalties:,.2f}"},
        {"Metric": "Total Bonuses", "Value": f"Rs {totals.total_bonuses:,.2f}"},
        {"Metric": "Avg Delivery Time", "Value": f"{totals.average_delivery_time} min"},
    ]
    return pd.DataFrame(table_data)


def write_result_json(report: SimulationReport, path: str) -> str:
    """
    Save a report as JSON.

    Args:
        report: Report returned by run_simulation
        path: Output file; parent directories are created

    Returns:
        The path written
    """
    _ensure_parent_dir(path)
    data: Dict[str, Any] = report.to_dict()
    with open(path, "w") as f:
        json.dump(data, f, indent=2, default=str)
    return path


def write_order_details_csv(result: SimulationResult, path: str) -> str:
    """Export the order-details table as CSV. Returns the path written."""
    _ensure_parent_dir(path)
    order_details_frame(result).to_csv(path, index=False)
    return path


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
