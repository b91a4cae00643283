# greencart-dispatch/benchmark.py
"""
Parameter sweep for the GreenCart Delivery Simulation.
Runs the sample snapshot under several fleet sizes and hour caps and
outputs CSV/JSON files for comparing KPIs across configurations.
"""

import csv
import json
import os
from datetime import date, datetime

from greencart import config
from greencart.exceptions import InputValidationError
from greencart.models import SimulationSettings
from greencart.simulation import Simulation, run_simulation

DATA_DIR = config.DEFAULT_DATA_DIR

# Simulated day for the sample snapshot (drivers last worked 2025-08-10)
AS_OF = date(2025, 8, 11)

DRIVER_COUNTS = [1, 2, 3, 5, 7]
MAX_HOURS = [4.0, 6.0, 8.0, 10.0]
START_TIMES = ["09:00"]

# KPIs for CSV output
CSV_KPIS = [
    "total_deliveries",
    "on_time_deliveries",
    "late_deliveries",
    "efficiency_score",
    "total_profit",
    "total_fuel_cost",
    "total_penalties",
    "total_bonuses",
    "average_delivery_time",
]

SUMMARY_KPIS = [
    "orders_processed",
    "total_orders_available",
    "drivers_used",
    "average_orders_per_driver",
]


def run_config(drivers, routes, orders, number_of_drivers, start_time, max_hours):
    """Run one configuration and flatten its KPIs into a dict. None if rejected."""
    settings = SimulationSettings(
        number_of_drivers=number_of_drivers,
        route_start_time=start_time,
        max_hours_per_driver=max_hours,
    )
    try:
        report = run_simulation(drivers, routes, orders, settings, as_of=AS_OF)
    except InputValidationError as e:
        print(f"  - skipped {number_of_drivers} drivers / {max_hours:g}h: {e}")
        return None

    row = {
        "simulation_id": report.simulation_id,
        "number_of_drivers": number_of_drivers,
        "route_start_time": start_time,
        "max_hours_per_driver": max_hours,
    }
    row.update(report.result.totals.to_dict())
    row.update(report.summary.to_dict())
    return row


def save_sweep_csv(rows, output_dir, timestamp):
    """Save one CSV row of KPIs per configuration."""
    filename = f"{output_dir}/SWEEP_{timestamp}.csv"
    header = ["number_of_drivers", "route_start_time", "max_hours_per_driver"] + CSV_KPIS + SUMMARY_KPIS

    with open(filename, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow([row[col] for col in header])

    print(f"✓ Saved CSV: {filename}")
    return filename


def print_best(rows):
    """Print the most profitable and the most punctual configuration."""
    if not rows:
        return
    best_profit = max(rows, key=lambda r: r["total_profit"])
    best_eff = max(rows, key=lambda r: (r["efficiency_score"], r["total_deliveries"]))

    print(f"\nMost profitable: {best_profit['number_of_drivers']} drivers, "
          f"{best_profit['max_hours_per_driver']:g}h cap -> Rs {best_profit['total_profit']:,.2f}")
    print(f"Most punctual:   {best_eff['number_of_drivers']} drivers, "
          f"{best_eff['max_hours_per_driver']:g}h cap -> {best_eff['efficiency_score']}% on time "
          f"({best_eff['total_deliveries']} deliveries)")


def main():
    """Run the full sweep."""
    print("=" * 60)
    print("GREENCART DISPATCH PARAMETER SWEEP")
    print("=" * 60)

    drivers, routes, orders = Simulation.load_data(
        os.path.join(DATA_DIR, config.DRIVERS_FILE),
        os.path.join(DATA_DIR, config.ROUTES_FILE),
        os.path.join(DATA_DIR, config.ORDERS_FILE),
    )

    os.makedirs("results", exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    rows = []
    for start_time in START_TIMES:
        for number_of_drivers in DRIVER_COUNTS:
            for max_hours in MAX_HOURS:
                row = run_config(drivers, routes, orders, number_of_drivers, start_time, max_hours)
                if row is None:
                    continue
                rows.append(row)
                print(f"  {number_of_drivers:>3} drivers | {max_hours:>4g}h | "
                      f"{row['total_deliveries']:>3}/{row['total_orders_available']} placed | "
                      f"{row['efficiency_score']:>3}% | Rs {row['total_profit']:>10,.2f}")

    save_sweep_csv(rows, "results", timestamp)

    json_file = f"results/sweep_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(rows, f, indent=2, default=str)
    print(f"✓ Saved JSON: {json_file}")

    print_best(rows)

    print(f"\n{'='*60}")
    print("SWEEP COMPLETE")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
