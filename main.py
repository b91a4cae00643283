#!/usr/bin/env python3
# greencart-dispatch/main.py
"""
Command-Line Interface for the GreenCart Delivery Simulation.

Runs one simulated delivery day over the CSV snapshot in a data directory
and prints the KPIs.

Usage:
    python main.py                                  # Run with defaults
    python main.py --drivers 5 --max-hours 6        # Smaller day
    python main.py --start-time 07:30 --as-of 2025-08-11
    python main.py --output results/run.json --export-csv results/orders.csv
    python main.py --verbose                        # Show engine logging

Exit Codes:
    0: Success
    1: Data loading or input error
    2: Simulation error
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from typing import List, Optional, Tuple

# Ensure greencart package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from greencart import config, report, utils
from greencart.exceptions import DataLoadError, InputValidationError, SimulationError
from greencart.models import Driver, Order, Route, SimulationReport, SimulationSettings
from greencart.simulation import Simulation, run_simulation


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  GREENCART LOGISTICS - Delivery Day Simulation")
    print("  Least-Loaded Greedy Dispatch with Fatigue & Traffic")
    print("=" * 60 + "\n")


def print_results(sim_report: SimulationReport) -> None:
    """
    Print KPIs, driver utilization and the summary counters.

    Args:
        sim_report: Report returned by run_simulation
    """
    result = sim_report.result
    summary = sim_report.summary

    print("\n" + "=" * 60)
    print(f"  RESULTS  [{result.simulation_id}]")
    print("=" * 60 + "\n")

    for _, row in report.totals_table(result).iterrows():
        print(f"  {row['Metric']:<22} {row['Value']}")

    print("\n  Driver Utilization")
    print("  " + "-" * 56)
    utilization = report.driver_utilization_frame(result)
    for _, row in utilization.iterrows():
        fatigue = " (fatigued)" if row["is_fatigued"] else ""
        print(f"  {row['driver_name']:<20} {row['hours_worked']:>6.2f}h "
              f"({utils.format_time_duration(row['hours_worked'] * 60):>7})  "
              f"{row['orders_delivered']:>3} orders{fatigue}")

    print("\n" + "=" * 60)
    print(f"  Orders processed: {summary.orders_processed}/{summary.total_orders_available}")
    print(f"  Drivers used: {summary.drivers_used}")
    print(f"  Avg orders per driver: {summary.average_orders_per_driver:.2f}")
    if summary.dropped_order_ids:
        print(f"  Dropped (no driver under cap): {len(summary.dropped_order_ids)} "
              f"[{', '.join(summary.dropped_order_ids)}]")
    print("=" * 60 + "\n")


def load_data_safe(data_dir: str) -> Optional[Tuple[List[Driver], List[Route], List[Order]]]:
    """
    Load data with graceful error handling.

    Args:
        data_dir: Directory holding drivers.csv, routes.csv and orders.csv

    Returns:
        Tuple of (drivers, routes, orders) or None if error
    """
    drivers_file = os.path.join(data_dir, config.DRIVERS_FILE)
    routes_file = os.path.join(data_dir, config.ROUTES_FILE)
    orders_file = os.path.join(data_dir, config.ORDERS_FILE)

    try:
        drivers, routes, orders = Simulation.load_data(drivers_file, routes_file, orders_file)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        print(f"Please ensure {data_dir}/ contains {config.DRIVERS_FILE}, "
              f"{config.ROUTES_FILE} and {config.ORDERS_FILE}.")
        return None
    except DataLoadError as e:
        print(f"ERROR: Failed to load data: {e}")
        return None

    print(f"Loaded {len(drivers)} drivers, {len(routes)} routes and {len(orders)} orders from '{data_dir}'")
    return drivers, routes, orders


def parse_as_of(value: str) -> date:
    """argparse type for ISO dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="GreenCart Delivery Simulation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Default: 3 drivers, 09:00, 8h cap
  python main.py -n 6 -t 08:00 -m 10               # Bigger fleet, longer day
  python main.py --as-of 2025-08-11                # Evaluate fatigue for that day
  python main.py --output results/run.json         # Save the result record
        """
    )

    parser.add_argument(
        "--data-dir", "-d",
        type=str,
        default=config.DEFAULT_DATA_DIR,
        help=f"Directory with the CSV snapshot (default: {config.DEFAULT_DATA_DIR})"
    )

    parser.add_argument(
        "--drivers", "-n",
        type=int,
        default=config.DEFAULT_NUMBER_OF_DRIVERS,
        help=f"Number of drivers, {config.MIN_DRIVERS}-{config.MAX_DRIVERS} "
             f"(default: {config.DEFAULT_NUMBER_OF_DRIVERS})"
    )

    parser.add_argument(
        "--start-time", "-t",
        type=str,
        default=config.DEFAULT_ROUTE_START_TIME,
        help=f"Route start time, HH:MM (default: {config.DEFAULT_ROUTE_START_TIME})"
    )

    parser.add_argument(
        "--max-hours", "-m",
        type=float,
        default=config.DEFAULT_MAX_HOURS_PER_DRIVER,
        help=f"Max hours per driver (default: {config.DEFAULT_MAX_HOURS_PER_DRIVER:g})"
    )

    parser.add_argument(
        "--as-of",
        type=parse_as_of,
        default=None,
        help="Simulated day, YYYY-MM-DD (default: today). Drives the fatigue lookback."
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write the result record as JSON to this file"
    )

    parser.add_argument(
        "--export-csv",
        type=str,
        default=None,
        help="Write per-order details as CSV to this file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show engine logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print_header()

    data = load_data_safe(args.data_dir)
    if data is None:
        return 1

    drivers, routes, orders = data
    settings = SimulationSettings(
        number_of_drivers=args.drivers,
        route_start_time=args.start_time,
        max_hours_per_driver=args.max_hours,
    )

    print(f"\nRunning: {settings.number_of_drivers} drivers, start {settings.route_start_time}, "
          f"cap {settings.max_hours_per_driver:g}h")
    print("-" * 40)

    try:
        sim_report = run_simulation(drivers, routes, orders, settings, as_of=args.as_of)
    except InputValidationError as e:
        print(f"ERROR: {e}")
        for key, value in e.details.items():
            print(f"  {key}: {value}")
        return 1
    except SimulationError as e:
        print(f"ERROR: {e}")
        return 2

    print_results(sim_report)

    if args.output:
        path = report.write_result_json(sim_report, args.output)
        print(f"Saved result: {path}")
    if args.export_csv:
        path = report.write_order_details_csv(sim_report.result, args.export_csv)
        print(f"Saved order details: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
