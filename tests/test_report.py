"""Tests for greencart.report and the command-line entry point."""

import csv
import json
import os
import shutil

import pytest

import main as cli
from greencart import report
from greencart.models import SimulationSettings, TrafficLevel
from greencart.simulation import run_simulation

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")


@pytest.fixture
def sim_report(make_driver, make_route, make_order, as_of):
    drivers = [make_driver("D1"), make_driver("D2"), make_driver("D3")]
    routes = [
        make_route("R1"),
        make_route("R2", distance_km=12, traffic_level=TrafficLevel.HIGH, base_time_minutes=45),
    ]
    orders = [make_order("A", value=1500), make_order("B", value=300, route_id="R2")]
    settings = SimulationSettings(number_of_drivers=3, route_start_time="09:00", max_hours_per_driver=8)
    return run_simulation(drivers, routes, orders, settings, as_of=as_of, simulation_id="sim_report")


class TestFrames:

    def test_order_details_frame(self, sim_report):
        frame = report.order_details_frame(sim_report.result)
        assert list(frame.columns) == report.ORDER_DETAIL_COLUMNS
        assert list(frame["order_id"]) == ["A", "B"]
        assert list(frame["is_on_time"]) == [True, False]
        assert frame["fuel_cost"].sum() == pytest.approx(50 + 84)

    def test_utilization_includes_idle_drivers(self, sim_report):
        frame = report.driver_utilization_frame(sim_report.result)
        assert list(frame["driver_id"]) == ["D1", "D2", "D3"]
        assert list(frame["orders_delivered"]) == [1, 1, 0]

    def test_empty_result_has_columns(self, make_driver, make_route, make_order, as_of):
        settings = SimulationSettings(number_of_drivers=1, route_start_time="09:00", max_hours_per_driver=1)
        empty = run_simulation([make_driver()], [make_route(base_time_minutes=90)], [make_order()], settings,
                               as_of=as_of)
        frame = report.order_details_frame(empty.result)
        assert frame.empty
        assert list(frame.columns) == report.ORDER_DETAIL_COLUMNS

    def test_totals_table(self, sim_report):
        table = report.totals_table(sim_report.result)
        values = dict(zip(table["Metric"], table["Value"]))
        assert values["Efficiency Score"] == "50%"
        assert values["Deliveries"] == 2


class TestExport:

    def test_write_result_json(self, sim_report, tmp_path):
        path = report.write_result_json(sim_report, str(tmp_path / "runs" / "run.json"))
        with open(path) as f:
            data = json.load(f)
        assert data["simulation_id"] == "sim_report"
        assert data["results"]["total_deliveries"] == 2
        assert data["summary"]["drivers_used"] == 3
        assert data["order_details"][0]["scheduled_time"].endswith("T09:00:00")

    def test_write_order_details_csv(self, sim_report, tmp_path):
        path = report.write_order_details_csv(sim_report.result, str(tmp_path / "orders.csv"))
        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["order_id"] for r in rows] == ["A", "B"]
        assert rows[0]["driver_id"] == "D1"


class TestCommandLine:

    def test_runs_sample_data(self, tmp_path, capsys):
        output = tmp_path / "run.json"
        code = cli.main(["--data-dir", DATA_DIR, "--as-of", "2025-08-11", "--output", str(output)])
        assert code == 0
        assert output.exists()
        assert "Orders processed" in capsys.readouterr().out

    def test_lists_dropped_orders(self, capsys):
        code = cli.main(["--data-dir", DATA_DIR, "--as-of", "2025-08-11", "--drivers", "1", "--max-hours", "1"])
        assert code == 0
        assert "Dropped (no driver under cap)" in capsys.readouterr().out

    def test_too_many_drivers(self, capsys):
        code = cli.main(["--data-dir", DATA_DIR, "--drivers", "50"])
        assert code == 1
        out = capsys.readouterr().out
        assert "Not enough active drivers" in out
        assert "available: 7" in out

    def test_missing_data_dir(self, tmp_path):
        assert cli.main(["--data-dir", str(tmp_path)]) == 1

    def test_unknown_route_exit_code(self, tmp_path):
        for name in ("drivers.csv", "routes.csv"):
            shutil.copy(os.path.join(DATA_DIR, name), tmp_path / name)
        (tmp_path / "orders.csv").write_text("order_id,value_rs,route_id\nO1,100,RT999\n")
        assert cli.main(["--data-dir", str(tmp_path), "--as-of", "2025-08-11"]) == 2

    def test_invalid_as_of(self):
        with pytest.raises(SystemExit):
            cli.main(["--as-of", "11/08/2025"])
