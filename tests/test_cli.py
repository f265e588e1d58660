"""Tests for CLI commands."""

import json
from datetime import date

import pytest
import yaml
from click.testing import CliRunner

from payoutschedule.cli import main
from payoutschedule.loader import load_plan_from_file, plan_to_dict, save_plan

from tests.conftest import activate, make_plan


@pytest.fixture
def cli_runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def plans_directory(tmp_path):
    """Directory holding one active and one draft plan."""
    plans_dir = tmp_path / "plans"
    plans_dir.mkdir()
    save_plan(activate(make_plan(id="rent-fund", name="Rent fund")), plans_dir)
    save_plan(make_plan(id="school-fees", start=date(2025, 3, 1)), plans_dir)
    (plans_dir / "_config.yaml").write_text("currency: NGN\n")
    return plans_dir


class TestOptionsCommand:
    """Tests for 'options' command."""

    def test_monthly_presets(self, cli_runner):
        result = cli_runner.invoke(main, ["options", "monthly"])
        assert result.exit_code == 0
        assert "12 monthly payments" in result.output
        assert "1 Year" in result.output

    def test_custom_counts_dates(self, cli_runner):
        result = cli_runner.invoke(
            main, ["options", "custom", "--date", "2025-01-15", "--date", "2025-02-10"]
        )
        assert result.exit_code == 0
        assert "2 custom payments" in result.output

    def test_unknown_frequency(self, cli_runner):
        result = cli_runner.invoke(main, ["options", "hourly"])
        assert result.exit_code != 0


class TestPlanCommand:
    """Tests for 'plan' command."""

    def test_table_output(self, cli_runner):
        result = cli_runner.invoke(
            main,
            [
                "plan",
                "--total",
                "120,000",
                "--frequency",
                "monthly",
                "--installments",
                "12",
                "--today",
                "2025-01-15",
            ],
        )
        assert result.exit_code == 0
        assert "12 payouts of NGN 10,000.00" in result.output
        assert "2025-01-15" in result.output
        assert "2025-12-15" in result.output

    def test_weekly_specific_label(self, cli_runner):
        result = cli_runner.invoke(
            main,
            [
                "plan",
                "--total",
                "400",
                "--frequency",
                "weekly_specific",
                "--day-of-week",
                "3",
                "--installments",
                "4",
                "--today",
                "2025-01-13",
            ],
        )
        assert result.exit_code == 0
        assert "Every Wednesday" in result.output
        assert "Start date:  2025-01-15" in result.output

    def test_json_output(self, cli_runner):
        result = cli_runner.invoke(
            main,
            [
                "plan",
                "--total",
                "100",
                "--frequency",
                "monthly",
                "--installments",
                "3",
                "--today",
                "2025-01-31",
                "--format",
                "json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["status"] == "draft"
        assert data["schedule"] == ["2025-01-31", "2025-02-28", "2025-03-31"]
        assert [i["amount"] for i in data["installments"]] == ["33.33", "33.33", "33.34"]

    def test_csv_output(self, cli_runner):
        result = cli_runner.invoke(
            main,
            [
                "plan",
                "--total",
                "9000",
                "--frequency",
                "custom",
                "--date",
                "2025-03-01",
                "--date",
                "2025-01-15",
                "--date",
                "2025-02-10",
                "--format",
                "csv",
            ],
        )
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0] == "#,Date,Amount,Completed"
        assert lines[1].startswith("1,2025-01-15,3000.00")
        assert len(lines) == 4

    def test_months_option(self, cli_runner):
        result = cli_runner.invoke(
            main,
            ["plan", "--total", "2600", "--frequency", "weekly", "--months", "6", "--today", "2025-01-01"],
        )
        assert result.exit_code == 0
        assert "26 payouts of NGN 100.00" in result.output

    def test_payout_amount_option(self, cli_runner):
        result = cli_runner.invoke(
            main,
            ["plan", "--total", "1000", "--frequency", "daily", "--payout-amount", "300"],
        )
        assert result.exit_code == 0
        assert "3 payouts of NGN 300.00" in result.output

    def test_missing_day_of_week_fails(self, cli_runner):
        result = cli_runner.invoke(
            main, ["plan", "--total", "400", "--frequency", "weekly_specific"]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_conflicting_sizing_options(self, cli_runner):
        result = cli_runner.invoke(
            main,
            ["plan", "--total", "400", "--frequency", "weekly", "--installments", "4", "--months", "1"],
        )
        assert result.exit_code == 1

    def test_bad_total(self, cli_runner):
        result = cli_runner.invoke(main, ["plan", "--total", "lots", "--frequency", "weekly"])
        assert result.exit_code != 0
        assert "not a number" in result.output

    def test_save_to_directory(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            main,
            [
                "plan",
                "--total",
                "500",
                "--frequency",
                "biweekly",
                "--installments",
                "5",
                "--id",
                "holiday",
                "--output",
                str(tmp_path),
            ],
        )
        assert result.exit_code == 0

        saved = load_plan_from_file(tmp_path / "holiday.yaml")
        assert saved is not None
        assert saved.installment_count == 5


class TestValidateCommand:
    """Tests for 'validate' command."""

    def test_validate_directory(self, cli_runner, plans_directory):
        result = cli_runner.invoke(main, ["validate", str(plans_directory)])
        assert result.exit_code == 0
        assert "Validation successful" in result.output
        assert "Total plans: 2" in result.output
        assert "Active: 1" in result.output
        assert "Draft: 1" in result.output

    def test_duplicate_ids(self, cli_runner, tmp_path):
        plan = plan_to_dict(make_plan(id="dup"))
        path = tmp_path / "plans.yaml"
        path.write_text(yaml.safe_dump({"plans": [plan, plan]}))

        result = cli_runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Duplicate plan IDs" in result.output

    def test_schema_error(self, cli_runner, tmp_path):
        path = tmp_path / "plans.yaml"
        path.write_text(yaml.safe_dump({"plans": [{"id": "x", "total_amount": 0}]}))

        result = cli_runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Validation failed" in result.output

    def test_nonexistent_path(self, cli_runner):
        result = cli_runner.invoke(main, ["validate", "/nonexistent/plans.yaml"])
        assert result.exit_code != 0


class TestStatusCommand:
    """Tests for 'status' command."""

    def test_json(self, cli_runner, plans_directory):
        result = cli_runner.invoke(
            main, ["status", str(plans_directory), "--today", "2025-01-15", "--format", "json"]
        )
        assert result.exit_code == 0
        rows = {row["id"]: row for row in json.loads(result.output)}

        rent = rows["rent-fund"]
        assert rent["status"] == "active"
        assert rent["amount_remaining"] == "100.00"
        assert rent["next_pending_date"] == "2025-01-01"
        assert rent["event_type"] == "overdue"
        assert rows["school-fees"]["event_type"] is None

    def test_table(self, cli_runner, plans_directory):
        result = cli_runner.invoke(main, ["status", str(plans_directory), "--today", "2025-01-15"])
        assert result.exit_code == 0
        assert "rent-fund" in result.output
        assert "overdue" in result.output
        assert "Total: 2 plans" in result.output

    def test_empty_directory(self, cli_runner, tmp_path):
        result = cli_runner.invoke(main, ["status", str(tmp_path)])
        assert result.exit_code == 0
        assert "No plans found" in result.output


class TestUpcomingCommand:
    """Tests for 'upcoming' command."""

    def test_totals(self, cli_runner, plans_directory):
        result = cli_runner.invoke(
            main, ["upcoming", str(plans_directory), "--today", "2024-12-30", "--days", "10"]
        )
        assert result.exit_code == 0
        assert "This week:      25.00" in result.output
        assert "Next week:      0.00" in result.output
        assert "Next 10 days: 25.00" in result.output
