"""Click CLI commands for payoutschedule."""

import logging
import sys
import traceback
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click
import pydantic
import yaml

from payoutschedule import __version__, catalog
from payoutschedule.allocation import installment_amounts
from payoutschedule.clock import FixedClock, SystemClock
from payoutschedule.exceptions import PayoutScheduleError
from payoutschedule.loader import load_plans_from_path, save_plan
from payoutschedule.planner import build_plan
from payoutschedule.reporting import summarize, upcoming_total
from payoutschedule.schema import EngineConfig, PlanRequest
from payoutschedule.types import Frequency, PlanStatus

from .formatters import (
    print_duration_options,
    print_plan_summary,
    print_schedule_csv,
    print_schedule_json,
    print_schedule_table,
    print_status_json,
    print_status_table,
)

logger = logging.getLogger(__name__)

FREQUENCY_CHOICE = click.Choice([f.value for f in Frequency])
DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def _decimal(ctx, param, value):
    """Click callback parsing an optional Decimal option."""
    if value is None:
        return None
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation as e:
        raise click.BadParameter(f"not a number: {value}") from e


def _clock(today):
    return FixedClock(today.date()) if today is not None else SystemClock()


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    if logger.isEnabledFor(logging.DEBUG):
        traceback.print_exc()
    sys.exit(1)


def _load(path: str):
    path_obj = Path(path)
    plan_file = load_plans_from_path(path_obj)
    if plan_file is None:
        _fail(f"Path is neither a file nor a directory: {path_obj}")
    return plan_file


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__)
def main(verbose: bool):
    """Payoutschedule - plan recurring payouts from a locked total."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@main.command()
@click.argument("frequency", type=FREQUENCY_CHOICE)
@click.option("--date", "dates", type=DATE_TYPE, multiple=True, help="Custom payout date")
def options(frequency: str, dates):
    """List duration presets for a FREQUENCY.

    Examples:
        payoutschedule options monthly
        payoutschedule options custom --date 2025-01-15 --date 2025-02-10
    """
    custom_dates = [d.date() for d in dates]
    print_duration_options(catalog.duration_options(Frequency(frequency), custom_dates))


@main.command()
@click.option("--total", required=True, callback=_decimal, help="Total amount to lock")
@click.option("--frequency", required=True, type=FREQUENCY_CHOICE, help="Payout cadence")
@click.option(
    "--day-of-week",
    type=click.IntRange(0, 6),
    help="Weekday for weekly_specific (0 = Sunday)",
)
@click.option("--date", "dates", type=DATE_TYPE, multiple=True, help="Custom payout date")
@click.option("--installments", type=int, help="Number of installments")
@click.option("--months", type=int, help="Duration in calendar months")
@click.option("--payout-amount", callback=_decimal, help="Amount per payout")
@click.option("--name", help="Plan name")
@click.option("--id", "plan_id", help="Plan id (used as file name with --output DIR)")
@click.option("--emergency-withdrawal", is_flag=True, help="Allow emergency withdrawal")
@click.option("--today", type=DATE_TYPE, help="Override today's date (YYYY-MM-DD)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format (default: table)",
)
@click.option("--output", type=click.Path(), help="Save the draft plan as YAML")
def plan(
    total,
    frequency,
    day_of_week,
    dates,
    installments,
    months,
    payout_amount,
    name,
    plan_id,
    emergency_withdrawal,
    today,
    output_format,
    output,
):
    """Build a draft payout plan and print its schedule.

    Examples:
        payoutschedule plan --total 120000 --frequency monthly --installments 12
        payoutschedule plan --total 50000 --frequency weekly_specific --day-of-week 3 --months 3
        payoutschedule plan --total 9000 --frequency custom --date 2025-03-01 --date 2025-01-15
    """
    sizing = [opt for opt in (installments, months, payout_amount) if opt is not None]
    if len(sizing) > 1:
        _fail("Use only one of --installments, --months and --payout-amount")

    freq = Frequency(frequency)
    config = EngineConfig()

    try:
        if months is not None:
            installments = catalog.installments_for_months(freq, months)

        request = PlanRequest(
            total_amount=total,
            frequency=freq,
            day_of_week=day_of_week,
            custom_dates=[d.date() for d in dates],
            installment_count=installments,
            payout_amount=payout_amount,
            name=name,
            emergency_withdrawal_enabled=emergency_withdrawal,
        )
        draft = build_plan(request, _clock(today))
    except (PayoutScheduleError, pydantic.ValidationError) as e:
        _fail(str(e))

    if plan_id:
        draft = draft.model_copy(update={"id": plan_id})

    amounts = installment_amounts(
        draft.total_amount,
        draft.payout_amount,
        draft.installment_count,
        absorb_remainder=config.absorb_rounding_remainder and not draft.payout_amount_overridden,
    )

    if output_format == "table":
        print_plan_summary(draft, config.currency)
        click.echo()
        print_schedule_table(draft, amounts, config.currency)
    elif output_format == "json":
        print_schedule_json(draft, amounts)
    else:
        print_schedule_csv(draft, amounts)

    if output:
        try:
            saved = save_plan(draft, Path(output))
        except (OSError, ValueError) as e:
            _fail(str(e))
        click.echo(f"\nSaved draft plan to {saved}", err=True)


@main.command()
@click.argument("path", type=click.Path(exists=True))
def validate(path: str):
    """Validate plan files for syntax and schema compliance.

    PATH can be either a plans.yaml file or a plans/ directory.

    Examples:
        payoutschedule validate plans.yaml
        payoutschedule validate plans/
    """
    click.echo(f"Validating plans from: {path}")

    try:
        plan_file = _load(path)
    except (yaml.YAMLError, pydantic.ValidationError) as e:
        click.echo(f"✗ Validation failed: {e}", err=True)
        sys.exit(1)

    plans = plan_file.plans
    plan_ids = [p.id for p in plans]
    duplicates = {pid for pid in plan_ids if plan_ids.count(pid) > 1}

    click.echo("✓ Validation successful!")
    click.echo(f"  Total plans: {len(plans)}")
    for status in PlanStatus:
        count = sum(1 for p in plans if p.status == status)
        if count:
            click.echo(f"  {status.value.capitalize()}: {count}")

    if duplicates:
        click.echo(f"\n⚠ Warning: Duplicate plan IDs found: {duplicates}", err=True)
        sys.exit(1)

    click.echo("\nAll plans are valid!")


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--today", type=DATE_TYPE, help="Override today's date (YYYY-MM-DD)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
def status(path: str, today, output_format: str):
    """Show progress of every plan in PATH.

    Examples:
        payoutschedule status plans/
        payoutschedule status plans.yaml --today 2025-06-01 --format json
    """
    try:
        plan_file = _load(path)
    except (yaml.YAMLError, pydantic.ValidationError) as e:
        _fail(str(e))

    if not plan_file.plans:
        click.echo("No plans found")
        return

    now = _clock(today).now()
    rows = [(p, summarize(p, now, plan_file.config)) for p in plan_file.plans]

    if output_format == "table":
        print_status_table(rows, plan_file.config.currency)
    else:
        print_status_json(rows)


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--today", type=DATE_TYPE, help="Override today's date (YYYY-MM-DD)")
@click.option("--days", type=click.IntRange(min=0), help="Window in days (default from config)")
def upcoming(path: str, today, days):
    """Total the next payouts of active plans due soon.

    Examples:
        payoutschedule upcoming plans/
        payoutschedule upcoming plans/ --days 7
    """
    try:
        plan_file = _load(path)
    except (yaml.YAMLError, pydantic.ValidationError) as e:
        _fail(str(e))

    now = _clock(today).now()
    config = plan_file.config
    window = days if days is not None else config.upcoming_window_days

    click.echo(f"Upcoming payouts as of {now.isoformat()} ({config.currency})")
    click.echo(f"  This week:      {upcoming_total(plan_file.plans, now, 7):,.2f}")
    click.echo(f"  Next week:      {upcoming_total(plan_file.plans, now, 7, offset_days=7):,.2f}")
    click.echo(f"  Next {window} days: {upcoming_total(plan_file.plans, now, window):,.2f}")
