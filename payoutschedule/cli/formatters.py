"""Output formatting functions for CLI commands."""

import csv
import json
import sys
from typing import Optional

import click

from payoutschedule import constants
from payoutschedule.types import DAY_OF_WEEK_NAMES, Frequency

_FREQUENCY_LABELS = {
    Frequency.DAILY: "Daily",
    Frequency.WEEKLY: "Weekly",
    Frequency.BIWEEKLY: "Bi-weekly",
    Frequency.MONTHLY: "Monthly",
    Frequency.END_OF_MONTH: "Month End",
    Frequency.QUARTERLY: "Quarterly",
    Frequency.BIANNUAL: "Bi-annual",
    Frequency.ANNUALLY: "Annually",
    Frequency.CUSTOM: "Custom",
}


def format_frequency(frequency: Frequency, day_of_week: Optional[int] = None) -> str:
    """Human label for a frequency, e.g. 'Every Wednesday'."""
    if frequency == Frequency.WEEKLY_SPECIFIC:
        return f"Every {DAY_OF_WEEK_NAMES.get(day_of_week, 'Day')}"
    return _FREQUENCY_LABELS[frequency]


def print_duration_options(options: list) -> None:
    """Print duration presets as a table."""
    click.echo(f"{'Installments':>12}  {'Duration':<10}  Description")
    click.echo("-" * 48)
    for option in options:
        click.echo(f"{option.installment_count:>12}  {option.label:<10}  {option.description}")


def print_plan_summary(plan, currency: str) -> None:
    """Print the headline figures of a plan."""
    click.echo(f"Plan:        {plan.name or plan.id or '(unnamed)'}")
    click.echo(f"Frequency:   {format_frequency(plan.frequency, plan.day_of_week)}")
    click.echo(f"Total:       {currency} {plan.total_amount:,.2f}")
    click.echo(
        f"Payouts:     {plan.installment_count} payout"
        f"{'s' if plan.installment_count != 1 else ''} of {currency} {plan.payout_amount:,.2f}"
    )
    click.echo(f"Start date:  {plan.start_date.isoformat()}")
    click.echo(f"Status:      {plan.status.value}")


def print_schedule_table(plan, amounts: list, currency: str) -> None:
    """Print a plan's disbursement dates with per-installment amounts."""
    header = f"{'#':>4} {'Date':>12} {'Amount':>16}"
    click.echo(header)
    click.echo("-" * len(header))

    for idx, (payout_date, amount) in enumerate(zip(plan.schedule, amounts), 1):
        marker = "✓" if idx <= plan.completed_installments else " "
        click.echo(
            f"{idx:>4} {payout_date.strftime('%Y-%m-%d'):>12} {currency} {amount:>12,.2f} {marker}"
        )


def print_schedule_csv(plan, amounts: list) -> None:
    """Print a plan's disbursement dates as CSV."""
    writer = csv.writer(sys.stdout)
    writer.writerow(["#", "Date", "Amount", "Completed"])

    for idx, (payout_date, amount) in enumerate(zip(plan.schedule, amounts), 1):
        writer.writerow(
            [
                idx,
                payout_date.strftime("%Y-%m-%d"),
                f"{amount:.2f}",
                "true" if idx <= plan.completed_installments else "false",
            ]
        )


def print_schedule_json(plan, amounts: list) -> None:
    """Print a plan and its per-installment amounts as JSON."""
    output = plan.model_dump(mode="json")
    output["installments"] = [
        {"number": idx, "date": d.isoformat(), "amount": f"{amount:.2f}"}
        for idx, (d, amount) in enumerate(zip(plan.schedule, amounts), 1)
    ]
    click.echo(json.dumps(output, indent=2))


def print_status_table(rows: list, currency: str) -> None:
    """
    Print progress for several plans.

    Args:
        rows: List of (PayoutPlan, PlanProgress) tuples.
    """
    id_width = max([len(p.id or "") for p, _ in rows] + [len("ID")])
    id_width = min(id_width, constants.MAX_TABLE_COLUMN_WIDTH)

    header = (
        f"{'ID':<{id_width}}  {'Status':<10}  {'Progress':>8}  "
        f"{'Remaining':>16}  {'Next payout':<11}  Note"
    )
    click.echo(header)
    click.echo("-" * len(header))

    for plan, progress in rows:
        next_date = progress.next_pending_date.isoformat() if progress.next_pending_date else "-"
        notes = []
        if progress.event_type is not None and progress.event_type.value != "scheduled":
            notes.append(progress.event_type.value.replace("_", " "))
        if progress.expiring_soon:
            notes.append("final payout")
        click.echo(
            f"{(plan.id or '')[:id_width]:<{id_width}}  {plan.status.value:<10}  "
            f"{progress.progress_percent:>7}%  "
            f"{currency} {progress.amount_remaining:>12,.2f}  {next_date:<11}  {', '.join(notes)}"
        )

    click.echo(f"\nTotal: {len(rows)} plans")


def print_status_json(rows: list) -> None:
    """Print progress for several plans as JSON."""
    output = []
    for plan, progress in rows:
        output.append(
            {
                "id": plan.id,
                "status": plan.status.value,
                "progress_percent": progress.progress_percent,
                "amount_disbursed": f"{progress.amount_disbursed:.2f}",
                "amount_remaining": f"{progress.amount_remaining:.2f}",
                "installments_remaining": progress.installments_remaining,
                "next_pending_date": (
                    progress.next_pending_date.isoformat() if progress.next_pending_date else None
                ),
                "days_until_next": progress.days_until_next,
                "expiring_soon": progress.expiring_soon,
                "event_type": progress.event_type.value if progress.event_type else None,
            }
        )
    click.echo(json.dumps(output, indent=2))
