"""Progress and projection reporting derived from payout plans.

Every function is a pure derivation; "now" is always passed in.
"""

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Optional

from . import constants
from .allocation import installment_amounts
from .ports import NotificationHooks
from .schema import EngineConfig, PayoutPlan
from .types import PayoutEventType, PlanStatus

logger = logging.getLogger(__name__)


class PlanProgress(NamedTuple):
    """Display snapshot of a plan's progress."""

    progress_percent: int
    amount_disbursed: Decimal
    amount_remaining: Decimal
    installments_remaining: int
    next_pending_date: Optional[date]
    days_until_next: Optional[int]
    expiring_soon: bool
    event_type: Optional[PayoutEventType]


def progress_percent(plan: PayoutPlan) -> int:
    """Completed share of installments, as a whole percentage."""
    ratio = constants.ONE_HUNDRED * plan.completed_installments / plan.installment_count
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _absorbs(plan: PayoutPlan, absorb_remainder: bool) -> bool:
    # An overridden payout amount leaves its remainder unscheduled.
    return absorb_remainder and not plan.payout_amount_overridden


def amount_disbursed(plan: PayoutPlan, absorb_remainder: bool = True) -> Decimal:
    """
    Sum paid out so far.

    Equals ``completed * payout_amount`` until the final installment, which
    carries the rounding difference when absorb_remainder is on.
    """
    amounts = installment_amounts(
        plan.total_amount,
        plan.payout_amount,
        plan.installment_count,
        absorb_remainder=_absorbs(plan, absorb_remainder),
    )
    return sum(amounts[: plan.completed_installments], constants.ZERO_AMOUNT)


def amount_remaining(plan: PayoutPlan, absorb_remainder: bool = True) -> Decimal:
    """Total minus disbursed; avoids compounding per-installment rounding."""
    return plan.total_amount - amount_disbursed(plan, absorb_remainder)


def installments_remaining(plan: PayoutPlan) -> int:
    return plan.installment_count - plan.completed_installments


def next_pending_date(plan: PayoutPlan) -> Optional[date]:
    """Scheduled date of the first unconsumed installment."""
    if plan.completed_installments < plan.installment_count:
        return plan.schedule[plan.completed_installments]
    return None


def days_until_next(plan: PayoutPlan, now: date) -> Optional[int]:
    """Days from now to the next pending date (negative when overdue)."""
    next_date = next_pending_date(plan)
    if next_date is None:
        return None
    return (next_date - now).days


def is_expiring_soon(plan: PayoutPlan, threshold_days: int, now: date) -> bool:
    """True when an active plan has only its final installment left, due within threshold_days."""
    if plan.status != PlanStatus.ACTIVE:
        return False
    days = days_until_next(plan, now)
    if days is None:
        return False
    return installments_remaining(plan) == 1 and days <= threshold_days


def classify_next_payout(
    plan: PayoutPlan,
    now: date,
    due_soon_days: int = constants.DEFAULT_DUE_SOON_DAYS,
) -> Optional[PayoutEventType]:
    """
    Calendar classification of an active plan's stored next payout.

    Due in 1..due_soon_days days is due soon, a past date is overdue.
    Returns None for plans without a next payout.
    """
    if plan.status != PlanStatus.ACTIVE or plan.next_payout_date is None:
        return None

    days = (plan.next_payout_date - now).days
    if days < 0:
        return PayoutEventType.OVERDUE
    if 0 < days <= due_soon_days:
        return PayoutEventType.DUE_SOON
    return PayoutEventType.SCHEDULED


def upcoming_total(
    plans: Iterable[PayoutPlan],
    now: date,
    window_days: int = constants.DEFAULT_UPCOMING_WINDOW_DAYS,
    offset_days: int = 0,
) -> Decimal:
    """
    Sum of next payouts of active plans falling in a window.

    The window is half-open: it starts offset_days after now (inclusive)
    and ends window_days later (exclusive). With window 7 this gives "this
    week", and with offset 7 and window 7 "next week", without overlap.
    """
    window_start = now + timedelta(days=offset_days)
    window_end = window_start + timedelta(days=window_days)

    total = constants.ZERO_AMOUNT
    for plan in plans:
        if plan.status != PlanStatus.ACTIVE or plan.next_payout_date is None:
            continue
        payout_date = plan.next_payout_date
        if window_start <= payout_date < window_end:
            total += plan.payout_amount
    return total


def notify_expiring(
    plans: Iterable[PayoutPlan],
    now: date,
    threshold_days: int,
    hooks: NotificationHooks,
) -> list[PayoutPlan]:
    """Fire the expiry hook for each active plan about to finish."""
    expiring = [plan for plan in plans if is_expiring_soon(plan, threshold_days, now)]
    for plan in expiring:
        logger.debug("Plan %s expiring soon, next payout %s", plan.id, next_pending_date(plan))
        hooks.on_plan_expiring_soon(plan)
    return expiring


def summarize(plan: PayoutPlan, now: date, config: Optional[EngineConfig] = None) -> PlanProgress:
    """Collect every progress figure of a plan for display."""
    config = config or EngineConfig()
    return PlanProgress(
        progress_percent=progress_percent(plan),
        amount_disbursed=amount_disbursed(plan, config.absorb_rounding_remainder),
        amount_remaining=amount_remaining(plan, config.absorb_rounding_remainder),
        installments_remaining=installments_remaining(plan),
        next_pending_date=next_pending_date(plan),
        days_until_next=days_until_next(plan, now),
        expiring_soon=is_expiring_soon(plan, config.expiry_threshold_days, now),
        event_type=classify_next_payout(plan, now, config.due_soon_days),
    )
