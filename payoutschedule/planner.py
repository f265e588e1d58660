"""Build draft payout plans from validated UI input."""

import logging
from typing import Optional

from . import allocation, catalog
from .clock import Clock, SystemClock
from .exceptions import InvalidAllocation, InvalidDuration
from .recurrence import RecurrenceEngine
from .schema import PayoutPlan, PlanRequest
from .types import Frequency, PlanStatus

logger = logging.getLogger(__name__)


def resolve_installment_count(request: PlanRequest) -> int:
    """
    Decide how many installments a request asks for.

    A payout amount override wins over the selected duration; without
    either, the frequency's default (longest) duration is used. Custom plans
    always use their number of distinct dates.
    """
    if request.payout_amount is not None:
        return allocation.allocate_by_amount(request.total_amount, request.payout_amount)

    if request.frequency == Frequency.CUSTOM:
        distinct = len(set(request.custom_dates))
        if request.installment_count is not None and request.installment_count != distinct:
            raise InvalidDuration(
                f"custom plan has {distinct} distinct dates, "
                f"got installment_count={request.installment_count}"
            )
        return distinct

    if request.installment_count is None:
        return catalog.default_duration(request.frequency).installment_count

    if request.installment_count < 1:
        raise InvalidDuration(
            f"installment_count must be at least 1, got {request.installment_count}"
        )
    return request.installment_count


def build_plan(
    request: PlanRequest,
    clock: Optional[Clock] = None,
    engine: Optional[RecurrenceEngine] = None,
) -> PayoutPlan:
    """
    Validate a request and derive its draft plan.

    Args:
        request: UI input
        clock: Source of the creation date (defaults to the system clock)
        engine: Recurrence engine to use

    Returns:
        PayoutPlan in draft status

    Raises:
        InvalidFrequencyConfig, InvalidDuration, InvalidAllocation: On
            malformed input, before any date generation.
    """
    clock = clock or SystemClock()
    engine = engine or RecurrenceEngine()

    catalog.validate(request.frequency, request.day_of_week, request.custom_dates)
    if request.total_amount <= 0:
        raise InvalidAllocation(
            f"total_amount must be positive, got {request.total_amount}"
        )

    installment_count = resolve_installment_count(request)
    if request.payout_amount is not None:
        payout_amount = request.payout_amount
        if request.frequency == Frequency.CUSTOM and installment_count != len(
            set(request.custom_dates)
        ):
            raise InvalidDuration(
                f"payout amount {payout_amount} gives {installment_count} installments "
                f"but {len(set(request.custom_dates))} custom dates were picked"
            )
    else:
        payout_amount = allocation.allocate_by_count(request.total_amount, installment_count)

    created_on = clock.now()
    schedule = engine.generate(
        request.frequency,
        created_on,
        installment_count,
        day_of_week=request.day_of_week,
        custom_dates=request.custom_dates,
    )

    plan = PayoutPlan(
        name=request.name,
        total_amount=request.total_amount,
        frequency=request.frequency,
        day_of_week=(
            request.day_of_week if request.frequency == Frequency.WEEKLY_SPECIFIC else None
        ),
        installment_count=installment_count,
        payout_amount=payout_amount,
        payout_amount_overridden=request.payout_amount is not None,
        schedule=schedule,
        status=PlanStatus.DRAFT,
        emergency_withdrawal_enabled=request.emergency_withdrawal_enabled,
        created_on=created_on,
    )

    logger.info(
        "Built %s plan: %d x %s from %s",
        plan.frequency.value,
        plan.installment_count,
        plan.payout_amount,
        plan.start_date,
    )
    return plan
