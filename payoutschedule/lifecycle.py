"""Plan state machine: lifecycle transitions and installment completion.

Transitions are pure: each takes a PayoutPlan and returns an updated copy,
or raises a typed failure. Nothing is retried here.

    draft --activate--> active --pause--> paused --resume--> active
    active --(last installment)--> completed
    draft | active | paused --cancel--> cancelled
"""

import logging
from datetime import date
from typing import Optional

from .exceptions import InvalidTransition, PlanNotActive
from .ports import NotificationHooks, NullHooks
from .schema import PayoutPlan
from .types import PlanStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[PlanStatus, frozenset[PlanStatus]] = {
    PlanStatus.DRAFT: frozenset({PlanStatus.ACTIVE, PlanStatus.CANCELLED}),
    PlanStatus.ACTIVE: frozenset({PlanStatus.PAUSED, PlanStatus.COMPLETED, PlanStatus.CANCELLED}),
    PlanStatus.PAUSED: frozenset({PlanStatus.ACTIVE, PlanStatus.CANCELLED}),
    PlanStatus.COMPLETED: frozenset(),
    PlanStatus.CANCELLED: frozenset(),
}


def can_transition(current: PlanStatus, target: PlanStatus) -> bool:
    """Return True if the state machine allows moving from current to target."""
    return target in ALLOWED_TRANSITIONS[current]


def _require(plan: PayoutPlan, target: PlanStatus) -> None:
    if not can_transition(plan.status, target):
        raise InvalidTransition(
            f"cannot move plan {plan.id or '<new>'} from {plan.status.value} to {target.value}"
        )


class PlanStateMachine:
    """Governs runtime transitions of payout plans."""

    def __init__(self, hooks: Optional[NotificationHooks] = None):
        self.hooks = hooks or NullHooks()

    def activate(self, plan: PayoutPlan) -> PayoutPlan:
        """Confirm a draft plan."""
        if plan.status != PlanStatus.DRAFT:
            raise InvalidTransition(f"only draft plans can be activated, got {plan.status.value}")
        if not plan.schedule:
            raise InvalidTransition("cannot activate a plan with an empty schedule")
        if plan.total_amount <= 0:
            raise InvalidTransition("cannot activate a plan without a positive total")

        logger.debug("Activating plan %s, first payout %s", plan.id, plan.schedule[0])
        return plan.model_copy(
            update={"status": PlanStatus.ACTIVE, "next_payout_date": plan.schedule[0]}
        )

    def pause(self, plan: PayoutPlan) -> PayoutPlan:
        """Stop advancing an active plan. Schedule and progress are kept."""
        if plan.status != PlanStatus.ACTIVE:
            raise InvalidTransition(f"only active plans can be paused, got {plan.status.value}")

        logger.debug("Pausing plan %s at %d installments", plan.id, plan.completed_installments)
        return plan.model_copy(update={"status": PlanStatus.PAUSED})

    def resume(self, plan: PayoutPlan, now: date) -> PayoutPlan:
        """
        Reactivate a paused plan.

        The schedule is not shifted by the paused duration. The next payout
        becomes the soonest unconsumed scheduled date on or after now; when
        every remaining date has already passed, the oldest unconsumed one
        (now overdue) is used.
        """
        if plan.status != PlanStatus.PAUSED:
            raise InvalidTransition(f"only paused plans can be resumed, got {plan.status.value}")

        remaining = plan.schedule[plan.completed_installments :]
        next_date = next((d for d in remaining if d >= now), remaining[0])

        logger.debug("Resuming plan %s on %s, next payout %s", plan.id, now, next_date)
        return plan.model_copy(update={"status": PlanStatus.ACTIVE, "next_payout_date": next_date})

    def cancel(self, plan: PayoutPlan) -> PayoutPlan:
        """Cancel a plan that has not finished. Cancelled is terminal."""
        _require(plan, PlanStatus.CANCELLED)

        logger.debug("Cancelling plan %s from %s", plan.id, plan.status.value)
        return plan.model_copy(update={"status": PlanStatus.CANCELLED, "next_payout_date": None})

    def complete_installment(
        self,
        plan: PayoutPlan,
        installment_number: Optional[int] = None,
    ) -> PayoutPlan:
        """
        Record one successful disbursement.

        Args:
            plan: Plan receiving the disbursement
            installment_number: Optional 1-based number of the installment
                being recorded. A number already applied returns the plan
                unchanged so a caller can retry after a timeout.

        Returns:
            Updated plan; completed once the last installment is recorded

        Raises:
            PlanNotActive: If the plan is not active
            InvalidTransition: If installment_number is below 1 or skips ahead
        """
        if installment_number is not None and installment_number < 1:
            raise InvalidTransition(
                f"installment_number must be at least 1, got {installment_number}"
            )

        if installment_number is not None and installment_number <= plan.completed_installments:
            logger.debug(
                "Installment %d of plan %s already recorded",
                installment_number,
                plan.id,
            )
            return plan

        if plan.status != PlanStatus.ACTIVE:
            raise PlanNotActive(
                f"cannot complete an installment of plan {plan.id or '<new>'} "
                f"while {plan.status.value}"
            )

        completed = plan.completed_installments + 1
        if installment_number is not None and installment_number != completed:
            raise InvalidTransition(
                f"expected installment {completed}, got {installment_number}"
            )

        if completed == plan.installment_count:
            update = {
                "completed_installments": completed,
                "status": PlanStatus.COMPLETED,
                "next_payout_date": None,
            }
            logger.info("Plan %s completed after %d installments", plan.id, completed)
        else:
            next_date = following_payout_date(plan, completed)
            update = {
                "completed_installments": completed,
                "next_payout_date": next_date,
            }
            logger.debug(
                "Plan %s installment %d/%d recorded, next payout %s",
                plan.id,
                completed,
                plan.installment_count,
                next_date,
            )

        updated = plan.model_copy(update=update)
        self.hooks.on_installment_completed(updated)
        return updated


def following_payout_date(plan: PayoutPlan, completed: int) -> date:
    """
    Next payout date once `completed` installments have been disbursed.

    The stored next date never moves backwards. After a resume has skipped
    past dates, it is the first unconsumed date later than the current next
    payout; when no such date is left, the owed installments stay due on
    the current next payout.
    """
    current = plan.next_payout_date
    if current is None:
        return plan.schedule[completed]
    return next((d for d in plan.schedule[completed:] if d > current), current)
