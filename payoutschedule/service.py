"""Use-case layer wiring the engine to storage, clock and notifications."""

import logging
from typing import Optional

from .clock import Clock, SystemClock
from .exceptions import PayoutScheduleError
from .lifecycle import PlanStateMachine
from .planner import build_plan
from .ports import NotificationHooks, NullHooks, PlanRepository
from .reporting import notify_expiring
from .schema import EngineConfig, PayoutPlan, PlanRequest

logger = logging.getLogger(__name__)


class PlanService:
    """
    Apply engine transitions and persist their effect.

    Failures are logged and re-raised for the caller to surface; nothing is
    retried here.
    """

    def __init__(
        self,
        repository: PlanRepository,
        clock: Optional[Clock] = None,
        hooks: Optional[NotificationHooks] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.hooks = hooks or NullHooks()
        self.config = config or EngineConfig()
        # Hooks fire from here once storage has accepted the change.
        self.state_machine = PlanStateMachine()

    def _load(self, plan_id: str) -> PayoutPlan:
        plan = self.repository.get_plan(plan_id)
        if plan is None:
            raise KeyError(f"unknown plan: {plan_id}")
        return plan

    def create(self, request: PlanRequest, user_id: Optional[str] = None) -> PayoutPlan:
        """Build a draft plan, persist it and return it with its id."""
        try:
            plan = build_plan(request, self.clock)
        except PayoutScheduleError as e:
            logger.warning("Rejected plan request (%s): %s", e.code, e)
            raise

        plan = plan.model_copy(update={"user_id": user_id})
        plan_id = self.repository.create_plan(plan)
        logger.info("Created plan %s for user %s", plan_id, user_id)
        return plan.model_copy(update={"id": plan_id})

    def _transition(self, plan_id: str, action: str) -> PayoutPlan:
        plan = self._load(plan_id)
        try:
            if action == "resume":
                updated = self.state_machine.resume(plan, self.clock.now())
            else:
                updated = getattr(self.state_machine, action)(plan)
        except PayoutScheduleError as e:
            logger.warning("Cannot %s plan %s (%s): %s", action, plan_id, e.code, e)
            raise

        self.repository.update_plan_status(plan_id, updated.status)
        if updated.next_payout_date != plan.next_payout_date:
            self.repository.update_next_payout_date(plan_id, updated.next_payout_date)
        return updated

    def activate(self, plan_id: str) -> PayoutPlan:
        return self._transition(plan_id, "activate")

    def pause(self, plan_id: str) -> PayoutPlan:
        return self._transition(plan_id, "pause")

    def resume(self, plan_id: str) -> PayoutPlan:
        return self._transition(plan_id, "resume")

    def cancel(self, plan_id: str) -> PayoutPlan:
        return self._transition(plan_id, "cancel")

    def record_disbursement(
        self,
        plan_id: str,
        installment_number: Optional[int] = None,
    ) -> PayoutPlan:
        """
        Record a successful disbursement.

        Passing installment_number makes a retried call a no-op.
        The completion hook fires only after every repository write succeeds.
        """
        plan = self._load(plan_id)
        try:
            updated = self.state_machine.complete_installment(plan, installment_number)
        except PayoutScheduleError as e:
            logger.warning("Cannot record disbursement for plan %s (%s): %s", plan_id, e.code, e)
            raise

        if updated.completed_installments == plan.completed_installments:
            return updated

        self.repository.increment_completed(plan_id)
        if updated.status != plan.status:
            self.repository.update_plan_status(plan_id, updated.status)
        self.repository.update_next_payout_date(plan_id, updated.next_payout_date)
        self.hooks.on_installment_completed(updated)
        return updated

    def sweep_expiring(self, user_id: str) -> list[PayoutPlan]:
        """Fire expiry reminders for a user's plans nearing their final payout."""
        plans = self.repository.fetch_plans(user_id)
        expiring = notify_expiring(
            plans,
            self.clock.now(),
            self.config.expiry_threshold_days,
            self.hooks,
        )
        if expiring:
            logger.info("%d plan(s) of user %s expiring soon", len(expiring), user_id)
        return expiring
