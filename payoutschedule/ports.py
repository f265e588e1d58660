"""Boundary contracts implemented by collaborators outside the engine."""

from datetime import date
from typing import Optional, Protocol

from .schema import PayoutPlan
from .types import PlanStatus


class PlanRepository(Protocol):
    """
    Storage of payout plans.

    Implementations must serialise mutations per plan (row transaction or
    optimistic version check); the engine assumes one in-flight mutation
    per plan.
    """

    def create_plan(self, plan: PayoutPlan) -> str:
        """Persist a new plan and return its id."""

    def get_plan(self, plan_id: str) -> Optional[PayoutPlan]:
        """Return a plan by id, or None if unknown."""

    def update_plan_status(self, plan_id: str, status: PlanStatus) -> None:
        """Store a new lifecycle status."""

    def increment_completed(self, plan_id: str) -> None:
        """Record one more completed installment."""

    def update_next_payout_date(self, plan_id: str, next_payout_date: Optional[date]) -> None:
        """Store the next pending disbursement date."""

    def fetch_plans(self, user_id: str) -> list[PayoutPlan]:
        """Return all plans of a user, newest first."""


class NotificationHooks(Protocol):
    """Hook points for the email/push collaborator, which owns delivery."""

    def on_installment_completed(self, plan: PayoutPlan) -> None:
        """Called after an installment has been recorded."""

    def on_plan_expiring_soon(self, plan: PayoutPlan) -> None:
        """Called when the final installment of a plan is near."""


class NullHooks:
    """Hooks that do nothing."""

    def on_installment_completed(self, plan: PayoutPlan) -> None:
        pass

    def on_plan_expiring_soon(self, plan: PayoutPlan) -> None:
        pass
