"""Pytest configuration and shared fixtures for payoutschedule tests."""

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from payoutschedule.clock import FixedClock
from payoutschedule.lifecycle import PlanStateMachine
from payoutschedule.recurrence import RecurrenceEngine
from payoutschedule.schema import PayoutPlan, PlanRequest
from payoutschedule.types import Frequency, PlanStatus

# ============================================================================
# Plan Builders
# ============================================================================


def make_request(
    total_amount: Decimal = Decimal("120000"),
    frequency: Frequency = Frequency.MONTHLY,
    **kwargs,
) -> PlanRequest:
    """Create a PlanRequest with sensible defaults."""
    return PlanRequest(total_amount=total_amount, frequency=frequency, **kwargs)


def make_plan(
    total_amount: Decimal = Decimal("100"),
    installment_count: int = 4,
    frequency: Frequency = Frequency.MONTHLY,
    start: date = date(2025, 1, 1),
    status: PlanStatus = PlanStatus.DRAFT,
    completed_installments: int = 0,
    next_payout_date: Optional[date] = None,
    **kwargs,
) -> PayoutPlan:
    """Create a PayoutPlan directly, with a generated schedule."""
    schedule = RecurrenceEngine().generate(
        frequency,
        start,
        installment_count,
        day_of_week=kwargs.get("day_of_week"),
        custom_dates=kwargs.pop("custom_dates", None),
    )
    payout_amount = kwargs.pop(
        "payout_amount",
        (total_amount / installment_count).quantize(Decimal("0.01")),
    )
    return PayoutPlan(
        total_amount=total_amount,
        frequency=frequency,
        installment_count=installment_count,
        payout_amount=payout_amount,
        schedule=schedule,
        status=status,
        completed_installments=completed_installments,
        next_payout_date=next_payout_date,
        created_on=start,
        **kwargs,
    )


def activate(plan: PayoutPlan) -> PayoutPlan:
    """Return an activated copy of a draft plan."""
    return PlanStateMachine().activate(plan)


# ============================================================================
# Collaborator Fakes
# ============================================================================


class RecordingHooks:
    """NotificationHooks that remember every call."""

    def __init__(self):
        self.completed: list[PayoutPlan] = []
        self.expiring: list[PayoutPlan] = []

    def on_installment_completed(self, plan: PayoutPlan) -> None:
        self.completed.append(plan)

    def on_plan_expiring_soon(self, plan: PayoutPlan) -> None:
        self.expiring.append(plan)


class InMemoryRepository:
    """PlanRepository keeping plans in a dict."""

    def __init__(self):
        self.plans: dict[str, PayoutPlan] = {}
        self.calls: list[tuple] = []

    def create_plan(self, plan: PayoutPlan) -> str:
        plan_id = f"plan-{len(self.plans) + 1}"
        self.plans[plan_id] = plan.model_copy(update={"id": plan_id})
        self.calls.append(("create_plan", plan_id))
        return plan_id

    def get_plan(self, plan_id: str) -> Optional[PayoutPlan]:
        return self.plans.get(plan_id)

    def update_plan_status(self, plan_id: str, status: PlanStatus) -> None:
        self.plans[plan_id] = self.plans[plan_id].model_copy(update={"status": status})
        self.calls.append(("update_plan_status", plan_id, status))

    def increment_completed(self, plan_id: str) -> None:
        plan = self.plans[plan_id]
        self.plans[plan_id] = plan.model_copy(
            update={"completed_installments": plan.completed_installments + 1}
        )
        self.calls.append(("increment_completed", plan_id))

    def update_next_payout_date(self, plan_id: str, next_payout_date: Optional[date]) -> None:
        self.plans[plan_id] = self.plans[plan_id].model_copy(
            update={"next_payout_date": next_payout_date}
        )
        self.calls.append(("update_next_payout_date", plan_id, next_payout_date))

    def fetch_plans(self, user_id: str) -> list[PayoutPlan]:
        return [p for p in self.plans.values() if p.user_id == user_id]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock():
    """Clock pinned to Wednesday 2025-01-15."""
    return FixedClock(date(2025, 1, 15))


@pytest.fixture
def engine():
    return RecurrenceEngine()


@pytest.fixture
def state_machine():
    return PlanStateMachine()


@pytest.fixture
def hooks():
    return RecordingHooks()


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def sample_plan():
    """Factory fixture for PayoutPlan objects."""
    return make_plan


@pytest.fixture
def active_plan():
    """Active monthly plan: 4 x 25.00 from 2025-01-01."""
    return activate(make_plan())
