"""Payoutschedule - schedule engine for recurring payout plans.

A user locks a total sum and receives it back in installments on a chosen
cadence. This package derives the per-installment amount, the disbursement
dates and the plan lifecycle, with no I/O of its own.

Main exports:
    build_plan: Turn a PlanRequest into a draft PayoutPlan
    PlanStateMachine: Activate, pause, resume, cancel and complete plans
    RecurrenceEngine: Generate disbursement dates
"""

from .lifecycle import PlanStateMachine
from .planner import build_plan
from .recurrence import RecurrenceEngine
from .schema import EngineConfig, PayoutPlan, PlanRequest
from .types import Frequency, PlanStatus

__all__ = [
    "EngineConfig",
    "Frequency",
    "PayoutPlan",
    "PlanRequest",
    "PlanStateMachine",
    "PlanStatus",
    "RecurrenceEngine",
    "build_plan",
]
__version__ = "1.0.0"
