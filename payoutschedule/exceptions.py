"""Typed failures raised by the payout schedule engine.

All errors are local and recoverable. They subclass ValueError so callers
that only care about "bad input" can keep catching that.
"""


class PayoutScheduleError(ValueError):
    """Base exception for the payout schedule engine."""

    code = "payout_schedule_error"


class InvalidFrequencyConfig(PayoutScheduleError):
    """Frequency is missing its auxiliary data (day of week, custom dates)."""

    code = "invalid_frequency_config"


class InvalidDuration(PayoutScheduleError):
    """Installment count or duration is below one."""

    code = "invalid_duration"


class InvalidAllocation(PayoutScheduleError):
    """Amounts cannot be split into at least one installment."""

    code = "invalid_allocation"


class InvalidTransition(PayoutScheduleError):
    """Plan state machine guard violation."""

    code = "invalid_transition"


class PlanNotActive(InvalidTransition):
    """Installment completion attempted on a plan that is not active."""

    code = "plan_not_active"
