"""Pydantic schema models for payout plans and engine configuration."""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import constants
from .types import Frequency, PlanStatus


class DurationOption(BaseModel):
    """A duration preset offered for a frequency."""

    model_config = ConfigDict(frozen=True)

    installment_count: int = Field(..., description="Number of installments")
    label: str = Field(..., description="Calendar label, e.g. '1 Year'")
    description: str = Field(..., description="e.g. '12 monthly payments'")

    @field_validator("installment_count")
    @classmethod
    def validate_installment_count(cls, v: int) -> int:
        """Ensure at least one installment."""
        if v < constants.MIN_INSTALLMENTS:
            raise ValueError("installment_count must be at least 1")
        return v


class PlanRequest(BaseModel):
    """Immutable input collected by the UI before a plan is built.

    Amount and duration checks are left to the catalog and allocator so
    that they surface as typed engine errors rather than ValidationError.
    """

    model_config = ConfigDict(frozen=True)

    total_amount: Decimal = Field(..., description="Sum locked into the plan")
    frequency: Frequency = Field(..., description="Payout cadence")
    day_of_week: Optional[int] = Field(None, description="0 = Sunday .. 6 = Saturday")
    custom_dates: list[date] = Field(default_factory=list, description="Dates for custom plans")
    installment_count: Optional[int] = Field(None, description="Selected duration")
    payout_amount: Optional[Decimal] = Field(
        None, description="Per-installment override; recomputes the installment count"
    )
    name: Optional[str] = Field(None, description="Plan name")
    emergency_withdrawal_enabled: bool = Field(False, description="Allow early release")


class PayoutPlan(BaseModel):
    """A scheduled series of disbursements from a locked total.

    Instances are immutable; the state machine returns updated copies.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(None, description="Plan identifier (assigned by storage)")
    user_id: Optional[str] = Field(None, description="Owning user")
    name: Optional[str] = Field(None, description="Plan name")
    total_amount: Decimal = Field(..., description="Sum locked into the plan")
    frequency: Frequency = Field(..., description="Payout cadence")
    day_of_week: Optional[int] = Field(None, description="0 = Sunday .. 6 = Saturday")
    installment_count: int = Field(..., description="Number of installments")
    payout_amount: Decimal = Field(..., description="Amount per installment")
    payout_amount_overridden: bool = Field(
        False, description="Installment count was derived from a user payout amount"
    )
    schedule: list[date] = Field(..., description="Disbursement dates, strictly increasing")
    completed_installments: int = Field(0, description="Installments already disbursed")
    next_payout_date: Optional[date] = Field(None, description="Next pending disbursement")
    status: PlanStatus = Field(PlanStatus.DRAFT, description="Lifecycle state")
    emergency_withdrawal_enabled: bool = Field(False, description="Allow early release")
    created_on: date = Field(..., description="Date the plan was built")
    source_file: Optional[Path] = Field(
        None,
        exclude=True,
        description="Source file path (populated during loading, not from YAML)",
    )

    @field_validator("total_amount")
    @classmethod
    def validate_total_amount(cls, v: Decimal) -> Decimal:
        """Ensure total_amount is positive."""
        if v <= 0:
            raise ValueError("total_amount must be positive")
        return v

    @field_validator("installment_count")
    @classmethod
    def validate_installment_count(cls, v: int) -> int:
        """Ensure at least one installment."""
        if v < constants.MIN_INSTALLMENTS:
            raise ValueError("installment_count must be at least 1")
        return v

    @field_validator("day_of_week")
    @classmethod
    def validate_day_of_week(cls, v: Optional[int]) -> Optional[int]:
        """Ensure day_of_week is in valid range."""
        if v is not None and not constants.MIN_DAY_OF_WEEK <= v <= constants.MAX_DAY_OF_WEEK:
            msg = (
                f"day_of_week must be between {constants.MIN_DAY_OF_WEEK} "
                f"and {constants.MAX_DAY_OF_WEEK}"
            )
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> "PayoutPlan":
        """Enforce schedule shape and the status/progress invariants."""
        if self.frequency == Frequency.WEEKLY_SPECIFIC and self.day_of_week is None:
            raise ValueError("day_of_week is required for weekly_specific plans")

        if len(self.schedule) != self.installment_count:
            raise ValueError(
                f"schedule has {len(self.schedule)} dates, "
                f"expected installment_count={self.installment_count}"
            )

        for previous, current in zip(self.schedule, self.schedule[1:]):
            if current <= previous:
                raise ValueError(f"schedule must be strictly increasing ({previous} >= {current})")

        if not 0 <= self.completed_installments <= self.installment_count:
            raise ValueError(
                f"completed_installments must be between 0 and {self.installment_count}"
            )

        is_done = self.completed_installments == self.installment_count
        if is_done != (self.status == PlanStatus.COMPLETED):
            raise ValueError(
                "status must be 'completed' exactly when all installments are completed"
            )
        return self

    @property
    def start_date(self) -> date:
        """First scheduled disbursement."""
        return self.schedule[0]


class EngineConfig(BaseModel):
    """Global configuration for payoutschedule."""

    currency: str = Field(constants.DEFAULT_CURRENCY, description="Display currency")
    expiry_threshold_days: int = Field(
        constants.DEFAULT_EXPIRY_THRESHOLD_DAYS,
        description="Days before the final payout that trigger an expiry reminder",
    )
    due_soon_days: int = Field(
        constants.DEFAULT_DUE_SOON_DAYS,
        description="Days ahead at which a payout is shown as due soon",
    )
    upcoming_window_days: int = Field(
        constants.DEFAULT_UPCOMING_WINDOW_DAYS,
        description="Window used for upcoming payout totals",
    )
    absorb_rounding_remainder: bool = Field(
        True,
        description="Last installment absorbs the rounding difference of an even split",
    )

    @field_validator("expiry_threshold_days", "due_soon_days", "upcoming_window_days")
    @classmethod
    def validate_non_negative_days(cls, v: int) -> int:
        """Ensure day thresholds are not negative."""
        if v < 0:
            raise ValueError("day thresholds must be non-negative")
        return v


class PlanFile(BaseModel):
    """Root plan file structure."""

    version: str = Field(constants.PLAN_FILE_VERSION, description="Plan file format version")
    plans: list[PayoutPlan] = Field(default_factory=list, description="List of plans")
    config: EngineConfig = Field(default_factory=EngineConfig, description="Global configuration")
