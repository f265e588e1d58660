"""Tests for building draft plans from requests."""

from datetime import date
from decimal import Decimal

import pytest

from payoutschedule.clock import FixedClock
from payoutschedule.exceptions import InvalidAllocation, InvalidDuration, InvalidFrequencyConfig
from payoutschedule.planner import build_plan, resolve_installment_count
from payoutschedule.types import Frequency, PlanStatus

from tests.conftest import make_request


class TestBuildPlan:
    """Tests for build_plan."""

    def test_monthly_year_split(self, clock):
        """Scenario A: 120000 monthly over 12 installments."""
        plan = build_plan(make_request(installment_count=12), clock)

        assert plan.payout_amount == Decimal("10000.00")
        assert plan.installment_count == 12
        assert len(plan.schedule) == 12
        assert plan.start_date == date(2025, 1, 15)
        assert plan.schedule[-1] == date(2025, 12, 15)
        assert plan.status == PlanStatus.DRAFT
        assert plan.created_on == date(2025, 1, 15)

    def test_weekly_specific_same_day(self, clock):
        """Scenario B: Wednesday plan built on a Wednesday starts that day."""
        plan = build_plan(
            make_request(frequency=Frequency.WEEKLY_SPECIFIC, day_of_week=3, installment_count=4),
            clock,
        )

        assert plan.start_date == date(2025, 1, 15)
        assert plan.day_of_week == 3

    def test_custom_dates_sorted(self, clock):
        """Scenario C: custom dates come back in ascending order."""
        plan = build_plan(
            make_request(
                total_amount=Decimal("9000"),
                frequency=Frequency.CUSTOM,
                custom_dates=[date(2025, 3, 1), date(2025, 1, 15), date(2025, 2, 10)],
            ),
            clock,
        )

        assert plan.schedule == [date(2025, 1, 15), date(2025, 2, 10), date(2025, 3, 1)]
        assert plan.installment_count == 3
        assert plan.payout_amount == Decimal("3000.00")

    def test_default_duration_is_longest(self, clock):
        plan = build_plan(make_request(frequency=Frequency.BIWEEKLY), clock)
        assert plan.installment_count == 26

    def test_payout_amount_override_recomputes_count(self, clock):
        plan = build_plan(
            make_request(total_amount=Decimal("1000"), payout_amount=Decimal("300")),
            clock,
        )

        assert plan.installment_count == 3
        assert plan.payout_amount == Decimal("300")
        assert plan.payout_amount_overridden is True

    def test_single_installment(self, clock):
        plan = build_plan(make_request(installment_count=1), clock)

        assert plan.schedule == [plan.start_date]
        assert plan.payout_amount == Decimal("120000.00")

    def test_day_of_week_dropped_for_other_frequencies(self, clock):
        plan = build_plan(make_request(day_of_week=3, installment_count=3), clock)
        assert plan.day_of_week is None

    def test_emergency_withdrawal_flag_kept(self, clock):
        plan = build_plan(make_request(emergency_withdrawal_enabled=True), clock)
        assert plan.emergency_withdrawal_enabled is True

    def test_uses_injected_clock(self):
        plan = build_plan(make_request(installment_count=2), FixedClock(date(2030, 6, 1)))
        assert plan.schedule == [date(2030, 6, 1), date(2030, 7, 1)]


class TestBuildPlanRejects:
    """Malformed requests are rejected before any date is generated."""

    def test_missing_day_of_week(self, clock):
        with pytest.raises(InvalidFrequencyConfig):
            build_plan(make_request(frequency=Frequency.WEEKLY_SPECIFIC), clock)

    def test_empty_custom_dates(self, clock):
        with pytest.raises(InvalidFrequencyConfig):
            build_plan(make_request(frequency=Frequency.CUSTOM), clock)

    def test_non_positive_total(self, clock):
        with pytest.raises(InvalidAllocation):
            build_plan(make_request(total_amount=Decimal("0")), clock)

    def test_zero_installments(self, clock):
        with pytest.raises(InvalidDuration):
            build_plan(make_request(installment_count=0), clock)

    def test_payout_amount_above_total(self, clock):
        with pytest.raises(InvalidAllocation):
            build_plan(
                make_request(total_amount=Decimal("100"), payout_amount=Decimal("150")), clock
            )

    def test_custom_count_mismatch(self, clock):
        with pytest.raises(InvalidDuration):
            build_plan(
                make_request(
                    frequency=Frequency.CUSTOM,
                    custom_dates=[date(2025, 2, 1)],
                    installment_count=2,
                ),
                clock,
            )


class TestResolveInstallmentCount:
    """Tests for installment count resolution."""

    def test_explicit_count(self):
        assert resolve_installment_count(make_request(installment_count=6)) == 6

    def test_custom_counts_distinct_dates(self):
        request = make_request(
            frequency=Frequency.CUSTOM,
            custom_dates=[date(2025, 2, 1), date(2025, 2, 1), date(2025, 3, 1)],
        )
        assert resolve_installment_count(request) == 2
