"""Recurrence engine for generating payout disbursement dates."""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, MONTHLY, WEEKLY, rrule

from . import catalog, constants
from .exceptions import InvalidDuration
from .types import DAY_OF_WEEK_TO_WEEKDAY, Frequency

logger = logging.getLogger(__name__)

_MONTH_STEPS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: constants.MONTHS_PER_QUARTER,
    Frequency.BIANNUAL: constants.MONTHS_PER_HALF_YEAR,
    Frequency.ANNUALLY: constants.MONTHS_PER_YEAR,
}


class RecurrenceEngine:
    """Engine for generating the ordered disbursement dates of a plan."""

    def generate(
        self,
        frequency: Frequency,
        start_reference: date,
        installment_count: int,
        day_of_week: Optional[int] = None,
        custom_dates: Optional[Sequence[date]] = None,
    ) -> list[date]:
        """
        Generate the disbursement dates for a plan.

        Args:
            frequency: Payout cadence
            start_reference: Date the plan is built on (usually clock.now())
            installment_count: Number of dates to produce
            day_of_week: Weekday for weekly_specific (0 = Sunday)
            custom_dates: Explicit dates for custom plans

        Returns:
            Strictly increasing list of installment_count dates

        Raises:
            InvalidFrequencyConfig: Missing day_of_week or custom dates
            InvalidDuration: installment_count below 1, or not matching the
                number of distinct custom dates
        """
        catalog.validate(frequency, day_of_week, custom_dates)

        if installment_count < constants.MIN_INSTALLMENTS:
            raise InvalidDuration(f"installment_count must be at least 1, got {installment_count}")

        if frequency == Frequency.CUSTOM:
            dates = self._generate_custom(custom_dates or [])
            if len(dates) != installment_count:
                raise InvalidDuration(
                    f"custom plan has {len(dates)} distinct dates, "
                    f"expected installment_count={installment_count}"
                )
        elif frequency == Frequency.DAILY:
            dates = self._generate_daily(start_reference, installment_count)
        elif frequency == Frequency.WEEKLY:
            dates = self._generate_weekly(start_reference, installment_count)
        elif frequency == Frequency.WEEKLY_SPECIFIC:
            dates = self._generate_weekly_specific(start_reference, installment_count, day_of_week)
        elif frequency == Frequency.BIWEEKLY:
            dates = self._generate_weekly(
                start_reference, installment_count, interval=constants.BIWEEKLY_INTERVAL
            )
        elif frequency == Frequency.END_OF_MONTH:
            dates = self._generate_end_of_month(start_reference, installment_count)
        else:
            dates = self._generate_month_steps(
                start_reference, installment_count, _MONTH_STEPS[frequency]
            )

        logger.debug(
            "Generated %d %s dates from %s: %s .. %s",
            len(dates),
            frequency.value,
            start_reference,
            dates[0],
            dates[-1],
        )
        return dates

    def _generate_custom(self, custom_dates: Sequence[date]) -> list[date]:
        """Sort custom dates ascending, dropping repeats."""
        unique = sorted(set(custom_dates))
        if len(unique) != len(custom_dates):
            logger.warning(
                "Dropped %d duplicate custom dates",
                len(custom_dates) - len(unique),
            )
        return unique

    def _generate_daily(self, start_reference: date, count: int) -> list[date]:
        """Generate one date per day starting on start_reference."""
        return [
            d.date()
            for d in rrule(
                DAILY,
                dtstart=datetime.combine(start_reference, datetime.min.time()),
                count=count,
            )
        ]

    def _generate_weekly(self, start_reference: date, count: int, interval: int = 1) -> list[date]:
        """Generate dates every `interval` weeks starting on start_reference."""
        return [
            d.date()
            for d in rrule(
                WEEKLY,
                interval=interval,
                dtstart=datetime.combine(start_reference, datetime.min.time()),
                count=count,
            )
        ]

    def _generate_weekly_specific(
        self,
        start_reference: date,
        count: int,
        day_of_week: int,
    ) -> list[date]:
        """
        Generate weekly dates on a fixed weekday.

        The first date is the next occurrence of the weekday on or after
        start_reference, so a plan built on that weekday starts the same day.
        """
        return [
            d.date()
            for d in rrule(
                WEEKLY,
                dtstart=datetime.combine(start_reference, datetime.min.time()),
                byweekday=DAY_OF_WEEK_TO_WEEKDAY[day_of_week],
                count=count,
            )
        ]

    def _generate_end_of_month(self, start_reference: date, count: int) -> list[date]:
        """Generate the last day of each month, starting with start_reference's month."""
        return [
            d.date()
            for d in rrule(
                MONTHLY,
                dtstart=datetime.combine(start_reference, datetime.min.time()),
                bymonthday=constants.LAST_DAY_OF_MONTH_INDICATOR,
                count=count,
            )
        ]

    def _generate_month_steps(
        self,
        start_reference: date,
        count: int,
        months: int,
    ) -> list[date]:
        """
        Generate dates every `months` calendar months.

        Each date is measured from the start anchor, so the day of month
        clamps to short months without drifting (Jan 31 -> Feb 29 -> Mar 31).
        """
        dates: list[date] = []
        for k in range(count):
            append_strictly_increasing(dates, start_reference + relativedelta(months=k * months))
        return dates


def append_strictly_increasing(dates: list[date], candidate: date) -> None:
    """
    Append candidate, skipping forward past the previous date on collision.

    Month-end clamping can in principle map two steps onto the same or an
    earlier day; the sequence must stay strictly increasing.
    """
    if dates and candidate <= dates[-1]:
        skipped = dates[-1] + timedelta(days=1)
        logger.debug("Clamped date %s collides with %s, using %s", candidate, dates[-1], skipped)
        candidate = skipped
    dates.append(candidate)
