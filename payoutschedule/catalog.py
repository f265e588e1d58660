"""Frequency catalog: duration presets and cadence rates per frequency."""

import logging
import math
from datetime import date
from fractions import Fraction
from typing import Optional, Sequence

from . import constants
from .exceptions import InvalidDuration, InvalidFrequencyConfig
from .schema import DurationOption
from .types import Frequency

logger = logging.getLogger(__name__)

# (installment_count, label) presets; descriptions are derived from the noun.
_PRESETS: dict[Frequency, tuple[tuple[int, str], ...]] = {
    Frequency.DAILY: ((7, "1 Week"), (14, "2 Weeks"), (30, "1 Month"), (90, "3 Months")),
    Frequency.WEEKLY: ((4, "1 Month"), (12, "3 Months"), (24, "6 Months"), (52, "1 Year")),
    Frequency.BIWEEKLY: ((2, "1 Month"), (6, "3 Months"), (12, "6 Months"), (26, "1 Year")),
    Frequency.MONTHLY: ((1, "1 Month"), (3, "3 Months"), (6, "6 Months"), (12, "1 Year")),
    Frequency.QUARTERLY: ((1, "3 Months"), (2, "6 Months"), (4, "1 Year"), (8, "2 Years")),
    Frequency.BIANNUAL: ((1, "6 Months"), (2, "1 Year"), (4, "2 Years"), (6, "3 Years")),
    Frequency.ANNUALLY: ((1, "1 Year"), (2, "2 Years"), (3, "3 Years"), (5, "5 Years")),
}
_PRESETS[Frequency.WEEKLY_SPECIFIC] = _PRESETS[Frequency.WEEKLY]
_PRESETS[Frequency.END_OF_MONTH] = _PRESETS[Frequency.MONTHLY]

_PAYMENT_NOUNS = {
    Frequency.DAILY: "daily",
    Frequency.WEEKLY: "weekly",
    Frequency.WEEKLY_SPECIFIC: "weekly",
    Frequency.BIWEEKLY: "bi-weekly",
    Frequency.MONTHLY: "monthly",
    Frequency.END_OF_MONTH: "monthly",
    Frequency.QUARTERLY: "quarterly",
    Frequency.BIANNUAL: "bi-annual",
    Frequency.ANNUALLY: "annual",
    Frequency.CUSTOM: "custom",
}

# Installments per calendar month
_RATES = {
    Frequency.DAILY: Fraction(constants.DAYS_PER_YEAR, constants.MONTHS_PER_YEAR),
    Frequency.WEEKLY: Fraction(constants.WEEKS_PER_YEAR, constants.MONTHS_PER_YEAR),
    Frequency.WEEKLY_SPECIFIC: Fraction(constants.WEEKS_PER_YEAR, constants.MONTHS_PER_YEAR),
    Frequency.BIWEEKLY: Fraction(
        constants.WEEKS_PER_YEAR // constants.BIWEEKLY_INTERVAL, constants.MONTHS_PER_YEAR
    ),
    Frequency.MONTHLY: Fraction(1),
    Frequency.END_OF_MONTH: Fraction(1),
    Frequency.QUARTERLY: Fraction(1, constants.MONTHS_PER_QUARTER),
    Frequency.BIANNUAL: Fraction(1, constants.MONTHS_PER_HALF_YEAR),
    Frequency.ANNUALLY: Fraction(1, constants.MONTHS_PER_YEAR),
}


def _describe(frequency: Frequency, count: int) -> str:
    noun = _PAYMENT_NOUNS[frequency]
    return f"{count} {noun} payment{'s' if count != 1 else ''}"


def duration_options(
    frequency: Frequency,
    custom_dates: Optional[Sequence[date]] = None,
) -> list[DurationOption]:
    """
    List the duration presets for a frequency, shortest first.

    Custom plans have exactly one option whose count is the number of
    distinct supplied dates (minimum 1, so an empty picker still renders).
    """
    if frequency == Frequency.CUSTOM:
        count = len(set(custom_dates or ())) or 1
        return [
            DurationOption(
                installment_count=count,
                label="Custom",
                description=_describe(frequency, count),
            )
        ]

    return [
        DurationOption(
            installment_count=count,
            label=label,
            description=_describe(frequency, count),
        )
        for count, label in _PRESETS[frequency]
    ]


def default_duration(
    frequency: Frequency,
    custom_dates: Optional[Sequence[date]] = None,
) -> DurationOption:
    """Return the preselected (longest) duration for a frequency."""
    return duration_options(frequency, custom_dates)[-1]


def find_duration(frequency: Frequency, installment_count: int) -> Optional[DurationOption]:
    """Return the preset matching an installment count, if there is one."""
    if frequency == Frequency.CUSTOM:
        return None
    return next(
        (o for o in duration_options(frequency) if o.installment_count == installment_count),
        None,
    )


def installments_per_calendar_unit(frequency: Frequency) -> Fraction:
    """
    Installments per calendar month for a frequency.

    Raises:
        InvalidFrequencyConfig: For custom schedules, which have no cadence.
    """
    if frequency == Frequency.CUSTOM:
        raise InvalidFrequencyConfig("custom schedules have no installment rate")
    return _RATES[frequency]


def installments_for_months(frequency: Frequency, months: int) -> int:
    """
    Convert a calendar duration into an installment count.

    Example:
        >>> installments_for_months(Frequency.WEEKLY, 6)
        26
    """
    if months < 1:
        raise InvalidDuration(f"duration must be at least 1 month, got {months}")
    count = math.floor(months * installments_per_calendar_unit(frequency))
    return max(count, constants.MIN_INSTALLMENTS)


def validate(
    frequency: Frequency,
    day_of_week: Optional[int] = None,
    custom_dates: Optional[Sequence[date]] = None,
) -> None:
    """
    Check that a frequency carries the auxiliary data it needs.

    Raises:
        InvalidFrequencyConfig: weekly_specific without a valid day_of_week,
            or custom without any dates.
    """
    if frequency == Frequency.WEEKLY_SPECIFIC:
        if day_of_week is None:
            raise InvalidFrequencyConfig("weekly_specific frequency requires day_of_week")
        if not constants.MIN_DAY_OF_WEEK <= day_of_week <= constants.MAX_DAY_OF_WEEK:
            raise InvalidFrequencyConfig(
                f"day_of_week must be between {constants.MIN_DAY_OF_WEEK} "
                f"and {constants.MAX_DAY_OF_WEEK}, got {day_of_week}"
            )
    elif day_of_week is not None:
        logger.debug("Ignoring day_of_week=%s for %s frequency", day_of_week, frequency.value)

    if frequency == Frequency.CUSTOM:
        if not custom_dates:
            raise InvalidFrequencyConfig("custom frequency requires at least one date")
    elif custom_dates:
        logger.debug("Ignoring %d custom dates for %s frequency", len(custom_dates), frequency.value)
