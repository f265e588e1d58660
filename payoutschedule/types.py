"""Type definitions and enums for payoutschedule."""

from enum import Enum


class Frequency(str, Enum):
    """Payout cadences."""

    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKLY_SPECIFIC = "weekly_specific"  # Every <weekday>, needs day_of_week
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    END_OF_MONTH = "end_of_month"
    QUARTERLY = "quarterly"
    BIANNUAL = "biannual"
    ANNUALLY = "annually"
    CUSTOM = "custom"  # Explicit caller-supplied dates


class PlanStatus(str, Enum):
    """Payout plan lifecycle states."""

    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({PlanStatus.COMPLETED, PlanStatus.CANCELLED})


class PayoutEventType(str, Enum):
    """Calendar classification of a plan's next payout."""

    SCHEDULED = "scheduled"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


# Day-of-week numbering is 0 = Sunday .. 6 = Saturday.
# Mapping to dateutil/datetime weekday numbers (0 = Monday).
DAY_OF_WEEK_TO_WEEKDAY = {
    0: 6,  # Sunday
    1: 0,  # Monday
    2: 1,  # Tuesday
    3: 2,  # Wednesday
    4: 3,  # Thursday
    5: 4,  # Friday
    6: 5,  # Saturday
}

DAY_OF_WEEK_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}
