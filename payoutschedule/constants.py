"""
Global constants for payoutschedule.

This module centralizes magic strings, defaults and precision settings
so the engine, loader and CLI agree on them.
"""

from decimal import Decimal

# ============================================================================
# File Paths and Directories
# ============================================================================

CONFIG_FILENAME = "_config.yaml"
PLAN_FILE_PATTERN = "*.yaml"
DEFAULT_PLANS_DIR = "plans"
DEFAULT_PLANS_FILE = "plans.yaml"
PLAN_FILE_VERSION = "1.0"

# Environment variables for plan location discovery
ENV_PLANS_DIR = "PAYOUTSCHEDULE_DIR"
ENV_PLANS_FILE = "PAYOUTSCHEDULE_FILE"

# ============================================================================
# Default Configuration Values
# ============================================================================

DEFAULT_CURRENCY = "NGN"
DEFAULT_EXPIRY_THRESHOLD_DAYS = 3
DEFAULT_DUE_SOON_DAYS = 3
DEFAULT_UPCOMING_WINDOW_DAYS = 30

# ============================================================================
# Validation Constraints
# ============================================================================

MIN_DAY_OF_WEEK = 0  # Sunday
MAX_DAY_OF_WEEK = 6  # Saturday
MIN_INSTALLMENTS = 1

# ============================================================================
# Financial/Decimal Constants
# ============================================================================

CENTS_PRECISION = Decimal("0.01")  # Currency rounding precision
ZERO_AMOUNT = Decimal("0")
ONE_HUNDRED = Decimal("100")

# ============================================================================
# Frequency Interval Constants
# ============================================================================

DAYS_PER_WEEK = 7
BIWEEKLY_INTERVAL = 2  # Bi-weekly interval (2 weeks)
MONTHS_PER_QUARTER = 3
MONTHS_PER_HALF_YEAR = 6
MONTHS_PER_YEAR = 12
DAYS_PER_YEAR = 365
WEEKS_PER_YEAR = 52
LAST_DAY_OF_MONTH_INDICATOR = -1

# ============================================================================
# Display/Formatting Constants
# ============================================================================

MAX_TABLE_COLUMN_WIDTH = 30  # Max width for table columns in CLI
