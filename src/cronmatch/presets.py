"""Predefined cron expression presets.

This module provides commonly used schedules as parsed expression sets
for easy reuse and readability.

Usage:
    >>> from cronmatch.presets import DAILY, get_preset
    >>>
    >>> # Use directly
    >>> get_future_matches(DAILY, timezone="Asia/Seoul")
    >>>
    >>> # Or look up by name
    >>> get_future_matches(get_preset("last-friday"))
"""

from __future__ import annotations

from cronmatch.model import CronExprSet
from cronmatch.parser import parse


# =============================================================================
# Standard Intervals
# =============================================================================

# Every year on January 1st at midnight
YEARLY = parse("0 0 1 1 *")
ANNUALLY = YEARLY

# First day of every month at midnight
MONTHLY = parse("0 0 1 * *")

# Every Sunday at midnight
WEEKLY = parse("0 0 * * 0")

# Every day at midnight
DAILY = parse("0 0 * * *")
MIDNIGHT = DAILY

# Every hour at minute 0
HOURLY = parse("0 * * * *")

# Every minute
EVERY_MINUTE = parse("* * * * *")

# Every second
EVERY_SECOND = parse("* * * * * *", has_seconds=True)


# =============================================================================
# Business Schedule Presets
# =============================================================================

# Weekdays (Monday-Friday) at 9 AM
WEEKDAYS_9AM = parse("0 9 ? * mon-fri")

# Weekdays (Monday-Friday) at 6 PM
WEEKDAYS_6PM = parse("0 18 ? * mon-fri")

# Every 15 minutes during business hours (9 AM - 5 PM, weekdays)
BUSINESS_HOURS_15MIN = parse("*/15 9-17 ? * mon-fri")


# =============================================================================
# Month Boundary Presets
# =============================================================================

# First day of month at 6 AM
FIRST_OF_MONTH = parse("0 6 1 * ?")

# Last day of month at 6 AM
LAST_OF_MONTH = parse("0 6 L * ?")

# Last Monday-Friday day of month at 6 PM
LAST_WEEKDAY_OF_MONTH = parse("0 18 LW * ?")

# Weekday nearest the 15th at 9 AM
MID_MONTH_WEEKDAY = parse("0 9 15W * ?")

# First Monday of month
FIRST_MONDAY = parse("0 9 ? * 1#1")

# Last Friday of month
LAST_FRIDAY = parse("0 17 ? * 5L")


# =============================================================================
# Interval Presets
# =============================================================================

EVERY_5_MIN = parse("*/5 * * * *")
EVERY_15_MIN = parse("*/15 * * * *")
EVERY_30_MIN = parse("*/30 * * * *")
EVERY_6_HOURS = parse("0 */6 * * *")

# Every 12 hours (twice daily)
TWICE_DAILY = parse("0 0,12 * * *")


# =============================================================================
# Weekend/Off-hours Presets
# =============================================================================

# Weekends only at noon
WEEKENDS_NOON = parse("0 12 ? * sat,sun")

# Sunday at 3 AM (weekly maintenance window)
SUNDAY_MAINTENANCE = parse("0 3 ? * sun")


# =============================================================================
# Quarter Presets
# =============================================================================

# First day of each quarter
QUARTERLY = parse("0 0 1 1,4,7,10 ?")

# Last day of each quarter
END_OF_QUARTER = parse("0 0 L 3,6,9,12 ?")


# =============================================================================
# Preset Registry
# =============================================================================

PRESETS: dict[str, CronExprSet] = {
    # Standard
    "yearly": YEARLY,
    "annually": ANNUALLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "midnight": MIDNIGHT,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    "every_second": EVERY_SECOND,
    # Business
    "weekdays_9am": WEEKDAYS_9AM,
    "weekdays_6pm": WEEKDAYS_6PM,
    "business_hours_15min": BUSINESS_HOURS_15MIN,
    # Month boundaries
    "first_of_month": FIRST_OF_MONTH,
    "last_of_month": LAST_OF_MONTH,
    "last_weekday_of_month": LAST_WEEKDAY_OF_MONTH,
    "mid_month_weekday": MID_MONTH_WEEKDAY,
    "first_monday": FIRST_MONDAY,
    "last_friday": LAST_FRIDAY,
    # Intervals
    "every_5_min": EVERY_5_MIN,
    "every_15_min": EVERY_15_MIN,
    "every_30_min": EVERY_30_MIN,
    "every_6_hours": EVERY_6_HOURS,
    "twice_daily": TWICE_DAILY,
    # Off-hours
    "weekends_noon": WEEKENDS_NOON,
    "sunday_maintenance": SUNDAY_MAINTENANCE,
    # Quarter
    "quarterly": QUARTERLY,
    "end_of_quarter": END_OF_QUARTER,
}


def get_preset(name: str) -> CronExprSet | None:
    """Get a preset by name.

    Args:
        name: Preset name (case-insensitive, ``-`` and ``_`` interchangeable).

    Returns:
        A copy of the parsed set, or None if not found.
    """
    preset = PRESETS.get(name.strip().lower().replace("-", "_"))
    return preset.copy() if preset is not None else None


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())
