"""Field definitions for cron expressions.

Static, read-only tables describing the seven cron fields: their bounds,
their value aliases and the special characters each one accepts. The
tables are built once at import time and exposed as read-only mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class CronFieldType(str, Enum):
    """Kinds of cron fields, in expression order."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day_of_month"
    MONTH = "month"
    DAY_OF_WEEK = "day_of_week"
    YEAR = "year"


FIELD_ORDER: tuple[CronFieldType, ...] = tuple(CronFieldType)

# Day-of-week indexes (cron numbering)
SUNDAY = 0
MONDAY = 1
FRIDAY = 5
SATURDAY = 6


@dataclass(frozen=True)
class FieldConstraints:
    """Constraints for a cron field."""

    min_value: int
    max_value: int
    names: Mapping[str, int] = field(default_factory=dict)
    supports_l: bool = False
    supports_w: bool = False
    supports_hash: bool = False
    supports_question: bool = False


FIELD_CONSTRAINTS: Mapping[CronFieldType, FieldConstraints] = MappingProxyType({
    CronFieldType.SECOND: FieldConstraints(0, 59),
    CronFieldType.MINUTE: FieldConstraints(0, 59),
    CronFieldType.HOUR: FieldConstraints(0, 23),
    CronFieldType.DAY_OF_MONTH: FieldConstraints(
        1, 31,
        supports_l=True,
        supports_w=True,
        supports_question=True,
    ),
    CronFieldType.MONTH: FieldConstraints(
        1, 12,
        names=MappingProxyType({
            "jan": 1, "feb": 2, "mar": 3, "apr": 4,
            "may": 5, "jun": 6, "jul": 7, "aug": 8,
            "sep": 9, "oct": 10, "nov": 11, "dec": 12,
        }),
    ),
    CronFieldType.DAY_OF_WEEK: FieldConstraints(
        0, 6,
        names=MappingProxyType({
            "7": 0,  # Sunday may be written as 0 or 7
            "sun": 0, "mon": 1, "tue": 2, "wed": 3,
            "thu": 4, "fri": 5, "sat": 6,
        }),
        supports_l=True,
        supports_hash=True,
        supports_question=True,
    ),
    CronFieldType.YEAR: FieldConstraints(1970, 2099),
})

# Sunday closes a day-of-week range as 7 (e.g. fri-sun)
DAY_OF_WEEK_RANGE_MAX = 7

# Predefined expression aliases, always without seconds
PREDEFINED_EXPRESSIONS: Mapping[str, str] = MappingProxyType({
    "@yearly": "0 0 1 1 ?",
    "@annually": "0 0 1 1 ?",
    "@monthly": "0 0 1 * ?",
    "@weekly": "0 0 ? * 0",
    "@daily": "0 0 * * ?",
    "@midnight": "0 0 * * ?",
    "@hourly": "0 * * * ?",
})


def constraints_for(field_type: CronFieldType) -> FieldConstraints:
    """Look up the constraints of a field."""
    return FIELD_CONSTRAINTS[field_type]
