"""cronmatch - cron expression parsing and schedule matching.

This package parses cron expressions, including the Quartz-style
extensions, and computes the instants that match them in any IANA time
zone.

Features:
    - Standard 5-field cron (minute, hour, day, month, weekday)
    - Shortened 4-field cron (weekday left out) and 6-field cron with years
    - Seconds-first forms (5 to 7 fields) on request
    - Special characters: *, /, -, ,, L, W, LW, #, ?
    - Named months and weekdays
    - Predefined expressions (@yearly, @monthly, @weekly, @daily, @hourly)
    - Several alternatives joined by |
    - Future-match search bounded by start, end and a loop limit
    - Point-in-time matching
    - Expression builder, presets and validator

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * / , -
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * / , - ? L W LW
    Month         1-12 or JAN-DEC * / , -
    Day of Week   0-7 or SUN-SAT  * / , - ? L #
    Year          1970-2099       * / , -

Special Characters:
    *   Any value
    ,   List separator (1,3,5)
    -   Range (1-5)
    /   Step (*/15 = every 15)
    L   Last (L in day-of-month = last day, 5L in day-of-week = last Friday)
    W   Nearest weekday (15W = nearest weekday to 15th)
    LW  Last weekday of the month
    #   Nth weekday (1#3 = third Monday)
    ?   No specific value (day-of-month or day-of-week)

Usage:
    >>> from cronmatch import get_future_matches, is_time_matches, parse
    >>>
    >>> # Next run times
    >>> get_future_matches("0 9 ? * mon-fri", timezone="Europe/Berlin")
    >>>
    >>> # Parse once, evaluate many times
    >>> expr = parse("0 0 LW * | 0 12 ? * 5L")
    >>> is_time_matches(expr, "2020-01-31T00:00:00Z")
    True
"""

from cronmatch.api import (
    DEFAULT_MATCH_COUNT,
    MAX_LOOP_COUNT,
    CronIterator,
    MatchOptions,
    get_future_matches,
    is_time_matches,
    is_valid_expression,
    validate_expression,
)
from cronmatch.builder import CronBuilder
from cronmatch.errors import CronError, CronOptionsError, CronParseError
from cronmatch.fields import FIELD_CONSTRAINTS, CronFieldType, FieldConstraints
from cronmatch.matcher import is_match, is_set_match
from cronmatch.model import CronExpr, CronExprSet, CronField, CronNth, CronRange, CronStep
from cronmatch.parser import CronParser, parse
from cronmatch.presets import PRESETS, get_preset, list_presets
from cronmatch.series import TimeSeries
from cronmatch.simplify import expand_field, merge_fields, simplify

__version__ = "0.1.0"

__all__ = [
    # Model
    "CronExpr",
    "CronExprSet",
    "CronField",
    "CronFieldType",
    "CronNth",
    "CronRange",
    "CronStep",
    "FieldConstraints",
    "FIELD_CONSTRAINTS",
    # Errors
    "CronError",
    "CronParseError",
    "CronOptionsError",
    # Parser
    "CronParser",
    "parse",
    # Simplifier
    "simplify",
    "expand_field",
    "merge_fields",
    # Generator / evaluator
    "TimeSeries",
    "is_match",
    "is_set_match",
    # API
    "MatchOptions",
    "CronIterator",
    "get_future_matches",
    "is_time_matches",
    "DEFAULT_MATCH_COUNT",
    "MAX_LOOP_COUNT",
    # Builder
    "CronBuilder",
    # Validation
    "validate_expression",
    "is_valid_expression",
    # Presets
    "PRESETS",
    "get_preset",
    "list_presets",
]
