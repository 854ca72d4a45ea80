"""Point-in-time evaluation of cron expressions.

:func:`is_match` tests a single civil time against a simplified
expression without expanding any field. The cheap fields (second, minute,
hour, month, year) are checked first; the day is then accepted when
either the day_of_month or the day_of_week specifier accepts it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from cronmatch import civil
from cronmatch.fields import DAY_OF_WEEK_RANGE_MAX, SATURDAY, SUNDAY, CronFieldType
from cronmatch.model import CronExpr, CronExprSet, CronField

# Checked in this order, cheapest first
SIMPLE_FIELDS: tuple[CronFieldType, ...] = (
    CronFieldType.SECOND,
    CronFieldType.MINUTE,
    CronFieldType.HOUR,
    CronFieldType.MONTH,
    CronFieldType.YEAR,
)


@dataclass(frozen=True)
class MatchContext:
    """Calendar facts about the day being matched."""

    year: int
    month: int
    day: int
    weekday: int
    days_in_month: int

    @classmethod
    def of(cls, dt: datetime) -> "MatchContext":
        return cls(
            year=dt.year,
            month=dt.month,
            day=dt.day,
            weekday=civil.cron_weekday(dt),
            days_in_month=civil.days_in_month(dt.year, dt.month),
        )


def _field_value(dt: datetime, field_type: CronFieldType) -> int:
    return getattr(dt, field_type.value)


def is_field_match(field: CronField, field_type: CronFieldType, value: int) -> bool:
    """Membership test against ``* | ? | values | ranges``.

    An omitted second field matches any second, so expressions without
    seconds ignore sub-minute precision.
    """
    if field.all:
        return True

    if field.omit:
        return field_type == CronFieldType.SECOND

    if value in field.values:
        return True

    return any(r.start <= value <= r.end for r in field.ranges)


def _is_weekday_field_match(field: CronField, weekday: int) -> bool:
    if is_field_match(field, CronFieldType.DAY_OF_WEEK, weekday):
        return True
    # Ranges closing on Sunday store it as 7
    return weekday == SUNDAY and any(r.start <= DAY_OF_WEEK_RANGE_MAX <= r.end for r in field.ranges)


def is_nearest_weekday(ctx: MatchContext, target: int) -> bool:
    """Check if the context day is the business day nearest to ``target``.

    A target past the month end is clamped to the last day. A Saturday
    target moves to Friday, or to Monday the 3rd when it is the 1st. A
    Sunday target moves to Monday, or to Friday when it is the last day.
    """
    if not civil.is_business_day(ctx.weekday):
        return False

    target = min(target, ctx.days_in_month)
    if ctx.day == target:
        return True

    target_weekday = civil.weekday_of(ctx.year, ctx.month, target)

    if target_weekday == SATURDAY:
        if target == 1:
            return ctx.day == 3
        return ctx.day == target - 1

    if target_weekday == SUNDAY:
        if target == ctx.days_in_month:
            return ctx.day == ctx.days_in_month - 2
        return ctx.day == target + 1

    return False


def is_day_of_month_match(field: CronField, ctx: MatchContext) -> bool:
    if field.omit:
        return False

    if field.last_weekday and ctx.day == civil.last_business_day(ctx.year, ctx.month):
        return True

    if field.last_day and ctx.day == ctx.days_in_month:
        return True

    if any(is_nearest_weekday(ctx, target) for target in field.nearest_weekdays):
        return True

    return is_field_match(field, CronFieldType.DAY_OF_MONTH, ctx.day)


def _is_nth_day(ctx: MatchContext, weekday: int, instance: int) -> bool:
    days = civil.days_of_weekday(ctx.year, ctx.month, weekday)
    return len(days) >= instance and days[instance - 1] == ctx.day


def is_day_of_week_match(field: CronField, ctx: MatchContext) -> bool:
    if field.omit:
        return False

    # A bare L in day_of_week means Saturday
    if field.last_day and ctx.weekday == SATURDAY:
        return True

    if any(ctx.day == civil.last_day_of_weekday(ctx.year, ctx.month, wd) for wd in field.last_days):
        return True

    if any(_is_nth_day(ctx, nth.day_of_week, nth.instance) for nth in field.nth_days):
        return True

    return _is_weekday_field_match(field, ctx.weekday)


def is_match(expr: CronExpr, dt: datetime) -> bool:
    """Check if a civil time matches a simplified expression.

    Args:
        expr: Expression, already passed through :func:`~cronmatch.simplify.simplify`.
        dt: Time to check; its own fields are used as the civil reading.

    Returns:
        True if the time matches.
    """
    for field_type in SIMPLE_FIELDS:
        if not is_field_match(expr[field_type], field_type, _field_value(dt, field_type)):
            return False

    ctx = MatchContext.of(dt)
    return is_day_of_month_match(expr.day_of_month, ctx) or is_day_of_week_match(expr.day_of_week, ctx)


def is_set_match(expr_set: CronExprSet, dt: datetime) -> bool:
    """Check if a civil time matches any alternative of a simplified set."""
    return any(is_match(expr, dt) for expr in expr_set.expressions)
