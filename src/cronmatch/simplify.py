"""Expression normalization and field expansion.

:func:`simplify` prepares a parsed set for evaluation: it settles how
day_of_month and day_of_week constrain together and flattens steps into
explicit values. It always works on a copy, so one parsed set can be
shared by any number of callers.

:func:`expand_field` and :func:`merge_fields` turn specifiers into the
ascending integer sets the time-series generator walks over.
"""

from __future__ import annotations

from cronmatch.fields import (
    DAY_OF_WEEK_RANGE_MAX,
    SUNDAY,
    CronFieldType,
    constraints_for,
)
from cronmatch.model import CronExpr, CronExprSet, CronField

_DOM = CronFieldType.DAY_OF_MONTH
_DOW = CronFieldType.DAY_OF_WEEK

# Order in which the generator nests its loops, outermost first
SERIES_ORDER: tuple[CronFieldType, ...] = (
    CronFieldType.YEAR,
    CronFieldType.MONTH,
    CronFieldType.DAY_OF_MONTH,
    CronFieldType.HOUR,
    CronFieldType.MINUTE,
    CronFieldType.SECOND,
)


def _normalize_days(expr: CronExpr) -> None:
    """Apply the day_of_month / day_of_week disjunction rule in place.

    When either field is already omitted nothing changes. A constrained
    day_of_month next to ``*`` weekdays means only the month days count,
    and ``*`` month days next to constrained weekdays means only the
    weekdays count. When both carry constraints they are OR-ed at match
    time.
    """
    dom, dow = expr.day_of_month, expr.day_of_week
    if dom.omit or dow.omit:
        return

    if dom.is_constrained and dow.all:
        expr.day_of_week = CronField.omitted()
    elif dom.all and dow.is_constrained:
        expr.day_of_month = CronField.omitted()


def _flatten_steps(field: CronField, field_type: CronFieldType) -> None:
    if not field.steps:
        return

    values = set(field.values)
    for step in field.steps:
        values.update(step.values())

    if field_type == _DOW:
        values = {SUNDAY if v == DAY_OF_WEEK_RANGE_MAX else v for v in values}

    field.values = sorted(values)
    field.steps = []


def simplify_expr(expr: CronExpr) -> CronExpr:
    """Return a normalized copy of a single expression."""
    result = expr.copy()
    _normalize_days(result)
    for field_type, field in result.items():
        _flatten_steps(field, field_type)
    return result


def simplify(expr_set: CronExprSet) -> CronExprSet:
    """Return a normalized copy of an expression set.

    The input set is never modified.
    """
    return CronExprSet(
        pattern=expr_set.pattern,
        expressions=[simplify_expr(e) for e in expr_set.expressions],
    )


def expand_field(expr: CronExpr, field_type: CronFieldType, start_year: int) -> list[int]:
    """Expand one field of a simplified expression into candidate values.

    The result is the set of values the generator must visit; it may be a
    superset of what matches; the evaluator makes the final decision.

    Args:
        expr: Simplified expression.
        field_type: Field to expand.
        start_year: First year of the search; an unbounded year field
            starts here instead of at the field minimum.

    Returns:
        Ascending, deduplicated values.
    """
    field = expr[field_type]
    constraints = constraints_for(field_type)

    if field.omit:
        return [0] if field_type == CronFieldType.SECOND else []

    # Weekday constraints can land on any calendar day
    if field_type == _DOW:
        dom = constraints_for(_DOM)
        return list(range(dom.min_value, dom.max_value + 1))

    if field.all or field.has_special:
        start = start_year if field_type == CronFieldType.YEAR else constraints.min_value
        return list(range(max(start, constraints.min_value), constraints.max_value + 1))

    values = set(field.values)
    for r in field.ranges:
        values.update(range(r.start, r.end + 1))
    for step in field.steps:
        values.update(step.values())

    return sorted(values)


def merge_fields(expr_set: CronExprSet, start_year: int) -> dict[CronFieldType, list[int]]:
    """Union the expansions of all alternatives, per generator level.

    Day candidates combine the day_of_month and day_of_week expansions.

    Returns:
        Mapping from each field in :data:`SERIES_ORDER` to ascending values.
    """
    merged: dict[CronFieldType, list[int]] = {}
    for field_type in SERIES_ORDER:
        values: set[int] = set()
        for expr in expr_set.expressions:
            values.update(expand_field(expr, field_type, start_year))
            if field_type == _DOM:
                values.update(expand_field(expr, _DOW, start_year))
        merged[field_type] = sorted(values)
    return merged
