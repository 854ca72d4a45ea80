"""Cron expression parser.

Turns cron text into a :class:`~cronmatch.model.CronExprSet`.

Supports:
    - Standard 5-field cron (minute hour day month weekday), where the
      weekday may be left out (4 fields) and a year may be appended (6)
    - Seconds-first forms when ``has_seconds`` is requested (5 to 7 fields)
    - Predefined expressions (@yearly, @monthly, @weekly, @daily, @hourly)
    - Several alternatives joined by ``|``

Field syntax:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * / , -
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * / , - ? L W LW
    Month         1-12 or JAN-DEC * / , -
    Day of Week   0-7 or SUN-SAT  * / , - ? L #
    Year          1970-2099       * / , -

Parsing is all-or-nothing: any problem raises :class:`CronParseError`
naming the field, the token and the violated bound.
"""

from __future__ import annotations

import logging
import re

from cronmatch.errors import CronParseError
from cronmatch.fields import (
    DAY_OF_WEEK_RANGE_MAX,
    FIELD_ORDER,
    PREDEFINED_EXPRESSIONS,
    CronFieldType,
    FieldConstraints,
    constraints_for,
)
from cronmatch.model import CronExpr, CronExprSet, CronField, CronNth, CronRange, CronStep

logger = logging.getLogger(__name__)

VAL_L = "l"
VAL_W = "w"
VAL_LW = "lw"
VAL_Q = "?"
VAL_HASH = "#"
VAL_STAR = "*"
VAL_DASH = "-"
VAL_SLASH = "/"

_DOM = CronFieldType.DAY_OF_MONTH
_DOW = CronFieldType.DAY_OF_WEEK

_WHITESPACE = re.compile(r"\s+")


def _split_and_cleanup(text: str, sep: str) -> list[str]:
    """Split, trim, drop empty parts and duplicates (first occurrence wins)."""
    seen: set[str] = set()
    parts: list[str] = []
    for part in text.split(sep):
        part = part.strip()
        if part and part not in seen:
            seen.add(part)
            parts.append(part)
    return parts


def _dedupe(items: list) -> list:
    return list(dict.fromkeys(items))


class CronParser:
    """Parser for a single cron alternative.

    Example:
        >>> CronParser("0 12 ? * mon-fri").parse()
        CronExpr(second=CronField(omit=True, ...), ...)
    """

    def __init__(self, expression: str, *, has_seconds: bool = False) -> None:
        """Initialize parser with expression.

        Args:
            expression: One cron expression (no ``|``).
            has_seconds: The expression starts with a seconds field.
        """
        self._original = expression.strip()
        self._has_seconds = has_seconds
        self._expression = self._resolve_alias(self._original)

    def _resolve_alias(self, expression: str) -> str:
        """Resolve predefined aliases; they never carry seconds."""
        alias = PREDEFINED_EXPRESSIONS.get(expression.lower())
        if alias is not None:
            self._has_seconds = False
            return alias
        return expression

    def parse(self) -> CronExpr:
        """Parse the expression.

        Returns:
            Fully-populated CronExpr.

        Raises:
            CronParseError: If expression is invalid.
        """
        if not self._expression:
            raise CronParseError("Cron expression cannot be blank", self._original)

        parts = _WHITESPACE.split(self._expression)
        min_fields = 5 if self._has_seconds else 4
        max_fields = 7 if self._has_seconds else 6

        if not min_fields <= len(parts) <= max_fields:
            raise CronParseError.invalid(
                self._original,
                f"Expected [{min_fields} to {max_fields}] fields but found [{len(parts)}] fields.",
            )

        # Seconds default to the 0th second
        if not self._has_seconds:
            parts.insert(0, "0")

        # Missing day of week defaults to ?, missing year to *
        if len(parts) == 5:
            parts.append(VAL_Q)
        if len(parts) == 6:
            parts.append(VAL_STAR)

        expr = CronExpr()
        for field_type, token in zip(FIELD_ORDER, parts):
            if field_type == CronFieldType.SECOND and not self._has_seconds:
                expr[field_type] = CronField.omitted()
            else:
                expr[field_type] = self._parse_field(token, field_type)

        return expr

    def _parse_field(self, token: str, field_type: CronFieldType) -> CronField:
        """Parse a single cron field.

        Args:
            token: Field expression string.
            field_type: Type of this field.

        Returns:
            Parsed CronField.
        """
        constraints = constraints_for(field_type)
        value = token.strip().lower()

        if value == VAL_STAR:
            return CronField.wildcard()

        # Handle ? (no specific value)
        if value == VAL_Q:
            if not constraints.supports_question:
                raise self._error(
                    f"Invalid value [{token}] for field [{field_type.value}]. "
                    "It can be specified only for [day_of_month or day_of_week] fields.",
                    field_type,
                    token,
                )
            return CronField.omitted()

        parsed = CronField()

        for part in _split_and_cleanup(value, ","):
            if VAL_SLASH in part:
                parsed.steps.append(self._parse_step(part, field_type, constraints))
            elif VAL_DASH in part:
                parsed.ranges.append(self._parse_range(part, field_type, constraints))
            elif VAL_HASH in part:
                parsed.nth_days.append(self._parse_nth(part, field_type, constraints))
            elif part == VAL_L:
                self._check_last(part, field_type, constraints)
                parsed.last_day = True
            elif part == VAL_LW:
                self._check_last_weekday(part, field_type)
                parsed.last_weekday = True
            elif part.endswith(VAL_W) and part not in constraints.names:
                parsed.nearest_weekdays.append(
                    self._parse_nearest_weekday(part, field_type, constraints)
                )
            elif part.endswith(VAL_L) and part not in constraints.names:
                parsed.last_days.append(self._parse_last_days(part, field_type, constraints))
            else:
                parsed.values.append(self._resolve_value(part, field_type, constraints))

        parsed.values = sorted(set(parsed.values))
        parsed.ranges = _dedupe(parsed.ranges)
        parsed.steps = _dedupe(parsed.steps)
        parsed.nth_days = _dedupe(parsed.nth_days)
        parsed.last_days = _dedupe(parsed.last_days)
        parsed.nearest_weekdays = _dedupe(parsed.nearest_weekdays)

        return parsed

    def _check_last(self, part: str, field_type: CronFieldType, constraints: FieldConstraints) -> None:
        """Validate the bare L (last) modifier."""
        if not constraints.supports_l:
            raise self._error(
                f"Invalid value [{part}] for field [{field_type.value}]. "
                "It can be used only for [day_of_month or day_of_week] fields.",
                field_type,
                part,
            )

    def _check_last_weekday(self, part: str, field_type: CronFieldType) -> None:
        """Validate the LW (last weekday of month) modifier."""
        if field_type != _DOM:
            raise self._error(
                f"Invalid value [{part}] for field [{field_type.value}]. "
                "It can be used only for [day_of_month] fields.",
                field_type,
                part,
            )

    def _parse_nearest_weekday(
        self,
        part: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
    ) -> int:
        """Parse W (nearest weekday) modifier, e.g. 15W."""
        if not constraints.supports_w:
            raise self._error(
                f"Invalid value [{part}] for field [{field_type.value}]. "
                "Nearest weekday can be used only in [day_of_month] field.",
                field_type,
                part,
            )
        return self._resolve_value(part[:-1], field_type, constraints, token=part)

    def _parse_last_days(
        self,
        part: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
    ) -> int:
        """Parse nL (last given weekday of month), e.g. 5L or friL."""
        if field_type != _DOW:
            raise self._error(
                f"Invalid value [{part}] for field [{field_type.value}]. "
                "Last day of kind can be used only in [day_of_week] field.",
                field_type,
                part,
            )
        return self._resolve_value(part[:-1], field_type, constraints, token=part)

    def _parse_nth(
        self,
        part: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
    ) -> CronNth:
        """Parse # (nth weekday) modifier."""
        if not constraints.supports_hash:
            raise self._error(
                f"Invalid value [{part}] for field [{field_type.value}]. "
                "Nth day can be used only in [day_of_week] field.",
                field_type,
                part,
            )

        pieces = part.split(VAL_HASH)
        if len(pieces) != 2:
            raise self._error(
                f"Invalid nth day value [{part}] for field [{field_type.value}]. "
                "It must be in [day_of_week#instance] format.",
                field_type,
                part,
            )

        day_of_week = self._resolve_value(pieces[0], field_type, constraints, token=part)
        instance = self._parse_number(pieces[1], field_type, token=part)

        if instance < 1 or instance > 5:
            raise self._error(
                f"Invalid Day of Week instance value [{instance}] for field "
                f"[{field_type.value}]. It must be between 1 and 5.",
                field_type,
                part,
                bound=1 if instance < 1 else 5,
            )

        return CronNth(day_of_week=day_of_week, instance=instance)

    def _parse_step(
        self,
        part: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
    ) -> CronStep:
        """Parse step expression (*/n, n/s or n-m/s)."""
        pieces = part.split(VAL_SLASH)
        if len(pieces) != 2:
            raise self._error(
                f"Invalid step range [{part}] for field [{field_type.value}]. "
                f"Expected exactly 2 values separated by a / but got [{len(pieces)}] values.",
                field_type,
                part,
            )

        base, step_text = pieces
        upper = self._range_max(field_type, constraints)
        bounds = base.split(VAL_DASH)
        if len(bounds) > 2:
            raise self._error(
                f"Invalid step range [{part}] for field [{field_type.value}]. "
                "Range should have two values separated by a -.",
                field_type,
                part,
            )

        if bounds[0] == VAL_STAR:
            start = constraints.min_value
        else:
            start = self._parse_number(self._unalias(bounds[0], constraints), field_type, token=part)
        if len(bounds) == 2:
            end = self._range_end(bounds[1], field_type, constraints, token=part)
        else:
            end = upper
        step = self._parse_number(step_text, field_type, token=part)

        if start < constraints.min_value:
            raise self._error(
                f"Invalid step range [{part}] for field [{field_type.value}]. From value "
                f"[{start}] out of range. It must be greater than or equals to [{constraints.min_value}].",
                field_type,
                part,
                bound=constraints.min_value,
            )
        if start > constraints.max_value or end > upper:
            raise self._error(
                f"Invalid step range [{part}] for field [{field_type.value}]. From or to value "
                f"out of range. It must be less than or equals to [{upper}].",
                field_type,
                part,
                bound=upper,
            )
        if start > end:
            raise self._error(
                f"Invalid step range [{part}] for field [{field_type.value}]. "
                "From value must not be greater than to value.",
                field_type,
                part,
            )
        if step > constraints.max_value:
            raise self._error(
                f"Invalid step range [{part}] for field [{field_type.value}]. Step value "
                f"[{step}] out of range. It must be less than or equals to [{constraints.max_value}].",
                field_type,
                part,
                bound=constraints.max_value,
            )

        return CronStep(start=start, end=end, step=step)

    def _parse_range(
        self,
        part: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
    ) -> CronRange:
        """Parse range expression (n-m)."""
        pieces = part.split(VAL_DASH)
        if len(pieces) != 2:
            raise self._error(
                f"Invalid range [{part}] for field [{field_type.value}]. Range should have "
                f"two values separated by a - but got [{len(pieces)}] values.",
                field_type,
                part,
            )

        start = self._parse_number(self._unalias(pieces[0], constraints), field_type, token=part)
        end = self._range_end(pieces[1], field_type, constraints, token=part)

        if start >= end:
            raise self._error(
                f"Invalid range [{part}] for field [{field_type.value}]. "
                "From value must be less than to value.",
                field_type,
                part,
            )

        upper = self._range_max(field_type, constraints)
        if start < constraints.min_value or end > upper:
            raise self._error(
                f"Invalid range [{part}] for field [{field_type.value}]. From or to value is "
                "out of allowed min/max values. Allowed values are between "
                f"[{constraints.min_value}-{upper}].",
                field_type,
                part,
                bound=constraints.min_value if start < constraints.min_value else upper,
            )

        return CronRange(start=start, end=end)

    def _range_end(
        self,
        text: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
        *,
        token: str,
    ) -> int:
        """Parse the closing value of a range; Sunday closes a weekday range as 7."""
        end = self._parse_number(self._unalias(text, constraints), field_type, token=token)
        if field_type == _DOW and end == 0:
            end = DAY_OF_WEEK_RANGE_MAX
        return end

    @staticmethod
    def _range_max(field_type: CronFieldType, constraints: FieldConstraints) -> int:
        if field_type == _DOW:
            return DAY_OF_WEEK_RANGE_MAX
        return constraints.max_value

    @staticmethod
    def _unalias(text: str, constraints: FieldConstraints) -> str:
        value = constraints.names.get(text.strip().lower())
        return text if value is None else str(value)

    def _resolve_value(
        self,
        text: str,
        field_type: CronFieldType,
        constraints: FieldConstraints,
        *,
        token: str | None = None,
    ) -> int:
        """Resolve a value (number or name) to a bound-checked integer."""
        token = token or text
        num = self._parse_number(self._unalias(text, constraints), field_type, token=token)

        if num < constraints.min_value:
            raise self._error(
                f"Value [{token}] out of range for field [{field_type.value}]. "
                f"It must be greater than or equals to [{constraints.min_value}].",
                field_type,
                token,
                bound=constraints.min_value,
            )
        if num > constraints.max_value:
            raise self._error(
                f"Value [{token}] out of range for field [{field_type.value}]. "
                f"It must be less than or equals to [{constraints.max_value}].",
                field_type,
                token,
                bound=constraints.max_value,
            )
        return num

    def _parse_number(self, text: str, field_type: CronFieldType, *, token: str) -> int:
        text = text.strip()
        if not (text.isascii() and text.isdigit()):
            raise self._error(
                f"Invalid numeric value [{token}] in field [{field_type.value}].",
                field_type,
                token,
            )
        return int(text)

    def _error(
        self,
        detail: str,
        field_type: CronFieldType,
        token: str,
        *,
        bound: int | None = None,
    ) -> CronParseError:
        return CronParseError.invalid(
            self._original, detail, field=field_type, token=token, bound=bound
        )


def parse(expression: str, *, has_seconds: bool = False) -> CronExprSet:
    """Parse cron text, possibly several alternatives joined by ``|``.

    Args:
        expression: Cron expression string.
        has_seconds: Expressions start with a seconds field.

    Returns:
        Parsed CronExprSet.

    Raises:
        CronParseError: If the text is blank or any alternative is invalid.
    """
    if expression is None or not expression.strip():
        raise CronParseError("Cron expression cannot be blank", expression or "")

    alternatives = _split_and_cleanup(expression, "|")
    if not alternatives:
        raise CronParseError("Cron expression cannot be blank", expression)

    expressions = [CronParser(text, has_seconds=has_seconds).parse() for text in alternatives]
    logger.debug("Parsed %r into %d expression(s)", expression, len(expressions))
    return CronExprSet(pattern=expression, expressions=expressions)
