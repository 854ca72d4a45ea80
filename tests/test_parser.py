"""Tests for cron expression parsing.

Covers field tables, the error type, the single-alternative parser and
the ``|``-aware ``parse`` entry point, plus the dict/JSON layout of the
parsed structure.
"""

import logging

import pytest

from cronmatch import (
    FIELD_CONSTRAINTS,
    CronExpr,
    CronExprSet,
    CronField,
    CronFieldType,
    CronNth,
    CronParseError,
    CronParser,
    CronRange,
    CronStep,
    parse,
)
from cronmatch.errors import CronError


def first(text, **kwargs) -> CronExpr:
    return parse(text, **kwargs).expressions[0]


# =============================================================================
# FieldConstraints Tests
# =============================================================================


class TestFieldConstraints:
    """Tests for field constraints."""

    def test_second_constraints(self):
        """Test second field constraints."""
        c = FIELD_CONSTRAINTS[CronFieldType.SECOND]
        assert c.min_value == 0
        assert c.max_value == 59
        assert not c.supports_l
        assert not c.supports_w

    def test_day_of_month_constraints(self):
        """Test day of month field constraints."""
        c = FIELD_CONSTRAINTS[CronFieldType.DAY_OF_MONTH]
        assert c.min_value == 1
        assert c.max_value == 31
        assert c.supports_l
        assert c.supports_w
        assert c.supports_question
        assert not c.supports_hash

    def test_month_constraints(self):
        """Test month field constraints."""
        c = FIELD_CONSTRAINTS[CronFieldType.MONTH]
        assert c.min_value == 1
        assert c.max_value == 12
        assert c.names["jan"] == 1
        assert c.names["dec"] == 12

    def test_day_of_week_constraints(self):
        """Test day of week field constraints."""
        c = FIELD_CONSTRAINTS[CronFieldType.DAY_OF_WEEK]
        assert c.min_value == 0
        assert c.max_value == 6
        assert c.names["sun"] == 0
        assert c.names["7"] == 0
        assert c.supports_l
        assert c.supports_hash
        assert c.supports_question
        assert not c.supports_w

    def test_year_constraints(self):
        """Test year field constraints."""
        c = FIELD_CONSTRAINTS[CronFieldType.YEAR]
        assert c.min_value == 1970
        assert c.max_value == 2099

    def test_tables_are_read_only(self):
        """Test the constraint table cannot be modified."""
        with pytest.raises(TypeError):
            FIELD_CONSTRAINTS[CronFieldType.SECOND] = FIELD_CONSTRAINTS[CronFieldType.MINUTE]


# =============================================================================
# CronParseError Tests
# =============================================================================


class TestCronParseError:
    """Tests for CronParseError exception."""

    def test_error_hierarchy(self):
        """Test parse errors are CronErrors and ValueErrors."""
        error = CronParseError("Simple error")
        assert isinstance(error, CronError)
        assert isinstance(error, ValueError)
        assert error.expression == ""
        assert error.field is None
        assert error.token is None
        assert error.bound is None

    def test_out_of_range_message(self):
        """Test the message for a value above the field maximum."""
        with pytest.raises(CronParseError) as exc_info:
            parse("60 * ? * *")

        error = exc_info.value
        assert str(error) == (
            "Invalid cron expression [60 * ? * *]. Value [60] out of range for field "
            "[minute]. It must be less than or equals to [59]."
        )
        assert error.expression == "60 * ? * *"
        assert error.field == CronFieldType.MINUTE
        assert error.token == "60"
        assert error.bound == 59

    def test_field_count_message(self):
        """Test the message for a wrong number of fields."""
        with pytest.raises(CronParseError) as exc_info:
            parse("*")
        assert str(exc_info.value) == (
            "Invalid cron expression [*]. Expected [4 to 6] fields but found [1] fields."
        )

    def test_field_count_with_seconds(self):
        """Test field count bounds shift when seconds are requested."""
        with pytest.raises(CronParseError, match=r"Expected \[5 to 7\] fields"):
            parse("* * * *", has_seconds=True)

    @pytest.mark.parametrize("text", ["", "   ", " | "])
    def test_blank_expression(self, text):
        """Test blank input is rejected."""
        with pytest.raises(CronParseError, match="cannot be blank"):
            parse(text)


# =============================================================================
# CronParser Tests
# =============================================================================


class TestCronParser:
    """Tests for the cron parser."""

    def test_four_fields(self):
        """Test the shortest form fills in seconds, weekday and year."""
        expr = first("* * * *")
        assert expr.second.omit
        assert expr.minute.all
        assert expr.hour.all
        assert expr.day_of_month.all
        assert expr.month.all
        assert expr.day_of_week.omit
        assert expr.year.all

    def test_five_fields(self):
        """Test the standard form keeps an explicit weekday."""
        expr = first("* * * * *")
        assert expr.day_of_week.all
        assert expr.year.all

    def test_six_fields_with_year(self):
        """Test a sixth field is the year."""
        expr = first("0 0 1 1 ? 2030")
        assert expr.year.values == [2030]

    def test_seconds(self):
        """Test a seconds-first expression."""
        expr = first("*/15 * * * * ?", has_seconds=True)
        assert not expr.second.omit
        assert expr.second.steps == [CronStep(0, 59, 15)]
        assert expr.day_of_week.omit

    def test_seconds_with_year(self):
        """Test the seven-field form."""
        expr = first("30 0 0 1 1 ? 2025-2027", has_seconds=True)
        assert expr.second.values == [30]
        assert expr.year.ranges == [CronRange(2025, 2027)]

    def test_values_are_sorted_and_deduplicated(self):
        """Test list values are normalized."""
        expr = first("30,5,5,10 * * *")
        assert expr.minute.values == [5, 10, 30]

    def test_ranges_keep_order_and_deduplicate(self):
        """Test ranges keep first-seen order."""
        expr = first("20-30,0-12,0-12,20-30 * * *")
        assert expr.minute.ranges == [CronRange(20, 30), CronRange(0, 12)]

    def test_sunday_as_seven(self):
        """Test 7 is an alias of Sunday."""
        expr = first("* * ? * 7,0")
        assert expr.day_of_week.values == [0]

    def test_named_values(self):
        """Test case-insensitive month and weekday names."""
        expr = first("0 0 ? JAN-Mar mon-FRI")
        assert expr.month.ranges == [CronRange(1, 3)]
        assert expr.day_of_week.ranges == [CronRange(1, 5)]

    def test_weekday_range_ending_on_sunday(self):
        """Test a weekday range closed by Sunday is stored up to 7."""
        assert first("0 0 ? * fri-sun").day_of_week.ranges == [CronRange(5, 7)]
        assert first("0 0 ? * 5-7").day_of_week.ranges == [CronRange(5, 7)]
        assert first("0 0 ? * 5-0").day_of_week.ranges == [CronRange(5, 7)]

    def test_steps(self):
        """Test the step forms."""
        assert first("*/10 * * *").minute.steps == [CronStep(0, 59, 10)]
        assert first("5/20 * * *").minute.steps == [CronStep(5, 59, 20)]
        assert first("10-30/5 * * *").minute.steps == [CronStep(10, 30, 5)]
        assert first("0 0 ? * */2").day_of_week.steps == [CronStep(0, 7, 2)]

    def test_zero_step(self):
        """Test a zero step is accepted."""
        assert first("*/0 * * *").minute.steps == [CronStep(0, 59, 0)]

    def test_last_day(self):
        """Test L and LW in day of month."""
        expr = first("0 0 l,lw *")
        assert expr.day_of_month.last_day
        assert expr.day_of_month.last_weekday
        assert expr.day_of_month.values == []

    def test_last_day_in_day_of_week(self):
        """Test a bare L in day of week."""
        assert first("0 0 ? * L").day_of_week.last_day

    def test_last_days_of_kind(self):
        """Test nL in day of week."""
        assert first("0 0 ? * 0l,6L").day_of_week.last_days == [0, 6]
        assert first("0 0 ? * friL").day_of_week.last_days == [5]

    def test_nth_day(self):
        """Test the # modifier."""
        expr = first("0 0 ? * 1#1,fri#3")
        assert expr.day_of_week.nth_days == [CronNth(1, 1), CronNth(5, 3)]

    def test_nearest_weekday(self):
        """Test the W modifier."""
        assert first("0 0 15W,1w *").day_of_month.nearest_weekdays == [15, 1]

    def test_mixed_day_of_month(self):
        """Test specials combine with plain values."""
        field = first("0 0 1,L,15W *").day_of_month
        assert field.values == [1]
        assert field.last_day
        assert field.nearest_weekdays == [15]

    def test_parser_class(self):
        """Test CronParser parses a single alternative."""
        expr = CronParser("0 12 ? * mon-fri").parse()
        assert expr.minute.values == [0]
        assert expr.hour.values == [12]
        assert expr.day_of_month.omit

    @pytest.mark.parametrize(
        "text,field,bound",
        [
            ("0 0 32 *", CronFieldType.DAY_OF_MONTH, 31),
            ("0 0 0 *", CronFieldType.DAY_OF_MONTH, 1),
            ("0 24 * *", CronFieldType.HOUR, 23),
            ("0 0 * 13", CronFieldType.MONTH, 12),
            ("0 0 ? * 8", CronFieldType.DAY_OF_WEEK, 6),
            ("0 0 * * * 1969", CronFieldType.YEAR, 1970),
            ("0 0 ? * 1#6", CronFieldType.DAY_OF_WEEK, 5),
            ("0 0 ? * 1#0", CronFieldType.DAY_OF_WEEK, 1),
            ("*/60 * * *", CronFieldType.MINUTE, 59),
        ],
    )
    def test_bound_errors(self, text, field, bound):
        """Test out-of-range values report the violated bound."""
        with pytest.raises(CronParseError) as exc_info:
            parse(text)
        assert exc_info.value.field == field
        assert exc_info.value.bound == bound

    @pytest.mark.parametrize(
        "text",
        [
            "5-1 * * *",
            "5-5 * * *",
            "1-2-3 * * *",
            "30-10/5 * * *",
            "0 l * *",
            "0 0 ? * 5w",
            "0 0 ? * lw",
            "0 0 5l *",
            "0 0 1#1 *",
            "0 ? * *",
            "abc * * *",
            "² * * *",
            "0 ٣ * *",
            "0 0 ? * 1#a",
            "0 0 ? * 1#1#1",
            "1/2/3 * * *",
            "0 0 * * * * * *",
        ],
    )
    def test_invalid_expressions(self, text):
        """Test malformed expressions are rejected."""
        with pytest.raises(CronParseError) as exc_info:
            parse(text)
        assert str(exc_info.value).startswith(f"Invalid cron expression [{text}].")

    def test_case_insensitive(self):
        """Test letters are case-insensitive."""
        assert first("0 0 L DEC") == first("0 0 l dec")


# =============================================================================
# Predefined Expression Tests
# =============================================================================


class TestPredefinedExpressions:
    """Tests for @-aliases."""

    def test_yearly(self):
        """Test @yearly expands to January 1st at midnight."""
        expr = first("@yearly")
        assert expr.second.omit
        assert expr.minute.values == [0]
        assert expr.hour.values == [0]
        assert expr.day_of_month.values == [1]
        assert expr.month.values == [1]
        assert expr.day_of_week.omit

    def test_aliases_are_equivalent(self):
        """Test alias synonyms and case-insensitivity."""
        assert first("@annually") == first("@YEARLY")
        assert first("@midnight") == first("@Daily")

    def test_weekly(self):
        """Test @weekly runs on Sunday."""
        expr = first("@weekly")
        assert expr.day_of_week.values == [0]
        assert expr.day_of_month.omit

    def test_alias_ignores_seconds_flag(self):
        """Test aliases never carry seconds."""
        expr = first("@hourly", has_seconds=True)
        assert expr.second.omit
        assert expr.minute.values == [0]
        assert expr.hour.all


# =============================================================================
# Alternative Tests
# =============================================================================


class TestAlternatives:
    """Tests for |-separated alternatives."""

    def test_multiple_expressions(self):
        """Test each alternative becomes an expression."""
        expr_set = parse("0 0 1 * | 0 12 ? * mon | 0 0 1 *")
        assert len(expr_set) == 2
        assert expr_set.pattern == "0 0 1 * | 0 12 ? * mon | 0 0 1 *"
        assert expr_set.expressions[0].day_of_month.values == [1]
        assert expr_set.expressions[1].day_of_week.values == [1]

    def test_empty_alternatives_dropped(self):
        """Test empty alternatives are ignored."""
        assert len(parse("* * * * || ")) == 1

    def test_one_bad_alternative_fails_all(self):
        """Test parsing is all-or-nothing."""
        with pytest.raises(CronParseError):
            parse("0 0 * * | 99 * * *")

    def test_debug_log(self, caplog):
        """Test parsing logs the alternative count."""
        with caplog.at_level(logging.DEBUG, logger="cronmatch.parser"):
            parse("0 0 * * | 0 12 * *")
        assert "2 expression(s)" in caplog.text


# =============================================================================
# Model Tests
# =============================================================================


class TestModel:
    """Tests for the parsed structure."""

    def test_to_dict_lists_populated_tags(self):
        """Test the dict layout only carries populated tags."""
        data = parse("0 0 l *").to_dict()
        expr = data["expressions"][0]
        assert data["pattern"] == "0 0 l *"
        assert expr["second"] == {"omit": True}
        assert expr["minute"] == {"values": [0]}
        assert expr["day_of_month"] == {"lastDay": True}
        assert expr["year"] == {"all": True}

    def test_nested_tags(self):
        """Test ranges, steps and nth days serialize with their keys."""
        expr = parse("10-20/5 1-3 ? * 1#2").to_dict()["expressions"][0]
        assert expr["minute"] == {"steps": [{"from": 10, "to": 20, "step": 5}]}
        assert expr["hour"] == {"ranges": [{"from": 1, "to": 3}]}
        assert expr["day_of_week"] == {"nthDays": [{"day_of_week": 1, "instance": 2}]}

    def test_json_round_trip(self):
        """Test a set survives JSON serialization."""
        expr_set = parse("0 0 LW,15W * | 0 12 ? jan-mar 5L,1#1 | */5 * * *")
        assert CronExprSet.from_json(expr_set.to_json()) == expr_set

    @pytest.mark.parametrize(
        "text",
        ["0 0 LW,15W *", "0 12 ? jan-mar 5L,1#1", "*/5 * * * | @weekly", "0 0 ? * 5L 2030"],
    )
    def test_parse_is_deterministic(self, text):
        """Test parsing the same text twice gives equal sets."""
        assert parse(text) == parse(text)

    def test_equivalent_values_parse_equal(self):
        """Test reordered and repeated values give equal expressions."""
        assert parse("30,0,30 * * *").expressions == parse("0,30 * * *").expressions
        assert parse("0 0 ? * sun").expressions == parse("0 0 ? * 0").expressions

    def test_copy_is_independent(self):
        """Test copies do not share mutable state."""
        expr_set = parse("0,30 * * *")
        clone = expr_set.copy()
        clone.expressions[0].minute.values.append(45)
        assert expr_set.expressions[0].minute.values == [0, 30]

    def test_field_properties(self):
        """Test helper properties on CronField."""
        assert CronField.wildcard().all
        assert CronField.omitted().omit
        assert not CronField.wildcard().is_constrained
        assert not CronField.omitted().is_constrained
        assert CronField(values=[1]).is_constrained
        assert CronField(last_day=True).has_special
        assert not CronField(values=[1]).has_special

    def test_item_access(self):
        """Test field access by type."""
        expr = first("5 * * *")
        assert expr[CronFieldType.MINUTE].values == [5]
        expr[CronFieldType.HOUR] = CronField(values=[3])
        assert expr.hour.values == [3]

    def test_str(self):
        """Test str() returns the pattern."""
        assert str(parse("@daily")) == "@daily"

    def test_step_values(self):
        """Test step expansion."""
        assert CronStep(0, 10, 5).values() == [0, 5, 10]
        assert CronStep(3, 59, 0).values() == [3]
