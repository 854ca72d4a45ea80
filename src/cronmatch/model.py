"""Structured representation of parsed cron expressions.

A parsed schedule is a :class:`CronExprSet`: the original pattern plus one
:class:`CronExpr` per ``|``-separated alternative. Every expression maps
all seven field kinds to a :class:`CronField` specifier.

The structure is plain data. It serializes to a stable dict/JSON layout so
a schedule can be parsed once, stored, and evaluated many times. Callers
treat a parsed set as immutable; code that needs to normalize it works on
a :meth:`CronExprSet.copy`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator

from cronmatch.fields import FIELD_ORDER, CronFieldType


@dataclass(frozen=True)
class CronRange:
    """Inclusive range ``start-end``."""

    start: int
    end: int

    def to_dict(self) -> dict[str, int]:
        return {"from": self.start, "to": self.end}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CronRange":
        return cls(int(data["from"]), int(data["to"]))


@dataclass(frozen=True)
class CronStep:
    """Stepped range ``start-end/step``."""

    start: int
    end: int
    step: int

    def values(self) -> list[int]:
        """Expand the step into its explicit values.

        A step of 0 repeats only the start value.
        """
        if self.step == 0:
            return [self.start]
        return list(range(self.start, self.end + 1, self.step))

    def to_dict(self) -> dict[str, int]:
        return {"from": self.start, "to": self.end, "step": self.step}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CronStep":
        return cls(int(data["from"]), int(data["to"]), int(data["step"]))


@dataclass(frozen=True)
class CronNth:
    """Nth (1-based) occurrence of a weekday within a month."""

    day_of_week: int
    instance: int

    def to_dict(self) -> dict[str, int]:
        return {"day_of_week": self.day_of_week, "instance": self.instance}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CronNth":
        return cls(int(data["day_of_week"]), int(data["instance"]))


@dataclass
class CronField:
    """Specifier for a single field.

    Attributes:
        all: Matches any value (``*``).
        omit: No specific value (``?``, or seconds not requested).
        values: Explicit values, deduplicated and ascending.
        ranges: Inclusive ranges.
        steps: Stepped ranges; flattened into ``values`` before evaluation.
        nth_days: ``weekday#n`` occurrences (day_of_week only).
        last_day: ``L`` flag.
        last_days: ``<weekday>L`` last occurrences (day_of_week only).
        last_weekday: ``LW`` flag (day_of_month only).
        nearest_weekdays: ``<day>W`` targets (day_of_month only).
    """

    all: bool = False
    omit: bool = False
    values: list[int] = field(default_factory=list)
    ranges: list[CronRange] = field(default_factory=list)
    steps: list[CronStep] = field(default_factory=list)
    nth_days: list[CronNth] = field(default_factory=list)
    last_day: bool = False
    last_days: list[int] = field(default_factory=list)
    last_weekday: bool = False
    nearest_weekdays: list[int] = field(default_factory=list)

    @classmethod
    def wildcard(cls) -> "CronField":
        return cls(all=True)

    @classmethod
    def omitted(cls) -> "CronField":
        return cls(omit=True)

    @property
    def has_special(self) -> bool:
        """Check if the field carries a calendar-dependent tag."""
        return bool(
            self.last_day
            or self.last_weekday
            or self.last_days
            or self.nearest_weekdays
            or self.nth_days
        )

    @property
    def is_constrained(self) -> bool:
        """True when the field carries its own constraint (neither ``*`` nor ``?``)."""
        return not self.all and not self.omit

    def copy(self) -> "CronField":
        """Structural copy; value objects inside the lists are immutable."""
        return CronField(
            all=self.all,
            omit=self.omit,
            values=list(self.values),
            ranges=list(self.ranges),
            steps=list(self.steps),
            nth_days=list(self.nth_days),
            last_day=self.last_day,
            last_days=list(self.last_days),
            last_weekday=self.last_weekday,
            nearest_weekdays=list(self.nearest_weekdays),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.all:
            data["all"] = True
        if self.omit:
            data["omit"] = True
        if self.values:
            data["values"] = list(self.values)
        if self.ranges:
            data["ranges"] = [r.to_dict() for r in self.ranges]
        if self.steps:
            data["steps"] = [s.to_dict() for s in self.steps]
        if self.nth_days:
            data["nthDays"] = [n.to_dict() for n in self.nth_days]
        if self.last_day:
            data["lastDay"] = True
        if self.last_days:
            data["lastDays"] = list(self.last_days)
        if self.last_weekday:
            data["lastWeekday"] = True
        if self.nearest_weekdays:
            data["nearestWeekdays"] = list(self.nearest_weekdays)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CronField":
        return cls(
            all=bool(data.get("all", False)),
            omit=bool(data.get("omit", False)),
            values=[int(v) for v in data.get("values", [])],
            ranges=[CronRange.from_dict(r) for r in data.get("ranges", [])],
            steps=[CronStep.from_dict(s) for s in data.get("steps", [])],
            nth_days=[CronNth.from_dict(n) for n in data.get("nthDays", [])],
            last_day=bool(data.get("lastDay", False)),
            last_days=[int(v) for v in data.get("lastDays", [])],
            last_weekday=bool(data.get("lastWeekday", False)),
            nearest_weekdays=[int(v) for v in data.get("nearestWeekdays", [])],
        )


@dataclass
class CronExpr:
    """One fully-populated cron expression (a single ``|`` alternative)."""

    second: CronField = field(default_factory=CronField.omitted)
    minute: CronField = field(default_factory=CronField.wildcard)
    hour: CronField = field(default_factory=CronField.wildcard)
    day_of_month: CronField = field(default_factory=CronField.wildcard)
    month: CronField = field(default_factory=CronField.wildcard)
    day_of_week: CronField = field(default_factory=CronField.omitted)
    year: CronField = field(default_factory=CronField.wildcard)

    def __getitem__(self, field_type: CronFieldType) -> CronField:
        return getattr(self, CronFieldType(field_type).value)

    def __setitem__(self, field_type: CronFieldType, value: CronField) -> None:
        setattr(self, CronFieldType(field_type).value, value)

    def items(self) -> Iterator[tuple[CronFieldType, CronField]]:
        for field_type in FIELD_ORDER:
            yield field_type, self[field_type]

    def copy(self) -> "CronExpr":
        return CronExpr(**{ft.value: f.copy() for ft, f in self.items()})

    def to_dict(self) -> dict[str, Any]:
        return {ft.value: f.to_dict() for ft, f in self.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CronExpr":
        expr = cls()
        for field_type in FIELD_ORDER:
            if field_type.value in data:
                expr[field_type] = CronField.from_dict(data[field_type.value])
        return expr


@dataclass
class CronExprSet:
    """Ordered, non-empty list of alternative expressions.

    A time matches the set when it matches any member expression.
    """

    pattern: str
    expressions: list[CronExpr]

    def __iter__(self) -> Iterator[CronExpr]:
        return iter(self.expressions)

    def __len__(self) -> int:
        return len(self.expressions)

    def copy(self) -> "CronExprSet":
        return CronExprSet(self.pattern, [e.copy() for e in self.expressions])

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern": self.pattern,
            "expressions": [e.to_dict() for e in self.expressions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CronExprSet":
        return cls(
            pattern=str(data.get("pattern", "")),
            expressions=[CronExpr.from_dict(e) for e in data["expressions"]],
        )

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text: str) -> "CronExprSet":
        return cls.from_dict(json.loads(text))

    def __str__(self) -> str:
        return self.pattern
