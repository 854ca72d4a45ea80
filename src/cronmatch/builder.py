"""Fluent builder for cron expressions."""

from __future__ import annotations

from cronmatch.model import CronExprSet
from cronmatch.parser import parse


class CronBuilder:
    """Fluent builder for cron expressions.

    Each builder describes one alternative at a time; :meth:`or_else`
    closes the current one and starts another, joined with ``|``.

    Example:
        >>> expr = (CronBuilder()
        ...     .at_minute(0, 30)
        ...     .at_hour(9, 17)
        ...     .on_weekdays()
        ...     .build())
    """

    def __init__(self) -> None:
        """Initialize builder with defaults (every minute)."""
        self._alternatives: list[list[str]] = []
        self._include_seconds: bool = False
        self._reset()

    def _reset(self) -> None:
        self._second: str = "0"
        self._minute: str = "*"
        self._hour: str = "*"
        self._day_of_month: str = "*"
        self._month: str = "*"
        self._day_of_week: str = "?"
        self._year: str = "*"

    def with_seconds(self) -> "CronBuilder":
        """Include seconds field in expression."""
        self._include_seconds = True
        return self

    def at_second(self, *seconds: int) -> "CronBuilder":
        """Set specific seconds."""
        self._include_seconds = True
        self._second = ",".join(str(s) for s in seconds)
        return self

    def every_n_seconds(self, n: int) -> "CronBuilder":
        """Run every n seconds."""
        self._include_seconds = True
        self._second = f"*/{n}"
        return self

    def at_minute(self, *minutes: int) -> "CronBuilder":
        """Set specific minutes."""
        self._minute = ",".join(str(m) for m in minutes)
        return self

    def every_n_minutes(self, n: int) -> "CronBuilder":
        """Run every n minutes."""
        self._minute = f"*/{n}"
        return self

    def at_hour(self, *hours: int) -> "CronBuilder":
        """Set specific hours."""
        self._hour = ",".join(str(h) for h in hours)
        return self

    def every_n_hours(self, n: int) -> "CronBuilder":
        """Run every n hours."""
        self._hour = f"*/{n}"
        return self

    def on_day(self, *days: int) -> "CronBuilder":
        """Set specific days of month."""
        self._day_of_month = ",".join(str(d) for d in days)
        self._day_of_week = "?"
        return self

    def on_last_day(self) -> "CronBuilder":
        """Run on last day of month."""
        self._day_of_month = "L"
        self._day_of_week = "?"
        return self

    def on_last_weekday_of_month(self) -> "CronBuilder":
        """Run on the last Monday-Friday day of the month."""
        self._day_of_month = "LW"
        self._day_of_week = "?"
        return self

    def on_weekday_nearest(self, day: int) -> "CronBuilder":
        """Run on weekday nearest to specified day."""
        self._day_of_month = f"{day}W"
        self._day_of_week = "?"
        return self

    def in_month(self, *months: int | str) -> "CronBuilder":
        """Set specific months."""
        self._month = ",".join(str(m).upper() for m in months)
        return self

    def in_year(self, *years: int) -> "CronBuilder":
        """Set specific years."""
        self._year = ",".join(str(y) for y in years)
        return self

    def on_weekday(self, *weekdays: int | str) -> "CronBuilder":
        """Set specific weekdays (0=SUN, 6=SAT)."""
        return self._weekdays(",".join(str(w).upper() for w in weekdays))

    def on_weekdays(self) -> "CronBuilder":
        """Run Monday through Friday."""
        return self._weekdays("MON-FRI")

    def on_weekends(self) -> "CronBuilder":
        """Run Saturday and Sunday."""
        return self._weekdays("SAT,SUN")

    def on_nth_weekday(self, weekday: int | str, instance: int) -> "CronBuilder":
        """Run on the nth occurrence of a weekday, e.g. (1, 2) for the second Monday."""
        return self._weekdays(f"{str(weekday).upper()}#{instance}")

    def on_last_weekday(self, weekday: int | str) -> "CronBuilder":
        """Run on the last occurrence of a weekday in the month."""
        return self._weekdays(f"{str(weekday).upper()}L")

    def _weekdays(self, spec: str) -> "CronBuilder":
        self._day_of_week = spec
        self._day_of_month = "?"
        return self

    def every_day(self) -> "CronBuilder":
        """Run every day."""
        self._day_of_month = "*"
        self._day_of_week = "?"
        return self

    def daily_at(self, hour: int, minute: int = 0) -> "CronBuilder":
        """Run daily at specific time."""
        self._minute = str(minute)
        self._hour = str(hour)
        return self

    def hourly_at(self, minute: int) -> "CronBuilder":
        """Run hourly at specific minute."""
        self._minute = str(minute)
        return self

    def or_else(self) -> "CronBuilder":
        """Close the current alternative and start a new one."""
        self._alternatives.append(self._fields())
        self._reset()
        return self

    def _fields(self) -> list[str]:
        return [
            self._second,
            self._minute,
            self._hour,
            self._day_of_month,
            self._month,
            self._day_of_week,
            self._year,
        ]

    def _render(self, fields: list[str]) -> str:
        # Seconds apply to every alternative or to none
        return " ".join(fields if self._include_seconds else fields[1:])

    def to_string(self) -> str:
        """Render the expression text."""
        return " | ".join(self._render(f) for f in [*self._alternatives, self._fields()])

    def build(self) -> CronExprSet:
        """Build the cron expression.

        Returns:
            Parsed CronExprSet.

        Raises:
            CronParseError: If a setter produced an invalid field.
        """
        return parse(self.to_string(), has_seconds=self._include_seconds)
