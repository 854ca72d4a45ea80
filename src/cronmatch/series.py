"""Ascending enumeration of candidate civil times.

:class:`TimeSeries` walks the expanded value sets of an expression set as
an odometer: ``year -> month -> day -> hour -> minute -> second``. It keeps
one cursor per level and advances on demand, so no more state than six
indexes lives between calls.

The series yields every wall time whose fields are in the expanded sets
and which is not before the start instant. It does not apply the
day_of_month / day_of_week rules; the evaluator filters candidates.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from datetime import datetime
from typing import Iterator

from cronmatch import civil
from cronmatch.model import CronExprSet
from cronmatch.simplify import SERIES_ORDER, merge_fields

logger = logging.getLogger(__name__)

_YEAR, _MONTH, _DAY, _HOUR, _MINUTE, _SECOND = range(6)
_LEVELS = len(SERIES_ORDER)


class TimeSeries(Iterator[datetime]):
    """Lazy ascending sequence of candidate times.

    The series is finite (the year field is bounded) and not restartable;
    create a new one to enumerate again.

    Example:
        >>> series = TimeSeries(simplify(parse("0 0 l *")), start)
        >>> next(series)
    """

    def __init__(self, expr_set: CronExprSet, start: datetime) -> None:
        """Initialize series.

        Args:
            expr_set: Simplified expression set.
            start: Zone-aware inclusive lower bound; its zone is the zone
                candidates are composed in.
        """
        merged = merge_fields(expr_set, start.year)
        self._levels: tuple[list[int], ...] = tuple(merged[f] for f in SERIES_ORDER)
        self._zone = start.tzinfo
        self._start = civil.instant(start)
        self._floor = (start.year, start.month, start.day, start.hour, start.minute, start.second)
        self._cursor = [0] * _LEVELS
        self._started = False
        self._exhausted = False
        self._last: datetime | None = None

    def __iter__(self) -> "TimeSeries":
        return self

    def __next__(self) -> datetime:
        while not self._exhausted:
            if self._started:
                found = self._seek(_SECOND, self._cursor[_SECOND] + 1)
            else:
                self._started = True
                found = self._seek(_YEAR, 0)

            if not found:
                self._exhausted = True
                logger.debug("Time series exhausted")
                break

            candidate = self._compose()
            moment = civil.instant(candidate)
            if moment < self._start:
                # Start inside the second pass of a repeated hour
                candidate = candidate.replace(fold=1)
                moment = civil.instant(candidate)

            # Skip times before the start and repeats produced by DST gaps
            if moment < self._start or (self._last is not None and moment <= self._last):
                continue

            self._last = moment
            return candidate

        raise StopIteration

    def _value(self, level: int) -> int:
        return self._levels[level][self._cursor[level]]

    def _on_floor(self, level: int) -> bool:
        """True while every outer level sits on the start time's value."""
        return all(self._value(i) == self._floor[i] for i in range(level))

    def _usable(self, level: int, index: int) -> int:
        """First index >= ``index`` usable at ``level``, or len(values) when none is."""
        values = self._levels[level]

        # Lower bound applies only while descending along the start time
        if self._on_floor(level):
            index = max(index, bisect_left(values, self._floor[level]))

        if level == _DAY and index < len(values):
            month_days = civil.days_in_month(self._value(_YEAR), self._value(_MONTH))
            if values[index] > month_days:
                return len(values)

        return index

    def _seek(self, level: int, index: int) -> bool:
        """Move ``level`` to the first usable index >= ``index`` and reset inner levels.

        Backtracks into outer levels when a level runs out.

        Returns:
            False once the outermost level is exhausted.
        """
        while level >= 0:
            index = self._usable(level, index)
            if index < len(self._levels[level]):
                self._cursor[level] = index
                if level == _SECOND:
                    return True
                level += 1
                index = 0
            else:
                level -= 1
                if level >= 0:
                    index = self._cursor[level] + 1
        return False

    def _compose(self) -> datetime:
        return civil.compose(self._zone, *(self._value(level) for level in range(_LEVELS)))
