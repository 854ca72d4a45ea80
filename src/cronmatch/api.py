"""Public matching API.

Usage:
    >>> from cronmatch import get_future_matches, is_time_matches
    >>>
    >>> get_future_matches("0 0 l *", start_at="2020-01-01T00:00:00Z", match_count=3)
    ['2020-01-31T00:00:00Z', '2020-02-29T00:00:00Z', '2020-03-31T00:00:00Z']
    >>>
    >>> is_time_matches("0 0 ? * 1#1", "2020-01-06T00:00:00Z")
    True
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterator

from cronmatch import civil
from cronmatch.errors import CronOptionsError, CronParseError
from cronmatch.matcher import is_set_match
from cronmatch.model import CronExprSet
from cronmatch.parser import parse
from cronmatch.series import TimeSeries
from cronmatch.simplify import simplify

logger = logging.getLogger(__name__)

DEFAULT_MATCH_COUNT = 5
MAX_LOOP_COUNT = 100_000
DEFAULT_TIMEZONE = "UTC"

ENV_PREFIX = "CRONMATCH_"


@dataclass
class MatchOptions:
    """Options for :func:`get_future_matches`.

    Attributes:
        timezone: Zone the schedule is read in.
        start_at: Inclusive lower bound (ISO-8601 text or datetime); now if None.
        end_at: Exclusive upper bound, optional.
        match_count: Maximum number of results.
        format_in_timezone: Output in ``timezone`` with its offset instead of UTC.
        max_loop_count: Maximum number of candidate times to examine.
        match_validator: Extra accept/reject check on each formatted match.
        has_seconds: Raw text starts with a seconds field.
    """

    timezone: str = DEFAULT_TIMEZONE
    start_at: str | datetime | None = None
    end_at: str | datetime | None = None
    match_count: int = DEFAULT_MATCH_COUNT
    format_in_timezone: bool = False
    max_loop_count: int = MAX_LOOP_COUNT
    match_validator: Callable[[str], bool] | None = None
    has_seconds: bool = False

    def __post_init__(self) -> None:
        if self.timezone is None:
            self.timezone = DEFAULT_TIMEZONE
        if self.match_count is None:
            self.match_count = DEFAULT_MATCH_COUNT
        if self.max_loop_count is None:
            self.max_loop_count = MAX_LOOP_COUNT
        if self.match_count <= 0:
            raise CronOptionsError(f"match_count must be positive: {self.match_count}")
        if self.max_loop_count <= 0:
            raise CronOptionsError(f"max_loop_count must be positive: {self.max_loop_count}")

    def replace(self, **changes: Any) -> "MatchOptions":
        """Return a copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, **overrides: Any) -> "MatchOptions":
        """Build options from ``CRONMATCH_*`` environment variables.

        Environment variables:
            CRONMATCH_TIMEZONE: Zone name (default: UTC)
            CRONMATCH_MATCH_COUNT: Maximum results (default: 5)
            CRONMATCH_MAX_LOOP_COUNT: Candidate limit (default: 100000)
            CRONMATCH_FORMAT_IN_TIMEZONE: Output in the zone (default: false)
            CRONMATCH_HAS_SECONDS: Expressions carry seconds (default: false)

        Malformed values fall back to the defaults; keyword overrides win.
        """

        def get_bool(key: str, default: bool = False) -> bool:
            value = os.environ.get(ENV_PREFIX + key, "").lower()
            if value in ("true", "1", "yes", "on"):
                return True
            if value in ("false", "0", "no", "off"):
                return False
            return default

        def get_int(key: str, default: int) -> int:
            try:
                value = int(os.environ.get(ENV_PREFIX + key, default))
            except ValueError:
                return default
            return value if value > 0 else default

        values: dict[str, Any] = {
            "timezone": os.environ.get(ENV_PREFIX + "TIMEZONE", DEFAULT_TIMEZONE) or DEFAULT_TIMEZONE,
            "match_count": get_int("MATCH_COUNT", DEFAULT_MATCH_COUNT),
            "max_loop_count": get_int("MAX_LOOP_COUNT", MAX_LOOP_COUNT),
            "format_in_timezone": get_bool("FORMAT_IN_TIMEZONE"),
            "has_seconds": get_bool("HAS_SECONDS"),
        }
        values.update(overrides)
        return cls(**values)


def _resolve_options(options: MatchOptions | None, overrides: dict[str, Any]) -> MatchOptions:
    if options is None:
        return MatchOptions(**overrides)
    if overrides:
        return options.replace(**overrides)
    return options


def _prepare(expr: CronExprSet | str, has_seconds: bool = False) -> CronExprSet:
    """Parse raw text if needed, then simplify a private copy."""
    if isinstance(expr, str):
        expr = parse(expr, has_seconds=has_seconds)
    return simplify(expr)


class CronIterator(Iterator[datetime]):
    """Iterator over matching times.

    Pumps a :class:`TimeSeries`, keeps the candidates the expression set
    accepts, and stops at ``end_at`` or after ``max_loop_count`` candidates.
    ``match_count`` and ``match_validator`` are applied by
    :func:`get_future_matches`, not here.

    Example:
        >>> it = CronIterator("0 9 ? * mon-fri", MatchOptions(timezone="Europe/Berlin"))
        >>> next(it)
    """

    def __init__(
        self,
        expr: CronExprSet | str,
        options: MatchOptions | None = None,
        **overrides: Any,
    ) -> None:
        self._options = _resolve_options(options, overrides)
        self._zone = civil.resolve_zone(self._options.timezone)
        self._expr_set = _prepare(expr, self._options.has_seconds)

        start_at = self._options.start_at
        start = civil.now(self._zone) if start_at is None else civil.to_civil(start_at, self._zone)
        self._start = start.replace(microsecond=0)

        end_at = self._options.end_at
        self._end = None if end_at is None else civil.instant(civil.to_civil(end_at, self._zone))

        self._series = TimeSeries(self._expr_set, self._start)
        self._loop_count = 0
        self._done = False

        logger.debug(
            "Searching %r in %s from %s to %s (max %d candidates)",
            self._expr_set.pattern,
            self._options.timezone,
            self._start.isoformat(),
            self._end.isoformat() if self._end else "unbounded",
            self._options.max_loop_count,
        )

    @property
    def options(self) -> MatchOptions:
        return self._options

    @property
    def start(self) -> datetime:
        return self._start

    @property
    def loop_count(self) -> int:
        """Number of candidate times examined so far."""
        return self._loop_count

    def __iter__(self) -> "CronIterator":
        return self

    def __next__(self) -> datetime:
        start = civil.instant(self._start)

        while not self._done:
            if self._loop_count >= self._options.max_loop_count:
                logger.debug("Stopped after %d candidates", self._loop_count)
                self._done = True
                break

            self._loop_count += 1
            candidate = next(self._series, None)
            if candidate is None:
                self._done = True
                break

            moment = civil.instant(candidate)
            if self._end is not None and moment >= self._end:
                self._done = True
                break

            if moment < start:
                continue

            if is_set_match(self._expr_set, candidate):
                return candidate

        raise StopIteration


def get_future_matches(
    expr: CronExprSet | str,
    options: MatchOptions | None = None,
    **overrides: Any,
) -> list[str]:
    """Find the next matching times of a schedule.

    Args:
        expr: Parsed set or raw cron text.
        options: Match options; keyword arguments override its fields.

    Returns:
        Up to ``match_count`` formatted instants in ascending order.

    Raises:
        CronParseError: If raw text is invalid.
        CronOptionsError: If the options are unusable.
    """
    iterator = CronIterator(expr, options, **overrides)
    opts = iterator.options
    matches: list[str] = []

    for moment in iterator:
        text = civil.format_instant(moment, opts.format_in_timezone)
        if opts.match_validator is None or opts.match_validator(text):
            matches.append(text)
        if len(matches) >= opts.match_count:
            break

    return matches


def is_time_matches(
    expr: CronExprSet | str,
    time: str | datetime,
    timezone: str | None = None,
    *,
    has_seconds: bool = False,
) -> bool:
    """Check whether a single instant matches a schedule.

    Args:
        expr: Parsed set or raw cron text.
        time: ISO-8601 text or datetime.
        timezone: Zone the schedule is read in (default UTC).
        has_seconds: Raw text starts with a seconds field.
    """
    zone = civil.resolve_zone(timezone)
    expr_set = _prepare(expr, has_seconds)
    return is_set_match(expr_set, civil.to_civil(time, zone))


def validate_expression(expression: str, *, has_seconds: bool = False) -> list[str]:
    """Validate a cron expression.

    Returns:
        List of validation errors (empty if valid).
    """
    try:
        parse(expression, has_seconds=has_seconds)
    except CronParseError as e:
        return [str(e)]
    return []


def is_valid_expression(expression: str, *, has_seconds: bool = False) -> bool:
    """Check if a cron expression is valid."""
    return not validate_expression(expression, has_seconds=has_seconds)
