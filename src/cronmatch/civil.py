"""Civil-time helpers on top of ``datetime``, ``zoneinfo`` and ``calendar``.

Everything the generator and evaluator need from a calendar: zone lookup,
reading ISO-8601 instants into a zone, composing a wall-clock time,
weekday numbering, month lengths, and output formatting.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronmatch.errors import CronOptionsError
from cronmatch.fields import FRIDAY, MONDAY

UTC = timezone.utc

_UTC_NAMES = frozenset({"utc", "etc/utc", "z", "gmt", "etc/gmt"})


def resolve_zone(name: str | tzinfo | None) -> tzinfo:
    """Resolve a zone name (default UTC) to a tzinfo."""
    if name is None:
        return UTC
    if isinstance(name, tzinfo):
        return name
    if name.strip().lower() in _UTC_NAMES:
        return UTC
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise CronOptionsError(f"Unknown time zone: {name!r}") from e


def to_civil(value: str | datetime, zone: tzinfo) -> datetime:
    """Read an instant into ``zone``.

    Naive values are taken as wall time in ``zone``; values carrying an
    offset are converted into it.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise CronOptionsError(f"Invalid ISO-8601 instant: {value!r}") from e

    if value.tzinfo is None:
        return normalize(value.replace(tzinfo=zone))
    return value.astimezone(zone)


def now(zone: tzinfo) -> datetime:
    return datetime.now(zone)


def compose(zone: tzinfo, year: int, month: int, day: int, hour: int, minute: int, second: int) -> datetime:
    """Build a wall-clock time in ``zone``, resolving DST gaps forward."""
    return normalize(datetime(year, month, day, hour, minute, second, tzinfo=zone))


def normalize(dt: datetime) -> datetime:
    """Round-trip through UTC so nonexistent wall times become real ones."""
    return dt.astimezone(UTC).astimezone(dt.tzinfo)


def instant(dt: datetime) -> datetime:
    """Comparable absolute instant (aware datetimes in one zone compare by wall time)."""
    return dt.astimezone(UTC)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_of(year: int, month: int, day: int) -> int:
    """Cron weekday (Sunday=0 ... Saturday=6) of a calendar day."""
    # Python weekday: Monday=0, Sunday=6
    return (calendar.weekday(year, month, day) + 1) % 7


def cron_weekday(dt: datetime) -> int:
    return (dt.weekday() + 1) % 7


def is_business_day(weekday: int) -> bool:
    return MONDAY <= weekday <= FRIDAY


def last_day_of_weekday(year: int, month: int, weekday: int) -> int:
    """Day number of the last ``weekday`` in the month, scanning back from month end."""
    day = days_in_month(year, month)
    while weekday_of(year, month, day) != weekday:
        day -= 1
    return day


def last_business_day(year: int, month: int) -> int:
    """Day number of the last Monday-Friday day of the month."""
    day = days_in_month(year, month)
    while not is_business_day(weekday_of(year, month, day)):
        day -= 1
    return day


def days_of_weekday(year: int, month: int, weekday: int) -> list[int]:
    """All day numbers in the month falling on ``weekday``."""
    return [
        day
        for day in range(1, days_in_month(year, month) + 1)
        if weekday_of(year, month, day) == weekday
    ]


def format_instant(dt: datetime, in_zone: bool = False) -> str:
    """Format to second precision.

    UTC output uses a ``Z`` suffix; zone output keeps the zone's offset.
    """
    if in_zone:
        return dt.replace(microsecond=0).isoformat(timespec="seconds")
    return instant(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
