"""
Date/interval helpers shared by the statistics and insights engines.

All helpers work on naive local datetimes. Timezone-aware values are
converted to the machine's local time first, so a session logged as
"23:30+00:00" lands on the same calendar day the user saw on their clock.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

ONE_DAY = timedelta(days=1)


def to_local(dt: datetime) -> datetime:
    """Naive local datetime for dt."""
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def local_day(dt: datetime) -> date:
    return to_local(dt).date()


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(local_day(dt), time.min)


def end_of_day(dt: datetime) -> datetime:
    return datetime.combine(local_day(dt), time.max)


def start_of_week(dt: datetime) -> datetime:
    """Monday 00:00 of the week containing dt."""
    day = local_day(dt)
    return datetime.combine(day - timedelta(days=day.weekday()), time.min)


def end_of_week(dt: datetime) -> datetime:
    """Sunday 23:59:59.999999 of the week containing dt."""
    return start_of_week(dt) + timedelta(days=7) - timedelta(microseconds=1)


def is_within(dt: datetime, start: datetime, end: datetime) -> bool:
    """True if dt lies in the closed interval [start, end].

    A reversed interval (end < start) contains nothing.
    """
    dt, start, end = to_local(dt), to_local(start), to_local(end)
    if end < start:
        return False
    return start <= dt <= end


def days_between(later: date, earlier: date) -> int:
    """Whole calendar days from earlier to later."""
    return (later - earlier).days
