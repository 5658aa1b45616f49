"""Calendar-day arithmetic, bucket spans, and reporting windows.

All values are naive datetimes in the reporting clock: sources shift raw
timestamps by a fixed offset before they reach the pipeline, and no
other timezone handling happens here.
"""

from __future__ import annotations

import datetime as dt

from worktime.core.defaults import MICROSECONDS_PER_DAY
from worktime.core.errors import BucketConfigError

TICK = dt.timedelta(microseconds=1)
ONE_DAY = dt.timedelta(days=1)


def validate_buckets_per_day(buckets_per_day: int) -> int:
    """Return *buckets_per_day* if it evenly divides one day.

    Raises:
        BucketConfigError: If the value is not a positive integer divisor
            of the number of microseconds in a day.
    """
    if isinstance(buckets_per_day, bool) or not isinstance(buckets_per_day, int):
        raise BucketConfigError(
            f"buckets_per_day must be an integer, got {buckets_per_day!r}"
        )
    if buckets_per_day <= 0:
        raise BucketConfigError(
            f"buckets_per_day must be positive, got {buckets_per_day}"
        )
    if MICROSECONDS_PER_DAY % buckets_per_day:
        raise BucketConfigError(
            f"buckets_per_day={buckets_per_day} does not divide one day evenly"
        )
    return buckets_per_day


def bucket_span(buckets_per_day: int) -> dt.timedelta:
    """Width of one time-of-day bucket."""
    validate_buckets_per_day(buckets_per_day)
    return dt.timedelta(microseconds=MICROSECONDS_PER_DAY // buckets_per_day)


def start_of_day(ts: dt.datetime) -> dt.datetime:
    """Midnight at the start of *ts*'s calendar date (tzinfo preserved)."""
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def next_midnight(ts: dt.datetime) -> dt.datetime:
    """Midnight at the start of the calendar date after *ts*."""
    return start_of_day(ts) + ONE_DAY


def microseconds(delta: dt.timedelta) -> int:
    """Exact integer microseconds in *delta*."""
    return delta // TICK


def apply_clock_offset(ts: dt.datetime, offset_hours: float) -> dt.datetime:
    """Shift *ts* by a fixed number of hours."""
    if not offset_hours:
        return ts
    return ts + dt.timedelta(hours=offset_hours)


def in_window(
    ts: dt.datetime,
    start: dt.datetime | None,
    end: dt.datetime | None,
) -> bool:
    """True if *ts* lies in ``[start, end)``; ``None`` bounds are open."""
    if start is not None and ts < start:
        return False
    if end is not None and ts >= end:
        return False
    return True


def reporting_window(today: dt.date, lookback_days: int) -> tuple[dt.date, dt.date]:
    """Return ``(date_from, date_to)`` covering *lookback_days* up to and including *today*.

    ``date_to`` is exclusive.
    """
    if lookback_days < 0:
        raise ValueError(f"lookback_days must be >= 0, got {lookback_days}")
    return today - dt.timedelta(days=lookback_days), today + dt.timedelta(days=1)


def date_range(date_from: dt.date, date_to: dt.date) -> list[dt.date]:
    """Enumerate calendar dates from *date_from* to *date_to* (exclusive)."""
    return [
        date_from + dt.timedelta(days=i)
        for i in range((date_to - date_from).days)
    ]


def iso_week(day: dt.date) -> int:
    """ISO-8601 week number of *day* (weeks start Monday)."""
    return day.isocalendar()[1]


def is_weekend(day: dt.date) -> bool:
    return day.weekday() >= 5
