"""Per-day summaries built from the day aggregate.

Every date of the reporting window gets a :class:`DaySummary`, including
dates without activity (which get an empty vector).  Worked time is the
number of active buckets times the bucket span, so it follows the
bucketizer's rounding rather than the exact range lengths.
"""

from __future__ import annotations

import datetime as dt
from typing import Mapping, Sequence

from pydantic import BaseModel, Field

from worktime.core.defaults import DEFAULT_BUCKETS_PER_DAY
from worktime.core.time import bucket_span, date_range, is_weekend, iso_week
from worktime.presence.vector import PresenceVector


class DaySummary(BaseModel, frozen=True):
    """Presence picture and worked time for one calendar date."""

    date: dt.date = Field(description="Calendar date this row covers.")
    rendering: str = Field(description="One character per bucket, '*' active, '.' idle.")
    worked_buckets: int = Field(ge=0, description="Number of active buckets.")
    worked_seconds: int = Field(ge=0, description="worked_buckets times the bucket span.")
    iso_week: int = Field(ge=1, le=53, description="ISO-8601 week number.")
    is_weekend: bool = Field(description="True on Saturday and Sunday.")

    @property
    def duration(self) -> dt.timedelta:
        return dt.timedelta(seconds=self.worked_seconds)

    @property
    def weekday(self) -> str:
        return self.date.strftime("%a")


def format_duration(duration: dt.timedelta) -> str:
    """Render *duration* as ``HH:MM`` (hours may exceed 23)."""
    total_minutes = int(duration.total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def summarize_day(
    day: dt.date,
    vector: PresenceVector,
    buckets_per_day: int = DEFAULT_BUCKETS_PER_DAY,
) -> DaySummary:
    """Build a :class:`DaySummary` for *day* from its merged vector.

    Raises:
        ValueError: If *vector* is not *buckets_per_day* long.
    """
    if len(vector) != buckets_per_day:
        raise ValueError(
            f"vector for {day} has {len(vector)} buckets, expected {buckets_per_day}"
        )
    span = bucket_span(buckets_per_day)
    worked = vector.worked_buckets
    return DaySummary(
        date=day,
        rendering=vector.render(),
        worked_buckets=worked,
        worked_seconds=int((span * worked).total_seconds()),
        iso_week=iso_week(day),
        is_weekend=is_weekend(day),
    )


def build_day_summaries(
    aggregate: Mapping[dt.date, PresenceVector],
    date_from: dt.date,
    date_to: dt.date,
    buckets_per_day: int = DEFAULT_BUCKETS_PER_DAY,
) -> list[DaySummary]:
    """One summary per date in ``[date_from, date_to)``, in calendar order.

    Dates missing from *aggregate* get an all-idle row.  Aggregate
    entries outside the window are ignored.
    """
    empty = PresenceVector.empty(buckets_per_day)
    return [
        summarize_day(day, aggregate.get(day, empty), buckets_per_day)
        for day in date_range(date_from, date_to)
    ]


def total_worked(summaries: Sequence[DaySummary]) -> dt.timedelta:
    return sum((s.duration for s in summaries), dt.timedelta())
