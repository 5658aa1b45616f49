"""Map a single-day range onto fixed-width time-of-day buckets.

Offsets from midnight are measured in whole microseconds so bucket
indices are exact for every divisor of one day.  The start offset is
floored to its bucket.  Under the default ``HALF_OPEN`` policy the last
bucket is the ceiled end offset minus one (never before the first), so
exactly the buckets the range overlaps by at least one tick are marked;
``GENEROUS`` keeps the ceiled end offset itself (see
:class:`~worktime.core.types.BoundaryPolicy`).
"""

from __future__ import annotations

from datetime import datetime

from worktime.core.defaults import DEFAULT_BUCKETS_PER_DAY
from worktime.core.time import bucket_span, microseconds, start_of_day
from worktime.core.types import BoundaryPolicy, Range
from worktime.presence.vector import PresenceVector


def _offset(ts: datetime, day_start: datetime) -> int:
    return microseconds(ts - day_start)


def bucket_bounds(
    rng: Range,
    buckets_per_day: int = DEFAULT_BUCKETS_PER_DAY,
    *,
    boundary: BoundaryPolicy = BoundaryPolicy.HALF_OPEN,
) -> tuple[int, int]:
    """Return the inclusive ``(first, last)`` bucket indices covered by *rng*.

    Both indices are clamped to ``[0, buckets_per_day - 1]``.

    Raises:
        BucketConfigError: If *buckets_per_day* does not divide one day.
    """
    span = microseconds(bucket_span(buckets_per_day))
    day_start = start_of_day(rng.start)
    last_index = buckets_per_day - 1

    first = min(_offset(rng.start, day_start) // span, last_index)
    end_ceil = -(-_offset(rng.end, day_start) // span)

    if boundary is BoundaryPolicy.GENEROUS:
        last = end_ceil
    else:
        last = max(first, end_ceil - 1)
    last = min(last_index, last)

    # an end before the start (legacy pairing) still marks the start bucket
    return first, max(first, last)


def bucketize(
    rng: Range,
    buckets_per_day: int = DEFAULT_BUCKETS_PER_DAY,
    *,
    boundary: BoundaryPolicy = BoundaryPolicy.HALF_OPEN,
) -> PresenceVector:
    """Presence vector for the date of ``rng.start`` with the covered buckets set.

    *rng* is expected to lie within one calendar date (see
    :func:`~worktime.presence.split.split_by_date`); ends past midnight
    are clamped to the last bucket.

    Args:
        rng: Single-day range.
        buckets_per_day: Vector length; must divide one day evenly.
        boundary: Rounding policy for the range end.

    Returns:
        A vector of length *buckets_per_day*.
    """
    first, last = bucket_bounds(rng, buckets_per_day, boundary=boundary)
    return PresenceVector.from_span(buckets_per_day, first, last)
