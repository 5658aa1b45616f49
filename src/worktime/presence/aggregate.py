"""Group bucket vectors by calendar date and merge them.

:func:`build_day_aggregate` is the whole pipeline: markers are paired
into ranges, ranges are split at midnight, each piece is bucketized and
pieces sharing a date are OR-combined.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable

from worktime.core.config import WorktimeConfig
from worktime.core.defaults import DEFAULT_BUCKETS_PER_DAY
from worktime.core.time import validate_buckets_per_day
from worktime.core.types import BoundaryPolicy, Marker, Range
from worktime.presence.buckets import bucketize
from worktime.presence.intervals import to_ranges
from worktime.presence.split import split_ranges
from worktime.presence.vector import PresenceVector, combine

logger = logging.getLogger(__name__)

DayAggregate = dict[date, PresenceVector]


def aggregate_by_date(
    ranges: Iterable[Range],
    buckets_per_day: int = DEFAULT_BUCKETS_PER_DAY,
    *,
    boundary: BoundaryPolicy = BoundaryPolicy.HALF_OPEN,
) -> DayAggregate:
    """OR-merge the vectors of single-day *ranges* per ``range.start`` date.

    The result does not depend on the order of *ranges*.  Dates without
    any range are absent from the mapping.
    """
    validate_buckets_per_day(buckets_per_day)

    merged: dict[date, PresenceVector] = defaultdict(
        lambda: PresenceVector.empty(buckets_per_day)
    )
    count = 0
    for rng in ranges:
        day = rng.start.date()
        merged[day] = combine(merged[day], bucketize(rng, buckets_per_day, boundary=boundary))
        count += 1

    logger.debug("Aggregated %d single-day ranges into %d dates", count, len(merged))
    return dict(merged)


def build_day_aggregate(
    events: Iterable[Marker],
    config: WorktimeConfig | None = None,
) -> DayAggregate:
    """Run markers through pairing, splitting, bucketing and merging.

    Args:
        events: Markers sorted by non-decreasing timestamp.
        config: Bucket count and policies; defaults when ``None``.

    Returns:
        Mapping of date to merged presence vector.

    Raises:
        BucketConfigError: Before any event is read, if the bucket count
            is invalid.
        UnknownEventKindError: On a malformed marker.
        PairingError: On repeated markers under the strict policy.
    """
    cfg = config or WorktimeConfig()
    validate_buckets_per_day(cfg.buckets_per_day)

    ranges = to_ranges(events, policy=cfg.pairing)
    return aggregate_by_date(
        split_ranges(ranges), cfg.buckets_per_day, boundary=cfg.boundary,
    )
