"""Split ranges at midnight so every piece belongs to one calendar date."""

from __future__ import annotations

from typing import Iterable, Iterator

from worktime.core.time import TICK, next_midnight
from worktime.core.types import Range


def split_by_date(rng: Range) -> Iterator[Range]:
    """Yield consecutive single-day pieces of *rng*.

    Every piece except the last ends one tick before the following
    midnight; the next piece starts on that midnight.  A range that
    already lies within one day is yielded unchanged.
    """
    cursor = rng.start
    while cursor.date() < rng.end.date():
        midnight = next_midnight(cursor)
        yield Range(start=cursor, end=midnight - TICK)
        cursor = midnight
    yield Range(start=cursor, end=rng.end)


def split_ranges(ranges: Iterable[Range]) -> Iterator[Range]:
    """Flatten :func:`split_by_date` over *ranges*."""
    for rng in ranges:
        yield from split_by_date(rng)
