"""Core data contracts: event markers, ranges, and pipeline policies."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class EventKind(StrEnum):
    """Session marker kinds.

    ``BEGIN`` opens a presence interval (workstation unlocked, user back
    at the keyboard); ``END`` closes it (locked, away).
    """

    BEGIN = "begin"
    END = "end"


class PairingPolicy(StrEnum):
    """How the interval reconstructor treats repeated markers.

    ``LEGACY``
        Repeated begins overwrite the open start; repeated ends emit
        another range reusing the last start.

    ``LENIENT`` (default)
        Repeated begins overwrite the open start; repeated ends are
        dropped.  Both are logged.

    ``STRICT``
        Repeated begins or ends raise :class:`~worktime.core.errors.PairingError`.
    """

    LEGACY = "legacy"
    LENIENT = "lenient"
    STRICT = "strict"


class BoundaryPolicy(StrEnum):
    """How the bucketizer rounds a range end onto a time-of-day slot.

    ``HALF_OPEN`` (default)
        A slot is active iff the range overlaps it by at least one tick.
        A range ending exactly on a slot boundary does not mark the next slot.

    ``GENEROUS``
        The end offset is rounded up to a slot index, which also marks the
        slot starting at or right after the range end.
    """

    HALF_OPEN = "half_open"
    GENEROUS = "generous"


@runtime_checkable
class Marker(Protocol):
    """Anything exposing a ``timestamp`` and a ``kind``.

    :class:`Event` satisfies it, as does any adapter type with the same
    read-only attributes.
    """

    @property
    def timestamp(self) -> datetime: ...
    @property
    def kind(self) -> object: ...


class Event(BaseModel, frozen=True):
    """A single session marker."""

    timestamp: datetime = Field(description="When the marker was recorded (local, offset applied).")
    kind: EventKind = Field(description="Whether the marker opens or closes an interval.")

    def __str__(self) -> str:
        return f"{self.timestamp:%Y-%m-%d %H:%M} - {self.kind.value}"


class Range(BaseModel, frozen=True):
    """A presence interval ``[start, end]``.

    ``start <= end`` is expected but not enforced: the legacy pairing
    policy can emit ranges that violate it.
    """

    start: datetime
    end: datetime

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    def intersects(self, other: Range) -> bool:
        return not (self.end < other.start or self.start > other.end)

    def __str__(self) -> str:
        return f"{self.start:%Y-%m-%d %H:%M} - {self.length}"
