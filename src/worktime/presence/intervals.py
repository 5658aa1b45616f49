"""Pair begin/end markers into presence ranges.

The reconstructor is a two-state machine.  ``IDLE`` means no interval is
open; ``OPEN`` means a begin marker has been seen and the next end
marker closes the interval::

    IDLE --begin--> OPEN      (remember start)
    OPEN --end----> IDLE      (emit Range(start, end))

End markers before the very first begin are skipped.  What happens on
``OPEN --begin-->`` and ``IDLE --end-->`` is decided by
:class:`~worktime.core.types.PairingPolicy`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator

from worktime.core.errors import PairingError, UnknownEventKindError
from worktime.core.types import EventKind, Marker, PairingPolicy, Range

logger = logging.getLogger(__name__)


class PairingState(Enum):
    IDLE = "idle"
    OPEN = "open"


def _marker_kind(event: Marker) -> EventKind:
    kind = event.kind
    if isinstance(kind, EventKind):
        return kind
    try:
        return EventKind(kind)
    except ValueError:
        raise UnknownEventKindError(kind, where=f"at {event.timestamp}") from None


def to_ranges(
    events: Iterable[Marker],
    *,
    policy: PairingPolicy = PairingPolicy.LENIENT,
) -> Iterator[Range]:
    """Lazily turn an ordered marker stream into :class:`Range` values.

    Args:
        events: Markers sorted by non-decreasing timestamp.
        policy: Treatment of repeated begin or end markers.

    Yields:
        One range per closed interval, in input order.

    Raises:
        UnknownEventKindError: If a marker kind is neither begin nor end.
        PairingError: On repeated markers when *policy* is ``STRICT``.
    """
    state = PairingState.IDLE
    started: datetime | None = None

    for event in events:
        kind = _marker_kind(event)

        if kind is EventKind.BEGIN:
            if state is PairingState.OPEN:
                if policy is PairingPolicy.STRICT:
                    raise PairingError(
                        f"begin at {event.timestamp} while interval opened at "
                        f"{started} is still open"
                    )
                if policy is PairingPolicy.LENIENT:
                    logger.warning(
                        "Repeated begin at %s discards open interval from %s",
                        event.timestamp, started,
                    )
            started = event.timestamp
            state = PairingState.OPEN
            continue

        # kind is END
        if started is None:
            logger.debug("Skipping leading end marker at %s", event.timestamp)
            continue

        if state is PairingState.OPEN:
            yield Range(start=started, end=event.timestamp)
            state = PairingState.IDLE
            continue

        if policy is PairingPolicy.STRICT:
            raise PairingError(
                f"end at {event.timestamp} without a matching begin "
                f"(last begin at {started})"
            )
        if policy is PairingPolicy.LEGACY:
            yield Range(start=started, end=event.timestamp)
        else:
            logger.warning("Dropping repeated end marker at %s", event.timestamp)

    if state is PairingState.OPEN:
        logger.debug("Interval opened at %s is still open at end of stream", started)
