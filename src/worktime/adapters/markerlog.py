"""Marker CSV source: session begin/end records exported from a log.

The file carries one marker per row with two required columns::

    timestamp,kind
    2026-02-23T08:58:12,unlock
    2026-02-23T12:01:40,4800

``kind`` accepts the canonical ``begin``/``end`` names as well as the
workstation lock vocabulary of the Windows security log (``4801`` /
``unlock`` opens a session, ``4800`` / ``lock`` closes it).

:func:`open_marker_csv` is a context manager: the file stays open while
the caller iterates and is closed on exit, including when iteration is
abandoned or an error propagates.
"""

from __future__ import annotations

import csv
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Final, Iterator, TextIO

from worktime.core.defaults import LOCK_EVENT_ID, UNLOCK_EVENT_ID
from worktime.core.errors import EventSourceError, UnknownEventKindError
from worktime.core.time import apply_clock_offset, in_window
from worktime.core.types import Event, EventKind

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS: Final[frozenset[str]] = frozenset({"timestamp", "kind"})

_KIND_ALIASES: Final[dict[str, EventKind]] = {
    "begin": EventKind.BEGIN,
    "unlock": EventKind.BEGIN,
    "unlocked": EventKind.BEGIN,
    str(UNLOCK_EVENT_ID): EventKind.BEGIN,
    "end": EventKind.END,
    "lock": EventKind.END,
    "locked": EventKind.END,
    str(LOCK_EVENT_ID): EventKind.END,
}


def map_marker_kind(raw: str) -> EventKind:
    """Translate a raw ``kind`` cell into an :class:`EventKind`.

    Raises:
        UnknownEventKindError: If *raw* is not a recognised alias.
    """
    try:
        return _KIND_ALIASES[raw.strip().lower()]
    except KeyError:
        raise UnknownEventKindError(raw) from None


def _parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 cell; aware values are converted to naive UTC."""
    ts = datetime.fromisoformat(raw.strip())
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def iter_marker_rows(
    handle: TextIO,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    clock_offset_hours: float = 0.0,
) -> Iterator[Event]:
    """Yield :class:`Event` values from an open CSV stream.

    The clock offset is applied before the ``[start, end)`` window filter.

    Rows must be in non-decreasing timestamp order; ordering is checked
    on every row, including rows outside the window.

    Raises:
        EventSourceError: If a required column is missing, a timestamp
            cannot be parsed, or a timestamp is earlier than the row before.
        UnknownEventKindError: If a ``kind`` cell is not recognised.
    """
    reader = csv.DictReader(handle)
    missing = _REQUIRED_COLUMNS - set(reader.fieldnames or ())
    if missing:
        raise EventSourceError(f"Marker CSV missing required columns: {sorted(missing)}")

    emitted = 0
    previous: datetime | None = None
    for row_number, row in enumerate(reader, start=2):
        try:
            ts = _parse_timestamp(row["timestamp"] or "")
        except ValueError as exc:
            raise EventSourceError(f"row {row_number}: {exc}") from exc
        try:
            kind = map_marker_kind(row["kind"] or "")
        except UnknownEventKindError as exc:
            raise UnknownEventKindError(exc.kind, where=f"row {row_number}") from None

        if previous is not None and ts < previous:
            raise EventSourceError(
                f"row {row_number}: timestamp goes backwards ({ts} < {previous})"
            )
        previous = ts

        ts = apply_clock_offset(ts, clock_offset_hours)
        if not in_window(ts, start, end):
            continue
        emitted += 1
        yield Event(timestamp=ts, kind=kind)

    logger.info("Read %d markers from CSV", emitted)


@contextmanager
def open_marker_csv(
    path: Path,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    clock_offset_hours: float = 0.0,
) -> Iterator[Iterator[Event]]:
    """Open *path* and yield a lazy marker iterator bound to the open file.

    Usage::

        with open_marker_csv(path, start=lo, end=hi) as events:
            aggregate = build_day_aggregate(events, cfg)

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    logger.info("Opening marker CSV %s", path)
    with open(path, newline="", encoding="utf-8") as handle:
        yield iter_marker_rows(
            handle, start=start, end=end, clock_offset_hours=clock_offset_hours,
        )
