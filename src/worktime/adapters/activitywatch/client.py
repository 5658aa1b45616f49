"""ActivityWatch AFK data access: JSON export parsing and REST API client.

Provides two data-ingestion paths:

* **File-based** -- :func:`parse_aw_afk_export` reads an AW JSON export
  (the format produced by *Export all buckets as JSON* in the AW web UI
  or ``GET /api/0/export``).
* **REST-based** -- :func:`fetch_aw_afk_events` queries a running
  ``aw-server`` instance for events in a time range.

Both paths produce :class:`AWAfkEvent` values.  :func:`afk_events_to_markers`
turns every ``not-afk`` interval into a begin marker at its start and an
end marker at its end, which is what the presence pipeline consumes.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

from worktime.adapters.activitywatch.types import AFKStatus, AWAfkEvent
from worktime.core.defaults import DEFAULT_AW_TIMEOUT_SECONDS
from worktime.core.errors import EventSourceError
from worktime.core.time import apply_clock_offset, in_window
from worktime.core.types import Event, EventKind

logger = logging.getLogger(__name__)

_AFK_TYPE = "afkstatus"


def _parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp from AW into a naive-UTC datetime."""
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def _raw_to_afk_event(raw: dict[str, Any]) -> AWAfkEvent:
    """Convert a single raw AW event dict into an :class:`AWAfkEvent`.

    Raises:
        EventSourceError: If the event lacks a timestamp or holds an
            unparseable timestamp, duration or status.
    """
    try:
        data = raw.get("data", {})
        return AWAfkEvent(
            timestamp=_parse_timestamp(raw["timestamp"]),
            duration_seconds=float(raw.get("duration", 0)),
            status=data.get("status", AFKStatus.AFK),
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise EventSourceError(
            f"Malformed AW event ({type(exc).__name__}: {exc})"
        ) from exc


def _merge_spans(events: Iterable[AWAfkEvent]) -> list[tuple[datetime, datetime]]:
    """Union of the ``not-afk`` spans in *events*, sorted and disjoint.

    Overlapping or touching spans (e.g. from several AFK buckets in one
    export) collapse into one.
    """
    spans = sorted(
        (ev.timestamp, ev.end) for ev in events if ev.status is AFKStatus.NOT_AFK
    )
    merged: list[tuple[datetime, datetime]] = []
    for start, end in spans:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def afk_events_to_markers(events: Iterable[AWAfkEvent]) -> list[Event]:
    """Turn ``not-afk`` intervals into begin/end markers.

    ``afk`` intervals carry no presence and are ignored.  Overlapping or
    touching ``not-afk`` intervals are merged first, so the markers
    strictly alternate begin, end, begin, ...

    Returns:
        Markers sorted by timestamp.
    """
    markers: list[Event] = []
    for start, end in _merge_spans(events):
        markers.append(Event(timestamp=start, kind=EventKind.BEGIN))
        markers.append(Event(timestamp=end, kind=EventKind.END))
    return markers


def _shift_and_filter(
    markers: Iterable[Event],
    *,
    start: datetime | None,
    end: datetime | None,
    clock_offset_hours: float,
) -> Iterator[Event]:
    for marker in markers:
        ts = apply_clock_offset(marker.timestamp, clock_offset_hours)
        if in_window(ts, start, end):
            yield Event(timestamp=ts, kind=marker.kind)


# ---------------------------------------------------------------------------
# File-based ingestion
# ---------------------------------------------------------------------------


def parse_aw_afk_export(path: Path) -> list[AWAfkEvent]:
    """Parse ``aw-watcher-afk`` events from an AW JSON export.

    Filters for buckets of type ``afkstatus``.

    Args:
        path: Path to the AW export JSON file.

    Returns:
        Sorted (by timestamp) list of :class:`AWAfkEvent` instances.
        Empty if the export holds no ``afkstatus`` bucket.

    Raises:
        FileNotFoundError: If *path* does not exist.
        EventSourceError: If the file is not valid JSON, is not a bucket
            export, or holds a malformed AFK event.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise EventSourceError(f"{path}: invalid JSON: {exc}") from exc
    buckets = raw.get("buckets", raw) if isinstance(raw, dict) else None
    if not isinstance(buckets, dict):
        raise EventSourceError(f"{path}: not an ActivityWatch bucket export")

    events: list[AWAfkEvent] = []
    for bucket_id, bucket in buckets.items():
        if not isinstance(bucket, dict):
            raise EventSourceError(f"{path}: bucket {bucket_id!r} is not an object")
        bucket_type = bucket.get("type", "")
        if bucket_type != _AFK_TYPE:
            logger.debug("Skipping bucket %s (type=%s)", bucket_id, bucket_type)
            continue

        logger.info(
            "Processing AFK bucket %s (%d events)",
            bucket_id,
            len(bucket.get("events", [])),
        )
        for raw_event in bucket.get("events", []):
            events.append(_raw_to_afk_event(raw_event))

    events.sort(key=lambda e: e.timestamp)
    return events


@contextmanager
def open_aw_afk_export(
    path: Path,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
    clock_offset_hours: float = 0.0,
) -> Iterator[Iterator[Event]]:
    """Scoped marker source over an AW export file.

    The export is read whole on entry; the yielded iterator applies the
    clock offset and the ``[start, end)`` window lazily.
    """
    markers = afk_events_to_markers(parse_aw_afk_export(path))
    yield _shift_and_filter(
        markers, start=start, end=end, clock_offset_hours=clock_offset_hours,
    )


# ---------------------------------------------------------------------------
# REST API helpers
# ---------------------------------------------------------------------------


def _api_get(url: str) -> Any:
    """Issue a GET request and return the parsed JSON body."""
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=DEFAULT_AW_TIMEOUT_SECONDS) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except urllib.error.URLError as exc:
        raise EventSourceError(f"ActivityWatch request failed: {url}: {exc}") from exc


def list_aw_buckets(host: str) -> dict[str, dict]:
    """List all buckets from a running AW server.

    Args:
        host: Base URL of the AW server (e.g. ``"http://localhost:5600"``).

    Returns:
        Dict mapping bucket IDs to their metadata.
    """
    url = f"{host.rstrip('/')}/api/0/buckets/"
    return _api_get(url)


def find_afk_bucket_id(host: str) -> str:
    """Auto-discover the ``aw-watcher-afk`` bucket on *host*.

    Raises:
        EventSourceError: If no ``afkstatus`` bucket exists on the server.
    """
    buckets = list_aw_buckets(host)
    for bucket_id, meta in buckets.items():
        if meta.get("type") == _AFK_TYPE:
            return bucket_id
    raise EventSourceError(
        f"No bucket with type={_AFK_TYPE!r} found on {host}. "
        f"Available: {list(buckets.keys())}"
    )


def _iso(ts: datetime) -> str:
    return ts.isoformat() + "Z" if ts.tzinfo is None else ts.isoformat()


def fetch_aw_afk_events(
    host: str,
    bucket_id: str,
    start: datetime,
    end: datetime,
) -> list[AWAfkEvent]:
    """Fetch AFK events from the AW REST API for a time range.

    Args:
        host: Base URL of the AW server.
        bucket_id: Bucket to query (e.g. ``"aw-watcher-afk_myhostname"``).
        start: Inclusive start of the query window (UTC).
        end: Exclusive end of the query window (UTC).

    Returns:
        Sorted list of :class:`AWAfkEvent` instances.
    """
    url = (
        f"{host.rstrip('/')}/api/0/buckets/{bucket_id}/events"
        f"?start={_iso(start)}&end={_iso(end)}"
    )
    raw_events: list[dict] = _api_get(url)

    events = [_raw_to_afk_event(e) for e in raw_events]
    events.sort(key=lambda e: e.timestamp)
    logger.info("Fetched %d AFK events from %s", len(events), bucket_id)
    return events


@contextmanager
def open_aw_afk_rest(
    host: str,
    start: datetime,
    end: datetime,
    *,
    bucket_id: str | None = None,
    clock_offset_hours: float = 0.0,
) -> Iterator[Iterator[Event]]:
    """Scoped marker source over a running AW server.

    *start* and *end* are in the reporting clock; the query window is
    shifted back by the clock offset so the returned markers cover
    ``[start, end)`` once the offset is applied.
    """
    resolved = bucket_id or find_afk_bucket_id(host)
    raw = fetch_aw_afk_events(
        host,
        resolved,
        apply_clock_offset(start, -clock_offset_hours),
        apply_clock_offset(end, -clock_offset_hours),
    )
    yield _shift_and_filter(
        afk_events_to_markers(raw),
        start=start, end=end, clock_offset_hours=clock_offset_hours,
    )
