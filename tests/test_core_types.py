"""Tests for worktime.core.types: Event and Range contracts."""

from __future__ import annotations

import datetime as dt

import pytest
from pydantic import ValidationError

from worktime.core.types import Event, EventKind, Marker, Range


class TestEvent:
    def test_kind_accepts_string_value(self) -> None:
        ev = Event(timestamp=dt.datetime(2026, 2, 23, 9, 0), kind="begin")
        assert ev.kind is EventKind.BEGIN

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Event(timestamp=dt.datetime(2026, 2, 23, 9, 0), kind="pause")

    def test_frozen(self) -> None:
        ev = Event(timestamp=dt.datetime(2026, 2, 23, 9, 0), kind=EventKind.END)
        with pytest.raises(ValidationError):
            ev.kind = EventKind.BEGIN  # type: ignore[misc]

    def test_satisfies_marker_protocol(self) -> None:
        ev = Event(timestamp=dt.datetime(2026, 2, 23, 9, 0), kind=EventKind.END)
        assert isinstance(ev, Marker)

    def test_str(self) -> None:
        ev = Event(timestamp=dt.datetime(2026, 2, 23, 9, 5), kind=EventKind.BEGIN)
        assert str(ev) == "2026-02-23 09:05 - begin"


class TestRange:
    def test_length(self) -> None:
        r = Range(start=dt.datetime(2026, 2, 23, 8), end=dt.datetime(2026, 2, 23, 12))
        assert r.length == dt.timedelta(hours=4)

    def test_negative_length_allowed(self) -> None:
        r = Range(start=dt.datetime(2026, 2, 23, 12), end=dt.datetime(2026, 2, 23, 8))
        assert r.length == dt.timedelta(hours=-4)

    def test_intersects_overlapping(self) -> None:
        a = Range(start=dt.datetime(2026, 2, 23, 8), end=dt.datetime(2026, 2, 23, 12))
        b = Range(start=dt.datetime(2026, 2, 23, 11), end=dt.datetime(2026, 2, 23, 13))
        assert a.intersects(b)
        assert b.intersects(a)

    def test_intersects_touching(self) -> None:
        a = Range(start=dt.datetime(2026, 2, 23, 8), end=dt.datetime(2026, 2, 23, 12))
        b = Range(start=dt.datetime(2026, 2, 23, 12), end=dt.datetime(2026, 2, 23, 13))
        assert a.intersects(b)

    def test_disjoint(self) -> None:
        a = Range(start=dt.datetime(2026, 2, 23, 8), end=dt.datetime(2026, 2, 23, 9))
        b = Range(start=dt.datetime(2026, 2, 23, 10), end=dt.datetime(2026, 2, 23, 11))
        assert not a.intersects(b)
        assert not b.intersects(a)

    def test_str(self) -> None:
        r = Range(start=dt.datetime(2026, 2, 23, 8), end=dt.datetime(2026, 2, 23, 9, 30))
        assert str(r) == "2026-02-23 08:00 - 1:30:00"
