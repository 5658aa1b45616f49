"""Tests for interval reconstruction from begin/end markers.

Covers:
- Plain begin/end pairing
- Leading end markers are skipped
- Trailing open interval is dropped
- Repeated begin / repeated end under each pairing policy
- Unknown marker kinds abort the stream
- Laziness
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

import pytest

from worktime.core.errors import PairingError, UnknownEventKindError
from worktime.core.types import Event, EventKind, PairingPolicy, Range
from worktime.presence.intervals import to_ranges


@dataclass(frozen=True)
class _RawMarker:
    timestamp: dt.datetime
    kind: object


class TestPairing:
    def test_single_pair(self, at, begin, end) -> None:
        ranges = list(to_ranges([begin(at(8)), end(at(12))]))
        assert ranges == [Range(start=at(8), end=at(12))]

    def test_multiple_pairs(self, at, begin, end) -> None:
        events = [begin(at(8)), end(at(12)), begin(at(13)), end(at(17))]
        assert list(to_ranges(events)) == [
            Range(start=at(8), end=at(12)),
            Range(start=at(13), end=at(17)),
        ]

    def test_empty_stream(self) -> None:
        assert list(to_ranges([])) == []

    def test_leading_end_skipped(self, at, begin, end) -> None:
        events = [end(at(1)), begin(at(9)), end(at(17))]
        assert list(to_ranges(events)) == [Range(start=at(9), end=at(17))]

    def test_several_leading_ends_skipped(self, at, begin, end) -> None:
        events = [end(at(1)), end(at(2)), begin(at(9)), end(at(17))]
        assert list(to_ranges(events, policy=PairingPolicy.STRICT)) == [
            Range(start=at(9), end=at(17)),
        ]

    def test_trailing_begin_dropped(self, at, begin, end) -> None:
        events = [begin(at(8)), end(at(12)), begin(at(13))]
        assert list(to_ranges(events)) == [Range(start=at(8), end=at(12))]

    def test_zero_length_pair(self, at, begin, end) -> None:
        assert list(to_ranges([begin(at(10)), end(at(10))])) == [
            Range(start=at(10), end=at(10)),
        ]

    def test_string_kinds_accepted(self, at) -> None:
        events = [_RawMarker(at(8), "begin"), _RawMarker(at(9), "end")]
        assert list(to_ranges(events)) == [Range(start=at(8), end=at(9))]

    def test_lazy(self, at, begin, end) -> None:
        def stream():
            yield begin(at(8))
            yield end(at(9))
            raise AssertionError("consumed past the first range")

        it = to_ranges(stream())
        assert next(it) == Range(start=at(8), end=at(9))


class TestRepeatedBegin:
    def test_lenient_keeps_latest_begin(self, at, begin, end, caplog) -> None:
        events = [begin(at(8)), begin(at(9)), end(at(12))]
        with caplog.at_level("WARNING", logger="worktime.presence.intervals"):
            ranges = list(to_ranges(events, policy=PairingPolicy.LENIENT))
        assert ranges == [Range(start=at(9), end=at(12))]
        assert "Repeated begin" in caplog.text

    def test_legacy_keeps_latest_begin(self, at, begin, end) -> None:
        events = [begin(at(8)), begin(at(9)), end(at(12))]
        assert list(to_ranges(events, policy=PairingPolicy.LEGACY)) == [
            Range(start=at(9), end=at(12)),
        ]

    def test_strict_rejects(self, at, begin, end) -> None:
        events = [begin(at(8)), begin(at(9)), end(at(12))]
        with pytest.raises(PairingError, match="still open"):
            list(to_ranges(events, policy=PairingPolicy.STRICT))


class TestRepeatedEnd:
    def test_lenient_drops_second_end(self, at, begin, end, caplog) -> None:
        events = [begin(at(8)), end(at(12)), end(at(13))]
        with caplog.at_level("WARNING", logger="worktime.presence.intervals"):
            ranges = list(to_ranges(events))
        assert ranges == [Range(start=at(8), end=at(12))]
        assert "repeated end" in caplog.text

    def test_legacy_reuses_start(self, at, begin, end) -> None:
        events = [begin(at(8)), end(at(12)), end(at(13))]
        assert list(to_ranges(events, policy=PairingPolicy.LEGACY)) == [
            Range(start=at(8), end=at(12)),
            Range(start=at(8), end=at(13)),
        ]

    def test_strict_rejects(self, at, begin, end) -> None:
        events = [begin(at(8)), end(at(12)), end(at(13))]
        with pytest.raises(PairingError, match="without a matching begin"):
            list(to_ranges(events, policy=PairingPolicy.STRICT))

    def test_strict_yields_ranges_before_error(self, at, begin, end) -> None:
        it = to_ranges([begin(at(8)), end(at(12)), end(at(13))], policy=PairingPolicy.STRICT)
        assert next(it) == Range(start=at(8), end=at(12))
        with pytest.raises(PairingError):
            next(it)


class TestUnknownKind:
    def test_unknown_kind_raises(self, at, begin) -> None:
        events = [begin(at(8)), _RawMarker(at(9), "suspend")]
        with pytest.raises(UnknownEventKindError, match="suspend"):
            list(to_ranges(events))

    def test_unknown_kind_in_leading_position(self, at) -> None:
        with pytest.raises(UnknownEventKindError):
            list(to_ranges([_RawMarker(at(8), 4799)]))

    def test_unconstructed_event(self, at) -> None:
        bad = Event.model_construct(timestamp=at(8), kind="pause")
        with pytest.raises(UnknownEventKindError):
            list(to_ranges([bad]))

    def test_is_value_error(self, at) -> None:
        with pytest.raises(ValueError):
            list(to_ranges([_RawMarker(at(8), None)]))

    def test_enum_kinds_pass_through(self, at) -> None:
        events = [_RawMarker(at(8), EventKind.BEGIN), _RawMarker(at(9), EventKind.END)]
        assert len(list(to_ranges(events))) == 1
