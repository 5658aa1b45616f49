"""Tests for worktime.core.time: bucket validation, day arithmetic, windows."""

from __future__ import annotations

import datetime as dt

import pytest

from worktime.core.errors import BucketConfigError
from worktime.core.time import (
    TICK,
    apply_clock_offset,
    bucket_span,
    date_range,
    in_window,
    is_weekend,
    iso_week,
    next_midnight,
    reporting_window,
    start_of_day,
    validate_buckets_per_day,
)


class TestValidateBucketsPerDay:
    @pytest.mark.parametrize("value", [1, 24, 48, 96, 1440, 86400])
    def test_valid(self, value: int) -> None:
        assert validate_buckets_per_day(value) == value

    @pytest.mark.parametrize("value", [0, -48])
    def test_non_positive(self, value: int) -> None:
        with pytest.raises(BucketConfigError, match="positive"):
            validate_buckets_per_day(value)

    @pytest.mark.parametrize("value", [7, 49, 1000003])
    def test_not_a_divisor(self, value: int) -> None:
        with pytest.raises(BucketConfigError, match="evenly"):
            validate_buckets_per_day(value)

    def test_non_integer(self) -> None:
        with pytest.raises(BucketConfigError, match="integer"):
            validate_buckets_per_day(48.0)  # type: ignore[arg-type]

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_buckets_per_day(0)


class TestBucketSpan:
    def test_default_is_thirty_minutes(self) -> None:
        assert bucket_span(48) == dt.timedelta(minutes=30)

    def test_quarter_hours(self) -> None:
        assert bucket_span(96) == dt.timedelta(minutes=15)

    def test_invalid(self) -> None:
        with pytest.raises(BucketConfigError):
            bucket_span(7)


class TestDayArithmetic:
    def test_start_of_day(self) -> None:
        assert start_of_day(dt.datetime(2026, 2, 23, 13, 45, 7, 12)) == dt.datetime(2026, 2, 23)

    def test_next_midnight(self) -> None:
        assert next_midnight(dt.datetime(2026, 2, 28, 23, 59)) == dt.datetime(2026, 3, 1)

    def test_next_midnight_from_midnight(self) -> None:
        assert next_midnight(dt.datetime(2026, 2, 23)) == dt.datetime(2026, 2, 24)

    def test_tick_is_one_microsecond(self) -> None:
        assert TICK == dt.timedelta(microseconds=1)


class TestWindows:
    def test_apply_clock_offset(self) -> None:
        ts = dt.datetime(2026, 2, 23, 3, 0)
        assert apply_clock_offset(ts, -6) == dt.datetime(2026, 2, 22, 21, 0)
        assert apply_clock_offset(ts, 0) == ts

    def test_in_window_half_open(self) -> None:
        lo = dt.datetime(2026, 2, 23)
        hi = dt.datetime(2026, 2, 24)
        assert in_window(lo, lo, hi)
        assert not in_window(hi, lo, hi)
        assert not in_window(lo - TICK, lo, hi)

    def test_in_window_open_bounds(self) -> None:
        assert in_window(dt.datetime(1999, 1, 1), None, None)

    def test_reporting_window(self) -> None:
        start, end = reporting_window(dt.date(2026, 2, 23), 40)
        assert start == dt.date(2026, 1, 14)
        assert end == dt.date(2026, 2, 24)

    def test_reporting_window_negative(self) -> None:
        with pytest.raises(ValueError):
            reporting_window(dt.date(2026, 2, 23), -1)

    def test_date_range_exclusive(self) -> None:
        days = date_range(dt.date(2026, 2, 27), dt.date(2026, 3, 2))
        assert days == [dt.date(2026, 2, 27), dt.date(2026, 2, 28), dt.date(2026, 3, 1)]

    def test_iso_week_and_weekend(self) -> None:
        assert iso_week(dt.date(2026, 2, 23)) == 9
        assert iso_week(dt.date(2026, 1, 1)) == 1
        assert is_weekend(dt.date(2026, 2, 28))
        assert not is_weekend(dt.date(2026, 2, 27))
