"""Shared fixtures for the worktime test suite."""

from __future__ import annotations

import datetime as dt
from typing import Callable

import pytest

from worktime.core.types import Event, EventKind


@pytest.fixture()
def sample_date() -> dt.date:
    """A Monday."""
    return dt.date(2026, 2, 23)


@pytest.fixture()
def at(sample_date: dt.date) -> Callable[..., dt.datetime]:
    """Build a timestamp on *sample_date* (or a later day via ``day_offset``)."""

    def _at(hour: int, minute: int = 0, *, day_offset: int = 0) -> dt.datetime:
        day = sample_date + dt.timedelta(days=day_offset)
        return dt.datetime.combine(day, dt.time(hour, minute))

    return _at


@pytest.fixture()
def begin() -> Callable[[dt.datetime], Event]:
    return lambda ts: Event(timestamp=ts, kind=EventKind.BEGIN)


@pytest.fixture()
def end() -> Callable[[dt.datetime], Event]:
    return lambda ts: Event(timestamp=ts, kind=EventKind.END)
