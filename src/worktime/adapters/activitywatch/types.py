"""Normalized event types for ActivityWatch AFK data."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel, Field


class AFKStatus(StrEnum):
    """``data.status`` values written by ``aw-watcher-afk``."""

    NOT_AFK = "not-afk"
    AFK = "afk"


class AWAfkEvent(BaseModel, frozen=True):
    """A single ``aw-watcher-afk`` event.

    Each event states that the user was (or was not) at the keyboard
    for ``duration_seconds`` starting at ``timestamp``.
    """

    timestamp: datetime = Field(description="Interval start (UTC).")
    duration_seconds: float = Field(ge=0, description="Duration in seconds.")
    status: AFKStatus = Field(description="Whether the user was present.")

    @property
    def end(self) -> datetime:
        return self.timestamp + timedelta(seconds=self.duration_seconds)
