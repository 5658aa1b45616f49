"""Exception hierarchy shared by the pipeline, the sources and the CLI."""

from __future__ import annotations


class WorktimeError(Exception):
    """Base class for every error worktime raises on purpose."""


class UnknownEventKindError(WorktimeError, ValueError):
    """An event carried a kind that is neither begin nor end."""

    def __init__(self, kind: object, *, where: str | None = None) -> None:
        location = f" ({where})" if where else ""
        super().__init__(f"Unknown event kind {kind!r}{location}")
        self.kind = kind


class PairingError(WorktimeError, ValueError):
    """Repeated begin or end markers under the strict pairing policy."""


class BucketConfigError(WorktimeError, ValueError):
    """``buckets_per_day`` is not a positive divisor of one day."""


class EventSourceError(WorktimeError):
    """An event source could not be read."""
