"""Centralised default constants for worktime.

Every project-wide magic number / string lives here.
Import these instead of hard-coding values in function signatures or CLI options.
"""

from __future__ import annotations

from typing import Final

# ── Buckets ──
DEFAULT_BUCKETS_PER_DAY: Final[int] = 48
MICROSECONDS_PER_DAY: Final[int] = 24 * 60 * 60 * 1_000_000

# ── Reporting window ──
DEFAULT_LOOKBACK_DAYS: Final[int] = 40
DEFAULT_CLOCK_OFFSET_HOURS: Final[float] = 0.0

# ── Rendering ──
ACTIVE_CHAR: Final[str] = "*"
INACTIVE_CHAR: Final[str] = "."
DEFAULT_WEEKEND_COLOR: Final[str] = "red"

# ── Paths ──
DEFAULT_CONFIG_PATH: Final[str] = "worktime.yaml"

# ── ActivityWatch ──
DEFAULT_AW_HOST: Final[str] = "http://localhost:5600"
DEFAULT_AW_TIMEOUT_SECONDS: Final[int] = 10

# ── Windows security log event IDs ──
LOCK_EVENT_ID: Final[int] = 4800
UNLOCK_EVENT_ID: Final[int] = 4801
