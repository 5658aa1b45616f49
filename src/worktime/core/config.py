"""Report configuration persisted as YAML.

Typical location::

    worktime.yaml

Usage::

    from worktime.core.config import load_config

    cfg = load_config(Path("worktime.yaml"))
    cfg.buckets_per_day   # 48 unless overridden
    cfg = cfg.with_overrides(buckets_per_day=96)

Every key is optional; missing keys fall back to :mod:`worktime.core.defaults`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from worktime.core.defaults import (
    DEFAULT_AW_HOST,
    DEFAULT_BUCKETS_PER_DAY,
    DEFAULT_CLOCK_OFFSET_HOURS,
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_WEEKEND_COLOR,
)
from worktime.core.time import validate_buckets_per_day
from worktime.core.types import BoundaryPolicy, PairingPolicy

logger = logging.getLogger(__name__)


class WorktimeConfig(BaseModel, frozen=True):
    """Bucket resolution, pairing rules, and presentation settings."""

    buckets_per_day: int = Field(
        default=DEFAULT_BUCKETS_PER_DAY,
        description="Time-of-day slots per calendar day; must divide one day evenly.",
    )
    lookback_days: int = Field(
        default=DEFAULT_LOOKBACK_DAYS, ge=0,
        description="Days before today included when no explicit range is given.",
    )
    clock_offset_hours: float = Field(
        default=DEFAULT_CLOCK_OFFSET_HOURS,
        description="Fixed shift applied by event sources to raw timestamps.",
    )
    pairing: PairingPolicy = PairingPolicy.LENIENT
    boundary: BoundaryPolicy = BoundaryPolicy.HALF_OPEN
    color_weekends: bool = True
    weekend_color: str = DEFAULT_WEEKEND_COLOR
    week_separators: bool = True
    aw_host: str = DEFAULT_AW_HOST

    @field_validator("buckets_per_day")
    @classmethod
    def _check_buckets(cls, value: int) -> int:
        return validate_buckets_per_day(value)

    def with_overrides(self, **overrides: Any) -> WorktimeConfig:
        """Return a copy with every non-``None`` override applied and re-validated."""
        patch = {k: v for k, v in overrides.items() if v is not None}
        if not patch:
            return self
        return WorktimeConfig.model_validate({**self.model_dump(), **patch})


def load_config(path: Path | None) -> WorktimeConfig:
    """Load a :class:`WorktimeConfig` from a YAML file.

    Args:
        path: YAML file whose keys match :class:`WorktimeConfig` fields.
            ``None`` or a missing file yields the defaults.

    Returns:
        A validated config instance.

    Raises:
        pydantic.ValidationError: If a key holds an invalid value.
    """
    if path is None or not path.exists():
        if path is not None:
            logger.info("No config at %s, using defaults", path)
        return WorktimeConfig()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return WorktimeConfig.model_validate(raw)


def save_config(config: WorktimeConfig, path: Path) -> Path:
    """Serialize *config* to YAML at *path*."""
    data = config.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.dump(data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return path
