"""Report export utilities: JSON, CSV, and Parquet output."""

from __future__ import annotations

import contextlib
import csv
import json
import os
import tempfile
from pathlib import Path
from typing import Sequence

import pandas as pd

from worktime.report.daily import DaySummary, format_duration

_COLUMNS = [
    "date",
    "weekday",
    "iso_week",
    "is_weekend",
    "worked_buckets",
    "worked_seconds",
    "worked",
    "rendering",
]


def _summaries_to_rows(summaries: Sequence[DaySummary]) -> list[dict[str, object]]:
    """Flatten summaries into tabular rows with a stable column order."""
    return [
        {
            "date": s.date.isoformat(),
            "weekday": s.weekday,
            "iso_week": s.iso_week,
            "is_weekend": s.is_weekend,
            "worked_buckets": s.worked_buckets,
            "worked_seconds": s.worked_seconds,
            "worked": format_duration(s.duration),
            "rendering": s.rendering,
        }
        for s in summaries
    ]


def export_summaries_json(summaries: Sequence[DaySummary], path: Path) -> Path:
    """Write *summaries* as a JSON list of objects.

    Returns:
        The *path* that was written.
    """
    data = [s.model_dump(mode="json") for s in summaries]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def export_summaries_csv(summaries: Sequence[DaySummary], path: Path) -> Path:
    """Write *summaries* as a flat CSV with one row per date.

    Columns: ``date``, ``weekday``, ``iso_week``, ``is_weekend``,
    ``worked_buckets``, ``worked_seconds``, ``worked`` (``HH:MM``),
    ``rendering``.
    """
    rows = _summaries_to_rows(summaries)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    return path


def summaries_to_frame(summaries: Sequence[DaySummary]) -> pd.DataFrame:
    """Summaries as a DataFrame with :data:`_COLUMNS` (``date`` as datetime64)."""
    df = pd.DataFrame(_summaries_to_rows(summaries), columns=_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def export_summaries_parquet(summaries: Sequence[DaySummary], path: Path) -> Path:
    """Write *summaries* to a parquet file atomically.

    Writes to a temporary file in the same directory first, then
    replaces the target via :func:`os.replace`, so readers never see a
    partially-written file.  Schema matches :func:`export_summaries_csv`.
    """
    df = summaries_to_frame(summaries)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".parquet.tmp")
    try:
        os.close(fd)
        df.to_parquet(tmp, engine="pyarrow", index=False)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise
    return path
