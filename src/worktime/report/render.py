"""Console rendering of day summaries.

Formatting choices travel in an explicit :class:`RenderContext`; the
functions here only return strings and never print or keep state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import typer

from worktime.core.defaults import ACTIVE_CHAR, DEFAULT_WEEKEND_COLOR, INACTIVE_CHAR
from worktime.report.daily import DaySummary, format_duration, total_worked

_DATE_COLUMN = "DATE"
_DAY_COLUMN = "DAY"
_TIME_COLUMN = "TIME"


@dataclass(frozen=True)
class RenderContext:
    """Presentation settings for one render call."""

    color_weekends: bool = True
    weekend_color: str = DEFAULT_WEEKEND_COLOR
    week_separators: bool = True
    active_char: str = ACTIVE_CHAR
    inactive_char: str = INACTIVE_CHAR
    show_total: bool = False


def render_header(buckets_per_day: int) -> str:
    """Column header aligned with :func:`format_row`."""
    return f"{_DATE_COLUMN:<11} {_DAY_COLUMN}: {' ' * buckets_per_day} --   {_TIME_COLUMN}"


def format_row(summary: DaySummary, ctx: RenderContext | None = None) -> str:
    """``2026-Feb-23 Mon: ....****.... --   04:00``"""
    ctx = ctx or RenderContext()
    bar = summary.rendering
    if (ctx.active_char, ctx.inactive_char) != (ACTIVE_CHAR, INACTIVE_CHAR):
        bar = "".join(
            ctx.active_char if ch == ACTIVE_CHAR else ctx.inactive_char for ch in bar
        )
    return (
        f"{summary.date:%Y-%b-%d} {summary.weekday}: {bar} --   "
        f"{format_duration(summary.duration)}"
    )


def render_report(
    summaries: Sequence[DaySummary],
    ctx: RenderContext | None = None,
) -> list[str]:
    """Header plus one line per summary.

    A blank line separates ISO weeks when ``ctx.week_separators`` is set;
    weekend rows are colored when ``ctx.color_weekends`` is set.
    """
    ctx = ctx or RenderContext()
    buckets = len(summaries[0].rendering) if summaries else 0
    lines = [render_header(buckets)]

    last_week: int | None = None
    for summary in summaries:
        if ctx.week_separators and last_week is not None and summary.iso_week != last_week:
            lines.append("")
        last_week = summary.iso_week

        row = format_row(summary, ctx)
        if ctx.color_weekends and summary.is_weekend:
            row = typer.style(row, fg=ctx.weekend_color)
        lines.append(row)

    if ctx.show_total:
        lines.append("")
        lines.append(f"TOTAL: {format_duration(total_worked(summaries))}")
    return lines
