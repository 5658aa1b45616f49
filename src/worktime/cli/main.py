"""Typer CLI entrypoint and command definitions for worktime."""

import datetime as dt
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Iterator, Optional

import typer
import yaml
from pydantic import ValidationError

from worktime.core.defaults import DEFAULT_CONFIG_PATH
from worktime.core.errors import WorktimeError
from worktime.core.types import BoundaryPolicy, Event, PairingPolicy

app = typer.Typer(help="Per-day presence report from session begin/end markers.")


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _resolve_window(
    date_from: Optional[str],
    date_to: Optional[str],
    days: Optional[int],
    lookback_days: int,
) -> tuple[dt.date, dt.date]:
    from worktime.core.time import reporting_window

    today = dt.date.today()
    if date_from is not None:
        start = dt.date.fromisoformat(date_from)
        end = dt.date.fromisoformat(date_to) if date_to else today + dt.timedelta(days=1)
    else:
        start, end = reporting_window(today, days if days is not None else lookback_days)
        if date_to:
            end = dt.date.fromisoformat(date_to)
    if end <= start:
        raise ValueError(f"--to ({end}) must be after --from ({start})")
    return start, end


# -- report -------------------------------------------------------------------


@app.command("report")
def report_cmd(
    date_from: Optional[str] = typer.Option(None, "--from", help="First date (YYYY-MM-DD)"),
    date_to: Optional[str] = typer.Option(None, "--to", help="End date (YYYY-MM-DD, exclusive)"),
    days: Optional[int] = typer.Option(None, "--days", help="Days before today to include (overrides lookback_days)"),
    csv_file: Optional[str] = typer.Option(None, "--csv", help="Marker CSV (timestamp, kind)"),
    aw_export: Optional[str] = typer.Option(None, "--aw-export", help="ActivityWatch JSON export"),
    aw_host: Optional[str] = typer.Option(None, "--aw-host", help="Query a running aw-server at this URL"),
    use_aw: bool = typer.Option(False, "--aw", help="Query the aw-server at the configured aw_host"),
    aw_bucket: Optional[str] = typer.Option(None, "--aw-bucket", help="AFK bucket ID (auto-discovered if omitted)"),
    config_path: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="YAML config file"),
    buckets: Optional[int] = typer.Option(None, "--buckets", help="Buckets per day"),
    offset_hours: Optional[float] = typer.Option(None, "--offset-hours", help="Fixed clock offset applied to source timestamps"),
    pairing: Optional[PairingPolicy] = typer.Option(None, "--pairing", help="Treatment of repeated markers"),
    boundary: Optional[BoundaryPolicy] = typer.Option(None, "--boundary", help="Rounding of range ends onto buckets"),
    no_color: bool = typer.Option(False, "--no-color", help="Do not color weekend rows"),
    total: bool = typer.Option(False, "--total", help="Print the total worked time"),
    json_out: Optional[str] = typer.Option(None, "--json-out", help="Also write summaries as JSON"),
    csv_out: Optional[str] = typer.Option(None, "--csv-out", help="Also write summaries as CSV"),
    parquet_out: Optional[str] = typer.Option(None, "--parquet-out", help="Also write summaries as Parquet"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Print one presence row per day for the reporting window."""
    from worktime.adapters.activitywatch.client import open_aw_afk_export, open_aw_afk_rest
    from worktime.adapters.markerlog import open_marker_csv
    from worktime.core.config import load_config
    from worktime.core.logging import configure_logging
    from worktime.presence.aggregate import build_day_aggregate
    from worktime.report.daily import build_day_summaries
    from worktime.report.export import (
        export_summaries_csv,
        export_summaries_json,
        export_summaries_parquet,
    )
    from worktime.report.render import RenderContext, render_report

    configure_logging(verbose)

    chosen = [s for s in (csv_file, aw_export, aw_host, use_aw) if s]
    if len(chosen) != 1:
        _fail("Give exactly one source: --csv, --aw-export, --aw-host or --aw.")

    try:
        cfg = load_config(Path(config_path)).with_overrides(
            buckets_per_day=buckets,
            clock_offset_hours=offset_hours,
            pairing=pairing,
            boundary=boundary,
        )
        start, end = _resolve_window(date_from, date_to, days, cfg.lookback_days)
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        _fail(f"Invalid configuration: {exc}")

    start_ts = dt.datetime.combine(start, dt.time.min)
    end_ts = dt.datetime.combine(end, dt.time.min)

    source: AbstractContextManager[Iterator[Event]]
    if csv_file:
        source = open_marker_csv(
            Path(csv_file), start=start_ts, end=end_ts,
            clock_offset_hours=cfg.clock_offset_hours,
        )
    elif aw_export:
        source = open_aw_afk_export(
            Path(aw_export), start=start_ts, end=end_ts,
            clock_offset_hours=cfg.clock_offset_hours,
        )
    else:
        source = open_aw_afk_rest(
            aw_host or cfg.aw_host, start_ts, end_ts, bucket_id=aw_bucket,
            clock_offset_hours=cfg.clock_offset_hours,
        )

    try:
        with source as events:
            aggregate = build_day_aggregate(events, cfg)
    except FileNotFoundError as exc:
        _fail(f"Source not found: {exc.filename}")
    except (WorktimeError, ValidationError) as exc:
        _fail(f"Error: {exc}")

    summaries = build_day_summaries(aggregate, start, end, cfg.buckets_per_day)
    ctx = RenderContext(
        color_weekends=cfg.color_weekends and not no_color,
        weekend_color=cfg.weekend_color,
        week_separators=cfg.week_separators,
        show_total=total,
    )
    for line in render_report(summaries, ctx):
        typer.echo(line)

    if json_out:
        export_summaries_json(summaries, Path(json_out))
    if csv_out:
        export_summaries_csv(summaries, Path(csv_out))
    if parquet_out:
        export_summaries_parquet(summaries, Path(parquet_out))


# -- config -------------------------------------------------------------------
config_app = typer.Typer(help="Inspect or create the YAML config.")
app.add_typer(config_app, name="config")


@config_app.command("init")
def config_init_cmd(
    path: str = typer.Option(DEFAULT_CONFIG_PATH, "--path", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a config file holding the default values."""
    from worktime.core.config import WorktimeConfig, save_config

    target = Path(path)
    if target.exists() and not force:
        _fail(f"Config already exists: {target} (use --force to overwrite)")
    save_config(WorktimeConfig(), target)
    typer.echo(f"Wrote config to {target}")


@config_app.command("show")
def config_show_cmd(
    path: str = typer.Option(DEFAULT_CONFIG_PATH, "--path", help="Config file to read"),
) -> None:
    """Print the effective configuration (defaults merged with the file)."""
    from worktime.core.config import load_config

    try:
        cfg = load_config(Path(path))
    except (ValidationError, yaml.YAMLError) as exc:
        _fail(f"Invalid configuration: {exc}")
    typer.echo(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False, sort_keys=False).rstrip())


if __name__ == "__main__":
    app()
