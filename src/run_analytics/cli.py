#!/usr/bin/env python3
"""
run-analytics CLI.

Training load, health and race metrics from an exported activity file.

Usage:
    run-analytics fitness activities.json --days 14
    run-analytics health activities.json --as-of 2024-03-31
    run-analytics predict activities.json --mode year --year 2024
    run-analytics summary activities.json --mode month --year 2024 --month 3
    run-analytics zones activities.json --age 35

The activity file holds a JSON list of activity records, or an object with
an "activities" list.
"""

import argparse
import json
import logging
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .analysis.health import BAND_COLORS, calculate_health_snapshot
from .analysis.race import PeriodMode, PeriodSelection, predict_race_times
from .analysis.summary import calculate_mileage_trend, summarize_period
from .config import Settings, get_settings
from .exceptions import ActivityDataError, ConfigurationError, RunAnalyticsError
from .metrics.fitness import calculate_training_load_history, interpret_tsb
from .metrics.load import activities_to_daily_loads
from .metrics.zones import build_zones, estimate_max_hr, get_zone_index
from .models.activity import Activity, filter_runs, parse_activities
from .utils.formatting import format_duration, format_pace, format_speed_as_pace, format_time

logger = logging.getLogger(__name__)

console = Console()


def band_text(label: str, band: str) -> Text:
    """Render a value with its classification band color."""
    return Text(f"{label} ({band})", style=BAND_COLORS.get(band, "white"))


def format_tsb_rich(tsb: float) -> Text:
    """Format TSB with rich colors."""
    interpretation = interpret_tsb(tsb)
    return Text(f"{tsb:+.1f} ({interpretation.status})", style=interpretation.color)


def parse_date_arg(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def configure_logging(level: str) -> None:
    """Send log records through rich, at the given level."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def load_settings(args) -> Settings:
    """Environment settings with command-line heart rate overrides applied."""
    try:
        settings = get_settings()
        overrides = {}
        if getattr(args, "max_hr", None) is not None:
            overrides["max_hr"] = args.max_hr
        if getattr(args, "rest_hr", None) is not None:
            overrides["rest_hr"] = args.rest_hr
        if overrides:
            settings = Settings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid heart rate settings",
            details={"errors": e.errors(include_url=False)},
        ) from e
    return settings


def load_activities(path: Path) -> List[Activity]:
    """Read and validate an activity export file."""
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as e:
        raise ActivityDataError(f"Cannot read activity file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ActivityDataError(f"Activity file {path} is not valid JSON: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get("activities", [])
    if not isinstance(payload, list):
        raise ActivityDataError(f"Activity file {path} must contain a list of activities")

    activities = parse_activities(payload)
    logger.debug("Loaded %d activities from %s", len(activities), path)
    return activities


def period_from_args(args) -> PeriodSelection:
    """Build a period selection from --mode/--year/--month."""
    mode = PeriodMode(args.mode)
    if mode != PeriodMode.ALL and args.year is None:
        raise ConfigurationError(f"--year is required with --mode {mode.value}", field="year")
    if mode == PeriodMode.MONTH and args.month is not None and not 1 <= args.month <= 12:
        raise ConfigurationError("--month must be between 1 and 12", field="month")
    return PeriodSelection(mode=mode, year=args.year, month=args.month)


def cmd_fitness(args, settings: Settings):
    """Show daily CTL, ATL and TSB."""
    console.print()
    console.print(Panel("[bold]run-analytics - Fitness[/bold]"))
    console.print()

    activities = load_activities(args.file)
    end_date = args.as_of or date.today()
    start_date = end_date - timedelta(days=args.days - 1)

    daily_loads = activities_to_daily_loads(activities, settings.max_hr, settings.rest_hr)
    metrics = calculate_training_load_history(daily_loads, start_date, end_date)

    if not metrics:
        console.print("No running activities found.")
        console.print()
        return

    table = Table(title=f"Training Load (Last {args.days} Days)", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("TRIMP", justify="right")
    table.add_column("CTL", justify="right")
    table.add_column("ATL", justify="right")
    table.add_column("TSB", justify="right")

    for m in metrics:
        table.add_row(
            m.date,
            f"{m.trimp:.0f}",
            f"{m.ctl:.1f}",
            f"{m.atl:.1f}",
            format_tsb_rich(m.tsb),
        )

    console.print(table)
    console.print()
    console.print(f"[dim]{interpret_tsb(metrics[-1].tsb).description}[/dim]")
    console.print()


def cmd_health(args, settings: Settings):
    """Show training health metrics as of a date."""
    console.print()
    console.print(Panel("[bold]run-analytics - Training Health[/bold]"))
    console.print()

    activities = load_activities(args.file)
    anchor = args.as_of or date.today()
    snapshot = calculate_health_snapshot(activities, anchor, settings.max_hr, settings.rest_hr)
    bands = snapshot.bands()

    def show(value, fmt: str) -> str:
        return fmt.format(value) if value is not None else "n/a"

    ramp = snapshot.weekly_ramp
    table = Table(title=f"Health as of {anchor.isoformat()}", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("ACWR", band_text(show(snapshot.acwr, "{:.2f}"), bands["acwr"]))
    table.add_row(
        "Weekly ramp",
        band_text(f"{ramp.ramp_km:+.1f} km, {show(ramp.ramp_percent, '{:+.0f}%')}", bands["weekly_ramp"]),
    )
    table.add_row("Consistency", band_text(f"{snapshot.consistency_score}", bands["consistency_score"]))
    table.add_row(
        "Long run ratio",
        band_text(show(snapshot.long_run_ratio, "{:.0f}%"), bands["long_run_ratio"]),
    )
    table.add_row(
        "Efficiency index",
        band_text(show(snapshot.efficiency_index, "{:.2f}"), bands["efficiency_index"]),
    )
    table.add_row(
        "GAP trend",
        band_text(show(snapshot.gap_trend, "{:+.0f} s/km"), bands["gap_trend"]),
    )

    console.print(table)
    console.print()


def cmd_predict(args, settings: Settings):
    """Show race time predictions and readiness."""
    console.print()
    console.print(Panel("[bold]run-analytics - Race Predictions[/bold]"))
    console.print()

    activities = load_activities(args.file)
    period = period_from_args(args)
    today = args.today or date.today()

    report = predict_race_times(activities, period, today, settings.max_hr, settings.rest_hr)
    if report is None:
        console.print("Not enough running data in this period to predict race times.")
        console.print()
        return

    table = Table(title="Predicted Race Times", box=box.ROUNDED)
    table.add_column("Distance", style="cyan")
    table.add_column("Time", justify="right", style="bold")
    table.add_column("Pace", justify="right")
    table.add_column("Change", justify="right")

    for p in report.predictions:
        if p.delta_sec is None:
            change = Text("-", style="dim")
        else:
            color = "green" if p.is_faster else "red"
            sign = "-" if p.delta_sec < 0 else "+"
            change = Text(f"{sign}{format_time(abs(p.delta_sec))}", style=color)
        table.add_row(p.name, format_time(p.time_sec), format_speed_as_pace(p.pace_m_per_s), change)

    console.print(table)
    console.print()
    console.print(f"CTL: {report.ctl:.1f}   TSB: ", format_tsb_rich(report.tsb))
    console.print(
        f"Readiness: [bold]{report.readiness_score}[/bold] ({report.readiness_band})  "
        f"quality runs: {report.quality_runs}, "
        f"longest recent run: {report.longest_recent_run_km:.1f} km"
    )
    console.print()


def cmd_summary(args, settings: Settings):
    """Show period summary and recent mileage trend."""
    console.print()
    console.print(Panel("[bold]run-analytics - Summary[/bold]"))
    console.print()

    activities = load_activities(args.file)
    period = period_from_args(args)
    summary = summarize_period(activities, period, today=args.as_of or date.today())

    table = Table(title="Period Summary", box=box.ROUNDED, show_header=False)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Runs", str(summary.run_count))
    table.add_row("Distance", f"{summary.total_distance_km:.1f} km")
    table.add_row("Average run", f"{summary.avg_distance_km:.1f} km")
    table.add_row("Average pace", f"{format_pace(summary.avg_pace_min_per_km)} /km")
    table.add_row("Longest run", f"{summary.longest_run_km:.1f} km")
    table.add_row("Longest streak", f"{summary.longest_streak} days")
    table.add_row("Longest break", f"{summary.longest_break} days")
    console.print(table)

    if args.trend:
        anchor = args.as_of or date.today()
        points = calculate_mileage_trend(activities, anchor, args.trend)
        last = points[-1]
        console.print(
            f"Trailing distance to {last.date}: [bold]{last.trailing_km:.1f} km[/bold]"
        )
    console.print()


def cmd_zones(args, settings: Settings):
    """Show heart rate zones and run time spent in each."""
    console.print()
    console.print(Panel("[bold]run-analytics - Heart Rate Zones[/bold]"))
    console.print()

    max_hr = estimate_max_hr(args.age) if args.age else settings.max_hr
    zones = build_zones(max_hr)

    # Whole-run time attributed to the zone of its average heart rate
    seconds = [0.0] * len(zones)
    if args.file:
        for run in filter_runs(load_activities(args.file)):
            if not run.average_heartrate:
                continue
            index = get_zone_index(run.average_heartrate, zones)
            if index >= 0:
                seconds[index] += run.moving_time

    table = Table(title=f"Zones (max HR {max_hr})", box=box.ROUNDED)
    table.add_column("Zone")
    table.add_column("Range", justify="right")
    table.add_column("Run time", justify="right")
    for zone, total in zip(zones, seconds):
        table.add_row(
            Text(zone.name, style=zone.color),
            f"{zone.min_hr}-{zone.max_hr} bpm",
            format_duration(total) if args.file else "-",
        )

    console.print(table)
    console.print()


COMMANDS = {
    "fitness": cmd_fitness,
    "health": cmd_health,
    "predict": cmd_predict,
    "summary": cmd_summary,
    "zones": cmd_zones,
}


def add_period_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        choices=[m.value for m in PeriodMode],
        default=PeriodMode.ALL.value,
        help="Period to analyze (default: all)"
    )
    parser.add_argument("--year", type=int, help="Year for year/month mode")
    parser.add_argument("--month", type=int, help="Month (1-12) for month mode")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run-analytics",
        description="Training load, health and race metrics from running activities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--max-hr", type=int, help="Maximum heart rate (overrides settings)")
    parser.add_argument("--rest-hr", type=int, help="Resting heart rate (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Fitness command
    fitness_p = subparsers.add_parser("fitness", help="Show CTL/ATL/TSB history")
    fitness_p.add_argument("file", type=Path, help="Activity JSON file")
    fitness_p.add_argument(
        "--days", type=int, default=14,
        help="Number of days to show (default: 14)"
    )
    fitness_p.add_argument("--as-of", type=parse_date_arg, help="Last day shown (default: today)")

    # Health command
    health_p = subparsers.add_parser("health", help="Show training health metrics")
    health_p.add_argument("file", type=Path, help="Activity JSON file")
    health_p.add_argument("--as-of", type=parse_date_arg, help="Anchor date (default: today)")

    # Predict command
    predict_p = subparsers.add_parser("predict", help="Predict race times")
    predict_p.add_argument("file", type=Path, help="Activity JSON file")
    add_period_arguments(predict_p)
    predict_p.add_argument("--today", type=parse_date_arg, help="Reference date (default: today)")

    # Summary command
    summary_p = subparsers.add_parser("summary", help="Summarize a period")
    summary_p.add_argument("file", type=Path, help="Activity JSON file")
    add_period_arguments(summary_p)
    summary_p.add_argument(
        "--trend",
        choices=["month", "year", "all"],
        help="Also show the trailing mileage for this view"
    )
    summary_p.add_argument("--as-of", type=parse_date_arg, help="Trend end date (default: today)")

    # Zones command
    zones_p = subparsers.add_parser("zones", help="Show heart rate zones")
    zones_p.add_argument("file", type=Path, nargs="?", help="Activity JSON file (optional)")
    zones_p.add_argument("--age", type=int, help="Estimate max HR from age")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args)
        configure_logging("DEBUG" if args.verbose else settings.log_level)
        COMMANDS[args.command](args, settings)
    except RunAnalyticsError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        for error in e.details.get("errors", [])[:5]:
            location = ".".join(str(part) for part in error.get("loc", ()))
            console.print(f"  [dim]{escape(location)}[/dim] {escape(error.get('msg', ''))}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
