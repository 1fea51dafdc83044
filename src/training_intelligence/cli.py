#!/usr/bin/env python3
"""
Training Intelligence CLI.

Fitness scores, periodized plans, execution scoring and load trends.

Usage:
    training-intel vdot --distance 5k --time 20:00
    training-intel predict --vdot 50 --distance marathon
    training-intel plan --race-date 2025-04-27 --distance marathon --current 30 --peak 50
    training-intel score --input workout.json
    training-intel trend --input loads.csv --weeks 4
"""

import argparse
import csv
import json
import logging
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError as RequestValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import get_settings
from .exceptions import TrainingIntelligenceError, ValidationError
from .metrics.conditions import calculate_condition_adjustment
from .metrics.fitness import calculate_fitness_trend, summarize_fitness
from .metrics.load import calculate_workout_load
from .metrics.vdot import (
    calculate_vdot_from_race,
    predict_time,
    resolve_distance,
)
from .models.athlete import PlanRequest
from .models.execution import (
    CompletedWorkout,
    ReferencePaces,
    WeatherSnapshot,
    WorkoutSegment,
)
from .models.plans import PlannedWorkout, TrainingPlan, WorkoutCategory
from .planning.generator import generate_plan
from .planning.templates import find_workout_template
from .services.execution_scorer import compute_execution_score
from .utils.formatting import format_pace, format_time


console = Console()

CATEGORY_STYLES = {
    WorkoutCategory.EASY: "green",
    WorkoutCategory.RECOVERY: "green",
    WorkoutCategory.LONG: "cyan",
    WorkoutCategory.QUALITY: "yellow",
    WorkoutCategory.RACE: "bold red",
}

RISK_STYLES = {
    "insufficient_data": "dim",
    "decreasing": "blue",
    "conservative": "green",
    "moderate": "green",
    "elevated": "yellow",
    "high": "red",
}


def score_style(score: int) -> str:
    if score >= 90:
        return "green"
    if score >= 70:
        return "yellow"
    return "red"


def cmd_vdot(args):
    """Show VDOT, condition-adjusted VDOT, pace zones and race equivalents."""
    console.print()
    console.print(Panel("[bold]Training Intelligence - VDOT[/bold]"))
    console.print()

    result = calculate_vdot_from_race(args.distance, args.time)
    distance_m, _ = resolve_distance(args.distance)

    summary = Table(box=box.ROUNDED, show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", justify="right")
    summary.add_row("Race", f"{result.race_distance} in {result.race_time_formatted}")
    summary.add_row("VDOT", f"{result.vdot:.1f}")

    if args.temp is not None or args.elevation is not None:
        adjustment = calculate_condition_adjustment(
            distance_m,
            result.race_time_sec,
            temp_f=args.temp,
            humidity_pct=args.humidity,
            elevation_gain_ft=args.elevation,
            dew_point_f=args.dew_point,
        )
        summary.add_row("Weather (s/mi)", str(adjustment.weather_sec_per_mile))
        summary.add_row("Elevation (s/mi)", str(adjustment.elevation_sec_per_mile))
        summary.add_row("Adjusted VDOT", f"{adjustment.adjusted_vdot:.1f}")
        if adjustment.clamped:
            summary.add_row("Note", "Correction capped at 15% of race time")
    console.print(summary)
    console.print()

    zone_table = Table(title="Training Paces", box=box.ROUNDED)
    zone_table.add_column("Zone", style="cyan")
    zone_table.add_column("Pace", justify="right")
    for name, pace in result.pace_zones.as_list():
        zone_table.add_row(name.replace("_", " ").title(), format_pace(pace))
    console.print(zone_table)
    console.print()

    race_table = Table(title="Equivalent Race Times", box=box.ROUNDED)
    race_table.add_column("Distance", style="cyan")
    race_table.add_column("Time", justify="right")
    race_table.add_column("Pace", justify="right")
    for name, prediction in result.race_predictions.items():
        race_table.add_row(name, prediction["time_formatted"], prediction["pace_formatted"])
    console.print(race_table)
    console.print()


def cmd_predict(args):
    """Predict a race time from VDOT."""
    distance_m, distance_name = resolve_distance(args.distance)
    time_sec = predict_time(args.vdot, distance_m)
    miles = distance_m / 1609.34
    console.print()
    console.print(Panel(
        f"[bold]{distance_name}[/bold] at VDOT {args.vdot:.1f}: "
        f"[green]{format_time(time_sec)}[/green] ({format_pace(time_sec / miles)})",
        title="Race Prediction",
        box=box.ROUNDED,
    ))
    console.print()


def build_plan_request(args) -> PlanRequest:
    """Translate plan arguments into a validated PlanRequest."""
    distance_m, distance_name = resolve_distance(args.distance)
    start = date.fromisoformat(args.start_date) if args.start_date else date.today()
    vdot = args.vdot
    if vdot is None and args.race_time:
        vdot = calculate_vdot_from_race(args.race_time_distance or args.distance, args.race_time).vdot

    return PlanRequest(
        race_date=date.fromisoformat(args.race_date),
        race_distance_m=distance_m,
        race_distance_label=distance_name,
        race_name=args.race_name,
        start_date=start,
        current_weekly_mileage=args.current,
        peak_weekly_mileage=args.peak,
        current_long_run_miles=args.long_run,
        runs_per_week=args.runs_per_week,
        preferred_long_run_day=args.long_run_day,
        preferred_quality_days=args.quality_days,
        required_rest_days=args.rest_days,
        aggressiveness=args.aggressiveness,
        quality_sessions_per_week=args.quality_sessions,
        vdot=vdot,
    )


def print_plan(plan: TrainingPlan) -> None:
    title = plan.race_name or f"{plan.race_distance_label} Plan"
    console.print(Panel(
        f"[bold]{title}[/bold]\n"
        f"Race day: {plan.race_date.isoformat()}  |  {plan.total_weeks} weeks  |  "
        f"{plan.summary.total_miles:.0f} total miles  |  "
        f"peak {plan.summary.peak_mileage:.0f} mi (week {plan.summary.peak_mileage_week})",
        box=box.ROUNDED,
    ))

    phase_table = Table(title="Phases", box=box.ROUNDED)
    phase_table.add_column("Phase", style="cyan")
    phase_table.add_column("Weeks", justify="right")
    phase_table.add_column("Focus")
    for phase in plan.phases:
        phase_table.add_row(phase.phase.value.title(), str(phase.weeks), phase.focus)
    console.print(phase_table)

    for week in plan.weeks:
        down = " [dim](down week)[/dim]" if week.is_down_week else ""
        table = Table(
            title=f"Week {week.week_number}: {week.phase.value.title()} - "
                  f"{week.target_mileage:.0f} mi{down}",
            caption=week.focus,
            box=box.SIMPLE,
        )
        table.add_column("Date", style="cyan")
        table.add_column("Workout")
        table.add_column("Miles", justify="right")
        table.add_column("Pace", justify="right")
        for workout in week.workouts:
            name = Text(workout.name, style=CATEGORY_STYLES.get(workout.category, ""))
            if workout.is_key_workout:
                name.append(" *", style="bold")
            table.add_row(
                f"{workout.day_of_week[:3].title()} {workout.date.strftime('%m-%d')}",
                name,
                f"{workout.target_distance_miles:.1f}" if workout.target_distance_miles else "-",
                format_pace(workout.target_pace),
            )
        console.print(table)


def cmd_plan(args):
    """Generate a periodized training plan."""
    request = build_plan_request(args)
    plan = generate_plan(request)

    if args.json:
        print(json.dumps(plan.to_dict(), indent=2))
        return

    console.print()
    print_plan(plan)
    console.print()


def load_score_input(path: Path) -> Tuple[
    CompletedWorkout, PlannedWorkout, List[WorkoutSegment],
    Optional[WeatherSnapshot], Optional[ReferencePaces],
]:
    """
    Read a score request.

    The JSON document holds "planned" and "actual" objects plus optional
    "segments", "weather" and "reference_paces". A planned workout
    without a structure takes its template's structure.
    """
    data = json.loads(path.read_text())
    if "planned" not in data or "actual" not in data:
        raise ValidationError("Score input needs 'planned' and 'actual' objects", field="input")

    planned = PlannedWorkout.from_dict(data["planned"])
    if not planned.structure:
        template = find_workout_template(planned.template_id)
        if template is not None:
            planned.structure = template.structure
            planned.name = planned.name or template.name

    paces = None
    if data.get("reference_paces"):
        paces = ReferencePaces(**data["reference_paces"])

    return (
        CompletedWorkout.from_dict(data["actual"]),
        planned,
        [WorkoutSegment.from_dict(s) for s in data.get("segments", [])],
        WeatherSnapshot.from_dict(data["weather"]) if data.get("weather") else None,
        paces,
    )


def cmd_score(args):
    """Score a completed workout against its plan."""
    actual, planned, segments, weather, paces = load_score_input(Path(args.input))
    score = compute_execution_score(actual, planned, segments or None, weather, paces)

    if args.json:
        print(json.dumps(score.to_dict(), indent=2))
        return

    console.print()
    console.print(Panel(
        Text(f"{score.overall}/100", style=f"bold {score_style(score.overall)}"),
        title=f"Execution Score - {planned.name or planned.template_id}",
        box=box.ROUNDED,
    ))

    table = Table(box=box.ROUNDED)
    table.add_column("Component", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right")
    for name, value in score.components.as_dict().items():
        weight = score.components.WEIGHTS[name]
        table.add_row(
            name.replace("_", " ").title(),
            Text(str(value), style=score_style(value)),
            f"{weight:.0%}",
        )
    console.print(table)

    feedback = [score.diagnosis, ""]
    feedback.extend(f"[green]+[/green] {h}" for h in score.highlights)
    feedback.extend(f"[red]-[/red] {c}" for c in score.concerns)
    feedback.extend(["", f"[bold]Next time:[/bold] {score.suggestion}"])
    if score.stimulus is not None:
        feedback.extend(["", f"[dim]{score.stimulus.explanation}[/dim]"])
    console.print(Panel("\n".join(feedback), title="Feedback", box=box.ROUNDED))
    console.print()


def read_daily_loads(path: Path) -> List[Tuple[date, float]]:
    """
    Read daily loads from CSV.

    Rows carry either a "load" column, or "duration_min" and "category"
    (with optional "avg_pace" and "distance_miles") to compute load from.
    """
    loads: List[Tuple[date, float]] = []
    with path.open(newline="") as f:
        for row in csv.DictReader(f):
            day = date.fromisoformat(row["date"].strip())
            if row.get("load"):
                load = float(row["load"])
            else:
                load = calculate_workout_load(
                    float(row["duration_min"]),
                    row.get("category", "other").strip(),
                    avg_pace_sec_per_mile=float(row["avg_pace"]) if row.get("avg_pace") else None,
                    distance_miles=float(row["distance_miles"]) if row.get("distance_miles") else None,
                )
            loads.append((day, load))
    return loads


def cmd_trend(args):
    """Show CTL/ATL/TSB, ramp rate and risk for a load history."""
    console.print()
    console.print(Panel("[bold]Training Intelligence - Fitness Trend[/bold]"))
    console.print()

    metrics = calculate_fitness_trend(read_daily_loads(Path(args.input)))
    if not metrics:
        console.print("No load data found.")
        console.print()
        return

    cutoff = metrics[-1].date - timedelta(days=args.days - 1)
    table = Table(title=f"Fitness Trend (Last {args.days} Days)", box=box.ROUNDED)
    table.add_column("Date", style="cyan")
    table.add_column("Load", justify="right")
    table.add_column("CTL", justify="right")
    table.add_column("ATL", justify="right")
    table.add_column("TSB", justify="right")
    for m in metrics:
        if m.date < cutoff:
            continue
        tsb_style = "green" if m.tsb > 0 else "yellow" if m.tsb > -10 else "red"
        table.add_row(
            m.date.isoformat(),
            f"{m.daily_load:.1f}",
            f"{m.ctl:.1f}",
            f"{m.atl:.1f}",
            Text(f"{m.tsb:+.1f}", style=tsb_style),
        )
    console.print(table)
    console.print()

    summary = summarize_fitness(metrics, weeks=args.weeks or get_settings().ramp_rate_window_weeks)
    risk = summary.ramp_risk
    ramp = f"{risk.ramp_rate:+.1f} CTL/week" if risk.ramp_rate is not None else "n/a"
    low, high = summary.weekly_load_range
    status_text = (
        f"Form: [bold]{summary.status.label}[/bold] (TSB {summary.tsb:+.1f})\n"
        f"Ramp rate: {ramp} - [{RISK_STYLES.get(risk.level.value, '')}]{risk.message}[/]\n"
        f"Suggested weekly load: {low:.0f}-{high:.0f}"
    )
    if risk.recommendation:
        status_text += f"\n[bold]{risk.recommendation}[/bold]"
    console.print(Panel(status_text, title="Current Status", box=box.ROUNDED))
    console.print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Training Intelligence - plans, paces and execution scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  training-intel vdot --distance 5k --time 20:00
  training-intel vdot --distance half --time 1:35:00 --temp 78 --humidity 70
  training-intel predict --vdot 50 --distance marathon
  training-intel plan --race-date 2025-04-27 --distance marathon --current 30 --peak 50
  training-intel score --input workout.json
  training-intel trend --input loads.csv --weeks 4
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # VDOT command
    vdot_p = subparsers.add_parser("vdot", help="Calculate VDOT from a race result")
    vdot_p.add_argument("--distance", required=True, help="Race distance (5k, 10k, half, marathon, or meters)")
    vdot_p.add_argument("--time", required=True, help="Race time (e.g., '20:00' or '1:35:00')")
    vdot_p.add_argument("--temp", type=float, help="Race temperature (F)")
    vdot_p.add_argument("--humidity", type=float, help="Relative humidity (%%)")
    vdot_p.add_argument("--dew-point", type=float, help="Dew point (F)")
    vdot_p.add_argument("--elevation", type=float, help="Elevation gain (ft)")

    # Predict command
    predict_p = subparsers.add_parser("predict", help="Predict a race time from VDOT")
    predict_p.add_argument("--vdot", type=float, required=True, help="VDOT value")
    predict_p.add_argument("--distance", required=True, help="Race distance")

    # Plan command
    plan_p = subparsers.add_parser("plan", help="Generate a training plan")
    plan_p.add_argument("--race-date", required=True, help="Race date (YYYY-MM-DD)")
    plan_p.add_argument("--distance", required=True, help="Race distance")
    plan_p.add_argument("--race-name", help="Race name")
    plan_p.add_argument("--start-date", help="Plan start date (default: today)")
    plan_p.add_argument("--current", type=float, required=True, help="Current weekly miles")
    plan_p.add_argument("--peak", type=float, required=True, help="Peak weekly miles")
    plan_p.add_argument("--long-run", type=float, help="Current long run (miles)")
    plan_p.add_argument("--runs-per-week", type=int, default=5, help="Runs per week")
    plan_p.add_argument("--long-run-day", default="sunday", help="Long run day")
    plan_p.add_argument(
        "--quality-days", nargs="+", default=["tuesday", "thursday"], help="Preferred quality days"
    )
    plan_p.add_argument("--rest-days", nargs="*", default=[], help="Mandatory rest days")
    plan_p.add_argument(
        "--aggressiveness",
        choices=["conservative", "moderate", "aggressive"],
        default="moderate",
        help="Mileage progression",
    )
    plan_p.add_argument("--quality-sessions", type=int, default=2, help="Quality sessions per week")
    plan_p.add_argument("--vdot", type=float, help="Current VDOT (sets target paces)")
    plan_p.add_argument("--race-time", help="Recent race time to derive VDOT from")
    plan_p.add_argument("--race-time-distance", help="Distance of the recent race (default: goal distance)")
    plan_p.add_argument("--json", action="store_true", help="Print the plan as JSON")

    # Score command
    score_p = subparsers.add_parser("score", help="Score a completed workout")
    score_p.add_argument("--input", "-i", required=True, help="JSON file with planned/actual workout")
    score_p.add_argument("--json", action="store_true", help="Print the score as JSON")

    # Trend command
    trend_p = subparsers.add_parser("trend", help="Show fitness trend from daily loads")
    trend_p.add_argument("--input", "-i", required=True, help="CSV file of daily loads")
    trend_p.add_argument("--weeks", "-w", type=int, help="Ramp-rate window in weeks")
    trend_p.add_argument("--days", "-d", type=int, default=14, help="Days to show")

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "vdot": cmd_vdot,
        "predict": cmd_predict,
        "plan": cmd_plan,
        "score": cmd_score,
        "trend": cmd_trend,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        commands[args.command](args)
    except TrainingIntelligenceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1
    except RequestValidationError as e:
        console.print(f"[red]Invalid request: {e.errors()[0]['msg']}[/red]")
        return 1
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
