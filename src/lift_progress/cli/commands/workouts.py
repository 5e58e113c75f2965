"""Workout commands: init, log-workout, show-history, delete-record."""

import json
from datetime import datetime, time
from typing import Annotated, Optional
from zoneinfo import ZoneInfo

import typer
from rich.markup import escape

from ...core.config import APP_TIMEZONE
from ...core.models import UserProfile, WorkoutRecord
from ...core.nutrition import calculate_nutrition_goals
from ...core.streaks import effective_date
from ...io.serializers import ValidationError, parse_exercise_entry, validate_log_date, workout_to_dict
from .. import views
from ..app import HistoryOption, JsonOption, app, get_store


@app.command()
def init(
    history_path: HistoryOption = None,
    name: Annotated[str, typer.Option("--name", "-n", help="Your name")] = "Athlete",
    age: Annotated[int, typer.Option("--age", "-a", help="Age in years")] = 25,
    height_cm: Annotated[float, typer.Option("--height-cm", "-h", help="Height in centimeters")] = 170.0,
    weight_kg: Annotated[float, typer.Option("--weight-kg", "-w", help="Bodyweight in kg")] = 70.0,
    sex: Annotated[str, typer.Option("--sex", "-s", help="Sex (male/female)")] = "male",
    days_per_week: Annotated[
        int,
        typer.Option("--days-per-week", "-d", help="Training days per week (0-7)"),
    ] = 3,
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="weight-loss, muscle-gain or maintenance"),
    ] = "maintenance",
) -> None:
    """
    Initialize the profile, daily goals and log files.

    Existing workouts and intake records are kept; the profile is replaced
    but previously unlocked achievements survive.
    """
    store = get_store(history_path)

    if sex not in ("male", "female"):
        views.print_error("Sex must be 'male' or 'female'")
        raise typer.Exit(1)

    try:
        goals = calculate_nutrition_goals(
            weight_kg=weight_kg,
            height_cm=height_cm,
            age=age,
            sex=sex,
            training_days_per_week=days_per_week,
            goal=goal,
        )
        profile = UserProfile(
            name=name,
            age=age,
            height_cm=height_cm,
            weight_kg=weight_kg,
            sex=sex,  # type: ignore[arg-type]
            training_days_per_week=days_per_week,
            goal=goal,  # type: ignore[arg-type]
            daily_water_goal_ml=goals.water_ml,
            daily_calorie_goal=goals.calories,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        store.init()
        store.save_profile(profile)
    except (OSError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Profile saved to {store.profile_path}")
    views.print_info(f"Workouts will be logged to {store.history_path}")
    views.print_goals(goals)


@app.command("log-workout")
def log_workout(
    entries: Annotated[
        list[str],
        typer.Option(
            "--entry", "-x",
            help="Exercise and sets, e.g. 'Bench Press=40x12,40x10,40x8?'. Repeat per exercise.",
        ),
    ],
    history_path: HistoryOption = None,
    day_name: Annotated[str, typer.Option("--day", help="Workout day label, e.g. 'Push A'")] = "Workout",
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Workout date YYYY-MM-DD (default: today)"),
    ] = None,
    in_progress: Annotated[
        bool,
        typer.Option("--in-progress", help="Store as unfinished; excluded from analysis"),
    ] = False,
) -> None:
    """
    Log a workout.

    Each --entry is 'Exercise=sets' where sets are comma-separated
    WEIGHTxREPS (or bare REPS). A trailing '?' marks a set as not completed.
    """
    store = get_store(history_path)

    try:
        exercises = [parse_exercise_entry(e) for e in entries]
        today = effective_date()
        day = validate_log_date(date, today)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    tz = ZoneInfo(APP_TIMEZONE)
    when = datetime.now(tz) if day == today else datetime.combine(day, time(12, 0), tzinfo=tz)

    workout = WorkoutRecord(
        day_name=day_name,
        started_at=when,
        status="in_progress" if in_progress else "completed",
        completed_at=None if in_progress else when,
        exercises=exercises,
    )

    try:
        store.append_workout(workout)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    total_sets = sum(len(log.sets) for log in exercises)
    views.print_success(
        f"Logged {day_name} on {day.isoformat()}: {len(exercises)} exercise(s), {total_sets} set(s)"
    )


@app.command("show-history")
def show_history(
    history_path: HistoryOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", min=1, help="Limit number of workouts to show"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display the workout log as a table.
    """
    store = get_store(history_path)

    if not store.exists():
        views.print_error(f"History file not found: {store.history_path}")
        views.print_info("Run 'init' first to create profile and history.")
        raise typer.Exit(1)

    try:
        workouts = store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps([workout_to_dict(w) for w in workouts], indent=2, ensure_ascii=False))
        return

    views.print_history(workouts)


@app.command("delete-record")
def delete_record(
    record_id: Annotated[
        int,
        typer.Argument(help="Workout ID to delete (see # column in show-history)"),
    ],
    history_path: HistoryOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove a workout by its ID.

    Use 'show-history' to see workout IDs in the # column.
    """
    store = get_store(history_path)

    try:
        workouts = store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not workouts:
        views.print_error("No workouts in history.")
        raise typer.Exit(1)

    if record_id < 1 or record_id > len(workouts):
        views.print_error(f"Record ID must be between 1 and {len(workouts)}")
        raise typer.Exit(1)

    target = workouts[record_id - 1]
    label = f"{target.started_at:%Y-%m-%d} ({target.day_name})"
    views.console.print(f"Workout to delete: [bold]{escape(label)}[/bold]")

    if not force and not views.confirm_action("Delete this workout?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_workout_at(record_id - 1)
    views.print_success(f"Deleted workout #{record_id}: {label}")
