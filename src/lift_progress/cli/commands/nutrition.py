"""Nutrition and achievement commands: log-water, log-meal, goals, set-goals, achievements."""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated, Optional

import typer

from ...core.achievements import ActivitySnapshot, achievement_status, evaluate_achievements
from ...core.models import NutritionGoals
from ...core.nutrition import calculate_nutrition_goals, macros
from ...core.streaks import compute_streak, effective_date
from ...io.history_store import WorkoutStore
from ...io.serializers import ValidationError, validate_log_date
from .. import views
from ..app import HistoryOption, JsonOption, app, get_store

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", help="Date YYYY-MM-DD (default: today)"),
]


def _snapshot(store: WorkoutStore) -> ActivitySnapshot:
    """Collect the activity totals the unlock rules look at."""
    profile = store.load_profile()
    times = store.completed_workout_times()
    snapshot = ActivitySnapshot(
        completed_workouts=len(times),
        current_streak=compute_streak(times, today=effective_date()).current_streak,
        meals_logged=store.meal_count(),
        water_by_day=store.daily_water_totals(),
        calories_by_day=store.daily_calorie_totals(),
    )
    if profile is not None:
        snapshot.water_goal_ml = profile.daily_water_goal_ml
        snapshot.calorie_goal = profile.daily_calorie_goal
    return snapshot


@app.command("log-water")
def log_water(
    amount_ml: Annotated[int, typer.Argument(help="Water amount in ml")],
    history_path: HistoryOption = None,
    date: DateOption = None,
) -> None:
    """
    Log water intake for a day.
    """
    store = get_store(history_path)

    try:
        day = validate_log_date(date, effective_date())
        store.append_water(day, amount_ml)
        total = store.daily_water_totals().get(day, 0)
        profile = store.load_profile()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    goal = profile.daily_water_goal_ml if profile else None
    suffix = f" / {goal} ml" if goal else " ml"
    views.print_success(f"Logged {amount_ml} ml. Total for {day.isoformat()}: {total}{suffix}")


@app.command("log-meal")
def log_meal(
    calories: Annotated[int, typer.Argument(help="Meal calories (kcal)")],
    history_path: HistoryOption = None,
    description: Annotated[str, typer.Option("--description", "-m", help="What you ate")] = "",
    date: DateOption = None,
) -> None:
    """
    Log a meal's calories for a day.
    """
    store = get_store(history_path)

    try:
        day = validate_log_date(date, effective_date())
        store.append_meal(day, calories, description)
        total = store.daily_calorie_totals().get(day, 0)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Logged {calories} kcal. Total for {day.isoformat()}: {total} kcal")


@app.command()
def goals(
    history_path: HistoryOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the stored daily goals with macros, next to the recommended targets.

    Macros follow the stored calorie goal; the recommendation is recomputed
    from the current profile.
    """
    store = get_store(history_path)

    try:
        profile = store.load_profile()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if profile is None:
        views.print_error(f"Profile not found: {store.profile_path}")
        views.print_info("Run 'init' first to create profile and history.")
        raise typer.Exit(1)

    protein, carbs, fat = macros(profile.daily_calorie_goal, profile.goal)
    targets = NutritionGoals(
        calories=profile.daily_calorie_goal,
        water_ml=profile.daily_water_goal_ml,
        protein=protein,
        carbs=carbs,
        fat=fat,
    )
    recommended = calculate_nutrition_goals(
        weight_kg=profile.weight_kg,
        height_cm=profile.height_cm,
        age=profile.age,
        sex=profile.sex,
        training_days_per_week=profile.training_days_per_week,
        goal=profile.goal,
    )

    if json_out:
        print(json.dumps({**asdict(targets), "recommended": asdict(recommended)}, indent=2))
        return

    views.print_goals(targets, recommended)


@app.command("set-goals")
def set_goals(
    history_path: HistoryOption = None,
    calories: Annotated[
        Optional[int],
        typer.Option("--calories", "-c", help="Daily calorie goal (1000-5000 kcal)"),
    ] = None,
    water_ml: Annotated[
        Optional[int],
        typer.Option("--water-ml", "-w", help="Daily water goal (1000-10000 ml)"),
    ] = None,
) -> None:
    """
    Edit the daily calorie and water goals.

    Omitted values keep their current setting.
    """
    store = get_store(history_path)

    try:
        profile = store.load_profile()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if profile is None:
        views.print_error(f"Profile not found: {store.profile_path}")
        views.print_info("Run 'init' first to create profile and history.")
        raise typer.Exit(1)

    try:
        profile = store.update_daily_goals(
            calories=profile.daily_calorie_goal if calories is None else calories,
            water_ml=profile.daily_water_goal_ml if water_ml is None else water_ml,
        )
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(
        f"Daily goals saved: {profile.daily_calorie_goal} kcal, {profile.daily_water_goal_ml} ml water"
    )


@app.command()
def achievements(
    history_path: HistoryOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Unlock any newly earned achievements and list the catalog.
    """
    store = get_store(history_path)

    try:
        snapshot = _snapshot(store)
        unlocked = store.load_achievements()
        new_types = evaluate_achievements(snapshot, set(unlocked), effective_date())
        if new_types:
            unlocked = store.unlock_achievements(new_types, datetime.now(timezone.utc))
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    status = achievement_status(unlocked)

    if json_out:
        print(json.dumps({
            "new": new_types,
            "achievements": [asdict(a) for a in status],
        }, indent=2, ensure_ascii=False))
        return

    views.print_achievements(status, new_types)
    for t in new_types:
        title = next(a.title for a in status if a.achievement_type == t)
        views.print_success(f"Achievement unlocked: {title}")
