"""Analysis commands: suggest, plateau, streak, progress."""

import json
from dataclasses import asdict
from typing import Annotated

import typer

from ...core.ascii_plot import create_weight_progress_plot
from ...core.performance import progress_change
from ...core.streaks import compute_streak, current_cycle, effective_date
from ...io.serializers import ValidationError
from .. import views
from ..app import HistoryOption, JsonOption, app, get_engine, get_store

ExerciseNameOption = Annotated[
    str,
    typer.Option("--exercise", "-e", help="Exercise name as logged, e.g. 'Bench Press'"),
]


@app.command()
def suggest(
    exercise: ExerciseNameOption,
    history_path: HistoryOption = None,
    sets: Annotated[str, typer.Option("--sets", help="Current set count, e.g. '3'")] = "3",
    reps: Annotated[str, typer.Option("--reps", help="Current rep range, e.g. '8-12'")] = "8-12",
    weight: Annotated[str, typer.Option("--weight", help="Current weight, e.g. '40kg'")] = "",
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="compound or isolation"),
    ] = "compound",
    json_out: JsonOption = False,
) -> None:
    """
    Suggest the next weight, rep range or set count for an exercise.

    Looks at the last two weeks of completed workouts.
    """
    store = get_store(history_path)
    engine = get_engine(store)

    try:
        performance = engine.analyze_performance(exercise)
        suggestion = engine.suggest_progression(exercise, sets, reps, weight, kind)  # type: ignore[arg-type]
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "exercise": exercise,
            "performance": asdict(performance) if performance else None,
            "suggestion": asdict(suggestion),
        }, indent=2, ensure_ascii=False))
        return

    if performance is not None:
        views.console.print(views.format_performance_table(performance))
    views.print_suggestion(suggestion)


@app.command()
def plateau(
    exercise: ExerciseNameOption,
    history_path: HistoryOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Check whether an exercise has stalled over the last four weeks.
    """
    store = get_store(history_path)
    engine = get_engine(store)

    try:
        state = engine.assess_plateau(exercise)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "exercise": exercise,
            "is_plateau": state.is_plateau,
            "strategies": list(state.strategies),
        }, indent=2, ensure_ascii=False))
        return

    views.print_plateau(exercise, list(state.strategies))


@app.command()
def streak(
    history_path: HistoryOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the current and best workout streaks and the current 7-day cycle.
    """
    store = get_store(history_path)

    try:
        times = store.completed_workout_times()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    today = effective_date()
    summary = compute_streak(times, today=today)
    cycle = current_cycle(times, today=today)

    if json_out:
        print(json.dumps({
            "today": today.isoformat(),
            "current_streak": summary.current_streak,
            "max_streak": summary.max_streak,
            "cycle": None if cycle is None else {
                "index": cycle.index,
                "start": cycle.start.isoformat(),
                "end": cycle.end.isoformat(),
                "workout_days": [d.isoformat() for d in cycle.workout_days],
            },
        }, indent=2))
        return

    views.print_streak(summary, cycle)


@app.command()
def progress(
    exercise: ExerciseNameOption,
    history_path: HistoryOption = None,
    weeks: Annotated[int, typer.Option("--weeks", "-w", help="Lookback window in weeks")] = 12,
    json_out: JsonOption = False,
) -> None:
    """
    Show per-session weight and reps for an exercise with an ASCII chart.
    """
    store = get_store(history_path)
    engine = get_engine(store)

    try:
        points = engine.progress(exercise, weeks)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    weight_pct, reps_pct = progress_change(points)

    if json_out:
        print(json.dumps({
            "exercise": exercise,
            "weight_change_pct": weight_pct,
            "reps_change_pct": reps_pct,
            "points": [
                {**asdict(p), "completed_at": p.completed_at.isoformat()}
                for p in points
            ],
        }, indent=2, ensure_ascii=False))
        return

    if not points:
        views.print_info(f"No completed sessions of {exercise} in the last {weeks} weeks.")
        return

    views.console.print(views.format_progress_table(exercise, points))
    views.console.print(create_weight_progress_plot(points, exercise_name=exercise), markup=False)
    views.console.print(f"Weight change: {weight_pct:+d}%   Reps change: {reps_pct:+d}%")
