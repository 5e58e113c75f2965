"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, suggestions and goals.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.models import (
    Achievement,
    BodyWeightEntry,
    ExercisePerformance,
    NutritionGoals,
    ProgressionSuggestion,
    ProgressPoint,
    StreakSummary,
    WeightTrend,
    WorkoutCycle,
    WorkoutRecord,
)
from ..core.parsing import format_kg, format_number

console = Console()

_CONFIDENCE_STYLE = {"high": "green", "medium": "yellow", "low": "dark_orange"}


def _fmt_sets(workout: WorkoutRecord) -> str:
    parts = []
    for log in workout.exercises:
        sets = ", ".join(
            (f"{s.weight}x{s.reps}" if s.weight else s.reps or "-") + ("" if s.completed else "?")
            for s in log.sets
        )
        parts.append(f"[bold]{escape(log.exercise_name)}[/bold]: {escape(sets)}")
    return "\n".join(parts)


def format_workout_table(workouts: list[WorkoutRecord]) -> Table:
    """
    Format workouts as a Rich table.

    Args:
        workouts: Workouts to display, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History", caption="? = set not completed", show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Day")
    table.add_column("Status")
    table.add_column("Exercises (weight x reps)")

    for i, w in enumerate(workouts, 1):
        when = w.completed_at or w.started_at
        status = "[green]done[/green]" if w.is_completed else "[yellow]in progress[/yellow]"
        table.add_row(str(i), when.strftime("%Y-%m-%d"), escape(w.day_name), status, _fmt_sets(w))

    return table


def print_history(workouts: list[WorkoutRecord]) -> None:
    if not workouts:
        print_info("No workouts logged yet.")
        return
    console.print(format_workout_table(workouts))


def format_performance_table(performance: ExercisePerformance) -> Table:
    table = Table(title=f"{escape(performance.exercise_name)} - recent performance", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Sessions", str(performance.completed_sessions))
    table.add_row("Consistency", f"{performance.consistency_score}%")
    table.add_row("Average weight", f"{performance.average_weight:.1f} kg")
    table.add_row("Average reps", f"{performance.average_reps:.1f}")
    table.add_row("Last set", escape(f"{performance.last_weight} kg x {performance.last_reps}"))
    return table


def print_suggestion(suggestion: ProgressionSuggestion) -> None:
    style = _CONFIDENCE_STYLE[suggestion.confidence]
    arrow = "→" if suggestion.has_progression else "="
    console.print(
        f"[bold]{suggestion.type.capitalize()}[/bold]: "
        f"{escape(suggestion.current_value)} {arrow} [bold {style}]{escape(suggestion.suggested_value)}[/bold {style}]"
        f"  [{style}]({suggestion.confidence} confidence)[/{style}]"
    )
    console.print(f"  {escape(suggestion.reason)}")


def print_plateau(exercise_name: str, strategies: list[str]) -> None:
    if not strategies:
        print_success(f"No plateau detected for {exercise_name}.")
        return
    print_warning(f"Plateau detected for {exercise_name}. Ways to break it:")
    for i, s in enumerate(strategies, 1):
        console.print(f"  {i}. {escape(s)}")


def print_streak(streak: StreakSummary, cycle: WorkoutCycle | None) -> None:
    flame = "[bold orange1]" if streak.current_streak > 0 else "[dim]"
    console.print(f"{flame}Current streak: {streak.current_streak} day(s)[/]")
    console.print(f"[bold]Best streak:[/bold] {streak.max_streak} day(s)")
    if streak.current_streak > 1 and streak.current_streak == streak.max_streak:
        console.print("[bold yellow]New record![/bold yellow]")
    if cycle is not None:
        console.print(
            f"Cycle {cycle.index + 1}: {cycle.start:%d/%m} to {cycle.end:%d/%m}, "
            f"{len(cycle.workout_days)} workout day(s) so far"
        )


def format_progress_table(exercise_name: str, points: list[ProgressPoint]) -> Table:
    table = Table(title=f"{escape(exercise_name)} - progress")
    table.add_column("Date", style="cyan")
    table.add_column("Avg kg", justify="right")
    table.add_column("Max kg", justify="right")
    table.add_column("Avg reps", justify="right")
    table.add_column("Max reps", justify="right")
    for p in points:
        table.add_row(
            p.completed_at.strftime("%Y-%m-%d"),
            format_number(p.avg_weight),
            format_number(p.max_weight),
            format_number(p.avg_reps),
            format_number(p.max_reps),
        )
    return table


def print_goals(goals: NutritionGoals, recommended: NutritionGoals | None = None) -> None:
    """Daily targets; with ``recommended``, the profile-derived values sit alongside."""
    table = Table(title="Daily goals", show_header=recommended is not None)
    table.add_column("Goal", style="bold")
    table.add_column("Target", justify="right")
    if recommended is not None:
        table.add_column("Recommended", justify="right", style="dim")

    rows = [
        ("Calories", "calories", "kcal"),
        ("Water", "water_ml", "ml"),
        ("Protein", "protein", "g"),
        ("Carbs", "carbs", "g"),
        ("Fat", "fat", "g"),
    ]
    for label, attr, unit in rows:
        cells = [label, f"{getattr(goals, attr)} {unit}"]
        if recommended is not None:
            cells.append(f"{getattr(recommended, attr)} {unit}")
        table.add_row(*cells)
    console.print(table)


def print_body_weights(entries: list[BodyWeightEntry], trend: WeightTrend | None) -> None:
    table = Table(title="Body weight")
    table.add_column("Date")
    table.add_column("Weight", justify="right")
    for e in entries:
        table.add_row(e.log_date.isoformat(), format_kg(e.weight_kg))
    console.print(table)

    if trend is None:
        return
    if trend.direction == "stable":
        console.print("Trend: [cyan]stable[/cyan] since last reading")
    else:
        arrow = "↑" if trend.direction == "up" else "↓"
        console.print(f"Trend: {arrow} {abs(trend.diff):.1f} kg since last reading")


def print_achievements(achievements: list[Achievement], new_types: list[str]) -> None:
    table = Table(title="Achievements")
    table.add_column("", justify="center")
    table.add_column("Achievement", style="bold")
    table.add_column("Description")
    table.add_column("Unlocked")
    for a in achievements:
        mark = "[green]✓[/green]" if a.unlocked else "[dim]·[/dim]"
        when = a.unlocked_at[:10] if a.unlocked_at else ""
        title = f"{a.title} [yellow](new)[/yellow]" if a.achievement_type in new_types else a.title
        table.add_row(mark, title, a.description, when)
    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    response = console.input(f"{escape(message)} \\[y/N]: ").strip().lower()
    return response in ("y", "yes")
