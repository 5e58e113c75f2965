"""
Achievement catalog and unlock rules.

Evaluation is pure: it receives a snapshot of the user's activity and the
set of already unlocked types, and returns the types newly earned. The
store persists unlocks.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Final

from .config import (
    ACHIEVEMENT_STREAK_DAYS,
    CALORIE_TOLERANCE,
    DEFAULT_CALORIE_GOAL,
    DEFAULT_WATER_GOAL_ML,
)
from .models import Achievement

# type -> (title, description)
ACHIEVEMENT_CATALOG: Final[dict[str, tuple[str, str]]] = {
    "water_streak_7": ("Perfect Hydration", "7 consecutive days hitting the water goal"),
    "calorie_streak_7": ("Eating Discipline", "7 consecutive days within the calorie goal"),
    "workout_streak_7": ("Fitness Warrior", "7 consecutive days of training"),
    "first_workout": ("First Workout", "Completed your first workout"),
    "first_meal": ("First Meal", "Logged your first meal"),
    "water_goal_first": ("First Hydration", "Hit the water goal for the first time"),
}


@dataclass
class ActivitySnapshot:
    """What the unlock rules look at."""

    completed_workouts: int = 0
    current_streak: int = 0
    meals_logged: int = 0
    water_by_day: dict[date, int] = field(default_factory=dict)     # ml
    calories_by_day: dict[date, int] = field(default_factory=dict)  # kcal
    water_goal_ml: int = DEFAULT_WATER_GOAL_ML
    calorie_goal: int = DEFAULT_CALORIE_GOAL


def last_days(today: date, count: int = ACHIEVEMENT_STREAK_DAYS) -> list[date]:
    """The ``count`` days ending at today, newest first."""
    return [today - timedelta(days=i) for i in range(count)]


def water_streak_met(snapshot: ActivitySnapshot, today: date) -> bool:
    return all(
        snapshot.water_by_day.get(day, 0) >= snapshot.water_goal_ml
        for day in last_days(today)
    )


def calorie_streak_met(snapshot: ActivitySnapshot, today: date) -> bool:
    """Every one of the last 7 days lands within +/-10% of the calorie goal."""
    tolerance = snapshot.calorie_goal * CALORIE_TOLERANCE
    low, high = snapshot.calorie_goal - tolerance, snapshot.calorie_goal + tolerance
    return all(
        low <= snapshot.calories_by_day.get(day, 0) <= high
        for day in last_days(today)
    )


def evaluate_achievements(
    snapshot: ActivitySnapshot,
    already_unlocked: set[str] | frozenset[str],
    today: date,
) -> list[str]:
    """
    Return achievement types earned by the snapshot and not yet unlocked.

    Args:
        snapshot: Activity totals
        already_unlocked: Types unlocked earlier; never returned again
        today: App day ending the 7-day windows

    Returns:
        Newly earned types, in catalog order
    """
    earned = {
        "water_streak_7": water_streak_met(snapshot, today),
        "calorie_streak_7": calorie_streak_met(snapshot, today),
        "workout_streak_7": snapshot.current_streak >= ACHIEVEMENT_STREAK_DAYS,
        "first_workout": snapshot.completed_workouts >= 1,
        "first_meal": snapshot.meals_logged >= 1,
        "water_goal_first": any(
            ml >= snapshot.water_goal_ml for ml in snapshot.water_by_day.values()
        ),
    }
    return [t for t in ACHIEVEMENT_CATALOG if earned[t] and t not in already_unlocked]


def achievement_status(unlocked: dict[str, str]) -> list[Achievement]:
    """
    Every catalog entry with its unlock timestamp (None when still locked).

    Args:
        unlocked: type -> ISO timestamp
    """
    return [
        Achievement(
            achievement_type=t,
            title=title,
            description=description,
            unlocked_at=unlocked.get(t),
        )
        for t, (title, description) in ACHIEVEMENT_CATALOG.items()
    ]
