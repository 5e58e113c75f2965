"""
Data models for lift-progress.

Dataclasses for logged workouts, the per-exercise sessions projected from
them, and the derived results the engine returns. Weight and reps are kept
as the loosely-typed strings the user entered; parsing happens in
core/parsing.py.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Protocol

ExerciseKind = Literal["compound", "isolation"]
Confidence = Literal["high", "medium", "low"]
SuggestionType = Literal["weight", "reps", "sets"]
WorkoutStatus = Literal["in_progress", "completed"]
Sex = Literal["male", "female"]
Goal = Literal["weight-loss", "muscle-gain", "maintenance"]


@dataclass(frozen=True)
class ExerciseSet:
    """
    One attempted set within a session.

    Incomplete sets are kept for consistency scoring but never
    contribute to averages.
    """

    weight: str = ""
    reps: str = ""
    completed: bool = False


@dataclass(frozen=True)
class ExerciseLog:
    """One exercise as entered during a workout."""

    exercise_name: str
    sets: tuple[ExerciseSet, ...] = ()

    def __post_init__(self) -> None:
        if not self.exercise_name.strip():
            raise ValueError("exercise_name must be a non-empty string")


@dataclass
class WorkoutRecord:
    """
    A workout as stored in the log.

    Only workouts with status "completed" and a completion timestamp
    produce sessions for analysis.
    """

    day_name: str
    started_at: datetime
    status: WorkoutStatus = "completed"
    completed_at: datetime | None = None
    exercises: list[ExerciseLog] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate workout data."""
        if self.status not in ("in_progress", "completed"):
            raise ValueError(f"Invalid status: {self.status}")
        if self.completed_at is not None and self.completed_at < self.started_at:
            raise ValueError("completed_at must not be before started_at")

    @property
    def is_completed(self) -> bool:
        return self.status == "completed" and self.completed_at is not None

    def sessions(self) -> list["ExerciseSession"]:
        """Project this workout into per-exercise sessions."""
        return [
            ExerciseSession(
                exercise_name=log.exercise_name,
                sets=log.sets,
                completed_at=self.completed_at,
            )
            for log in self.exercises
        ]


@dataclass(frozen=True)
class ExerciseSession:
    """One exercise's sets within one completed workout."""

    exercise_name: str
    sets: tuple[ExerciseSet, ...]
    completed_at: datetime | None


class SessionSource(Protocol):
    """Read interface over the persisted session log."""

    def fetch_sessions(
        self,
        exercise_name: str,
        since: datetime,
        *,
        newest_first: bool = True,
        limit: int | None = None,
    ) -> list[ExerciseSession]:
        """
        Return sessions of completed workouts with completed_at >= since.

        Ordered by completion time, newest first unless newest_first=False.
        With a limit, the most recent ``limit`` sessions are returned in the
        requested order.
        """
        ...


@dataclass(frozen=True)
class ExercisePerformance:
    """Aggregate over the sessions inside a lookback window."""

    exercise_name: str
    completed_sessions: int
    average_weight: float
    average_reps: float
    last_weight: str
    last_reps: str
    consistency_score: int  # 0-100


@dataclass(frozen=True)
class ProgressionSuggestion:
    """Suggested adjustment for the next session of an exercise."""

    type: SuggestionType
    current_value: str
    suggested_value: str
    reason: str
    confidence: Confidence

    @property
    def has_progression(self) -> bool:
        return self.current_value != self.suggested_value


@dataclass(frozen=True)
class PlateauState:
    is_plateau: bool
    strategies: tuple[str, ...] = ()


@dataclass(frozen=True)
class StreakSummary:
    current_streak: int
    max_streak: int


@dataclass(frozen=True)
class WorkoutCycle:
    """A rolling 7-day window anchored at the first completed workout."""

    index: int
    start: date
    end: date  # inclusive
    workout_days: tuple[date, ...] = ()


@dataclass(frozen=True)
class ProgressPoint:
    """Per-session summary used for progress charts."""

    completed_at: datetime
    avg_weight: float
    max_weight: float
    avg_reps: float
    max_reps: float


@dataclass(frozen=True)
class NutritionGoals:
    calories: int
    water_ml: int
    protein: int
    carbs: int
    fat: int


@dataclass
class UserProfile:
    """
    User profile with onboarding answers and daily goals.

    ``daily_water_goal_ml`` and ``daily_calorie_goal`` default to the values
    derived by core/nutrition.py at init time.
    """

    name: str
    age: int = 25
    height_cm: float = 170.0
    weight_kg: float = 70.0
    sex: Sex = "male"
    training_days_per_week: int = 3
    goal: Goal = "maintenance"
    daily_water_goal_ml: int = 2000
    daily_calorie_goal: int = 2000

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.age <= 0:
            raise ValueError("age must be positive")
        if self.height_cm <= 0:
            raise ValueError("height_cm must be positive")
        if self.weight_kg <= 0:
            raise ValueError("weight_kg must be positive")
        if self.sex not in ("male", "female"):
            raise ValueError(f"Invalid sex: {self.sex}")
        if not 0 <= self.training_days_per_week <= 7:
            raise ValueError("training_days_per_week must be between 0 and 7")
        if self.goal not in ("weight-loss", "muscle-gain", "maintenance"):
            raise ValueError(
                f"Invalid goal: {self.goal!r}. "
                "Must be 'weight-loss', 'muscle-gain', or 'maintenance'."
            )
        if self.daily_water_goal_ml <= 0:
            raise ValueError("daily_water_goal_ml must be positive")
        if self.daily_calorie_goal <= 0:
            raise ValueError("daily_calorie_goal must be positive")


@dataclass(frozen=True)
class Achievement:
    achievement_type: str
    title: str
    description: str
    unlocked_at: str | None = None  # ISO timestamp

    @property
    def unlocked(self) -> bool:
        return self.unlocked_at is not None


@dataclass(frozen=True)
class BodyWeightEntry:
    """One body-weight reading; at most one is kept per day."""

    log_date: date
    weight_kg: float

    def __post_init__(self) -> None:
        if self.weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {self.weight_kg}")


@dataclass(frozen=True)
class WeightTrend:
    latest: float
    previous: float
    diff: float  # latest - previous, kg
    direction: Literal["up", "down", "stable"]
