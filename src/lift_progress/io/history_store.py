"""
JSONL-based storage for workouts, water/meal intake, body weight and the user profile.

Handles reading, writing, and querying the log files. WorkoutStore also
serves as the session source for the progression engine.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any

import structlog

from ..core.bodyweight import upsert_entry
from ..core.models import BodyWeightEntry, ExerciseSession, UserProfile, WorkoutRecord
from ..core.nutrition import validate_daily_goals
from ..core.parsing import exercise_key
from .serializers import (
    ValidationError,
    body_weight_to_dict,
    dict_to_body_weight,
    dict_to_user_profile,
    json_line_to_workout,
    user_profile_to_dict,
    validate_date,
    workout_to_json_line,
)

logger = structlog.get_logger(__name__)


class WorkoutStore:
    """
    Manages the workout log stored in JSONL format.

    The workout file contains one JSON object per line, one per workout.
    Sibling files in the same directory:
    - profile.json: user profile, daily goals and unlocked achievements
    - intake.jsonl: water and meal records, one per line
    - bodyweight.jsonl: body-weight readings, one per day
    """

    def __init__(self, history_path: str | Path, name_matching: str = "exact"):
        """
        Initialize the store.

        Args:
            history_path: Path to the workouts JSONL file
            name_matching: "exact" or "normalized" exercise-name matching
        """
        self.history_path = Path(history_path)
        self.profile_path = self.history_path.parent / "profile.json"
        self.intake_path = self.history_path.parent / "intake.jsonl"
        self.bodyweight_path = self.history_path.parent / "bodyweight.jsonl"
        self.name_matching = name_matching

    def exists(self) -> bool:
        """Check if the workout file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Create empty log files if they don't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.history_path.exists():
            self.history_path.touch()
        if not self.intake_path.exists():
            self.intake_path.touch()

    def _require_history(self) -> None:
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def load_workouts(self) -> list[WorkoutRecord]:
        """
        Load all workouts from the history file.

        Returns:
            List of WorkoutRecord, sorted by start time

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        self._require_history()

        workouts: list[WorkoutRecord] = []
        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    workouts.append(json_line_to_workout(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        workouts.sort(key=lambda w: w.started_at)
        return workouts

    def _write_workouts(self, workouts: list[WorkoutRecord]) -> None:
        with open(self.history_path, "w", encoding="utf-8") as f:
            for workout in workouts:
                f.write(workout_to_json_line(workout) + "\n")

    def append_workout(self, workout: WorkoutRecord) -> None:
        """
        Add a workout, keeping the file in chronological order.

        Args:
            workout: Workout to store
        """
        workouts = self.load_workouts()
        insert_idx = len(workouts)
        for i, existing in enumerate(workouts):
            if workout.started_at < existing.started_at:
                insert_idx = i
                break
        workouts.insert(insert_idx, workout)
        self._write_workouts(workouts)
        logger.debug(
            "workout_appended",
            path=str(self.history_path),
            day_name=workout.day_name,
            exercises=len(workout.exercises),
        )

    def delete_workout_at(self, index: int) -> WorkoutRecord:
        """
        Delete the workout at the given 0-based index in sorted history.

        Returns:
            The deleted workout

        Raises:
            IndexError: If index is out of range
        """
        workouts = self.load_workouts()
        if index < 0 or index >= len(workouts):
            raise IndexError(f"Workout index {index} out of range (0-{len(workouts) - 1})")
        removed = workouts.pop(index)
        self._write_workouts(workouts)
        return removed

    def fetch_sessions(
        self,
        exercise_name: str,
        since: datetime,
        *,
        newest_first: bool = True,
        limit: int | None = None,
    ) -> list[ExerciseSession]:
        """
        Sessions of ``exercise_name`` from completed workouts since a cutoff.

        Args:
            exercise_name: Exercise to match (per name_matching)
            since: Inclusive lower bound on workout completion time
            newest_first: Result order
            limit: Keep only the most recent ``limit`` sessions

        Returns:
            List of ExerciseSession
        """
        key = exercise_key(exercise_name, self.name_matching)
        sessions = [
            session
            for workout in self.load_workouts()
            if workout.is_completed and workout.completed_at >= since  # type: ignore[operator]
            for session in workout.sessions()
            if exercise_key(session.exercise_name, self.name_matching) == key
        ]
        sessions.sort(key=lambda s: s.completed_at, reverse=True)  # type: ignore[arg-type, return-value]
        if limit is not None:
            sessions = sessions[:limit]
        if not newest_first:
            sessions.reverse()
        return sessions

    def exercise_names(self) -> list[str]:
        """Distinct exercise names in completed workouts, alphabetically."""
        return sorted(
            {
                log.exercise_name
                for w in self.load_workouts()
                if w.is_completed
                for log in w.exercises
            }
        )

    def completed_workout_times(self) -> list[datetime]:
        """Completion timestamps of all completed workouts."""
        return [w.completed_at for w in self.load_workouts() if w.is_completed]  # type: ignore[misc]

    # ------------------------------------------------------------------
    # Profile and achievements
    # ------------------------------------------------------------------

    def _read_profile_data(self) -> dict[str, Any] | None:
        if not self.profile_path.exists():
            return None
        try:
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {self.profile_path}: {e}") from e
        return data if isinstance(data, dict) else None

    def load_profile(self) -> UserProfile | None:
        """
        Load user profile from profile.json.

        Returns:
            UserProfile if the file exists, None otherwise

        Raises:
            ValidationError: If the file exists but is invalid
        """
        data = self._read_profile_data()
        if data is None:
            return None
        return dict_to_user_profile(data)

    def save_profile(self, profile: UserProfile) -> None:
        """Save the profile, keeping previously unlocked achievements."""
        self.profile_path.parent.mkdir(parents=True, exist_ok=True)
        existing = self._read_profile_data() or {}
        data = user_profile_to_dict(profile)
        data["achievements"] = existing.get("achievements", {})
        self._write_profile_data(data)

    def load_achievements(self) -> dict[str, str]:
        """Unlocked achievement types mapped to their ISO unlock timestamps."""
        data = self._read_profile_data() or {}
        achievements = data.get("achievements", {})
        return dict(achievements) if isinstance(achievements, dict) else {}

    def unlock_achievements(self, types: list[str], unlocked_at: datetime) -> dict[str, str]:
        """
        Record newly unlocked achievements; already unlocked ones keep their time.

        Raises:
            FileNotFoundError: If the profile does not exist
        """
        data = self._read_profile_data()
        if data is None:
            raise FileNotFoundError(
                f"Profile not found: {self.profile_path}. Run 'init' first."
            )
        achievements = data.get("achievements") or {}
        for t in types:
            achievements.setdefault(t, unlocked_at.isoformat())
        data["achievements"] = achievements
        self._write_profile_data(data)
        return dict(achievements)

    def _write_profile_data(self, data: dict[str, Any]) -> None:
        with open(self.profile_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def update_daily_goals(self, calories: int, water_ml: int) -> UserProfile:
        """
        Overwrite the daily calorie and water goals in the profile.

        Args:
            calories: Daily calorie goal (1000-5000 kcal)
            water_ml: Daily water goal (1000-10000 ml)

        Returns:
            The updated profile

        Raises:
            ValidationError: If a goal is out of range
            FileNotFoundError: If the profile does not exist
        """
        try:
            validate_daily_goals(calories, water_ml)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        data = self._read_profile_data()
        if data is None:
            raise FileNotFoundError(
                f"Profile not found: {self.profile_path}. Run 'init' first."
            )
        profile = dict_to_user_profile(data)
        profile.daily_calorie_goal = calories
        profile.daily_water_goal_ml = water_ml
        data.update(user_profile_to_dict(profile))
        self._write_profile_data(data)
        logger.debug("daily_goals_updated", calories=calories, water_ml=water_ml)
        return profile

    # ------------------------------------------------------------------
    # Body weight
    # ------------------------------------------------------------------

    def load_body_weights(self) -> list[BodyWeightEntry]:
        """
        Load body-weight readings, oldest first.

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.bodyweight_path.exists():
            return []
        entries: list[BodyWeightEntry] = []
        with open(self.bodyweight_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    if not isinstance(data, dict):
                        raise ValidationError("Body-weight record must be a JSON object")
                    entries.append(dict_to_body_weight(data))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.bodyweight_path}: {e}"
                    ) from e
        entries.sort(key=lambda e: e.log_date)
        return entries

    def log_body_weight(self, day: date, weight_kg: float) -> BodyWeightEntry:
        """
        Record the body weight for a day, replacing any earlier reading that day.

        When the reading is the most recent one, the profile weight follows it.

        Raises:
            ValidationError: If weight is not positive
        """
        try:
            entry = BodyWeightEntry(log_date=day, weight_kg=weight_kg)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        entries = upsert_entry(self.load_body_weights(), entry)
        self.bodyweight_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.bodyweight_path, "w", encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(body_weight_to_dict(e)) + "\n")

        data = self._read_profile_data()
        if data is not None and entries[-1] == entry:
            data["weight_kg"] = weight_kg
            self._write_profile_data(data)

        logger.debug("body_weight_logged", date=day.isoformat(), weight_kg=weight_kg)
        return entry

    # ------------------------------------------------------------------
    # Water and meals
    # ------------------------------------------------------------------

    def _append_intake(self, record: dict[str, Any]) -> None:
        self.intake_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.intake_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    def append_water(self, day: date, amount_ml: int) -> None:
        if amount_ml <= 0:
            raise ValidationError(f"Water amount must be positive, got {amount_ml}")
        self._append_intake({"type": "water", "date": day.isoformat(), "amount_ml": amount_ml})

    def append_meal(self, day: date, calories: int, description: str = "") -> None:
        if calories < 0:
            raise ValidationError(f"Calories must be non-negative, got {calories}")
        self._append_intake(
            {"type": "meal", "date": day.isoformat(), "calories": calories, "description": description}
        )

    def load_intake(self) -> list[dict[str, Any]]:
        """
        Load water and meal records.

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.intake_path.exists():
            return []
        records: list[dict[str, Any]] = []
        with open(self.intake_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    if data.get("type") not in ("water", "meal"):
                        raise ValidationError(f"Unknown record type: {data.get('type')!r}")
                    validate_date(data.get("date", ""))
                except (json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.intake_path}: {e}"
                    ) from e
                records.append(data)
        return records

    def daily_water_totals(self) -> dict[date, int]:
        totals: dict[date, int] = {}
        for r in self.load_intake():
            if r["type"] == "water":
                day = validate_date(r["date"])
                totals[day] = totals.get(day, 0) + int(r.get("amount_ml", 0))
        return totals

    def daily_calorie_totals(self) -> dict[date, int]:
        totals: dict[date, int] = {}
        for r in self.load_intake():
            if r["type"] == "meal":
                day = validate_date(r["date"])
                totals[day] = totals.get(day, 0) + int(r.get("calories", 0))
        return totals

    def meal_count(self) -> int:
        return sum(1 for r in self.load_intake() if r["type"] == "meal")


def get_default_history_path() -> Path:
    """
    Get the default workout log path.

    Returns:
        ~/.lift-progress/workouts.jsonl
    """
    return Path.home() / ".lift-progress" / "workouts.jsonl"
