"""
JSON serialization for workout data models.

Handles conversion between dataclasses and JSON-compatible dicts, plus
parsing of the compact set notation used on the command line.
"""

import json
import re
from datetime import date, datetime, timezone
from typing import Any

from ..core.models import (
    BodyWeightEntry,
    ExerciseLog,
    ExerciseSet,
    UserProfile,
    WorkoutRecord,
)
from ..core.parsing import format_number


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> date:
    """
    Validate an ISO date string.

    Args:
        date_str: Date string to validate

    Returns:
        Parsed date

    Raises:
        ValidationError: If date format is invalid
    """
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e


def validate_log_date(date_str: str | None, today: date) -> date:
    """
    Resolve the day a record is logged for.

    Args:
        date_str: Optional ISO date; None means today
        today: Current app day

    Raises:
        ValidationError: If the date is malformed or after today
    """
    if not date_str:
        return today
    day = validate_date(date_str)
    if day > today:
        raise ValidationError(f"Date {date_str} is in the future (today is {today.isoformat()})")
    return day


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        ValidationError: If the text is not a timestamp
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid timestamp: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _loose_text(value: Any) -> str:
    """Store weight/reps as text, whatever type the record used."""
    if value is None:
        return ""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid set value: {value!r}")
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def set_to_dict(exercise_set: ExerciseSet) -> dict[str, Any]:
    return {
        "weight": exercise_set.weight,
        "reps": exercise_set.reps,
        "completed": exercise_set.completed,
    }


def dict_to_set(data: dict[str, Any]) -> ExerciseSet:
    """
    Convert dict to ExerciseSet.

    Weight and reps are kept as text; numbers are accepted and converted.

    Raises:
        ValidationError: If the record is not a mapping or "completed" is not a bool
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Set must be an object, got {type(data).__name__}")
    completed = data.get("completed", False)
    if not isinstance(completed, bool):
        raise ValidationError(f"Set 'completed' must be true/false, got {completed!r}")
    return ExerciseSet(
        weight=_loose_text(data.get("weight")),
        reps=_loose_text(data.get("reps")),
        completed=completed,
    )


def exercise_log_to_dict(log: ExerciseLog) -> dict[str, Any]:
    return {
        "exercise_name": log.exercise_name,
        "sets": [set_to_dict(s) for s in log.sets],
    }


def dict_to_exercise_log(data: dict[str, Any]) -> ExerciseLog:
    name = data.get("exercise_name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid exercise_name: {name!r}")
    sets = data.get("sets") or []
    if not isinstance(sets, list):
        raise ValidationError(f"'sets' must be a list for {name!r}")
    return ExerciseLog(exercise_name=name, sets=tuple(dict_to_set(s) for s in sets))


def workout_to_dict(workout: WorkoutRecord) -> dict[str, Any]:
    """
    Convert WorkoutRecord to JSON-compatible dict.

    Args:
        workout: WorkoutRecord to convert

    Returns:
        Dict representation
    """
    return {
        "day_name": workout.day_name,
        "status": workout.status,
        "started_at": format_timestamp(workout.started_at),
        "completed_at": (
            format_timestamp(workout.completed_at) if workout.completed_at is not None else None
        ),
        "exercises": [exercise_log_to_dict(e) for e in workout.exercises],
    }


def dict_to_workout(data: dict[str, Any]) -> WorkoutRecord:
    """
    Convert dict to WorkoutRecord.

    Raises:
        ValidationError: If data is invalid
    """
    status = data.get("status", "completed")
    if status not in ("in_progress", "completed"):
        raise ValidationError(
            f"Invalid status: {status}. Must be one of ('in_progress', 'completed')"
        )
    if "started_at" not in data:
        raise ValidationError("Workout is missing 'started_at'")

    completed_raw = data.get("completed_at")
    try:
        return WorkoutRecord(
            day_name=str(data.get("day_name", "")),
            started_at=parse_timestamp(data["started_at"]),
            status=status,
            completed_at=parse_timestamp(completed_raw) if completed_raw else None,
            exercises=[dict_to_exercise_log(e) for e in data.get("exercises") or []],
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def workout_to_json_line(workout: WorkoutRecord) -> str:
    return json.dumps(workout_to_dict(workout), ensure_ascii=False, separators=(",", ":"))


def json_line_to_workout(line: str) -> WorkoutRecord:
    """
    Parse one JSONL line into a WorkoutRecord.

    Raises:
        ValidationError: If line is not valid JSON or data is invalid
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Workout record must be a JSON object")
    return dict_to_workout(data)


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    return {
        "name": profile.name,
        "age": profile.age,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "sex": profile.sex,
        "training_days_per_week": profile.training_days_per_week,
        "goal": profile.goal,
        "daily_water_goal_ml": profile.daily_water_goal_ml,
        "daily_calorie_goal": profile.daily_calorie_goal,
    }


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return UserProfile(
            name=str(data.get("name", "")),
            age=int(data.get("age", 25)),
            height_cm=float(data.get("height_cm", 170.0)),
            weight_kg=float(data.get("weight_kg", 70.0)),
            sex=data.get("sex", "male"),
            training_days_per_week=int(data.get("training_days_per_week", 3)),
            goal=data.get("goal", "maintenance"),
            daily_water_goal_ml=int(data.get("daily_water_goal_ml", 2000)),
            daily_calorie_goal=int(data.get("daily_calorie_goal", 2000)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid profile: {e}") from e


def body_weight_to_dict(entry: BodyWeightEntry) -> dict[str, Any]:
    return {"date": entry.log_date.isoformat(), "weight_kg": entry.weight_kg}


def dict_to_body_weight(data: dict[str, Any]) -> BodyWeightEntry:
    """
    Convert dict to BodyWeightEntry.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return BodyWeightEntry(
            log_date=validate_date(data["date"]),
            weight_kg=float(data["weight_kg"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid body-weight record: {e}") from e


_SET_WEIGHTED = re.compile(
    r"^(?P<weight>\d+(?:\.\d+)?)\s*(?:kg)?\s*[xX×]\s*(?P<reps>\d+)\s*(?P<skip>\?)?$",
    re.IGNORECASE,
)
_SET_BARE = re.compile(r"^(?P<reps>\d+)\s*(?P<skip>\?)?$")


def parse_sets_string(sets_str: str) -> list[ExerciseSet]:
    """
    Parse a compact sets string.

    Format: comma-separated sets, each either ``WEIGHTxREPS`` or bare
    ``REPS`` (no load). A trailing ``?`` marks a set that was not completed.

        "40x12, 40x10, 40x8?"  -> three sets, the last one skipped
        "42.5kg x 8"           -> one set
        "15, 15, 12"           -> bodyweight sets

    Args:
        sets_str: Sets string

    Returns:
        List of ExerciseSet

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    sets: list[ExerciseSet] = []
    for part in sets_str.split(","):
        part = part.strip()
        if not part:
            continue
        m = _SET_WEIGHTED.match(part) or _SET_BARE.match(part)
        if not m:
            raise ValidationError(
                f"Invalid set format: {part!r}. Expected WEIGHTxREPS or REPS, e.g. 40x12"
            )
        groups = m.groupdict()
        sets.append(
            ExerciseSet(
                weight=groups.get("weight") or "",
                reps=groups["reps"],
                completed=groups["skip"] is None,
            )
        )

    if not sets:
        raise ValidationError("No valid sets found in sets string")
    return sets


def parse_exercise_entry(entry: str) -> ExerciseLog:
    """
    Parse ``"Exercise Name=SETS"`` into an ExerciseLog.

    Example:
        "Bench Press=40x12,40x10,40x8?"

    Raises:
        ValidationError: If the name or sets are missing or invalid
    """
    name, sep, sets_str = entry.partition("=")
    if not sep or not name.strip():
        raise ValidationError(
            f"Invalid exercise entry: {entry!r}. Expected 'Exercise Name=40x12,40x10'"
        )
    return ExerciseLog(exercise_name=name.strip(), sets=tuple(parse_sets_string(sets_str)))
