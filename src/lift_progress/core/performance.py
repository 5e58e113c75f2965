"""
Pure performance aggregation functions.

Turn a list of sessions for one exercise into the statistics the
progression rules and the plateau detector read. All functions are pure
and typed for testability.
"""

import math
from typing import Sequence

from .models import ExercisePerformance, ExerciseSession, ExerciseSet, ProgressPoint
from .parsing import parse_int, parse_number


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def completed_sets(session: ExerciseSession) -> list[ExerciseSet]:
    """Return the sets of a session that were marked done."""
    return [s for s in session.sets if s.completed]


def is_fully_completed(session: ExerciseSession) -> bool:
    """
    True if the session has at least one set and every set was completed.

    A session with no sets never counts as fully completed.
    """
    return bool(session.sets) and all(s.completed for s in session.sets)


def last_completed_set(session: ExerciseSession) -> ExerciseSet | None:
    """Scan from the end of the set list for the most recent completed set."""
    for s in reversed(session.sets):
        if s.completed:
            return s
    return None


def session_mean_weight(session: ExerciseSession) -> float:
    """
    Mean weight across the completed sets of one session.

    Returns:
        Mean parsed weight, or 0.0 if no set was completed
    """
    done = completed_sets(session)
    if not done:
        return 0.0
    return sum(parse_number(s.weight) for s in done) / len(done)


def consistency_score(sessions: Sequence[ExerciseSession]) -> int:
    """
    Percentage of sessions in which every set was completed.

    score = round(100 * fully_completed / sessions), 0 for no sessions.
    """
    if not sessions:
        return 0
    full = sum(1 for s in sessions if is_fully_completed(s))
    return int(_round_half_up(100 * full / len(sessions)))


def aggregate_performance(
    exercise_name: str,
    sessions: Sequence[ExerciseSession],
) -> ExercisePerformance | None:
    """
    Aggregate sessions (newest first) into an ExercisePerformance.

    Averages run over completed sets of all sessions. The "last" values are
    the raw strings of the newest session's last completed set, "0" if that
    session has none.

    Args:
        exercise_name: Exercise the sessions belong to
        sessions: Sessions inside the lookback window, newest first

    Returns:
        ExercisePerformance, or None if there are no sessions
    """
    if not sessions:
        return None

    total_weight = 0.0
    total_reps = 0
    total_completed = 0

    for session in sessions:
        for s in completed_sets(session):
            total_weight += parse_number(s.weight)
            total_reps += parse_int(s.reps)
            total_completed += 1

    last = last_completed_set(sessions[0])

    return ExercisePerformance(
        exercise_name=exercise_name,
        completed_sessions=len(sessions),
        average_weight=total_weight / total_completed if total_completed else 0.0,
        average_reps=total_reps / total_completed if total_completed else 0.0,
        last_weight=(last.weight if last is not None else "") or "0",
        last_reps=(last.reps if last is not None else "") or "0",
        consistency_score=consistency_score(sessions),
    )


def progress_points(sessions: Sequence[ExerciseSession]) -> list[ProgressPoint]:
    """
    Per-session chart values, oldest first.

    Zero and unparseable values are left out of the averages and maxima;
    values are rounded to one decimal. Sessions without a completion
    timestamp are skipped.
    """
    points: list[ProgressPoint] = []
    for session in sorted(
        (s for s in sessions if s.completed_at is not None),
        key=lambda s: s.completed_at,  # type: ignore[arg-type, return-value]
    ):
        done = completed_sets(session)
        weights = [w for w in (parse_number(s.weight) for s in done) if w > 0]
        reps = [r for r in (parse_int(s.reps) for s in done) if r > 0]
        points.append(
            ProgressPoint(
                completed_at=session.completed_at,  # type: ignore[arg-type]
                avg_weight=_round_half_up(sum(weights) / len(weights), 1) if weights else 0.0,
                max_weight=_round_half_up(max(weights), 1) if weights else 0.0,
                avg_reps=_round_half_up(sum(reps) / len(reps), 1) if reps else 0.0,
                max_reps=float(max(reps)) if reps else 0.0,
            )
        )
    return points


def progress_change(points: Sequence[ProgressPoint]) -> tuple[int, int]:
    """
    Percent change of average weight and reps from the first to the last point.

    Returns:
        (weight_pct, reps_pct); a component is 0 when its first value is 0
    """
    if not points:
        return 0, 0
    first, last = points[0], points[-1]

    def _pct(start: float, end: float) -> int:
        if start <= 0:
            return 0
        return int(_round_half_up((end - start) / start * 100))

    return _pct(first.avg_weight, last.avg_weight), _pct(first.avg_reps, last.avg_reps)
