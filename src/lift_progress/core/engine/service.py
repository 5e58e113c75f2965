"""
Progression engine bound to a session source.

Each operation reads from the source and hands the rows to the pure
functions in core/performance.py, core/progression.py and core/plateau.py.
The engine holds no state between calls and never writes; read failures
from the source propagate unchanged.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog

from ..config import ProgressionRules
from ..models import (
    ExerciseKind,
    ExercisePerformance,
    ExerciseSession,
    PlateauState,
    ProgressPoint,
    ProgressionSuggestion,
    SessionSource,
)
from ..performance import aggregate_performance, progress_points
from ..plateau import is_plateau, strategies_for
from ..progression import evaluate_progression
from .config_loader import load_progression_rules

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressionEngine:
    """
    Suggests progressions and detects plateaus for logged exercises.

    Args:
        source: Session reader (e.g. io.history_store.WorkoutStore)
        rules: Thresholds; loaded from config when omitted
        clock: Returns "now"; injectable for tests
    """

    def __init__(
        self,
        source: SessionSource,
        rules: ProgressionRules | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.source = source
        self.rules = rules if rules is not None else load_progression_rules()
        self.clock = clock

    def _cutoff(self, lookback_weeks: int) -> datetime:
        if lookback_weeks <= 0:
            raise ValueError(f"lookback_weeks must be positive, got {lookback_weeks}")
        return self.clock() - timedelta(days=lookback_weeks * 7)

    def _fetch(
        self,
        exercise_name: str,
        lookback_weeks: int,
        newest_first: bool = True,
        limit: int | None = None,
    ) -> list[ExerciseSession]:
        if not exercise_name.strip():
            raise ValueError("exercise_name must be a non-empty string")
        return self.source.fetch_sessions(
            exercise_name,
            self._cutoff(lookback_weeks),
            newest_first=newest_first,
            limit=limit,
        )

    def analyze_performance(
        self,
        exercise_name: str,
        lookback_weeks: int | None = None,
    ) -> ExercisePerformance | None:
        """
        Aggregate the sessions inside the lookback window.

        Returns:
            ExercisePerformance, or None when the window holds no sessions
        """
        weeks = lookback_weeks if lookback_weeks is not None else self.rules.lookback_weeks
        sessions = self._fetch(exercise_name, weeks)
        performance = aggregate_performance(exercise_name, sessions)
        logger.debug(
            "performance_aggregated",
            exercise=exercise_name,
            lookback_weeks=weeks,
            sessions=len(sessions),
            consistency=performance.consistency_score if performance else None,
        )
        return performance

    def suggest_progression(
        self,
        exercise_name: str,
        current_sets: str,
        current_reps: str,
        current_weight: str,
        exercise_kind: ExerciseKind = "compound",
    ) -> ProgressionSuggestion:
        """Suggest the next weight, rep range or set count for an exercise."""
        performance = self.analyze_performance(exercise_name, self.rules.lookback_weeks)
        suggestion = evaluate_progression(
            performance,
            current_sets,
            current_reps,
            current_weight,
            exercise_kind,
            self.rules,
        )
        logger.debug(
            "progression_suggested",
            exercise=exercise_name,
            type=suggestion.type,
            suggested=suggestion.suggested_value,
            confidence=suggestion.confidence,
        )
        return suggestion

    def detect_plateau(self, exercise_name: str, lookback_weeks: int | None = None) -> bool:
        """
        True when recent per-session weights vary by less than 5%.

        Needs at least four qualifying sessions in the window; the trend is
        read from the most recent six, oldest first.
        """
        weeks = (
            lookback_weeks if lookback_weeks is not None else self.rules.plateau_lookback_weeks
        )
        performance = self.analyze_performance(exercise_name, weeks)
        if performance is None or performance.completed_sessions < self.rules.plateau_min_sessions:
            logger.debug("plateau_checked", exercise=exercise_name, plateau=False, reason="insufficient_data")
            return False

        trend = self._fetch(
            exercise_name,
            weeks,
            newest_first=False,
            limit=self.rules.plateau_fetch_limit,
        )
        plateaued = is_plateau(trend, self.rules)
        logger.debug("plateau_checked", exercise=exercise_name, plateau=plateaued, sessions=len(trend))
        return plateaued

    def plateau_strategies(self, exercise_name: str) -> list[str]:
        """The strategy catalog when the exercise has plateaued, else []."""
        return strategies_for(self.detect_plateau(exercise_name))

    def assess_plateau(self, exercise_name: str) -> PlateauState:
        plateaued = self.detect_plateau(exercise_name)
        return PlateauState(is_plateau=plateaued, strategies=tuple(strategies_for(plateaued)))

    def progress(self, exercise_name: str, lookback_weeks: int) -> list[ProgressPoint]:
        """Per-session progress points (oldest first) inside the window."""
        return progress_points(self._fetch(exercise_name, lookback_weeks, newest_first=False))
