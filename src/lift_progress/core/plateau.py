"""
Plateau detection and the plateau-break strategy catalog.

A plateau is a run of recent sessions whose mean working weight barely
moves: the largest deviation of the last four per-session means from
their average stays under 5% of that average.
"""

from typing import Final, Sequence

from .config import DEFAULT_RULES, ProgressionRules
from .models import ExerciseSession
from .performance import session_mean_weight

PLATEAU_STRATEGIES: Final[tuple[str, ...]] = (
    "Deload: drop the weight by 20% for one week to recover.",
    "Variation: swap in a variation of the exercise (e.g. a different incline).",
    "Time under tension: slow each rep down to a 3-1-3 second tempo.",
    "Drop sets: finish the last set with a descending drop set.",
    "Pause reps: hold a 2 second pause at the hardest point of the rep.",
    "Undulation: alternate high-volume weeks with high-intensity weeks.",
)


def is_plateau(
    sessions: Sequence[ExerciseSession],
    rules: ProgressionRules = DEFAULT_RULES,
) -> bool:
    """
    Check the weight trend of sessions ordered oldest first.

    plateau = max|w_i - mean(w)| < variation * mean(w), over the last
    ``rules.plateau_trend_sessions`` per-session means. The comparison is
    strict, so an all-zero history (mean 0) is never a plateau.

    Args:
        sessions: Qualifying sessions, oldest first
        rules: Thresholds

    Returns:
        True if the recent weights are flat
    """
    if len(sessions) < rules.plateau_trend_sessions:
        return False

    weights = [session_mean_weight(s) for s in sessions]
    recent = weights[-rules.plateau_trend_sessions:]
    average = sum(recent) / len(recent)
    max_deviation = max(abs(w - average) for w in recent)

    return max_deviation < average * rules.plateau_max_variation


def strategies_for(plateaued: bool) -> list[str]:
    """Return the strategy catalog if plateaued, else an empty list."""
    return list(PLATEAU_STRATEGIES) if plateaued else []
