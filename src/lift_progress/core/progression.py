"""
Progression rules: turn recent performance into a next-session suggestion.

Rules are evaluated in a fixed priority order and the first match wins:

1. insufficient data       -> hold, low
2. high consistency + top of rep range -> add weight, high
3. medium consistency + reps below ceiling -> widen rep range, medium
4. low consistency         -> hold, low
5. reps far above the ceiling -> large weight jump, high
6. high consistency + few sets -> add a set, medium
7. default                 -> hold, medium

Increments are fixed per exercise kind, not proportional to the load.
"""

from .config import (
    DEFAULT_REPS_HIGH,
    DEFAULT_REPS_LOW,
    DEFAULT_RULES,
    DEFAULT_SETS_LOW,
    MIN_SESSIONS_FOR_EXTRA_SET,
    MIN_SESSIONS_FOR_SUGGESTION,
    MIN_SESSIONS_FOR_WEIGHT_BUMP,
    ProgressionRules,
)
from .models import ExerciseKind, ExercisePerformance, ProgressionSuggestion
from .parsing import format_kg, format_number, parse_int, parse_number, parse_range


def _hold(weight: float, reason: str, confidence: str) -> ProgressionSuggestion:
    return ProgressionSuggestion(
        type="weight",
        current_value=format_kg(weight),
        suggested_value=format_kg(weight),
        reason=reason,
        confidence=confidence,  # type: ignore[arg-type]
    )


def _add_weight(weight: float, increment: float, reason: str) -> ProgressionSuggestion:
    return ProgressionSuggestion(
        type="weight",
        current_value=format_kg(weight),
        suggested_value=format_kg(weight + increment),
        reason=reason,
        confidence="high",
    )


def evaluate_progression(
    performance: ExercisePerformance | None,
    current_sets: str,
    current_reps: str,
    current_weight: str,
    exercise_kind: ExerciseKind = "compound",
    rules: ProgressionRules = DEFAULT_RULES,
) -> ProgressionSuggestion:
    """
    Evaluate the progression rules against one exercise's performance.

    Args:
        performance: Aggregate from the lookback window, or None if no data
        current_sets: Prescribed set range, e.g. "3-4"
        current_reps: Prescribed rep range, e.g. "8-12"
        current_weight: Prescribed weight as displayed, e.g. "40kg"
        exercise_kind: "compound" (larger increments) or "isolation"
        rules: Thresholds and increments

    Returns:
        ProgressionSuggestion (never None; missing data degrades to "hold")
    """
    if exercise_kind not in ("compound", "isolation"):
        raise ValueError(f"Invalid exercise_kind: {exercise_kind!r}")

    if performance is None or performance.completed_sessions < MIN_SESSIONS_FOR_SUGGESTION:
        weight_text = current_weight or "0kg"
        return ProgressionSuggestion(
            type="weight",
            current_value=weight_text,
            suggested_value=weight_text,
            reason="Keep the current weight. Not enough data yet to suggest a progression.",
            confidence="low",
        )

    consistency = performance.consistency_score
    sessions = performance.completed_sessions
    weight = parse_number(performance.last_weight)
    reps = parse_int(performance.last_reps)
    reps_low, reps_high = parse_range(current_reps, DEFAULT_REPS_LOW, DEFAULT_REPS_HIGH)

    if (
        consistency >= rules.high_consistency
        and sessions >= MIN_SESSIONS_FOR_WEIGHT_BUMP
        and reps >= reps_high
    ):
        increment = rules.increment_for(exercise_kind)
        return _add_weight(
            weight,
            increment,
            f"You have been completing {reps}+ reps consistently. "
            f"Add {format_number(increment)}kg to keep progressing.",
        )

    if rules.medium_consistency <= consistency < rules.high_consistency and reps < reps_high:
        new_high = reps_high + rules.rep_range_widening
        return ProgressionSuggestion(
            type="reps",
            current_value=current_reps,
            suggested_value=f"{reps_low}-{new_high}",
            reason=(
                "Try adding 1-2 reps per set. Once you reach "
                f"{new_high} reps consistently, the weight goes up."
            ),
            confidence="medium",
        )

    if consistency < rules.medium_consistency:
        return _hold(
            weight,
            "Focus on clean execution. Complete every set with good form before progressing.",
            "low",
        )

    if reps > reps_high + rules.overshoot_reps and consistency >= rules.overshoot_consistency:
        increment = rules.increment_for(exercise_kind, large=True)
        return _add_weight(
            weight,
            increment,
            f"Reps are well above the target range. Add {format_number(increment)}kg "
            "to keep the stimulus in the hypertrophy range.",
        )

    sets_low, _ = parse_range(current_sets, DEFAULT_SETS_LOW, DEFAULT_SETS_LOW)
    if (
        consistency >= rules.volume_consistency
        and sets_low < rules.max_sets_for_extra_set
        and sessions >= MIN_SESSIONS_FOR_EXTRA_SET
    ):
        return ProgressionSuggestion(
            type="sets",
            current_value=current_sets,
            suggested_value=str(sets_low + 1),
            reason="Add one more set to raise total training volume.",
            confidence="medium",
        )

    return _hold(
        weight,
        "Keep the current weight and hold perfect form on every set.",
        "medium",
    )
