"""
Configuration constants for the progression engine.

All adjustable parameters are centralized here for easy tuning.
User overrides are merged on top by core/engine/config_loader.py.
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# LOOKBACK WINDOWS
# =============================================================================

DEFAULT_LOOKBACK_WEEKS: Final[int] = 2  # Window for progression analysis
PLATEAU_LOOKBACK_WEEKS: Final[int] = 4  # Window for plateau detection

# =============================================================================
# REP / SET RANGE DEFAULTS
# =============================================================================

DEFAULT_REPS_LOW: Final[int] = 8
DEFAULT_REPS_HIGH: Final[int] = 12
DEFAULT_SETS_LOW: Final[int] = 3

# =============================================================================
# PROGRESSION RULES
# =============================================================================

MIN_SESSIONS_FOR_SUGGESTION: Final[int] = 2
MIN_SESSIONS_FOR_WEIGHT_BUMP: Final[int] = 3
MIN_SESSIONS_FOR_EXTRA_SET: Final[int] = 4

HIGH_CONSISTENCY: Final[int] = 80       # Rule: add weight
MEDIUM_CONSISTENCY: Final[int] = 60     # Rule: add reps (60 <= score < 80)
OVERSHOOT_CONSISTENCY: Final[int] = 70  # Rule: large weight jump
VOLUME_CONSISTENCY: Final[int] = 75     # Rule: add a set

OVERSHOOT_REPS: Final[int] = 4          # Reps above range ceiling for a large jump
REP_RANGE_WIDENING: Final[int] = 2      # Added to the rep ceiling
MAX_SETS_FOR_EXTRA_SET: Final[int] = 5  # Only add a set below this count

# Fixed increments in kg; not scaled to the lifter's current load
WEIGHT_INCREMENTS_KG: Final[dict[str, float]] = {
    "compound": 2.5,
    "isolation": 1.25,
}
LARGE_WEIGHT_INCREMENTS_KG: Final[dict[str, float]] = {
    "compound": 5.0,
    "isolation": 2.5,
}

# =============================================================================
# PLATEAU DETECTION
# =============================================================================

PLATEAU_MIN_SESSIONS: Final[int] = 4      # Sessions needed before checking
PLATEAU_FETCH_LIMIT: Final[int] = 6       # Most recent sessions re-read for the trend
PLATEAU_TREND_SESSIONS: Final[int] = 4    # Per-session means compared
PLATEAU_MAX_VARIATION: Final[float] = 0.05  # Max deviation as a fraction of the mean

# =============================================================================
# DAY BOUNDARY
# =============================================================================

APP_TIMEZONE: Final[str] = "America/Sao_Paulo"
DAY_ROLLOVER_HOUR: Final[int] = 4  # Local hour at which the app day changes
CYCLE_LENGTH_DAYS: Final[int] = 7

# =============================================================================
# ACHIEVEMENTS
# =============================================================================

DEFAULT_WATER_GOAL_ML: Final[int] = 2000
DEFAULT_CALORIE_GOAL: Final[int] = 2000
CALORIE_TOLERANCE: Final[float] = 0.10  # +/- fraction of the calorie goal
ACHIEVEMENT_STREAK_DAYS: Final[int] = 7

# =============================================================================
# DAILY GOALS AND BODY WEIGHT
# =============================================================================

MIN_CALORIE_GOAL: Final[int] = 1000
MAX_CALORIE_GOAL: Final[int] = 5000
MIN_WATER_GOAL_ML: Final[int] = 1000
MAX_WATER_GOAL_ML: Final[int] = 10000
WEIGHT_STABLE_THRESHOLD_KG: Final[float] = 0.5  # Smaller changes read as "stable"

# =============================================================================
# NUTRITION
# =============================================================================

WATER_ML_PER_KG: Final[int] = 35
WATER_ML_PER_TRAINING_DAY: Final[int] = 500
WATER_WEIGHT_LOSS_FACTOR: Final[float] = 1.2
WATER_ROUNDING_ML: Final[int] = 250

CALORIE_DEFICIT: Final[int] = 500  # weight-loss
CALORIE_SURPLUS: Final[int] = 300  # muscle-gain
MIN_CALORIES: Final[dict[str, int]] = {"male": 1500, "female": 1200}

# (protein, carbs, fat) as fractions of daily calories
MACRO_SPLITS: Final[dict[str, tuple[float, float, float]]] = {
    "weight-loss": (0.40, 0.30, 0.30),
    "muscle-gain": (0.35, 0.45, 0.20),
    "maintenance": (0.30, 0.40, 0.30),
}


@dataclass(frozen=True)
class ProgressionRules:
    """Tunable thresholds for the progression engine."""

    lookback_weeks: int = DEFAULT_LOOKBACK_WEEKS
    plateau_lookback_weeks: int = PLATEAU_LOOKBACK_WEEKS
    high_consistency: int = HIGH_CONSISTENCY
    medium_consistency: int = MEDIUM_CONSISTENCY
    overshoot_consistency: int = OVERSHOOT_CONSISTENCY
    volume_consistency: int = VOLUME_CONSISTENCY
    overshoot_reps: int = OVERSHOOT_REPS
    rep_range_widening: int = REP_RANGE_WIDENING
    max_sets_for_extra_set: int = MAX_SETS_FOR_EXTRA_SET
    weight_increment_compound: float = WEIGHT_INCREMENTS_KG["compound"]
    weight_increment_isolation: float = WEIGHT_INCREMENTS_KG["isolation"]
    large_increment_compound: float = LARGE_WEIGHT_INCREMENTS_KG["compound"]
    large_increment_isolation: float = LARGE_WEIGHT_INCREMENTS_KG["isolation"]
    plateau_min_sessions: int = PLATEAU_MIN_SESSIONS
    plateau_fetch_limit: int = PLATEAU_FETCH_LIMIT
    plateau_trend_sessions: int = PLATEAU_TREND_SESSIONS
    plateau_max_variation: float = PLATEAU_MAX_VARIATION
    name_matching: str = "exact"  # "exact" | "normalized"

    def increment_for(self, exercise_kind: str, large: bool = False) -> float:
        """Return the fixed weight increment (kg) for an exercise kind."""
        if large:
            return (
                self.large_increment_compound
                if exercise_kind == "compound"
                else self.large_increment_isolation
            )
        return (
            self.weight_increment_compound
            if exercise_kind == "compound"
            else self.weight_increment_isolation
        )


DEFAULT_RULES: Final[ProgressionRules] = ProgressionRules()
