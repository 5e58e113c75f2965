"""
Formula-focused unit tests for the pure core functions.

Each test checks one rule or formula with hand-computed values:
- parsing of loosely-typed set values and ranges
- performance aggregation and consistency score
- the seven progression rules in priority order
- plateau detection over per-session mean weights
- streaks, rolling cycles and the 04:00 day boundary
- achievement unlock rules
- nutrition goals (Mifflin-St Jeor, water, macros) and daily goal ranges
- body-weight trend
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from lift_progress.core.achievements import (
    ACHIEVEMENT_CATALOG,
    ActivitySnapshot,
    achievement_status,
    evaluate_achievements,
)
from lift_progress.core.bodyweight import upsert_entry, weight_trend
from lift_progress.core.config import DEFAULT_RULES, ProgressionRules
from lift_progress.core.models import BodyWeightEntry, ExercisePerformance, ExerciseSession, ExerciseSet
from lift_progress.core.nutrition import (
    activity_multiplier,
    bmr,
    calculate_nutrition_goals,
    goals_from_quiz,
    training_days_from_answer,
    validate_daily_goals,
    water_intake_ml,
)
from lift_progress.core.parsing import (
    exercise_key,
    format_kg,
    parse_int,
    parse_number,
    parse_range,
)
from lift_progress.core.performance import (
    aggregate_performance,
    consistency_score,
    progress_change,
    progress_points,
    session_mean_weight,
)
from lift_progress.core.plateau import PLATEAU_STRATEGIES, is_plateau, strategies_for
from lift_progress.core.progression import evaluate_progression
from lift_progress.core.streaks import (
    compute_streak,
    current_cycle,
    cycle_index,
    effective_date,
    group_into_cycles,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

T0 = datetime(2026, 10, 1, 18, 0, tzinfo=timezone.utc)


def _set(weight: str, reps: str, completed: bool = True) -> ExerciseSet:
    return ExerciseSet(weight=weight, reps=reps, completed=completed)


def _session(*sets: ExerciseSet, day: int = 0, name: str = "Bench Press") -> ExerciseSession:
    return ExerciseSession(exercise_name=name, sets=tuple(sets), completed_at=T0 + timedelta(days=day))


def _flat(weight: float, day: int = 0) -> ExerciseSession:
    """Session with three completed sets at one weight."""
    w = str(weight)
    return _session(_set(w, "10"), _set(w, "10"), _set(w, "10"), day=day)


def _perf(sessions: int, consistency: int, weight: str = "40", reps: str = "10") -> ExercisePerformance:
    return ExercisePerformance(
        exercise_name="Bench Press",
        completed_sessions=sessions,
        average_weight=float(weight),
        average_reps=float(reps),
        last_weight=weight,
        last_reps=reps,
        consistency_score=consistency,
    )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParsing:

    @pytest.mark.parametrize("text,expected", [
        ("42.5", 42.5),
        ("40kg", 40.0),
        ("  20 ", 20.0),
        ("", 0.0),
        ("kg", 0.0),
        ("abc", 0.0),
        (None, 0.0),
    ])
    def test_parse_number_reads_leading_prefix(self, text, expected):
        assert parse_number(text) == expected

    def test_parse_int_truncates(self):
        assert parse_int("12.7") == 12
        assert parse_int("10 reps") == 10
        assert parse_int("") == 0

    def test_parse_range_defaults_for_missing_bounds(self):
        assert parse_range("8-12", 8, 12) == (8, 12)
        assert parse_range("6-", 8, 12) == (6, 12)
        assert parse_range("", 8, 12) == (8, 12)
        assert parse_range("0-10", 8, 12) == (8, 10)

    def test_format_kg_drops_trailing_zero(self):
        assert format_kg(42.0) == "42kg"
        assert format_kg(42.5) == "42.5kg"

    def test_exercise_key_modes(self):
        assert exercise_key("Supino Reto") == "Supino Reto"
        assert exercise_key("Súpino  RETO", "normalized") == "supino reto"
        with pytest.raises(ValueError):
            exercise_key("x", "fuzzy")


# ---------------------------------------------------------------------------
# Performance aggregation
# ---------------------------------------------------------------------------

class TestPerformance:

    def test_consistency_counts_fully_completed_sessions(self):
        sessions = [
            _session(_set("40", "10"), _set("40", "10")),
            _session(_set("40", "10"), _set("40", "8", completed=False)),
            _session(_set("40", "10")),
        ]
        # 2 of 3 fully completed -> round(66.67)
        assert consistency_score(sessions) == 67

    def test_session_without_sets_is_not_fully_completed(self):
        assert consistency_score([_session(), _session(_set("40", "10"))]) == 50

    def test_aggregate_uses_newest_session_last_completed_set(self):
        newest = _session(_set("42.5", "10"), _set("42.5", "8"), _set("42.5", "6", completed=False), day=7)
        older = _session(_set("40", "12"), day=0)
        perf = aggregate_performance("Bench Press", [newest, older])

        assert perf is not None
        assert perf.completed_sessions == 2
        assert perf.last_weight == "42.5"
        assert perf.last_reps == "8"
        # (42.5 + 42.5 + 40) / 3 completed sets
        assert perf.average_weight == pytest.approx(125 / 3)
        assert perf.average_reps == pytest.approx(10.0)
        assert perf.consistency_score == 50

    def test_aggregate_empty_is_none(self):
        assert aggregate_performance("Bench Press", []) is None

    def test_last_values_fall_back_to_zero(self):
        perf = aggregate_performance("Bench Press", [_session(_set("40", "10", completed=False))])
        assert perf.last_weight == "0"
        assert perf.last_reps == "0"
        assert perf.average_weight == 0.0

    def test_malformed_completed_sets_count_as_zero(self):
        newest = _session(_set("abc", "x"), day=7)
        older = _session(_set("40", "10"), day=0)
        perf = aggregate_performance("Bench Press", [newest, older])

        # unparseable values read as 0 but the set still counts in the denominator
        assert perf.average_weight == pytest.approx(20.0)
        assert perf.average_reps == pytest.approx(5.0)
        assert perf.completed_sessions == 2
        assert perf.last_weight == "abc"
        assert perf.last_reps == "x"

    def test_session_mean_weight_ignores_skipped_sets(self):
        s = _session(_set("50", "5"), _set("52", "5"), _set("80", "1", completed=False))
        assert session_mean_weight(s) == pytest.approx(51.0)

    def test_progress_points_and_change(self):
        sessions = [
            _session(_set("44", "10"), _set("44", "8"), day=14),
            _session(_set("40", "10"), _set("40", "10"), day=0),
        ]
        points = progress_points(sessions)

        assert [p.avg_weight for p in points] == [40.0, 44.0]
        assert points[1].avg_reps == 9.0
        assert points[1].max_reps == 10.0
        # weight +10%, reps -10%
        assert progress_change(points) == (10, -10)

    def test_progress_change_zero_start(self):
        points = progress_points([_session(_set("", "10"), day=0), _session(_set("20", "10"), day=1)])
        assert progress_change(points)[0] == 0


# ---------------------------------------------------------------------------
# Progression rules
# ---------------------------------------------------------------------------

class TestProgressionRules:

    def test_single_session_holds_with_low_confidence(self):
        perf = aggregate_performance("Bench Press", [_session(_set("20", "10"))])
        s = evaluate_progression(perf, "3", "8-12", "20kg")

        assert (s.type, s.current_value, s.suggested_value, s.confidence) == (
            "weight", "20kg", "20kg", "low",
        )
        assert not s.has_progression

    def test_no_data_and_no_weight_shows_zero(self):
        s = evaluate_progression(None, "3", "8-12", "")
        assert s.current_value == s.suggested_value == "0kg"

    def test_three_full_sessions_at_ceiling_add_compound_increment(self):
        sessions = [
            _session(_set("40", "12"), _set("40", "12"), day=d) for d in (7, 3, 0)
        ]
        s = evaluate_progression(aggregate_performance("Bench Press", sessions), "3", "8-12", "40kg", "compound")

        assert s.type == "weight"
        assert s.current_value == "40kg"
        assert s.suggested_value == "42.5kg"
        assert s.confidence == "high"

    @pytest.mark.parametrize("consistency", [80, 90, 100])
    def test_high_consistency_at_ceiling_is_high_confidence(self, consistency):
        s = evaluate_progression(_perf(3, consistency, reps="12"), "3", "8-12", "40kg")
        assert s.confidence == "high"

    def test_isolation_uses_smaller_increment(self):
        s = evaluate_progression(_perf(3, 100, weight="10", reps="12"), "3", "8-12", "10kg", "isolation")
        assert s.suggested_value == "11.25kg"

    def test_medium_consistency_widens_rep_range(self):
        s = evaluate_progression(_perf(3, 67, reps="10"), "3", "8-12", "40kg")

        assert s.type == "reps"
        assert s.current_value == "8-12"
        assert s.suggested_value == "8-14"
        assert s.confidence == "medium"

    def test_low_consistency_holds(self):
        s = evaluate_progression(_perf(2, 50, weight="37.5"), "3", "8-12", "40kg")

        assert s.type == "weight"
        assert s.suggested_value == "37.5kg"
        assert s.confidence == "low"

    def test_overshoot_takes_large_jump(self):
        # Two sessions cannot trigger the regular bump, 17 > 12 + 4
        s = evaluate_progression(_perf(2, 100, weight="30", reps="17"), "3", "8-12", "30kg")
        assert s.suggested_value == "35kg"
        assert s.confidence == "high"

    def test_overshoot_isolation_large_increment(self):
        s = evaluate_progression(_perf(4, 75, weight="10", reps="18"), "3", "8-12", "10kg", "isolation")
        assert s.suggested_value == "12.5kg"

    def test_consistent_below_ceiling_adds_a_set(self):
        s = evaluate_progression(_perf(4, 100, reps="10"), "3-4", "8-12", "40kg")

        assert s.type == "sets"
        assert s.current_value == "3-4"
        assert s.suggested_value == "4"
        assert s.confidence == "medium"

    def test_no_extra_set_at_five_sets(self):
        s = evaluate_progression(_perf(4, 100, reps="10"), "5", "8-12", "40kg")
        assert s.type == "weight"
        assert s.confidence == "medium"

    def test_default_holds_with_medium_confidence(self):
        s = evaluate_progression(_perf(2, 100, reps="10"), "3", "8-12", "40kg")
        assert (s.type, s.suggested_value, s.confidence) == ("weight", "40kg", "medium")

    def test_invalid_kind_raises(self):
        with pytest.raises(ValueError):
            evaluate_progression(_perf(3, 100), "3", "8-12", "40kg", "cardio")  # type: ignore[arg-type]

    def test_increments_per_kind(self):
        assert DEFAULT_RULES.increment_for("compound") == 2.5
        assert DEFAULT_RULES.increment_for("compound", large=True) == 5.0
        assert DEFAULT_RULES.increment_for("isolation") == 1.25
        assert DEFAULT_RULES.increment_for("isolation", large=True) == 2.5

    def test_custom_rules_change_threshold(self):
        rules = ProgressionRules(high_consistency=95)
        s = evaluate_progression(_perf(3, 90, reps="12"), "3", "8-12", "40kg", rules=rules)
        # 90 is now medium but reps are at the ceiling: falls through to hold
        assert s.type == "weight"
        assert s.suggested_value == "40kg"


# ---------------------------------------------------------------------------
# Plateau detection
# ---------------------------------------------------------------------------

class TestPlateau:

    def test_flat_means_are_a_plateau(self):
        sessions = [_flat(w, day=i) for i, w in enumerate([50, 51, 49.5, 50.2])]
        # mean 50.175, max deviation 0.825 < 2.50875
        assert is_plateau(sessions) is True

    def test_rising_means_are_not_a_plateau(self):
        sessions = [_flat(w, day=i) for i, w in enumerate([40, 45, 50, 55])]
        assert is_plateau(sessions) is False

    def test_only_last_four_sessions_count(self):
        sessions = [_flat(w, day=i) for i, w in enumerate([30, 40, 50, 51, 49.5, 50.2])]
        assert is_plateau(sessions) is True

    def test_all_zero_weights_never_plateau(self):
        sessions = [_session(_set("", "15"), day=i) for i in range(4)]
        assert is_plateau(sessions) is False

    def test_fewer_than_four_sessions(self):
        assert is_plateau([_flat(50, day=i) for i in range(3)]) is False

    def test_strategy_catalog(self):
        assert len(PLATEAU_STRATEGIES) == 6
        assert strategies_for(True) == list(PLATEAU_STRATEGIES)
        assert strategies_for(False) == []


# ---------------------------------------------------------------------------
# Streaks and cycles
# ---------------------------------------------------------------------------

TODAY = date(2026, 10, 18)


class TestStreaks:

    def test_today_yesterday_and_gap(self):
        days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=3)]
        streak = compute_streak(days, today=TODAY)

        assert streak.current_streak == 2
        assert streak.max_streak >= 2

    def test_streak_alive_from_yesterday(self):
        days = [TODAY - timedelta(days=i) for i in (1, 2, 3)]
        assert compute_streak(days, today=TODAY).current_streak == 3

    def test_broken_streak_keeps_max(self):
        days = [date(2026, 10, d) for d in (10, 11, 12, 15)]
        streak = compute_streak(days, today=TODAY)

        assert streak.current_streak == 0
        assert streak.max_streak == 3

    def test_duplicate_days_count_once(self):
        times = [
            datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc),
            datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc),
        ]
        assert compute_streak(times, today=TODAY) == compute_streak([TODAY], today=TODAY)

    def test_late_night_workout_counts_for_previous_day(self):
        sp = ZoneInfo("America/Sao_Paulo")
        times = [
            datetime(2026, 10, 17, 1, 30, tzinfo=sp),  # app day 10-16
            datetime(2026, 10, 17, 19, 0, tzinfo=sp),
        ]
        assert compute_streak(times, today=date(2026, 10, 17)).current_streak == 2

    def test_empty_history(self):
        streak = compute_streak([], today=TODAY)
        assert (streak.current_streak, streak.max_streak) == (0, 0)

    def test_cycles_are_anchored_at_first_workout(self):
        days = [date(2026, 10, d) for d in (1, 3, 8, 20)]
        cycles = group_into_cycles(days)

        assert [c.index for c in cycles] == [0, 1, 2]
        assert cycles[0].start == date(2026, 10, 1)
        assert cycles[0].end == date(2026, 10, 7)
        assert cycles[0].workout_days == (date(2026, 10, 1), date(2026, 10, 3))
        assert cycles[2].start == date(2026, 10, 15)

    def test_current_cycle_without_workouts_yet(self):
        days = [date(2026, 10, d) for d in (1, 3, 8)]
        cycle = current_cycle(days, today=date(2026, 10, 22))

        assert cycle.index == 3
        assert cycle.start == date(2026, 10, 22)
        assert cycle.end == date(2026, 10, 28)
        assert cycle.workout_days == ()

    def test_current_cycle_none_without_history(self):
        assert current_cycle([], today=TODAY) is None

    def test_cycle_index_before_anchor_raises(self):
        with pytest.raises(ValueError):
            cycle_index(date(2026, 10, 10), date(2026, 10, 9))

    def test_effective_date_rolls_over_at_four(self):
        sp = ZoneInfo("America/Sao_Paulo")
        assert effective_date(datetime(2026, 10, 18, 3, 59, tzinfo=sp)) == date(2026, 10, 17)
        assert effective_date(datetime(2026, 10, 18, 4, 0, tzinfo=sp)) == date(2026, 10, 18)

    def test_effective_date_converts_utc(self):
        # 06:00 UTC is 03:00 in Sao Paulo
        assert effective_date(datetime(2026, 10, 18, 6, 0, tzinfo=timezone.utc)) == date(2026, 10, 17)


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------

class TestAchievements:

    def test_first_workout_and_meal(self):
        snapshot = ActivitySnapshot(completed_workouts=1, meals_logged=1)
        assert evaluate_achievements(snapshot, set(), TODAY) == ["first_workout", "first_meal"]

    def test_already_unlocked_not_returned(self):
        snapshot = ActivitySnapshot(completed_workouts=3)
        assert evaluate_achievements(snapshot, {"first_workout"}, TODAY) == []

    def test_water_streak_needs_seven_days(self):
        water = {TODAY - timedelta(days=i): 2000 for i in range(7)}
        earned = evaluate_achievements(ActivitySnapshot(water_by_day=water), set(), TODAY)
        assert "water_streak_7" in earned
        assert "water_goal_first" in earned

        water.pop(TODAY - timedelta(days=3))
        earned = evaluate_achievements(ActivitySnapshot(water_by_day=water), set(), TODAY)
        assert "water_streak_7" not in earned

    def test_calorie_streak_within_ten_percent(self):
        calories = {TODAY - timedelta(days=i): 1850 for i in range(7)}
        snapshot = ActivitySnapshot(calories_by_day=calories, calorie_goal=2000)
        assert "calorie_streak_7" in evaluate_achievements(snapshot, set(), TODAY)

        calories[TODAY] = 2250
        assert "calorie_streak_7" not in evaluate_achievements(snapshot, set(), TODAY)

    def test_workout_streak(self):
        earned = evaluate_achievements(ActivitySnapshot(completed_workouts=7, current_streak=7), set(), TODAY)
        assert "workout_streak_7" in earned

    def test_status_lists_whole_catalog(self):
        status = achievement_status({"first_meal": "2026-10-18T12:00:00+00:00"})

        assert len(status) == len(ACHIEVEMENT_CATALOG)
        unlocked = [a.achievement_type for a in status if a.unlocked]
        assert unlocked == ["first_meal"]


# ---------------------------------------------------------------------------
# Nutrition goals
# ---------------------------------------------------------------------------

class TestNutrition:

    def test_bmr_mifflin_st_jeor(self):
        assert bmr(70, 170, 25, "male") == pytest.approx(1642.5)
        assert bmr(60, 165, 30, "female") == pytest.approx(1320.25)

    @pytest.mark.parametrize("days,expected", [(0, 1.2), (1, 1.2), (3, 1.375), (5, 1.55), (6, 1.725), (7, 1.9)])
    def test_activity_multiplier(self, days, expected):
        assert activity_multiplier(days) == expected

    def test_maintenance_goals(self):
        g = calculate_nutrition_goals(70, 170, 25, "male", 3, "maintenance")

        # 1642.5 * 1.375 = 2258.44
        assert g.calories == 2258
        # 70*35 + 3*500 = 3950 -> nearest 250
        assert g.water_ml == 4000
        assert (g.protein, g.carbs, g.fat) == (169, 226, 75)

    def test_weight_loss_goals(self):
        g = calculate_nutrition_goals(60, 165, 30, "female", 4, "weight-loss")

        # 1320.25 * 1.55 - 500 = 1546.39
        assert g.calories == 1546
        # (2100 + 2000) * 1.2 = 4920 -> 5000
        assert g.water_ml == 5000

    def test_calorie_floor(self):
        g = calculate_nutrition_goals(45, 150, 60, "female", 0, "weight-loss")
        assert g.calories == 1200

    def test_water_rounding(self):
        assert water_intake_ml(80, 3, "maintenance") == 4250

    def test_training_day_buckets(self):
        assert training_days_from_answer("1-2 times") == 2
        assert training_days_from_answer("3-4 times") == 4
        assert training_days_from_answer("5-6 times") == 5
        assert training_days_from_answer("never") == 3
        assert training_days_from_answer(None) == 4

    def test_quiz_defaults(self):
        assert goals_from_quiz({}) == calculate_nutrition_goals(70, 170, 25, "male", 4, "maintenance")

    def test_quiz_muscle_gain(self):
        g = goals_from_quiz({"currentWeight": "80", "height": "1.80", "age": "30",
                             "trainingDays": "5-6", "mainGoal": "gain"})
        # (800 + 1125 - 150 + 5) * 1.55 + 300 = 3059
        assert g.calories == 3059

    @pytest.mark.parametrize("calories,water_ml", [(1000, 1000), (5000, 10000), (2258, 4000)])
    def test_daily_goals_within_range(self, calories, water_ml):
        validate_daily_goals(calories, water_ml)

    @pytest.mark.parametrize("calories,water_ml", [(999, 2000), (5001, 2000), (2000, 999), (2000, 10001)])
    def test_daily_goals_out_of_range(self, calories, water_ml):
        with pytest.raises(ValueError):
            validate_daily_goals(calories, water_ml)


# ---------------------------------------------------------------------------
# Body weight
# ---------------------------------------------------------------------------

def _weigh(day: int, kg: float) -> BodyWeightEntry:
    return BodyWeightEntry(log_date=date(2026, 10, 1) + timedelta(days=day), weight_kg=kg)


class TestBodyWeight:

    def test_non_positive_weight_rejected(self):
        with pytest.raises(ValueError):
            _weigh(0, 0)
        with pytest.raises(ValueError):
            _weigh(0, -70)

    def test_trend_needs_two_readings(self):
        assert weight_trend([]) is None
        assert weight_trend([_weigh(0, 70)]) is None

    def test_trend_compares_latest_two_by_date(self):
        trend = weight_trend([_weigh(5, 71.2), _weigh(0, 75.0), _weigh(2, 72.0)])

        assert trend.latest == 71.2
        assert trend.previous == 72.0
        assert trend.diff == pytest.approx(-0.8)
        assert trend.direction == "down"

    def test_trend_up(self):
        assert weight_trend([_weigh(0, 70), _weigh(1, 71)]).direction == "up"

    @pytest.mark.parametrize("latest", [70.4, 69.6, 70.0])
    def test_small_change_is_stable(self, latest):
        assert weight_trend([_weigh(0, 70), _weigh(1, latest)]).direction == "stable"

    def test_half_kilo_is_not_stable(self):
        assert weight_trend([_weigh(0, 70), _weigh(1, 70.5)]).direction == "up"

    def test_upsert_replaces_same_day(self):
        entries = upsert_entry([_weigh(0, 70), _weigh(1, 71)], _weigh(0, 69))
        assert entries == [_weigh(0, 69), _weigh(1, 71)]
