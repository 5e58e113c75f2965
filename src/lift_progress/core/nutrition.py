"""
Daily nutrition goals from onboarding answers.

BMR uses the Mifflin-St Jeor equation:

    male:   BMR = 10*w + 6.25*h - 5*a + 5
    female: BMR = 10*w + 6.25*h - 5*a - 161

TDEE = BMR * activity multiplier; calories are then shifted for the goal
and floored at a safe minimum.
"""

import math
from typing import Any

from .config import (
    CALORIE_DEFICIT,
    CALORIE_SURPLUS,
    MACRO_SPLITS,
    MAX_CALORIE_GOAL,
    MAX_WATER_GOAL_ML,
    MIN_CALORIES,
    MIN_CALORIE_GOAL,
    MIN_WATER_GOAL_ML,
    WATER_ML_PER_KG,
    WATER_ML_PER_TRAINING_DAY,
    WATER_ROUNDING_ML,
    WATER_WEIGHT_LOSS_FACTOR,
)
from .models import NutritionGoals
from .parsing import parse_int, parse_number


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def bmr(weight_kg: float, height_cm: float, age: int, sex: str) -> float:
    """Basal metabolic rate in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex == "male" else base - 161


def activity_multiplier(training_days_per_week: int) -> float:
    """
    Map weekly training days to a TDEE multiplier.

    <=1: 1.2, <=3: 1.375, <=5: 1.55, <=6: 1.725, else 1.9
    """
    if training_days_per_week <= 1:
        return 1.2
    if training_days_per_week <= 3:
        return 1.375
    if training_days_per_week <= 5:
        return 1.55
    if training_days_per_week <= 6:
        return 1.725
    return 1.9


def water_intake_ml(weight_kg: float, training_days_per_week: int, goal: str) -> int:
    """
    Daily water target.

    35 ml per kg plus 500 ml per training day, +20% for weight loss,
    rounded to the nearest 250 ml.
    """
    water = weight_kg * WATER_ML_PER_KG + training_days_per_week * WATER_ML_PER_TRAINING_DAY
    if goal == "weight-loss":
        water *= WATER_WEIGHT_LOSS_FACTOR
    return _round(water / WATER_ROUNDING_ML) * WATER_ROUNDING_ML


def macros(calories: int, goal: str) -> tuple[int, int, int]:
    """(protein_g, carbs_g, fat_g) for a calorie target; 4/4/9 kcal per gram."""
    protein, carbs, fat = MACRO_SPLITS.get(goal, MACRO_SPLITS["maintenance"])
    return (
        _round(calories * protein / 4),
        _round(calories * carbs / 4),
        _round(calories * fat / 9),
    )


def calculate_nutrition_goals(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: str = "male",
    training_days_per_week: int = 3,
    goal: str = "maintenance",
) -> NutritionGoals:
    """
    Personalized calorie, water and macro targets.

    Args:
        weight_kg: Body weight
        height_cm: Height in centimetres
        age: Age in years
        sex: "male" | "female"
        training_days_per_week: Planned training frequency
        goal: "weight-loss" | "muscle-gain" | "maintenance"

    Returns:
        NutritionGoals
    """
    tdee = bmr(weight_kg, height_cm, age, sex) * activity_multiplier(training_days_per_week)

    if goal == "weight-loss":
        calories = _round(tdee - CALORIE_DEFICIT)
    elif goal == "muscle-gain":
        calories = _round(tdee + CALORIE_SURPLUS)
    else:
        calories = _round(tdee)
    calories = max(calories, MIN_CALORIES.get(sex, MIN_CALORIES["female"]))

    protein, carbs, fat = macros(calories, goal)
    return NutritionGoals(
        calories=calories,
        water_ml=water_intake_ml(weight_kg, training_days_per_week, goal),
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


def validate_daily_goals(calories: int, water_ml: int) -> None:
    """
    Check user-edited daily goals against the accepted ranges.

    Raises:
        ValueError: If calories fall outside 1000-5000 kcal or water
                    outside 1000-10000 ml
    """
    if not MIN_CALORIE_GOAL <= calories <= MAX_CALORIE_GOAL:
        raise ValueError(
            f"Calorie goal must be between {MIN_CALORIE_GOAL} and {MAX_CALORIE_GOAL} kcal, got {calories}"
        )
    if not MIN_WATER_GOAL_ML <= water_ml <= MAX_WATER_GOAL_ML:
        raise ValueError(
            f"Water goal must be between {MIN_WATER_GOAL_ML} and {MAX_WATER_GOAL_ML} ml, got {water_ml}"
        )


def training_days_from_answer(answer: str | None) -> int:
    """Quiz buckets: "1-2" -> 2, "3-4" -> 4, "5-6" -> 5, anything else -> 3."""
    text = answer or "3-4"
    if "1-2" in text:
        return 2
    if "3-4" in text:
        return 4
    if "5-6" in text:
        return 5
    return 3


def goal_from_answer(main_goal: str | None) -> str:
    if main_goal == "lose":
        return "weight-loss"
    if main_goal == "gain":
        return "muscle-gain"
    return "maintenance"


def goals_from_quiz(answers: dict[str, Any]) -> NutritionGoals:
    """
    Nutrition goals from raw onboarding quiz answers.

    Quiz values are strings; height is in metres. Missing or unparseable
    values fall back to 70 kg, 1.70 m and 25 years. The quiz has no sex
    field, so "male" is assumed unless ``answers["sex"]`` is given.
    """
    weight = parse_number(answers.get("currentWeight")) or 70.0
    height = parse_number(answers.get("height")) * 100 or 170.0
    age = parse_int(answers.get("age")) or 25
    sex = answers.get("sex") or "male"

    return calculate_nutrition_goals(
        weight_kg=weight,
        height_cm=height,
        age=age,
        sex=sex,
        training_days_per_week=training_days_from_answer(answers.get("trainingDays")),
        goal=goal_from_answer(answers.get("mainGoal")),
    )
