"""Daily calorie and macro target calculations."""

import math
from decimal import ROUND_HALF_UP, Decimal

from calorie_tracker.domain.nutrition import NutritionTargets, ProfileInputs

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

DEFAULT_PROTEIN_RATIO = 0.3
DEFAULT_FAT_RATIO = 0.3

_ACTIVITY_LABELS = (
    (1.2, "Sedentary"),
    (1.375, "Lightly Active"),
    (1.55, "Moderately Active"),
    (1.725, "Very Active"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going towards +inf."""
    return math.floor(value + 0.5)


def compute_daily_calories(  # noqa: PLR0913
    weight_kg: float,
    height_cm: float,
    age_years: int,
    sex: str,
    activity_factor: float,
    goal_offset_kcal: int,
) -> int:
    """Return the daily calorie target from Mifflin-St Jeor BMR.

    Inputs are not validated: out-of-range values propagate arithmetically.
    """
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    bmr += 5 if sex == "male" else -161
    tdee = bmr * activity_factor
    return round_half_up(tdee + goal_offset_kcal)


def compute_macros(
    calories: float,
    protein_ratio: float = DEFAULT_PROTEIN_RATIO,
    fat_ratio: float = DEFAULT_FAT_RATIO,
) -> NutritionTargets:
    """Split calories into protein, carbs and fat grams.

    Carbs take the remaining share, which is zero or negative when
    protein_ratio + fat_ratio >= 1.
    """
    carbs_ratio = 1 - protein_ratio - fat_ratio
    return NutritionTargets(
        calories=round_half_up(calories),
        protein_g=round_half_up(calories * protein_ratio / KCAL_PER_G_PROTEIN),
        carbs_g=round_half_up(calories * carbs_ratio / KCAL_PER_G_CARBS),
        fat_g=round_half_up(calories * fat_ratio / KCAL_PER_G_FAT),
    )


def compute_targets(inputs: ProfileInputs) -> NutritionTargets:
    """Compute calories and the default macro split for a profile."""
    calories = compute_daily_calories(
        inputs.weight_kg,
        inputs.height_cm,
        inputs.age_years,
        inputs.sex,
        inputs.activity_factor,
        inputs.goal_offset_kcal,
    )
    return compute_macros(calories)


def activity_level_to_string(level: float) -> str:
    """Map an activity factor to its category label."""
    for upper_bound, label in _ACTIVITY_LABELS:
        if level <= upper_bound:
            return label
    return "Extremely Active"


def goal_to_label(goal_offset: int) -> str:
    """Describe a goal offset as a weekly weight change."""
    # Decimal(float) is exact, so binary-inexact halves round down as toFixed does.
    weekly_change = Decimal(abs(goal_offset) / 1000).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
    if goal_offset < 0:
        return f"Lose {weekly_change} kg/week"
    if goal_offset > 0:
        return f"Gain {weekly_change} kg/week"
    return "Maintain weight"
