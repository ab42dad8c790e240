"""BMR, TDEE and calorie targets. Pure functions that never raise."""

from __future__ import annotations

import math

from vitals.energy.models import BodyProfile, CalorieTarget, GoalSpec, Sex
from vitals.energy.tables import (
    DEFAULT_MACRO_SPLIT,
    GOAL_ADJUSTMENTS,
    MacroSplit,
    activity_multiplier,
    calorie_floor,
)


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds toward +inf (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _enum_value(value) -> str | None:
    if value is None:
        return None
    return getattr(value, "value", value)


def compute_bmr(profile: BodyProfile) -> float:
    """Mifflin-St Jeor BMR in kcal/day.

    Any designation other than male takes the female constant. Inputs are
    not validated here; non-positive mass/height/age give meaningless output.
    """
    base = 10.0 * profile.mass_kg + 6.25 * profile.height_cm - 5.0 * profile.age_years
    if _enum_value(profile.sex) == Sex.male.value:
        return base + 5.0
    return base - 161.0


def compute_tdee(profile: BodyProfile) -> float:
    """BMR x activity multiplier. Missing/unknown level counts as sedentary."""
    return compute_bmr(profile) * activity_multiplier(_enum_value(profile.activity_level))


def adjusted_calories(tdee: float, goal: GoalSpec | None) -> int:
    kind = _enum_value(goal.kind) if goal is not None else None
    delta = GOAL_ADJUSTMENTS.get(kind, 0.0) if kind else 0.0
    return round_half_up(tdee + delta)


def macro_grams(calories: int, split: MacroSplit = DEFAULT_MACRO_SPLIT) -> tuple[int, int, int]:
    """(protein_g, carbs_g, fat_g) for a calorie figure."""
    protein = round_half_up(calories * split.protein_pct / split.protein_kcal_per_g)
    carbs = round_half_up(calories * split.carbs_pct / split.carbs_kcal_per_g)
    fat = round_half_up(calories * split.fat_pct / split.fat_kcal_per_g)
    return protein, carbs, fat


def compute_target(profile: BodyProfile, goal: GoalSpec | None = None) -> CalorieTarget:
    """Daily calorie and macro targets for a profile and goal.

    lose_weight: TDEE - 500, gain_muscle: TDEE + 300, otherwise TDEE.
    The result is clamped up to the sex-specific floor before the macro
    split is taken, so the macros always describe the clamped figure.
    """
    adjusted = adjusted_calories(compute_tdee(profile), goal)
    daily = max(adjusted, calorie_floor(_enum_value(profile.sex)))
    protein, carbs, fat = macro_grams(daily)
    return CalorieTarget(daily_calories=daily, protein_g=protein, carbs_g=carbs, fat_g=fat)
