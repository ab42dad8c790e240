"""Energy engine records — Pydantic v2 models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Sex(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    lightly_active = "lightly_active"
    moderately_active = "moderately_active"
    very_active = "very_active"
    extremely_active = "extremely_active"


class GoalKind(str, Enum):
    lose_weight = "lose_weight"
    gain_muscle = "gain_muscle"
    maintain = "maintain"


class Period(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class WorkoutStatus(str, Enum):
    planned = "planned"
    in_progress = "in_progress"
    completed = "completed"
    skipped = "skipped"


def _coerce_enum(enum_cls: type[Enum], value, fallback: Enum) -> Enum:
    """Case-insensitive enum lookup; anything unrecognised becomes `fallback`."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return fallback
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return fallback


class BodyProfile(BaseModel):
    """Body metrics for BMR/TDEE.

    Free-form designations are accepted: any sex other than male is treated
    as female, and an unrecognised activity level as sedentary.
    """

    sex: Sex
    mass_kg: float
    height_cm: float
    age_years: int
    activity_level: ActivityLevel | None = None  # None -> sedentary

    @field_validator("sex", mode="before")
    @classmethod
    def non_male_is_female(cls, v):
        return _coerce_enum(Sex, v, Sex.female)

    @field_validator("activity_level", mode="before")
    @classmethod
    def unknown_level_is_sedentary(cls, v):
        if v is None:
            return None
        return _coerce_enum(ActivityLevel, v, ActivityLevel.sedentary)


class GoalSpec(BaseModel):
    kind: GoalKind = GoalKind.maintain
    target_mass_kg: float | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def unknown_kind_is_maintain(cls, v):
        return _coerce_enum(GoalKind, v, GoalKind.maintain)


class CalorieTarget(BaseModel):
    daily_calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


class ConsumptionEvent(BaseModel):
    """A meal log entry."""

    user_id: str
    timestamp_utc: datetime
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)
    food_name: str | None = None


class ExpenditureEvent(BaseModel):
    """A workout entry. calories_burned may be filled in lazily."""

    user_id: str
    timestamp_utc: datetime
    status: WorkoutStatus = WorkoutStatus.planned
    duration_minutes: float = Field(default=0.0, ge=0)
    calories_burned: float | None = Field(default=None, ge=0)
    met_category: str | None = None
    workout_name: str | None = None
    workout_type: str | None = None  # "strength" | "cardio" | "flexibility" | ...


class AggregationBucket(BaseModel):
    period_label: str
    start_utc: datetime
    end_utc: datetime
    days: int = 1
    consumed: float = 0.0
    burned: float = 0.0
    net: float = 0.0
    consumption_event_count: int = 0
    expenditure_event_count: int = 0
    avg_daily: int | None = None  # weekly/monthly only
    avg_daily_burned: int | None = None  # weekly/monthly only


class BalanceSummary(BaseModel):
    total_consumed: float = 0.0
    total_burned: float = 0.0
    net: float = 0.0
    consumption_event_count: int = 0
    expenditure_event_count: int = 0


class EnergyBalanceReport(BaseModel):
    """Top-level balance response object; always constructible."""

    user_id: str
    period: Period
    timezone: str = "UTC"
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    buckets: list[AggregationBucket] = Field(default_factory=list)
    summary: BalanceSummary = Field(default_factory=BalanceSummary)
    target: CalorieTarget | None = None
    warnings: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------------------


class TargetRequest(BaseModel):
    profile: BodyProfile
    goal: GoalSpec = Field(default_factory=GoalSpec)


class WorkoutEstimateRequest(BaseModel):
    mass_kg: float = Field(gt=0)
    duration_minutes: float = Field(ge=0)
    met_value: float | None = Field(default=None, gt=0)
    exercise_name: str | None = None  # classified when met_value is absent
    category: str | None = None


class WorkoutEstimate(BaseModel):
    met_value: float
    mass_kg: float
    duration_minutes: float
    calories: int


class CalorieInsights(BaseModel):
    days: int
    average_daily_calories: int
    goal_calories: float
    goal_comparison: str  # "above" | "below"
    percentage_of_goal: int
    recommendation: str


class WorkoutStats(BaseModel):
    days: int
    total_workouts: int = 0
    total_duration: int = 0
    avg_duration: int = 0
    total_calories: int = 0
    avg_calories: int = 0
    weekly_workouts: int = 0
    workout_type_distribution: dict[str, int] = Field(default_factory=dict)
    insights: list[str] = Field(default_factory=list)


class MacroTotals(BaseModel):
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0


class IntakeSummary(BaseModel):
    date: str
    meal_count: int = 0
    total_calories: float = 0.0
    goal_calories: float
    remaining_calories: float
    progress_pct: float
    macronutrients: MacroTotals = Field(default_factory=MacroTotals)
