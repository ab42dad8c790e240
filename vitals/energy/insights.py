"""Calorie insights, workout statistics and daily intake summaries.

The pure helpers take already-fetched events; the build_* coroutines fetch
from the connector and resolve the user's daily goal (stored profile target,
else the configured default).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from vitals.config import settings
from vitals.energy import connector
from vitals.energy.aggregator import as_utc, require_user, resolve_tz
from vitals.energy.errors import InputValidationError
from vitals.energy.expenditure import backfill_burned
from vitals.energy.metabolism import compute_target, round_half_up
from vitals.energy.models import (
    CalorieInsights,
    ConsumptionEvent,
    ExpenditureEvent,
    IntakeSummary,
    MacroTotals,
    WorkoutStats,
)
from vitals.energy.tables import DEFAULT_MET_TABLE, MetTable

OVER_GOAL_RECOMMENDATION = "Consider reducing portion sizes or adding more physical activity."
UNDER_GOAL_RECOMMENDATION = "You're on track! Consider adding nutrient-dense foods if you feel hungry."

NO_WORKOUTS_MESSAGE = "No workout data available for the specified period."
LOW_FREQUENCY_MESSAGE = (
    "You're working out less than the recommended 3-5 times per week. "
    "Consider increasing your frequency."
)
HEALTHY_FREQUENCY_MESSAGE = "Great job! You're maintaining a healthy workout frequency."
HIGH_FREQUENCY_MESSAGE = "You're very active! Make sure to include rest days for recovery."
SHORT_SESSION_MESSAGE = (
    "Your workouts are shorter than recommended. "
    "Try to aim for at least 30 minutes per session."
)
MIN_SESSION_MINUTES = 30


def _require_days(days: int) -> int:
    if days <= 0:
        raise InputValidationError(f"days must be positive, got {days}")
    return days


def calorie_insights(
    meals: list[ConsumptionEvent],
    days: int,
    goal_calories: float,
) -> CalorieInsights:
    """Average daily intake over `days` compared with the daily goal."""
    _require_days(days)
    total = sum(m.calories or 0.0 for m in meals)
    avg = total / days
    above = avg > goal_calories
    pct = round_half_up(avg / goal_calories * 100.0) if goal_calories > 0 else 0
    return CalorieInsights(
        days=days,
        average_daily_calories=round_half_up(avg),
        goal_calories=goal_calories,
        goal_comparison="above" if above else "below",
        percentage_of_goal=pct,
        recommendation=OVER_GOAL_RECOMMENDATION if above else UNDER_GOAL_RECOMMENDATION,
    )


def workout_stats(workouts: list[ExpenditureEvent], days: int) -> WorkoutStats:
    """Frequency, duration and calorie statistics over `days`."""
    _require_days(days)
    if not workouts:
        return WorkoutStats(days=days, insights=[NO_WORKOUTS_MESSAGE])

    count = len(workouts)
    total_duration = sum(w.duration_minutes for w in workouts)
    total_calories = sum(w.calories_burned or 0.0 for w in workouts)
    avg_duration = total_duration / count
    weekly = round_half_up(count / days * 7)

    distribution: dict[str, int] = {}
    for w in workouts:
        kind = w.workout_type or "other"
        distribution[kind] = distribution.get(kind, 0) + 1

    insights: list[str] = []
    if weekly < 3:
        insights.append(LOW_FREQUENCY_MESSAGE)
    elif weekly <= 5:
        insights.append(HEALTHY_FREQUENCY_MESSAGE)
    else:
        insights.append(HIGH_FREQUENCY_MESSAGE)
    if avg_duration < MIN_SESSION_MINUTES:
        insights.append(SHORT_SESSION_MESSAGE)

    return WorkoutStats(
        days=days,
        total_workouts=count,
        total_duration=round_half_up(total_duration),
        avg_duration=round_half_up(avg_duration),
        total_calories=round_half_up(total_calories),
        avg_calories=round_half_up(total_calories / count),
        weekly_workouts=weekly,
        workout_type_distribution=distribution,
        insights=insights,
    )


def intake_summary(meals: list[ConsumptionEvent], day: date, goal_calories: float) -> IntakeSummary:
    consumed = sum(m.calories or 0.0 for m in meals)
    progress = min(100.0, consumed / goal_calories * 100.0) if goal_calories > 0 else 0.0
    return IntakeSummary(
        date=day.isoformat(),
        meal_count=len(meals),
        total_calories=consumed,
        goal_calories=goal_calories,
        remaining_calories=max(0.0, goal_calories - consumed),
        progress_pct=round(progress, 1),
        macronutrients=MacroTotals(
            protein_g=sum(m.protein_g or 0.0 for m in meals),
            carbs_g=sum(m.carbs_g or 0.0 for m in meals),
            fat_g=sum(m.fat_g or 0.0 for m in meals),
        ),
    )


# ---------------------------------------------------------------------------
# Fetching builders
# ---------------------------------------------------------------------------

async def resolve_goal_calories(session: AsyncSession, user_id: str) -> float:
    stored = await connector.fetch_body_profile(session, user_id)
    if stored is None:
        return settings.default_calorie_goal
    profile, goal = stored
    return float(compute_target(profile, goal).daily_calories)


async def build_calorie_insights(
    session: AsyncSession,
    user_id: str,
    days: int | None = None,
    now: datetime | None = None,
) -> CalorieInsights:
    user_id = require_user(user_id)
    days = _require_days(days if days is not None else settings.insight_days)
    end = as_utc(now) if now is not None else datetime.now(timezone.utc)
    start = end - timedelta(days=days)

    goal = await resolve_goal_calories(session, user_id)
    meals = await connector.fetch_consumption_events(session, user_id, start, end)
    return calorie_insights(meals, days, goal)


async def build_workout_stats(
    session: AsyncSession,
    user_id: str,
    days: int | None = None,
    now: datetime | None = None,
    met_table: MetTable = DEFAULT_MET_TABLE,
) -> WorkoutStats:
    user_id = require_user(user_id)
    days = _require_days(days if days is not None else settings.workout_stats_days)
    end = as_utc(now) if now is not None else datetime.now(timezone.utc)
    start = end - timedelta(days=days)

    stored = await connector.fetch_body_profile(session, user_id)
    workouts = await connector.fetch_expenditure_events(session, user_id, start, end)
    # Burned totals match the balance report for the same workouts.
    if stored is not None:
        profile, _ = stored
        workouts = backfill_burned(workouts, profile.mass_kg, met_table)
    return workout_stats(workouts, days)


async def build_intake_summary(
    session: AsyncSession,
    user_id: str,
    day: date | None = None,
    tz_name: str = "UTC",
) -> IntakeSummary:
    user_id = require_user(user_id)
    tz = resolve_tz(tz_name)
    if day is None:
        day = datetime.now(timezone.utc).astimezone(tz).date()
    start = datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz).astimezone(timezone.utc)
    end -= timedelta(microseconds=1)

    goal = await resolve_goal_calories(session, user_id)
    meals = await connector.fetch_consumption_events(session, user_id, start, end)
    return intake_summary(meals, day, goal)
