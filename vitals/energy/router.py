"""Energy HTTP router — targets, workout estimates, balance and insights."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vitals.auth import verify_api_key
from vitals.config import settings
from vitals.db import get_session
from vitals.energy import aggregator, connector, insights
from vitals.energy.expenditure import estimate_calories
from vitals.energy.metabolism import compute_target
from vitals.energy.models import (
    CalorieInsights,
    CalorieTarget,
    EnergyBalanceReport,
    IntakeSummary,
    Period,
    TargetRequest,
    WorkoutEstimate,
    WorkoutEstimateRequest,
    WorkoutStats,
)
from vitals.energy.tables import (
    ACTIVITY_MULTIPLIERS,
    CALORIE_FLOORS,
    DEFAULT_MACRO_SPLIT,
    DEFAULT_MET_TABLE,
    GOAL_ADJUSTMENTS,
    PERIOD_LAYOUTS,
)

router = APIRouter(prefix="/energy", tags=["energy"])


def _parse_date(value: str, name: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date for '{name}': {value}")


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


@router.post("/target", response_model=CalorieTarget)
async def calorie_target(
    body: TargetRequest,
    _: str = Depends(verify_api_key),
) -> CalorieTarget:
    return compute_target(body.profile, body.goal)


@router.get("/users/{user_id}/target", response_model=CalorieTarget)
async def stored_calorie_target(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
) -> CalorieTarget:
    stored = await connector.fetch_body_profile(session, user_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"No body profile for user: {user_id}")
    profile, goal = stored
    return compute_target(profile, goal)


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


@router.post("/workouts/estimate", response_model=WorkoutEstimate)
async def workout_estimate(
    body: WorkoutEstimateRequest,
    _: str = Depends(verify_api_key),
) -> WorkoutEstimate:
    met_value = body.met_value
    if met_value is None:
        met_value = DEFAULT_MET_TABLE.classify(body.exercise_name, body.category)
    return WorkoutEstimate(
        met_value=met_value,
        mass_kg=body.mass_kg,
        duration_minutes=body.duration_minutes,
        calories=estimate_calories(met_value, body.mass_kg, body.duration_minutes),
    )


@router.get("/workouts/stats", response_model=WorkoutStats)
async def workout_statistics(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Query(..., description="User whose workouts to summarise"),
    days: int = Query(default=None, ge=1, le=365),
) -> WorkoutStats:
    return await insights.build_workout_stats(session, user_id, days)


# ---------------------------------------------------------------------------
# Balance & insights
# ---------------------------------------------------------------------------


@router.get("/balance", response_model=EnergyBalanceReport)
async def energy_balance(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Query(..., description="User whose logs to aggregate"),
    period: Period = Query(default=Period.daily),
    tz: str = Query(default=None, description="Timezone (e.g. Europe/Rome)"),
) -> EnergyBalanceReport:
    tz_name = tz or settings.default_tz
    return await aggregator.build_energy_balance(session, user_id, period, tz_name=tz_name)


@router.get("/insights", response_model=CalorieInsights)
async def calorie_insights(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Query(...),
    days: int = Query(default=None, ge=1, le=365),
) -> CalorieInsights:
    return await insights.build_calorie_insights(session, user_id, days)


@router.get("/intake", response_model=IntakeSummary)
async def daily_intake(
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    user_id: str = Query(...),
    day: str = Query(default=None, alias="date", description="Date (YYYY-MM-DD, default: today)"),
    tz: str = Query(default=None),
) -> IntakeSummary:
    tz_name = tz or settings.default_tz
    target_day = _parse_date(day, "date") if day else None
    return await insights.build_intake_summary(session, user_id, target_day, tz_name)


# ---------------------------------------------------------------------------
# /energy/tables
# ---------------------------------------------------------------------------


@router.get("/tables")
async def reference_tables(
    _: str = Depends(verify_api_key),
) -> dict:
    """Constants the engine computes with, for clients that show their work."""
    return {
        "activity_multipliers": dict(ACTIVITY_MULTIPLIERS),
        "calorie_floors": dict(CALORIE_FLOORS),
        "goal_adjustments": dict(GOAL_ADJUSTMENTS),
        "macro_split": {
            "protein_pct": DEFAULT_MACRO_SPLIT.protein_pct,
            "fat_pct": DEFAULT_MACRO_SPLIT.fat_pct,
            "carbs_pct": DEFAULT_MACRO_SPLIT.carbs_pct,
        },
        "met": {
            "rules": [
                {"keywords": list(r.keywords), "met_value": r.met_value, "label": r.label}
                for r in DEFAULT_MET_TABLE.rules
            ],
            "strength": DEFAULT_MET_TABLE.strength_met,
            "default": DEFAULT_MET_TABLE.default_met,
        },
        "periods": {
            name: {
                "bucket_count": layout.bucket_count,
                "bucket_days": layout.bucket_days,
                "calendar_month": layout.calendar_month,
            }
            for name, layout in PERIOD_LAYOUTS.items()
        },
    }
