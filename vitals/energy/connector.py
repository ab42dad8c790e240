"""Database connector — async reads from meal_logs, workout_logs and body_profiles.

meal_logs:      user_id, logged_at, calories, protein_g, carbs_g, fat_g, food_name
workout_logs:   user_id, performed_at, status, duration_minutes, calories_burned,
                met_category, workout_name, workout_type
body_profiles:  user_id, sex, mass_kg, height_cm, age_years, activity_level,
                goal_kind, target_mass_kg, updated_at

Ranges are inclusive on both ends. Store failures are logged and re-raised
as UpstreamFetchError; nothing is retried.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vitals.energy.errors import UpstreamFetchError
from vitals.energy.models import BodyProfile, ConsumptionEvent, ExpenditureEvent, GoalSpec

logger = logging.getLogger(__name__)


async def _fetch_all(
    session: AsyncSession, source: str, query: str, params: dict[str, Any]
) -> list[dict[str, Any]]:
    try:
        result = await session.execute(text(query), params)
        columns = list(result.keys())
        return [dict(zip(columns, r)) for r in result.fetchall()]
    except SQLAlchemyError as exc:
        logger.error("read from %s failed: %s", source, exc)
        raise UpstreamFetchError(source, str(exc)) from exc


async def fetch_consumption_events(
    session: AsyncSession,
    user_id: str,
    start_utc: datetime,
    end_utc: datetime,
) -> list[ConsumptionEvent]:
    """Meal logs for a user with logged_at in [start_utc, end_utc]."""
    query = (
        "SELECT user_id, logged_at, calories, protein_g, carbs_g, fat_g, food_name "
        "FROM meal_logs "
        "WHERE user_id = :user_id AND logged_at >= :start AND logged_at <= :end "
        "ORDER BY logged_at"
    )
    rows = await _fetch_all(
        session, "meal_logs", query, {"user_id": user_id, "start": start_utc, "end": end_utc}
    )
    return [
        ConsumptionEvent(
            user_id=r["user_id"],
            timestamp_utc=r["logged_at"],
            calories=r.get("calories"),
            protein_g=r.get("protein_g"),
            carbs_g=r.get("carbs_g"),
            fat_g=r.get("fat_g"),
            food_name=r.get("food_name"),
        )
        for r in rows
    ]


async def fetch_expenditure_events(
    session: AsyncSession,
    user_id: str,
    start_utc: datetime,
    end_utc: datetime,
    status: str | None = "completed",
) -> list[ExpenditureEvent]:
    """Workouts for a user with performed_at in [start_utc, end_utc].

    status=None returns every status.
    """
    query = (
        "SELECT user_id, performed_at, status, duration_minutes, calories_burned, "
        "met_category, workout_name, workout_type "
        "FROM workout_logs "
        "WHERE user_id = :user_id AND performed_at >= :start AND performed_at <= :end"
    )
    params: dict[str, Any] = {"user_id": user_id, "start": start_utc, "end": end_utc}
    if status is not None:
        query += " AND status = :status"
        params["status"] = status
    query += " ORDER BY performed_at"

    rows = await _fetch_all(session, "workout_logs", query, params)
    return [
        ExpenditureEvent(
            user_id=r["user_id"],
            timestamp_utc=r["performed_at"],
            status=r.get("status") or "planned",
            duration_minutes=r.get("duration_minutes") or 0.0,
            calories_burned=r.get("calories_burned"),
            met_category=r.get("met_category"),
            workout_name=r.get("workout_name"),
            workout_type=r.get("workout_type"),
        )
        for r in rows
    ]


async def fetch_body_profile(
    session: AsyncSession,
    user_id: str,
) -> tuple[BodyProfile, GoalSpec | None] | None:
    """Latest stored profile and active goal for a user. None when absent."""
    query = (
        "SELECT sex, mass_kg, height_cm, age_years, activity_level, goal_kind, target_mass_kg "
        "FROM body_profiles "
        "WHERE user_id = :user_id "
        "ORDER BY updated_at DESC LIMIT 1"
    )
    rows = await _fetch_all(session, "body_profiles", query, {"user_id": user_id})
    if not rows:
        return None
    row = rows[0]
    profile = BodyProfile(
        sex=row.get("sex"),
        mass_kg=row["mass_kg"],
        height_cm=row["height_cm"],
        age_years=row["age_years"],
        activity_level=row.get("activity_level"),
    )
    goal = None
    if row.get("goal_kind"):
        goal = GoalSpec(kind=row["goal_kind"], target_mass_kg=row.get("target_mass_kg"))
    return profile, goal
