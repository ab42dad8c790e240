"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from vitals.db import get_session
from vitals.main import app


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

TABLES = ("meal_logs", "workout_logs", "body_profiles")


class FakeSession:
    """Minimal stand-in for AsyncSession; serves canned rows per table."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None, fail: bool = False):
        self.tables = {name: [] for name in TABLES}
        self.tables.update(tables or {})
        self.fail = fail
        self.statements: list[str] = []

    async def execute(self, stmt, params=None):
        sql = str(stmt)
        self.statements.append(sql)
        if self.fail:
            raise SQLAlchemyError("connection refused")
        for name in TABLES:
            if f"FROM {name}" in sql:
                return FakeResult(self.tables[name])
        return FakeResult([])

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchall(self):
        return [tuple(r.get(k) for k in self._keys) for r in self._rows]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return a FakeSession with empty tables (fill .tables in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def override_session(fake_session):
    """Override the FastAPI dependency so no real DB is needed."""
    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_session):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_meal_row(
    calories: float | None,
    ts: datetime | None = None,
    user_id: str = "user_1",
    **macros: Any,
) -> dict[str, Any]:
    """Helper to build a fake meal_logs row dict."""
    if ts is None:
        ts = datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)
    return {
        "user_id": user_id,
        "logged_at": ts,
        "calories": calories,
        "protein_g": macros.get("protein_g"),
        "carbs_g": macros.get("carbs_g"),
        "fat_g": macros.get("fat_g"),
        "food_name": macros.get("food_name", "meal"),
    }


def make_workout_row(
    calories_burned: float | None,
    ts: datetime | None = None,
    user_id: str = "user_1",
    status: str = "completed",
    duration_minutes: float = 45.0,
    **extra: Any,
) -> dict[str, Any]:
    """Helper to build a fake workout_logs row dict."""
    if ts is None:
        ts = datetime(2026, 2, 15, 7, 0, tzinfo=timezone.utc)
    return {
        "user_id": user_id,
        "performed_at": ts,
        "status": status,
        "duration_minutes": duration_minutes,
        "calories_burned": calories_burned,
        "met_category": extra.get("met_category"),
        "workout_name": extra.get("workout_name", "Workout"),
        "workout_type": extra.get("workout_type", "cardio"),
    }


def make_profile_row(**overrides: Any) -> dict[str, Any]:
    """Helper to build a fake body_profiles row (scenario-1 male by default)."""
    row = {
        "sex": "male",
        "mass_kg": 80.0,
        "height_cm": 180.0,
        "age_years": 30,
        "activity_level": "moderately_active",
        "goal_kind": "lose_weight",
        "target_mass_kg": 75.0,
    }
    row.update(overrides)
    return row
