"""Tests for the store connector against FakeSession rows."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from vitals.db import normalize_database_url
from vitals.energy import connector
from vitals.energy.errors import UpstreamFetchError
from vitals.energy.models import ActivityLevel, GoalKind, Sex, WorkoutStatus

from tests.conftest import FakeSession, make_meal_row, make_profile_row, make_workout_row

START = datetime(2026, 2, 9, tzinfo=timezone.utc)
END = datetime(2026, 2, 15, 23, 59, 59, tzinfo=timezone.utc)


class TestConsumptionEvents:
    @pytest.mark.asyncio
    async def test_rows_become_events(self):
        session = FakeSession({"meal_logs": [make_meal_row(450, protein_g=30)]})
        events = await connector.fetch_consumption_events(session, "user_1", START, END)
        assert len(events) == 1
        assert events[0].calories == 450
        assert events[0].protein_g == 30
        assert events[0].carbs_g is None

    @pytest.mark.asyncio
    async def test_empty(self):
        events = await connector.fetch_consumption_events(FakeSession(), "user_1", START, END)
        assert events == []

    @pytest.mark.asyncio
    async def test_failure_raises_upstream_error(self):
        with pytest.raises(UpstreamFetchError) as exc_info:
            await connector.fetch_consumption_events(FakeSession(fail=True), "user_1", START, END)
        assert exc_info.value.source == "meal_logs"


class TestExpenditureEvents:
    @pytest.mark.asyncio
    async def test_status_filter_in_query(self):
        session = FakeSession({"workout_logs": [make_workout_row(300)]})
        events = await connector.fetch_expenditure_events(session, "user_1", START, END)
        assert events[0].status == WorkoutStatus.completed
        assert events[0].calories_burned == 300
        assert "status = :status" in session.statements[-1]

    @pytest.mark.asyncio
    async def test_no_status_filter(self):
        session = FakeSession({"workout_logs": [make_workout_row(None, status="planned")]})
        events = await connector.fetch_expenditure_events(session, "user_1", START, END, status=None)
        assert events[0].status == WorkoutStatus.planned
        assert "status = :status" not in session.statements[-1]

    @pytest.mark.asyncio
    async def test_failure_raises_upstream_error(self):
        with pytest.raises(UpstreamFetchError):
            await connector.fetch_expenditure_events(FakeSession(fail=True), "user_1", START, END)


class TestBodyProfile:
    @pytest.mark.asyncio
    async def test_missing(self):
        assert await connector.fetch_body_profile(FakeSession(), "user_1") is None

    @pytest.mark.asyncio
    async def test_profile_and_goal(self):
        session = FakeSession({"body_profiles": [make_profile_row()]})
        profile, goal = await connector.fetch_body_profile(session, "user_1")
        assert profile.sex == Sex.male
        assert profile.activity_level == ActivityLevel.moderately_active
        assert goal.kind == GoalKind.lose_weight

    @pytest.mark.asyncio
    async def test_stored_values_are_normalised(self):
        row = make_profile_row(sex="Other", activity_level="Couch", goal_kind="Bulk")
        profile, goal = await connector.fetch_body_profile(FakeSession({"body_profiles": [row]}), "user_1")
        assert profile.sex == Sex.female
        assert profile.activity_level == ActivityLevel.sedentary
        assert goal.kind == GoalKind.maintain

    @pytest.mark.asyncio
    async def test_no_goal(self):
        row = make_profile_row(goal_kind=None)
        _, goal = await connector.fetch_body_profile(FakeSession({"body_profiles": [row]}), "user_1")
        assert goal is None


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("postgres://u:p@db:5432/vitals", "postgresql+asyncpg://u:p@db:5432/vitals"),
            ("postgresql://u:p@db:5432/vitals", "postgresql+asyncpg://u:p@db:5432/vitals"),
            ("postgresql+asyncpg://db/vitals", "postgresql+asyncpg://db/vitals"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_database_url(raw) == expected
