"""Tests for MET classification and workout calorie estimation."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from vitals.energy.expenditure import backfill_burned, estimate_calories, met_for_event
from vitals.energy.models import ExpenditureEvent
from vitals.energy.tables import DEFAULT_MET_TABLE, MetRule, MetTable


def _workout(**overrides) -> ExpenditureEvent:
    defaults = dict(
        user_id="user_1",
        timestamp_utc=datetime(2026, 2, 15, 7, 0, tzinfo=timezone.utc),
        status="completed",
        duration_minutes=30.0,
        calories_burned=None,
        workout_name="Morning run",
        workout_type="cardio",
    )
    defaults.update(overrides)
    return ExpenditureEvent(**defaults)


class TestEstimateCalories:
    def test_example(self):
        assert estimate_calories(8.0, 70.0, 30.0) == 280

    def test_zero_duration(self):
        assert estimate_calories(11.0, 80.0, 0.0) == 0

    @pytest.mark.parametrize("met,mass,minutes", [(3.5, 62.0, 17.0), (11.0, 91.3, 43.0), (2.5, 55.0, 25.0)])
    def test_doubling_duration_doubles_within_rounding(self, met, mass, minutes):
        single = estimate_calories(met, mass, minutes)
        double = estimate_calories(met, mass, 2 * minutes)
        assert abs(double - 2 * single) <= 1


class TestMetClassification:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Morning Run", 11.0),
            ("Stationary bike", 8.0),
            ("Indoor cycle class", 8.0),
            ("Swim laps", 10.0),
            ("Power walk", 3.5),
            ("Vinyasa Yoga", 2.5),
        ],
    )
    def test_keywords(self, name, expected):
        assert DEFAULT_MET_TABLE.classify(name) == expected

    def test_first_keyword_wins(self):
        assert DEFAULT_MET_TABLE.classify("running yoga class") == 11.0
        assert DEFAULT_MET_TABLE.classify("walk then swim") == 10.0

    def test_strength_category(self):
        assert DEFAULT_MET_TABLE.classify("Bench press", "Strength") == 5.0

    def test_keyword_beats_strength_category(self):
        assert DEFAULT_MET_TABLE.classify("Sled run", "strength") == 11.0

    def test_unclassified(self):
        assert DEFAULT_MET_TABLE.classify("Bench press") == 4.0
        assert DEFAULT_MET_TABLE.classify(None) == 4.0

    def test_injected_table(self):
        table = MetTable(rules=(MetRule(keywords=("yoga",), met_value=3.0),), default_met=1.0)
        assert table.classify("running yoga class") == 3.0
        assert table.classify("running") == 1.0

    def test_table_is_immutable(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_MET_TABLE.default_met = 9.9  # type: ignore[misc]

    def test_event_prefers_met_category(self):
        event = _workout(met_category="swim", workout_name="Morning run")
        assert met_for_event(event) == 10.0


class TestBackfill:
    def test_fills_missing_calories(self):
        [event] = backfill_burned([_workout()], mass_kg=70.0)
        assert event.calories_burned == 385.0  # 11.0 * 70 * 0.5

    def test_does_not_overwrite_logged_value(self):
        [event] = backfill_burned([_workout(calories_burned=120.0)], mass_kg=70.0)
        assert event.calories_burned == 120.0

    def test_skips_non_completed(self):
        [event] = backfill_burned([_workout(status="planned")], mass_kg=70.0)
        assert event.calories_burned is None

    def test_skips_zero_duration(self):
        [event] = backfill_burned([_workout(duration_minutes=0.0)], mass_kg=70.0)
        assert event.calories_burned is None

    def test_input_not_mutated(self):
        original = _workout()
        backfill_burned([original], mass_kg=70.0)
        assert original.calories_burned is None

    def test_uses_injected_table(self):
        table = MetTable(rules=(), default_met=6.0)
        [event] = backfill_burned([_workout()], mass_kg=60.0, met_table=table)
        assert event.calories_burned == 180.0
