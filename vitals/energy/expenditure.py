"""MET-based workout energy expenditure."""

from __future__ import annotations

from vitals.energy.metabolism import round_half_up
from vitals.energy.models import ExpenditureEvent, WorkoutStatus
from vitals.energy.tables import DEFAULT_MET_TABLE, MetTable


def estimate_calories(met_value: float, mass_kg: float, duration_minutes: float) -> int:
    """kcal = MET x kg x hours, rounded to the nearest integer."""
    return round_half_up(met_value * mass_kg * (duration_minutes / 60.0))


def met_for_event(event: ExpenditureEvent, met_table: MetTable = DEFAULT_MET_TABLE) -> float:
    """Classify an event by met_category, falling back to its workout name."""
    name = event.met_category or event.workout_name
    return met_table.classify(name, event.workout_type)


def estimate_event_calories(
    event: ExpenditureEvent,
    mass_kg: float,
    met_table: MetTable = DEFAULT_MET_TABLE,
) -> int:
    return estimate_calories(met_for_event(event, met_table), mass_kg, event.duration_minutes)


def needs_estimate(event: ExpenditureEvent) -> bool:
    return (
        event.status == WorkoutStatus.completed
        and event.calories_burned is None
        and event.duration_minutes > 0
    )


def backfill_burned(
    events: list[ExpenditureEvent],
    mass_kg: float,
    met_table: MetTable = DEFAULT_MET_TABLE,
) -> list[ExpenditureEvent]:
    """Return events with calories_burned estimated where it was never logged.

    Only completed workouts with a positive duration and no logged value are
    touched. Input events are not mutated.
    """
    result: list[ExpenditureEvent] = []
    for event in events:
        if needs_estimate(event):
            calories = estimate_event_calories(event, mass_kg, met_table)
            event = event.model_copy(update={"calories_burned": float(calories)})
        result.append(event)
    return result
