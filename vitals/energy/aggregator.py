"""Energy balance aggregator.

Buckets meal logs and completed workouts into daily/weekly/monthly periods
and sums consumed, burned and net calories per bucket. One bucketing routine
serves all three periods, so boundary handling is identical across them.
An empty range is a valid answer: every bucket comes back zeroed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.ext.asyncio import AsyncSession

from vitals.energy import connector
from vitals.energy.errors import InputValidationError
from vitals.energy.expenditure import backfill_burned, needs_estimate
from vitals.energy.metabolism import compute_target, round_half_up
from vitals.energy.models import (
    AggregationBucket,
    BalanceSummary,
    ConsumptionEvent,
    EnergyBalanceReport,
    ExpenditureEvent,
    Period,
    WorkoutStatus,
)
from vitals.energy.tables import DEFAULT_MET_TABLE, MetTable, PeriodLayout, get_period_layout

logger = logging.getLogger(__name__)

_ONE_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True, slots=True)
class BucketWindow:
    label: str
    start_date: date
    end_exclusive: date
    start_utc: datetime
    end_utc: datetime  # inclusive

    @property
    def days(self) -> int:
        return (self.end_exclusive - self.start_date).days

    def contains(self, ts: datetime) -> bool:
        return self.start_utc <= ts <= self.end_utc


def resolve_tz(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InputValidationError(f"Unknown timezone: {tz_name}") from None


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _local_midnight_utc(d: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(d, time.min, tzinfo=tz).astimezone(timezone.utc)


def _shift_month(year: int, month: int, delta: int) -> date:
    index = year * 12 + (month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def _resolve_layout(period: Period | str) -> tuple[str, PeriodLayout]:
    name = getattr(period, "value", period)
    layout = get_period_layout(name) if isinstance(name, str) else None
    if layout is None:
        raise InputValidationError(f"Unknown period: {period}")
    return name, layout


def require_user(user_id: str | None) -> str:
    if user_id is None or not str(user_id).strip():
        raise InputValidationError("user_id is required")
    return str(user_id)


def _label(period: str, index: int, start: date) -> str:
    if period == "daily":
        return start.strftime("%a")
    if period == "weekly":
        return f"Week {index + 1}"
    return start.strftime("%b %Y")


def bucket_windows(period: Period | str, now: datetime, tz_name: str = "UTC") -> list[BucketWindow]:
    """Calendar windows for a period, oldest first; the last one contains `now`.

    Fixed-length layouts end on today's local date. Calendar-month layouts
    end with the current month.
    """
    name, layout = _resolve_layout(period)
    tz = resolve_tz(tz_name)
    today = as_utc(now).astimezone(tz).date()

    spans: list[tuple[date, date]] = []
    for back in range(layout.bucket_count - 1, -1, -1):
        if layout.calendar_month:
            start = _shift_month(today.year, today.month, -back)
            end_exclusive = _shift_month(start.year, start.month, 1)
        else:
            end_exclusive = today + timedelta(days=1 - back * layout.bucket_days)
            start = end_exclusive - timedelta(days=layout.bucket_days)
        spans.append((start, end_exclusive))

    return [
        BucketWindow(
            label=_label(name, i, start),
            start_date=start,
            end_exclusive=end_exclusive,
            start_utc=_local_midnight_utc(start, tz),
            end_utc=_local_midnight_utc(end_exclusive, tz) - _ONE_MICROSECOND,
        )
        for i, (start, end_exclusive) in enumerate(spans)
    ]


def _completed(events: list[ExpenditureEvent]) -> list[ExpenditureEvent]:
    return [e for e in events if e.status == WorkoutStatus.completed]


def aggregate(
    user_id: str,
    period: Period | str,
    now: datetime,
    consumption: list[ConsumptionEvent],
    expenditure: list[ExpenditureEvent],
    tz_name: str = "UTC",
) -> tuple[list[AggregationBucket], BalanceSummary]:
    """Sum consumed/burned calories per bucket plus a whole-range summary.

    Missing calories count as zero. Only completed workouts count. Weekly
    and monthly buckets also carry rounded per-day averages.
    """
    require_user(user_id)
    _, layout = _resolve_layout(period)
    windows = bucket_windows(period, now, tz_name)
    workouts = _completed(expenditure)

    buckets: list[AggregationBucket] = []
    for window in windows:
        meals = [e for e in consumption if window.contains(as_utc(e.timestamp_utc))]
        done = [e for e in workouts if window.contains(as_utc(e.timestamp_utc))]
        consumed = sum(e.calories or 0.0 for e in meals)
        burned = sum(e.calories_burned or 0.0 for e in done)

        avg_daily = None
        avg_daily_burned = None
        if layout.report_daily_average:
            avg_daily = round_half_up(consumed / window.days)
            avg_daily_burned = round_half_up(burned / window.days)

        buckets.append(
            AggregationBucket(
                period_label=window.label,
                start_utc=window.start_utc,
                end_utc=window.end_utc,
                days=window.days,
                consumed=consumed,
                burned=burned,
                net=consumed - burned,
                consumption_event_count=len(meals),
                expenditure_event_count=len(done),
                avg_daily=avg_daily,
                avg_daily_burned=avg_daily_burned,
            )
        )

    range_start = windows[0].start_utc
    range_end = windows[-1].end_utc
    in_range_meals = [e for e in consumption if range_start <= as_utc(e.timestamp_utc) <= range_end]
    in_range_workouts = [e for e in workouts if range_start <= as_utc(e.timestamp_utc) <= range_end]
    total_consumed = sum(e.calories or 0.0 for e in in_range_meals)
    total_burned = sum(e.calories_burned or 0.0 for e in in_range_workouts)

    summary = BalanceSummary(
        total_consumed=total_consumed,
        total_burned=total_burned,
        net=total_consumed - total_burned,
        consumption_event_count=len(in_range_meals),
        expenditure_event_count=len(in_range_workouts),
    )
    return buckets, summary


async def build_energy_balance(
    session: AsyncSession,
    user_id: str,
    period: Period | str,
    now: datetime | None = None,
    tz_name: str = "UTC",
    met_table: MetTable = DEFAULT_MET_TABLE,
) -> EnergyBalanceReport:
    """Fetch, backfill and aggregate one user's energy balance for a period."""
    user_id = require_user(user_id)
    name, _ = _resolve_layout(period)
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    windows = bucket_windows(name, now, tz_name)
    range_start, range_end = windows[0].start_utc, windows[-1].end_utc

    stored = await connector.fetch_body_profile(session, user_id)
    meals = await connector.fetch_consumption_events(session, user_id, range_start, range_end)
    workouts = await connector.fetch_expenditure_events(session, user_id, range_start, range_end)

    warnings: list[str] = []
    target = None
    if stored is not None:
        profile, goal = stored
        workouts = backfill_burned(workouts, profile.mass_kg, met_table)
        target = compute_target(profile, goal)
    else:
        missing = sum(1 for w in workouts if needs_estimate(w))
        if missing:
            warnings.append(
                f"{missing} workout(s) without logged calories were not estimated: no body profile."
            )

    if not meals and not workouts:
        warnings.append("No data found in the requested range.")

    buckets, summary = aggregate(user_id, name, now, meals, workouts, tz_name)
    logger.debug(
        "energy balance user=%s period=%s meals=%d workouts=%d",
        user_id, name, len(meals), len(workouts),
    )

    return EnergyBalanceReport(
        user_id=user_id,
        period=name,
        timezone=tz_name,
        buckets=buckets,
        summary=summary,
        target=target,
        warnings=warnings,
    )
