"""Static reference tables (configuration only).

Multipliers, floors, goal deltas, macro split, MET values and period
layouts live here and nowhere else. Everything is immutable; the MET
table is passed into the estimator rather than read as module state.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


# ---------------------------------------------------------------------------
# Metabolism
# ---------------------------------------------------------------------------

ACTIVITY_MULTIPLIERS: MappingProxyType[str, float] = MappingProxyType({
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "extremely_active": 1.9,
})
DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS["sedentary"]

# Floors apply on the sex designation only, not on the actual BMR.
CALORIE_FLOORS: MappingProxyType[str, int] = MappingProxyType({
    "male": 1500,
    "female": 1200,
})
DEFAULT_CALORIE_FLOOR = CALORIE_FLOORS["female"]

GOAL_ADJUSTMENTS: MappingProxyType[str, float] = MappingProxyType({
    "lose_weight": -500.0,
    "gain_muscle": 300.0,
    "maintain": 0.0,
})


@dataclass(frozen=True, slots=True)
class MacroSplit:
    protein_pct: float
    fat_pct: float
    carbs_pct: float
    protein_kcal_per_g: float = 4.0
    fat_kcal_per_g: float = 9.0
    carbs_kcal_per_g: float = 4.0


DEFAULT_MACRO_SPLIT = MacroSplit(protein_pct=0.25, fat_pct=0.30, carbs_pct=0.45)


def activity_multiplier(level: str | None) -> float:
    if level is None:
        return DEFAULT_ACTIVITY_MULTIPLIER
    return ACTIVITY_MULTIPLIERS.get(level, DEFAULT_ACTIVITY_MULTIPLIER)


def calorie_floor(sex: str | None) -> int:
    if sex is None:
        return DEFAULT_CALORIE_FLOOR
    return CALORIE_FLOORS.get(sex, DEFAULT_CALORIE_FLOOR)


# ---------------------------------------------------------------------------
# MET classification
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MetRule:
    keywords: tuple[str, ...]
    met_value: float
    label: str = ""


@dataclass(frozen=True, slots=True)
class MetTable:
    """Ordered keyword rules. The first rule whose keyword appears in the
    exercise name wins, so rule order changes results for names like
    "running yoga class".
    """

    rules: tuple[MetRule, ...]
    strength_met: float = 5.0
    default_met: float = 4.0

    def classify(self, name: str | None, category: str | None = None) -> float:
        lowered = (name or "").lower()
        for rule in self.rules:
            for keyword in rule.keywords:
                if keyword in lowered:
                    return rule.met_value
        if category and category.lower() == "strength":
            return self.strength_met
        return self.default_met


DEFAULT_MET_TABLE = MetTable(
    rules=(
        MetRule(keywords=("run",), met_value=11.0, label="running"),
        MetRule(keywords=("cycle", "bike"), met_value=8.0, label="cycling"),
        MetRule(keywords=("swim",), met_value=10.0, label="swimming"),
        MetRule(keywords=("walk",), met_value=3.5, label="walking"),
        MetRule(keywords=("yoga",), met_value=2.5, label="yoga"),
    ),
    strength_met=5.0,
    default_met=4.0,
)


# ---------------------------------------------------------------------------
# Aggregation periods
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PeriodLayout:
    bucket_count: int
    bucket_days: int | None = None  # None -> calendar month buckets
    report_daily_average: bool = False

    @property
    def calendar_month(self) -> bool:
        return self.bucket_days is None


PERIOD_LAYOUTS: MappingProxyType[str, PeriodLayout] = MappingProxyType({
    "daily": PeriodLayout(bucket_count=7, bucket_days=1),
    "weekly": PeriodLayout(bucket_count=4, bucket_days=7, report_daily_average=True),
    "monthly": PeriodLayout(bucket_count=6, bucket_days=None, report_daily_average=True),
})


def get_period_layout(period: str) -> PeriodLayout | None:
    return PERIOD_LAYOUTS.get(period)
