"""Domain models for derived summaries."""

from dataclasses import dataclass, field
from datetime import date

from calorie_tracker.domain.entries import LoggedEntry
from calorie_tracker.domain.nutrients import NutrientProfile


@dataclass(frozen=True)
class NutrientGoals:
    """Explicit per-nutrient goals from user preferences."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None


@dataclass(frozen=True)
class UserTargetProfile:
    """Profile fields used to resolve daily targets."""

    weight_kg: float | None = None
    target_calories: float | None = None
    goals: NutrientGoals = field(default_factory=NutrientGoals)


@dataclass(frozen=True)
class DailyTotals:
    """Summed nutrients for one day."""

    day: date
    nutrients: NutrientProfile
    food_count: int


@dataclass(frozen=True)
class DailySummary:
    """Daily totals measured against targets."""

    day: date
    total: NutrientProfile
    targets: NutrientProfile
    percentages: dict[str, int]
    remaining: NutrientProfile
    total_foods: int
    meals: dict[str, list[LoggedEntry]] | None = None
    from_cache: bool = False


@dataclass(frozen=True)
class WeeklySummary:
    """Totals and averages for a Monday-aligned week."""

    week_start: date
    week_end: date
    days: list[DailyTotals]
    total: NutrientProfile
    total_foods: int
    average: NutrientProfile
    from_cache: bool = False


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check."""

    allowed: bool
    count: int
    limit: int
    reset_seconds: int
