"""Daily, weekly and trend summaries with cache-aside reads."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from itertools import groupby
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from calorie_tracker.domain.entries import LoggedEntry, MealType
from calorie_tracker.domain.errors import ValidationFailed
from calorie_tracker.domain.nutrients import (
    NUTRIENT_FIELDS,
    NutrientProfile,
    round_half_up,
    sum_profiles,
)
from calorie_tracker.domain.summaries import DailySummary, DailyTotals, WeeklySummary
from calorie_tracker.services.cache import CacheStore
from calorie_tracker.services.targets import TargetService

MIN_TREND_DAYS = 7
MAX_TREND_DAYS = 365
DEFAULT_TREND_DAYS = 30

T = TypeVar("T")

_DAILY_ADAPTER = TypeAdapter(DailySummary)
_WEEKLY_ADAPTER = TypeAdapter(WeeklySummary)

_logger = logging.getLogger(__name__)


class EntryReader(Protocol):
    """Read access to logged entries."""

    def fetch_entries(self, user_id: UUID, start: date, end: date) -> list[LoggedEntry]:
        """Return entries with start <= log_date <= end, ordered by date."""


def daily_cache_key(user_id: UUID, day: date) -> str:
    """Return the cache key of a daily summary."""
    return f"daily_nutrition:{user_id}:{day.isoformat()}"


def weekly_cache_key(user_id: UUID, week_start: date) -> str:
    """Return the cache key of a weekly summary."""
    return f"weekly_summary:{user_id}:{week_start.isoformat()}"


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


@dataclass
class SummaryService:
    """Computes summaries and owns their cache population and invalidation."""

    entries: EntryReader
    targets: TargetService
    cache: CacheStore
    daily_ttl_seconds: int = 300
    weekly_ttl_seconds: int = 3600
    invalidate_weekly_on_write: bool = False

    def get_daily(
        self, user_id: UUID, day: date, include_meals: bool = False
    ) -> DailySummary:
        """Return the daily summary, with a meal breakdown when requested."""
        cache_key = daily_cache_key(user_id, day)
        if not include_meals:
            cached = _decode(_DAILY_ADAPTER, self.cache.get(cache_key))
            if cached is not None:
                _logger.debug("Daily summary cache hit: key=%s", cache_key)
                return replace(cached, from_cache=True)

        targets = self.targets.get_targets(user_id)
        entries = self.entries.fetch_entries(user_id, day, day)
        summary = _build_daily(day, entries, targets)
        self.cache.set(
            cache_key,
            _DAILY_ADAPTER.dump_python(summary, mode="json"),
            ttl_seconds=self.daily_ttl_seconds,
        )
        if include_meals:
            return replace(summary, meals=_group_meals(entries))
        return summary

    def get_weekly(self, user_id: UUID, week_start: date | None = None) -> WeeklySummary:
        """Return totals and averages for the week containing week_start."""
        start = week_start_for(week_start or _today())
        cache_key = weekly_cache_key(user_id, start)
        cached = _decode(_WEEKLY_ADAPTER, self.cache.get(cache_key))
        if cached is not None:
            _logger.debug("Weekly summary cache hit: key=%s", cache_key)
            return replace(cached, from_cache=True)

        end = start + timedelta(days=6)
        days = list(_daily_totals(self.entries.fetch_entries(user_id, start, end)))
        total = sum_profiles(day.nutrients for day in days)
        days_with_data = max(len(days), 1)
        average = NutrientProfile(
            **{
                name: float(round_half_up(getattr(total, name) / days_with_data))
                for name in NUTRIENT_FIELDS
            }
        )
        summary = WeeklySummary(
            week_start=start,
            week_end=end,
            days=days,
            total=total,
            total_foods=sum(day.food_count for day in days),
            average=average,
        )
        self.cache.set(
            cache_key,
            _WEEKLY_ADAPTER.dump_python(summary, mode="json"),
            ttl_seconds=self.weekly_ttl_seconds,
        )
        return summary

    def get_trend(
        self,
        user_id: UUID,
        period_days: int = DEFAULT_TREND_DAYS,
        start: date | None = None,
        end: date | None = None,
    ) -> Iterator[DailyTotals]:
        """Return per-day totals for days with entries, oldest first.

        Dates without entries are skipped. The result is a one-shot iterator.
        """
        if (start is None) != (end is None):
            raise ValidationFailed("start and end must be given together")
        if start is None or end is None:
            if not MIN_TREND_DAYS <= period_days <= MAX_TREND_DAYS:
                raise ValidationFailed(
                    f"period must be between {MIN_TREND_DAYS} and {MAX_TREND_DAYS}"
                )
            end = _today()
            start = end - timedelta(days=period_days)
        if start > end:
            raise ValidationFailed("start must not be after end")
        return _daily_totals(self.entries.fetch_entries(user_id, start, end))

    def invalidate(self, user_id: UUID, day: date) -> None:
        """Drop cached summaries affected by a write on day."""
        keys = [daily_cache_key(user_id, day)]
        if self.invalidate_weekly_on_write:
            keys.append(weekly_cache_key(user_id, week_start_for(day)))
        for key in keys:
            if not self.cache.delete(key):
                _logger.warning("Cache invalidation failed: key=%s", key)


def _build_daily(
    day: date, entries: list[LoggedEntry], targets: NutrientProfile
) -> DailySummary:
    total = sum_profiles(entry.nutrients for entry in entries)
    percentages: dict[str, int] = {}
    remaining: dict[str, float] = {}
    for name in NUTRIENT_FIELDS:
        consumed = getattr(total, name)
        target = getattr(targets, name)
        if target:
            percentages[name] = round_half_up(100 * consumed / target)
        remaining[name] = max(0.0, target - consumed)
    return DailySummary(
        day=day,
        total=total,
        targets=targets,
        percentages=percentages,
        remaining=NutrientProfile(**remaining),
        total_foods=len(entries),
    )


def _daily_totals(entries: Iterable[LoggedEntry]) -> Iterator[DailyTotals]:
    for day, group in groupby(entries, key=lambda entry: entry.log_date):
        day_entries = list(group)
        yield DailyTotals(
            day=day,
            nutrients=sum_profiles(entry.nutrients for entry in day_entries),
            food_count=len(day_entries),
        )


def _group_meals(entries: list[LoggedEntry]) -> dict[str, list[LoggedEntry]]:
    meals: dict[str, list[LoggedEntry]] = {meal.value: [] for meal in MealType}
    ordered = sorted(
        entries, key=lambda entry: (entry.log_time is None, entry.log_time)
    )
    for entry in ordered:
        meals[entry.meal_type.value].append(entry)
    return meals


def _decode(adapter: TypeAdapter[T], payload: object | None) -> T | None:
    if payload is None:
        return None
    try:
        return adapter.validate_python(payload)
    except ValidationError:
        _logger.warning("Discarding malformed cached summary")
        return None


def _today() -> date:
    return datetime.now(tz=UTC).date()
