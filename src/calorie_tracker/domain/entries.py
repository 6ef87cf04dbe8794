"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from uuid import UUID

from calorie_tracker.domain.nutrients import NutrientProfile


class MealType(str, Enum):
    """Meal slot an entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class LogEntryRequest:
    """Caller input for logging a new entry."""

    amount: float
    unit: str
    meal_type: MealType
    log_date: date
    food_id: int | None = None
    custom_food_id: UUID | None = None
    custom_food_name: str | None = None
    log_time: time | None = None
    nutrients: NutrientProfile | None = None


@dataclass(frozen=True)
class EntryDraft:
    """Resolved entry ready to be persisted."""

    user_id: UUID
    food_id: int | None
    custom_food_id: UUID | None
    custom_food_name: str | None
    amount: float
    unit: str
    meal_type: MealType
    log_date: date
    log_time: time | None
    nutrients: NutrientProfile


@dataclass(frozen=True)
class LoggedEntry:
    """Entry row as stored."""

    id: UUID
    user_id: UUID
    food_id: int | None
    custom_food_id: UUID | None
    custom_food_name: str | None
    amount: float
    unit: str
    meal_type: MealType
    log_date: date
    log_time: time | None
    nutrients: NutrientProfile


@dataclass(frozen=True)
class EntryUpdate:
    """Partial update of an entry's mutable fields.

    A ``None`` field is left unchanged. ``clear_log_time`` removes a stored
    time. ``nutrients`` is filled in by the entry service when ``amount``
    changes; callers never set it directly.
    """

    amount: float | None = None
    unit: str | None = None
    meal_type: MealType | None = None
    log_time: time | None = None
    nutrients: NutrientProfile | None = None
    clear_log_time: bool = False

    def is_empty(self) -> bool:
        """Return True when no field would change."""
        return (
            self.amount is None
            and self.unit is None
            and self.meal_type is None
            and self.log_time is None
            and not self.clear_log_time
        )
