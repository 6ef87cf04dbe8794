"""Pydantic models for API request bodies."""

from datetime import time
from uuid import UUID

from pydantic import BaseModel, FiniteFloat

from calorie_tracker.domain.entries import EntryUpdate, LogEntryRequest, MealType
from calorie_tracker.domain.nutrients import NUTRIENT_FIELDS, NutrientProfile
from calorie_tracker.services.entries import parse_log_date


class LogEntryBody(BaseModel):
    """Body of a log entry request."""

    food_id: int | None = None
    custom_food_id: UUID | None = None
    custom_food_name: str | None = None
    amount: FiniteFloat
    unit: str
    meal_type: MealType
    log_date: str
    log_time: time | None = None
    calories: FiniteFloat | None = None
    protein: FiniteFloat | None = None
    carbs: FiniteFloat | None = None
    fat: FiniteFloat | None = None
    fiber: FiniteFloat | None = None
    sugar: FiniteFloat | None = None
    sodium: FiniteFloat | None = None

    def to_request(self) -> LogEntryRequest:
        """Convert to the service request, parsing the log date."""
        explicit = {
            name: getattr(self, name)
            for name in NUTRIENT_FIELDS
            if getattr(self, name) is not None
        }
        return LogEntryRequest(
            amount=self.amount,
            unit=self.unit,
            meal_type=self.meal_type,
            log_date=parse_log_date(self.log_date),
            food_id=self.food_id,
            custom_food_id=self.custom_food_id,
            custom_food_name=self.custom_food_name,
            log_time=self.log_time,
            nutrients=NutrientProfile.from_mapping(explicit) if explicit else None,
        )


class UpdateEntryBody(BaseModel):
    """Body of an entry update request.

    An explicit ``"log_time": null`` clears the stored time.
    """

    amount: FiniteFloat | None = None
    unit: str | None = None
    meal_type: MealType | None = None
    log_time: time | None = None

    def to_update(self) -> EntryUpdate:
        """Convert to the enumerated partial update."""
        return EntryUpdate(
            amount=self.amount,
            unit=self.unit,
            meal_type=self.meal_type,
            log_time=self.log_time,
            clear_log_time=(
                "log_time" in self.model_fields_set and self.log_time is None
            ),
        )
