"""Nutrient resolution for logged entries."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.entries import LogEntryRequest
from calorie_tracker.domain.errors import InvalidSource, NotFound
from calorie_tracker.domain.foods import CatalogNutrient, CustomFood
from calorie_tracker.domain.nutrients import NutrientProfile

CATALOG_NUTRIENT_NAMES = {
    "Energy (kcal)": "calories",
    "Protein": "protein",
    "Carbohydrate, by difference": "carbs",
    "Total lipid (fat)": "fat",
    "Fiber, total dietary": "fiber",
    "Sugars, total": "sugar",
    "Sodium, Na": "sodium",
}

_logger = logging.getLogger(__name__)


class FoodSourceRepository(Protocol):
    """Read access to custom and catalog foods."""

    def fetch_custom_food(self, food_id: UUID, user_id: UUID) -> CustomFood | None:
        """Return a custom food owned by the user, if present."""

    def fetch_catalog_nutrients(self, food_id: int) -> list[CatalogNutrient] | None:
        """Return nutrient rows for a catalog food, or None if it doesn't exist."""


@dataclass
class NutrientResolver:
    """Resolve the nutrient payload of an entry from its declared source."""

    repository: FoodSourceRepository

    def resolve(self, user_id: UUID, request: LogEntryRequest) -> NutrientProfile:
        """Return the nutrients for the request's amount.

        Custom foods win over catalog foods, which win over explicit values.
        """
        if request.custom_food_id is not None:
            return self._resolve_custom(user_id, request.custom_food_id, request.amount)
        if request.food_id is not None:
            return self._resolve_catalog(request.food_id, request.amount)
        if request.custom_food_name:
            return request.nutrients or NutrientProfile()
        raise InvalidSource("A food id, custom food id or food name is required")

    def _resolve_custom(
        self, user_id: UUID, custom_food_id: UUID, amount: float
    ) -> NutrientProfile:
        food = self.repository.fetch_custom_food(custom_food_id, user_id)
        if food is None:
            raise NotFound(f"Custom food {custom_food_id} not found")
        return food.per_serving.scaled(amount)

    def _resolve_catalog(self, food_id: int, amount: float) -> NutrientProfile:
        rows = self.repository.fetch_catalog_nutrients(food_id)
        if rows is None:
            raise NotFound(f"Food {food_id} not found")
        return _extract_nutrients(rows).scaled(amount)


def _extract_nutrients(rows: list[CatalogNutrient]) -> NutrientProfile:
    """Pick the canonical nutrients out of a catalog nutrient list."""
    values: dict[str, float] = {}
    for row in rows:
        field_name = CATALOG_NUTRIENT_NAMES.get(row.name)
        if field_name is None:
            continue
        values[field_name] = row.amount
    missing = set(CATALOG_NUTRIENT_NAMES.values()) - values.keys()
    if missing:
        _logger.debug("Catalog food missing nutrients: %s", sorted(missing))
    return NutrientProfile(**values)
