"""Domain models for food sources."""

from dataclasses import dataclass
from uuid import UUID

from calorie_tracker.domain.nutrients import NutrientProfile


@dataclass(frozen=True)
class CustomFood:
    """User-authored food template with per-serving nutrients."""

    id: UUID
    user_id: UUID
    name: str
    serving_size: float
    serving_unit: str
    per_serving: NutrientProfile


@dataclass(frozen=True)
class CatalogNutrient:
    """One nutrient row of a catalog food, per reference serving."""

    name: str
    amount: float
