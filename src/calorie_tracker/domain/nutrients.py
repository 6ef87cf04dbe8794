"""Nutrient domain models."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

NUTRIENT_FIELDS = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sugar",
    "sodium",
)


@dataclass(frozen=True)
class NutrientProfile:
    """The seven canonical nutrient values tracked per entry."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "NutrientProfile":
        """Build a profile from a mapping, treating missing or null values as 0."""
        return cls(**{name: _to_float(values.get(name)) for name in NUTRIENT_FIELDS})

    def scaled(self, factor: float) -> "NutrientProfile":
        """Return a copy with every field multiplied by factor."""
        return NutrientProfile(
            **{name: getattr(self, name) * factor for name in NUTRIENT_FIELDS}
        )

    def as_dict(self) -> dict[str, float]:
        """Return the profile as a plain field mapping."""
        return {name: getattr(self, name) for name in NUTRIENT_FIELDS}

    def __add__(self, other: "NutrientProfile") -> "NutrientProfile":
        return NutrientProfile(
            **{
                name: getattr(self, name) + getattr(other, name)
                for name in NUTRIENT_FIELDS
            }
        )


def sum_profiles(profiles: Iterable[NutrientProfile]) -> NutrientProfile:
    """Sum profiles in iteration order."""
    total = NutrientProfile()
    for profile in profiles:
        total = total + profile
    return total


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positive values."""
    return math.floor(value + 0.5)


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0
