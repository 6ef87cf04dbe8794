"""Daily target resolution from goals and profile data."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.nutrients import NUTRIENT_FIELDS, NutrientProfile
from calorie_tracker.domain.summaries import UserTargetProfile

PROTEIN_G_PER_KG = 1.6
CARB_CALORIE_SHARE = 0.45
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_CARB = 4
KCAL_PER_G_FAT = 9

DEFAULT_TARGETS = NutrientProfile(
    calories=2000,
    protein=150,
    carbs=250,
    fat=67,
    fiber=25,
    sugar=50,
    sodium=2300,
)

TargetRule = Callable[[UserTargetProfile], float | None]


class TargetRepository(Protocol):
    """Read access to the fields used for target resolution."""

    def fetch_user_targets(self, user_id: UUID) -> UserTargetProfile:
        """Return target-related profile fields for a user."""


def _goal(name: str) -> TargetRule:
    def rule(profile: UserTargetProfile) -> float | None:
        return getattr(profile.goals, name)

    return rule


def _profile_calories(profile: UserTargetProfile) -> float | None:
    return profile.target_calories or None


def _protein_from_weight(profile: UserTargetProfile) -> float | None:
    if not profile.weight_kg:
        return None
    return profile.weight_kg * PROTEIN_G_PER_KG


def _carbs_from_calories(profile: UserTargetProfile) -> float | None:
    if not profile.target_calories:
        return None
    return profile.target_calories * CARB_CALORIE_SHARE / KCAL_PER_G_CARB


def _fat_from_calories(profile: UserTargetProfile) -> float | None:
    if not profile.target_calories:
        return None
    return profile.target_calories * FAT_CALORIE_SHARE / KCAL_PER_G_FAT


TARGET_RULES: dict[str, tuple[TargetRule, ...]] = {
    "calories": (_goal("calories"), _profile_calories),
    "protein": (_goal("protein"), _protein_from_weight),
    "carbs": (_goal("carbs"), _carbs_from_calories),
    "fat": (_goal("fat"), _fat_from_calories),
    "fiber": (_goal("fiber"),),
    "sugar": (_goal("sugar"),),
    "sodium": (_goal("sodium"),),
}


def resolve_targets(profile: UserTargetProfile) -> NutrientProfile:
    """Resolve each target from the first rule with an opinion."""
    values: dict[str, float] = {}
    for name in NUTRIENT_FIELDS:
        values[name] = _first_opinion(TARGET_RULES[name], profile, name)
    return NutrientProfile(**values)


def _first_opinion(
    rules: tuple[TargetRule, ...], profile: UserTargetProfile, name: str
) -> float:
    for rule in rules:
        value = rule(profile)
        if value is not None:
            return float(value)
    return float(getattr(DEFAULT_TARGETS, name))


@dataclass
class TargetService:
    """Service that loads a user's profile and resolves targets."""

    repository: TargetRepository

    def get_targets(self, user_id: UUID) -> NutrientProfile:
        """Return resolved daily targets for a user."""
        return resolve_targets(self.repository.fetch_user_targets(user_id))
