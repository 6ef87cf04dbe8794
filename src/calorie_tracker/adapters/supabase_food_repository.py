"""Supabase repository for custom and catalog foods."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.adapters.supabase_errors import execute
from calorie_tracker.domain.foods import CatalogNutrient, CustomFood
from calorie_tracker.domain.nutrients import NutrientProfile
from calorie_tracker.services.nutrition import FoodSourceRepository


@dataclass
class SupabaseFoodRepository(FoodSourceRepository):
    """Supabase implementation for food sources."""

    client: Client

    def fetch_custom_food(self, food_id: UUID, user_id: UUID) -> CustomFood | None:
        """Return a custom food owned by the user."""
        response = execute(
            self.client.table("user_custom_foods")
            .select("*")
            .eq("id", str(food_id))
            .eq("user_id", str(user_id))
            .limit(1),
            action="fetch_custom_food",
        )
        if not response.data:
            return None
        return _parse_custom_food(response.data[0])

    def fetch_catalog_nutrients(self, food_id: int) -> list[CatalogNutrient] | None:
        """Return nutrient rows for a catalog food."""
        food_response = execute(
            self.client.table("foods").select("id").eq("id", food_id).limit(1),
            action="fetch_catalog_food",
        )
        if not food_response.data:
            return None
        response = execute(
            self.client.table("food_nutrients")
            .select("amount, nutrients(name)")
            .eq("food_id", food_id),
            action="fetch_catalog_nutrients",
        )
        return [_parse_nutrient(row) for row in response.data or []]


def _parse_custom_food(row: dict[str, object]) -> CustomFood:
    per_serving = NutrientProfile.from_mapping(
        {
            "calories": row.get("calories_per_serving"),
            "protein": row.get("protein_per_serving"),
            "carbs": row.get("carbs_per_serving"),
            "fat": row.get("fat_per_serving"),
            "fiber": row.get("fiber_per_serving"),
            "sugar": row.get("sugar_per_serving"),
            "sodium": row.get("sodium_per_serving"),
        }
    )
    return CustomFood(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        serving_size=float(row.get("serving_size") or 1.0),
        serving_unit=str(row.get("serving_unit", "")),
        per_serving=per_serving,
    )


def _parse_nutrient(row: dict[str, object]) -> CatalogNutrient:
    nutrient = row.get("nutrients") or {}
    name = nutrient.get("name", "") if isinstance(nutrient, dict) else ""
    amount = row.get("amount")
    return CatalogNutrient(
        name=str(name),
        amount=float(amount) if amount is not None else 0.0,
    )
