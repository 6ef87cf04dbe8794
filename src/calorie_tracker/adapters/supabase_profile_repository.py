"""Supabase repository for user target profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.adapters.supabase_errors import execute
from calorie_tracker.domain.errors import NotFound
from calorie_tracker.domain.summaries import NutrientGoals, UserTargetProfile
from calorie_tracker.services.targets import TargetRepository

_GOAL_COLUMNS = {
    "calories": "calorie_goal",
    "protein": "protein_goal",
    "carbs": "carb_goal",
    "fat": "fat_goal",
    "fiber": "fiber_goal",
    "sugar": "sugar_goal",
    "sodium": "sodium_goal",
}


@dataclass
class SupabaseProfileRepository(TargetRepository):
    """Supabase implementation reading users and user_preferences."""

    client: Client

    def fetch_user_targets(self, user_id: UUID) -> UserTargetProfile:
        """Return profile and goal fields for a user."""
        user_response = execute(
            self.client.table("users")
            .select("weight, target_calories")
            .eq("id", str(user_id))
            .limit(1),
            action="fetch_user",
        )
        if not user_response.data:
            raise NotFound(f"User {user_id} not found")
        user = user_response.data[0]

        preferences_response = execute(
            self.client.table("user_preferences")
            .select(", ".join(_GOAL_COLUMNS.values()))
            .eq("user_id", str(user_id))
            .limit(1),
            action="fetch_user_preferences",
        )
        preferences = (
            preferences_response.data[0] if preferences_response.data else {}
        )
        goals = NutrientGoals(
            **{
                name: _optional_float(preferences.get(column))
                for name, column in _GOAL_COLUMNS.items()
            }
        )
        return UserTargetProfile(
            weight_kg=_optional_float(user.get("weight")),
            target_calories=_optional_float(user.get("target_calories")),
            goals=goals,
        )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
