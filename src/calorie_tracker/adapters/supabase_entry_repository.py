"""Supabase repository for logged food entries."""

from dataclasses import dataclass
from datetime import date, time
from uuid import UUID

from supabase import Client

from calorie_tracker.adapters.supabase_errors import execute
from calorie_tracker.domain.entries import EntryDraft, EntryUpdate, LoggedEntry, MealType
from calorie_tracker.domain.errors import NotFound
from calorie_tracker.domain.nutrients import NutrientProfile
from calorie_tracker.services.entries import EntryRepository

_TABLE = "user_food_logs"


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for logged entries."""

    client: Client

    def insert_entry(self, draft: EntryDraft) -> LoggedEntry:
        """Insert an entry row and return it."""
        response = execute(
            self.client.table(_TABLE).insert(
                {
                    "user_id": str(draft.user_id),
                    "food_id": draft.food_id,
                    "custom_food_id": (
                        str(draft.custom_food_id) if draft.custom_food_id else None
                    ),
                    "custom_food_name": draft.custom_food_name,
                    "amount": draft.amount,
                    "unit": draft.unit,
                    "meal_type": draft.meal_type.value,
                    "log_date": draft.log_date.isoformat(),
                    "log_time": draft.log_time.isoformat() if draft.log_time else None,
                    **draft.nutrients.as_dict(),
                }
            ),
            action="insert_entry",
        )
        if not response.data:
            raise RuntimeError("Failed to create food log entry")
        return _parse_entry(response.data[0])

    def get_entry(self, entry_id: UUID, user_id: UUID) -> LoggedEntry | None:
        """Return an entry owned by the user."""
        response = execute(
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .limit(1),
            action="get_entry",
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def update_entry(
        self, entry_id: UUID, user_id: UUID, update: EntryUpdate
    ) -> LoggedEntry:
        """Apply the enumerated update fields to an entry."""
        payload: dict[str, object] = {}
        if update.amount is not None:
            payload["amount"] = update.amount
        if update.unit is not None:
            payload["unit"] = update.unit
        if update.meal_type is not None:
            payload["meal_type"] = update.meal_type.value
        if update.log_time is not None:
            payload["log_time"] = update.log_time.isoformat()
        elif update.clear_log_time:
            payload["log_time"] = None
        if update.nutrients is not None:
            payload.update(update.nutrients.as_dict())
        response = execute(
            self.client.table(_TABLE)
            .update(payload)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id)),
            action="update_entry",
        )
        if not response.data:
            raise NotFound(f"Entry {entry_id} not found")
        return _parse_entry(response.data[0])

    def delete_entry(self, entry_id: UUID, user_id: UUID) -> date:
        """Delete an entry and return its log date."""
        response = execute(
            self.client.table(_TABLE)
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id)),
            action="delete_entry",
        )
        if not response.data:
            raise NotFound(f"Entry {entry_id} not found")
        return date.fromisoformat(str(response.data[0]["log_date"]))

    def fetch_entries(self, user_id: UUID, start: date, end: date) -> list[LoggedEntry]:
        """Return entries in the inclusive date range, oldest first."""
        response = execute(
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .gte("log_date", start.isoformat())
            .lte("log_date", end.isoformat())
            .order("log_date", desc=False)
            .order("log_time", desc=False),
            action="fetch_entries",
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> LoggedEntry:
    food_id = row.get("food_id")
    custom_food_id = row.get("custom_food_id")
    log_time = row.get("log_time")
    return LoggedEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_id=int(food_id) if food_id is not None else None,
        custom_food_id=UUID(str(custom_food_id)) if custom_food_id else None,
        custom_food_name=row.get("custom_food_name"),
        amount=float(row.get("amount", 0.0)),
        unit=str(row.get("unit", "")),
        meal_type=MealType(str(row.get("meal_type") or MealType.SNACK.value)),
        log_date=date.fromisoformat(str(row["log_date"])),
        log_time=time.fromisoformat(str(log_time)) if log_time else None,
        nutrients=NutrientProfile.from_mapping(row),
    )
