"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import date, time
from uuid import uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.domain.entries import EntryDraft, EntryUpdate, MealType
from calorie_tracker.domain.errors import NotFound, UpstreamUnavailable
from calorie_tracker.domain.foods import CatalogNutrient
from calorie_tracker.domain.nutrients import NutrientProfile


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _entry_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "food_id": None,
        "custom_food_id": None,
        "custom_food_name": "Oatmeal",
        "amount": 2,
        "unit": "cup",
        "meal_type": "breakfast",
        "log_date": "2024-03-04",
        "log_time": "08:30:00",
        "calories": 300,
        "protein": "10.5",
        "carbs": None,
    }
    row.update(overrides)
    return row


def test_supabase_entry_repository_insert() -> None:
    client = FakeSupabaseClient()
    logs_table = client.table("user_food_logs")
    logs_table.queue("insert", [_entry_row()])
    user_id = uuid4()

    repository = SupabaseEntryRepository(client)
    entry = repository.insert_entry(
        EntryDraft(
            user_id=user_id,
            food_id=None,
            custom_food_id=None,
            custom_food_name="Oatmeal",
            amount=2,
            unit="cup",
            meal_type=MealType.BREAKFAST,
            log_date=date(2024, 3, 4),
            log_time=time(8, 30),
            nutrients=NutrientProfile(calories=300, protein=10.5),
        )
    )

    assert isinstance(logs_table.last_payload, dict)
    assert logs_table.last_payload["user_id"] == str(user_id)
    assert logs_table.last_payload["log_date"] == "2024-03-04"
    assert logs_table.last_payload["meal_type"] == "breakfast"
    assert logs_table.last_payload["calories"] == 300
    assert entry.meal_type is MealType.BREAKFAST
    assert entry.log_time == time(8, 30)
    assert entry.nutrients.protein == 10.5
    assert entry.nutrients.carbs == 0


def test_supabase_entry_repository_fetch_range() -> None:
    client = FakeSupabaseClient()
    logs_table = client.table("user_food_logs")
    logs_table.queue(
        "select",
        [_entry_row(log_time=None), _entry_row(log_date="2024-03-05")],
    )
    user_id = uuid4()

    entries = SupabaseEntryRepository(client).fetch_entries(
        user_id, date(2024, 3, 4), date(2024, 3, 10)
    )

    assert [entry.log_date for entry in entries] == [
        date(2024, 3, 4),
        date(2024, 3, 5),
    ]
    assert entries[0].log_time is None
    assert ("eq", "user_id", str(user_id)) in logs_table.last_filters
    assert ("gte", "log_date", "2024-03-04") in logs_table.last_filters
    assert ("lte", "log_date", "2024-03-10") in logs_table.last_filters


def test_supabase_entry_repository_update_payload() -> None:
    client = FakeSupabaseClient()
    logs_table = client.table("user_food_logs")
    logs_table.queue("update", [_entry_row(amount=3, calories=450)])

    entry = SupabaseEntryRepository(client).update_entry(
        uuid4(),
        uuid4(),
        EntryUpdate(amount=3, nutrients=NutrientProfile(calories=450)),
    )

    assert isinstance(logs_table.last_payload, dict)
    assert logs_table.last_payload["amount"] == 3
    assert logs_table.last_payload["calories"] == 450
    assert "unit" not in logs_table.last_payload
    assert entry.nutrients.calories == 450


def test_supabase_entry_repository_missing_rows() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseEntryRepository(client)

    assert repository.get_entry(uuid4(), uuid4()) is None
    with pytest.raises(NotFound):
        repository.update_entry(uuid4(), uuid4(), EntryUpdate(unit="g"))
    with pytest.raises(NotFound):
        repository.delete_entry(uuid4(), uuid4())


def test_supabase_entry_repository_delete_returns_date() -> None:
    client = FakeSupabaseClient()
    client.table("user_food_logs").queue("delete", [_entry_row(log_date="2024-03-06")])

    log_date = SupabaseEntryRepository(client).delete_entry(uuid4(), uuid4())

    assert log_date == date(2024, 3, 6)


def test_supabase_food_repository_custom_food() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    food_id = uuid4()
    client.table("user_custom_foods").queue(
        "select",
        [
            {
                "id": str(food_id),
                "user_id": str(user_id),
                "name": "Protein bar",
                "serving_size": 60,
                "serving_unit": "g",
                "calories_per_serving": 220,
                "protein_per_serving": 20,
                "sodium_per_serving": None,
            }
        ],
    )

    food = SupabaseFoodRepository(client).fetch_custom_food(food_id, user_id)

    assert food is not None
    assert food.id == food_id
    assert food.per_serving == NutrientProfile(calories=220, protein=20)


def test_supabase_food_repository_catalog_nutrients() -> None:
    client = FakeSupabaseClient()
    client.table("foods").queue("select", [{"id": 42}])
    client.table("food_nutrients").queue(
        "select",
        [
            {"amount": 165, "nutrients": {"name": "Energy (kcal)"}},
            {"amount": None, "nutrients": {"name": "Protein"}},
            {"amount": 3, "nutrients": None},
        ],
    )

    rows = SupabaseFoodRepository(client).fetch_catalog_nutrients(42)

    assert rows == [
        CatalogNutrient("Energy (kcal)", 165),
        CatalogNutrient("Protein", 0.0),
        CatalogNutrient("", 3),
    ]


def test_supabase_food_repository_missing_catalog_food() -> None:
    client = FakeSupabaseClient()

    assert SupabaseFoodRepository(client).fetch_catalog_nutrients(42) is None
    assert "food_nutrients" not in client.tables


def test_supabase_profile_repository_reads_goals() -> None:
    client = FakeSupabaseClient()
    client.table("users").queue("select", [{"weight": "72.5", "target_calories": 2100}])
    client.table("user_preferences").queue(
        "select", [{"calorie_goal": 1900, "protein_goal": None, "sugar_goal": 0}]
    )

    profile = SupabaseProfileRepository(client).fetch_user_targets(uuid4())

    assert profile.weight_kg == 72.5
    assert profile.target_calories == 2100
    assert profile.goals.calories == 1900
    assert profile.goals.protein is None
    assert profile.goals.sugar == 0


def test_supabase_profile_repository_without_preferences() -> None:
    client = FakeSupabaseClient()
    client.table("users").queue("select", [{"weight": None, "target_calories": None}])

    profile = SupabaseProfileRepository(client).fetch_user_targets(uuid4())

    assert profile.weight_kg is None
    assert profile.goals.calories is None


def test_supabase_profile_repository_missing_user() -> None:
    with pytest.raises(NotFound):
        SupabaseProfileRepository(FakeSupabaseClient()).fetch_user_targets(uuid4())


@pytest.mark.parametrize(
    "error",
    [
        APIError({"message": "connection refused", "code": "500"}),
        httpx.ConnectError("connection refused"),
    ],
)
def test_supabase_failures_surface_as_upstream_unavailable(error: Exception) -> None:
    client = FakeSupabaseClient()
    client.table("user_food_logs").error = error

    with pytest.raises(UpstreamUnavailable):
        SupabaseEntryRepository(client).fetch_entries(
            uuid4(), date(2024, 3, 4), date(2024, 3, 4)
        )


def test_supabase_entry_repository_clears_log_time() -> None:
    client = FakeSupabaseClient()
    logs_table = client.table("user_food_logs")
    logs_table.queue("update", [_entry_row(log_time=None)])

    entry = SupabaseEntryRepository(client).update_entry(
        uuid4(), uuid4(), EntryUpdate(clear_log_time=True)
    )

    assert logs_table.last_payload == {"log_time": None}
    assert entry.log_time is None
