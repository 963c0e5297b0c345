"""Tests for the Supabase meal repository."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from meal_composer.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_composer.domain.analysis import MealAnalysis
from meal_composer.errors import PersistenceError
from meal_composer.services.meal_types import MealType
from tests.conftest import turkey_sandwich_payload


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    insert_responses: list[list[dict[str, object]]] = field(default_factory=list)
    last_payload: object | None = None

    def queue(self, data: list[dict[str, object]]) -> None:
        self.insert_responses.append(data)

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_payload = payload
        return self

    def execute(self) -> FakeResponse:
        data = self.insert_responses.pop(0) if self.insert_responses else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


LOGGED_AT = datetime(2024, 5, 14, 12, 30, tzinfo=UTC)


def _record() -> MealAnalysis:
    payload = turkey_sandwich_payload()
    payload["foods"].append(  # type: ignore[attr-defined]
        {
            "name": "Potato Chips",
            "quantity": "1.5 bags",
            "nutrition": {"calories": 225, "protein": 3, "carbs": 23, "fat": 15},
        }
    )
    return MealAnalysis.model_validate(payload)


def test_save_meal_inserts_one_row_per_food() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_entries")
    table.queue([{"id": str(uuid4())}, {"id": str(uuid4())}])
    user_id = uuid4()

    meal_group_id = SupabaseMealRepository(client).save_meal(
        user_id=user_id,
        record=_record(),
        meal_type=MealType.LUNCH,
        logged_at=LOGGED_AT,
    )

    assert isinstance(meal_group_id, UUID)
    rows = table.last_payload
    assert isinstance(rows, list)
    assert [row["food_name"] for row in rows] == ["Turkey Sandwich", "Potato Chips"]
    assert {row["meal_group_id"] for row in rows} == {str(meal_group_id)}
    assert rows[0]["user_id"] == str(user_id)
    assert rows[0]["meal_type"] == "lunch"
    assert rows[0]["logged_at"] == LOGGED_AT.isoformat()
    assert rows[0]["notes"] == "Lunch at the desk"
    assert (rows[1]["quantity"], rows[1]["unit"]) == (1.5, "bags")
    assert rows[1]["calories"] == 225


def test_save_meal_keeps_hierarchy_in_correction_history() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_entries")
    table.queue([{"id": str(uuid4())}, {"id": str(uuid4())}])

    SupabaseMealRepository(client).save_meal(
        user_id=uuid4(),
        record=_record(),
        meal_type=MealType.LUNCH,
        logged_at=LOGGED_AT,
    )

    rows = table.last_payload
    assert isinstance(rows, list)
    history = rows[0]["correction_history"]
    assert history[0]["role"] == "assistant"
    stored = json.loads(history[0]["content"])
    assert stored["foods"][0]["ingredients"][0]["name"] == "Whole Wheat Bread"
    assert "totalNutrition" in stored


def test_save_meal_raises_when_insert_returns_nothing() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(PersistenceError):
        SupabaseMealRepository(client).save_meal(
            user_id=uuid4(),
            record=_record(),
            meal_type=MealType.SNACK,
            logged_at=LOGGED_AT,
        )


def test_save_meal_rejects_empty_record() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(PersistenceError):
        SupabaseMealRepository(client).save_meal(
            user_id=uuid4(),
            record=MealAnalysis(),
            meal_type=MealType.SNACK,
            logged_at=LOGGED_AT,
        )

    assert "meal_entries" not in client.tables
