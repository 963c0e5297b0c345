"""Supabase repository for composed meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID, uuid4

from supabase import Client

from meal_composer.domain.analysis import AnalyzedFood, MealAnalysis
from meal_composer.errors import PersistenceError
from meal_composer.services.meal_types import MealType
from meal_composer.services.quantity import parse_quantity
from meal_composer.services.sessions import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Stores each top-level food as a meal entry sharing one meal group id."""

    client: Client

    def save_meal(
        self,
        user_id: UUID,
        record: MealAnalysis,
        meal_type: MealType,
        logged_at: datetime,
    ) -> UUID:
        """Insert meal entry rows and return their meal group id."""
        meal_group_id = uuid4()
        history = [
            {"role": "assistant", "content": record.model_dump_json(by_alias=True)}
        ]
        payload = [
            _entry_row(
                food,
                user_id=user_id,
                meal_group_id=meal_group_id,
                meal_type=meal_type,
                logged_at=logged_at,
                notes=record.notes,
                history=history,
            )
            for food in record.foods
        ]
        if not payload:
            raise PersistenceError("Cannot save a meal without foods")
        response = self.client.table("meal_entries").insert(payload).execute()
        if not response.data:
            raise PersistenceError("Failed to create meal entries")
        return meal_group_id


def _entry_row(  # noqa: PLR0913
    food: AnalyzedFood,
    *,
    user_id: UUID,
    meal_group_id: UUID,
    meal_type: MealType,
    logged_at: datetime,
    notes: str | None,
    history: list[dict[str, str]],
) -> dict[str, object]:
    amount, unit = parse_quantity(food.quantity)
    return {
        "user_id": str(user_id),
        "meal_group_id": str(meal_group_id),
        "meal_type": str(meal_type),
        "food_name": food.name,
        "quantity": amount,
        "unit": unit,
        "calories": food.nutrition.calories,
        "protein": food.nutrition.protein,
        "carbs": food.nutrition.carbs,
        "fat": food.nutrition.fat,
        "notes": notes,
        "logged_at": logged_at.isoformat(),
        "correction_history": history,
    }
