"""Request and response models for the composition API."""

from datetime import datetime
from uuid import UUID

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AwareDatetime, BaseModel, field_validator

from meal_composer.domain.actions import CompositionAction
from meal_composer.domain.analysis import AnalyzedNutrition, MealAnalysis
from meal_composer.domain.composition import FoodGroup, Ingredient
from meal_composer.services.composition import CompositionStore
from meal_composer.services.meal_types import MealType
from meal_composer.services.quantity import display_quantity


class IngredientView(BaseModel):
    id: str
    name: str
    quantity: str
    nutrition: AnalyzedNutrition
    is_favorite: bool


class FoodGroupView(BaseModel):
    id: str
    name: str
    is_parent: bool
    is_branded: bool
    base_nutrition: AnalyzedNutrition
    nutrition: AnalyzedNutrition
    serving_multiplier: float
    original_quantity: str
    display_quantity: str
    is_favorite: bool
    expanded: bool
    ingredients: list[IngredientView]


class CompositionView(BaseModel):
    """Current state of an editing session."""

    session_id: UUID
    is_edit_mode: bool
    groups: list[FoodGroupView]
    total: AnalyzedNutrition


class ActionRequest(BaseModel):
    action: CompositionAction


class SaveMealRequest(BaseModel):
    """Save options; the client's clock or zone decides the meal type."""

    user_id: UUID
    meal_type: MealType | None = None
    logged_at: AwareDatetime | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as error:
            raise ValueError(f"Unknown timezone {value}") from error
        return value


class SaveMealResponse(BaseModel):
    meal_group_id: UUID
    meal_type: MealType
    logged_at: datetime
    record: MealAnalysis


def composition_view(session_id: UUID, store: CompositionStore) -> CompositionView:
    """Build the API view of a session's store."""
    return CompositionView(
        session_id=session_id,
        is_edit_mode=store.is_edit_mode,
        groups=[_group_view(group) for group in store.groups],
        total=AnalyzedNutrition.from_nutrition(store.total),
    )


def _group_view(group: FoodGroup) -> FoodGroupView:
    return FoodGroupView(
        id=group.id,
        name=group.name,
        is_parent=group.is_parent,
        is_branded=group.is_branded,
        base_nutrition=AnalyzedNutrition.from_nutrition(group.base_nutrition),
        nutrition=AnalyzedNutrition.from_nutrition(group.nutrition),
        serving_multiplier=group.serving_multiplier,
        original_quantity=group.original_quantity,
        display_quantity=display_quantity(group),
        is_favorite=group.is_favorite,
        expanded=group.expanded,
        ingredients=[_ingredient_view(item) for item in group.ingredients],
    )


def _ingredient_view(ingredient: Ingredient) -> IngredientView:
    return IngredientView(
        id=ingredient.id,
        name=ingredient.name,
        quantity=ingredient.quantity,
        nutrition=AnalyzedNutrition.from_nutrition(ingredient.nutrition),
        is_favorite=ingredient.is_favorite,
    )
