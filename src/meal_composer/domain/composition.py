"""Domain models for the meal composition hierarchy."""

import math
from dataclasses import dataclass, field

from meal_composer.domain.nutrition import Nutrition

DEFAULT_QUANTITY = "1 serving"
MIN_SERVING_MULTIPLIER = 0.5
MAX_SERVING_MULTIPLIER = 10.0
SERVING_STEP = 0.5


def snap_serving_multiplier(value: float) -> float | None:
    """Return the nearest allowed multiplier, or None when outside [0.5, 10]."""
    if not MIN_SERVING_MULTIPLIER <= value <= MAX_SERVING_MULTIPLIER:
        return None
    return math.floor(value / SERVING_STEP + 0.5) * SERVING_STEP


@dataclass(frozen=True)
class Ingredient:
    """Component of a composite food, expressed at one serving."""

    id: str
    name: str
    quantity: str
    nutrition: Nutrition
    is_favorite: bool = False


@dataclass(frozen=True)
class FoodGroup:
    """Top-level logged food, either standalone or a composite."""

    id: str
    name: str
    base_nutrition: Nutrition
    nutrition: Nutrition
    original_quantity: str = DEFAULT_QUANTITY
    is_branded: bool = False
    serving_multiplier: float = 1.0
    is_favorite: bool = False
    expanded: bool = False
    ingredients: tuple[Ingredient, ...] = ()

    @property
    def is_parent(self) -> bool:
        return bool(self.ingredients)

    def find_ingredient(self, ingredient_id: str) -> Ingredient | None:
        """Return the ingredient with the given id, if present."""
        for ingredient in self.ingredients:
            if ingredient.id == ingredient_id:
                return ingredient
        return None


@dataclass(frozen=True)
class CompositionState:
    """Snapshot of an editing session's food hierarchy."""

    groups: tuple[FoodGroup, ...] = field(default_factory=tuple)
    is_edit_mode: bool = False

    def find_group(self, group_id: str) -> FoodGroup | None:
        """Return the group with the given id, if present."""
        for group in self.groups:
            if group.id == group_id:
                return group
        return None
