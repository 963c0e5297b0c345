"""Turn analyzed food lists into composite/standalone food groups."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from meal_composer.domain.analysis import AnalyzedFood, AnalyzedIngredient
from meal_composer.domain.composition import FoodGroup, Ingredient
from meal_composer.services.aggregator import scale, sum_nutrition

logger = logging.getLogger(__name__)

COMPOSITE_KEYWORDS: tuple[str, ...] = (
    "sandwich",
    "salad",
    "bowl",
    "wrap",
    "burger",
    "pizza",
    "taco",
    "burrito",
)
INGREDIENT_KEYWORDS: tuple[str, ...] = (
    "bread",
    "bun",
    "lettuce",
    "tomato",
    "cheese",
    "mayo",
    "mayonnaise",
    "mustard",
    "ketchup",
    "onion",
    "chicken",
    "turkey",
    "beef",
    "ham",
    "bacon",
    "avocado",
    "dressing",
    "sauce",
    "tortilla",
)
PICKLE_KEYWORD = "pickle"


@dataclass(frozen=True)
class CompositeOpener:
    """Entry starts a new composite food."""


@dataclass(frozen=True)
class IngredientOf:
    """Entry belongs to the currently open composite."""

    open_id: str


@dataclass(frozen=True)
class Standalone:
    """Entry becomes its own food group."""


Classification = CompositeOpener | IngredientOf | Standalone


def classify_entry(name: str, index: int, open_id: str | None) -> Classification:
    """Classify one flat entry given its input position and the open composite."""
    lowered = name.lower()
    if _mentions_any(lowered, COMPOSITE_KEYWORDS):
        return CompositeOpener()
    if PICKLE_KEYWORD in lowered:
        # Pickles only count as an ingredient in the very first position.
        is_candidate = index == 0
    else:
        is_candidate = _mentions_any(lowered, INGREDIENT_KEYWORDS)
    if is_candidate and open_id is not None:
        return IngredientOf(open_id)
    return Standalone()


def classify(foods: Sequence[AnalyzedFood]) -> list[FoodGroup]:
    """Build the food group hierarchy for an analyzed food list."""
    if any(food.ingredients for food in foods):
        logger.debug("Classifying %d foods from supplied hierarchy", len(foods))
        return [_group_from_hierarchy(food, index) for index, food in enumerate(foods)]
    logger.debug("Classifying %d flat foods by keyword", len(foods))
    return _group_flat(foods)


def _group_from_hierarchy(food: AnalyzedFood, index: int) -> FoodGroup:
    ingredients = tuple(
        _to_ingredient(entry, f"ingredient_{index}_{position}")
        for position, entry in enumerate(food.ingredients)
    )
    base = food.nutrition.to_nutrition()
    multiplier = 1.0
    if ingredients and not food.is_branded:
        base = sum_nutrition(ingredient.nutrition for ingredient in ingredients)
        # Supplied nutrition of a derived parent is already scaled; keep its step.
        multiplier = food.serving_multiplier
    return FoodGroup(
        id=f"food_{index}",
        name=food.name,
        base_nutrition=base,
        nutrition=scale(base, multiplier),
        original_quantity=food.quantity,
        is_branded=food.is_branded,
        serving_multiplier=multiplier,
        ingredients=ingredients,
    )


@dataclass
class _OpenComposite:
    id: str
    food: AnalyzedFood
    ingredients: list[Ingredient] = field(default_factory=list)

    def attach(self, entry: AnalyzedFood) -> None:
        suffix = self.id.removeprefix("food_")
        ingredient_id = f"ingredient_{suffix}_{len(self.ingredients)}"
        self.ingredients.append(_to_ingredient(entry, ingredient_id))

    def commit(self) -> FoodGroup:
        base = self.food.nutrition.to_nutrition()
        if self.ingredients and not self.food.is_branded:
            base = sum_nutrition(item.nutrition for item in self.ingredients)
        return FoodGroup(
            id=self.id,
            name=self.food.name,
            base_nutrition=base,
            nutrition=scale(base, 1.0),
            original_quantity=self.food.quantity,
            is_branded=self.food.is_branded,
            ingredients=tuple(self.ingredients),
        )


def _group_flat(foods: Sequence[AnalyzedFood]) -> list[FoodGroup]:
    composites: list[FoodGroup] = []
    standalone: list[FoodGroup] = []
    current: _OpenComposite | None = None

    for index, food in enumerate(foods):
        decision = classify_entry(
            food.name, index, current.id if current is not None else None
        )
        if isinstance(decision, CompositeOpener):
            if current is not None:
                composites.append(current.commit())
            current = _OpenComposite(id=f"food_{index}", food=food)
        elif isinstance(decision, IngredientOf) and current is not None:
            current.attach(food)
        else:
            standalone.append(
                _standalone_group(food, f"food_standalone_{len(standalone)}")
            )

    if current is not None:
        composites.append(current.commit())
    return composites + standalone


def _standalone_group(food: AnalyzedFood, group_id: str) -> FoodGroup:
    base = food.nutrition.to_nutrition()
    return FoodGroup(
        id=group_id,
        name=food.name,
        base_nutrition=base,
        nutrition=scale(base, 1.0),
        original_quantity=food.quantity,
        is_branded=food.is_branded,
    )


def _to_ingredient(entry: AnalyzedIngredient, ingredient_id: str) -> Ingredient:
    return Ingredient(
        id=ingredient_id,
        name=entry.name,
        quantity=entry.quantity,
        nutrition=entry.nutrition.to_nutrition(),
    )


def _mentions_any(lowered_name: str, keywords: Sequence[str]) -> bool:
    return any(keyword in lowered_name for keyword in keywords)
