"""Conversion between food groups and flat analysis records."""

from collections.abc import Sequence

from meal_composer.domain.analysis import (
    AnalyzedFood,
    AnalyzedIngredient,
    AnalyzedNutrition,
    MealAnalysis,
)
from meal_composer.domain.composition import FoodGroup
from meal_composer.services.aggregator import sum_nutrition
from meal_composer.services.classifier import classify

DEFAULT_CONFIDENCE = 0.95


def to_record(
    groups: Sequence[FoodGroup],
    original: MealAnalysis | None = None,
    default_confidence: float = DEFAULT_CONFIDENCE,
) -> MealAnalysis:
    """Flatten groups into an analysis record with their current nutrition.

    Quantities are always the original upstream text, never the scaled display
    text. Metadata (confidence, notes, title) is carried over from ``original``.
    """
    foods = [_to_food(group, default_confidence) for group in groups]
    total = sum_nutrition(food.nutrition.to_nutrition() for food in foods)
    return MealAnalysis(
        foods=foods,
        total_nutrition=AnalyzedNutrition.from_nutrition(total),
        confidence=original.confidence if original else default_confidence,
        notes=original.notes if original else None,
        title=original.title if original else None,
    )


def from_record(analysis: MealAnalysis) -> list[FoodGroup]:
    """Rebuild food groups from an analysis record."""
    return classify(analysis.foods)


def apply_grouping(analysis: MealAnalysis) -> MealAnalysis:
    """Give a flat analysis a composite/ingredient hierarchy where one is detected."""
    if analysis.has_hierarchy:
        return analysis
    return to_record(from_record(analysis), original=analysis)


def _record_multiplier(group: FoodGroup) -> float:
    # Only a derived parent is rebuilt from its ingredients on re-ingest.
    if group.is_parent and not group.is_branded:
        return group.serving_multiplier
    return 1.0


def _to_food(group: FoodGroup, confidence: float) -> AnalyzedFood:
    ingredients = [
        AnalyzedIngredient(
            name=ingredient.name,
            quantity=ingredient.quantity,
            nutrition=AnalyzedNutrition.from_nutrition(ingredient.nutrition),
        )
        for ingredient in group.ingredients
    ]
    return AnalyzedFood(
        name=group.name,
        quantity=group.original_quantity,
        nutrition=AnalyzedNutrition.from_nutrition(group.nutrition),
        is_branded=group.is_branded,
        serving_multiplier=_record_multiplier(group),
        ingredients=ingredients,
        confidence=confidence,
    )
