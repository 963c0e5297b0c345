"""Nutrition arithmetic shared by the classifier, store and serializer."""

import math
from collections.abc import Iterable

from meal_composer.domain.composition import FoodGroup
from meal_composer.domain.nutrition import Nutrition


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def scale(base: Nutrition, multiplier: float) -> Nutrition:
    """Scale each nutrient by the multiplier, rounding each field on its own."""
    return Nutrition(
        calories=round_half_up(base.calories * multiplier),
        protein=round_half_up(base.protein * multiplier),
        carbs=round_half_up(base.carbs * multiplier),
        fat=round_half_up(base.fat * multiplier),
    )


def sum_nutrition(items: Iterable[Nutrition]) -> Nutrition:
    """Component-wise sum of nutrition records."""
    total = Nutrition.zero()
    for item in items:
        total = Nutrition(
            calories=total.calories + item.calories,
            protein=total.protein + item.protein,
            carbs=total.carbs + item.carbs,
            fat=total.fat + item.fat,
        )
    return total


def subtract_clamped(a: Nutrition, b: Nutrition) -> Nutrition:
    """Component-wise ``a - b`` floored at zero."""
    return Nutrition(
        calories=max(0.0, a.calories - b.calories),
        protein=max(0.0, a.protein - b.protein),
        carbs=max(0.0, a.carbs - b.carbs),
        fat=max(0.0, a.fat - b.fat),
    )


def session_total(groups: Iterable[FoodGroup]) -> Nutrition:
    """Total of the scaled nutrition of every top-level group."""
    return sum_nutrition(group.nutrition for group in groups)
