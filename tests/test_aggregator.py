"""Tests for nutrition arithmetic."""

from meal_composer.domain.composition import FoodGroup
from meal_composer.domain.nutrition import Nutrition
from meal_composer.services.aggregator import (
    round_half_up,
    scale,
    session_total,
    subtract_clamped,
    sum_nutrition,
)


def test_round_half_up_rounds_halves_up() -> None:
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(0.0) == 0


def test_scale_rounds_each_field_independently() -> None:
    base = Nutrition(calories=230, protein=25.3, carbs=26, fat=3)

    scaled = scale(base, 1.5)

    assert scaled == Nutrition(calories=345, protein=38, carbs=39, fat=5)


def test_scale_at_one_rounds_fractional_base() -> None:
    assert scale(Nutrition(239, 25.8, 26, 3), 1.0) == Nutrition(239, 26, 26, 3)


def test_sum_nutrition_is_component_wise() -> None:
    total = sum_nutrition(
        [Nutrition(140, 6, 24, 2), Nutrition(90, 19, 0, 1), Nutrition(4, 0.5, 1, 0)]
    )

    assert total.calories == 234
    assert total.protein == 25.5
    assert total.carbs == 25
    assert total.fat == 3


def test_sum_nutrition_of_nothing_is_zero() -> None:
    assert sum_nutrition([]) == Nutrition.zero()


def test_subtract_clamped_floors_at_zero() -> None:
    result = subtract_clamped(Nutrition(100, 5, 10, 1), Nutrition(90, 19, 0, 1))

    assert result == Nutrition(10, 0, 10, 0)


def test_session_total_uses_scaled_nutrition() -> None:
    groups = [
        FoodGroup(
            id="food_0",
            name="Soup",
            base_nutrition=Nutrition(100, 4, 10, 2),
            nutrition=Nutrition(200, 8, 20, 4),
            serving_multiplier=2.0,
        ),
        FoodGroup(
            id="food_1",
            name="Apple",
            base_nutrition=Nutrition(95, 0, 25, 0),
            nutrition=Nutrition(95, 0, 25, 0),
        ),
    ]

    assert session_total(groups) == Nutrition(295, 8, 45, 4)
