"""Favorite state transitions for a food group and its ingredients."""

from dataclasses import replace
from enum import StrEnum

from meal_composer.domain.composition import FoodGroup


class FavoritePolicy(StrEnum):
    """How a favorite toggle on an ingredient is applied."""

    CASCADE = "cascade"
    INDEPENDENT = "independent"


def toggle_group_favorite(group: FoodGroup) -> FoodGroup:
    """Flip the whole group and its ingredients to one shared favorite state.

    If the group or any of its ingredients is currently favorited, everything is
    unfavorited; otherwise everything is favorited.
    """
    any_favorited = group.is_favorite or any(
        ingredient.is_favorite for ingredient in group.ingredients
    )
    new_state = not any_favorited
    return replace(
        group,
        is_favorite=new_state,
        ingredients=tuple(
            replace(ingredient, is_favorite=new_state)
            for ingredient in group.ingredients
        ),
    )


def toggle_ingredient_favorite(group: FoodGroup, ingredient_id: str) -> FoodGroup:
    """Flip one ingredient; the group is a favorite only when all ingredients are."""
    if group.find_ingredient(ingredient_id) is None:
        return group
    ingredients = tuple(
        replace(ingredient, is_favorite=not ingredient.is_favorite)
        if ingredient.id == ingredient_id
        else ingredient
        for ingredient in group.ingredients
    )
    return replace(
        group,
        ingredients=ingredients,
        is_favorite=all(ingredient.is_favorite for ingredient in ingredients),
    )


def toggle_favorite(
    group: FoodGroup,
    ingredient_id: str | None = None,
    policy: FavoritePolicy = FavoritePolicy.CASCADE,
) -> FoodGroup:
    """Apply a favorite toggle triggered on a group or one of its ingredients."""
    if ingredient_id is None or policy is FavoritePolicy.CASCADE:
        return toggle_group_favorite(group)
    return toggle_ingredient_favorite(group, ingredient_id)
