"""Composition store: the editable food hierarchy of one session."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace

from meal_composer.domain.composition import (
    CompositionState,
    FoodGroup,
    snap_serving_multiplier,
)
from meal_composer.domain.nutrition import Nutrition
from meal_composer.services.aggregator import (
    scale,
    session_total,
    subtract_clamped,
    sum_nutrition,
)
from meal_composer.services.favorites import FavoritePolicy, toggle_favorite

logger = logging.getLogger(__name__)


def set_groups(state: CompositionState, groups: Iterable[FoodGroup]) -> CompositionState:
    """Replace the whole hierarchy."""
    return replace(state, groups=tuple(groups))


def toggle_edit_mode(state: CompositionState) -> CompositionState:
    return replace(state, is_edit_mode=not state.is_edit_mode)


def toggle_expanded(state: CompositionState, group_id: str) -> CompositionState:
    return _update_group(
        state, group_id, lambda group: replace(group, expanded=not group.expanded)
    )


def change_serving_multiplier(
    state: CompositionState, group_id: str, delta: float
) -> CompositionState:
    """Step a group's serving multiplier, ignoring steps that leave [0.5, 10]."""
    return _update_group(state, group_id, lambda group: _step_multiplier(group, delta))


def delete_group(state: CompositionState, group_id: str) -> CompositionState:
    """Remove a group together with its ingredients."""
    if state.find_group(group_id) is None:
        logger.debug("Ignoring delete of unknown group %s", group_id)
        return state
    return replace(
        state, groups=tuple(group for group in state.groups if group.id != group_id)
    )


def delete_ingredient(
    state: CompositionState, group_id: str, ingredient_id: str
) -> CompositionState:
    """Remove an ingredient and take its unscaled nutrition out of the parent."""
    return _update_group(
        state, group_id, lambda group: _without_ingredient(group, ingredient_id)
    )


def apply_favorite_toggle(
    state: CompositionState,
    group_id: str,
    ingredient_id: str | None = None,
    policy: FavoritePolicy = FavoritePolicy.CASCADE,
) -> CompositionState:
    return _update_group(
        state, group_id, lambda group: toggle_favorite(group, ingredient_id, policy)
    )


def _update_group(
    state: CompositionState,
    group_id: str,
    transform: Callable[[FoodGroup], FoodGroup],
) -> CompositionState:
    target = state.find_group(group_id)
    if target is None:
        logger.debug("Ignoring mutation of unknown group %s", group_id)
        return state
    updated = transform(target)
    if updated is target:
        return state
    return replace(
        state,
        groups=tuple(updated if group.id == group_id else group for group in state.groups),
    )


def _step_multiplier(group: FoodGroup, delta: float) -> FoodGroup:
    multiplier = snap_serving_multiplier(group.serving_multiplier + delta)
    if multiplier is None or multiplier == group.serving_multiplier:
        return group
    return replace(
        group,
        serving_multiplier=multiplier,
        nutrition=scale(group.base_nutrition, multiplier),
    )


def _without_ingredient(group: FoodGroup, ingredient_id: str) -> FoodGroup:
    removed = group.find_ingredient(ingredient_id)
    if removed is None:
        logger.debug(
            "Ignoring delete of unknown ingredient %s in %s", ingredient_id, group.id
        )
        return group
    remaining = tuple(item for item in group.ingredients if item.id != ingredient_id)
    if group.is_branded:
        base = subtract_clamped(group.base_nutrition, removed.nutrition)
    else:
        # Equal to subtracting the removed ingredient, without float drift.
        base = sum_nutrition(item.nutrition for item in remaining)
    return replace(
        group,
        ingredients=remaining,
        base_nutrition=base,
        nutrition=scale(base, group.serving_multiplier),
    )


@dataclass
class CompositionStore:
    """Single-writer holder of a session's composition state.

    Every mutation computes the next state with a pure transition and then swaps
    it in together with the recomputed total, so readers only ever see complete
    states.
    """

    favorite_policy: FavoritePolicy = FavoritePolicy.CASCADE
    state: CompositionState = field(default_factory=CompositionState)
    total: Nutrition = field(default_factory=Nutrition.zero)

    def __post_init__(self) -> None:
        self.total = session_total(self.state.groups)

    @property
    def groups(self) -> tuple[FoodGroup, ...]:
        return self.state.groups

    @property
    def is_edit_mode(self) -> bool:
        return self.state.is_edit_mode

    def find_group(self, group_id: str) -> FoodGroup | None:
        return self.state.find_group(group_id)

    def set_groups(self, groups: Iterable[FoodGroup]) -> CompositionState:
        return self._commit(set_groups(self.state, groups))

    def toggle_edit_mode(self) -> CompositionState:
        return self._commit(toggle_edit_mode(self.state))

    def toggle_expanded(self, group_id: str) -> CompositionState:
        return self._commit(toggle_expanded(self.state, group_id))

    def change_serving_multiplier(self, group_id: str, delta: float) -> CompositionState:
        return self._commit(change_serving_multiplier(self.state, group_id, delta))

    def delete_group(self, group_id: str) -> CompositionState:
        return self._commit(delete_group(self.state, group_id))

    def delete_ingredient(self, group_id: str, ingredient_id: str) -> CompositionState:
        return self._commit(delete_ingredient(self.state, group_id, ingredient_id))

    def toggle_favorite(
        self, group_id: str, ingredient_id: str | None = None
    ) -> CompositionState:
        return self._commit(
            apply_favorite_toggle(
                self.state, group_id, ingredient_id, self.favorite_policy
            )
        )

    def _commit(self, state: CompositionState) -> CompositionState:
        self.state, self.total = state, session_total(state.groups)
        return state
