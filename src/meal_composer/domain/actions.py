"""Mutations a presentation layer can request on a composition session."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class ToggleExpanded(BaseModel):
    type: Literal["toggle_expanded"] = "toggle_expanded"
    group_id: str


class ToggleEditMode(BaseModel):
    type: Literal["toggle_edit_mode"] = "toggle_edit_mode"


class ChangeServingMultiplier(BaseModel):
    type: Literal["change_serving_multiplier"] = "change_serving_multiplier"
    group_id: str
    delta: float


class DeleteGroup(BaseModel):
    type: Literal["delete_group"] = "delete_group"
    group_id: str


class DeleteIngredient(BaseModel):
    type: Literal["delete_ingredient"] = "delete_ingredient"
    group_id: str
    ingredient_id: str


class ToggleFavorite(BaseModel):
    type: Literal["toggle_favorite"] = "toggle_favorite"
    group_id: str
    ingredient_id: str | None = None


CompositionAction = Annotated[
    ToggleExpanded
    | ToggleEditMode
    | ChangeServingMultiplier
    | DeleteGroup
    | DeleteIngredient
    | ToggleFavorite,
    Field(discriminator="type"),
]
