"""Models for analysis records exchanged with the analysis and persistence layers."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from meal_composer.domain.composition import DEFAULT_QUANTITY, snap_serving_multiplier
from meal_composer.domain.nutrition import NUTRIENT_FIELDS, Nutrition

UNKNOWN_ITEM_NAME = "Unknown Item"


class AnalyzedNutrition(BaseModel):
    """Nutrition values reported for a food or ingredient."""

    model_config = ConfigDict(extra="ignore")

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @field_validator(*NUTRIENT_FIELDS, mode="before")
    @classmethod
    def _coerce_amount(cls, value: object) -> float:
        return _to_amount(value)

    def to_nutrition(self) -> Nutrition:
        """Convert to the domain nutrition record."""
        return Nutrition(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )

    @classmethod
    def from_nutrition(cls, nutrition: Nutrition) -> "AnalyzedNutrition":
        return cls(**nutrition.as_dict())


class AnalyzedIngredient(BaseModel):
    """Ingredient entry nested under an analyzed food."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = UNKNOWN_ITEM_NAME
    quantity: str = DEFAULT_QUANTITY
    nutrition: AnalyzedNutrition = Field(default_factory=AnalyzedNutrition)

    @model_validator(mode="before")
    @classmethod
    def _normalize_entry(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        normalized = dict(data)
        if not normalized.get("name"):
            normalized["name"] = UNKNOWN_ITEM_NAME
        normalized["quantity"] = _quantity_text(
            normalized.get("quantity"), normalized.get("unit")
        )
        normalized["nutrition"] = _merge_flat_macros(normalized)
        return normalized


class AnalyzedFood(AnalyzedIngredient):
    """Top-level food entry produced by an analysis provider."""

    is_branded: bool = Field(default=False, alias="isBranded")
    # Servings the ingredient list stands for when nutrition is derived from it.
    # Nutrition on the record is always final; other foods carry 1.
    serving_multiplier: float = Field(default=1.0, alias="servingMultiplier")
    ingredients: list[AnalyzedIngredient] = Field(default_factory=list)
    confidence: float | None = None

    @field_validator("is_branded", mode="before")
    @classmethod
    def _coerce_branded(cls, value: object) -> bool:
        return bool(value)

    @field_validator("serving_multiplier", mode="before")
    @classmethod
    def _coerce_multiplier(cls, value: object) -> float:
        snapped = snap_serving_multiplier(_to_amount(value))
        return 1.0 if snapped is None else snapped

    @field_validator("ingredients", mode="before")
    @classmethod
    def _coerce_ingredients(cls, value: object) -> object:
        return value if isinstance(value, list) else []


class MealAnalysis(BaseModel):
    """Flat analysis record: a list of foods plus the meal total."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    foods: list[AnalyzedFood] = Field(default_factory=list)
    total_nutrition: AnalyzedNutrition = Field(
        default_factory=AnalyzedNutrition, alias="totalNutrition"
    )
    confidence: float = 0.95
    notes: str | None = None
    title: str | None = None

    @field_validator("foods", mode="before")
    @classmethod
    def _coerce_foods(cls, value: object) -> object:
        return value if isinstance(value, list) else []

    @property
    def has_hierarchy(self) -> bool:
        """Return True when any food already carries ingredients."""
        return any(food.ingredients for food in self.foods)


def _merge_flat_macros(entry: dict[str, object]) -> object:
    nested = entry.get("nutrition")
    if isinstance(nested, AnalyzedNutrition):
        return nested
    # Some analyzers put the macros directly on the entry, or only some of them.
    merged = dict(nested) if isinstance(nested, dict) else {}
    for key in NUTRIENT_FIELDS:
        if not merged.get(key) and key in entry:
            merged[key] = entry[key]
    return merged


def _to_amount(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if not isinstance(value, int | float | str):
        return 0.0
    try:
        amount = float(value)
    except (ValueError, OverflowError):
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return max(0.0, amount)


def _quantity_text(quantity: object, unit: object) -> str:
    if isinstance(quantity, bool):
        return DEFAULT_QUANTITY
    if isinstance(quantity, int | float):
        return f"{quantity:g} {unit or 'serving'}"
    if isinstance(quantity, str) and quantity.strip():
        return quantity
    return DEFAULT_QUANTITY
