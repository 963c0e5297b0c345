"""Nutrition domain models."""

from dataclasses import dataclass

NUTRIENT_FIELDS: tuple[str, ...] = ("calories", "protein", "carbs", "fat")


@dataclass(frozen=True)
class Nutrition:
    """Macronutrient snapshot for a food or ingredient."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @classmethod
    def zero(cls) -> "Nutrition":
        """Return an all-zero nutrition record."""
        return cls(0.0, 0.0, 0.0, 0.0)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in NUTRIENT_FIELDS}
