"""Domain models for saved meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from meal_composer.domain.analysis import MealAnalysis


@dataclass(frozen=True)
class SavedMeal:
    """Result of handing a composed meal to persistence."""

    meal_group_id: UUID
    meal_type: str
    logged_at: datetime
    record: MealAnalysis
