"""Meal type assignment from the time of logging."""

from datetime import UTC, datetime
from enum import StrEnum
from zoneinfo import ZoneInfo


class MealType(StrEnum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


def auto_meal_type(moment: datetime) -> MealType:
    """Pick the meal type for a local time of day."""
    hour = moment.hour
    if 5 <= hour < 11:
        return MealType.BREAKFAST
    if 11 <= hour < 15:
        return MealType.LUNCH
    if 17 <= hour < 21:
        return MealType.DINNER
    return MealType.SNACK


def local_time(moment: datetime, timezone_name: str | None = None) -> datetime:
    """Express a moment in the named zone, or keep its own offset when none is given.

    Naive moments are taken as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    if timezone_name is None:
        return moment
    return moment.astimezone(ZoneInfo(timezone_name))
