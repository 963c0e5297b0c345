"""Quantity text helpers.

The original quantity text of a food group is stored once and never rewritten.
The multiplier-scaled text shown next to a serving stepper is derived on demand
from it by :func:`scale_quantity_text`.
"""

import re

from meal_composer.domain.composition import FoodGroup

_LEADING_NUMBER = re.compile(r"^(\d+(?:\.\d+)?|\.\d+)\s*(.*)$")


def scale_quantity_text(quantity: str, multiplier: float) -> str:
    """Return the quantity text as displayed at the given serving multiplier."""
    if not quantity:
        return ""
    match = _LEADING_NUMBER.match(quantity.strip())
    if match:
        scaled = float(match.group(1)) * multiplier
        unit = match.group(2).strip()
        return f"{_format_amount(scaled)} {unit}".rstrip()
    if "serving" in quantity.lower():
        suffix = "" if multiplier == 1 else "s"
        return f"{_format_amount(multiplier)} serving{suffix}"
    return quantity


def display_quantity(group: FoodGroup) -> str:
    """Scaled quantity text for a group at its current multiplier."""
    return scale_quantity_text(group.original_quantity, group.serving_multiplier)


def parse_quantity(quantity: str | None) -> tuple[float, str]:
    """Split quantity text such as ``"1.5 cups"`` into amount and unit."""
    if not quantity or not quantity.strip():
        return 1.0, "serving"
    text = quantity.strip()
    if text.lower() in {"serving", "servings"}:
        return 1.0, "serving"
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 1.0, text
    amount = float(match.group(1)) or 1.0
    unit = match.group(2).strip() or "serving"
    if unit == "servings":
        unit = "serving"
    return amount, unit


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}".removesuffix(".0")
