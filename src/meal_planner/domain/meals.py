"""Domain models for day meal plans."""

from dataclasses import dataclass
from enum import Enum


class MealType(str, Enum):
    """Canonical meal slot of a day plan."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    SNACK = "Snack"
    DINNER = "Dinner"


MEAL_ORDER: tuple[MealType, ...] = (
    MealType.BREAKFAST,
    MealType.LUNCH,
    MealType.SNACK,
    MealType.DINNER,
)


def meal_order_index(meal_type: MealType) -> int:
    """Return the position of a slot within the day."""
    return MEAL_ORDER.index(meal_type)


@dataclass(frozen=True)
class Meal:
    """Single planned or logged meal occupying one slot of a day plan."""

    id: str
    type: MealType
    name: str
    calories: float
    protein: float
    description: str = ""
    ingredients: tuple[str, ...] = ()
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    prep_time: str | None = None
    difficulty: str | None = None
    emoji: str | None = None
