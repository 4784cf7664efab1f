"""Time-of-day meal slot classification.

Two boundary tables are in use and they intentionally differ: food logged from
a photo replaces the slot picked by the logging table, while the dashboard's
"next meal" card follows the display table.
"""

from collections.abc import Iterable
from datetime import datetime

from meal_planner.domain.meals import Meal, MealType

_LOGGING_BOUNDARIES: tuple[tuple[int, MealType], ...] = (
    (11, MealType.BREAKFAST),
    (15, MealType.LUNCH),
    (21, MealType.DINNER),
)
_LOGGING_FALLBACK = MealType.SNACK

_DISPLAY_BOUNDARIES: tuple[tuple[int, MealType], ...] = (
    (10, MealType.BREAKFAST),
    (14, MealType.LUNCH),
    (17, MealType.SNACK),
)
_DISPLAY_FALLBACK = MealType.DINNER


def classify_slot_for_logging(at: datetime | int) -> MealType:
    """Return the slot a logged food replaces at the given time."""
    return _classify(_hour_of(at), _LOGGING_BOUNDARIES, _LOGGING_FALLBACK)


def classify_slot_for_display(at: datetime | int) -> MealType:
    """Return the slot shown as the upcoming meal at the given time."""
    return _classify(_hour_of(at), _DISPLAY_BOUNDARIES, _DISPLAY_FALLBACK)


def next_meal(meals: Iterable[Meal], at: datetime | int) -> Meal | None:
    """Return the meal scheduled for the display slot, if the plan has one."""
    slot = classify_slot_for_display(at)
    for meal in meals:
        if meal.type == slot:
            return meal
    return None


def _classify(
    hour: int, boundaries: tuple[tuple[int, MealType], ...], fallback: MealType
) -> MealType:
    for upper, slot in boundaries:
        if hour < upper:
            return slot
    return fallback


def _hour_of(at: datetime | int) -> int:
    if isinstance(at, datetime):
        return at.hour
    if not 0 <= at <= 23:  # noqa: PLR2004
        raise ValueError(f"hour out of range: {at}")
    return at
