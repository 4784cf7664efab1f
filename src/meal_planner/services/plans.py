"""In-memory store of meal plans keyed by day offset."""

from collections.abc import Iterable
from dataclasses import dataclass

from meal_planner.domain.meals import Meal, MealType


@dataclass
class DayPlanStore:
    """Owns the meal plan of every requested day.

    Offset 0 is today, 1 is tomorrow and so on. Every write bumps the
    offset's revision so callers can tell whether a plan changed under them.
    """

    _plans: dict[int, tuple[Meal, ...]]
    _revisions: dict[int, int]

    def __init__(self) -> None:
        self._plans = {}
        self._revisions = {}

    def get_plan(self, offset: int) -> tuple[Meal, ...] | None:
        """Return the plan stored for the offset, if any."""
        return self._plans.get(_checked(offset))

    def has_plan(self, offset: int) -> bool:
        """Return whether a plan is stored for the offset."""
        return _checked(offset) in self._plans

    def offsets(self) -> list[int]:
        """Return stored offsets in ascending order."""
        return sorted(self._plans)

    def revision(self, offset: int) -> int:
        """Return how many times the offset's plan has been written."""
        return self._revisions.get(_checked(offset), 0)

    def set_plan(self, offset: int, meals: Iterable[Meal]) -> None:
        """Replace the whole plan for the offset, keeping the given order."""
        self._write(_checked(offset), tuple(meals))

    def replace_meals_by_type(self, offset: int, updated: Iterable[Meal]) -> bool:
        """Swap in updated meals by slot type, keeping the stored order.

        Meals whose type has no counterpart in ``updated`` stay untouched.
        Returns False when the offset has no plan.
        """
        current = self._plans.get(_checked(offset))
        if current is None:
            return False
        by_type: dict[MealType, Meal] = {}
        for meal in updated:
            by_type.setdefault(meal.type, meal)
        self._write(offset, tuple(by_type.get(meal.type, meal) for meal in current))
        return True

    def _write(self, offset: int, meals: tuple[Meal, ...]) -> None:
        self._plans[offset] = meals
        self._revisions[offset] = self._revisions.get(offset, 0) + 1


def _checked(offset: int) -> int:
    if offset < 0:
        raise ValueError(f"day offset must be non-negative, got {offset}")
    return offset
