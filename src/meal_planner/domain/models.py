"""Domain models for the meal planner."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserProfile:
    """Profile of the user a day plan is built for."""

    name: str
    daily_calories: int
    daily_protein: int
    goal: str = "Maintain"
    location: str = ""
    dietary_restrictions: tuple[str, ...] = ()
    preferred_cuisines: tuple[str, ...] = ()
