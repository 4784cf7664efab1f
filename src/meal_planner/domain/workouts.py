"""Workout log domain model."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class WorkoutLog:
    """One finished exercise set."""

    id: UUID
    exercise_name: str
    duration_seconds: int
    calories_burned: float
    logged_at: datetime
