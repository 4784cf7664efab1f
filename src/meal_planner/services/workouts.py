"""Workout journal: finished exercise sets and the calories they burned."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import uuid4

from meal_planner.domain.workouts import WorkoutLog

DEFAULT_SET_SECONDS = 60
STRENGTH_CALORIES_PER_MINUTE = 8

_logger = logging.getLogger(__name__)


def estimate_burned_calories(duration_seconds: int) -> int:
    """Approximate strength-training burn for a set of the given length."""
    return round(duration_seconds / 60 * STRENGTH_CALORIES_PER_MINUTE)


@dataclass
class WorkoutJournal:
    """In-memory log of exercise sets for one user session."""

    clock: Callable[[], datetime] = datetime.now
    _logs: list[WorkoutLog] = field(default_factory=list, init=False, repr=False)

    def log(
        self,
        exercise_name: str,
        duration_seconds: int = 0,
        calories_burned: float | None = None,
        *,
        at: datetime | None = None,
    ) -> WorkoutLog:
        """Record a finished set; an untimed set counts as one minute."""
        if duration_seconds < 0:
            raise ValueError("duration cannot be negative")
        if calories_burned is not None and calories_burned < 0:
            raise ValueError("burned calories cannot be negative")
        duration = duration_seconds or DEFAULT_SET_SECONDS
        if calories_burned is None:
            calories_burned = estimate_burned_calories(duration)
        entry = WorkoutLog(
            id=uuid4(),
            exercise_name=exercise_name,
            duration_seconds=duration,
            calories_burned=calories_burned,
            logged_at=at or self.clock(),
        )
        self._logs.append(entry)
        _logger.info(
            "Logged %s for %ss (%s kcal)", exercise_name, duration, calories_burned
        )
        return entry

    def logs_for(self, day: date | None = None) -> tuple[WorkoutLog, ...]:
        """Return the sets logged on a day, today by default."""
        target = day or self.clock().date()
        return tuple(log for log in self._logs if log.logged_at.date() == target)

    def burned_calories(self, day: date | None = None) -> float:
        return sum(log.calories_burned for log in self.logs_for(day))

    def active_minutes(self, day: date | None = None) -> int:
        return round(sum(log.duration_seconds for log in self.logs_for(day)) / 60)

    def is_completed(self, exercise_name: str, day: date | None = None) -> bool:
        return any(log.exercise_name == exercise_name for log in self.logs_for(day))
