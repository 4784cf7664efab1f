"""Calorie budget arithmetic and the daily consumption ledger."""

from dataclasses import dataclass


def remaining_budget(daily_target: float, consumed: float) -> float:
    """Return the signed remaining budget; negative means over budget."""
    return daily_target - consumed


def display_budget(daily_target: float, consumed: float) -> float:
    """Return the remaining budget clamped at zero for display."""
    return max(0, remaining_budget(daily_target, consumed))


@dataclass
class CalorieLedger:
    """Running total of calories consumed today."""

    total: float = 0

    def record(self, calories: float) -> float:
        """Add consumed calories and return the new total."""
        if calories < 0:
            raise ValueError("consumed calories cannot be negative")
        self.total += calories
        return self.total
