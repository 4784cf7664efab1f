"""Daily plan reconciliation: plan generation and rebalancing after food logs."""

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import partial

from meal_planner.domain.defaults import STARTER_MEALS
from meal_planner.domain.meals import Meal, MealType, meal_order_index
from meal_planner.domain.models import UserProfile
from meal_planner.domain.vision import FoodAnalysis
from meal_planner.services.budget import (
    CalorieLedger,
    display_budget,
    remaining_budget,
)
from meal_planner.services.planner import MealPlanner
from meal_planner.services.plans import DayPlanStore
from meal_planner.services.slots import classify_slot_for_logging, next_meal

TODAY = 0
TOMORROW = 1

_TODAY_LABEL = "Today"
_PREFETCH_LABEL = "Tomorrow (ensure variety)"
_LOGGED_EMOJI = "\N{CAMERA}"

_logger = logging.getLogger(__name__)


class ProfileNotLoadedError(RuntimeError):
    """Raised when an operation needs a profile before setup completes."""


class MealAlreadyEatenError(RuntimeError):
    """Raised when a meal of today's plan is logged as eaten a second time."""


@dataclass(frozen=True)
class PendingRebalance:
    """Second phase of a food log: the upcoming slots still to rewrite.

    ``base_revision`` is the store revision right after the optimistic
    commit; a result is only merged while the plan is still at it.
    """

    offset: int
    meal_types: frozenset[MealType]
    base_revision: int
    food_name: str
    calories: float
    new_remaining: float
    future_meals: tuple[Meal, ...]


@dataclass
class DailyPlanReconciler:
    """Owns the day plans and today's calorie ledger for one user session."""

    planner: MealPlanner
    store: DayPlanStore = field(default_factory=DayPlanStore)
    ledger: CalorieLedger = field(default_factory=CalorieLedger)
    clock: Callable[[], datetime] = datetime.now
    profile: UserProfile | None = None
    day_offset: int = TODAY
    _in_flight: int = field(default=0, init=False, repr=False)
    _eaten: set[str] = field(default_factory=set, init=False, repr=False)
    _background: set[asyncio.Task[None]] = field(
        default_factory=set, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.store.has_plan(TODAY):
            self.store.set_plan(TODAY, STARTER_MEALS)

    @property
    def is_generating(self) -> bool:
        """Whether a generation or rebalance request is in flight."""
        return self._in_flight > 0

    @property
    def consumed_calories(self) -> float:
        """Calories consumed so far today."""
        return self.ledger.total

    def require_profile(self) -> UserProfile:
        """Return the loaded profile or raise if setup has not completed."""
        if self.profile is None:
            raise ProfileNotLoadedError("no user profile loaded")
        return self.profile

    def update_profile(self, profile: UserProfile) -> None:
        """Replace the profile without regenerating any plan."""
        self.profile = profile

    def get_plan(self, offset: int) -> tuple[Meal, ...]:
        """Return the plan for a day offset, empty when none exists yet."""
        return self.store.get_plan(offset) or ()

    def active_meals(self) -> tuple[Meal, ...]:
        """Return the plan of the currently selected day."""
        return self.get_plan(self.day_offset)

    def set_meals(self, offset: int, meals: Iterable[Meal]) -> None:
        """Replace a day's meals with a manually edited plan."""
        self.store.set_plan(offset, meals)

    def next_meal(self, at: datetime | None = None) -> Meal | None:
        """Return the upcoming meal of the selected day."""
        return next_meal(self.active_meals(), at or self.clock())

    def find_meal(self, meal_id: str, offset: int = TODAY) -> Meal | None:
        """Return the meal with the given id from a day's plan."""
        for meal in self.get_plan(offset):
            if meal.id == meal_id:
                return meal
        return None

    def get_remaining_budget(self) -> float:
        """Return today's remaining calories, clamped at zero."""
        profile = self.require_profile()
        return display_budget(profile.daily_calories, self.ledger.total)

    def is_eaten(self, meal_id: str) -> bool:
        """Whether today's meal with this id already counts toward the ledger."""
        return meal_id in self._eaten

    def log_meal_eaten(self, meal: Meal) -> float:
        """Record a planned meal as eaten and return the consumed total."""
        if meal.id in self._eaten:
            raise MealAlreadyEatenError(f"meal {meal.id!r} is already logged")
        total = self.ledger.record(meal.calories)
        self._eaten.add(meal.id)
        return total

    async def on_profile_ready(self, profile: UserProfile) -> None:
        """Generate today's plan, then prefetch tomorrow's in the background."""
        self.profile = profile
        self.day_offset = TODAY
        with self._generating():
            meals = await self._generate(profile, _TODAY_LABEL)
            if meals:
                self.store.set_plan(TODAY, meals)
        self._spawn(self._install_generated(profile, TOMORROW, _PREFETCH_LABEL))

    async def on_day_navigated(self, offset: int) -> None:
        """Select a day and generate its plan when none exists yet."""
        has_plan = self.store.has_plan(offset)
        self.day_offset = offset
        if has_plan or self.profile is None:
            return
        label = "Tomorrow" if offset == TOMORROW else f"Day +{offset}"
        with self._generating():
            await self._install_generated(self.profile, offset, label)

    def on_food_logged(
        self,
        profile: UserProfile,
        analysis: FoodAnalysis,
        *,
        at: datetime | None = None,
    ) -> asyncio.Task[None] | None:
        """Fold a photographed food into today's plan.

        The matching slot is overwritten before this returns. When later slots
        remain, a rebalance of those slots is scheduled on the running loop and
        its task is returned; otherwise None. Scheduling needs a running loop,
        and without one ``RuntimeError`` is raised before anything is written.
        The replaced slot counts as eaten.
        """
        slot = classify_slot_for_logging(at or self.clock())
        updated = tuple(
            _apply_logged_food(meal, analysis) if meal.type == slot else meal
            for meal in self.get_plan(TODAY)
        )
        slot_index = meal_order_index(slot)
        future_meals = tuple(
            meal for meal in updated if meal_order_index(meal.type) > slot_index
        )
        # Resolved before the commit so a missing loop leaves state untouched.
        loop = asyncio.get_running_loop() if future_meals else None

        self.store.set_plan(TODAY, updated)
        new_remaining = remaining_budget(
            profile.daily_calories, self.ledger.total + analysis.calories
        )
        self.ledger.record(analysis.calories)
        self._eaten.update(meal.id for meal in updated if meal.type == slot)

        if loop is None:
            _logger.info(
                "Logged %s as %s; no meals left to rebalance",
                analysis.food_name,
                slot.value,
            )
            return None

        pending = PendingRebalance(
            offset=TODAY,
            meal_types=frozenset(meal.type for meal in future_meals),
            base_revision=self.store.revision(TODAY),
            food_name=analysis.food_name,
            calories=analysis.calories,
            new_remaining=new_remaining,
            future_meals=future_meals,
        )
        return self._spawn(
            self._rebalance(profile, pending), generating=True, loop=loop
        )

    async def wait_for_background(self) -> None:
        """Wait until every spawned prefetch and rebalance has settled."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def _rebalance(self, profile: UserProfile, pending: PendingRebalance) -> None:
        _logger.info(
            "Rebalancing %s future meals for remaining budget %s",
            len(pending.future_meals),
            pending.new_remaining,
        )
        try:
            adjusted = await self.planner.rebalance_remaining_meals(
                profile,
                pending.food_name,
                pending.calories,
                pending.new_remaining,
                list(pending.future_meals),
            )
        except Exception:
            _logger.exception("Rebalance failed; keeping the logged meal")
            return
        if self.store.revision(pending.offset) != pending.base_revision:
            _logger.warning(
                "Discarding stale rebalance for day %s; plan changed meanwhile",
                pending.offset,
            )
            return
        self.store.replace_meals_by_type(
            pending.offset,
            [meal for meal in adjusted if meal.type in pending.meal_types],
        )

    async def _install_generated(
        self, profile: UserProfile, offset: int, label: str
    ) -> None:
        meals = await self._generate(profile, label)
        if meals:
            self.store.set_plan(offset, meals)

    async def _generate(self, profile: UserProfile, label: str) -> list[Meal]:
        try:
            return await self.planner.generate_full_day_plan(profile, label)
        except Exception:
            _logger.exception("Plan generation failed for %s", label)
            return []

    @contextmanager
    def _generating(self) -> Iterator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def _spawn(
        self,
        coro: Coroutine[object, object, None],
        *,
        generating: bool = False,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> asyncio.Task[None]:
        task = (loop or asyncio.get_running_loop()).create_task(coro)
        self._background.add(task)
        if generating:
            self._in_flight += 1
        task.add_done_callback(partial(self._settle, generating=generating))
        return task

    def _settle(self, task: asyncio.Task[None], *, generating: bool) -> None:
        self._background.discard(task)
        if generating:
            self._in_flight -= 1


def _apply_logged_food(meal: Meal, analysis: FoodAnalysis) -> Meal:
    return replace(
        meal,
        name=analysis.food_name,
        calories=analysis.calories,
        protein=analysis.protein,
        carbs=analysis.carbs,
        fat=analysis.fat,
        description=(
            f"Logged via AI Vision: {analysis.reasoning}. "
            f"This meal replaced your scheduled {meal.name}."
        ),
        ingredients=(analysis.food_name,),
        emoji=_LOGGED_EMOJI,
    )
