"""Shared test fixtures."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

import pytest

from meal_planner.config import Settings
from meal_planner.containers import AppContainer
from meal_planner.domain.meals import Meal, MealType
from meal_planner.domain.models import UserProfile
from meal_planner.services.planner import MealPlanner
from meal_planner.services.reconciler import DailyPlanReconciler
from meal_planner.services.structured import StructuredOutputClient
from meal_planner.services.vision import FoodVisionService
from meal_planner.services.workouts import WorkoutJournal

LUNCHTIME = datetime(2024, 5, 14, 12, 30)


def make_meal(meal_type: MealType, calories: float, name: str | None = None) -> Meal:
    return Meal(
        id=f"today-{meal_type.value.lower()}",
        type=meal_type,
        name=name or meal_type.value,
        calories=calories,
        protein=20,
        carbs=30,
        fat=10,
        description=f"Planned {meal_type.value.lower()}",
        ingredients=("rice",),
    )


def make_day_plan() -> list[Meal]:
    return [
        make_meal(MealType.BREAKFAST, 300),
        make_meal(MealType.LUNCH, 500),
        make_meal(MealType.SNACK, 200),
        make_meal(MealType.DINNER, 700),
    ]


@dataclass
class FakeMealPlanner(MealPlanner):
    """Fake planner that records calls and returns canned plans."""

    plans: dict[str, list[Meal]] = field(default_factory=dict)
    default_plan: list[Meal] = field(default_factory=list)
    generate_error: Exception | None = None
    rebalance_error: Exception | None = None
    rebalance_result: list[Meal] | None = None
    release: asyncio.Event | None = None
    generate_calls: list[str] = field(default_factory=list)
    rebalance_calls: list[dict[str, object]] = field(default_factory=list)

    async def generate_full_day_plan(
        self, profile: UserProfile, day_label: str
    ) -> list[Meal]:
        self.generate_calls.append(day_label)
        if self.generate_error:
            raise self.generate_error
        return list(self.plans.get(day_label, self.default_plan))

    async def rebalance_remaining_meals(
        self,
        profile: UserProfile,
        logged_food_name: str,
        logged_calories: float,
        new_remaining_budget: float,
        future_meals: Sequence[Meal],
    ) -> list[Meal]:
        self.rebalance_calls.append(
            {
                "food_name": logged_food_name,
                "calories": logged_calories,
                "remaining": new_remaining_budget,
                "types": [meal.type for meal in future_meals],
            }
        )
        if self.release is not None:
            await self.release.wait()
        if self.rebalance_error:
            raise self.rebalance_error
        if self.rebalance_result is not None:
            return list(self.rebalance_result)
        share = new_remaining_budget / len(future_meals)
        return [
            Meal(
                id=meal.id,
                type=meal.type,
                name=f"Light {meal.name}",
                calories=share,
                protein=meal.protein,
                description="Adjusted portion",
            )
            for meal in future_meals
        ]


@dataclass
class FakeStructuredClient(StructuredOutputClient):
    """Fake structured-output client returning payloads by schema name."""

    payloads: dict[str, object] = field(default_factory=dict)
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object] | None,
        schema_name: str,
        image_data_url: str | None = None,
    ) -> object:
        self.calls.append(
            {
                "schema_name": schema_name,
                "prompt": prompt,
                "image_data_url": image_data_url,
            }
        )
        return self.payloads[schema_name]


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(name="Sam", daily_calories=2000, daily_protein=150)


@pytest.fixture
def planner() -> FakeMealPlanner:
    return FakeMealPlanner()


@pytest.fixture
def reconciler(planner: FakeMealPlanner) -> DailyPlanReconciler:
    reconciler = DailyPlanReconciler(planner=planner, clock=lambda: LUNCHTIME)
    reconciler.set_meals(0, make_day_plan())
    return reconciler


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def structured_client() -> FakeStructuredClient:
    return FakeStructuredClient(
        payloads={
            "food_analysis": {
                "food_name": "Pasta",
                "calories": 650,
                "protein": 20,
                "carbs": 80,
                "fat": 15,
                "reasoning": "Estimated from photo",
            }
        }
    )


@pytest.fixture
def container(
    settings: Settings,
    planner: FakeMealPlanner,
    reconciler: DailyPlanReconciler,
    structured_client: FakeStructuredClient,
) -> AppContainer:
    vision_service = FoodVisionService(
        client=structured_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        vision_service=vision_service,
        planner_service=planner,
        reconciler=reconciler,
        workout_journal=WorkoutJournal(clock=lambda: LUNCHTIME),
        close_resources=close_resources,
    )
